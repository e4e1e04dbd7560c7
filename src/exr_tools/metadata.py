"""
Metadata extraction.

Reads the header of every part of an OpenEXR file without decoding
pixel data.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from .codec import Codec


@dataclass
class PartMetadata:
    """Header attributes of one part."""

    index: int
    name: str | None
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        name = f" (`{self.name}`)" if self.name else ""
        return f"Part #{self.index}{name}"


def format_attribute(value: Any) -> str:
    """Render a header attribute value as short text."""
    if isinstance(value, np.ndarray):
        return str(value.tolist())
    if isinstance(value, (list, tuple)):
        return "(" + ", ".join(format_attribute(v) for v in value) + ")"
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def read_metadata(codec: Codec, path: Path) -> list[PartMetadata]:
    """
    Read the metadata of every part of an image.

    Args:
        codec: Codec used to read headers
        path: Image file

    Returns:
        One PartMetadata per part, attributes sorted by name
    """
    headers = codec.read_headers(path)
    return [
        PartMetadata(
            index=index,
            name=header.get("name"),
            attributes={key: header[key] for key in sorted(header)},
        )
        for index, header in enumerate(headers)
    ]
