"""Image model - layers of a decoded OpenEXR file."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import numpy as np

from .compression import Compression


@dataclass
class Layer:
    """
    One part of a multi-part OpenEXR image.

    Pixel data lives in `channels` and is never modified by the analysis.
    Only `compression` may be changed, when a recommendation is applied.
    """

    name: str | None
    compression: Compression
    channels: dict[str, np.ndarray] = field(default_factory=dict)
    # Remaining header attributes (data window, line order, ...)
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.name or "(unnamed)"

    def with_compression(self, compression: Compression) -> "Layer":
        """Snapshot of this layer using another compression, sharing pixel data."""
        return replace(
            self,
            compression=compression,
            channels=dict(self.channels),
            attributes=dict(self.attributes),
        )


@dataclass
class ExrImage:
    """A decoded OpenEXR image."""

    layers: list[Layer]
    path: Path | None = None
