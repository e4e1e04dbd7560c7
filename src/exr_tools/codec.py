"""
Codec module - OpenEXR decoding and encoding.

The analysis talks to the container format only through the Codec
protocol. OpenExrCodec implements it with the OpenEXR Python bindings;
tests substitute a scripted codec.
"""

import logging
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO, Protocol

from .compression import Compression
from .image import ExrImage, Layer

logger = logging.getLogger(__name__)

# Header attributes owned by the library or by Layer fields
_MANAGED_ATTRIBUTES = ("channels", "chunkCount", "compression", "name", "version")


class ImageLoadError(Exception):
    """Raised when an image cannot be read."""


class EncodingError(Exception):
    """Raised when a layer cannot be encoded with a given compression."""


class Codec(Protocol):
    """Protocol for image container codecs."""

    def load_image(self, path: Path) -> ExrImage:
        """Decode all layers of the image at `path`."""
        ...

    def encode_layer(self, layer: Layer, sink: BinaryIO, clock: Callable[[], float]) -> float:
        """
        Encode `layer` as a single-part image into `sink`, using `layer.compression`.

        Returns:
            Seconds spent encoding, read from `clock`. Moving the encoded
            bytes into `sink` is not part of this span.
        """
        ...

    def write_image(self, image: ExrImage, path: Path) -> None:
        """Write all layers of `image` to `path`."""
        ...

    def read_headers(self, path: Path) -> list[dict[str, Any]]:
        """Read one header dictionary per part without decoding pixels."""
        ...


def _openexr():
    import OpenEXR

    return OpenEXR


class OpenExrCodec:
    """Codec backed by the OpenEXR Python bindings (OpenEXR >= 3.3)."""

    def __init__(self, chunk_size: int = 1024 * 1024):
        self.chunk_size = chunk_size

    def to_exr(self, compression: Compression):
        return getattr(_openexr(), compression.exr_constant)

    def from_exr(self, value) -> Compression:
        exr = _openexr()
        for compression in Compression:
            if getattr(exr, compression.exr_constant, None) == value:
                return compression
        raise ImageLoadError(f"Unsupported compression: {value}")

    def load_image(self, path: Path) -> ExrImage:
        exr = _openexr()
        try:
            with exr.File(str(path)) as infile:
                layers = [
                    self._layer_from_part(infile.header(index), infile.channels(index))
                    for index in range(len(infile.parts))
                ]
        except (RuntimeError, OSError, ValueError) as err:
            raise ImageLoadError(f"Cannot read {path}: {err}") from err

        logger.debug("Loaded %s with %d layer(s)", path, len(layers))
        return ExrImage(layers=layers, path=path)

    def _layer_from_part(self, header: dict, channels: dict) -> Layer:
        attributes = {key: value for key, value in header.items() if key not in _MANAGED_ATTRIBUTES}
        return Layer(
            name=header.get("name"),
            compression=self.from_exr(header.get("compression")),
            channels={name: channel.pixels for name, channel in channels.items()},
            attributes=attributes,
        )

    def _header(self, layer: Layer) -> dict:
        exr = _openexr()
        header = dict(layer.attributes)
        header["compression"] = self.to_exr(layer.compression)
        header.setdefault("type", exr.scanlineimage)
        return header

    def encode_layer(self, layer: Layer, sink: BinaryIO, clock: Callable[[], float]) -> float:
        exr = _openexr()
        # The bindings only write to paths, so the encoded file is streamed through the sink afterwards
        with tempfile.TemporaryDirectory(prefix="exr-tools-") as tmp:
            tmp_path = Path(tmp) / "layer.exr"
            try:
                with exr.File(self._header(layer), dict(layer.channels)) as outfile:
                    start = clock()
                    outfile.write(str(tmp_path))
                    elapsed = clock() - start
            except (RuntimeError, ValueError, TypeError) as err:
                raise EncodingError(str(err)) from err

            with open(tmp_path, "rb") as f:
                shutil.copyfileobj(f, sink, self.chunk_size)

        return elapsed

    def write_image(self, image: ExrImage, path: Path) -> None:
        exr = _openexr()
        try:
            if len(image.layers) == 1 and image.layers[0].name is None:
                layer = image.layers[0]
                outfile = exr.File(self._header(layer), dict(layer.channels))
            else:
                parts = [
                    exr.Part(self._header(layer), dict(layer.channels), layer.name or f"layer{index}")
                    for index, layer in enumerate(image.layers)
                ]
                outfile = exr.File(parts)
            with outfile:
                outfile.write(str(path))
        except (RuntimeError, ValueError, TypeError) as err:
            raise EncodingError(f"Cannot write {path}: {err}") from err

        logger.info("Wrote %s", path)

    def read_headers(self, path: Path) -> list[dict[str, Any]]:
        exr = _openexr()
        try:
            with exr.File(str(path), header_only=True) as infile:
                return [dict(infile.header(index)) for index in range(len(infile.parts))]
        except (RuntimeError, OSError, ValueError) as err:
            raise ImageLoadError(f"Cannot read {path}: {err}") from err
