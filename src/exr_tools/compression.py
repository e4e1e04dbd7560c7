"""
Compression schemes supported by the OpenEXR container.

Defines the closed set of schemes and which of them are benchmarked
for a given layer.
"""

from enum import Enum


class Compression(Enum):
    """OpenEXR compression schemes, in benchmark order."""

    NONE = "none"
    RLE = "rle"
    PIZ = "piz"
    ZIPS = "zips"  # zip, one scanline per block
    ZIP = "zip"  # zip, sixteen scanlines per block
    PXR24 = "pxr24"
    B44 = "b44"
    B44A = "b44a"
    DWAA = "dwaa"
    DWAB = "dwab"

    @property
    def may_lose_data(self) -> bool:
        """Whether decoding may yield different pixel values than were encoded."""
        return self in LOSSY_COMPRESSIONS

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def exr_constant(self) -> str:
        """Name of the matching constant in the OpenEXR Python module."""
        return f"{self.name}_COMPRESSION" if self is not Compression.NONE else "NO_COMPRESSION"

    def __str__(self) -> str:
        return self.label


LOSSY_COMPRESSIONS = frozenset(
    {
        Compression.PXR24,
        Compression.B44,
        Compression.B44A,
        Compression.DWAA,
        Compression.DWAB,
    }
)

_LABELS = {
    Compression.NONE: "uncompressed",
    Compression.RLE: "RLE",
    Compression.PIZ: "PIZ",
    Compression.ZIPS: "ZIP1",
    Compression.ZIP: "ZIP16",
    Compression.PXR24: "PXR24",
    Compression.B44: "B44",
    Compression.B44A: "B44A",
    Compression.DWAA: "DWAA",
    Compression.DWAB: "DWAB",
}

ALL_COMPRESSIONS = tuple(Compression)
LOSSLESS_COMPRESSIONS = tuple(c for c in ALL_COMPRESSIONS if not c.may_lose_data)


def candidate_compressions(current: Compression) -> list[Compression]:
    """
    List the compressions to benchmark for a layer.

    All lossless compressions are always candidates. A lossy current
    compression is appended so the layer is also measured as it is.

    Args:
        current: The layer's current compression

    Returns:
        Ordered candidate list without duplicates
    """
    candidates = list(LOSSLESS_COMPRESSIONS)
    if current not in candidates:
        candidates.append(current)
    return candidates
