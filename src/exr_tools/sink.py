"""
In-memory measuring sink.

Encoders write into a MeasuringSink exactly as they would into a file.
No bytes are stored: the sink only tracks the cursor and the highest
position ever written, which equals the size the file would have on disk.
"""

import io

# Positions are unsigned 64-bit offsets
MAX_POSITION = 2**64 - 1


class SinkCapacityError(OSError):
    """Raised when the sink position would exceed the 64-bit range."""


class MeasuringSink(io.RawIOBase):
    """Writable, seekable byte stream that discards data and measures size."""

    def __init__(self):
        super().__init__()
        self._position = 0
        self._byte_size = 0

    @property
    def byte_size(self) -> int:
        """High-water mark of all writes (the encoded file size)."""
        return self._byte_size

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readable(self) -> bool:
        return False

    def write(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed sink")

        length = memoryview(b).nbytes
        end = self._position + length
        if end > MAX_POSITION:
            raise SinkCapacityError("file too large")

        self._position = end
        self._byte_size = max(self._byte_size, end)
        return length

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed sink")

        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            # Seeking alone never grows the file
            position = self._byte_size + offset
        else:
            raise ValueError(f"invalid whence ({whence})")

        if position < 0:
            raise ValueError(f"negative seek position {position}")
        if position > MAX_POSITION:
            raise SinkCapacityError("seek position too large")

        self._position = position
        return position

    def tell(self) -> int:
        return self._position
