"""Shared pytest fixtures for exr-tools tests."""

import io
import threading

import numpy as np
import pytest
from typer.testing import CliRunner

from exr_tools.codec import EncodingError
from exr_tools.compression import Compression
from exr_tools.image import ExrImage, Layer


class FakeCodec:
    """
    Scripted codec.

    Encodes a layer as `sizes[compression]` bytes and advances a fake
    clock by `durations[compression]` seconds. Writing into the sink
    advances the clock by `transfer_seconds` after the encode span.
    Compressions listed in `failures` raise EncodingError.
    """

    def __init__(self, sizes=None, durations=None, failures=(), image=None, headers=None, transfer_seconds=0.0):
        self.sizes = sizes or {}
        self.durations = durations or {}
        self.failures = set(failures)
        self.image = image
        self.headers = headers or []
        self.encoded: list[tuple[str | None, Compression]] = []
        self.written = []
        self.transfer_seconds = transfer_seconds
        self.clock = 0.0
        self._lock = threading.Lock()

    def now(self) -> float:
        return self.clock

    def load_image(self, path):
        self.image.path = path
        return self.image

    def encode_layer(self, layer, sink, clock):
        with self._lock:
            self.encoded.append((layer.name, layer.compression))
        if layer.compression in self.failures:
            raise EncodingError("cannot encode this layer")

        start = clock()
        self.clock += self.durations.get(layer.compression, 0.001)
        elapsed = clock() - start

        size = self.sizes.get(layer.compression, 100)
        # Placeholder offset table, patched after the payload like a real encoder
        header = min(size, 8)
        sink.write(b"\0" * header)
        sink.write(b"x" * (size - header))
        sink.seek(0)
        sink.write(b"\1" * header)
        sink.seek(0, io.SEEK_END)
        self.clock += self.transfer_seconds

        return elapsed

    def write_image(self, image, path):
        self.written.append((path, [layer.compression for layer in image.layers]))

    def read_headers(self, path):
        return self.headers


def make_layer(name: str | None = "beauty", compression: Compression = Compression.ZIP) -> Layer:
    return Layer(
        name=name,
        compression=compression,
        channels={"R": np.zeros((4, 8), dtype=np.float32), "G": np.ones((4, 8), dtype=np.float32)},
        attributes={"lineOrder": "INCREASING_Y"},
    )


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def layer():
    """A small two-channel layer compressed with ZIP16."""
    return make_layer()


@pytest.fixture
def fake_codec():
    """Factory for scripted codecs."""
    return FakeCodec


@pytest.fixture
def layer_factory():
    return make_layer


@pytest.fixture
def scenario_codec(monkeypatch):
    """
    Codec for a B44 layer where the lossy current compression wins.

    Uncompressed: 1000 bytes / 5ms, RLE: 800 bytes / 4ms, B44: 300 bytes / 2ms.
    Every other lossless compression fails.
    """
    codec = FakeCodec(
        sizes={Compression.NONE: 1000, Compression.RLE: 800, Compression.B44: 300},
        durations={Compression.NONE: 0.005, Compression.RLE: 0.004, Compression.B44: 0.002},
        failures={Compression.PIZ, Compression.ZIPS, Compression.ZIP},
        image=ExrImage(layers=[make_layer("beauty", Compression.B44)]),
    )
    monkeypatch.setattr("exr_tools.evaluator.time.perf_counter", codec.now)
    return codec


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file."""
    config_file = tmp_path / "exr-tools.yaml"
    config_file.write_text(
        """
stats:
  jobs: 2
  apply_best: false
  timing_warning: false

logging:
  level: INFO
"""
    )
    return config_file
