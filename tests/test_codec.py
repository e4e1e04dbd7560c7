"""Tests for the OpenEXR codec adapter."""

import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from exr_tools.codec import EncodingError, ImageLoadError, OpenExrCodec
from exr_tools.compression import Compression
from exr_tools.evaluator import Measurement, evaluate_layer
from exr_tools.image import ExrImage, Layer
from exr_tools.sink import MeasuringSink


@pytest.fixture
def codec():
    """Codec backed by the installed OpenEXR bindings."""
    pytest.importorskip("OpenEXR")
    return OpenExrCodec()


@pytest.fixture
def gradient_layer():
    """A 32x16 RGB gradient compressed with ZIP16."""
    height, width = 16, 32
    rgb = np.linspace(0.0, 1.0, height * width * 3, dtype=np.float32).reshape(height, width, 3)
    return Layer(name=None, compression=Compression.ZIP, channels={"RGB": rgb})


class TestEncodeLayerWithMockedBindings:
    """Tests for encode_layer timing and errors without the real bindings."""

    @pytest.fixture
    def exr(self):
        with patch("exr_tools.codec._openexr") as openexr:
            yield openexr.return_value

    def test_only_file_write_is_timed(self, exr, gradient_layer):
        """Test the clock brackets the file write and the sink copy happens afterwards."""
        events = []
        sink = MeasuringSink()

        def write(path):
            events.append("write")
            Path(path).write_bytes(b"x" * 4096)

        outfile = MagicMock()
        outfile.write.side_effect = write
        exr.File.return_value.__enter__.return_value = outfile

        def clock():
            events.append(("clock", sink.byte_size))
            return 2.0 * len(events)

        elapsed = OpenExrCodec().encode_layer(gradient_layer, sink, clock)

        # Sink is still empty at both clock reads
        assert events == [("clock", 0), "write", ("clock", 0)]
        assert elapsed == 4.0
        assert sink.byte_size == 4096

    def test_error_message_has_no_compression_prefix(self, exr, gradient_layer):
        """Test the failure text carries only the library message."""
        exr.File.side_effect = RuntimeError("invalid pixel array")

        with pytest.raises(EncodingError) as exc_info:
            OpenExrCodec().encode_layer(gradient_layer, MeasuringSink(), time.perf_counter)

        assert str(exc_info.value) == "invalid pixel array"


class TestCompressionMapping:
    """Tests for enum conversion."""

    @pytest.mark.parametrize("compression", list(Compression))
    def test_round_trip(self, codec, compression):
        """Test compression constants map both ways."""
        assert codec.from_exr(codec.to_exr(compression)) == compression

    def test_unknown(self, codec):
        """Test an unknown constant is a load error."""
        with pytest.raises(ImageLoadError):
            codec.from_exr("not-a-compression")


class TestOpenExrCodec:
    """Tests against the real OpenEXR bindings."""

    def test_encode_layer(self, codec, gradient_layer):
        """Test encoding a layer fills the sink."""
        sink = MeasuringSink()
        elapsed = codec.encode_layer(gradient_layer, sink, time.perf_counter)
        assert elapsed >= 0
        # Header plus at least the raw pixel payload for an uncompressible layer
        assert sink.byte_size > 0

    def test_uncompressed_is_largest_for_gradient(self, codec, gradient_layer):
        """Test the uncompressed size covers the raw pixels."""
        outcomes = evaluate_layer(codec, gradient_layer)
        sizes = {o.compression: o.byte_size for o in outcomes if isinstance(o, Measurement)}

        assert Compression.NONE in sizes
        assert sizes[Compression.NONE] >= 16 * 32 * 3 * 4

    def test_write_and_load(self, codec, gradient_layer, tmp_path):
        """Test a written image loads back with its compression."""
        path = tmp_path / "gradient.exr"
        codec.write_image(ExrImage(layers=[gradient_layer.with_compression(Compression.PIZ)]), path)

        image = codec.load_image(path)

        assert len(image.layers) == 1
        assert image.layers[0].compression == Compression.PIZ
        assert image.path == path
        np.testing.assert_array_equal(image.layers[0].channels["RGB"], gradient_layer.channels["RGB"])

    def test_read_headers(self, codec, gradient_layer, tmp_path):
        """Test headers are read per part."""
        path = tmp_path / "gradient.exr"
        codec.write_image(ExrImage(layers=[gradient_layer]), path)

        headers = codec.read_headers(path)

        assert len(headers) == 1
        assert "compression" in headers[0]

    def test_load_missing_file(self, codec, tmp_path):
        """Test a missing file is a load error."""
        with pytest.raises(ImageLoadError):
            codec.load_image(tmp_path / "missing.exr")
