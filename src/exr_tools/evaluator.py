"""
Evaluator module - benchmark a layer under candidate compressions.

Each candidate is encoded from its own snapshot of the layer into its
own MeasuringSink, so evaluations share no mutable state and can run
in parallel.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .codec import Codec, EncodingError
from .compression import Compression, candidate_compressions
from .image import Layer
from .sink import MeasuringSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurement:
    """Size and encoding time of a layer under one compression."""

    compression: Compression
    duration_seconds: float
    byte_size: int


@dataclass(frozen=True)
class MeasurementFailure:
    """A compression that could not encode the layer."""

    compression: Compression
    error: str


Outcome = Measurement | MeasurementFailure


def evaluate_compression(codec: Codec, layer: Layer, compression: Compression) -> Outcome:
    """
    Encode a layer with one compression and measure the result.

    The layer itself is not modified. Only the codec's encode step is
    timed; moving the encoded bytes into the sink is excluded.

    Args:
        codec: Codec used to encode
        layer: Source layer
        compression: Candidate compression

    Returns:
        Measurement on success, MeasurementFailure if encoding failed
    """
    candidate = layer.with_compression(compression)
    sink = MeasuringSink()

    try:
        duration = codec.encode_layer(candidate, sink, time.perf_counter)
    except (EncodingError, OSError) as err:
        logger.warning("Layer %s: %s failed: %s", layer.display_name, compression, err)
        return MeasurementFailure(compression=compression, error=str(err) or type(err).__name__)

    measurement = Measurement(compression=compression, duration_seconds=duration, byte_size=sink.byte_size)
    logger.debug(
        "Layer %s: %s -> %d bytes in %.4fs", layer.display_name, compression, measurement.byte_size, duration
    )
    return measurement


def evaluate_layer(codec: Codec, layer: Layer, jobs: int = 1) -> list[Outcome]:
    """
    Evaluate every candidate compression of a layer.

    Args:
        codec: Codec used to encode
        layer: Layer to benchmark
        jobs: Number of candidates encoded concurrently

    Returns:
        One outcome per candidate, in candidate order
    """
    candidates = candidate_compressions(layer.compression)

    if jobs <= 1 or len(candidates) == 1:
        return [evaluate_compression(codec, layer, compression) for compression in candidates]

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        # map() yields in submission order
        return list(executor.map(lambda compression: evaluate_compression(codec, layer, compression), candidates))
