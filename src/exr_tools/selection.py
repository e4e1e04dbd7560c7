"""
Selection module - derive recommendations from a layer's measurements.

Four measurements are distinguished per layer: the smallest output, the
fastest encode, the current compression, and the "best" compression
chosen by an elimination tournament.

The tournament alternately drops the largest and the slowest survivors
until one remains. It favors compressions that are never the worst on
either axis; it is not a weighted optimum.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .compression import Compression
from .evaluator import Measurement, Outcome


class SelectionError(Exception):
    """Base class for errors that prevent a recommendation."""


class NoUsableMeasurementError(SelectionError):
    """Every candidate compression failed for the layer."""

    def __init__(self):
        super().__init__("no usable measurement: every compression failed")


class CurrentCompressionUnmeasuredError(SelectionError):
    """The layer's own compression could not be measured."""

    def __init__(self, compression: Compression):
        self.compression = compression
        super().__init__(f"current compression not measured: {compression} failed")


@dataclass(frozen=True)
class SelectionResult:
    smallest: Measurement
    fastest: Measurement
    current: Measurement
    best: Measurement


def successful(outcomes: Sequence[Outcome]) -> list[Measurement]:
    """Measurements among the outcomes, in candidate order."""
    return [outcome for outcome in outcomes if isinstance(outcome, Measurement)]


def select_smallest(measurements: Sequence[Measurement]) -> Measurement:
    if not measurements:
        raise NoUsableMeasurementError()
    # min() keeps the first of equal candidates
    return min(measurements, key=lambda m: m.byte_size)


def select_fastest(measurements: Sequence[Measurement]) -> Measurement:
    if not measurements:
        raise NoUsableMeasurementError()
    return min(measurements, key=lambda m: m.duration_seconds)


def select_current(measurements: Sequence[Measurement], current: Compression) -> Measurement:
    for measurement in measurements:
        if measurement.compression == current:
            return measurement
    raise CurrentCompressionUnmeasuredError(current)


def _drop_worst(remaining: list[Measurement], key) -> list[Measurement]:
    """Remove every entry sharing the maximum key, unless that would remove all."""
    worst = max(key(m) for m in remaining)
    survivors = [m for m in remaining if key(m) != worst]
    return survivors or remaining


def select_best(measurements: Sequence[Measurement]) -> Measurement:
    """
    Pick the best compression with the elimination tournament.

    Each round removes all entries with the largest byte size, then all
    entries with the longest duration, stopping as soon as one entry is
    left. A step that cannot discriminate (all entries tie on that axis)
    removes nothing; a round where both steps remove nothing ends the
    tournament with the first remaining entry.

    Raises:
        NoUsableMeasurementError: If there are no measurements
    """
    if not measurements:
        raise NoUsableMeasurementError()

    remaining = list(measurements)
    while len(remaining) > 1:
        size_before = len(remaining)

        remaining = _drop_worst(remaining, lambda m: m.byte_size)
        if len(remaining) <= 1:
            break

        remaining = _drop_worst(remaining, lambda m: m.duration_seconds)

        if len(remaining) == size_before:
            break

    return remaining[0]


def select_compressions(outcomes: Sequence[Outcome], current: Compression) -> SelectionResult:
    """
    Reduce a layer's outcomes to its four distinguished measurements.

    Args:
        outcomes: One outcome per candidate, in candidate order
        current: The layer's compression when the evaluation started

    Raises:
        NoUsableMeasurementError: If every candidate failed
        CurrentCompressionUnmeasuredError: If the current compression failed
    """
    measurements = successful(outcomes)
    if not measurements:
        raise NoUsableMeasurementError()

    return SelectionResult(
        smallest=select_smallest(measurements),
        fastest=select_fastest(measurements),
        current=select_current(measurements, current),
        best=select_best(measurements),
    )
