"""
Report module - human-readable compression analysis.

Produces one plain-text block per layer: the current compression, the
recommendation, the smallest and fastest alternatives, and the full
list of measurements and failures.
"""

from .evaluator import Measurement, MeasurementFailure, Outcome
from .runners.base import AnalysisResult, LayerAnalysis

# Printed when a saving cannot be computed (the baseline is zero)
UNDEFINED_PERCENT = "n/a"


def percent_saving(old: float, new: float) -> float | None:
    """
    Relative saving of `new` against `old` in percent.

    Negative when `new` is larger. None when `old` is zero.
    """
    if old == 0:
        return None
    return (1.0 - new / old) * 100.0


def format_percent(value: float | None) -> str:
    if value is None:
        return UNDEFINED_PERCENT
    return f"{value:.1f}%"


def format_seconds(seconds: float) -> str:
    return f"{seconds:.4f}s"


def format_layer_header(analysis: LayerAnalysis) -> str:
    name = f" (`{analysis.layer_name}`)" if analysis.layer_name else ""
    return f"Layer #{analysis.index}{name}:"


def format_outcome(outcome: Outcome) -> str:
    if isinstance(outcome, MeasurementFailure):
        return f"\t{outcome.compression}: failed: {outcome.error}"
    return f"\t{outcome.compression}: \t{outcome.byte_size}b, \t{format_seconds(outcome.duration_seconds)}"


def _memory_saving(current: Measurement, other: Measurement) -> str:
    return format_percent(percent_saving(current.byte_size, other.byte_size))


def _time_saving(current: Measurement, other: Measurement) -> str:
    return format_percent(percent_saving(current.duration_seconds, other.duration_seconds))


def format_layer_report(analysis: LayerAnalysis) -> str:
    """
    Render the report block of one layer.

    Layers without a recommendation show the error followed by the
    individual outcomes, so every failure message is still visible.
    """
    lines = [format_layer_header(analysis)]

    selection = analysis.selection
    if selection is None:
        lines.append(f"no recommendation: {analysis.error}")
    else:
        current, best = selection.current, selection.best
        smallest, fastest = selection.smallest, selection.fastest

        lines.append(
            f"current: {current.compression}, {current.byte_size}b, {format_seconds(current.duration_seconds)}"
        )
        lines.append(
            f"probably best: {best.compression}, saving {_memory_saving(current, best)} memory "
            f"and {_time_saving(current, best)} time"
        )
        lines.append(
            f"smallest: {smallest.compression}, {smallest.byte_size}b, "
            f"saving {_memory_saving(current, smallest)} memory"
        )
        lines.append(
            f"fastest: {fastest.compression}, {format_seconds(fastest.duration_seconds)}, "
            f"saving {_time_saving(current, fastest)} compression time"
        )
        if analysis.applied:
            lines.append(f"applied: {analysis.original_compression} -> {best.compression}")

    lines.append("full stats:")
    lines.extend(format_outcome(outcome) for outcome in analysis.outcomes)
    return "\n".join(lines)


def format_analysis(result: AnalysisResult) -> str:
    """Render the report blocks of all layers, separated by blank lines."""
    return "\n\n".join(format_layer_report(layer) for layer in result.layers)
