"""Base runner classes and protocols."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..compression import Compression
from ..evaluator import Measurement, MeasurementFailure, Outcome
from ..image import ExrImage
from ..selection import SelectionError, SelectionResult


@dataclass
class LayerAnalysis:
    """Compression analysis of a single layer."""

    index: int
    layer_name: str | None
    original_compression: Compression
    outcomes: list[Outcome] = field(default_factory=list)
    selection: SelectionResult | None = None
    error: SelectionError | None = None
    applied: bool = False

    @property
    def success(self) -> bool:
        return self.selection is not None

    @property
    def measurements(self) -> list[Measurement]:
        return [o for o in self.outcomes if isinstance(o, Measurement)]

    @property
    def failures(self) -> list[MeasurementFailure]:
        return [o for o in self.outcomes if isinstance(o, MeasurementFailure)]


@dataclass
class AnalysisResult:
    """Result of analysing every layer of an image."""

    path: Path | None
    layers: list[LayerAnalysis] = field(default_factory=list)

    @property
    def failed_layers(self) -> list[LayerAnalysis]:
        return [layer for layer in self.layers if not layer.success]

    @property
    def success(self) -> bool:
        return not self.failed_layers

    @property
    def changed_layers(self) -> list[LayerAnalysis]:
        """Layers whose recommended compression differs from the original."""
        return [
            layer
            for layer in self.layers
            if layer.selection is not None and layer.selection.best.compression != layer.original_compression
        ]


@dataclass
class AnalysisCallbacks:
    """
    Callbacks for analysis progress reporting.

    Allows CLI to display progress without coupling runner to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    """

    on_analysis_start: Callable[[int], None] | None = None  # layer count
    on_layer_start: Callable[[int, str | None, int], None] | None = None  # index, name, candidate count
    on_layer_complete: Callable[[LayerAnalysis], None] | None = None
    on_analysis_complete: Callable[[AnalysisResult], None] | None = None


class RunnerProtocol(Protocol):
    """Protocol for analysis runners."""

    def run(self, image: ExrImage, callbacks: AnalysisCallbacks | None = None) -> AnalysisResult:
        """
        Analyse every layer of an image.

        Args:
            image: Decoded image
            callbacks: Optional callbacks for progress reporting

        Returns:
            AnalysisResult with one LayerAnalysis per layer
        """
        ...
