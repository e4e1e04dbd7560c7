"""Compression stats runner - analyses image layers one at a time."""

import logging

from ..codec import Codec
from ..compression import candidate_compressions
from ..evaluator import evaluate_layer
from ..image import ExrImage, Layer
from ..selection import SelectionError, select_compressions
from .base import AnalysisCallbacks, AnalysisResult, LayerAnalysis

logger = logging.getLogger(__name__)


class CompressionStatsRunner:
    """
    Per-layer compression analysis.

    Layers are processed in order; a layer that cannot be analysed is
    recorded and the next layer is still processed. Uses callbacks for
    progress reporting without coupling to UI.
    """

    def __init__(self, codec: Codec, jobs: int = 1, apply_best: bool = False):
        """
        Initialize the runner.

        Args:
            codec: Codec used to encode candidates
            jobs: Candidates encoded concurrently per layer
            apply_best: If True, set each layer's compression to its recommendation
        """
        self.codec = codec
        self.jobs = jobs
        self.apply_best = apply_best

    def run(self, image: ExrImage, callbacks: AnalysisCallbacks | None = None) -> AnalysisResult:
        """
        Analyse every layer of an image.

        Args:
            image: Decoded image; layers are only modified when apply_best is set
            callbacks: Optional callbacks for progress reporting

        Returns:
            AnalysisResult with one LayerAnalysis per layer
        """
        cb = callbacks or AnalysisCallbacks()
        result = AnalysisResult(path=image.path)

        if cb.on_analysis_start:
            cb.on_analysis_start(len(image.layers))

        for index, layer in enumerate(image.layers):
            if cb.on_layer_start:
                cb.on_layer_start(index, layer.name, len(candidate_compressions(layer.compression)))

            analysis = self.analyse_layer(index, layer)
            result.layers.append(analysis)

            if cb.on_layer_complete:
                cb.on_layer_complete(analysis)

        if cb.on_analysis_complete:
            cb.on_analysis_complete(result)

        return result

    def analyse_layer(self, index: int, layer: Layer) -> LayerAnalysis:
        current = layer.compression
        analysis = LayerAnalysis(index=index, layer_name=layer.name, original_compression=current)
        analysis.outcomes = evaluate_layer(self.codec, layer, jobs=self.jobs)

        try:
            analysis.selection = select_compressions(analysis.outcomes, current)
        except SelectionError as err:
            logger.warning("Layer #%d (%s): %s", index, layer.display_name, err)
            analysis.error = err
            return analysis

        if self.apply_best:
            layer.compression = analysis.selection.best.compression
            analysis.applied = True
            logger.info("Layer #%d (%s): %s -> %s", index, layer.display_name, current, layer.compression)

        return analysis
