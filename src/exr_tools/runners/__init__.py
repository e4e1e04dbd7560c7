"""Runners - Analysis engines that drive the per-layer evaluation."""

from .base import AnalysisCallbacks, AnalysisResult, LayerAnalysis, RunnerProtocol
from .stats import CompressionStatsRunner

__all__ = [
    "AnalysisCallbacks",
    "AnalysisResult",
    "CompressionStatsRunner",
    "LayerAnalysis",
    "RunnerProtocol",
]
