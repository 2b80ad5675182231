"""Core business logic services."""

from .graph_builder_service import ContactGraphService
from .graph_averaging_service import DEFAULT_THRESHOLD, GraphAverager
from .graph_comparison_service import GraphComparisonService
from .graph_filter_service import GraphFilterService

__all__ = [
    "ContactGraphService",
    "DEFAULT_THRESHOLD",
    "GraphAverager",
    "GraphComparisonService",
    "GraphFilterService",
]
