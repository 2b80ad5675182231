"""Core domain models, interfaces and services for protein contact analysis."""

from .domain.models.contact_map import ContactMap, EdgeState
from .domain.models.protein_graph import AIGraph, GraphBuilder, GraphMetadata, ProteinGraph, RIGraph
from .domain.models.comparison_result import GraphComparisonResult
from .domain.interfaces.sequence_alignment import SequenceAlignment
from .services.graph_builder_service import ContactGraphService
from .services.graph_averaging_service import GraphAverager
from .services.graph_comparison_service import GraphComparisonService
from .services.graph_filter_service import GraphFilterService

__all__ = [
    "ContactMap",
    "EdgeState",
    "AIGraph",
    "GraphBuilder",
    "GraphMetadata",
    "ProteinGraph",
    "RIGraph",
    "GraphComparisonResult",
    "SequenceAlignment",
    "ContactGraphService",
    "GraphAverager",
    "GraphComparisonService",
    "GraphFilterService",
]
