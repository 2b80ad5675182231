"""Contact graphs of protein structures: grid search, interaction graphs,
contact maps and consensus graphs from aligned templates."""

from .core.domain.models.contact_map import ContactMap, EdgeState
from .core.domain.models.contact_type import ContactTypeDictionary
from .core.domain.models.protein_graph import AIGraph, GraphBuilder, GraphMetadata, ProteinGraph, RIGraph
from .core.domain.implementations.multiple_alignment import MultipleSequenceAlignment
from .core.services.graph_builder_service import ContactGraphService
from .core.services.graph_averaging_service import GraphAverager
from .core.utils.grid import Grid
from .core.utils.logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    "ContactMap",
    "EdgeState",
    "ContactTypeDictionary",
    "AIGraph",
    "GraphBuilder",
    "GraphMetadata",
    "ProteinGraph",
    "RIGraph",
    "MultipleSequenceAlignment",
    "ContactGraphService",
    "GraphAverager",
    "Grid",
    "setup_logging",
]
