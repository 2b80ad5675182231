"""Core domain models and interfaces."""

from .models.contact_map import ContactMap, EdgeState
from .models.contact_type import ContactTypeDictionary
from .models.protein_graph import AIGraph, GraphBuilder, GraphMetadata, ProteinGraph, RIGraph
from .interfaces.sequence_alignment import SequenceAlignment
from .implementations.multiple_alignment import MultipleSequenceAlignment

__all__ = [
    "ContactMap",
    "EdgeState",
    "ContactTypeDictionary",
    "AIGraph",
    "GraphBuilder",
    "GraphMetadata",
    "ProteinGraph",
    "RIGraph",
    "SequenceAlignment",
    "MultipleSequenceAlignment",
]
