"""Domain model classes."""

from .atom import Atom
from .residue import Residue
from .chain_structure import ChainStructure
from .contact_type import ContactType, ContactTypeDictionary, ContactTypeSpec
from .edges import AIGEdge, RIGEdge
from .protein_graph import (
    AIGraph,
    GraphBuilder,
    GraphMetadata,
    ProteinGraph,
    RIGraph,
    rig_builder_for_sequence,
)
from .contact_map import ContactMap, EdgeState
from .comparison_result import GraphComparisonResult

__all__ = [
    "Atom",
    "Residue",
    "ChainStructure",
    "ContactType",
    "ContactTypeDictionary",
    "ContactTypeSpec",
    "AIGEdge",
    "RIGEdge",
    "AIGraph",
    "GraphBuilder",
    "GraphMetadata",
    "ProteinGraph",
    "RIGraph",
    "rig_builder_for_sequence",
    "ContactMap",
    "EdgeState",
    "GraphComparisonResult",
]
