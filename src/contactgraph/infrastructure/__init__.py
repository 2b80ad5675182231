"""Infrastructure implementations of core interfaces and adapters."""

from .repositories.graph_file_repository import GraphFileRepository
from .adapters.biopython_adapter import BiopythonAlignmentAdapter, BiopythonStructureAdapter

__all__ = [
    "GraphFileRepository",
    "BiopythonAlignmentAdapter",
    "BiopythonStructureAdapter",
]
