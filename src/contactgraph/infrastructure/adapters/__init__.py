"""Adapters for external libraries."""

from .biopython_adapter import BiopythonAlignmentAdapter, BiopythonStructureAdapter

__all__ = [
    "BiopythonAlignmentAdapter",
    "BiopythonStructureAdapter",
]
