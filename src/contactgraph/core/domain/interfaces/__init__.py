"""Domain interfaces."""

from .sequence_alignment import GAP_CHARACTER, GAP_POSITION, SequenceAlignment

__all__ = ["GAP_CHARACTER", "GAP_POSITION", "SequenceAlignment"]
