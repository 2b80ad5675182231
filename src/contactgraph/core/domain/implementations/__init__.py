"""Concrete implementations of domain interfaces."""

from .multiple_alignment import MultipleSequenceAlignment

__all__ = ["MultipleSequenceAlignment"]
