#!/usr/bin/env python3
# src/contactgraph/core/domain/models/edges.py

"""
Edge payloads of the atom and residue interaction graphs.

Edges are keyed by their endpoints inside a ProteinGraph, so two edges on the
same endpoint pair are the same edge whatever their payload.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class AIGEdge:
    """Atom contact with its euclidean distance in Angstroms."""

    distance: float


@dataclass(frozen=True)
class RIGEdge:
    """Residue contact.

    Attributes:
        weight: Contact strength (1.0 by default, vote fraction in averaged graphs)
        atom_weight: Number of atom contacts collapsed into this edge
        distance: Minimum atom distance, None when unknown (e.g. read from file)
    """

    weight: float = 1.0
    atom_weight: int = 1
    distance: Optional[float] = None

    def with_atom_contact(self, distance: float) -> "RIGEdge":
        """Edge with one more underlying atom contact."""
        if self.distance is None:
            new_distance = distance
        else:
            new_distance = min(self.distance, distance)
        return replace(self, atom_weight=self.atom_weight + 1, distance=new_distance)

    def with_weight(self, weight: float) -> "RIGEdge":
        return replace(self, weight=weight)
