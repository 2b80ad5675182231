#!/usr/bin/env python3
# src/contactgraph/core/domain/models/atom.py

"""
Domain model representing an atom of a protein chain.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple

import numpy as np

if TYPE_CHECKING:
    from .residue import Residue


@dataclass(frozen=True)
class Atom:
    """Represents an atom in a protein structure.

    The owning residue is a back-reference only; it is not part of the
    atom's identity, so two atoms compare equal on serial, name and
    coordinates.
    """

    serial: int
    atom_name: str
    coordinates: Tuple[float, float, float]
    residue: "Residue" = field(compare=False, repr=False, default=None)

    @property
    def residue_serial(self) -> int:
        """Serial of the parent residue (used for contact ranges)."""
        return self.residue.serial

    @property
    def residue_type(self) -> str:
        return self.residue.residue_type

    def get_coordinates(self) -> np.ndarray:
        """Coordinates as a numpy array of shape (3,)."""
        return np.asarray(self.coordinates, dtype=float)
