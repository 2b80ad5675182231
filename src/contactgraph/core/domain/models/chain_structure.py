#!/usr/bin/env python3
# src/contactgraph/core/domain/models/chain_structure.py

"""
Domain model of one chain of a parsed protein structure.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .atom import Atom
from .contact_type import ContactTypeDictionary
from .residue import Residue


@dataclass
class ChainStructure:
    """Coordinates and sequence of a protein chain.

    Attributes:
        sequence: Full sequence, ``X`` for unobserved or non-standard residues
        residues: Observed standard residues keyed by serial (1-based)
        structure_id: Identifier of the structure (e.g. a PDB code)
        chain_id: Chain identifier
        model: Model number of the structure
    """

    sequence: str
    residues: Dict[int, Residue] = field(default_factory=dict)
    structure_id: Optional[str] = None
    chain_id: Optional[str] = None
    model: int = 1

    @property
    def full_length(self) -> int:
        return len(self.sequence)

    @property
    def obs_length(self) -> int:
        return len(self.residues)

    def get_residue(self, serial: int) -> Optional[Residue]:
        return self.residues.get(serial)

    def get_residue_serials(self) -> List[int]:
        return sorted(self.residues)

    def get_atoms_for_contact_type(
        self, contact_type: str, dictionary: ContactTypeDictionary
    ) -> List[Atom]:
        """
        Atoms selected by a single contact type definition.

        Args:
            contact_type: Name of one definition (no ``+`` or ``/``)
            dictionary: Contact type definitions

        Returns:
            Selected atoms, ascending by atom serial
        """
        definition = dictionary.get(contact_type)
        atoms: List[Atom] = []
        for serial in self.get_residue_serials():
            residue = self.residues[serial]
            atoms.extend(residue.get_atoms(sorted(definition.get_atoms(residue.residue_type))))
        return sorted(atoms, key=lambda atom: atom.serial)

    @property
    def atoms(self) -> List[Atom]:
        """All atoms of the chain, ascending by serial."""
        all_atoms = [atom for residue in self.residues.values() for atom in residue.atoms.values()]
        return sorted(all_atoms, key=lambda atom: atom.serial)

    def get_coordinates(self) -> np.ndarray:
        """Get coordinates of all atoms in the chain.

        Returns:
            numpy array of shape (n_atoms, 3) containing xyz coordinates
        """
        return np.array([atom.coordinates for atom in self.atoms], dtype=float).reshape(-1, 3)
