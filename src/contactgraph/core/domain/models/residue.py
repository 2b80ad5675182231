#!/usr/bin/env python3
# src/contactgraph/core/domain/models/residue.py

"""
Domain model representing an amino acid residue and the atoms it owns.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .amino_acids import is_standard, three_to_one
from .atom import Atom


@dataclass(eq=False)
class Residue:
    """A residue of a protein chain.

    Attributes:
        serial: Position in the full sequence, starting at 1
        residue_type: Three-letter residue code
        secondary_structure: Optional secondary structure tag (e.g. ``H``, ``E``)
        observed: False for residues present in the sequence but without coordinates
        atoms: Atoms owned by this residue, keyed by atom name
    """

    serial: int
    residue_type: str
    secondary_structure: Optional[str] = None
    observed: bool = True
    atoms: Dict[str, Atom] = field(default_factory=dict, repr=False)

    @property
    def residue_serial(self) -> int:
        return self.serial

    @property
    def one_letter_code(self) -> str:
        return three_to_one(self.residue_type)

    @property
    def is_standard(self) -> bool:
        return is_standard(self.residue_type)

    def add_atom(
        self, serial: int, atom_name: str, coordinates: Sequence[float]
    ) -> Atom:
        """
        Create an atom owned by this residue.

        Args:
            serial: Atom serial number
            atom_name: PDB atom name (e.g. ``CA``)
            coordinates: x, y, z in Angstroms

        Returns:
            The new Atom, back-referencing this residue
        """
        x, y, z = (float(c) for c in coordinates)
        atom = Atom(serial=serial, atom_name=atom_name, coordinates=(x, y, z), residue=self)
        self.atoms[atom_name] = atom
        return atom

    def get_atom(self, atom_name: str) -> Optional[Atom]:
        return self.atoms.get(atom_name)

    def get_atoms(self, atom_names: Optional[Sequence[str]] = None) -> List[Atom]:
        """Atoms of this residue with the given names (all atoms if None), by serial."""
        if atom_names is None:
            selected = list(self.atoms.values())
        else:
            selected = [self.atoms[name] for name in atom_names if name in self.atoms]
        return sorted(selected, key=lambda atom: atom.serial)

    def copy(self) -> "Residue":
        """Copy of the residue metadata without atoms."""
        return Residue(
            serial=self.serial,
            residue_type=self.residue_type,
            secondary_structure=self.secondary_structure,
            observed=self.observed,
        )
