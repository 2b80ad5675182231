"""
Amino acid lookup tables shared by the structure models and the contact map.
"""

from typing import Dict, FrozenSet

# One-letter code used for unobserved or non-standard residues in full sequences
UNKNOWN_ONE_LETTER = "X"
UNKNOWN_THREE_LETTER = "XXX"

THREE_TO_ONE: Dict[str, str] = {
    "ALA": "A", "CYS": "C", "ASP": "D", "GLU": "E", "PHE": "F",
    "GLY": "G", "HIS": "H", "ILE": "I", "LYS": "K", "LEU": "L",
    "MET": "M", "ASN": "N", "PRO": "P", "GLN": "Q", "ARG": "R",
    "SER": "S", "THR": "T", "VAL": "V", "TRP": "W", "TYR": "Y",
}

ONE_TO_THREE: Dict[str, str] = {v: k for k, v in THREE_TO_ONE.items()}

STANDARD_THREE_LETTER: FrozenSet[str] = frozenset(THREE_TO_ONE)


def three_to_one(residue_type: str) -> str:
    """Return the one-letter code, ``X`` for anything non-standard."""
    return THREE_TO_ONE.get(residue_type.upper(), UNKNOWN_ONE_LETTER)


def one_to_three(letter: str) -> str:
    """Return the three-letter code, ``XXX`` for anything non-standard."""
    return ONE_TO_THREE.get(letter.upper(), UNKNOWN_THREE_LETTER)


def is_standard(residue_type: str) -> bool:
    return residue_type.upper() in STANDARD_THREE_LETTER
