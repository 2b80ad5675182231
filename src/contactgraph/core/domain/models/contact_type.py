#!/usr/bin/env python3
# src/contactgraph/core/domain/models/contact_type.py

"""
Contact types: the subset of atoms of each residue used for distance computation.

Contact type definitions are read once into an immutable ContactTypeDictionary
which is then handed to whatever needs atom selection. Contact type strings
combine definitions:

    ``Ca``        single definition
    ``BB/SC``     crossed: i atoms from BB, j atoms from SC (may be directed)
    ``Ca+Cb``     union of the graphs of both definitions
"""

import logging
import re
from dataclasses import dataclass, field
from importlib import resources
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from ...exceptions import InvalidContactTypeError

logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "contactgraph"
RESOURCE_NAME = "data/contact_types.dat"

CROSSED_SEPARATOR = "/"
UNION_SEPARATOR = "+"

_HEADER_PATTERN = re.compile(r"^>\s*(\w+)\s+(\w+)\s*$")


@dataclass(frozen=True)
class ContactType:
    """A named subset of atoms for every residue type."""

    name: str
    multi_atom: bool
    res2atoms: Mapping[str, FrozenSet[str]] = field(hash=False)

    def get_atoms(self, residue_type: str) -> FrozenSet[str]:
        """Atom names of the given 3-letter residue type (empty if none)."""
        return self.res2atoms.get(residue_type, frozenset())

    def is_valid_atom(self, residue_type: str, atom_name: str) -> bool:
        return atom_name in self.get_atoms(residue_type)


@dataclass(frozen=True)
class ContactTypeSpec:
    """A parsed and validated contact type string.

    Attributes:
        name: The original string, e.g. ``"BB/SC+Ca"``
        components: One (i, j) pair of definition names per ``+`` component;
            i == j for non-crossed components
        crossed: True if any component uses ``/``
    """

    name: str
    components: Tuple[Tuple[str, str], ...]
    crossed: bool

    @property
    def definition_names(self) -> List[str]:
        names: List[str] = []
        for i_name, j_name in self.components:
            names.append(i_name)
            if j_name != i_name:
                names.append(j_name)
        return names

    @staticmethod
    def component_string(component: Tuple[str, str]) -> str:
        i_name, j_name = component
        if i_name == j_name:
            return i_name
        return f"{i_name}{CROSSED_SEPARATOR}{j_name}"


class ContactTypeDictionary:
    """Immutable lookup of contact type definitions."""

    def __init__(self, contact_types: Iterable[ContactType]):
        types: Dict[str, ContactType] = {}
        for contact_type in contact_types:
            types[contact_type.name] = contact_type
        self._types = MappingProxyType(dict(sorted(types.items())))

    # ----------------------------------------------------------- constructors

    @classmethod
    def from_resource(cls) -> "ContactTypeDictionary":
        """Load the contact types shipped with the package."""
        text = (
            resources.files(RESOURCE_PACKAGE)
            .joinpath(RESOURCE_NAME)
            .read_text(encoding="utf-8")
        )
        dictionary = cls.from_lines(text.splitlines())
        logger.debug(f"Loaded {len(dictionary)} contact types from package resource")
        return dictionary

    @classmethod
    def from_file(cls, path: str) -> "ContactTypeDictionary":
        with open(path, "r") as f:
            return cls.from_lines(f.readlines())

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "ContactTypeDictionary":
        """
        Parse contact type definitions.

        Args:
            lines: Lines of a definitions file (``> NAME single|multi`` headers
                followed by ``RES ATOM ATOM ...`` lines)

        Returns:
            The parsed dictionary

        Raises:
            InvalidContactTypeError: If the definitions are malformed
        """
        parsed: List[ContactType] = []
        name: Optional[str] = None
        multi_atom = False
        res2atoms: Dict[str, Set[str]] = {}

        def close_current() -> None:
            if name is not None:
                frozen = {res: frozenset(atoms) for res, atoms in res2atoms.items()}
                parsed.append(ContactType(name, multi_atom, MappingProxyType(frozen)))

        for line_num, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith(">"):
                match = _HEADER_PATTERN.match(line)
                if not match or match.group(2) not in ("single", "multi"):
                    raise InvalidContactTypeError(
                        f"Malformed contact type header at line {line_num}: {line!r}"
                    )
                close_current()
                name = match.group(1)
                multi_atom = match.group(2) == "multi"
                res2atoms = {}
                continue
            if name is None:
                raise InvalidContactTypeError(
                    f"Residue line before any contact type header at line {line_num}"
                )
            tokens = line.split()
            res2atoms.setdefault(tokens[0].upper(), set()).update(tokens[1:])
        close_current()
        return cls(parsed)

    # ---------------------------------------------------------------- lookups

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def names(self) -> List[str]:
        return list(self._types)

    def get(self, name: str) -> ContactType:
        try:
            return self._types[name]
        except KeyError:
            raise InvalidContactTypeError(f"Unknown contact type {name!r}") from None

    def get_atoms(self, name: str, residue_type: str) -> FrozenSet[str]:
        """
        Atom names to use for a residue under a contact type definition.

        e.g. for ``("SC", "SER")`` returns ``{"CB", "OG"}``
        """
        return self.get(name).get_atoms(residue_type)

    def single_atom_types(self) -> Set[str]:
        return {n for n, ct in self._types.items() if not ct.multi_atom}

    def multi_atom_types(self) -> Set[str]:
        return {n for n, ct in self._types.items() if ct.multi_atom}

    # ------------------------------------------------------------- validation

    def parse(self, contact_type: str) -> ContactTypeSpec:
        """
        Validate a contact type string.

        Raises:
            InvalidContactTypeError: For empty components, malformed crossed
                syntax (``"X/"``, ``"/Y"``, ``"X/Y/Z"``) or unknown names
        """
        if not contact_type or contact_type != contact_type.strip():
            raise InvalidContactTypeError(f"Invalid contact type {contact_type!r}")

        components: List[Tuple[str, str]] = []
        crossed = False
        for part in contact_type.split(UNION_SEPARATOR):
            sides = part.split(CROSSED_SEPARATOR)
            if len(sides) > 2 or any(not side for side in sides):
                raise InvalidContactTypeError(
                    f"Malformed contact type component {part!r} in {contact_type!r}"
                )
            for side in sides:
                if side not in self._types:
                    raise InvalidContactTypeError(
                        f"Unknown contact type {side!r} in {contact_type!r}"
                    )
            if len(sides) == 2:
                crossed = True
                components.append((sides[0], sides[1]))
            else:
                components.append((sides[0], sides[0]))
        return ContactTypeSpec(contact_type, tuple(components), crossed)

    def is_valid(self, contact_type: str) -> bool:
        try:
            self.parse(contact_type)
        except InvalidContactTypeError:
            return False
        return True

    def is_valid_single_atom(self, contact_type: str, directed: Optional[bool] = None) -> bool:
        """True for a single atom type, or a crossed pair of them if directed."""
        if directed is None:
            directed = CROSSED_SEPARATOR in contact_type
        if UNION_SEPARATOR in contact_type or not self.is_valid(contact_type):
            return False
        sides = contact_type.split(CROSSED_SEPARATOR)
        if len(sides) == 2 and not directed:
            return False
        return all(side in self.single_atom_types() for side in sides)

    def is_valid_multi_atom(self, contact_type: str, directed: Optional[bool] = None) -> bool:
        if directed is None:
            directed = CROSSED_SEPARATOR in contact_type
        if not self.is_valid(contact_type):
            return False
        if UNION_SEPARATOR in contact_type:
            return True
        sides = contact_type.split(CROSSED_SEPARATOR)
        if len(sides) == 2 and not directed:
            return True
        return all(side in self.multi_atom_types() for side in sides)

    def is_overlapping(self, contact_type: str) -> bool:
        """True if any two definitions in the string share an atom of some residue."""
        names = self.parse(contact_type).definition_names
        if len(names) < 2 and CROSSED_SEPARATOR in contact_type:
            # X/X shares every atom with itself
            return True
        for idx, first in enumerate(names):
            for second in names[idx + 1 :]:
                ct1 = self.get(first)
                ct2 = self.get(second)
                for residue_type, atoms in ct1.res2atoms.items():
                    if atoms & ct2.get_atoms(residue_type):
                        return True
        return False
