#!/usr/bin/env python3
# src/contactgraph/core/domain/models/contact_map.py

"""
Dense residue x residue contact map with common neighborhood analytics.

Positions are residue serials 1..L of the full sequence, unobserved and
non-standard residues included. Cells touching such residues are SKIPPED
and never take part in contact accounting.

Common neighbors follow upper triangle semantics: with U the contact cells
i < j and S = U | U.T, the common neighbors of (i, j) are
``{k != i, j : S[i, k] and S[j, k]}``. Their counts for every cell are
computed eagerly as the matrix product S @ S, an O(L^3) operation done with
BLAS; member sets are built on demand from the matrix and memoized.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from ...exceptions import InconsistentInputError
from ...utils.benchmarking import Timer
from .edges import RIGEdge
from .protein_graph import ProteinGraph
from .residue import Residue

logger = logging.getLogger(__name__)


class EdgeState(Enum):
    """State of a contact map cell."""

    NON_CONTACT = 0
    CONTACT = 1
    SKIPPED = 2

    @property
    def is_contact(self) -> bool:
        try:
            return _IS_CONTACT[self]
        except KeyError:
            raise ValueError(f"Edge state {self.name} has no contact mapping") from None


_IS_CONTACT: Dict[EdgeState, bool] = {
    EdgeState.NON_CONTACT: False,
    EdgeState.CONTACT: True,
    EdgeState.SKIPPED: False,
}

# Indexed by EdgeState value, so a state matrix maps to its contact mask in one lookup
_CONTACT_LOOKUP = np.array(
    [EdgeState(value).is_contact for value in range(len(EdgeState))], dtype=bool
)


class ContactMap:
    """Contact map over positions 1..L.

    Attributes:
        sequence: Full sequence (``X`` for unobserved or non-standard residues)
        residues: Observed standard residues, serial -> one letter type
        reuses_cache: True while the common neighbor counts are shared with
            the map this one was copied from
    """

    def __init__(
        self,
        contacts: Iterable[Tuple[int, int]],
        residues: Mapping[int, str],
        sequence: str,
    ):
        """
        Build a contact map from a contact list.

        Args:
            contacts: Contacts as (i, j) residue serials; undirected data is
                given in both orders, each pair marks both cells
            residues: Observed standard residues, serial -> one letter type
            sequence: Full sequence

        Raises:
            InconsistentInputError: If a contact touches a position outside
                1..L or a residue not in ``residues``
        """
        self.sequence = sequence
        self.residues: Mapping[int, str] = MappingProxyType(dict(sorted(residues.items())))

        length = len(sequence)
        for serial in self.residues:
            if not 1 <= serial <= length:
                raise InconsistentInputError(
                    f"Residue serial {serial} outside sequence of length {length}"
                )
        observed = np.zeros(length, dtype=bool)
        observed[[serial - 1 for serial in self.residues]] = True

        state = np.full((length, length), EdgeState.SKIPPED.value, dtype=np.int8)
        state[np.ix_(observed, observed)] = EdgeState.NON_CONTACT.value
        for i, j in contacts:
            if i == j or not (i in self.residues and j in self.residues):
                raise InconsistentInputError(
                    f"Contact ({i}, {j}) is a self contact or touches a skipped residue"
                )
            state[i - 1, j - 1] = EdgeState.CONTACT.value
            state[j - 1, i - 1] = EdgeState.CONTACT.value

        self._set_state(state)

    @classmethod
    def from_graph(cls, graph: ProteinGraph[Residue, RIGEdge]) -> "ContactMap":
        """Contact map of a residue interaction graph."""
        residues = {
            node.serial: node.one_letter_code for node in graph.nodes() if node.is_standard
        }
        contacts: List[Tuple[int, int]] = []
        for i, j in graph.contacts():
            if i in residues and j in residues:
                contacts.append((i, j))
            else:
                logger.warning(f"Skipping contact ({i}, {j}) to a non-standard residue")
        return cls(contacts, residues, graph.sequence)

    def _set_state(self, state: np.ndarray) -> None:
        self._state = state
        self._recompute_counts()

    def _recompute_counts(self) -> None:
        with Timer("common neighbor counts") as timer:
            adjacency = self._contact_mask().astype(np.float64)
            counts = np.rint(adjacency @ adjacency).astype(np.int32)
            np.fill_diagonal(counts, 0)
        logger.debug(f"Common neighbor counts for L={self.length} in {timer.elapsed():.3f}s")
        self._counts = counts
        self._counts_shared = False
        self._cn_sets: Dict[Tuple[int, int], Dict[int, str]] = {}
        self.reuses_cache = False

    def _derive(self, state: np.ndarray) -> "ContactMap":
        """New map sharing this map's metadata with its own matrix and counts."""
        new_map = ContactMap.__new__(ContactMap)
        new_map.sequence = self.sequence
        new_map.residues = self.residues
        new_map._set_state(state)
        return new_map

    def _contact_mask(self) -> np.ndarray:
        return _CONTACT_LOOKUP[self._state]

    def _upper_contact_mask(self) -> np.ndarray:
        return np.triu(self._contact_mask(), k=1)

    def _check_position(self, serial: int) -> int:
        if not 1 <= serial <= self.length:
            raise IndexError(f"Position {serial} outside 1..{self.length}")
        return serial - 1

    def _check_same_length(self, other: "ContactMap") -> None:
        if other.length != self.length:
            raise InconsistentInputError(
                f"Contact maps of different lengths ({self.length} vs {other.length})"
            )

    # ------------------------------------------------------------------ sizes

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def num_obs_standard(self) -> int:
        return len(self.residues)

    @property
    def total_cells(self) -> int:
        """Number of cells above the diagonal."""
        return self.length * (self.length - 1) // 2

    @property
    def effective_cells(self) -> int:
        """Number of cells above the diagonal that are not SKIPPED."""
        return self.num_obs_standard * (self.num_obs_standard - 1) // 2

    # ----------------------------------------------------------------- states

    def state(self, i: int, j: int) -> EdgeState:
        return EdgeState(int(self._state[self._check_position(i), self._check_position(j)]))

    def is_contact(self, i: int, j: int) -> bool:
        return self.state(i, j).is_contact

    @property
    def num_contacts(self) -> int:
        return int(np.count_nonzero(self._upper_contact_mask()))

    def has_no_contacts(self) -> bool:
        return not self._upper_contact_mask().any()

    def contacts(self) -> List[Tuple[int, int]]:
        """Contacts (i, j) with i < j, ascending."""
        rows, cols = np.nonzero(self._upper_contact_mask())
        return [(int(i) + 1, int(j) + 1) for i, j in zip(rows, cols)]

    def get_cm_stats(self, diagonal: int = 1) -> Tuple[int, int, int]:
        """
        Cell counts on and above a diagonal.

        Args:
            diagonal: Minimum sequence separation j - i (values below 1 count as 1)

        Returns:
            Number of CONTACT, NON_CONTACT and SKIPPED cells
        """
        upper = np.triu(np.ones_like(self._state, dtype=bool), k=max(1, diagonal))
        cells = self._state[upper]
        return (
            int(np.count_nonzero(cells == EdgeState.CONTACT.value)),
            int(np.count_nonzero(cells == EdgeState.NON_CONTACT.value)),
            int(np.count_nonzero(cells == EdgeState.SKIPPED.value)),
        )

    # ------------------------------------------------------ common neighbors

    def common_neighbor_count(self, i: int, j: int) -> int:
        return int(self._counts[self._check_position(i), self._check_position(j)])

    def get_common_neighbors(self, i: int, j: int) -> Dict[int, str]:
        """
        Common neighbors of cell (i, j), contact or not.

        Returns:
            Ascending mapping of neighbor serial to one letter type; empty
            if there are none
        """
        key = (min(i, j), max(i, j))
        if self.common_neighbor_count(i, j) == 0:
            return {}
        if key not in self._cn_sets:
            mask = self._contact_mask()
            members = np.flatnonzero(mask[key[0] - 1] & mask[key[1] - 1])
            self._cn_sets[key] = {
                int(k) + 1: self.sequence[k] for k in members if k + 1 not in key
            }
        return dict(self._cn_sets[key])

    def get_common_neighbors_by_range(
        self, i: int, j: int, diagonal: Optional[int] = None, above: bool = True
    ) -> Dict[int, str]:
        """
        Common neighbors of (i, j) on one side of a diagonal.

        Args:
            i: First position
            j: Second position
            diagonal: Separation threshold, defaults to |i - j|
            above: Keep neighbors k with |k - i| and |k - j| both >= diagonal;
                if False keep those with both <= diagonal
        """
        if diagonal is None:
            diagonal = abs(i - j)
        selected = {}
        for k, residue_type in self.get_common_neighbors(i, j).items():
            if above:
                keep = abs(k - i) >= diagonal and abs(k - j) >= diagonal
            else:
                keep = abs(k - i) <= diagonal and abs(k - j) <= diagonal
            if keep:
                selected[k] = residue_type
        return selected

    def get_all_common_neighbors(self) -> Dict[Tuple[int, int], Dict[int, str]]:
        """Common neighbors of every cell i < j that has any."""
        rows, cols = np.nonzero(np.triu(self._counts, k=1))
        return {
            (int(i) + 1, int(j) + 1): self.get_common_neighbors(int(i) + 1, int(j) + 1)
            for i, j in zip(rows, cols)
        }

    def cell_has_n_common_neighbors(self, i: int, j: int, n: int) -> bool:
        """At least n common neighbors, or none at all when n is 0."""
        count = self.common_neighbor_count(i, j)
        if n == 0:
            return count == 0
        return count >= n

    def num_contacts_with_n_common_neighbors(self, n: int, diagonal: int = 1) -> int:
        """Contacts on or above a diagonal satisfying cell_has_n_common_neighbors."""
        upper = np.triu(self._contact_mask(), k=max(1, diagonal))
        counts = self._counts[upper]
        if n == 0:
            return int(np.count_nonzero(counts == 0))
        return int(np.count_nonzero(counts >= n))

    # ------------------------------------------------------ incremental update

    def add_contact(self, i: int, j: int, below: bool = False) -> None:
        """
        Set cell (i, j) to CONTACT in place, updating only the affected counts.

        Adding i-j makes j a common neighbor of every (i, k) with k a neighbor
        of j, and i a common neighbor of every (j, k) with k a neighbor of i.

        Args:
            i: First position
            j: Second position
            below: Known contacts all have separation <= |i - j|, so only
                neighbors inside that window around i and j are scanned

        Raises:
            InconsistentInputError: If the cell is SKIPPED or i == j
        """
        ii, jj = self._check_position(i), self._check_position(j)
        if ii == jj or self._state[ii, jj] == EdgeState.SKIPPED.value:
            raise InconsistentInputError(f"Cannot set contact on cell ({i}, {j})")
        if self._state[ii, jj] == EdgeState.CONTACT.value:
            return

        if self._counts_shared:
            self._counts = self._counts.copy()
            self._counts_shared = False
            self.reuses_cache = False

        mask = self._contact_mask()
        nbs_of_i = np.flatnonzero(mask[ii])
        nbs_of_j = np.flatnonzero(mask[jj])
        if below:
            window = abs(ii - jj)
            nbs_of_i = nbs_of_i[np.abs(nbs_of_i - ii) <= window]
            nbs_of_j = nbs_of_j[np.abs(nbs_of_j - jj) <= window]

        self._counts[ii, nbs_of_j] += 1
        self._counts[nbs_of_j, ii] += 1
        self._counts[jj, nbs_of_i] += 1
        self._counts[nbs_of_i, jj] += 1

        self._state[ii, jj] = EdgeState.CONTACT.value
        self._state[jj, ii] = EdgeState.CONTACT.value
        self._cn_sets = {}

    # ------------------------------------------------------------ set algebra

    def _with_contacts(self, contact_mask: np.ndarray) -> "ContactMap":
        """Derived map with the given symmetric contact mask on non-SKIPPED cells."""
        skipped = self._state == EdgeState.SKIPPED.value
        state = np.where(contact_mask, EdgeState.CONTACT.value, EdgeState.NON_CONTACT.value)
        state = np.where(skipped, EdgeState.SKIPPED.value, state).astype(np.int8)
        return self._derive(state)

    def add(self, other: "ContactMap") -> "ContactMap":
        """Set union of the contacts of both maps."""
        self._check_same_length(other)
        return self._with_contacts(self._contact_mask() | other._contact_mask())

    def subtract(self, other: "ContactMap") -> "ContactMap":
        """Contacts of this map that are not contacts of the other."""
        self._check_same_length(other)
        return self._with_contacts(self._contact_mask() & ~other._contact_mask())

    def get_reachable(self, other: "ContactMap") -> "ContactMap":
        """Contacts of this map that have at least one common neighbor in the other."""
        self._check_same_length(other)
        return self._with_contacts(self._contact_mask() & (other._counts > 0))

    def cut_to_below_range(self, diagonal: int) -> "ContactMap":
        """Contacts with sequence separation strictly below the diagonal."""
        positions = np.arange(self.length)
        separation = np.abs(positions[:, None] - positions[None, :])
        return self._with_contacts(self._contact_mask() & (separation < diagonal))

    # ------------------------------------------------------------ comparisons

    def copy(self) -> "ContactMap":
        """Copy with its own matrix that shares the common neighbor counts until changed."""
        new_map = ContactMap.__new__(ContactMap)
        new_map.sequence = self.sequence
        new_map.residues = self.residues
        new_map._state = self._state.copy()
        new_map._counts = self._counts
        new_map._counts_shared = True
        new_map._cn_sets = {}
        new_map.reuses_cache = True
        self._counts_shared = True
        return new_map

    def has_same_contacts(self, other: "ContactMap") -> bool:
        """Same CONTACT cells above the diagonal, SKIPPED counted as non-contact."""
        if other.length != self.length:
            return False
        return bool(np.array_equal(self._upper_contact_mask(), other._upper_contact_mask()))

    def __repr__(self) -> str:
        return f"ContactMap(L={self.length}, observed={self.num_obs_standard}, contacts={self.num_contacts})"
