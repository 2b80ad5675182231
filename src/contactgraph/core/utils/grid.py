"""
Uniform grid for finding point pairs within a distance cutoff.

Points are bucketed into cubic cells whose edge is at least the cutoff, so
every pair within the cutoff lies in the same or in adjacent cells. Distances
are then only computed inside each cell and between neighboring cells.
"""

import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..exceptions import InvalidCutoffError

logger = logging.getLogger(__name__)

# Coordinates are scaled to integer hundredths of Angstrom before bucketing
SCALE = 100

CellKey = Tuple[int, int, int]

# Neighbor offsets lexicographically after (0, 0, 0): visiting only these
# from every cell processes each unordered pair of adjacent cells once
HALF_SHELL: List[CellKey] = [
    offset
    for offset in itertools.product((-1, 0, 1), repeat=3)
    if offset > (0, 0, 0)
]

FULL_SHELL: List[CellKey] = [
    offset for offset in itertools.product((-1, 0, 1), repeat=3) if offset != (0, 0, 0)
]


def check_cutoff(cutoff: float) -> float:
    """Return the cutoff as a float, raising InvalidCutoffError unless positive and finite."""
    if not (math.isfinite(cutoff) and cutoff > 0):
        raise InvalidCutoffError(f"Distance cutoff must be positive, got {cutoff}")
    return float(cutoff)


@dataclass
class GridCell:
    """Indices of the i and j points falling in one cell."""

    i_indices: List[int] = field(default_factory=list)
    j_indices: List[int] = field(default_factory=list)


class Grid:
    """Geometric hashing of two point sets for cutoff distance searches."""

    def __init__(self, cutoff: float):
        """
        Initialize grid.

        Args:
            cutoff: Distance cutoff in Angstroms, must be > 0

        Raises:
            InvalidCutoffError: If cutoff is not a positive finite number
        """
        self.cutoff = check_cutoff(cutoff)
        self.cell_size = math.ceil(self.cutoff * SCALE)
        self._i_coords = np.empty((0, 3))
        self._j_coords = np.empty((0, 3))
        self._same_sets = True
        self._cells: Dict[CellKey, GridCell] = {}

    def _cell_keys(self, coords: np.ndarray) -> np.ndarray:
        scaled = np.floor(coords * SCALE).astype(np.int64)
        return np.floor_divide(scaled, self.cell_size)

    @staticmethod
    def _as_points(coords) -> np.ndarray:
        points = np.asarray(coords, dtype=np.float64).reshape(-1, 3)
        if not np.all(np.isfinite(points)):
            raise ValueError("Coordinates must be finite")
        return points

    def add_points(self, i_coords, j_coords: Optional[np.ndarray] = None) -> None:
        """
        Place points in their grid cells, replacing any previous points.

        Args:
            i_coords: Array of shape (n_i, 3)
            j_coords: Array of shape (n_j, 3); the i points are used if omitted
        """
        self._i_coords = self._as_points(i_coords)
        self._same_sets = j_coords is None
        self._j_coords = self._i_coords if self._same_sets else self._as_points(j_coords)

        self._cells = {}
        for index, key in enumerate(map(tuple, self._cell_keys(self._i_coords))):
            self._cells.setdefault(key, GridCell()).i_indices.append(index)
        for index, key in enumerate(map(tuple, self._cell_keys(self._j_coords))):
            self._cells.setdefault(key, GridCell()).j_indices.append(index)
        logger.debug(
            f"Grid with cell size {self.cell_size / SCALE:.2f}A: "
            f"{len(self._i_coords)} i points, {len(self._j_coords)} j points, "
            f"{len(self._cells)} occupied cells"
        )

    @property
    def num_cells(self) -> int:
        return len(self._cells)

    def _fill(self, matrix: np.ndarray, i_indices: List[int], j_indices: List[int]) -> None:
        if not i_indices or not j_indices:
            return
        diff = self._i_coords[i_indices][:, None, :] - self._j_coords[j_indices][None, :, :]
        matrix[np.ix_(i_indices, j_indices)] = np.sqrt((diff**2).sum(axis=-1))

    def get_dist_matrix(self, crossed: bool) -> np.ndarray:
        """
        Distances between points in the same or adjacent cells.

        Args:
            crossed: True if i and j are different point sets and every (i, j)
                is wanted; False to keep only i < j of a single point set

        Returns:
            Array of shape (n_i, n_j) with NaN for pairs that were not computed.
            Computed pairs may still be farther apart than the cutoff.
        """
        if not crossed and len(self._i_coords) != len(self._j_coords):
            raise ValueError("Non-crossed distances need a single point set")

        matrix = np.full((len(self._i_coords), len(self._j_coords)), np.nan)
        for key in sorted(self._cells):
            cell = self._cells[key]
            self._fill(matrix, cell.i_indices, cell.j_indices)
            for dx, dy, dz in HALF_SHELL:
                neighbor = self._cells.get((key[0] + dx, key[1] + dy, key[2] + dz))
                if neighbor is None:
                    continue
                self._fill(matrix, cell.i_indices, neighbor.j_indices)
                self._fill(matrix, neighbor.i_indices, cell.j_indices)

        if not crossed:
            matrix[np.tril_indices(len(self._i_coords))] = np.nan
        return matrix

    def get_contacts(self, crossed: bool) -> List[Tuple[int, int, float]]:
        """All (i, j, distance) with distance <= cutoff, ascending by (i, j)."""
        matrix = self.get_dist_matrix(crossed)
        with np.errstate(invalid="ignore"):
            within = matrix <= self.cutoff
        return [(int(i), int(j), float(matrix[i, j])) for i, j in np.argwhere(within)]

    def count_density(self) -> Dict[int, int]:
        """
        Histogram of grid density.

        Returns:
            Mapping of number of occupied neighbor cells to the number of
            occupied cells having that many
        """
        density: Dict[int, int] = {}
        for key in sorted(self._cells):
            occupied = sum(
                1
                for dx, dy, dz in FULL_SHELL
                if (key[0] + dx, key[1] + dy, key[2] + dz) in self._cells
            )
            density[occupied] = density.get(occupied, 0) + 1
        return dict(sorted(density.items()))
