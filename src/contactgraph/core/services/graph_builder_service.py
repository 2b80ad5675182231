"""Service building atom and residue interaction graphs from chain coordinates."""

import logging
from typing import Dict, List, Optional

import numpy as np

from ..domain.models.atom import Atom
from ..domain.models.chain_structure import ChainStructure
from ..domain.models.contact_type import (
    UNION_SEPARATOR,
    ContactTypeDictionary,
    ContactTypeSpec,
)
from ..domain.models.edges import AIGEdge, RIGEdge
from ..domain.models.protein_graph import (
    AIGraph,
    GraphBuilder,
    GraphMetadata,
    ProteinGraph,
    RIGraph,
)
from ..domain.models.residue import Residue
from ..exceptions import (
    GraphMetadataMismatchError,
    InconsistentInputError,
    InvalidContactTypeError,
)
from ..utils.benchmarking import PerformanceStats, Timer, benchmark
from ..utils.grid import Grid, check_cutoff

logger = logging.getLogger(__name__)

ALL_ATOMS_CONTACT_TYPE = "ALL"


def _coordinates(atoms: List[Atom]) -> np.ndarray:
    return np.array([atom.coordinates for atom in atoms], dtype=float).reshape(-1, 3)


def _join_contact_types(first: Optional[str], second: Optional[str]) -> Optional[str]:
    """Union of two contact type strings, keeping each component once."""
    if first == second or second is None:
        return first
    if first is None:
        return second
    components: List[str] = []
    for contact_type in (first, second):
        for component in contact_type.split(UNION_SEPARATOR):
            if component not in components:
                components.append(component)
    return UNION_SEPARATOR.join(components)


class ContactGraphService:
    """Service for computing contact graphs of protein chains."""

    def __init__(
        self,
        dictionary: Optional[ContactTypeDictionary] = None,
        stats: Optional[PerformanceStats] = None,
    ):
        """
        Initialize service.

        Args:
            dictionary: Contact type definitions, the packaged ones by default
            stats: Optional collector of grid timings
        """
        self._dictionary = dictionary or ContactTypeDictionary.from_resource()
        self._stats = stats

    @property
    def dictionary(self) -> ContactTypeDictionary:
        return self._dictionary

    def _parse_single(self, contact_type: str) -> ContactTypeSpec:
        spec = self._dictionary.parse(contact_type)
        if len(spec.components) != 1:
            raise InvalidContactTypeError(
                f"Contact type {contact_type!r} has several components, expected one"
            )
        return spec

    def _timed_contacts(self, grid: Grid, crossed: bool, label: str):
        with Timer(f"grid {label}") as timer:
            contacts = grid.get_contacts(crossed)
        logger.debug(f"Grid search for {label} took {timer.elapsed():.3f}s")
        if self._stats is not None:
            self._stats.record(timer)
        return contacts

    def get_aig(self, chain: ChainStructure, contact_type: str, cutoff: float) -> AIGraph:
        """
        Build the atom interaction graph of a chain for one contact type component.

        Args:
            chain: Chain with coordinates
            contact_type: Single definition (``Ca``) or crossed pair (``BB/SC``)
            cutoff: Distance cutoff in Angstroms

        Returns:
            Undirected graph, or directed i -> j for crossed contact types

        Raises:
            InvalidContactTypeError: For malformed or ``+`` contact types
            InvalidCutoffError: For cutoff <= 0
        """
        spec = self._parse_single(contact_type)
        grid = Grid(cutoff)
        i_name, j_name = spec.components[0]
        crossed = spec.crossed

        i_atoms = chain.get_atoms_for_contact_type(i_name, self._dictionary)
        j_atoms = chain.get_atoms_for_contact_type(j_name, self._dictionary) if crossed else i_atoms

        builder: GraphBuilder[Atom, AIGEdge] = GraphBuilder(
            GraphMetadata(
                sequence=chain.sequence,
                structure_id=chain.structure_id,
                chain_id=chain.chain_id,
                model=chain.model,
                contact_type=contact_type,
                cutoff=cutoff,
                directed=crossed,
            )
        )
        for atom in i_atoms + (j_atoms if crossed else []):
            builder.add_node(atom.serial, atom)

        grid.add_points(_coordinates(i_atoms), _coordinates(j_atoms) if crossed else None)
        for i, j, distance in self._timed_contacts(grid, crossed, contact_type):
            first, second = i_atoms[i], j_atoms[j]
            if crossed:
                if first.serial == second.serial:
                    continue
                if builder.find_edge(second.serial, first.serial) is not None:
                    continue
            builder.add_edge(first.serial, second.serial, AIGEdge(distance))

        graph = builder.build()
        logger.debug(
            f"AIG {contact_type} at {cutoff}A: {graph.obs_length} atoms, {graph.num_edges} contacts"
        )
        return graph

    def get_all_atom_graph(self, chain: ChainStructure, cutoff: float) -> AIGraph:
        return self.get_aig(chain, ALL_ATOMS_CONTACT_TYPE, cutoff)

    def add_graphs(self, first: ProteinGraph, second: ProteinGraph) -> ProteinGraph:
        """
        Union of two graphs of the same chain.

        Nodes are merged by serial and edges by endpoints, never duplicated.
        The result is directed if either input is; an undirected edge merged
        into a directed result keeps its (min, max) orientation and is skipped
        if either orientation is already present. Inputs are not modified.

        Raises:
            GraphMetadataMismatchError: If cutoff, sequence, structure id or
                chain id differ
        """
        for attribute in ("cutoff", "sequence", "structure_id", "chain_id"):
            first_value = getattr(first.metadata, attribute)
            second_value = getattr(second.metadata, attribute)
            if first_value != second_value:
                logger.warning(
                    f"Graphs to merge differ in {attribute}: {first_value!r} vs {second_value!r}"
                )
                raise GraphMetadataMismatchError(
                    f"Cannot merge graphs with different {attribute}"
                )

        directed = first.directed or second.directed
        metadata = first.metadata.with_changes(
            contact_type=_join_contact_types(first.contact_type, second.contact_type),
            directed=directed,
        )
        builder = GraphBuilder(metadata)
        for graph in (first, second):
            for serial in graph.serials():
                builder.add_node(serial, graph.get_node(serial))
        for graph in (first, second):
            for i, j, edge in graph.edges():
                if directed and not graph.directed and builder.find_edge(j, i) is not None:
                    continue
                builder.add_edge(i, j, edge)
        return builder.build()

    def collapse(self, aig: AIGraph, directed: Optional[bool] = None) -> RIGraph:
        """
        Collapse an atom graph to residue granularity.

        Each residue edge counts its atom contacts in ``atom_weight`` and keeps
        their minimum ``distance``. Atom contacts within one residue are dropped.

        Args:
            aig: Atom interaction graph
            directed: Directedness of the result, that of the AIG by default.
                When directed, i is the residue of the edge's first atom.

        Raises:
            InconsistentInputError: If a directed result is asked from an undirected AIG
        """
        if directed is None:
            directed = aig.directed
        if directed and not aig.directed:
            raise InconsistentInputError("Cannot collapse an undirected AIG to a directed RIG")

        builder: GraphBuilder[Residue, RIGEdge] = GraphBuilder(
            aig.metadata.with_changes(directed=directed)
        )
        for atom in aig.nodes():
            builder.add_node(atom.residue_serial, atom.residue)

        for i, j, edge in aig.edges():
            i_res = aig.get_node(i).residue_serial
            j_res = aig.get_node(j).residue_serial
            if i_res == j_res:
                continue
            existing = builder.find_edge(i_res, j_res)
            if existing is None:
                builder.set_edge(i_res, j_res, RIGEdge(atom_weight=1, distance=edge.distance))
            else:
                builder.set_edge(i_res, j_res, existing.with_atom_contact(edge.distance))
        return builder.build()

    @benchmark
    def get_rig(
        self,
        chain: ChainStructure,
        contact_type: str,
        cutoff: float,
        directed: Optional[bool] = None,
    ) -> RIGraph:
        """
        Build the residue interaction graph of a chain.

        Args:
            chain: Chain with coordinates
            contact_type: Contact type string, ``+`` unions allowed
            cutoff: Distance cutoff in Angstroms
            directed: Whether i -> j order is kept. Defaults to True for
                crossed contact types whose definitions don't share atoms.

        Raises:
            InvalidContactTypeError: For malformed contact types, or directed
                asked for a non-crossed or overlapping crossed type
            InvalidCutoffError: For cutoff <= 0
        """
        spec = self._dictionary.parse(contact_type)
        overlapping = self._dictionary.is_overlapping(contact_type)
        if directed is None:
            directed = spec.crossed and not overlapping
        elif directed and not spec.crossed:
            raise InvalidContactTypeError(
                f"Contact type {contact_type!r} is not crossed, graph cannot be directed"
            )
        elif directed and overlapping:
            raise InvalidContactTypeError(
                f"Crossed contact type {contact_type!r} overlaps, graph cannot be directed"
            )
        check_cutoff(cutoff)

        aig: Optional[AIGraph] = None
        for component in spec.components:
            component_aig = self.get_aig(chain, ContactTypeSpec.component_string(component), cutoff)
            aig = component_aig if aig is None else self.add_graphs(aig, component_aig)

        rig = self.collapse(aig, directed)
        rig = GraphBuilder.from_graph(
            rig, rig.metadata.with_changes(contact_type=contact_type, cutoff=cutoff)
        ).build()
        logger.info(
            f"RIG {contact_type} at {cutoff}A for {chain.structure_id or ''}{chain.chain_id or ''}: "
            f"{rig.obs_length} residues, {rig.num_edges} contacts"
        )
        return rig

    def calc_grid_density(
        self, chain: ChainStructure, contact_type: str, cutoff: float
    ) -> Dict[int, int]:
        """
        Grid density of the atoms selected by a contact type.

        Returns:
            Mapping of number of occupied neighbor cells to number of cells
        """
        spec = self._parse_single(contact_type)
        grid = Grid(cutoff)
        i_name, j_name = spec.components[0]
        i_atoms = chain.get_atoms_for_contact_type(i_name, self._dictionary)
        if spec.crossed:
            j_atoms = chain.get_atoms_for_contact_type(j_name, self._dictionary)
            grid.add_points(_coordinates(i_atoms), _coordinates(j_atoms))
        else:
            grid.add_points(_coordinates(i_atoms))
        return grid.count_density()
