#!/usr/bin/env python3
# src/contactgraph/core/domain/models/protein_graph.py

"""
Domain model representing a protein interaction graph.

A ProteinGraph is a labeled graph keyed by serial number: atom serials for
atom interaction graphs (AIG), residue serials for residue interaction graphs
(RIG). Graphs are frozen once built; all changes go through a GraphBuilder
that accumulates into a fresh networkx graph.
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

import networkx as nx

from ...exceptions import InvalidContactTypeError
from .amino_acids import one_to_three
from .atom import Atom
from .contact_type import CROSSED_SEPARATOR
from .edges import AIGEdge, RIGEdge
from .residue import Residue

N = TypeVar("N")
E = TypeVar("E")

PAYLOAD = "payload"


@dataclass(frozen=True)
class GraphMetadata:
    """Provenance of a graph.

    Attributes:
        sequence: Full sequence including unobserved residues
        structure_id: Identifier of the source structure
        chain_id: Chain identifier
        model: Model number
        contact_type: Contact type string (``/`` marks a crossed type)
        cutoff: Distance cutoff in Angstroms
        directed: Whether i -> j ordering is significant
    """

    sequence: str = ""
    structure_id: Optional[str] = None
    chain_id: Optional[str] = None
    model: int = 1
    contact_type: Optional[str] = None
    cutoff: float = 0.0
    directed: bool = False

    def __post_init__(self):
        if (
            self.directed
            and self.contact_type is not None
            and CROSSED_SEPARATOR not in self.contact_type
        ):
            raise InvalidContactTypeError(
                f"Contact type {self.contact_type!r} is not crossed, graph cannot be directed"
            )

    def with_changes(self, **changes) -> "GraphMetadata":
        return replace(self, **changes)


class ProteinGraph(Generic[N, E]):
    """Read-only interaction graph with serial -> node lookup."""

    def __init__(self, graph: nx.Graph, metadata: GraphMetadata):
        """
        Wrap a networkx graph.

        Args:
            graph: Graph whose nodes are serials with a ``payload`` attribute
                and whose edges carry a ``payload`` attribute. It is frozen in place.
            metadata: Provenance of the graph
        """
        if graph.is_directed() != metadata.directed:
            raise ValueError("Graph directedness does not match its metadata")
        self._graph = nx.freeze(graph)
        self.metadata = metadata

    def __repr__(self) -> str:
        return (
            f"ProteinGraph(ct={self.contact_type!r}, cutoff={self.cutoff}, "
            f"nodes={self.obs_length}, edges={self.num_edges}, directed={self.directed})"
        )

    # --------------------------------------------------------------- metadata

    @property
    def sequence(self) -> str:
        return self.metadata.sequence

    @property
    def structure_id(self) -> Optional[str]:
        return self.metadata.structure_id

    @property
    def chain_id(self) -> Optional[str]:
        return self.metadata.chain_id

    @property
    def model(self) -> int:
        return self.metadata.model

    @property
    def contact_type(self) -> Optional[str]:
        return self.metadata.contact_type

    @property
    def cutoff(self) -> float:
        return self.metadata.cutoff

    @property
    def directed(self) -> bool:
        return self.metadata.directed

    @property
    def full_length(self) -> int:
        return len(self.metadata.sequence)

    @property
    def obs_length(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def num_edges(self) -> int:
        return self._graph.number_of_edges()

    def to_networkx(self) -> nx.Graph:
        """The underlying frozen networkx graph."""
        return self._graph

    # ------------------------------------------------------------------ nodes

    def serials(self) -> List[int]:
        return sorted(self._graph.nodes)

    def nodes(self) -> List[N]:
        return [self._graph.nodes[serial][PAYLOAD] for serial in self.serials()]

    def has_node(self, serial: int) -> bool:
        return serial in self._graph

    def get_node(self, serial: int) -> Optional[N]:
        if serial not in self._graph:
            return None
        return self._graph.nodes[serial][PAYLOAD]

    # ------------------------------------------------------------------ edges

    def _iter_edges(self) -> Iterator[Tuple[int, int, E]]:
        for i, j, data in self._graph.edges(data=True):
            if not self.directed and i > j:
                i, j = j, i
            yield i, j, data[PAYLOAD]

    def edges(self) -> List[Tuple[int, int, E]]:
        """All edges as (i, j, payload), ascending; undirected edges as (min, max)."""
        return sorted(self._iter_edges(), key=lambda edge: (edge[0], edge[1]))

    def contacts(self) -> List[Tuple[int, int]]:
        return [(i, j) for i, j, _ in self.edges()]

    def find_edge(self, i: int, j: int) -> Optional[E]:
        """Payload of edge i -> j (either orientation if undirected), None if absent."""
        data = self._graph.get_edge_data(i, j)
        if data is None:
            return None
        return data[PAYLOAD]

    def has_edge(self, i: int, j: int) -> bool:
        return self._graph.has_edge(i, j)

    def has_weighted_edges(self) -> bool:
        """True if at least one edge weight lies strictly between 0 and 1."""
        for _, _, edge in self._iter_edges():
            weight = getattr(edge, "weight", None)
            if weight is not None and 0 < weight < 1:
                return True
        return False

    # ----------------------------------------------------------- neighborhood

    def neighbors(self, serial: int) -> List[int]:
        """Neighbor serials in ascending order (both in and out neighbors if directed)."""
        if self.directed:
            nbs = set(self._graph.successors(serial)) | set(self._graph.predecessors(serial))
        else:
            nbs = set(self._graph.neighbors(serial))
        return sorted(nbs)

    def get_common_neighbors(self, i: int, j: int) -> List[int]:
        return sorted(set(self.neighbors(i)) & set(self.neighbors(j)))

    def get_second_shell_neighbors(self, serial: int) -> List[int]:
        """Neighbors of neighbors of a node, excluding the node itself."""
        shell = set()
        for nb in self.neighbors(serial):
            shell.update(self.neighbors(nb))
        shell.discard(serial)
        return sorted(shell)

    def get_all_common_nbh_sizes(self) -> Dict[Tuple[int, int], int]:
        """
        Common neighborhood size of every node pair that has one.

        Pairs are (i, j) with i < j for undirected graphs and every ordered
        pair i != j for directed graphs.

        Returns:
            Mapping of node pair to number of common neighbors (> 0 only)
        """
        sizes: Dict[Tuple[int, int], int] = defaultdict(int)
        for k in self._graph.nodes:
            nbs = self.neighbors(k)
            for a in nbs:
                for b in nbs:
                    if a == b or (not self.directed and a > b):
                        continue
                    sizes[(a, b)] += 1
        return dict(sorted(sizes.items()))

    # ----------------------------------------------------------------- ranges

    def get_contact_range(self, i: int, j: int) -> int:
        """Sequence separation between the residues of nodes i and j."""
        first = self.get_node(i)
        second = self.get_node(j)
        if first is None or second is None:
            raise KeyError(f"No node for serial {i if first is None else j}")
        return abs(first.residue_serial - second.residue_serial)

    def get_contact_order(self) -> float:
        """Average contact range divided by the number of observed residues."""
        if self.num_edges == 0 or self.obs_length == 0:
            return 0.0
        range_sum = sum(self.get_contact_range(i, j) for i, j, _ in self._iter_edges())
        return range_sum / (self.obs_length * self.num_edges)


AIGraph = ProteinGraph[Atom, AIGEdge]
RIGraph = ProteinGraph[Residue, RIGEdge]


class GraphBuilder(Generic[N, E]):
    """Mutable accumulator producing frozen ProteinGraphs.

    Each call to build() returns an independent graph, so a builder can keep
    accumulating afterwards without touching graphs already handed out.
    """

    def __init__(self, metadata: GraphMetadata):
        self._metadata = metadata
        self._graph = nx.DiGraph() if metadata.directed else nx.Graph()

    @classmethod
    def from_graph(
        cls, graph: ProteinGraph[N, E], metadata: Optional[GraphMetadata] = None
    ) -> "GraphBuilder[N, E]":
        """
        Start from the nodes and edges of an existing graph.

        Args:
            graph: Graph to copy
            metadata: Metadata of the new graph (defaults to the source's). When
                it is directed and the source is not, edges keep (min, max) order.
        """
        builder = cls(metadata or graph.metadata)
        for serial in graph.serials():
            builder.add_node(serial, graph.get_node(serial))
        for i, j, edge in graph.edges():
            builder.add_edge(i, j, edge)
        return builder

    @property
    def metadata(self) -> GraphMetadata:
        return self._metadata

    @property
    def directed(self) -> bool:
        return self._metadata.directed

    def set_metadata(self, metadata: GraphMetadata) -> None:
        if metadata.directed != self._metadata.directed:
            raise ValueError("Cannot change directedness of a graph being built")
        self._metadata = metadata

    @property
    def num_edges(self) -> int:
        return self._graph.number_of_edges()

    def add_node(self, serial: int, payload: N) -> bool:
        """Add a node; returns False if the serial is already present."""
        if serial in self._graph:
            return False
        self._graph.add_node(serial, **{PAYLOAD: payload})
        return True

    def has_node(self, serial: int) -> bool:
        return serial in self._graph

    def get_node(self, serial: int) -> Optional[N]:
        if serial not in self._graph:
            return None
        return self._graph.nodes[serial][PAYLOAD]

    def add_edge(self, i: int, j: int, payload: E) -> bool:
        """
        Add edge i -> j unless it already exists.

        Returns:
            True if added; False if i == j, a node is missing or the edge exists
        """
        if i == j or i not in self._graph or j not in self._graph:
            return False
        if self._graph.has_edge(i, j):
            return False
        self._graph.add_edge(i, j, **{PAYLOAD: payload})
        return True

    def set_edge(self, i: int, j: int, payload: E) -> None:
        """Add edge i -> j or replace its payload."""
        if i == j:
            raise ValueError(f"Self contact {i}-{j} not allowed")
        for serial in (i, j):
            if serial not in self._graph:
                raise KeyError(f"No node for serial {serial}")
        self._graph.add_edge(i, j, **{PAYLOAD: payload})

    def find_edge(self, i: int, j: int) -> Optional[E]:
        data = self._graph.get_edge_data(i, j)
        if data is None:
            return None
        return data[PAYLOAD]

    def remove_edge(self, i: int, j: int) -> bool:
        if not self._graph.has_edge(i, j):
            return False
        self._graph.remove_edge(i, j)
        return True

    def remove_all_edges(self) -> None:
        self._graph.remove_edges_from(list(self._graph.edges))

    def build(self) -> ProteinGraph[N, E]:
        return ProteinGraph(self._graph.copy(), self._metadata)


def rig_builder_for_sequence(metadata: GraphMetadata) -> GraphBuilder[Residue, RIGEdge]:
    """
    Builder of an edgeless RIG with one node per position of the sequence.

    Node residue types come from the one letter codes of the sequence.
    """
    builder: GraphBuilder[Residue, RIGEdge] = GraphBuilder(metadata)
    for serial, letter in enumerate(metadata.sequence, start=1):
        builder.add_node(serial, Residue(serial=serial, residue_type=one_to_three(letter)))
    return builder
