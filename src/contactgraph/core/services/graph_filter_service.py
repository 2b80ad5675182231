"""Filters deriving new residue interaction graphs from existing ones."""

import logging
from typing import Callable, Tuple

from ..domain.models.edges import RIGEdge
from ..domain.models.protein_graph import GraphBuilder, RIGraph

logger = logging.getLogger(__name__)

EdgePredicate = Callable[[int, int, RIGEdge], bool]


class GraphFilterService:
    """Service for range, weight and complement filtering of RIGs.

    Every filter returns a new graph with all nodes of its input.
    """

    @staticmethod
    def _keep_edges(graph: RIGraph, keep: EdgePredicate) -> RIGraph:
        builder = GraphBuilder.from_graph(graph)
        removed = 0
        for i, j, edge in graph.edges():
            if not keep(i, j, edge):
                builder.remove_edge(i, j)
                removed += 1
        logger.debug(f"Filter removed {removed} of {graph.num_edges} contacts")
        return builder.build()

    def restrict_to_min_range(self, graph: RIGraph, min_range: int) -> RIGraph:
        """Keep contacts with sequence separation >= min_range."""
        return self._keep_edges(graph, lambda i, j, _: graph.get_contact_range(i, j) >= min_range)

    def restrict_to_max_range(self, graph: RIGraph, max_range: int) -> RIGraph:
        """Keep contacts with sequence separation <= max_range."""
        return self._keep_edges(graph, lambda i, j, _: graph.get_contact_range(i, j) <= max_range)

    def filter_by_min_weight(self, graph: RIGraph, min_weight: float) -> RIGraph:
        return self._keep_edges(graph, lambda i, j, edge: edge.weight >= min_weight)

    def discretize_by_weight_cutoff(self, graph: RIGraph, weight_cutoff: float) -> RIGraph:
        """
        Keep contacts with weight >= weight_cutoff and set their weight to 1.

        Unlike filter_by_min_weight the kept edges lose their weights.
        """
        builder = GraphBuilder.from_graph(graph)
        for i, j, edge in graph.edges():
            if edge.weight < weight_cutoff:
                builder.remove_edge(i, j)
            else:
                builder.set_edge(i, j, edge.with_weight(1.0))
        return builder.build()

    def discretize_by_num_contacts(self, graph: RIGraph, top: int) -> RIGraph:
        """
        Keep the top highest weighted contacts and set their weight to 1.

        Equal weights are ordered by ascending (i, j).
        """

        def rank(edge: Tuple[int, int, RIGEdge]):
            i, j, payload = edge
            return (-payload.weight, i, j)

        ranked = sorted(graph.edges(), key=rank)
        builder = GraphBuilder.from_graph(graph)
        builder.remove_all_edges()
        for i, j, edge in ranked[: max(0, top)]:
            builder.add_edge(i, j, edge.with_weight(1.0))
        return builder.build()

    def get_complement(self, graph: RIGraph) -> RIGraph:
        """
        Graph with an edge for every absent contact between residues of the graph.

        Undirected graphs get one edge per unordered pair, directed ones one
        per ordered pair. Self contacts are never added.
        """
        builder = GraphBuilder.from_graph(graph)
        builder.remove_all_edges()
        serials = graph.serials()
        for i in serials:
            for j in serials:
                if i == j or (not graph.directed and i > j):
                    continue
                if not graph.has_edge(i, j):
                    builder.add_edge(i, j, RIGEdge())
        return builder.build()
