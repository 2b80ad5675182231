import networkx as nx
import pytest

from contactgraph.core.domain.models.edges import RIGEdge
from contactgraph.core.domain.models.protein_graph import GraphBuilder, GraphMetadata, ProteinGraph
from contactgraph.core.domain.models.residue import Residue
from contactgraph.core.exceptions import InvalidContactTypeError

from conftest import make_rig


@pytest.fixture
def square():
    # 1-2-3-4-1 cycle plus the chord 1-3
    return make_rig("ACDEF", [(1, 2), (2, 3), (3, 4), (4, 1), (1, 3)])


def test_metadata_rejects_directed_plain_contact_type():
    with pytest.raises(InvalidContactTypeError):
        GraphMetadata(sequence="AC", contact_type="Ca", directed=True)
    assert GraphMetadata(sequence="AC", contact_type="BB/SC", directed=True).directed


def test_graph_directedness_must_match_metadata():
    with pytest.raises(ValueError):
        ProteinGraph(nx.DiGraph(), GraphMetadata(sequence="A"))


def test_edges_are_stored_once_and_sorted(square):
    assert square.contacts() == [(1, 2), (1, 3), (1, 4), (2, 3), (3, 4)]
    assert square.has_edge(4, 1)
    assert square.find_edge(3, 1) is square.find_edge(1, 3)
    assert square.num_edges == 5
    assert square.obs_length == 5
    assert square.full_length == 5


def test_graph_is_frozen(square):
    with pytest.raises(nx.NetworkXError):
        square.to_networkx().add_edge(2, 4)


def test_neighborhoods(square):
    assert square.neighbors(1) == [2, 3, 4]
    assert square.get_common_neighbors(2, 4) == [1, 3]
    assert square.neighbors(5) == []


def test_second_shell_excludes_node_itself(square):
    # neighbors of 2 are 1 and 3, whose neighbors are {2, 3, 4} and {1, 2, 4}
    assert square.get_second_shell_neighbors(2) == [1, 3, 4]


def test_all_common_neighborhood_sizes(square):
    sizes = square.get_all_common_nbh_sizes()
    assert sizes[(2, 4)] == 2
    assert sizes[(1, 3)] == 2
    assert sizes[(1, 2)] == 1
    assert all(i < j for i, j in sizes)
    assert all(size > 0 for size in sizes.values())


def test_directed_neighbors_include_predecessors():
    graph = make_rig("ACDE", [(1, 2), (3, 1)], contact_type="BB/SC", directed=True)
    assert graph.neighbors(1) == [2, 3]
    assert graph.has_edge(3, 1)
    assert not graph.has_edge(1, 3)
    sizes = graph.get_all_common_nbh_sizes()
    assert sizes == {(2, 3): 1, (3, 2): 1}


def test_contact_range_and_order(square):
    assert square.get_contact_range(1, 4) == 3
    # ranges 1, 2, 3, 1, 1 over 5 residues and 5 edges
    assert square.get_contact_order() == pytest.approx(8 / 25)
    with pytest.raises(KeyError):
        square.get_contact_range(1, 9)
    assert make_rig("AC", []).get_contact_order() == 0.0


def test_weighted_edges():
    assert not make_rig("ACD", [(1, 2)]).has_weighted_edges()
    assert make_rig("ACD", [(1, 2)], weights=[0.5]).has_weighted_edges()


class TestGraphBuilder:
    def test_add_edge_rules(self):
        builder = GraphBuilder(GraphMetadata(sequence="ACD"))
        builder.add_node(1, Residue(1, "ALA"))
        builder.add_node(2, Residue(2, "CYS"))
        assert not builder.add_node(1, Residue(1, "ALA"))
        assert builder.add_edge(1, 2, RIGEdge())
        assert not builder.add_edge(2, 1, RIGEdge())
        assert not builder.add_edge(1, 1, RIGEdge())
        assert not builder.add_edge(1, 3, RIGEdge())
        with pytest.raises(KeyError):
            builder.set_edge(1, 3, RIGEdge())
        with pytest.raises(ValueError):
            builder.set_edge(2, 2, RIGEdge())

    def test_build_returns_independent_graphs(self, square):
        builder = GraphBuilder.from_graph(square)
        first = builder.build()
        builder.remove_edge(1, 2)
        builder.set_edge(2, 4, RIGEdge(weight=0.5))
        second = builder.build()
        assert first.contacts() == square.contacts()
        assert (1, 2) not in second.contacts()
        assert second.find_edge(2, 4).weight == 0.5

    def test_remove_all_edges_keeps_nodes(self, square):
        builder = GraphBuilder.from_graph(square)
        builder.remove_all_edges()
        graph = builder.build()
        assert graph.num_edges == 0
        assert graph.serials() == square.serials()

    def test_directedness_cannot_change(self, square):
        builder = GraphBuilder.from_graph(square)
        with pytest.raises(ValueError):
            builder.set_metadata(square.metadata.with_changes(contact_type="BB/SC", directed=True))
        builder.set_metadata(square.metadata.with_changes(cutoff=6.0))
        assert builder.build().cutoff == 6.0
