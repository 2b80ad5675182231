from collections import defaultdict
from itertools import combinations

import numpy as np
import pytest

from contactgraph.core.domain.models.contact_type import ContactTypeDictionary
from contactgraph.core.domain.models.protein_graph import GraphBuilder
from contactgraph.core.exceptions import (
    GraphMetadataMismatchError,
    InconsistentInputError,
    InvalidContactTypeError,
    InvalidCutoffError,
)
from contactgraph.core.services.graph_builder_service import ContactGraphService
from contactgraph.core.utils.benchmarking import PerformanceStats

from conftest import make_chain


def distance(first, second):
    return float(np.sqrt(((first.get_coordinates() - second.get_coordinates()) ** 2).sum()))


def brute_force_residue_contacts(chain, i_atoms, j_atoms, cutoff, directed):
    """Residue pair -> (atom contact count, min distance)."""
    counts = defaultdict(int)
    minima = {}
    pairs = (
        [(a, b) for a in i_atoms for b in j_atoms]
        if directed
        else list(combinations(i_atoms, 2))
    )
    for a, b in pairs:
        if a.residue_serial == b.residue_serial:
            continue
        d = distance(a, b)
        if d > cutoff:
            continue
        key = (a.residue_serial, b.residue_serial)
        if not directed:
            key = (min(key), max(key))
        counts[key] += 1
        minima[key] = min(minima.get(key, d), d)
    return {key: (counts[key], minima[key]) for key in counts}


class TestThreePointScenario:
    def test_atoms_on_different_residues(self, service):
        chain = make_chain(
            "AAA",
            {
                1: [("CA", (0.0, 0.0, 0.0))],
                2: [("CA", (1.0, 0.0, 0.0))],
                3: [("CA", (10.0, 10.0, 10.0))],
            },
        )
        aig = service.get_aig(chain, "Ca", 2.0)
        assert aig.contacts() == [(1, 2)]

        rig = service.get_rig(chain, "Ca", 2.0)
        assert rig.contacts() == [(1, 2)]
        edge = rig.find_edge(1, 2)
        assert edge.atom_weight == 1
        assert edge.distance == pytest.approx(1.0)

    def test_atoms_on_same_residue_collapse_to_no_edge(self, service):
        chain = make_chain(
            "AA",
            {
                1: [("CA", (0.0, 0.0, 0.0)), ("CB", (1.0, 0.0, 0.0))],
                2: [("CA", (10.0, 10.0, 10.0))],
            },
        )
        aig = service.get_all_atom_graph(chain, 2.0)
        assert aig.num_edges == 1
        rig = service.collapse(aig)
        assert rig.num_edges == 0
        assert rig.serials() == [1, 2]


class TestCollapse:
    @pytest.mark.parametrize("cutoff", [3.0, 4.5])
    def test_all_atom_collapse_matches_brute_force(self, service, random_chain, cutoff):
        rig = service.get_rig(random_chain, "ALL", cutoff)
        atoms = random_chain.atoms
        expected = brute_force_residue_contacts(random_chain, atoms, atoms, cutoff, False)

        assert set(rig.contacts()) == set(expected)
        for i, j, edge in rig.edges():
            count, minimum = expected[(i, j)]
            assert edge.atom_weight == count
            assert edge.distance == pytest.approx(minimum)

    def test_crossed_collapse_is_directed(self, service, dictionary, random_chain):
        rig = service.get_rig(random_chain, "BB/SC", 4.0)
        assert rig.directed
        bb = random_chain.get_atoms_for_contact_type("BB", dictionary)
        sc = random_chain.get_atoms_for_contact_type("SC", dictionary)
        expected = brute_force_residue_contacts(random_chain, bb, sc, 4.0, True)

        assert set(rig.contacts()) == set(expected)
        for i, j, edge in rig.edges():
            assert edge.atom_weight == expected[(i, j)][0]

    def test_rig_nodes_are_parent_residues(self, service, random_chain):
        aig = service.get_aig(random_chain, "SC", 5.0)
        rig = service.collapse(aig)
        parents = sorted({atom.residue_serial for atom in aig.nodes()})
        assert rig.serials() == parents
        # glycines have no side chain atoms
        assert 6 not in parents

    def test_directed_collapse_of_undirected_aig_raises(self, service, random_chain):
        aig = service.get_aig(random_chain, "Ca", 8.0)
        with pytest.raises(InconsistentInputError):
            service.collapse(aig, directed=True)

    def test_crossed_collapse_to_undirected(self, service, random_chain):
        aig = service.get_aig(random_chain, "BB/SC", 4.0)
        directed = service.collapse(aig)
        undirected = service.collapse(aig, directed=False)
        assert not undirected.directed
        assert set(undirected.contacts()) == {
            (min(i, j), max(i, j)) for i, j in directed.contacts()
        }


class TestContactTypes:
    def test_overlapping_crossed_type_defaults_to_undirected(self, service, random_chain):
        rig = service.get_rig(random_chain, "Ca/Cb", 6.0)
        assert not rig.directed
        assert rig.contact_type == "Ca/Cb"

    def test_directed_rejected_for_overlapping_or_plain_types(self, service, random_chain):
        with pytest.raises(InvalidContactTypeError):
            service.get_rig(random_chain, "Ca/Cb", 6.0, directed=True)
        with pytest.raises(InvalidContactTypeError):
            service.get_rig(random_chain, "Ca", 6.0, directed=True)

    def test_crossed_aig_skips_same_atom_and_reverse_pairs(self, service, random_chain):
        aig = service.get_aig(random_chain, "Ca/Ca", 8.0)
        assert aig.directed
        for i, j in aig.contacts():
            assert i != j
            assert not aig.has_edge(j, i)

    def test_union_type_is_union_of_components(self, service, random_chain):
        union = service.get_rig(random_chain, "Ca+Cb", 7.0)
        ca = service.get_rig(random_chain, "Ca", 7.0)
        cb = service.get_rig(random_chain, "Cb", 7.0)
        assert union.contact_type == "Ca+Cb"
        assert set(union.contacts()) == set(ca.contacts()) | set(cb.contacts())

    def test_mixed_crossed_union(self, service, random_chain):
        rig = service.get_rig(random_chain, "BB/SC+Ca", 5.0)
        assert rig.contact_type == "BB/SC+Ca"
        assert not rig.directed

    def test_invalid_input_rejected_before_computation(self, service, random_chain):
        with pytest.raises(InvalidContactTypeError):
            service.get_rig(random_chain, "Ca/", 8.0)
        with pytest.raises(InvalidContactTypeError):
            service.get_aig(random_chain, "Ca+Cb", 8.0)
        with pytest.raises(InvalidCutoffError):
            service.get_rig(random_chain, "Ca", 0.0)

    def test_custom_dictionary(self, random_chain):
        dictionary = ContactTypeDictionary.from_lines(["> Nx single", "ALA N", "CYS N"])
        service = ContactGraphService(dictionary)
        aig = service.get_aig(random_chain, "Nx", 20.0)
        # residues 1, 2, 21 and 22 are ALA or CYS
        assert sorted(atom.residue_serial for atom in aig.nodes()) == [1, 2, 21, 22]


class TestAddGraphs:
    def test_union_is_idempotent_and_does_not_mutate(self, service, random_chain):
        graph = service.get_aig(random_chain, "BB", 4.0)
        subset = GraphBuilder.from_graph(graph)
        for i, j in graph.contacts()[::2]:
            subset.remove_edge(i, j)
        subset = subset.build()
        num_subset_edges = subset.num_edges

        union = service.add_graphs(graph, subset)
        assert union.contacts() == graph.contacts()
        assert union.serials() == graph.serials()
        assert union.contact_type == "BB"
        assert subset.num_edges == num_subset_edges

    def test_union_of_undirected_and_directed(self, service, random_chain):
        crossed = service.get_aig(random_chain, "BB/SC", 4.0)
        plain = service.get_aig(random_chain, "Ca", 4.0)
        union = service.add_graphs(crossed, plain)
        assert union.directed
        assert union.contact_type == "BB/SC+Ca"
        for i, j in plain.contacts():
            assert union.has_edge(i, j) or union.has_edge(j, i)
        assert union.num_edges <= crossed.num_edges + plain.num_edges

    def test_union_rejects_mismatched_metadata(self, service, random_chain):
        first = service.get_aig(random_chain, "Ca", 4.0)
        second = service.get_aig(random_chain, "Ca", 5.0)
        with pytest.raises(GraphMetadataMismatchError):
            service.add_graphs(first, second)


def test_grid_timings_are_collected(random_chain, dictionary):
    stats = PerformanceStats()
    service = ContactGraphService(dictionary, stats=stats)
    service.get_rig(random_chain, "Ca+Cb", 8.0)
    assert stats.stats["grid Ca"].count == 1
    assert stats.stats["grid Cb"].count == 1
    assert "grid Ca" in stats.report()


def test_grid_density(service, random_chain):
    density = service.calc_grid_density(random_chain, "Ca", 4.0)
    assert sum(density.values()) > 0
    assert all(0 <= occupied <= 26 for occupied in density)


def test_all_atom_graph_has_every_atom(service, random_chain):
    aig = service.get_all_atom_graph(random_chain, 3.0)
    assert aig.obs_length == len(random_chain.atoms)
    assert aig.contact_type == "ALL"
