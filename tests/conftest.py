import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from contactgraph.core.domain.models.amino_acids import one_to_three
from contactgraph.core.domain.models.chain_structure import ChainStructure
from contactgraph.core.domain.models.contact_type import ContactTypeDictionary
from contactgraph.core.domain.models.edges import RIGEdge
from contactgraph.core.domain.models.protein_graph import GraphMetadata, rig_builder_for_sequence
from contactgraph.core.domain.models.residue import Residue
from contactgraph.core.services.graph_builder_service import ContactGraphService


def make_chain(sequence, atoms_by_residue, structure_id="1abc", chain_id="A"):
    """
    Chain with the given atoms.

    Args:
        sequence: Full one letter sequence
        atoms_by_residue: serial -> list of (atom name, (x, y, z))
    """
    residues = {}
    atom_serial = 1
    for serial in sorted(atoms_by_residue):
        residue = Residue(serial=serial, residue_type=one_to_three(sequence[serial - 1]))
        for atom_name, coordinates in atoms_by_residue[serial]:
            residue.add_atom(atom_serial, atom_name, coordinates)
            atom_serial += 1
        residues[serial] = residue
    return ChainStructure(
        sequence=sequence, residues=residues, structure_id=structure_id, chain_id=chain_id
    )


def make_rig(
    sequence,
    contacts,
    contact_type="Ca",
    cutoff=8.0,
    directed=False,
    weights=None,
    structure_id="1abc",
    chain_id="A",
):
    """RIG with a node for every residue of the sequence and the given contacts."""
    builder = rig_builder_for_sequence(
        GraphMetadata(
            sequence=sequence,
            structure_id=structure_id,
            chain_id=chain_id,
            contact_type=contact_type,
            cutoff=cutoff,
            directed=directed,
        )
    )
    for index, (i, j) in enumerate(contacts):
        weight = weights[index] if weights is not None else 1.0
        builder.add_edge(i, j, RIGEdge(weight=weight))
    return builder.build()


@pytest.fixture(scope="session")
def dictionary():
    return ContactTypeDictionary.from_resource()


@pytest.fixture
def service(dictionary):
    return ContactGraphService(dictionary)


@pytest.fixture
def random_chain():
    """Chain of 30 residues with backbone and CB atoms scattered in a 15A box."""
    rng = np.random.default_rng(7)
    sequence = "ACDEFGHIKLMNPQRSTVWYACDEFGHIKL"
    atoms = {}
    for serial in range(1, len(sequence) + 1):
        names = ["N", "CA", "C", "O"] + ([] if sequence[serial - 1] == "G" else ["CB"])
        atoms[serial] = [(name, tuple(rng.uniform(0, 15, size=3))) for name in names]
    return make_chain(sequence, atoms)
