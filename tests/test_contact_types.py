import pytest

from contactgraph.core.domain.models.contact_type import ContactTypeDictionary
from contactgraph.core.exceptions import InvalidContactTypeError


def test_packaged_types(dictionary):
    assert dictionary.single_atom_types() == {"Ca", "Cb", "Cg", "C", "N", "O"}
    assert dictionary.multi_atom_types() == {"BB", "SC", "ALL"}


def test_get_atoms(dictionary):
    assert dictionary.get_atoms("Ca", "ALA") == {"CA"}
    assert dictionary.get_atoms("Cb", "GLY") == {"CA"}
    assert dictionary.get_atoms("SC", "SER") == {"CB", "OG"}
    assert dictionary.get_atoms("SC", "GLY") == frozenset()
    assert dictionary.get_atoms("Ca", "XXX") == frozenset()


def test_parse_components(dictionary):
    spec = dictionary.parse("BB/SC+Ca")
    assert spec.components == (("BB", "SC"), ("Ca", "Ca"))
    assert spec.crossed
    assert spec.definition_names == ["BB", "SC", "Ca"]
    assert not dictionary.parse("Ca+Cb").crossed


@pytest.mark.parametrize(
    "contact_type", ["", "Ca/", "/Ca", "Ca/Cb/Cg", "Ca+", "Foo", "Ca/Foo", " Ca", "Ca++Cb"]
)
def test_malformed_contact_types_rejected(dictionary, contact_type):
    with pytest.raises(InvalidContactTypeError):
        dictionary.parse(contact_type)
    assert not dictionary.is_valid(contact_type)


def test_single_and_multi_atom_validity(dictionary):
    assert dictionary.is_valid_single_atom("Ca")
    assert dictionary.is_valid_single_atom("Ca/Cb")
    assert not dictionary.is_valid_single_atom("Ca/Cb", directed=False)
    assert not dictionary.is_valid_single_atom("BB")
    assert not dictionary.is_valid_single_atom("Ca+Cb")
    assert dictionary.is_valid_multi_atom("BB")
    assert dictionary.is_valid_multi_atom("Ca+Cb")
    assert dictionary.is_valid_multi_atom("Ca/Cb", directed=False)
    assert not dictionary.is_valid_multi_atom("Ca")


def test_overlapping(dictionary):
    assert dictionary.is_overlapping("Ca/Ca")
    assert dictionary.is_overlapping("Ca/Cb")  # GLY Cb is its CA
    assert dictionary.is_overlapping("BB/ALL")
    assert not dictionary.is_overlapping("BB/SC")
    assert not dictionary.is_overlapping("Ca")


def test_from_lines():
    dictionary = ContactTypeDictionary.from_lines(
        ["# comment", "> Hx single", "ALA CA", "", "> Both multi", "ALA CA CB", "GLY"]
    )
    assert dictionary.names() == ["Both", "Hx"]
    assert dictionary.get_atoms("Both", "ALA") == {"CA", "CB"}
    assert dictionary.get_atoms("Both", "GLY") == frozenset()
    assert "Hx" in dictionary
    assert len(dictionary) == 2


@pytest.mark.parametrize("lines", [["ALA CA"], ["> Hx double", "ALA CA"], [">", "ALA CA"]])
def test_from_lines_rejects_malformed_definitions(lines):
    with pytest.raises(InvalidContactTypeError):
        ContactTypeDictionary.from_lines(lines)


def test_from_file(tmp_path):
    path = tmp_path / "types.dat"
    path.write_text("> Ca single\nALA CA\n")
    dictionary = ContactTypeDictionary.from_file(str(path))
    assert dictionary.get("Ca").get_atoms("ALA") == {"CA"}
    with pytest.raises(InvalidContactTypeError):
        dictionary.get("Cb")
