import pytest

from contactgraph.core.domain.implementations.multiple_alignment import MultipleSequenceAlignment
from contactgraph.core.domain.interfaces.sequence_alignment import GAP_POSITION
from contactgraph.core.exceptions import InconsistentAlignmentError


@pytest.fixture
def alignment():
    return MultipleSequenceAlignment({"target": "A-CD-", "t1": "ABCDE"})


def test_position_mappings(alignment):
    assert [alignment.al2seq("target", col) for col in range(5)] == [1, GAP_POSITION, 2, 3, GAP_POSITION]
    assert [alignment.seq2al("target", pos) for pos in range(1, 4)] == [0, 2, 3]
    assert alignment.seq2al("target", 4) == GAP_POSITION
    assert alignment.seq2al("target", 0) == GAP_POSITION
    with pytest.raises(IndexError):
        alignment.al2seq("target", 5)


def test_sequences(alignment):
    assert alignment.get_tags() == ["target", "t1"]
    assert alignment.has_tag("t1")
    assert not alignment.has_tag("t2")
    assert alignment.get_sequence_no_gaps("target") == "ACD"
    assert alignment.get_alignment_length() == 5


def test_unknown_tag(alignment):
    with pytest.raises(InconsistentAlignmentError):
        alignment.seq2al("t2", 1)


def test_rows_must_have_equal_length():
    with pytest.raises(InconsistentAlignmentError):
        MultipleSequenceAlignment({"a": "AC", "b": "ACD"})
    with pytest.raises(InconsistentAlignmentError):
        MultipleSequenceAlignment({})


def test_trivial_and_pairs():
    trivial = MultipleSequenceAlignment.trivial("ACD", ["x", "y"])
    assert trivial.get_aligned_sequence("y") == "ACD"
    assert trivial.seq2al("x", 2) == 1
    with pytest.raises(InconsistentAlignmentError):
        MultipleSequenceAlignment.from_pairs([("x", "AC"), ("x", "AD")])
