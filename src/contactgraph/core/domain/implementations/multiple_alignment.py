"""In-memory multiple sequence alignment with precomputed position mappings."""

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ...exceptions import InconsistentAlignmentError
from ..interfaces.sequence_alignment import GAP_CHARACTER, GAP_POSITION, SequenceAlignment

logger = logging.getLogger(__name__)


class MultipleSequenceAlignment(SequenceAlignment):
    """Alignment of tagged sequences held as gapped strings."""

    def __init__(self, sequences: Mapping[str, str]):
        """
        Initialize alignment.

        Args:
            sequences: Aligned rows keyed by tag, all of the same length

        Raises:
            InconsistentAlignmentError: If the alignment is empty or rows differ in length
        """
        if not sequences:
            raise InconsistentAlignmentError("Alignment contains no sequences")
        lengths = {len(row) for row in sequences.values()}
        if len(lengths) != 1:
            raise InconsistentAlignmentError(
                f"Aligned sequences have different lengths: {sorted(lengths)}"
            )

        self._tags: List[str] = list(sequences)
        self._rows: Dict[str, str] = dict(sequences)
        self._length = lengths.pop()
        self._al2seq: Dict[str, List[int]] = {}
        self._seq2al: Dict[str, List[int]] = {}
        for tag, row in self._rows.items():
            self._al2seq[tag], self._seq2al[tag] = self._build_mappings(row)
        logger.debug(f"Alignment of {len(self._tags)} sequences, {self._length} columns")

    @staticmethod
    def _build_mappings(row: str) -> Tuple[List[int], List[int]]:
        al2seq: List[int] = []
        seq2al: List[int] = []
        position = 0
        for column, char in enumerate(row):
            if char == GAP_CHARACTER:
                al2seq.append(GAP_POSITION)
            else:
                position += 1
                al2seq.append(position)
                seq2al.append(column)
        return al2seq, seq2al

    @classmethod
    def trivial(cls, sequence: str, tags: Iterable[str]) -> "MultipleSequenceAlignment":
        """Gap-free alignment of the same sequence under several tags."""
        return cls({tag: sequence for tag in tags})

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, str]]) -> "MultipleSequenceAlignment":
        duplicates = {tag for tag, _ in pairs if sum(1 for t, _ in pairs if t == tag) > 1}
        if duplicates:
            raise InconsistentAlignmentError(f"Duplicate alignment tags: {sorted(duplicates)}")
        return cls(dict(pairs))

    def _check_tag(self, tag: str) -> None:
        if tag not in self._rows:
            raise InconsistentAlignmentError(f"Tag {tag!r} not in alignment")

    def get_tags(self) -> List[str]:
        return list(self._tags)

    def get_aligned_sequence(self, tag: str) -> str:
        self._check_tag(tag)
        return self._rows[tag]

    def get_alignment_length(self) -> int:
        return self._length

    def al2seq(self, tag: str, column: int) -> int:
        self._check_tag(tag)
        if not 0 <= column < self._length:
            raise IndexError(f"Column {column} outside alignment of length {self._length}")
        return self._al2seq[tag][column]

    def seq2al(self, tag: str, position: int) -> int:
        self._check_tag(tag)
        mapping = self._seq2al[tag]
        if not 1 <= position <= len(mapping):
            return GAP_POSITION
        return mapping[position - 1]
