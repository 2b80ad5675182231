"""Interface for multiple sequence alignments used to map residues between chains."""

from abc import ABC, abstractmethod
from typing import List

GAP_CHARACTER = "-"
GAP_POSITION = -1


class SequenceAlignment(ABC):
    """Abstract base class for tagged multiple sequence alignments.

    Alignment columns are 0-based; sequence positions are 1-based residue
    serials, matching the graphs.
    """

    @abstractmethod
    def get_tags(self) -> List[str]:
        """Tags of all aligned sequences, in alignment order."""
        pass

    @abstractmethod
    def get_aligned_sequence(self, tag: str) -> str:
        """Row of the alignment for the given tag, gaps included."""
        pass

    @abstractmethod
    def get_alignment_length(self) -> int:
        pass

    @abstractmethod
    def al2seq(self, tag: str, column: int) -> int:
        """
        Map an alignment column to a sequence position.

        Args:
            tag: Sequence tag
            column: 0-based alignment column

        Returns:
            1-based sequence position, or -1 if the column is a gap
        """
        pass

    @abstractmethod
    def seq2al(self, tag: str, position: int) -> int:
        """
        Map a 1-based sequence position to its 0-based alignment column.

        Returns:
            The column, or -1 if the position is outside the sequence
        """
        pass

    def has_tag(self, tag: str) -> bool:
        return tag in self.get_tags()

    def get_num_sequences(self) -> int:
        return len(self.get_tags())

    def get_sequence_no_gaps(self, tag: str) -> str:
        return self.get_aligned_sequence(tag).replace(GAP_CHARACTER, "")
