"""Service comparing residue interaction graphs of the same sequence."""

import logging
from typing import Dict

from ..domain.models.comparison_result import GraphComparisonResult
from ..domain.models.protein_graph import GraphBuilder, RIGraph
from ..exceptions import InconsistentInputError

logger = logging.getLogger(__name__)


def _check_same_length(first: RIGraph, second: RIGraph) -> None:
    if first.full_length != second.full_length:
        raise InconsistentInputError(
            f"Graphs of different sequence length cannot be compared: "
            f"{first.full_length} vs {second.full_length}"
        )


class GraphComparisonService:
    """Service for evaluating predicted graphs against native ones."""

    def evaluate_prediction(
        self, predicted: RIGraph, original: RIGraph, min_seq_sep: int = 1
    ) -> GraphComparisonResult:
        """
        Confusion counts of a predicted graph against the original one.

        Only contacts with a sequence separation of at least min_seq_sep are
        counted. The number of cells of the contact map is taken over the full
        sequence length, halved for undirected graphs.

        Args:
            predicted: Predicted graph
            original: Native graph
            min_seq_sep: Minimum sequence separation of the contacts counted

        Returns:
            GraphComparisonResult with TP, FP, TN, FN and derived rates
        """
        _check_same_length(predicted, original)

        predicted_contacts = [
            (i, j) for i, j in predicted.contacts() if abs(i - j) >= min_seq_sep
        ]
        original_contacts = [
            (i, j) for i, j in original.contacts() if abs(i - j) >= min_seq_sep
        ]

        length = original.full_length
        cmtotal = (length - (min_seq_sep - 1)) * (length - min_seq_sep)
        if not original.directed:
            cmtotal //= 2

        true_pos = sum(1 for i, j in predicted_contacts if original.has_edge(i, j))
        false_pos = len(predicted_contacts) - true_pos
        false_neg = sum(1 for i, j in original_contacts if not predicted.has_edge(i, j))
        true_neg = cmtotal - true_pos - false_pos - false_neg

        result = GraphComparisonResult(
            true_pos=true_pos,
            false_pos=false_pos,
            true_neg=true_neg,
            false_neg=false_neg,
            predicted=len(predicted_contacts),
            original=len(original_contacts),
            cmtotal=cmtotal,
        )
        logger.debug(
            f"Prediction evaluated at min separation {min_seq_sep}: "
            f"TP={true_pos} FP={false_pos} FN={false_neg}"
        )
        return result

    def compare(self, this: RIGraph, other: RIGraph) -> Dict[str, RIGraph]:
        """
        Split the contacts of two graphs into shared and exclusive ones.

        Returns:
            ``common`` and ``onlythis`` carry the nodes and edge payloads of
            ``this``; ``onlyother`` those of ``other``
        """
        _check_same_length(this, other)

        common = GraphBuilder.from_graph(this)
        only_this = GraphBuilder.from_graph(this)
        only_other = GraphBuilder.from_graph(other)
        for i, j in this.contacts():
            if other.has_edge(i, j):
                only_this.remove_edge(i, j)
                only_other.remove_edge(i, j)
            else:
                common.remove_edge(i, j)
        return {
            "common": common.build(),
            "onlythis": only_this.build(),
            "onlyother": only_other.build(),
        }

    def get_common_edges_count(self, this: RIGraph, other: RIGraph) -> int:
        return sum(1 for i, j in this.contacts() if other.has_edge(i, j))
