"""
Consensus residue interaction graphs from aligned templates.

Every template graph votes, through the alignment, for the alignment column
pairs its contacts map to. A target contact is accepted when enough templates
voted for its columns and neither column is a gap in the target.
"""

import logging
import math
from collections import defaultdict
from statistics import median
from typing import Dict, FrozenSet, List, Mapping, Set, Tuple

from tqdm import tqdm

from ..domain.implementations.multiple_alignment import MultipleSequenceAlignment
from ..domain.interfaces.sequence_alignment import GAP_POSITION, SequenceAlignment
from ..domain.models.edges import RIGEdge
from ..domain.models.protein_graph import (
    GraphBuilder,
    GraphMetadata,
    RIGraph,
    rig_builder_for_sequence,
)
from ..domain.models.residue import Residue
from ..exceptions import (
    GraphMetadataMismatchError,
    InconsistentAlignmentError,
    InconsistentInputError,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5
ENSEMBLE_TARGET_TAG = "target"

ColumnPair = Tuple[int, int]


class GraphAverager:
    """Consensus builder over template graphs aligned to a target sequence."""

    def __init__(
        self,
        alignment: SequenceAlignment,
        template_graphs: Mapping[str, RIGraph],
        target_tag: str,
        show_progress: bool = False,
    ):
        """
        Check the inputs and count the votes.

        Args:
            alignment: Alignment of the target and all template sequences
            template_graphs: Template graphs keyed by their alignment tag
            target_tag: Tag of the target sequence in the alignment
            show_progress: Show a progress bar while counting votes

        Raises:
            InconsistentAlignmentError: If a tag is missing, the number of
                sequences is not templates + 1, or a template sequence differs
                from its alignment row
            GraphMetadataMismatchError: If templates differ in contact type,
                cutoff or directedness
        """
        if not template_graphs:
            raise InconsistentInputError("Graph averaging needs at least one template graph")
        self._alignment = alignment
        self._templates: Dict[str, RIGraph] = dict(sorted(template_graphs.items()))
        self._target_tag = target_tag
        self._show_progress = show_progress

        self._check_templates()
        self._check_sequences()

        first = next(iter(self._templates.values()))
        self._metadata = GraphMetadata(
            sequence=alignment.get_sequence_no_gaps(target_tag),
            contact_type=first.contact_type,
            cutoff=first.cutoff,
            directed=first.directed,
        )
        self._votes = self._count_votes()

    @classmethod
    def from_ensemble(
        cls, graphs: Mapping[str, RIGraph], show_progress: bool = False
    ) -> "GraphAverager":
        """
        Averager for graphs of one sequence, e.g. models of the same protein.

        A gap-free alignment of the shared sequence is built internally and
        the target is that same sequence.
        """
        sequences = {graph.sequence for graph in graphs.values()}
        if len(sequences) != 1:
            raise InconsistentAlignmentError("Ensemble graphs must share one sequence")
        target_tag = ENSEMBLE_TARGET_TAG
        while target_tag in graphs:
            target_tag = f"_{target_tag}"
        alignment = MultipleSequenceAlignment.trivial(
            sequences.pop(), [target_tag] + sorted(graphs)
        )
        return cls(alignment, graphs, target_tag, show_progress=show_progress)

    # ----------------------------------------------------------------- checks

    def _check_templates(self) -> None:
        first_tag, first = next(iter(self._templates.items()))
        for tag, graph in self._templates.items():
            for attribute in ("contact_type", "cutoff", "directed"):
                if getattr(graph, attribute) != getattr(first, attribute):
                    logger.warning(
                        f"Template {tag} has {attribute} {getattr(graph, attribute)!r}, "
                        f"template {first_tag} has {getattr(first, attribute)!r}"
                    )
                    raise GraphMetadataMismatchError(
                        f"Template graphs differ in {attribute}"
                    )

    def _check_sequences(self) -> None:
        if not self._alignment.has_tag(self._target_tag):
            raise InconsistentAlignmentError(
                f"Alignment does not contain the target sequence {self._target_tag!r}"
            )
        for tag in self._templates:
            if not self._alignment.has_tag(tag):
                raise InconsistentAlignmentError(
                    f"Alignment is missing template sequence {tag!r}"
                )
        if len(self._templates) != self._alignment.get_num_sequences() - 1:
            raise InconsistentAlignmentError(
                "Number of sequences in alignment is different from number of templates + 1"
            )
        for tag, graph in self._templates.items():
            if self._alignment.get_sequence_no_gaps(tag) != graph.sequence:
                logger.warning(f"graph:     {graph.sequence}")
                logger.warning(f"alignment: {self._alignment.get_sequence_no_gaps(tag)}")
                raise InconsistentAlignmentError(
                    f"Sequence of template graph {tag!r} does not match sequence in alignment"
                )

    @staticmethod
    def _check_threshold(threshold: float) -> None:
        if not 0 <= threshold <= 1:
            raise ValueError(f"Threshold must lie in [0, 1], got {threshold}")

    # ------------------------------------------------------------------ votes

    def _count_votes(self) -> Dict[ColumnPair, FrozenSet[str]]:
        voters: Dict[ColumnPair, Set[str]] = defaultdict(set)
        templates = tqdm(
            self._templates.items(),
            desc="Counting votes",
            total=len(self._templates),
            disable=not self._show_progress,
        )
        for tag, graph in templates:
            for i, j in graph.contacts():
                i_col = self._alignment.seq2al(tag, i)
                j_col = self._alignment.seq2al(tag, j)
                if i_col == GAP_POSITION or j_col == GAP_POSITION:
                    raise InconsistentAlignmentError(
                        f"Contact ({i}, {j}) of template {tag!r} lies outside its sequence"
                    )
                voters[(i_col, j_col)].add(tag)
                if not graph.directed:
                    voters[(j_col, i_col)].add(tag)
        votes = {pair: frozenset(tags) for pair, tags in sorted(voters.items())}
        logger.debug(f"{len(votes)} voted column pairs from {self.num_templates} templates")
        return votes

    def get_votes(self) -> Dict[ColumnPair, int]:
        """Number of votes of every ordered column pair with at least one vote."""
        return {pair: len(tags) for pair, tags in self._votes.items()}

    def get_voters(self, i_col: int, j_col: int) -> FrozenSet[str]:
        return self._votes.get((i_col, j_col), frozenset())

    def _vote_threshold(self, threshold: float) -> int:
        # rounding first keeps e.g. 10 * 0.3 from ceiling to 4
        return math.ceil(round(self.num_templates * threshold, 9))

    def _target_contact(self, pair: ColumnPair) -> Tuple[int, int]:
        return (
            self._alignment.al2seq(self._target_tag, pair[0]),
            self._alignment.al2seq(self._target_tag, pair[1]),
        )

    def _accepted_contacts(self, threshold: float) -> List[Tuple[int, int]]:
        self._check_threshold(threshold)
        min_votes = self._vote_threshold(threshold)
        accepted = []
        for pair, tags in self._votes.items():
            if len(tags) < min_votes:
                continue
            i, j = self._target_contact(pair)
            if i != GAP_POSITION and j != GAP_POSITION:
                accepted.append((i, j))
        return accepted

    # ----------------------------------------------------------------- graphs

    def _new_target_builder(self) -> GraphBuilder[Residue, RIGEdge]:
        return rig_builder_for_sequence(self._metadata)

    def get_consensus_graph(self, threshold: float = DEFAULT_THRESHOLD) -> RIGraph:
        """
        Consensus graph of the target.

        Args:
            threshold: Fraction of templates that must vote for a contact,
                i.e. votes >= ceil(num_templates * threshold)

        Returns:
            New graph with a node for every target residue and the accepted contacts
        """
        builder = self._new_target_builder()
        for i, j in self._accepted_contacts(threshold):
            builder.add_edge(i, j, RIGEdge())
        graph = builder.build()
        logger.info(
            f"Consensus of {self.num_templates} templates at threshold {threshold}: "
            f"{graph.num_edges} contacts"
        )
        return graph

    def add_consensus_edges(
        self, target_graph: RIGraph, threshold: float = DEFAULT_THRESHOLD
    ) -> RIGraph:
        """
        Target graph plus the accepted consensus contacts.

        Contacts already in the target graph or touching residues missing from
        it are left out. The target graph itself is not modified.

        Raises:
            InconsistentAlignmentError: If the target graph sequence is not the
                target sequence of the alignment
        """
        if target_graph.sequence != self._metadata.sequence:
            raise InconsistentAlignmentError(
                "Target sequence in alignment does not match sequence in target graph"
            )
        builder = GraphBuilder.from_graph(target_graph)
        added = sum(
            1 for i, j in self._accepted_contacts(threshold) if builder.add_edge(i, j, RIGEdge())
        )
        logger.debug(f"Added {added} consensus contacts to target graph")
        return builder.build()

    def get_average_graph(self) -> RIGraph:
        """Union of the template contacts weighted by the fraction of templates voting."""
        builder = self._new_target_builder()
        for pair, tags in self._votes.items():
            i, j = self._target_contact(pair)
            if i != GAP_POSITION and j != GAP_POSITION:
                builder.add_edge(i, j, RIGEdge(weight=len(tags) / self.num_templates))
        return builder.build()

    def get_graph_with_top_contacts(self, num_contacts: int) -> RIGraph:
        """
        Graph with the num_contacts highest weighted contacts of the average graph.

        Ties are broken by ascending (i, j); kept contacts get weight 1.
        """
        average = self.get_average_graph()
        ranked = sorted(average.edges(), key=lambda edge: (-edge[2].weight, edge[0], edge[1]))
        builder = self._new_target_builder()
        for i, j, _ in ranked[: max(0, num_contacts)]:
            builder.add_edge(i, j, RIGEdge(weight=1.0))
        return builder.build()

    # ------------------------------------------------------------- statistics

    @property
    def num_templates(self) -> int:
        return len(self._templates)

    def _num_contacts(self) -> List[int]:
        return sorted(graph.num_edges for graph in self._templates.values())

    def get_avg_num_contacts(self) -> float:
        return sum(self._num_contacts()) / self.num_templates

    def get_median_num_contacts(self) -> float:
        return median(self._num_contacts())

    def get_min_num_contacts(self) -> int:
        return self._num_contacts()[0]

    def get_max_num_contacts(self) -> int:
        return self._num_contacts()[-1]

    def get_pairwise_overlap(self, tag1: str, tag2: str) -> int:
        """Number of contacts of template tag1 that map to contacts of template tag2."""
        first = self._templates[tag1]
        second = self._templates[tag2]
        shared = 0
        for i, j in first.contacts():
            i2 = self._alignment.al2seq(tag2, self._alignment.seq2al(tag1, i))
            j2 = self._alignment.al2seq(tag2, self._alignment.seq2al(tag1, j))
            if i2 != GAP_POSITION and j2 != GAP_POSITION and second.has_edge(i2, j2):
                shared += 1
        return shared

    def get_sum_of_pairs_overlap(self) -> int:
        """Sum of pairwise overlaps over all template pairs, a measure of alignment quality."""
        tags = list(self._templates)
        return sum(
            self.get_pairwise_overlap(tag1, tag2)
            for index, tag1 in enumerate(tags)
            for tag2 in tags[index + 1 :]
        )

    def get_consensus_score(
        self,
        tag: str,
        normalize_by_num_nodes: bool = True,
        normalize_by_num_templates: bool = True,
    ) -> float:
        """
        Sum over the contacts of a template of the votes they received.

        Args:
            tag: Template tag
            normalize_by_num_nodes: Divide by the alignment length
            normalize_by_num_templates: Divide by the number of templates
        """
        graph = self._templates[tag]
        score = float(
            sum(
                len(self.get_voters(self._alignment.seq2al(tag, i), self._alignment.seq2al(tag, j)))
                for i, j in graph.contacts()
            )
        )
        if normalize_by_num_nodes:
            score /= self._alignment.get_alignment_length()
        if normalize_by_num_templates:
            score /= self.num_templates
        return score

    def get_ensemble_consensus_score(self) -> float:
        return sum(self.get_consensus_score(tag) for tag in self._templates)
