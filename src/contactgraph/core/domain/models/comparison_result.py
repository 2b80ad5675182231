#!/usr/bin/env python3
# src/contactgraph/core/domain/models/comparison_result.py

"""
Domain model for the result of comparing a predicted graph to a native one.
"""

from dataclasses import dataclass, field


@dataclass
class GraphComparisonResult:
    """Confusion counts and derived rates of a contact prediction.

    ``accuracy`` is the precision TP / (TP + FP) and ``coverage`` is
    TP / original. When nothing was predicted accuracy is 1 and coverage 0;
    when there was nothing to predict accuracy is 0 and coverage 1; when both
    are empty both are 1.
    """

    true_pos: int
    false_pos: int
    true_neg: int
    false_neg: int
    predicted: int
    original: int
    cmtotal: int
    given: int = 0
    title: str = ""
    sensitivity: float = field(init=False)
    specificity: float = field(init=False)
    accuracy: float = field(init=False)
    coverage: float = field(init=False)

    def __post_init__(self):
        self.sensitivity = _ratio(self.true_pos, self.true_pos + self.false_neg)
        self.specificity = _ratio(self.true_neg, self.true_neg + self.false_pos)
        self.accuracy = _ratio(self.true_pos, self.true_pos + self.false_pos)
        self.coverage = _ratio(self.true_pos, self.original)

        nothing_predicted = self.true_pos + self.false_pos == 0
        if nothing_predicted and self.original == 0:
            self.accuracy = 1.0
            self.coverage = 1.0
        elif nothing_predicted:
            self.accuracy = 1.0
            self.coverage = 0.0
        elif self.original == 0:
            self.accuracy = 0.0
            self.coverage = 1.0

    def summary(self) -> str:
        return (
            f"Number of native contacts:    {self.original}\n"
            f"Number of predicted contacts: {self.predicted} ({self.true_pos} True Positives)\n"
            f"Accuracy: {self.accuracy:4.3f}\n"
            f"Coverage: {self.coverage:4.3f}"
        )

    def to_row(self) -> str:
        """Tab separated row matching ``ROW_HEADERS``."""
        return "\t".join(
            [
                self.title,
                str(self.original),
                str(self.predicted),
                str(self.true_pos),
                str(self.true_neg),
                str(self.false_pos),
                str(self.false_neg),
                f"{self.sensitivity:4.2f}",
                f"{self.specificity:4.2f}",
                f"{self.accuracy:4.2f}",
                f"{self.coverage:4.2f}",
            ]
        )


ROW_HEADERS = "\t".join(
    ["Title", "orig", "pred", "TP", "TN", "FP", "FN", "Sens", "Spec", "Acc", "Cov"]
)


def _ratio(numerator: int, denominator: int) -> float:
    # NaN stands in for the undefined 0/0 rates
    if denominator == 0:
        return float("nan")
    return numerator / denominator
