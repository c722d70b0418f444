"""Cumulative compatibility scoring.

A report score starts at 100 and loses a per-change deduction taken from
the dialect's weight table. Deductions accumulate (sum, not max) and the
result saturates at 0. A schema pair is compatible iff its score is at
least ``COMPATIBILITY_THRESHOLD``.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .diff import ChangeType, SchemaChange


BASE_SCORE = 100
COMPATIBILITY_THRESHOLD = 80


class ScoringWeights(BaseModel):
    """Deduction per change type for one dialect.

    A weight of None marks a change type the dialect never emits; scoring
    such a change raises instead of guessing a value.
    """
    addition: int
    removal: int
    modification: int
    rename: Optional[int]

    model_config = ConfigDict(frozen=True, extra="forbid")

    def for_type(self, change_type: ChangeType) -> int:
        weight = {
            ChangeType.ADDITION: self.addition,
            ChangeType.REMOVAL: self.removal,
            ChangeType.MODIFICATION: self.modification,
            ChangeType.RENAME: self.rename,
        }[change_type]
        if weight is None:
            raise NotImplementedError(
                f"Scoring for {change_type.value} changes is not implemented for this dialect"
            )
        return weight


JSON_SCHEMA_WEIGHTS = ScoringWeights(addition=5, removal=20, modification=10, rename=8)
OPENAPI_WEIGHTS = ScoringWeights(addition=5, removal=20, modification=10, rename=8)
# Parameter made mandatory; replaces the plain modification weight
OPENAPI_REQUIRED_PARAMETER_WEIGHT = 25
PROTOBUF_WEIGHTS = ScoringWeights(addition=0, removal=20, modification=10, rename=None)
SQL_WEIGHTS = ScoringWeights(addition=5, removal=15, modification=10, rename=8)


def saturating_score(deductions: Iterable[int]) -> int:
    """100 minus the summed deductions, never below 0."""
    return max(BASE_SCORE - sum(deductions), 0)


def score_changes(changes: Iterable[SchemaChange], weights: ScoringWeights) -> int:
    """Score a change sequence against a plain weight table."""
    return saturating_score(weights.for_type(c.change_type) for c in changes)


def is_compatible(score: int) -> bool:
    return score >= COMPATIBILITY_THRESHOLD
