"""Migration impact from a change sequence.

Impact definition (deterministic, dialect-independent):
- Each change carries a fixed weight by type (Addition 25, Removal 100,
  Modification 50, Rename 30).
- The impact score is the MAXIMUM single weight across the sequence, not
  a sum: one removal saturates impact to 100 however long the sequence is.
- An empty sequence has impact 0.
- A migration is breaking iff any change is a Removal or Modification.
  Additions and Renames alone are never breaking.

This is deliberately a different aggregation from the cumulative
compatibility score in ``scoring``: the report reflects accumulated risk,
the plan reflects the worst single change. Keep the two independent.
"""

from typing import Dict, Iterable, List, Mapping, Union

from .diff import BREAKING_CHANGE_TYPES, ChangeType, SchemaChange


IMPACT_WEIGHTS: Dict[ChangeType, int] = {
    ChangeType.ADDITION: 25,
    ChangeType.REMOVAL: 100,
    ChangeType.MODIFICATION: 50,
    ChangeType.RENAME: 30,
}

MAX_IMPACT = 100

ChangeLike = Union[SchemaChange, Mapping]


def _change_type(change: ChangeLike) -> ChangeType:
    """Change type of a SchemaChange or of its dict form (model input)."""
    if isinstance(change, SchemaChange):
        return ChangeType(change.change_type)
    return ChangeType(change["change_type"])


def compute_impact_score(changes: Iterable[ChangeLike]) -> int:
    """Worst-case single-change weight, clamped to 0..100."""
    score = max((IMPACT_WEIGHTS[_change_type(c)] for c in changes), default=0)
    return min(score, MAX_IMPACT)


def detect_breaking_changes(changes: Iterable[ChangeLike]) -> bool:
    """True if any change is a Removal or Modification."""
    return any(_change_type(c) in BREAKING_CHANGE_TYPES for c in changes)


def breaking_changes(changes: Iterable[SchemaChange]) -> List[SchemaChange]:
    """Breaking subset of a change sequence, order preserved."""
    return [c for c in changes if c.change_type in BREAKING_CHANGE_TYPES]
