"""Change model shared by every dialect analyzer.

All analyzers emit ``SchemaChange`` values into a flat, ordered list.
Order is discovery order and is part of the output contract.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar


class ChangeType(str, Enum):
    """Kinds of change between two schema versions."""
    ADDITION = "Addition"
    REMOVAL = "Removal"
    MODIFICATION = "Modification"
    RENAME = "Rename"


BREAKING_CHANGE_TYPES = frozenset({ChangeType.REMOVAL, ChangeType.MODIFICATION})


@dataclass(frozen=True)
class SchemaChange:
    """A single change between two schema versions."""
    change_type: ChangeType
    location: str  # Slash-delimited path to the changed element
    description: str  # Human-readable summary
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def is_breaking(self) -> bool:
        return self.change_type in BREAKING_CHANGE_TYPES


T = TypeVar("T")


@dataclass(frozen=True)
class KeyedPair(Generic[T]):
    """One entry of a match-by-key result.

    ``old`` is None for additions, ``new`` is None for removals,
    both are set for elements present on both sides.
    """
    key: Hashable
    old: Optional[T]
    new: Optional[T]

    @property
    def added(self) -> bool:
        return self.old is None

    @property
    def removed(self) -> bool:
        return self.new is None


def match_by_key(
    old_items: Iterable[T],
    new_items: Iterable[T],
    key: Callable[[T], Hashable],
    same: Optional[Callable[[T, T], bool]] = None,
) -> List[KeyedPair[T]]:
    """Set-difference of two collections by an extracted key.

    Emission order is fixed: every old item in its original order (paired
    with the first new item sharing its key, or alone when removed), then
    every new item whose key never occurs on the old side.

    Args:
        old_items: Elements of the old document
        new_items: Elements of the new document
        key: Extracts the matching key (usually a name)
        same: Optional equality predicate; matched pairs for which it
            returns True are dropped from the result

    Returns:
        Ordered list of KeyedPair entries
    """
    old_list = list(old_items)
    new_list = list(new_items)

    new_index: Dict[Hashable, T] = {}
    for item in new_list:
        new_index.setdefault(key(item), item)
    old_keys = {key(item) for item in old_list}

    pairs: List[KeyedPair[T]] = []
    for old_item in old_list:
        k = key(old_item)
        if k in new_index:
            new_item = new_index[k]
            if same is not None and same(old_item, new_item):
                continue
            pairs.append(KeyedPair(key=k, old=old_item, new=new_item))
        else:
            pairs.append(KeyedPair(key=k, old=old_item, new=None))

    for new_item in new_list:
        k = key(new_item)
        if k not in old_keys:
            pairs.append(KeyedPair(key=k, old=None, new=new_item))

    return pairs


def count_by_type(changes: Iterable[SchemaChange]) -> Dict[ChangeType, int]:
    """Count changes per ChangeType (every type present, zero if unseen)."""
    counts = {change_type: 0 for change_type in ChangeType}
    for change in changes:
        counts[change.change_type] += 1
    return counts
