"""JSON Schema structural diff.

Recursive comparison of two parsed JSON documents by structural case:

- object vs object, keys in sorted order: old keys missing from new emit
  Removal, new-only keys emit Addition, shared keys recurse.
- array vs array: a length mismatch emits one Modification at the array's
  own path; elements are then compared pairwise by index up to the
  shorter length. The tail beyond that is never examined.
- anything else that differs emits a Modification carrying both values.

There is no rename detection: a removed property and a differently-named
added property with identical content stay one Removal + one Addition.

Issue detection is not implemented for this dialect: ``validate_changes``
never reports errors and reports always carry an empty issue list.
"""

import json
from typing import Any, Dict, List, Optional

from schemadiff._internal.canonical_json import compact_dumps, json_equal
from schemadiff.contracts import ValidationError
from schemadiff.errors import JsonError
from .analyzer import SchemaAnalyzer
from .diff import ChangeType, SchemaChange
from .schema import SchemaFormat
from .scoring import JSON_SCHEMA_WEIGHTS


def diff_json(old: Any, new: Any, path: str = "") -> List[SchemaChange]:
    """Structural diff of two parsed JSON values rooted at ``path``."""
    changes: List[SchemaChange] = []
    _compare_values(old, new, path, changes)
    return changes


def _compare_values(old: Any, new: Any, path: str, changes: List[SchemaChange]) -> None:
    if isinstance(old, dict) and isinstance(new, dict):
        _compare_objects(old, new, path, changes)
    elif isinstance(old, list) and isinstance(new, list):
        _compare_arrays(old, new, path, changes)
    elif not json_equal(old, new):
        old_text = compact_dumps(old)
        new_text = compact_dumps(new)
        changes.append(SchemaChange(
            change_type=ChangeType.MODIFICATION,
            location=path,
            description=f"Value changed from {old_text} to {new_text}",
            metadata={"old_value": old_text, "new_value": new_text},
        ))


def _compare_objects(old: Dict[str, Any], new: Dict[str, Any], path: str, changes: List[SchemaChange]) -> None:
    # Sorted, so document key order never changes the output
    for key in sorted(old):
        child = f"{path}/{key}"
        if key in new:
            _compare_values(old[key], new[key], child, changes)
        else:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=child,
                description=f"Property '{key}' was removed",
                metadata={"property": key},
            ))

    for key in sorted(new):
        if key not in old:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=f"{path}/{key}",
                description=f"New property '{key}' was added",
                metadata={"property": key},
            ))


def _compare_arrays(old: List[Any], new: List[Any], path: str, changes: List[SchemaChange]) -> None:
    if len(old) != len(new):
        changes.append(SchemaChange(
            change_type=ChangeType.MODIFICATION,
            location=path,
            description=f"Array length changed from {len(old)} to {len(new)}",
            metadata={"old_length": str(len(old)), "new_length": str(len(new))},
        ))

    # zip() stops at the shorter array; the longer array's tail is not diffed
    for index, (old_item, new_item) in enumerate(zip(old, new)):
        _compare_values(old_item, new_item, f"{path}/{index}", changes)


class JsonSchemaAnalyzer(SchemaAnalyzer[Any]):
    """Analyzes JSON Schema changes."""

    format = SchemaFormat.JSON_SCHEMA
    weights = JSON_SCHEMA_WEIGHTS

    def parse(self, content: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise JsonError(str(e)) from e

    def compare(self, old_doc: Any, new_doc: Any) -> List[SchemaChange]:
        return diff_json(old_doc, new_doc)

    def validate_change(self, change: SchemaChange) -> Optional[ValidationError]:
        return None
