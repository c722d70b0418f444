"""Centralized canonical JSON serialization.

This module provides the single rendering used wherever a parsed document
value has to become text: change metadata, change descriptions, and the
flat equality checks the OpenAPI analyzer performs on whole sub-documents.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization for stable comparison and display.

    Rules:
    - Sorted keys
    - Stable separators (",", ":")
    - Non-ASCII kept as-is
    - Non-JSON leaves (dates from YAML, etc.) rendered with str()

    Args:
        obj: Parsed document value to serialize

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compact_dumps(obj: Any) -> str:
    """Compact JSON rendering that keeps document key order."""
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=str)


def json_equal(a: Any, b: Any) -> bool:
    """Type-strict structural equality of two parsed JSON values.

    Python treats ``True == 1`` and ``1 == 1.0`` as equal; JSON documents
    do not, so the comparison goes through the canonical text instead.
    Object key order is irrelevant, array order is significant.
    """
    return canonical_dumps(a) == canonical_dumps(b)
