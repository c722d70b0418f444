"""Public API for the schemadiff package.

High-level functions that pick the analyzer for a schema's declared
format and return complete, structured results. Callers that already
know the dialect can use the analyzer classes directly.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Sequence, Union

from schemadiff.contracts import CompatibilityReport, MigrationPlan, ValidationResult
from schemadiff.errors import InvalidFormat, SchemaIOError
from schemadiff.kernel.analyzer import SchemaAnalyzer
from schemadiff.kernel.diff import SchemaChange
from schemadiff.kernel.json_schema import JsonSchemaAnalyzer
from schemadiff.kernel.openapi import OpenApiAnalyzer
from schemadiff.kernel.protobuf import ProtobufAnalyzer
from schemadiff.kernel.schema import Schema, SchemaFormat
from schemadiff.kernel.sql import SqlAnalyzer

logger = logging.getLogger(__name__)


# Analyzers are stateless, so one shared instance per dialect is enough
_ANALYZERS: Dict[SchemaFormat, SchemaAnalyzer] = {
    SchemaFormat.JSON_SCHEMA: JsonSchemaAnalyzer(),
    SchemaFormat.OPENAPI: OpenApiAnalyzer(),
    SchemaFormat.PROTOBUF: ProtobufAnalyzer(),
    SchemaFormat.SQL_DDL: SqlAnalyzer(),
}


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def get_analyzer(format: Union[SchemaFormat, str]) -> SchemaAnalyzer:
    """Analyzer for a schema format.

    Raises:
        InvalidFormat: If the format is unknown
    """
    try:
        return _ANALYZERS[SchemaFormat(format)]
    except (KeyError, ValueError) as e:
        raise InvalidFormat(f"No analyzer for schema format {format!r}") from e


def _analyzer_for_pair(old: Schema, new: Schema) -> SchemaAnalyzer:
    if old.format != new.format:
        raise InvalidFormat(
            f"Cannot compare a {old.format.value} schema with a {new.format.value} schema"
        )
    return get_analyzer(old.format)


def analyze(old: Schema, new: Schema) -> CompatibilityReport:
    """Compatibility report between two versions of the same schema.

    Raises:
        InvalidFormat: If the two schemas declare different formats
        ParseError: If either schema's content cannot be parsed
    """
    return _analyzer_for_pair(old, new).analyze_compatibility(old, new)


def plan_migration(old: Schema, new: Schema) -> MigrationPlan:
    """Migration plan between two versions of the same schema.

    Raises:
        InvalidFormat: If the two schemas declare different formats
        ParseError: If either schema's content cannot be parsed
    """
    return _analyzer_for_pair(old, new).generate_migration_path(old, new)


def validate(format: Union[SchemaFormat, str], changes: Sequence[SchemaChange]) -> ValidationResult:
    """Classify an already-computed change sequence with a dialect's rules.

    This is READ-ONLY - nothing is parsed or diffed again.
    """
    return get_analyzer(format).validate_changes(changes)


def load_schema(
    path: Union[str, os.PathLike, Path],
    format: Union[SchemaFormat, str],
    version: str,
) -> Schema:
    """Load a schema document from a UTF-8 text file.

    Raises:
        InvalidFormat: If the format is unknown
        SchemaIOError: If the file cannot be read
    """
    schema_format = get_analyzer(format).format
    path = _normalize_path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise SchemaIOError(f"Cannot read schema file {path}: {e}") from e
    logger.debug("Loaded %s schema %s from %s", schema_format.value, version, path)
    return Schema(format=schema_format, content=content, version=version)
