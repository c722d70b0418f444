"""schemadiff: schema evolution compatibility analysis.

Compares two versions of a JSON Schema, OpenAPI, Protobuf or SQL DDL
schema and reports the changes, a compatibility score and the migration
impact.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("schemadiff")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from schemadiff.api import analyze, plan_migration, validate, get_analyzer, load_schema
from schemadiff.codes import ValidationCode
from schemadiff.contracts import (
    CompatibilityIssue,
    CompatibilityReport,
    IssueSeverity,
    MigrationPlan,
    ValidationError,
    ValidationResult,
)
from schemadiff.errors import (
    ComparisonError,
    InvalidFormat,
    JsonError,
    ParseError,
    ProtobufError,
    SchemaDiffError,
    SchemaIOError,
)
from schemadiff.kernel.analyzer import SchemaAnalyzer
from schemadiff.kernel.diff import ChangeType, SchemaChange
from schemadiff.kernel.json_schema import JsonSchemaAnalyzer
from schemadiff.kernel.openapi import OpenApiAnalyzer
from schemadiff.kernel.protobuf import ProtobufAnalyzer
from schemadiff.kernel.schema import Schema, SchemaFormat
from schemadiff.kernel.sql import SqlAnalyzer

__all__ = [
    "__version__",
    "analyze",
    "plan_migration",
    "validate",
    "get_analyzer",
    "load_schema",
    "ValidationCode",
    "CompatibilityIssue",
    "CompatibilityReport",
    "IssueSeverity",
    "MigrationPlan",
    "ValidationError",
    "ValidationResult",
    "ComparisonError",
    "InvalidFormat",
    "JsonError",
    "ParseError",
    "ProtobufError",
    "SchemaDiffError",
    "SchemaIOError",
    "SchemaAnalyzer",
    "ChangeType",
    "SchemaChange",
    "JsonSchemaAnalyzer",
    "OpenApiAnalyzer",
    "ProtobufAnalyzer",
    "Schema",
    "SchemaFormat",
    "SqlAnalyzer",
]
