"""Tests for the public API (api.py)."""

import json

import pytest

from schemadiff.api import analyze, get_analyzer, load_schema, plan_migration, validate
from schemadiff.contracts import CompatibilityReport, MigrationPlan, ValidationResult
from schemadiff.errors import InvalidFormat, JsonError, SchemaIOError
from schemadiff.kernel.diff import ChangeType, SchemaChange
from schemadiff.kernel.json_schema import JsonSchemaAnalyzer
from schemadiff.kernel.openapi import OpenApiAnalyzer
from schemadiff.kernel.protobuf import ProtobufAnalyzer
from schemadiff.kernel.schema import Schema, SchemaFormat
from schemadiff.kernel.sql import SqlAnalyzer


@pytest.mark.parametrize("schema_format,analyzer_cls", [
    (SchemaFormat.JSON_SCHEMA, JsonSchemaAnalyzer),
    (SchemaFormat.OPENAPI, OpenApiAnalyzer),
    (SchemaFormat.PROTOBUF, ProtobufAnalyzer),
    (SchemaFormat.SQL_DDL, SqlAnalyzer),
])
def test_get_analyzer_by_enum_and_string(schema_format, analyzer_cls):
    assert isinstance(get_analyzer(schema_format), analyzer_cls)
    assert isinstance(get_analyzer(schema_format.value), analyzer_cls)
    assert get_analyzer(schema_format).format == schema_format


def test_get_analyzer_unknown_format():
    with pytest.raises(InvalidFormat):
        get_analyzer("RustStruct")


def test_analyze_and_plan_dispatch_on_format():
    old = Schema(format=SchemaFormat.JSON_SCHEMA, content=json.dumps({"a": 1}), version="1.0.0")
    new = Schema(format=SchemaFormat.JSON_SCHEMA, content=json.dumps({"a": 1, "b": 2}), version="1.1.0")

    report = analyze(old, new)
    plan = plan_migration(old, new)

    assert isinstance(report, CompatibilityReport)
    assert report.compatibility_score == 95
    assert isinstance(plan, MigrationPlan)
    assert plan.impact_score == 25
    assert plan.source_version == "1.0.0"


def test_mismatched_formats_are_rejected():
    old = Schema(format=SchemaFormat.JSON_SCHEMA, content="{}", version="1")
    new = Schema(format=SchemaFormat.SQL_DDL, content="", version="2")

    with pytest.raises(InvalidFormat):
        analyze(old, new)
    with pytest.raises(InvalidFormat):
        plan_migration(old, new)


def test_parse_errors_propagate_without_partial_report():
    old = Schema(format=SchemaFormat.JSON_SCHEMA, content="{", version="1")
    new = Schema(format=SchemaFormat.JSON_SCHEMA, content="{}", version="2")

    with pytest.raises(JsonError):
        analyze(old, new)


def test_validate_is_read_only_classification():
    changes = [
        SchemaChange(ChangeType.REMOVAL, "users/name", "Column 'name' was removed"),
        SchemaChange(ChangeType.MODIFICATION, "users/id/type", "Column 'id' type changed from INT to TEXT"),
        SchemaChange(ChangeType.ADDITION, "users/email", "New column 'email' was added"),
    ]
    result = validate("SqlDDL", changes)

    assert isinstance(result, ValidationResult)
    assert result.is_valid is False
    assert [e.code for e in result.errors] == ["SQL001", "SQL002"]
    assert result.errors[0].message == "Breaking change: Column 'name' was removed"
    assert result.context["total_changes"] == "3"


def test_validate_empty_sequence_is_valid():
    result = validate(SchemaFormat.OPENAPI, [])

    assert result.is_valid is True
    assert result.errors == []
    assert result.context == {
        "additions": "0",
        "removals": "0",
        "modifications": "0",
        "renames": "0",
        "total_changes": "0",
    }


def test_load_schema(tmp_path):
    path = tmp_path / "users.sql"
    path.write_text("CREATE TABLE users (id INT);", encoding="utf-8")

    schema = load_schema(path, "SqlDDL", "1.0.0")
    assert schema.format == SchemaFormat.SQL_DDL
    assert schema.version == "1.0.0"
    assert schema.content == "CREATE TABLE users (id INT);"

    # String paths work too
    assert load_schema(str(path), SchemaFormat.SQL_DDL, "1.0.0") == schema


def test_load_schema_missing_file(tmp_path):
    with pytest.raises(SchemaIOError) as excinfo:
        load_schema(tmp_path / "missing.json", SchemaFormat.JSON_SCHEMA, "1.0.0")
    assert isinstance(excinfo.value, OSError)


def test_load_schema_unknown_format(tmp_path):
    path = tmp_path / "schema.rs"
    path.write_text("struct User {}", encoding="utf-8")

    with pytest.raises(InvalidFormat):
        load_schema(path, "RustStruct", "1.0.0")


def test_schema_is_immutable():
    schema = Schema(format=SchemaFormat.JSON_SCHEMA, content="{}", version="1")
    with pytest.raises(Exception):
        schema.content = "[]"
