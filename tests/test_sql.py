"""Tests for the SQL DDL analyzer."""

import pytest

from schemadiff.contracts import IssueSeverity
from schemadiff.errors import ParseError
from schemadiff.kernel.diff import ChangeType
from schemadiff.kernel.schema import Schema, SchemaFormat
from schemadiff.kernel.sql import SqlAnalyzer


def create_schema(content: str, version: str = "1.0.0") -> Schema:
    """Helper to create a SQL DDL schema value."""
    return Schema(format=SchemaFormat.SQL_DDL, content=content, version=version)


USERS_V1 = """
CREATE TABLE users (
    id INT PRIMARY KEY,
    name VARCHAR(100) NOT NULL
);
"""


def analyze(old: str, new: str):
    return SqlAnalyzer().analyze_compatibility(create_schema(old), create_schema(new))


def test_added_nullable_column():
    new = """
    CREATE TABLE users (
        id INT PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        email VARCHAR(255)
    );
    """
    report = analyze(USERS_V1, new)

    assert len(report.changes) == 1
    change = report.changes[0]
    assert change.change_type == ChangeType.ADDITION
    assert change.location == "users/email"
    assert change.metadata == {"table": "users", "column": "email"}
    assert report.compatibility_score == 95
    assert report.is_compatible is True
    assert report.issues == []


def test_dropped_column_is_compatible_and_breaking():
    """Compatibility and breakingness are independent axes."""
    new = "CREATE TABLE users (id INT PRIMARY KEY);"
    analyzer = SqlAnalyzer()
    old_schema, new_schema = create_schema(USERS_V1), create_schema(new, "2.0.0")

    report = analyzer.analyze_compatibility(old_schema, new_schema)
    plan = analyzer.generate_migration_path(old_schema, new_schema)

    assert [c.change_type for c in report.changes] == [ChangeType.REMOVAL]
    assert report.changes[0].description == "Column 'name' was removed"
    assert report.compatibility_score == 85
    assert report.is_compatible is True
    assert report.issues[0].severity == IssueSeverity.ERROR
    assert plan.is_breaking is True
    assert plan.impact_score == 100
    assert analyzer.validate_changes(report.changes).errors[0].code == "SQL001"


def test_type_change_is_warning():
    new = """
    CREATE TABLE users (
        id BIGINT PRIMARY KEY,
        name VARCHAR(100) NOT NULL
    );
    """
    analyzer = SqlAnalyzer()
    report = analyzer.analyze_compatibility(create_schema(USERS_V1), create_schema(new))

    assert len(report.changes) == 1
    change = report.changes[0]
    assert change.change_type == ChangeType.MODIFICATION
    assert change.location == "users/id/type"
    assert change.metadata["old_type"] == "INT"
    assert change.metadata["new_type"] == "BIGINT"
    assert report.compatibility_score == 90
    assert report.issues[0].severity == IssueSeverity.WARNING
    assert report.issues[0].description.startswith("Potential data loss:")
    assert analyzer.validate_changes(report.changes).errors[0].code == "SQL002"


def test_constraint_kinds_added_and_removed():
    old = "CREATE TABLE users (id INT PRIMARY KEY, email TEXT NOT NULL);"
    new = "CREATE TABLE users (id INT PRIMARY KEY, email TEXT UNIQUE);"
    report = analyze(old, new)

    assert [(c.change_type, c.location) for c in report.changes] == [
        (ChangeType.REMOVAL, "users/email/constraints"),
        (ChangeType.ADDITION, "users/email/constraints"),
    ]
    assert report.changes[0].description == "Constraint removed from column 'email': NOT NULL"
    assert report.changes[1].description == "New constraint added to column 'email': UNIQUE"
    assert report.compatibility_score == 80
    # Only the removal is a validation error
    assert [i.severity for i in report.issues] == [IssueSeverity.ERROR]


def test_primary_key_and_unique_are_distinct_kinds():
    old = "CREATE TABLE users (id INT UNIQUE);"
    new = "CREATE TABLE users (id INT PRIMARY KEY);"
    changes = SqlAnalyzer().detect_changes(create_schema(old), create_schema(new))

    assert [c.change_type for c in changes] == [ChangeType.REMOVAL, ChangeType.ADDITION]
    assert "UNIQUE" in changes[0].description
    assert "PRIMARY KEY" in changes[1].description


def test_changed_default_value_is_not_reported():
    old = "CREATE TABLE users (id INT, status INT DEFAULT 0);"
    new = "CREATE TABLE users (id INT, status INT DEFAULT 1);"
    assert analyze(old, new).changes == []


def test_default_presence_is_reported():
    old = "CREATE TABLE users (id INT, status INT);"
    new = "CREATE TABLE users (id INT, status INT DEFAULT 1);"
    changes = analyze(old, new).changes

    assert len(changes) == 1
    assert changes[0].description == "New constraint added to column 'status': DEFAULT"


def test_explicit_null_is_not_a_constraint():
    old = "CREATE TABLE users (id INT, email TEXT NULL);"
    new = "CREATE TABLE users (id INT, email TEXT);"
    assert analyze(old, new).changes == []


def test_tables_added_and_removed():
    old = USERS_V1 + "CREATE TABLE sessions (id INT);"
    new = USERS_V1 + "CREATE TABLE orders (id INT, user_id INT);"
    report = analyze(old, new)

    assert [(c.change_type, c.location) for c in report.changes] == [
        (ChangeType.REMOVAL, "table/sessions"),
        (ChangeType.ADDITION, "table/orders"),
    ]
    assert report.changes[0].description == "Table 'sessions' was removed"
    assert report.compatibility_score == 80


def test_non_create_table_statements_are_ignored():
    new = USERS_V1 + """
    CREATE INDEX idx_users_name ON users (name);
    INSERT INTO users (id, name) VALUES (1, 'a');
    """
    assert analyze(USERS_V1, new).changes == []


def test_unparseable_ddl_raises_parse_error():
    analyzer = SqlAnalyzer()
    with pytest.raises(ParseError) as excinfo:
        analyzer.analyze_compatibility(create_schema("CREATE TABLE users (id INT"), create_schema(USERS_V1))
    assert excinfo.value.dialect == "SQL"


@pytest.mark.parametrize("content", [
    "CREATE TABEL users (id INT);",
    "hello",
    '{"a": 1}',
    USERS_V1 + "CREATE TABEL orders (id INT);",
])
def test_text_that_is_not_ddl_raises_parse_error(content):
    """Misspelled keywords and bare expressions never yield an empty report."""
    analyzer = SqlAnalyzer()
    with pytest.raises(ParseError):
        analyzer.analyze_compatibility(create_schema(content), create_schema(USERS_V1))
    with pytest.raises(ParseError):
        analyzer.generate_migration_path(create_schema(USERS_V1), create_schema(content))


def test_added_check_constraint():
    old = "CREATE TABLE t (id INT, age INT);"
    new = "CREATE TABLE t (id INT, age INT CHECK (age > 0));"
    changes = SqlAnalyzer().detect_changes(create_schema(old), create_schema(new))

    assert [(c.change_type, c.location) for c in changes] == [(ChangeType.ADDITION, "t/age/constraints")]
    assert changes[0].description == "New constraint added to column 'age': CHECK"


def test_removed_references_constraint_is_error():
    old = "CREATE TABLE orders (id INT, user_id INT REFERENCES users(id));"
    new = "CREATE TABLE orders (id INT, user_id INT);"
    report = analyze(old, new)

    assert [(c.change_type, c.location) for c in report.changes] == [
        (ChangeType.REMOVAL, "orders/user_id/constraints"),
    ]
    assert report.changes[0].description == "Constraint removed from column 'user_id': REFERENCES"
    assert report.issues[0].severity == IssueSeverity.ERROR


def test_unchanged_check_constraint_is_silent():
    ddl = "CREATE TABLE t (id INT, age INT NOT NULL CHECK (age > 0));"
    assert analyze(ddl, ddl).changes == []


def test_statement_hints():
    analyzer = SqlAnalyzer()
    old = USERS_V1 + "CREATE TABLE sessions (id INT);"
    new = """
    CREATE TABLE users (id BIGINT PRIMARY KEY, email TEXT);
    """
    changes = analyzer.detect_changes(create_schema(old), create_schema(new))
    hints = [analyzer.statement_hint(c) for c in changes]

    assert hints == [
        "ALTER TABLE users MODIFY COLUMN id BIGINT;",
        "ALTER TABLE users DROP COLUMN name;",
        "ALTER TABLE users ADD COLUMN email ...;",
        "DROP TABLE sessions;",
    ]


def test_removals_saturate_score():
    old = " ".join(f"CREATE TABLE t{i} (id INT);" for i in range(7))
    report = analyze(old, "")

    assert len(report.changes) == 7  # 7 x 15 = 105
    assert report.compatibility_score == 0
    assert report.is_compatible is False
