"""SQL DDL structural diff.

Only CREATE TABLE statements are examined. Tables are matched by name and
columns by name within a matched table.

Column constraints are compared as a set of kinds, matched by presence:
- NOT NULL (an explicit NULL is not a constraint)
- DEFAULT (presence only: a changed default value is never reported)
- UNIQUE / PRIMARY KEY (the is-primary flag tells the two apart)
- CHECK, REFERENCES and every other column option, under its own kind

Text that sqlglot can only read as an opaque command or as a bare
expression (``CREATE TABEL ...``, ``hello``) is a parse failure.
"""

from dataclasses import dataclass
from typing import List, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import ErrorLevel, SqlglotError

from schemadiff.codes import ValidationCode
from schemadiff.contracts import IssueSeverity, ValidationError
from schemadiff.errors import ParseError
from .analyzer import SchemaAnalyzer
from .diff import ChangeType, SchemaChange, match_by_key
from .schema import SchemaFormat
from .scoring import SQL_WEIGHTS


# Nodes sqlglot falls back to for input it cannot read as a statement
_NON_STATEMENTS = (exp.Command, exp.Condition, exp.Alias, exp.Identifier, exp.Tuple, exp.Star)


@dataclass(frozen=True)
class ColumnConstraint:
    """A compared column constraint: its kind plus the original SQL text."""
    kind: str  # "NOT NULL" | "DEFAULT" | "UNIQUE" | "PRIMARY KEY" | "CHECK" | "REFERENCES" | ...
    sql: str


@dataclass(frozen=True)
class Column:
    name: str
    data_type: str
    constraints: tuple


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple


def _constraint_kind(constraint: exp.Expression) -> Optional[str]:
    kind = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint
    if kind is None:
        return None
    if isinstance(kind, exp.NotNullColumnConstraint):
        # Plain NULL parses as NotNull with allow_null set
        return None if kind.args.get("allow_null") else "NOT NULL"
    if isinstance(kind, exp.DefaultColumnConstraint):
        return "DEFAULT"
    if isinstance(kind, exp.PrimaryKeyColumnConstraint):
        return "PRIMARY KEY"
    if isinstance(kind, exp.UniqueColumnConstraint):
        return "UNIQUE"
    if isinstance(kind, exp.CheckColumnConstraint):
        return "CHECK"
    if isinstance(kind, exp.Reference):
        return "REFERENCES"
    # e.g. CollateColumnConstraint -> COLLATE
    return type(kind).__name__.replace("ColumnConstraint", "").upper()


def _column_from_def(column_def: exp.ColumnDef) -> Column:
    data_type = column_def.args.get("kind")
    constraints = []
    for constraint in column_def.args.get("constraints") or []:
        kind = _constraint_kind(constraint)
        if kind is not None:
            constraints.append(ColumnConstraint(kind=kind, sql=constraint.sql()))
    return Column(
        name=column_def.name,
        data_type=data_type.sql() if data_type is not None else "",
        constraints=tuple(constraints),
    )


def tables_from_statements(statements: List[Optional[exp.Expression]]) -> List[Table]:
    """CREATE TABLE statements as Table values, other statements dropped."""
    tables: List[Table] = []
    for statement in statements:
        if not isinstance(statement, exp.Create):
            continue
        if str(statement.args.get("kind") or "").upper() != "TABLE":
            continue

        target = statement.this
        if isinstance(target, exp.Schema):
            table = target.this
            column_defs = [e for e in target.expressions if isinstance(e, exp.ColumnDef)]
        else:
            # CREATE TABLE ... AS SELECT has no column list
            table = target
            column_defs = []

        tables.append(Table(
            name=table.sql() if table is not None else "",
            columns=tuple(_column_from_def(c) for c in column_defs),
        ))
    return tables


def diff_tables(old_tables: List[Table], new_tables: List[Table]) -> List[SchemaChange]:
    """Table, column, type and constraint changes."""
    changes: List[SchemaChange] = []

    for pair in match_by_key(old_tables, new_tables, key=lambda t: t.name):
        name = pair.key
        if pair.removed:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=f"table/{name}",
                description=f"Table '{name}' was removed",
                metadata={"table": name},
            ))
        elif pair.added:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=f"table/{name}",
                description=f"New table '{name}' was added",
                metadata={"table": name},
            ))
        else:
            changes.extend(diff_columns(name, pair.old.columns, pair.new.columns))

    return changes


def diff_columns(table: str, old_columns: tuple, new_columns: tuple) -> List[SchemaChange]:
    changes: List[SchemaChange] = []

    for pair in match_by_key(old_columns, new_columns, key=lambda c: c.name):
        column = pair.key
        if pair.removed:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=f"{table}/{column}",
                description=f"Column '{column}' was removed",
                metadata={"table": table, "column": column},
            ))
        elif pair.added:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=f"{table}/{column}",
                description=f"New column '{column}' was added",
                metadata={"table": table, "column": column},
            ))
        else:
            old_col, new_col = pair.old, pair.new
            if old_col.data_type != new_col.data_type:
                changes.append(SchemaChange(
                    change_type=ChangeType.MODIFICATION,
                    location=f"{table}/{column}/type",
                    description=(
                        f"Column '{column}' type changed from {old_col.data_type} to {new_col.data_type}"
                    ),
                    metadata={
                        "table": table,
                        "column": column,
                        "old_type": old_col.data_type,
                        "new_type": new_col.data_type,
                    },
                ))
            changes.extend(diff_constraints(table, column, old_col.constraints, new_col.constraints))

    return changes


def diff_constraints(table: str, column: str, old_constraints: tuple, new_constraints: tuple) -> List[SchemaChange]:
    """Constraint kinds removed from / added to one column."""
    changes: List[SchemaChange] = []
    location = f"{table}/{column}/constraints"

    for pair in match_by_key(old_constraints, new_constraints, key=lambda c: c.kind):
        if pair.removed:
            changes.append(SchemaChange(
                change_type=ChangeType.REMOVAL,
                location=location,
                description=f"Constraint removed from column '{column}': {pair.old.kind}",
                metadata={"table": table, "column": column, "constraint": pair.old.sql},
            ))
        elif pair.added:
            changes.append(SchemaChange(
                change_type=ChangeType.ADDITION,
                location=location,
                description=f"New constraint added to column '{column}': {pair.new.kind}",
                metadata={"table": table, "column": column, "constraint": pair.new.sql},
            ))

    return changes


class SqlAnalyzer(SchemaAnalyzer[List[Table]]):
    """Analyzes SQL DDL changes."""

    format = SchemaFormat.SQL_DDL
    weights = SQL_WEIGHTS
    severity_by_code = {
        ValidationCode.SQL_ERROR.value: IssueSeverity.ERROR,
        ValidationCode.SQL_WARNING.value: IssueSeverity.WARNING,
        ValidationCode.SQL_INFO.value: IssueSeverity.INFO,
    }
    code_by_severity = {severity: code for code, severity in severity_by_code.items()}

    def parse(self, content: str) -> List[Table]:
        try:
            statements = sqlglot.parse(content, error_level=ErrorLevel.RAISE)
        except SqlglotError as e:
            raise ParseError(str(e), dialect="SQL") from e

        for statement in statements:
            if isinstance(statement, _NON_STATEMENTS):
                raise ParseError(
                    f"not a SQL statement: {statement.sql()[:80]!r}", dialect="SQL"
                )
        return tables_from_statements(statements)

    def compare(self, old_doc: List[Table], new_doc: List[Table]) -> List[SchemaChange]:
        return diff_tables(old_doc, new_doc)

    def validate_change(self, change: SchemaChange) -> Optional[ValidationError]:
        if change.change_type == ChangeType.REMOVAL:
            severity = IssueSeverity.ERROR
            message = f"Breaking change: {change.description}"
        elif change.change_type == ChangeType.MODIFICATION and "type" in change.location:
            severity = IssueSeverity.WARNING
            message = f"Potential data loss: {change.description}"
        else:
            return None

        return ValidationError(
            message=message,
            path=change.location,
            code=self.code_by_severity[severity],
        )

    def statement_hint(self, change: SchemaChange) -> str:
        """Indicative DDL for a change. Text only; never executed."""
        table = change.metadata.get("table", change.location)
        column = change.metadata.get("column")
        is_table = change.location.startswith("table/")

        if change.change_type == ChangeType.ADDITION:
            if is_table:
                return f"CREATE TABLE {table} (...);"
            if change.location.endswith("/constraints"):
                return f"ALTER TABLE {table} ALTER COLUMN {column} ADD {change.metadata.get('constraint', '...')};"
            return f"ALTER TABLE {table} ADD COLUMN {column} ...;"
        if change.change_type == ChangeType.REMOVAL:
            if is_table:
                return f"DROP TABLE {table};"
            if change.location.endswith("/constraints"):
                return f"ALTER TABLE {table} ALTER COLUMN {column} DROP {change.metadata.get('constraint', '...')};"
            return f"ALTER TABLE {table} DROP COLUMN {column};"
        if change.change_type == ChangeType.MODIFICATION:
            new_type = change.metadata.get("new_type", "...")
            return f"ALTER TABLE {table} MODIFY COLUMN {column} {new_type};"
        return f"ALTER TABLE {table} RENAME ...;"
