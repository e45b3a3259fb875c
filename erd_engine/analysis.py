"""Schema review: design suggestions beyond relationship inference.

``analyze_schema`` runs a fixed set of checks (common tables, unlinked
``*_id`` columns, indexes, normalization, naming, data types, timestamps,
constraints and sensitive data) and returns advisory suggestions. Where a
suggestion has an obvious fix, ``action`` holds the SQL for the schema's
dialect.
"""

import itertools
import logging
import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from erd_engine.dialects import get_dialect
from erd_engine.generators.sql import quote_identifier, render_type
from erd_engine.models import Column, ColumnType, Schema, Table, singularize

logger = logging.getLogger(__name__)

WIDE_TABLE_COLUMNS = 20
LONG_VARCHAR_LENGTH = 1000

_COMMON_TABLES = {
    "users": ("user accounts", ["id", "username", "email", "password", "created_at"]),
    "roles": ("user roles for permission management", ["id", "name", "description"]),
    "permissions": ("permissions for access control", ["id", "name", "description"]),
}
_FILTER_WORDS = ("status", "type", "category", "active", "enabled", "deleted")
_FLAG_NAMES = {"active", "enabled", "deleted"}
_OPTIONAL_NAMES = {"description", "notes", "comments", "bio", "address", "middle_name"}
_CREATED_NAMES = {"created_at", "createdat", "creation_date"}
_UPDATED_NAMES = {"updated_at", "updatedat", "last_updated"}
_PASSWORD_NAMES = {"password", "user_password", "pass"}
_CARD_WORDS = ("credit_card", "creditcard", "card_number", "cardnumber")
_SENSITIVE_WORDS = ("ssn", "social_security", "passport", "tax_id")

_CONVENTIONS = (
    ("snake_case", re.compile(r"^[a-z][a-z0-9_]*$")),
    ("camelCase", re.compile(r"^[a-z][a-zA-Z0-9]*$")),
    ("PascalCase", re.compile(r"^[A-Z][a-zA-Z0-9]*$")),
)


class SuggestionKind(str, Enum):
    """Area of the schema a suggestion is about."""
    MISSING_TABLE = "missing_table"
    MISSING_FK = "missing_fk"
    INDEX_OPPORTUNITY = "index_opportunity"
    NORMALIZATION_ISSUE = "normalization_issue"
    NAMING_CONSISTENCY = "naming_consistency"
    DATA_TYPE_OPTIMIZATION = "data_type_optimization"
    MISSING_TIMESTAMP = "missing_timestamp"
    MISSING_CONSTRAINTS = "missing_constraints"
    SECURITY_CONCERN = "security_concern"


class Priority(str, Enum):
    """How soon a suggestion deserves attention."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class SchemaSuggestion:
    """Advisory finding about a schema's design."""
    id: str
    kind: SuggestionKind
    priority: Priority
    table_name: str
    description: str
    reason: str
    column_name: str | None = None
    action: str | None = None


def analyze_schema(schema: Schema) -> list[SchemaSuggestion]:
    """Review ``schema`` and return suggestions in check order.

    The schema is not modified.
    """
    ids = (f"suggestion-{n}" for n in itertools.count(1))
    sql = _SQL(schema.dialect)
    checks = [
        _check_common_tables(schema),
        _check_missing_foreign_keys(schema, sql),
        _check_indexes(schema, sql),
        _check_normalization(schema),
        _check_naming(schema),
        _check_data_types(schema),
        _check_timestamps(schema, sql),
        _check_constraints(schema, sql),
        _check_security(schema),
    ]

    suggestions = []
    for suggestion in itertools.chain.from_iterable(checks):
        suggestion.id = next(ids)
        suggestions.append(suggestion)

    logger.debug("Schema analysis produced %d suggestions", len(suggestions))
    return suggestions


class _SQL:
    """Dialect-specific statements used as suggestion actions."""

    def __init__(self, dialect: str):
        self.features = get_dialect(dialect)

    def q(self, name: str) -> str:
        return quote_identifier(name, self.features.key)

    def add_column(self, table: Table, definition: str) -> str:
        key = self.features.key
        if key == "sqlserver":
            return f"ALTER TABLE {self.q(table.name)} ADD {definition};"
        if key == "oracle":
            return f"ALTER TABLE {self.q(table.name)} ADD ({definition});"
        return f"ALTER TABLE {self.q(table.name)} ADD COLUMN {definition};"

    def add_constraint(self, table: Table, name: str, body: str) -> str | None:
        if self.features.key == "sqlite":
            return None
        return f"ALTER TABLE {self.q(table.name)} ADD CONSTRAINT {self.q(name)} {body};"

    def create_index(self, table: Table, column: Column, unique: bool = False) -> str:
        name = self.q(f"idx_{table.name}_{column.name}")
        keyword = "CREATE UNIQUE INDEX" if unique else "CREATE INDEX"
        return f"{keyword} {name} ON {self.q(table.name)} ({self.q(column.name)});"

    def drop_not_null(self, table: Table, column: Column) -> str | None:
        key, table_name, column_name = self.features.key, self.q(table.name), self.q(column.name)
        if key == "postgresql":
            return f"ALTER TABLE {table_name} ALTER COLUMN {column_name} DROP NOT NULL;"
        if key == "sqlserver":
            rendered = render_type(column, self.features, table)
            return f"ALTER TABLE {table_name} ALTER COLUMN {column_name} {rendered} NULL;"
        if key == "sqlite":
            return None
        rendered = render_type(column, self.features, table)
        return f"ALTER TABLE {table_name} MODIFY {column_name} {rendered} NULL;"

    def timestamp(self) -> str:
        return render_type(Column(name="ts", type=ColumnType.TIMESTAMP), self.features)


def _suggest(kind, priority, table_name, description, reason, column_name=None, action=None):
    return SchemaSuggestion(
        id="",
        kind=kind,
        priority=priority,
        table_name=table_name,
        description=description,
        reason=reason,
        column_name=column_name,
        action=action,
    )


def _find_common_table(schema: Schema, name: str) -> Table | None:
    candidates = {name, f"{name}_table", singularize(name)}
    return next((t for t in schema.tables if t.name.lower() in candidates), None)


def _check_common_tables(schema: Schema) -> Iterator[SchemaSuggestion]:
    for name, (purpose, expected) in _COMMON_TABLES.items():
        table = _find_common_table(schema, name)
        if table is None:
            yield _suggest(
                SuggestionKind.MISSING_TABLE, Priority.MEDIUM, name,
                f"Consider adding a {name} table for {purpose}",
                f"Most applications require a {name} table for {purpose}",
            )
            continue

        present = {c.name.lower() for c in table.columns}
        for column in expected:
            aliases = {column, f"{column}_column", f"{table.name.lower()}_{column}"}
            if not present & aliases:
                yield _suggest(
                    SuggestionKind.MISSING_CONSTRAINTS, Priority.MEDIUM, table.name,
                    f"Consider adding a {column} column to the {table.name} table",
                    f"The {column} column is typically expected in a {name} table",
                    column_name=column,
                )


def _check_missing_foreign_keys(schema: Schema, sql: _SQL) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        for column in table.columns:
            match = re.match(r"^(.+?)_?id$", column.name, re.IGNORECASE)
            if column.is_foreign_key or not match:
                continue

            stem = match.group(1).lower()
            candidates = {stem, f"{stem}s", f"{stem}_table"}
            referenced = next((t for t in schema.tables if t.name.lower() in candidates), None)
            if referenced is None:
                continue
            primary_key = next(iter(referenced.primary_key_columns), None)
            if primary_key is None or primary_key is column or primary_key.type != column.type:
                continue

            yield _suggest(
                SuggestionKind.MISSING_FK, Priority.HIGH, table.name,
                f"Column {column.name} looks like a foreign key to {referenced.name}",
                f"The column name and type match the primary key of the {referenced.name} table",
                column_name=column.name,
                action=sql.add_constraint(
                    table,
                    f"fk_{table.name}_{column.name}",
                    f"FOREIGN KEY ({sql.q(column.name)}) "
                    f"REFERENCES {sql.q(referenced.name)} ({sql.q(primary_key.name)})",
                ),
            )


def _check_indexes(schema: Schema, sql: _SQL) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        for column in table.columns:
            if column.primary_key:
                continue
            if column.is_foreign_key:
                yield _suggest(
                    SuggestionKind.INDEX_OPPORTUNITY, Priority.MEDIUM, table.name,
                    f"Consider adding an index on foreign key {column.name}",
                    "Foreign keys are frequently used in JOINs and WHERE clauses",
                    column_name=column.name,
                    action=sql.create_index(table, column),
                )
            elif column.unique:
                yield _suggest(
                    SuggestionKind.INDEX_OPPORTUNITY, Priority.MEDIUM, table.name,
                    f"Consider adding a unique index on {column.name}",
                    "Columns with unique constraints benefit from unique indexes for lookups",
                    column_name=column.name,
                    action=sql.create_index(table, column, unique=True),
                )
            elif any(word in column.name.lower() for word in _FILTER_WORDS):
                yield _suggest(
                    SuggestionKind.INDEX_OPPORTUNITY, Priority.LOW, table.name,
                    f"Consider adding an index on {column.name}",
                    f"Columns like {column.name} are often used in WHERE clauses",
                    column_name=column.name,
                    action=sql.create_index(table, column),
                )


def _check_normalization(schema: Schema) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        for column in table.columns:
            lowered = column.name.lower()
            if column.type in (ColumnType.ARRAY, ColumnType.JSON):
                yield _suggest(
                    SuggestionKind.NORMALIZATION_ISSUE, Priority.MEDIUM, table.name,
                    f"Consider normalizing {column.name} into a separate table",
                    "Arrays or JSON in a column may hide data that belongs in its own table",
                    column_name=column.name,
                )
            if lowered.endswith(("list", "ids", "names")) or "_list_" in lowered:
                yield _suggest(
                    SuggestionKind.NORMALIZATION_ISSUE, Priority.MEDIUM, table.name,
                    f"Column {column.name} might contain multiple values that should be normalized",
                    "List-like column names often stand for a one-to-many relationship",
                    column_name=column.name,
                )

        if len(table.columns) > WIDE_TABLE_COLUMNS:
            yield _suggest(
                SuggestionKind.NORMALIZATION_ISSUE, Priority.LOW, table.name,
                f"Table {table.name} has {len(table.columns)} columns and might need to be split",
                "Very wide tables often mix several entities",
            )


def _convention(name: str) -> str:
    return next((label for label, pattern in _CONVENTIONS if pattern.match(name)), "other")


def _dominant(names: list[str]) -> str | None:
    """Most common naming convention, or None when tied or unrecognized."""
    ranked = Counter(_convention(n) for n in names).most_common(2)
    if not ranked or ranked[0][0] == "other":
        return None
    if len(ranked) > 1 and ranked[1][1] == ranked[0][1]:
        return None
    return ranked[0][0]


def _check_naming(schema: Schema) -> Iterator[SchemaSuggestion]:
    table_convention = _dominant([t.name for t in schema.tables])
    column_convention = _dominant([c.name for t in schema.tables for c in t.columns])
    reason = "Consistent naming improves readability and maintainability"

    for table in schema.tables:
        if table_convention and _convention(table.name) != table_convention:
            yield _suggest(
                SuggestionKind.NAMING_CONSISTENCY, Priority.LOW, table.name,
                f"Table name {table.name} doesn't follow the dominant "
                f"{table_convention} convention",
                reason,
            )
        for column in table.columns:
            if column_convention and _convention(column.name) != column_convention:
                yield _suggest(
                    SuggestionKind.NAMING_CONSISTENCY, Priority.LOW, table.name,
                    f"Column name {column.name} doesn't follow the dominant "
                    f"{column_convention} convention",
                    reason,
                    column_name=column.name,
                )


def _check_data_types(schema: Schema) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        for column in table.columns:
            lowered = column.name.lower()
            if column.type == ColumnType.VARCHAR and (column.length or 0) > LONG_VARCHAR_LENGTH:
                yield _suggest(
                    SuggestionKind.DATA_TYPE_OPTIMIZATION, Priority.MEDIUM, table.name,
                    f"Consider using TEXT instead of VARCHAR({column.length}) "
                    f"for column {column.name}",
                    "TEXT suits very long strings better than a large VARCHAR",
                    column_name=column.name,
                )
            if column.type == ColumnType.INT and (
                lowered.startswith(("is_", "has_")) or lowered in _FLAG_NAMES
            ):
                yield _suggest(
                    SuggestionKind.DATA_TYPE_OPTIMIZATION, Priority.LOW, table.name,
                    f"Consider using BOOLEAN instead of INT for column {column.name}",
                    "The column name suggests a true/false value",
                    column_name=column.name,
                )
            if column.type == ColumnType.DECIMAL and "price" in lowered:
                yield _suggest(
                    SuggestionKind.DATA_TYPE_OPTIMIZATION, Priority.LOW, table.name,
                    f"Ensure DECIMAL(10,2) precision for price column {column.name}",
                    "Currency amounts need a fixed precision and scale",
                    column_name=column.name,
                )


def _has_timestamp(table: Table, names: set[str]) -> bool:
    return any(
        c.name.lower() in names and c.type in (ColumnType.TIMESTAMP, ColumnType.DATE)
        for c in table.columns
    )


def _check_timestamps(schema: Schema, sql: _SQL) -> Iterator[SchemaSuggestion]:
    timestamp = sql.timestamp()
    for table in schema.tables:
        if not _has_timestamp(table, _CREATED_NAMES):
            yield _suggest(
                SuggestionKind.MISSING_TIMESTAMP, Priority.MEDIUM, table.name,
                f"Consider adding a created_at TIMESTAMP column to {table.name}",
                "Tracking row creation time helps auditing and data analysis",
                action=sql.add_column(
                    table,
                    f"{sql.q('created_at')} {timestamp} NOT NULL DEFAULT CURRENT_TIMESTAMP",
                ),
            )
        if not _has_timestamp(table, _UPDATED_NAMES):
            yield _suggest(
                SuggestionKind.MISSING_TIMESTAMP, Priority.LOW, table.name,
                f"Consider adding an updated_at TIMESTAMP column to {table.name}",
                "Knowing when rows change helps troubleshooting and auditing",
                action=sql.add_column(table, f"{sql.q('updated_at')} {timestamp} NULL"),
            )


def _check_constraints(schema: Schema, sql: _SQL) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        if not table.primary_key_columns:
            yield _suggest(
                SuggestionKind.MISSING_CONSTRAINTS, Priority.HIGH, table.name,
                f"Table {table.name} is missing a primary key",
                "Primary keys ensure row uniqueness and improve query performance",
            )

        for column in table.columns:
            lowered = column.name.lower()
            if not column.nullable and not column.primary_key and lowered in _OPTIONAL_NAMES:
                yield _suggest(
                    SuggestionKind.MISSING_CONSTRAINTS, Priority.LOW, table.name,
                    f"Consider making {column.name} nullable",
                    "Descriptions, notes and optional personal details are usually nullable",
                    column_name=column.name,
                    action=sql.drop_not_null(table, column),
                )

            if "email" not in lowered or column.type != ColumnType.VARCHAR:
                continue
            if not column.unique:
                yield _suggest(
                    SuggestionKind.MISSING_CONSTRAINTS, Priority.MEDIUM, table.name,
                    f"Consider adding a UNIQUE constraint to email column {column.name}",
                    "Email addresses are typically unique per user",
                    column_name=column.name,
                    action=sql.add_constraint(
                        table, f"uq_{table.name}_{column.name}", f"UNIQUE ({sql.q(column.name)})"
                    ),
                )
            if not any("email" in check.lower() for check in column.checks):
                yield _suggest(
                    SuggestionKind.MISSING_CONSTRAINTS, Priority.LOW, table.name,
                    f"Consider adding a CHECK constraint for email format on {column.name}",
                    "Validating the format in the database keeps invalid addresses out",
                    column_name=column.name,
                    action=sql.add_constraint(
                        table,
                        f"chk_{table.name}_{column.name}",
                        f"CHECK ({sql.q(column.name)} LIKE '%_@_%._%')",
                    ),
                )


def _check_security(schema: Schema) -> Iterator[SchemaSuggestion]:
    for table in schema.tables:
        for column in table.columns:
            if column.type != ColumnType.VARCHAR:
                continue
            lowered = column.name.lower()
            if lowered in _PASSWORD_NAMES:
                yield _suggest(
                    SuggestionKind.SECURITY_CONCERN, Priority.HIGH, table.name,
                    f"Rename {column.name} to password_hash to make clear it stores hashes",
                    "Plain passwords are a security risk; the name should say it holds hashes",
                    column_name=column.name,
                )
            elif any(word in lowered for word in _CARD_WORDS):
                yield _suggest(
                    SuggestionKind.SECURITY_CONCERN, Priority.HIGH, table.name,
                    "Consider tokenizing credit card data or storing only the last 4 digits",
                    "Full card numbers are a security risk and may violate PCI requirements",
                    column_name=column.name,
                )
            elif any(word in lowered for word in _SENSITIVE_WORDS):
                yield _suggest(
                    SuggestionKind.SECURITY_CONCERN, Priority.HIGH, table.name,
                    f"Consider encrypting or hashing sensitive data in {column.name}",
                    "Personal identifiers should be encrypted or hashed",
                    column_name=column.name,
                )
