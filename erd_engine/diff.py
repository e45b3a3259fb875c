"""Structural comparison of two schemas."""

from dataclasses import dataclass, field
from typing import Any

from erd_engine.models import Column, Schema, Table

COMPARED_PROPERTIES = (
    "type", "length", "scale", "nullable", "primary_key", "unique", "references", "default",
)


@dataclass
class PropertyChange:
    """One compared property whose value differs."""
    property: str
    old_value: Any
    new_value: Any


@dataclass
class ColumnDiff:
    """Column added, removed or modified between two schemas."""
    column_name: str
    old_type: str | None = None
    new_type: str | None = None
    changes: list[PropertyChange] = field(default_factory=list)


@dataclass
class TableDiff:
    """Column-level changes of one table."""
    table_name: str
    columns_added: list[ColumnDiff] = field(default_factory=list)
    columns_removed: list[ColumnDiff] = field(default_factory=list)
    columns_modified: list[ColumnDiff] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.columns_added or self.columns_removed or self.columns_modified)


@dataclass
class DiffSummary:
    """Counts of table and column changes."""
    total_changes: int = 0
    added_tables: int = 0
    removed_tables: int = 0
    modified_tables: int = 0
    columns_added: int = 0
    columns_removed: int = 0
    columns_modified: int = 0


@dataclass
class SchemaDiff:
    """Result of comparing two schemas."""
    tables_added: list[TableDiff] = field(default_factory=list)
    tables_removed: list[TableDiff] = field(default_factory=list)
    tables_modified: list[TableDiff] = field(default_factory=list)
    summary: DiffSummary = field(default_factory=DiffSummary)


def compare_schemas(old: Schema, new: Schema) -> SchemaDiff:
    """Tables and columns added, removed or changed between two schemas.

    Tables and columns are matched by name, case-insensitively.
    """
    result = SchemaDiff()
    old_tables = {t.name.lower(): t for t in old.tables}
    new_tables = {t.name.lower(): t for t in new.tables}

    for key, table in new_tables.items():
        if key not in old_tables:
            result.tables_added.append(
                TableDiff(
                    table_name=table.name,
                    columns_added=[_column_entry(c) for c in table.columns],
                )
            )

    for key, table in old_tables.items():
        if key not in new_tables:
            result.tables_removed.append(
                TableDiff(
                    table_name=table.name,
                    columns_removed=[_column_entry(c, removed=True) for c in table.columns],
                )
            )

    for key, table in new_tables.items():
        if key in old_tables:
            table_diff = _compare_table(old_tables[key], table)
            if table_diff.has_changes:
                result.tables_modified.append(table_diff)

    summary = result.summary
    summary.added_tables = len(result.tables_added)
    summary.removed_tables = len(result.tables_removed)
    summary.modified_tables = len(result.tables_modified)
    summary.columns_added = sum(len(t.columns_added) for t in result.tables_modified)
    summary.columns_removed = sum(len(t.columns_removed) for t in result.tables_modified)
    summary.columns_modified = sum(len(t.columns_modified) for t in result.tables_modified)
    summary.total_changes = (
        summary.added_tables
        + summary.removed_tables
        + summary.columns_added
        + summary.columns_removed
        + summary.columns_modified
    )
    return result


def _compare_table(old: Table, new: Table) -> TableDiff:
    diff = TableDiff(table_name=new.name)
    old_columns = {c.name.lower(): c for c in old.columns}
    new_columns = {c.name.lower(): c for c in new.columns}

    for key, column in new_columns.items():
        if key not in old_columns:
            diff.columns_added.append(_column_entry(column))
        else:
            changes = _compare_column(old_columns[key], column)
            if changes:
                diff.columns_modified.append(
                    ColumnDiff(
                        column_name=column.name,
                        old_type=_type_name(old_columns[key]),
                        new_type=_type_name(column),
                        changes=changes,
                    )
                )

    for key, column in old_columns.items():
        if key not in new_columns:
            diff.columns_removed.append(_column_entry(column, removed=True))

    return diff


def _compare_column(old: Column, new: Column) -> list[PropertyChange]:
    changes = []
    for prop in COMPARED_PROPERTIES:
        old_value, new_value = _property(old, prop), _property(new, prop)
        if old_value != new_value:
            changes.append(PropertyChange(property=prop, old_value=old_value, new_value=new_value))
    return changes


def _property(column: Column, prop: str) -> Any:
    if prop == "type":
        return _type_name(column)
    if prop == "references":
        ref = column.references
        return f"{ref.table}.{ref.column}" if ref else None
    return getattr(column, prop)


def _type_name(column: Column) -> str:
    return getattr(column.type, "value", column.type)


def _column_entry(column: Column, removed: bool = False) -> ColumnDiff:
    if removed:
        return ColumnDiff(column_name=column.name, old_type=_type_name(column))
    return ColumnDiff(column_name=column.name, new_type=_type_name(column))
