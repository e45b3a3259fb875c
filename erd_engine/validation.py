"""Schema validation against structural checks and named rules.

Rules are small expressions applied per table, for example
``has_column('id')``, ``min_columns(3)``, ``has_column_type('id', 'INT')``,
``naming_convention('snake_case')`` or ``has_primary_key``.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from erd_engine.models import Schema, Table
from erd_engine.parsers.ddl import split_top_level

logger = logging.getLogger(__name__)

_RULE_RE = re.compile(r"^\s*(?P<name>\w+)\s*(?:\((?P<args>.*)\))?\s*$", re.DOTALL)

NAMING_CONVENTIONS = {
    "snake_case": re.compile(r"^[a-z][a-z0-9_]*$"),
    "camel_case": re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    "pascal_case": re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
}


class InvalidRuleError(ValueError):
    """Raised for a rule expression that cannot be evaluated."""


@dataclass
class ValidationRule:
    """Named rule, applied to ``tables`` or to every table when empty."""
    name: str
    rule: str
    tables: list[str] = field(default_factory=list)
    description: str = ""

    def applies_to(self, table: Table) -> bool:
        return not self.tables or table.name.lower() in {t.lower() for t in self.tables}


@dataclass
class ValidationResult:
    """Outcome of validating a schema."""
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


COMMON_VALIDATION_RULES = [
    ValidationRule("PK Required", "has_primary_key",
                   description="Every table must have a primary key"),
    ValidationRule("ID Column", "has_column('id')",
                   description="Every table should have an 'id' column"),
    ValidationRule("Created At", "has_column('created_at')",
                   description="Every table should have a 'created_at' timestamp"),
    ValidationRule("Updated At", "has_column('updated_at')",
                   description="Every table should have an 'updated_at' timestamp"),
    ValidationRule("Snake Case Naming", "naming_convention('snake_case')",
                   description="Table names should follow snake_case naming convention"),
]


def validate_schema(schema: Schema, rules: list[ValidationRule] | None = None) -> ValidationResult:
    """Check ``schema`` for structural problems and against ``rules``.

    Structural checks cover duplicate column names, missing primary keys,
    foreign keys to unknown tables or columns, foreign key type mismatches
    and relationship edges whose tables do not exist.

    Raises:
        InvalidRuleError: If a rule expression is malformed or unknown.
    """
    result = ValidationResult()

    for rule in rules or []:
        for table in schema.tables:
            if rule.applies_to(table) and not evaluate_rule(table, rule.rule):
                result.errors.append(
                    f'Table "{table.name}" failed validation rule "{rule.name}": {rule.rule}'
                )

    for table in schema.tables:
        result.errors.extend(_check_table(schema, table))

    for edge in schema.edges:
        for end in (edge.source, edge.target):
            if schema.get_table_by_id(end) is None:
                result.errors.append(f'Relationship "{edge.id}" refers to unknown table id "{end}"')

    logger.debug("Validated %d tables: %d errors", len(schema.tables), len(result.errors))
    return result


def _check_table(schema: Schema, table: Table) -> list[str]:
    errors = []

    names = [c.name.lower() for c in table.columns]
    if len(set(names)) < len(names):
        errors.append(f'Table "{table.name}" has duplicate column names')

    if not table.primary_key_columns:
        errors.append(f'Table "{table.name}" has no primary key')

    for fk in table.foreign_key_columns:
        target_table = schema.get_table(fk.references.table)
        if target_table is None:
            errors.append(
                f'Foreign key "{fk.name}" in table "{table.name}" references '
                f'non-existent table "{fk.references.table}"'
            )
            continue

        target_column = target_table.get_column(fk.references.column)
        if target_column is None:
            errors.append(
                f'Foreign key "{fk.name}" in table "{table.name}" references '
                f'non-existent column "{fk.references.column}" in table "{target_table.name}"'
            )
        elif fk.type != target_column.type:
            errors.append(
                f'Foreign key "{fk.name}" in table "{table.name}" has type "{_type_name(fk)}" '
                f'which is incompatible with referenced column type "{_type_name(target_column)}"'
            )

    return errors


def _type_name(column) -> str:
    return getattr(column.type, "value", column.type)


def evaluate_rule(table: Table, rule: str) -> bool:
    """Evaluate one rule expression against ``table``."""
    match = _RULE_RE.match(rule)
    if not match or match.group("name") not in _RULES:
        raise InvalidRuleError(f"Unknown validation rule: {rule}")

    check, arity = _RULES[match.group("name")]
    args = [
        arg.strip().strip("'\"")
        for arg in split_top_level(match.group("args") or "", ",")
        if arg.strip()
    ]
    if len(args) != arity:
        raise InvalidRuleError(f"Rule {rule} expects {arity} argument(s), got {len(args)}")
    return check(table, *args)


def _has_primary_key(table: Table) -> bool:
    return bool(table.primary_key_columns)


def _has_column(table: Table, name: str) -> bool:
    return table.get_column(name) is not None


def _min_columns(table: Table, count: str) -> bool:
    if not count.isdigit():
        raise InvalidRuleError(f"min_columns expects a number, got {count!r}")
    return len(table.columns) >= int(count)


def _has_column_type(table: Table, name: str, type_name: str) -> bool:
    column = table.get_column(name)
    return column is not None and _type_name(column).upper() == type_name.upper()


def _naming_convention(table: Table, convention: str) -> bool:
    try:
        pattern = NAMING_CONVENTIONS[convention.lower()]
    except KeyError:
        raise InvalidRuleError(f"Unknown naming convention: {convention}") from None
    return bool(pattern.match(table.name))


_RULES: dict[str, tuple[Callable[..., bool], int]] = {
    "has_primary_key": (_has_primary_key, 0),
    "has_column": (_has_column, 1),
    "min_columns": (_min_columns, 1),
    "has_column_type": (_has_column_type, 2),
    "naming_convention": (_naming_convention, 1),
}
