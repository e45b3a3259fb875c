"""Heuristic relationship inference.

Both passes only read the schema and return suggestions. Applying a
suggestion goes through ``apply_suggestion``, which returns a new Schema.
"""

import copy
import itertools
import logging
import re
from typing import Iterable

from erd_engine.models import (
    Column,
    ForeignKeyReference,
    RelationshipEdge,
    RelationshipSuggestion,
    RelationshipType,
    Schema,
    Table,
    singularize,
)

logger = logging.getLogger(__name__)

NAMING_CONFIDENCE = 0.8
MANY_TO_MANY_CONFIDENCE = 0.6
LEXICAL_CONFIDENCE = 0.5


def infer_basic(tables: Iterable[Table]) -> list[RelationshipSuggestion]:
    """Suggest foreign keys from ``<table>_id`` style column names.

    A column of B named ``{a}_id`` or ``{a}id`` (where ``a`` is table A's name
    or its singular) whose type matches A's primary key yields a one-to-many
    suggestion A -> B. Columns that already are foreign keys are skipped.
    """
    tables = list(tables)
    ids = itertools.count(1)
    suggestions: list[RelationshipSuggestion] = []

    for referenced in tables:
        stems = {referenced.name.lower(), singularize(referenced.name).lower()}
        candidates = {f"{stem}_id" for stem in stems} | {f"{stem}id" for stem in stems}
        pk_columns = referenced.primary_key_columns

        for table in tables:
            if table is referenced:
                continue
            for column in table.columns:
                if column.is_foreign_key or column.name.lower() not in candidates:
                    continue
                primary_key = next((pk for pk in pk_columns if pk.type == column.type), None)
                if primary_key is None:
                    continue
                suggestions.append(
                    RelationshipSuggestion(
                        id=f"suggestion-{next(ids)}",
                        source_table=referenced.name,
                        target_table=table.name,
                        relationship_type=RelationshipType.ONE_TO_MANY,
                        confidence=NAMING_CONFIDENCE,
                        reason=(
                            f"Column '{table.name}.{column.name}' matches the name and type "
                            f"of primary key '{referenced.name}.{primary_key.name}'"
                        ),
                        source_column=primary_key.name,
                        target_column=column.name,
                    )
                )

    logger.debug("Naming-pattern pass produced %d suggestions", len(suggestions))
    return suggestions


def infer_advanced(schema: Schema) -> list[RelationshipSuggestion]:
    """Suggest many-to-many and one-to-many links from table names alone."""
    tables = schema.tables
    ids = itertools.count(1)
    suggestions: list[RelationshipSuggestion] = []
    names = {t.name for t in tables}

    # Pairs of plural entities often need an association table
    for first, second in itertools.combinations(tables, 2):
        if not (_is_plural(first.name) and _is_plural(second.name)):
            continue
        join_names = {
            f"{first.name[:-1]}_{second.name}",
            f"{second.name[:-1]}_{first.name}",
            f"{first.name}_{second.name}",
            f"{second.name}_{first.name}",
        }
        if join_names & names or _connected(schema, first, second):
            continue
        suggestions.append(
            RelationshipSuggestion(
                id=f"suggestion-{next(ids)}",
                source_table=first.name,
                target_table=second.name,
                relationship_type=RelationshipType.MANY_TO_MANY,
                confidence=MANY_TO_MANY_CONFIDENCE,
                reason=(
                    f"Tables with plural names '{first.name}' and '{second.name}' often have "
                    "a many-to-many relationship. Consider creating a join table."
                ),
            )
        )

    # Entity names embedded in other table names
    for table in tables:
        words = [_normalize_word(w) for w in re.split(r"[_\s]+", table.name.lower())]
        words = [w for w in words if len(w) > 2]

        for other in tables:
            if other is table:
                continue
            other_name = other.name.lower()
            if not any(_names_entity(other_name, word) for word in words):
                continue
            if _connected(schema, table, other):
                continue
            suggestions.append(
                RelationshipSuggestion(
                    id=f"suggestion-{next(ids)}",
                    source_table=other.name,
                    target_table=table.name,
                    relationship_type=RelationshipType.ONE_TO_MANY,
                    confidence=LEXICAL_CONFIDENCE,
                    reason=(
                        f"Tables '{other.name}' and '{table.name}' appear to be related based "
                        "on naming patterns. Consider adding a foreign key."
                    ),
                )
            )

    logger.debug("Structural pass produced %d suggestions", len(suggestions))
    return suggestions


def _is_plural(name: str) -> bool:
    return name.lower().endswith("s")


def _normalize_word(word: str) -> str:
    return word[:-1] if word.endswith("s") and len(word) > 1 else word


def _names_entity(table_name: str, word: str) -> bool:
    return (
        table_name == word
        or table_name == f"{word}s"
        or table_name == f"{word}_table"
        or table_name.startswith(f"{word}_")
        or table_name.endswith(f"_{word}")
    )


def _connected(schema: Schema, first: Table, second: Table) -> bool:
    """Whether an edge or a foreign key links the two tables."""
    if schema.edges_between(first, second):
        return True
    return any(
        c.references_table and c.references_table.lower() == second.name.lower()
        for c in first.columns
    ) or any(
        c.references_table and c.references_table.lower() == first.name.lower()
        for c in second.columns
    )


def apply_suggestion(schema: Schema, suggestion: RelationshipSuggestion) -> Schema:
    """Return a copy of ``schema`` with ``suggestion`` turned into real keys.

    One-to-many (and one-to-one) suggestions add a foreign key column on the
    target table; many-to-many suggestions add a join table. Foreign keys
    that already exist are left alone.
    """
    result = copy.deepcopy(schema)
    source = result.get_table(suggestion.source_table)
    target = result.get_table(suggestion.target_table)
    if source is None or target is None:
        logger.warning(
            "Cannot apply suggestion %s: unknown table %s or %s",
            suggestion.id, suggestion.source_table, suggestion.target_table,
        )
        return result

    if suggestion.relationship_type == RelationshipType.MANY_TO_MANY:
        _add_join_table(result, source, target)
    else:
        _add_foreign_key(
            result,
            source,
            target,
            suggestion.relationship_type,
            suggestion.source_column,
            suggestion.target_column,
        )
    return result


def _referenced_key(table: Table, column_name: str | None) -> Column:
    """The column a new foreign key to ``table`` should reference."""
    if column_name and table.get_column(column_name):
        return table.get_column(column_name)
    pk = table.primary_key_columns
    if pk:
        return pk[0]
    return table.get_column("id") or Column(name="id")


def _add_foreign_key(
    schema: Schema,
    source: Table,
    target: Table,
    relationship_type: RelationshipType,
    source_column: str | None,
    target_column: str | None,
    *,
    primary_key: bool = False,
) -> None:
    key = _referenced_key(source, source_column)
    column_name = target_column or f"{singularize(source.name).lower()}_{key.name}"
    column = target.get_column(column_name)

    if column is None:
        column = Column(
            name=column_name,
            type=key.type,
            id=_next_id("column", _all_column_ids(schema)),
            length=key.length,
            scale=key.scale,
            nullable=not primary_key,
            primary_key=primary_key,
        )
        target.columns.append(column)
    elif column.is_foreign_key:
        logger.debug("%s.%s is already a foreign key", target.name, column.name)
        return

    column.references = ForeignKeyReference(table=source.name, column=key.name)
    schema.edges.append(
        RelationshipEdge(
            id=_next_id("edge", {e.id for e in schema.edges}),
            source=source.id,
            target=target.id,
            relationship_type=relationship_type,
            source_column=key.name,
            target_column=column.name,
        )
    )


def _add_join_table(schema: Schema, first: Table, second: Table) -> None:
    name = f"{singularize(first.name)}_{second.name}"
    if schema.get_table(name):
        logger.debug("Join table %s already exists", name)
        return

    join_table = Table(name=name, id=_next_id("table", {t.id for t in schema.tables}))
    schema.tables.append(join_table)
    for side in (first, second):
        _add_foreign_key(
            schema, side, join_table, RelationshipType.ONE_TO_MANY, None, None, primary_key=True
        )


def _all_column_ids(schema: Schema) -> set[str]:
    return {c.id for t in schema.tables for c in t.columns}


def _next_id(prefix: str, taken: set[str]) -> str:
    n = len(taken) + 1
    while f"{prefix}-{n}" in taken:
        n += 1
    return f"{prefix}-{n}"
