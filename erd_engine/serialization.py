"""JSON form of a Schema."""

import json
from dataclasses import asdict
from typing import Any

from erd_engine.models import (
    Column,
    ColumnType,
    Constraint,
    ConstraintKind,
    ForeignKeyReference,
    RelationshipEdge,
    RelationshipType,
    Schema,
    Table,
)


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    """Plain-data form of ``schema`` with enums as their values."""
    return json.loads(json.dumps(asdict(schema), default=_enum_value))


def _enum_value(value: Any) -> Any:
    if hasattr(value, "value"):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def schema_from_dict(data: dict[str, Any]) -> Schema:
    """Rebuild a Schema from ``schema_to_dict`` output.

    Raises KeyError or ValueError for documents that are missing required
    fields or carry unknown enum values.
    """
    tables = [
        Table(
            name=t["name"],
            id=t.get("id", ""),
            columns=[_column_from_dict(c) for c in t.get("columns", [])],
        )
        for t in data.get("tables", [])
    ]
    edges = [
        RelationshipEdge(
            id=e["id"],
            source=e["source"],
            target=e["target"],
            relationship_type=RelationshipType(e.get("relationship_type", "one-to-many")),
            source_column=e.get("source_column"),
            target_column=e.get("target_column"),
        )
        for e in data.get("edges", [])
    ]
    return Schema(tables=tables, edges=edges, dialect=data.get("dialect", "mysql"))


def _column_from_dict(data: dict[str, Any]) -> Column:
    references = data.get("references")
    element_type = data.get("element_type")
    return Column(
        name=data["name"],
        type=ColumnType(data.get("type", "VARCHAR")),
        id=data.get("id", ""),
        length=data.get("length"),
        scale=data.get("scale"),
        nullable=data.get("nullable", True),
        primary_key=data.get("primary_key", False),
        unique=data.get("unique", False),
        references=ForeignKeyReference(**references) if references else None,
        constraints=[
            Constraint(
                kind=ConstraintKind(c["kind"]),
                expression=c.get("expression"),
                value=c.get("value"),
            )
            for c in data.get("constraints", [])
        ],
        values=list(data.get("values", [])),
        element_type=ColumnType(element_type) if element_type else None,
    )


def schema_to_json(schema: Schema, indent: int | None = 2) -> str:
    return json.dumps(schema_to_dict(schema), indent=indent)


def schema_from_json(text: str) -> Schema:
    return schema_from_dict(json.loads(text))
