"""Tests for JSON serialization."""

import json

import pytest
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
from erd_engine.serialization import (
    schema_from_dict,
    schema_from_json,
    schema_to_dict,
    schema_to_json,
)


@pytest.fixture
def schema():
    return Schema(
        dialect="postgresql",
        tables=[
            Table(
                name="users",
                id="table-1",
                columns=[
                    Column(name="id", type=ColumnType.UUID, id="column-1", primary_key=True, nullable=False),
                    Column(
                        name="role",
                        type=ColumnType.ENUM,
                        id="column-2",
                        values=["admin", "member"],
                        constraints=[Constraint(kind=ConstraintKind.DEFAULT, value="'member'")],
                    ),
                    Column(name="tags", type=ColumnType.ARRAY, id="column-3", element_type=ColumnType.TEXT),
                ],
            ),
            Table(
                name="posts",
                id="table-2",
                columns=[
                    Column(
                        name="user_id",
                        type=ColumnType.UUID,
                        id="column-4",
                        references=ForeignKeyReference(table="users", column="id"),
                    ),
                ],
            ),
        ],
        edges=[
            RelationshipEdge(
                id="edge-1",
                source="table-1",
                target="table-2",
                relationship_type=RelationshipType.ONE_TO_MANY,
                source_column="id",
                target_column="user_id",
            )
        ],
    )


class TestSerialization:
    """Tests for converting schemas to and from JSON."""

    def test_enums_become_plain_values(self, schema):
        data = schema_to_dict(schema)
        assert data["tables"][0]["columns"][0]["type"] == "UUID"
        assert data["edges"][0]["relationship_type"] == "one-to-many"
        assert data["tables"][0]["columns"][1]["constraints"][0]["kind"] == "DEFAULT"

    def test_json_round_trip(self, schema):
        text = schema_to_json(schema)
        assert json.loads(text)["dialect"] == "postgresql"
        assert schema_from_json(text) == schema

    def test_missing_optional_fields_use_defaults(self):
        restored = schema_from_dict({"tables": [{"name": "t", "columns": [{"name": "c"}]}]})
        column = restored.tables[0].columns[0]
        assert column.type == ColumnType.VARCHAR
        assert column.nullable is True
        assert restored.dialect == "mysql"
        assert restored.edges == []

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            schema_from_dict({"tables": [{"name": "t", "columns": [{"name": "c", "type": "BLOB"}]}]})

    def test_missing_name_is_rejected(self):
        with pytest.raises(KeyError):
            schema_from_dict({"tables": [{"columns": []}]})
