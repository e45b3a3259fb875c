"""Tests for Draw.io generator."""

import xml.etree.ElementTree as ET

import pytest
from erd_engine.generators.drawio import DrawioOptions, format_column_label, generate_drawio
from erd_engine.models import (
    Column,
    ColumnType,
    ForeignKeyReference,
    PositionedSchema,
    PositionedTable,
    RelationshipEdge,
    RelationshipType,
)


@pytest.fixture
def schema():
    users = PositionedTable(
        name="users",
        id="table-1",
        columns=[Column(name="id", type=ColumnType.INT, primary_key=True, nullable=False)],
        x=50, y=50, width=200, height=80,
    )
    posts = PositionedTable(
        name="posts & drafts",
        id="table-2",
        columns=[
            Column(name="id", type=ColumnType.INT, primary_key=True, nullable=False),
            Column(
                name="user_id",
                type=ColumnType.INT,
                nullable=False,
                references=ForeignKeyReference(table="users", column="id"),
            ),
        ],
        x=350, y=50, width=200, height=106,
    )
    edge = RelationshipEdge(
        id="edge-1",
        source="table-1",
        target="table-2",
        relationship_type=RelationshipType.ONE_TO_MANY,
        source_column="id",
        target_column="user_id",
    )
    return PositionedSchema(tables=[users, posts], edges=[edge])


def _cells(xml: str) -> list[ET.Element]:
    return ET.fromstring(xml.encode()).findall(".//mxCell")


class TestGenerateDrawio:
    """Tests for the Draw.io XML output."""

    def test_is_well_formed(self, schema):
        root = ET.fromstring(generate_drawio(schema).encode())
        assert root.tag == "mxfile"
        assert root.get("agent") == "erd-engine"

    def test_one_cell_per_table_and_column(self, schema):
        cells = _cells(generate_drawio(schema))
        vertices = [c for c in cells if c.get("vertex") == "1"]
        assert len(vertices) == 5
        assert {c.get("value") for c in vertices} >= {"users", "posts & drafts"}

    def test_cell_ids_are_unique(self, schema):
        ids = [c.get("id") for c in _cells(generate_drawio(schema))]
        assert len(ids) == len(set(ids))

    def test_ids_restart_per_call(self, schema):
        first = [c.get("id") for c in _cells(generate_drawio(schema))]
        second = [c.get("id") for c in _cells(generate_drawio(schema))]
        assert first == second

    def test_edge_connects_columns(self, schema):
        cells = _cells(generate_drawio(schema))
        by_id = {c.get("id"): c for c in cells}
        edge = next(c for c in cells if c.get("edge") == "1")

        assert by_id[edge.get("source")].get("value") == "id: INT [PK]"
        assert by_id[edge.get("target")].get("value") == "user_id: INT [FK, NN]"
        assert "endArrow=ERmany" in edge.get("style")
        assert "startArrow=ERmandOne" in edge.get("style")

    def test_edge_to_unknown_column_uses_table(self, schema):
        schema.edges[0].target_column = "gone"
        cells = _cells(generate_drawio(schema))
        by_id = {c.get("id"): c for c in cells}
        edge = next(c for c in cells if c.get("edge") == "1")
        assert by_id[edge.get("target")].get("value") == "posts & drafts"

    def test_edge_to_unknown_table_is_skipped(self, schema):
        schema.edges[0].target = "table-99"
        assert not [c for c in _cells(generate_drawio(schema)) if c.get("edge") == "1"]

    def test_custom_colors(self, schema):
        xml = generate_drawio(schema, DrawioOptions(pk_color="#123456"))
        assert "fillColor=#123456" in xml

    def test_geometry(self, schema):
        cells = _cells(generate_drawio(schema))
        table = next(c for c in cells if c.get("value") == "users")
        geometry = table.find("mxGeometry")
        assert (geometry.get("x"), geometry.get("y")) == ("50.00", "50.00")


class TestFormatColumnLabel:
    """Tests for column labels."""

    def test_plain_column(self):
        assert format_column_label(Column(name="bio", type=ColumnType.TEXT)) == "bio: TEXT"

    def test_length_and_tags(self):
        column = Column(name="email", type=ColumnType.VARCHAR, length=255, nullable=False, unique=True)
        assert format_column_label(column) == "email: VARCHAR(255) [NN, UQ]"

    def test_decimal_scale(self):
        column = Column(name="price", type=ColumnType.DECIMAL, length=10, scale=2)
        assert format_column_label(column) == "price: DECIMAL(10,2)"
