"""Tests that generated DDL parses back to the same schema."""

import copy

import pytest
from erd_engine.dialects import DIALECT_FEATURES
from erd_engine.generators import generate_sql
from erd_engine.models import (
    Column,
    ColumnType,
    Constraint,
    ConstraintKind,
    ForeignKeyReference,
    Schema,
    Table,
)
from erd_engine.parsers import parse_sql

# Types every dialect renders natively and reads back unchanged
PORTABLE_COLUMNS = [
    Column(name="id", type=ColumnType.INT, primary_key=True, nullable=False),
    Column(name="name", type=ColumnType.VARCHAR, length=100, nullable=False),
    Column(name="bio", type=ColumnType.TEXT),
    Column(name="active", type=ColumnType.BOOLEAN),
    Column(name="born_on", type=ColumnType.DATE),
    Column(name="created_at", type=ColumnType.TIMESTAMP),
    Column(name="price", type=ColumnType.DECIMAL, length=10, scale=2),
    Column(name="rating", type=ColumnType.FLOAT),
    Column(name="score", type=ColumnType.DOUBLE),
    Column(name="quantity", type=ColumnType.DECIMAL, length=8),
    Column(name="tier", type=ColumnType.DECIMAL, length=1),
]

UUID_DIALECTS = [key for key, features in DIALECT_FEATURES.items() if features.supports_uuid]


def _schema() -> Schema:
    users = Table(name="users", columns=copy.deepcopy(PORTABLE_COLUMNS))
    posts = Table(
        name="posts",
        columns=[
            Column(name="id", type=ColumnType.INT, primary_key=True, nullable=False),
            Column(
                name="user_id",
                type=ColumnType.INT,
                nullable=False,
                references=ForeignKeyReference(table="users", column="id"),
            ),
            Column(name="slug", type=ColumnType.VARCHAR, length=80, unique=True),
        ],
    )
    return Schema(tables=[users, posts])


def _shape(schema: Schema) -> list:
    return [
        (
            table.name,
            [
                (
                    c.name,
                    c.type,
                    c.length,
                    c.scale,
                    c.nullable,
                    c.primary_key,
                    c.unique,
                    (c.references.table, c.references.column) if c.references else None,
                )
                for c in table.columns
            ],
        )
        for table in schema.tables
    ]


class TestRoundTrip:
    """Generating and re-parsing keeps the schema."""

    @pytest.mark.parametrize("dialect", list(DIALECT_FEATURES))
    def test_portable_schema(self, dialect):
        original = _schema()
        parsed = parse_sql(generate_sql(original, dialect), dialect)

        assert _shape(parsed) == _shape(original)
        assert len(parsed.edges) == 1

    @pytest.mark.parametrize("dialect", UUID_DIALECTS)
    def test_uuid_keys(self, dialect):
        original = Schema(
            tables=[
                Table(
                    name="accounts",
                    columns=[
                        Column(name="id", type=ColumnType.UUID, primary_key=True, nullable=False),
                        Column(name="owner_id", type=ColumnType.UUID,
                               references=ForeignKeyReference(table="accounts", column="id")),
                    ],
                )
            ]
        )
        parsed = parse_sql(generate_sql(original, dialect), dialect)
        assert _shape(parsed) == _shape(original)

    def test_oracle_boolean_and_single_digit_decimal_stay_apart(self):
        original = Schema(
            tables=[
                Table(
                    name="flags",
                    columns=[
                        Column(name="enabled", type=ColumnType.BOOLEAN),
                        Column(name="grade", type=ColumnType.DECIMAL, length=1),
                    ],
                )
            ]
        )
        sql = generate_sql(original, "oracle")
        table = parse_sql(sql, "oracle").tables[0]

        assert '"enabled" NUMBER(1)' in sql
        assert [(c.type, c.length) for c in table.columns] == [
            (ColumnType.BOOLEAN, None),
            (ColumnType.DECIMAL, 1),
        ]

    def test_postgresql_specific_types(self):
        original = Schema(
            tables=[
                Table(
                    name="events",
                    columns=[
                        Column(name="id", type=ColumnType.UUID, primary_key=True, nullable=False),
                        Column(name="payload", type=ColumnType.JSON),
                        Column(name="ratio", type=ColumnType.DOUBLE),
                        Column(name="labels", type=ColumnType.ARRAY, element_type=ColumnType.TEXT),
                        Column(name="state", type=ColumnType.ENUM, values=["new", "done"]),
                    ],
                )
            ]
        )
        parsed = parse_sql(generate_sql(original, "postgresql"), "postgresql")
        table = parsed.tables[0]

        assert [c.type for c in table.columns] == [c.type for c in original.tables[0].columns]
        assert table.get_column("labels").element_type == ColumnType.TEXT
        assert table.get_column("state").values == ["new", "done"]

    def test_mysql_enum_and_json(self):
        original = Schema(
            tables=[
                Table(
                    name="orders",
                    columns=[
                        Column(name="state", type=ColumnType.ENUM, values=["new", "paid"]),
                        Column(name="meta", type=ColumnType.JSON),
                    ],
                )
            ]
        )
        table = parse_sql(generate_sql(original, "mysql"), "mysql").tables[0]
        assert table.get_column("state").type == ColumnType.ENUM
        assert table.get_column("state").values == ["new", "paid"]
        assert table.get_column("meta").type == ColumnType.JSON

    def test_defaults_and_checks(self):
        original = Schema(
            tables=[
                Table(
                    name="items",
                    columns=[
                        Column(
                            name="status",
                            type=ColumnType.VARCHAR,
                            length=20,
                            constraints=[Constraint(kind=ConstraintKind.DEFAULT, value="'draft'")],
                        ),
                        Column(
                            name="qty",
                            type=ColumnType.INT,
                            constraints=[Constraint(kind=ConstraintKind.CHECK, expression="qty > 0")],
                        ),
                    ],
                )
            ]
        )
        table = parse_sql(generate_sql(original, "mysql"), "mysql").tables[0]
        assert table.get_column("status").default == "'draft'"
        assert table.get_column("qty").checks == ["qty > 0"]

    def test_unsupported_type_falls_back_and_reparses(self):
        original = Schema(
            tables=[Table(name="t", columns=[Column(name="doc", type=ColumnType.JSON)])]
        )
        table = parse_sql(generate_sql(original, "sqlserver"), "sqlserver").tables[0]
        assert table.columns[0].type == ColumnType.VARCHAR
        assert table.columns[0].length == 255
