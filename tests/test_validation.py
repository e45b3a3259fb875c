"""Tests for schema validation."""

import pytest
from erd_engine.models import (
    Column,
    ColumnType,
    ForeignKeyReference,
    RelationshipEdge,
    Schema,
    Table,
)
from erd_engine.validation import (
    COMMON_VALIDATION_RULES,
    InvalidRuleError,
    ValidationRule,
    evaluate_rule,
    validate_schema,
)


def _pk(name: str = "id") -> Column:
    return Column(name=name, type=ColumnType.INT, primary_key=True, nullable=False)


@pytest.fixture
def schema():
    users = Table(
        name="users",
        id="table-1",
        columns=[_pk(), Column(name="email", length=255), Column(name="created_at", type=ColumnType.TIMESTAMP)],
    )
    posts = Table(
        name="posts",
        id="table-2",
        columns=[
            _pk(),
            Column(name="user_id", type=ColumnType.INT, references=ForeignKeyReference("users", "id")),
        ],
    )
    edge = RelationshipEdge(id="edge-1", source="table-1", target="table-2")
    return Schema(tables=[users, posts], edges=[edge])


class TestValidateSchema:
    """Tests for the structural checks."""

    def test_valid_schema(self, schema):
        result = validate_schema(schema)
        assert result.is_valid
        assert result.errors == []

    def test_duplicate_columns(self, schema):
        schema.tables[0].columns.append(Column(name="Email"))
        assert validate_schema(schema).errors == ['Table "users" has duplicate column names']

    def test_missing_primary_key(self, schema):
        schema.tables[0].columns[0].primary_key = False
        assert validate_schema(schema).errors == ['Table "users" has no primary key']

    def test_foreign_key_to_unknown_table(self, schema):
        schema.tables[1].columns[1].references = ForeignKeyReference("accounts", "id")
        assert validate_schema(schema).errors == [
            'Foreign key "user_id" in table "posts" references non-existent table "accounts"'
        ]

    def test_foreign_key_to_unknown_column(self, schema):
        schema.tables[1].columns[1].references = ForeignKeyReference("users", "uuid")
        assert validate_schema(schema).errors == [
            'Foreign key "user_id" in table "posts" references non-existent column "uuid" in table "users"'
        ]

    def test_foreign_key_type_mismatch(self, schema):
        schema.tables[1].columns[1].type = ColumnType.VARCHAR
        assert validate_schema(schema).errors == [
            'Foreign key "user_id" in table "posts" has type "VARCHAR" '
            'which is incompatible with referenced column type "INT"'
        ]

    def test_edge_to_unknown_table_id(self, schema):
        schema.edges.append(RelationshipEdge(id="edge-2", source="table-1", target="table-9"))
        assert validate_schema(schema).errors == [
            'Relationship "edge-2" refers to unknown table id "table-9"'
        ]

    def test_rule_failures_come_first(self, schema):
        schema.tables[0].columns[0].primary_key = False
        rules = [ValidationRule("Has Email", "has_column('email')")]
        assert validate_schema(schema, rules).errors == [
            'Table "posts" failed validation rule "Has Email": has_column(\'email\')',
            'Table "users" has no primary key',
        ]

    def test_rule_scoped_to_tables(self, schema):
        rules = [ValidationRule("Has Email", "has_column('email')", tables=["USERS"])]
        assert validate_schema(schema, rules).is_valid

    def test_common_rules(self, schema):
        errors = validate_schema(schema, COMMON_VALIDATION_RULES).errors
        assert errors == [
            'Table "posts" failed validation rule "Created At": has_column(\'created_at\')',
            'Table "users" failed validation rule "Updated At": has_column(\'updated_at\')',
            'Table "posts" failed validation rule "Updated At": has_column(\'updated_at\')',
        ]


class TestEvaluateRule:
    """Tests for individual rule expressions."""

    @pytest.fixture
    def table(self):
        return Table(
            name="user_accounts",
            columns=[_pk(), Column(name="Email", length=255), Column(name="age", type=ColumnType.INT)],
        )

    @pytest.mark.parametrize(
        "rule, expected",
        [
            ("has_primary_key", True),
            ("has_primary_key()", True),
            ("has_column('email')", True),
            ('has_column("phone")', False),
            ("min_columns(3)", True),
            ("min_columns(4)", False),
            ("has_column_type('age', 'int')", True),
            ("has_column_type('age', 'VARCHAR')", False),
            ("has_column_type('phone', 'INT')", False),
            ("naming_convention('snake_case')", True),
            ("naming_convention('camel_case')", False),
            ("naming_convention('pascal_case')", False),
        ],
    )
    def test_rules(self, table, rule, expected):
        assert evaluate_rule(table, rule) is expected

    def test_camel_and_pascal_case_differ(self):
        assert evaluate_rule(Table(name="userAccounts"), "naming_convention('camel_case')")
        assert not evaluate_rule(Table(name="userAccounts"), "naming_convention('pascal_case')")
        assert evaluate_rule(Table(name="UserAccounts"), "naming_convention('pascal_case')")

    @pytest.mark.parametrize(
        "rule",
        [
            "has_index('email')",
            "has_column",
            "has_column('a', 'b')",
            "min_columns('many')",
            "naming_convention('kebab_case')",
            "has_column('id') or 1",
        ],
    )
    def test_invalid_rules(self, table, rule):
        with pytest.raises(InvalidRuleError):
            evaluate_rule(table, rule)

    def test_invalid_rule_stops_validation(self, table):
        with pytest.raises(ValueError):
            validate_schema(Schema(tables=[table]), [ValidationRule("Bad", "unknown_rule")])
