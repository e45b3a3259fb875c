"""SQL DDL generator and display formatter."""

import logging
import re
from html import escape

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError
from sqlglot.parser import Parser
from sqlglot.tokens import Token, TokenType

from erd_engine.dialects import DialectFeatures, get_dialect, validate_identifier
from erd_engine.models import Column, ColumnType, ConstraintKind, Schema, Table

logger = logging.getLogger(__name__)

DEFAULT_VARCHAR_LENGTH = 255

_CONSTRAINT_WORDS = {
    "PRIMARY KEY", "PRIMARY", "FOREIGN KEY", "FOREIGN", "KEY", "REFERENCES",
    "NOT", "NULL", "UNIQUE", "DEFAULT", "CHECK", "CONSTRAINT",
}
_KEYWORD_WORDS = {"CREATE", "TABLE", "TYPE", "AS", "IF", "EXISTS"}
# Rendered type names the sqlglot tokenizers may report as plain words.
_TYPE_WORDS = {
    "INT", "INTEGER", "VARCHAR", "VARCHAR2", "NVARCHAR", "TEXT", "CLOB", "BOOLEAN",
    "BIT", "DATE", "TIMESTAMP", "DATETIME2", "FLOAT", "DOUBLE", "DOUBLE PRECISION",
    "BINARY_DOUBLE", "DECIMAL", "NUMBER", "JSON", "UUID", "UNIQUEIDENTIFIER", "ENUM",
    "MAX", "PRECISION", "REAL",
}


def generate_sql(schema: Schema, dialect: str = "mysql") -> str:
    """Generate CREATE TABLE statements for every table in ``schema``."""
    features = get_dialect(dialect)
    statements: list[str] = []

    for table in schema.tables:
        _warn_on_invalid_identifiers(table, features)
        statements.extend(_enum_type_statements(table, features))
        statements.append(_generate_table(table, features))

    return "\n\n".join(statements) + ("\n" if statements else "")


def quote_identifier(name: str, dialect: str = "mysql") -> str:
    """Quote an identifier the way ``dialect`` does."""
    features = get_dialect(dialect)
    return _quote(name, features)


def _quote(name: str, features: DialectFeatures) -> str:
    return exp.to_identifier(name, quoted=True).sql(dialect=features.sqlglot_dialect)


def _generate_table(table: Table, features: DialectFeatures) -> str:
    """Render one CREATE TABLE statement."""
    lines = [f"  {_column_definition(table, column, features)}" for column in table.columns]

    primary_keys = table.primary_key_columns
    if primary_keys:
        names = ", ".join(_quote(c.name, features) for c in primary_keys)
        lines.append(f"  PRIMARY KEY ({names})")

    for column in table.foreign_key_columns:
        lines.append(
            f"  FOREIGN KEY ({_quote(column.name, features)}) "
            f"REFERENCES {_quote(column.references.table, features)}"
            f"({_quote(column.references.column, features)})"
        )

    for column in table.columns:
        for expression in column.checks:
            lines.append(f"  CHECK ({expression})")

    return f"CREATE TABLE {_quote(table.name, features)} (\n" + ",\n".join(lines) + "\n);"


def _column_definition(table: Table, column: Column, features: DialectFeatures) -> str:
    parts = [_quote(column.name, features), render_type(column, features, table)]

    if not column.nullable or column.primary_key:
        parts.append("NOT NULL")

    if column.unique or any(c.kind == ConstraintKind.UNIQUE for c in column.constraints):
        parts.append("UNIQUE")

    default = column.default
    if default is not None and default != "":
        parts.append(f"DEFAULT {default}")

    return " ".join(parts)


def render_type(column: Column, features: DialectFeatures, table: Table | None = None) -> str:
    """Render a column type for a dialect.

    Types the dialect cannot express fall back to its general string type.
    """
    column_type = column.type
    type_name = features.type_names.get(column_type)

    if column_type == ColumnType.ARRAY and features.supports_arrays:
        element = Column(name=column.name, type=column.element_type or ColumnType.TEXT)
        if element.type == ColumnType.ARRAY:
            element.type = ColumnType.TEXT
        return f"{render_type(element, features)}[]"

    if type_name is None or not features.supports(column_type):
        logger.debug(
            "Type %s is not available in %s, using %s",
            getattr(column_type, "value", column_type), features.name, features.string_type,
        )
        return features.string_type

    if column_type == ColumnType.VARCHAR:
        return f"{type_name}({column.length or DEFAULT_VARCHAR_LENGTH})"

    if column_type == ColumnType.DECIMAL and column.length:
        arguments = str(column.length)
        if column.scale is not None:
            arguments += f",{column.scale}"
        rendered = f"{type_name}({arguments})"
        # Oracle spells BOOLEAN as NUMBER(1)
        if rendered == features.type_names.get(ColumnType.BOOLEAN):
            rendered = f"DECIMAL({arguments})"
        return rendered

    if column_type == ColumnType.ENUM:
        if not column.values:
            return features.string_type
        if features.key == "postgresql":
            return enum_type_name(table, column) if table else features.string_type
        values = ", ".join(_string_literal(v) for v in column.values)
        return f"{type_name}({values})"

    return type_name


def enum_type_name(table: Table, column: Column) -> str:
    """Name of the PostgreSQL enum type backing ``table.column``."""
    return re.sub(r"\W", "_", f"{table.name}_{column.name}_enum").lower()


def _enum_type_statements(table: Table, features: DialectFeatures) -> list[str]:
    if features.key != "postgresql":
        return []
    return [
        f"CREATE TYPE {enum_type_name(table, column)} AS ENUM "
        f"({', '.join(_string_literal(v) for v in column.values)});"
        for column in table.columns
        if column.type == ColumnType.ENUM and column.values
    ]


def _string_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _warn_on_invalid_identifiers(table: Table, features: DialectFeatures) -> None:
    for name in [table.name, *(c.name for c in table.columns)]:
        if not validate_identifier(name, features.key):
            logger.warning(
                "Identifier %r is reserved or too long for %s; it will be quoted",
                name, features.name,
            )


def format_sql_for_display(sql: str, dialect: str = "mysql") -> str:
    """Annotate SQL with ``<span class="...">`` wrappers for display.

    Classes are keyword, identifier, literal, data-type and constraint.
    Removing the tags and unescaping HTML entities gives back ``sql``.
    """
    features = get_dialect(dialect)
    try:
        tokens = sqlglot.tokenize(sql, read=features.sqlglot_dialect)
    except SqlglotError:
        logger.debug("Could not tokenize SQL for display; returning it unannotated")
        return escape(sql)

    pieces: list[str] = []
    cursor = 0
    for token in tokens:
        start, end = token.start, token.end + 1
        if start < cursor or end > len(sql):
            continue
        raw = sql[start:end]
        css_class = _classify(token, raw)
        pieces.append(escape(sql[cursor:start]))
        pieces.append(f'<span class="{css_class}">{escape(raw)}</span>' if css_class else escape(raw))
        cursor = end
    pieces.append(escape(sql[cursor:]))
    return "".join(pieces)


def _classify(token: Token, raw: str) -> str | None:
    """Display class for a token, or None for punctuation."""
    if token.token_type == TokenType.IDENTIFIER:
        return "identifier"
    if token.token_type in (TokenType.STRING, TokenType.NUMBER):
        return "literal"

    word = " ".join(raw.upper().split())
    if word in _CONSTRAINT_WORDS:
        return "constraint"
    if word in _KEYWORD_WORDS:
        return "keyword"
    if token.token_type in Parser.TYPE_TOKENS or word in _TYPE_WORDS:
        return "data-type"
    if token.token_type == TokenType.VAR:
        return "identifier"
    if raw[:1].isalpha() or raw[:1] == "_":
        return "keyword"
    return None
