"""CREATE TABLE parser using sqlglot."""

import itertools
import logging
import re

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from erd_engine.dialects import get_dialect
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

logger = logging.getLogger(__name__)

_IDENT = r'"[^"]+"|`[^`]+`|\[[^\]]+\]|[A-Za-z_][\w$#]*'
_QUALIFIED = rf"(?:{_IDENT})(?:\s*\.\s*(?:{_IDENT}))*"

_CREATE_TABLE_RE = re.compile(
    r"^\s*CREATE\s+(?:OR\s+REPLACE\s+)?(?:(?:GLOBAL|LOCAL)\s+)?(?:TEMP(?:ORARY)?\s+)?"
    rf"TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?P<name>{_QUALIFIED})\s*\(",
    re.IGNORECASE | re.DOTALL,
)
_CREATE_TYPE_ENUM_RE = re.compile(
    rf"^\s*CREATE\s+TYPE\s+(?P<name>{_QUALIFIED})\s+AS\s+ENUM\s*\((?P<values>.*)\)\s*$",
    re.IGNORECASE | re.DOTALL,
)
_COLUMN_HEAD_RE = re.compile(
    rf"^\s*(?P<name>{_IDENT})\s+(?P<type>[A-Za-z_][\w$#]*"
    r"(?:\s+(?:PRECISION|VARYING))?(?:\s*\([^)]*\))?(?:\s*\[\s*\])*)",
    re.IGNORECASE,
)
_IDENT_PART_RE = re.compile(_IDENT)
_STRING_LITERAL_RE = re.compile(r"'((?:[^']|'')*)'")
_INDEX_ITEM_RE = re.compile(r"^\s*(?:FULLTEXT\s+|SPATIAL\s+)?(?:KEY|INDEX)\b", re.IGNORECASE)

# sqlglot dialects tried after the requested one, covering the common quoting styles.
_FALLBACK_READS = ("mysql", "postgres", "tsql")

_TYPE_ALIASES: dict[str, ColumnType] = {
    "INT": ColumnType.INT,
    "INTEGER": ColumnType.INT,
    "TINYINT": ColumnType.INT,
    "SMALLINT": ColumnType.INT,
    "MEDIUMINT": ColumnType.INT,
    "BIGINT": ColumnType.INT,
    "UINT": ColumnType.INT,
    "UTINYINT": ColumnType.INT,
    "USMALLINT": ColumnType.INT,
    "UMEDIUMINT": ColumnType.INT,
    "UBIGINT": ColumnType.INT,
    "SERIAL": ColumnType.INT,
    "SMALLSERIAL": ColumnType.INT,
    "BIGSERIAL": ColumnType.INT,
    "VARCHAR": ColumnType.VARCHAR,
    "NVARCHAR": ColumnType.VARCHAR,
    "VARCHAR2": ColumnType.VARCHAR,
    "NVARCHAR2": ColumnType.VARCHAR,
    "CHAR": ColumnType.VARCHAR,
    "NCHAR": ColumnType.VARCHAR,
    "CHARACTER": ColumnType.VARCHAR,
    "CHARACTER VARYING": ColumnType.VARCHAR,
    "TEXT": ColumnType.TEXT,
    "NTEXT": ColumnType.TEXT,
    "TINYTEXT": ColumnType.TEXT,
    "MEDIUMTEXT": ColumnType.TEXT,
    "LONGTEXT": ColumnType.TEXT,
    "CLOB": ColumnType.TEXT,
    "NCLOB": ColumnType.TEXT,
    "BOOLEAN": ColumnType.BOOLEAN,
    "BOOL": ColumnType.BOOLEAN,
    "BIT": ColumnType.BOOLEAN,
    "DATE": ColumnType.DATE,
    "TIMESTAMP": ColumnType.TIMESTAMP,
    "TIMESTAMPTZ": ColumnType.TIMESTAMP,
    "TIMESTAMPLTZ": ColumnType.TIMESTAMP,
    "DATETIME": ColumnType.TIMESTAMP,
    "DATETIME2": ColumnType.TIMESTAMP,
    "DATETIMEOFFSET": ColumnType.TIMESTAMP,
    "SMALLDATETIME": ColumnType.TIMESTAMP,
    "FLOAT": ColumnType.FLOAT,
    "REAL": ColumnType.FLOAT,
    "DOUBLE": ColumnType.DOUBLE,
    "DOUBLE PRECISION": ColumnType.DOUBLE,
    "BINARY_DOUBLE": ColumnType.DOUBLE,
    "DECIMAL": ColumnType.DECIMAL,
    "NUMERIC": ColumnType.DECIMAL,
    "NUMBER": ColumnType.DECIMAL,
    "MONEY": ColumnType.DECIMAL,
    "JSON": ColumnType.JSON,
    "JSONB": ColumnType.JSON,
    "UUID": ColumnType.UUID,
    "UNIQUEIDENTIFIER": ColumnType.UUID,
    "ENUM": ColumnType.ENUM,
    "ARRAY": ColumnType.ARRAY,
}


class DDLParser:
    """Best-effort parser for CREATE TABLE statements.

    Malformed statements and unrecognized table items are skipped, never
    raised. Table-level constraints are applied after all columns of the
    table are known, so a FOREIGN KEY clause may precede its column.
    """

    def __init__(self, dialect: str = "mysql"):
        self.dialect = get_dialect(dialect)
        reads = [self.dialect.sqlglot_dialect, *_FALLBACK_READS]
        self._reads = list(dict.fromkeys(reads))

    def parse(self, sql: str) -> Schema:
        """Parse SQL DDL and return a Schema."""
        statements = split_statements(sql)
        table_ids = itertools.count(1)
        column_ids = itertools.count(1)

        enum_types: dict[str, list[str]] = {}
        for statement in statements:
            match = _CREATE_TYPE_ENUM_RE.match(statement)
            if match:
                enum_types[_last_identifier(match.group("name")).lower()] = _string_literals(
                    match.group("values")
                )

        tables: list[Table] = []
        for statement in statements:
            table = self._parse_create_table(statement, enum_types)
            if table is None:
                continue
            if any(t.name.lower() == table.name.lower() for t in tables):
                logger.debug("Skipping duplicate definition of table %s", table.name)
                continue
            table.id = f"table-{next(table_ids)}"
            for column in table.columns:
                column.id = f"column-{next(column_ids)}"
            tables.append(table)

        _resolve_implicit_references(tables)
        edges = build_foreign_key_edges(tables)

        logger.debug("Parsed %d tables and %d relationships", len(tables), len(edges))
        return Schema(tables=tables, edges=edges, dialect=self.dialect.key)

    def _parse_create_table(
        self, statement: str, enum_types: dict[str, list[str]]
    ) -> Table | None:
        """Parse a CREATE TABLE statement."""
        match = _CREATE_TABLE_RE.match(statement)
        if not match:
            if statement.strip():
                logger.debug("Ignoring statement: %.60s", statement.strip())
            return None

        name = _last_identifier(match.group("name"))
        body = _wrapped_body(statement, match.end() - 1)

        columns: list[Column] = []
        table_constraints: list[exp.Expression] = []

        # First pass: column definitions
        for item in split_top_level(body, ","):
            if not item.strip() or _INDEX_ITEM_RE.match(item):
                continue

            node = self._parse_item(item)
            if node is None:
                column = self._parse_item_with_placeholder_type(item, enum_types)
                if column is None:
                    logger.debug("Skipping unparseable item in %s: %.60s", name, item.strip())
                else:
                    self._apply_boolean_spelling(column, item)
                    columns.append(column)
                continue

            if isinstance(node, exp.ColumnDef):
                column = self._parse_column(node, self._enum_override(item, enum_types))
                self._apply_boolean_spelling(column, item)
                columns.append(column)
            else:
                table_constraints.append(node)

        # Second pass: table-level constraints
        table = Table(name=name, columns=_dedupe_columns(columns, name))
        for constraint in table_constraints:
            self._apply_table_constraint(table, constraint)

        return table

    def _parse_item(self, item: str) -> exp.Expression | None:
        """Parse a single table item, trying each candidate dialect."""
        for read in self._reads:
            try:
                stmt = sqlglot.parse_one(f"CREATE TABLE _t ({item})", read=read)
            except SqlglotError:
                continue
            if not isinstance(stmt, exp.Create) or not isinstance(stmt.this, exp.Schema):
                continue
            expressions = stmt.this.expressions or []
            if len(expressions) == 1:
                return expressions[0]
        return None

    def _parse_item_with_placeholder_type(
        self, item: str, enum_types: dict[str, list[str]]
    ) -> Column | None:
        """Parse a column whose type sqlglot does not know.

        The type is read from the text and replaced with TEXT so the remaining
        constraints can still be parsed.
        """
        head = _COLUMN_HEAD_RE.match(item)
        if not head:
            return None

        placeholder = f"{head.group('name')} TEXT{item[head.end():]}"
        node = self._parse_item(placeholder)
        if not isinstance(node, exp.ColumnDef):
            return None

        column = self._parse_column(node)
        raw_type = head.group("type")
        override = self._enum_override(item, enum_types)
        if override is not None:
            column.type, column.values = ColumnType.ENUM, override
        else:
            base = re.sub(r"\s+", " ", raw_type.split("(")[0].split("[")[0].strip()).upper()
            params = re.findall(r"\d+|MAX", raw_type.partition("(")[2], re.IGNORECASE)
            if raw_type.rstrip().endswith("]"):
                column.type, column.element_type = ColumnType.ARRAY, _TYPE_ALIASES.get(base)
            else:
                column.type, column.length, column.scale = self._normalize_type(base, params)
        return column

    def _apply_boolean_spelling(self, column: Column, item: str) -> None:
        """Read a numeric BOOLEAN spelling such as Oracle's NUMBER(1) as BOOLEAN.

        Only the exact spelling counts: DECIMAL(1) or NUMBER(1,0) stay DECIMAL.
        """
        if column.type != ColumnType.DECIMAL:
            return
        head = _COLUMN_HEAD_RE.match(item)
        spelling = self.dialect.type_names.get(ColumnType.BOOLEAN, "")
        if head and _compact(head.group("type")) == _compact(spelling):
            column.type, column.length, column.scale = ColumnType.BOOLEAN, None, None

    def _enum_override(self, item: str, enum_types: dict[str, list[str]]) -> list[str] | None:
        """Values of a CREATE TYPE … AS ENUM type used by this column, if any."""
        head = _COLUMN_HEAD_RE.match(item)
        if not head or not enum_types:
            return None
        return enum_types.get(_last_identifier(head.group("type")).lower())

    def _parse_column(
        self, col_def: exp.ColumnDef, enum_values: list[str] | None = None
    ) -> Column:
        """Parse a column definition."""
        column = Column(name=col_def.name)

        if enum_values is not None:
            column.type, column.values = ColumnType.ENUM, enum_values
        else:
            self._apply_data_type(column, col_def.args.get("kind"))

        for constraint in col_def.constraints or []:
            constraint_kind = constraint.kind

            if isinstance(constraint_kind, exp.NotNullColumnConstraint):
                column.nullable = bool(constraint_kind.args.get("allow_null"))
            elif isinstance(constraint_kind, exp.PrimaryKeyColumnConstraint):
                column.primary_key = True
            elif isinstance(constraint_kind, exp.UniqueColumnConstraint):
                column.unique = True
            elif isinstance(constraint_kind, exp.DefaultColumnConstraint):
                column.constraints.append(
                    Constraint(
                        kind=ConstraintKind.DEFAULT,
                        value=self._expr_to_string(constraint_kind.this),
                    )
                )
            elif isinstance(constraint_kind, exp.CheckColumnConstraint):
                column.constraints.append(
                    Constraint(
                        kind=ConstraintKind.CHECK,
                        expression=self._expr_to_string(constraint_kind.this),
                    )
                )
            elif isinstance(constraint_kind, exp.Reference):
                column.references = self._parse_reference(constraint_kind)

        if column.primary_key:
            column.nullable = False

        return column

    def _apply_data_type(self, column: Column, data_type: exp.Expression | None) -> None:
        """Set type, length, scale, enum values and array element type."""
        if data_type is None:
            return

        if not isinstance(data_type, exp.DataType):
            column.type, column.length, column.scale = self._normalize_type(
                data_type.name.upper(), []
            )
            return

        params: list[str] = []
        if data_type.this == exp.DataType.Type.USERDEFINED:
            kind, _, arguments = str(data_type.args.get("kind") or "").partition("(")
            type_name = kind.strip().upper()
            params.extend(re.findall(r"\d+|MAX", arguments, re.IGNORECASE))
        else:
            type_name = data_type.this.name

        values: list[str] = []
        element: exp.DataType | None = None
        for expr in data_type.expressions or []:
            inner = expr.this if isinstance(expr, exp.DataTypeParam) else expr
            if isinstance(inner, exp.DataType):
                element = inner
            elif isinstance(inner, exp.Literal) and inner.is_string:
                values.append(inner.this)
            elif isinstance(inner, exp.Literal):
                params.append(str(inner.this))
            elif hasattr(inner, "name"):
                params.append(inner.name)

        column.type, column.length, column.scale = self._normalize_type(type_name, params)
        if column.type == ColumnType.ENUM:
            column.values = values
        elif column.type == ColumnType.ARRAY and element is not None:
            element_column = Column(name=column.name)
            self._apply_data_type(element_column, element)
            column.element_type = element_column.type

    def _normalize_type(
        self, type_name: str, params: list[str]
    ) -> tuple[ColumnType, int | None, int | None]:
        """Map a raw type name and its arguments to (type, length, scale)."""
        column_type = _TYPE_ALIASES.get(type_name)
        if column_type is None:
            logger.debug("Unknown column type %s, using VARCHAR", type_name)
            column_type = ColumnType.VARCHAR

        if column_type == ColumnType.VARCHAR and params[:1] and params[0].upper() == "MAX":
            return ColumnType.TEXT, None, None

        numbers = [int(p) for p in params if p.isdigit()]
        length = numbers[0] if numbers else None
        scale = numbers[1] if len(numbers) > 1 else None
        return column_type, length, scale

    def _parse_reference(self, reference: exp.Reference) -> ForeignKeyReference | None:
        """Parse the target of a REFERENCES clause."""
        # reference.this is a Schema (table plus column list) or a bare Table
        target = reference.this
        if isinstance(target, exp.Schema):
            ref_table, ref_cols = target.this, target.expressions or []
        else:
            ref_table, ref_cols = target, []

        if ref_table is None:
            return None

        column_name = _identifier_name(ref_cols[0]) if ref_cols else ""
        return ForeignKeyReference(table=ref_table.name, column=column_name)

    def _apply_table_constraint(self, table: Table, node: exp.Expression) -> None:
        """Apply a table-level constraint to already-parsed columns."""
        if isinstance(node, exp.Constraint):
            # CONSTRAINT <name> ...
            for inner in node.expressions or []:
                self._apply_table_constraint(table, inner)
            return

        if isinstance(node, exp.PrimaryKey):
            for name in (_identifier_name(e) for e in node.expressions):
                column = table.get_column(name)
                if column is None:
                    logger.debug("PRIMARY KEY names unknown column %s.%s", table.name, name)
                    continue
                column.primary_key = True
                column.nullable = False

        elif isinstance(node, exp.ForeignKey):
            self._apply_foreign_key(table, node)

        elif isinstance(node, exp.UniqueColumnConstraint):
            unique_schema = node.this
            names = [
                _identifier_name(e) for e in getattr(unique_schema, "expressions", None) or []
            ]
            # Composite UNIQUE constraints have no per-column representation
            if len(names) == 1 and table.get_column(names[0]):
                table.get_column(names[0]).unique = True

        elif isinstance(node, exp.CheckColumnConstraint):
            expression = self._expr_to_string(node.this)
            referenced = [c.name for c in node.this.find_all(exp.Column)] if node.this else []
            target = next(
                (table.get_column(n) for n in referenced if table.get_column(n)), None
            )
            if target is None:
                logger.debug("CHECK (%s) on %s names no known column", expression, table.name)
                return
            target.constraints.append(Constraint(kind=ConstraintKind.CHECK, expression=expression))

    def _apply_foreign_key(self, table: Table, fk: exp.ForeignKey) -> None:
        """Parse a table-level FOREIGN KEY constraint."""
        local_cols = [_identifier_name(e) for e in fk.expressions]

        reference = fk.args.get("reference")
        if not isinstance(reference, exp.Reference):
            return
        target = reference.this
        if isinstance(target, exp.Schema):
            ref_table, ref_cols = target.this, target.expressions or []
        else:
            ref_table, ref_cols = target, []
        if ref_table is None:
            return

        ref_names = [_identifier_name(e) for e in ref_cols]
        for index, name in enumerate(local_cols):
            column = table.get_column(name)
            if column is None:
                logger.debug("FOREIGN KEY names unknown column %s.%s", table.name, name)
                continue
            ref_column = ref_names[index] if index < len(ref_names) else ""
            column.references = ForeignKeyReference(table=ref_table.name, column=ref_column)

    def _expr_to_string(self, expr: exp.Expression | None) -> str:
        """Convert an expression to string."""
        if expr is None:
            return ""

        if isinstance(expr, exp.Literal):
            if expr.is_string:
                return "'" + expr.this.replace("'", "''") + "'"
            return str(expr.this)

        if isinstance(expr, exp.Boolean):
            return "TRUE" if expr.this else "FALSE"

        if isinstance(expr, exp.Null):
            return "NULL"

        return expr.sql(dialect=self.dialect.sqlglot_dialect)


def parse_sql(sql: str, dialect: str = "mysql") -> Schema:
    """Parse CREATE TABLE statements into a Schema."""
    return DDLParser(dialect).parse(sql)


def build_foreign_key_edges(tables: list[Table]) -> list[RelationshipEdge]:
    """One one-to-many edge per foreign key column whose table is present."""
    by_name = {t.name.lower(): t for t in tables}
    edges: list[RelationshipEdge] = []
    for table in tables:
        for column in table.foreign_key_columns:
            referenced = by_name.get(column.references.table.lower())
            if referenced is None:
                continue
            edges.append(
                RelationshipEdge(
                    id=f"edge-{len(edges) + 1}",
                    source=referenced.id,
                    target=table.id,
                    relationship_type=RelationshipType.ONE_TO_MANY,
                    source_column=column.references.column,
                    target_column=column.name,
                )
            )
    return edges


def _resolve_implicit_references(tables: list[Table]) -> None:
    """Fill in the referenced column of ``REFERENCES t`` clauses without one."""
    by_name = {t.name.lower(): t for t in tables}
    for table in tables:
        for column in table.foreign_key_columns:
            if column.references.column:
                continue
            referenced = by_name.get(column.references.table.lower())
            pk = referenced.primary_key_columns if referenced else []
            column.references.column = pk[0].name if pk else "id"


def _dedupe_columns(columns: list[Column], table_name: str) -> list[Column]:
    seen: set[str] = set()
    result = []
    for column in columns:
        if column.name.lower() in seen:
            logger.debug("Skipping duplicate column %s.%s", table_name, column.name)
            continue
        seen.add(column.name.lower())
        result.append(column)
    return result


def _identifier_name(node: exp.Expression) -> str:
    """Name of a column reference, unwrapping ORDER modifiers."""
    if isinstance(node, exp.Ordered):
        node = node.this
    if isinstance(node, (exp.Identifier, exp.Column)):
        return node.name
    identifier = node.find(exp.Identifier)
    return identifier.this if identifier else node.name


def _unquote(identifier: str) -> str:
    identifier = identifier.strip()
    if identifier[:1] in ('"', "`", "[") and len(identifier) >= 2:
        return identifier[1:-1]
    return identifier


def _compact(type_text: str) -> str:
    return re.sub(r"\s+", "", type_text).upper()


def _last_identifier(qualified: str) -> str:
    """Bare name of a possibly schema-qualified identifier."""
    parts = _IDENT_PART_RE.findall(qualified)
    return _unquote(parts[-1]) if parts else qualified.strip()


def _string_literals(text: str) -> list[str]:
    return [m.replace("''", "'") for m in _STRING_LITERAL_RE.findall(text)]


def _wrapped_body(text: str, open_index: int) -> str:
    """Text between the parenthesis at ``open_index`` and its match.

    Unbalanced input returns everything after the opening parenthesis.
    """
    depth = 0
    quote: str | None = None
    for index in range(open_index, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = None
            continue
        if char in "'\"`":
            quote = char
        elif char == "[":
            quote = "]"
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[open_index + 1:index]
    return text[open_index + 1:]


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on ``separator`` outside quotes and parentheses."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
        elif char == "[":
            quote = "]"
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


_CREATE_KEYWORD_RE = re.compile(r"CREATE\b", re.IGNORECASE)


def split_statements(sql: str) -> list[str]:
    """Split SQL text into statements with comments removed.

    Statements end at a top-level semicolon, or where a new CREATE keyword
    starts at the top level.
    """
    statements: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    index = 0
    length = len(sql)

    def flush() -> None:
        statement = "".join(current).strip()
        if statement:
            statements.append(statement)
        current.clear()

    while index < length:
        char = sql[index]

        if quote:
            current.append(char)
            if char == quote:
                quote = None
            index += 1
            continue

        if sql.startswith("--", index):
            newline = sql.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if sql.startswith("/*", index):
            end = sql.find("*/", index + 2)
            index = length if end == -1 else end + 2
            current.append(" ")
            continue

        if char in "'\"`":
            quote = char
        elif char == "[":
            quote = "]"
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            flush()
            index += 1
            continue
        elif (
            depth == 0
            and char in "cC"
            and (index == 0 or not (sql[index - 1].isalnum() or sql[index - 1] == "_"))
            and _CREATE_KEYWORD_RE.match(sql, index)
            and "".join(current).strip()
        ):
            flush()

        current.append(char)
        index += 1

    flush()
    return statements
