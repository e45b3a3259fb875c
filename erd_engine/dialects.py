"""Supported SQL dialects and their feature flags."""

import logging
from dataclasses import dataclass, field

from erd_engine.models import ColumnType

logger = logging.getLogger(__name__)


class UnknownDialectError(ValueError):
    """Raised when a dialect key is not in the registry."""

    def __init__(self, dialect: str):
        super().__init__(
            f"Unknown dialect '{dialect}'. Expected one of: {', '.join(DIALECT_FEATURES)}"
        )
        self.dialect = dialect


@dataclass(frozen=True)
class DialectFeatures:
    """Capabilities and naming rules of one SQL dialect."""
    key: str
    name: str
    version: str
    sqlglot_dialect: str
    supports_arrays: bool
    supports_json: bool
    supports_enums: bool
    supports_uuid: bool
    supports_inheritance: bool
    max_identifier_length: int
    reserved_keywords: frozenset[str]
    # Rendered type names; VARCHAR and DECIMAL take arguments in the generator.
    type_names: dict[ColumnType, str] = field(default_factory=dict)
    string_type: str = "VARCHAR(255)"

    def supports(self, column_type: ColumnType) -> bool:
        """Whether ``column_type`` has a native rendering in this dialect."""
        flags = {
            ColumnType.JSON: self.supports_json,
            ColumnType.ARRAY: self.supports_arrays,
            ColumnType.ENUM: self.supports_enums,
            ColumnType.UUID: self.supports_uuid,
        }
        return flags.get(column_type, True)


_COMMON_RESERVED = {
    "ADD", "ALL", "ALTER", "AND", "ANY", "AS", "ASC", "BETWEEN", "BY", "CASE",
    "CHECK", "COLUMN", "CONSTRAINT", "CREATE", "CROSS", "DEFAULT", "DELETE",
    "DESC", "DISTINCT", "DROP", "ELSE", "EXISTS", "FOREIGN", "FROM", "GROUP",
    "HAVING", "IN", "INDEX", "INNER", "INSERT", "INTO", "IS", "JOIN", "KEY",
    "LEFT", "LIKE", "NOT", "NULL", "ON", "OR", "ORDER", "OUTER", "PRIMARY",
    "REFERENCES", "RIGHT", "SELECT", "SET", "TABLE", "THEN", "TO", "UNION",
    "UNIQUE", "UPDATE", "VALUES", "WHEN", "WHERE", "WITH",
}

_BASE_TYPES = {
    ColumnType.INT: "INT",
    ColumnType.VARCHAR: "VARCHAR",
    ColumnType.TEXT: "TEXT",
    ColumnType.BOOLEAN: "BOOLEAN",
    ColumnType.DATE: "DATE",
    ColumnType.TIMESTAMP: "TIMESTAMP",
    ColumnType.FLOAT: "FLOAT",
    ColumnType.DOUBLE: "DOUBLE",
    ColumnType.DECIMAL: "DECIMAL",
    ColumnType.JSON: "JSON",
    ColumnType.UUID: "UUID",
    ColumnType.ENUM: "ENUM",
}


DIALECT_FEATURES: dict[str, DialectFeatures] = {
    "mysql": DialectFeatures(
        key="mysql",
        name="MySQL",
        version="8.0",
        sqlglot_dialect="mysql",
        supports_arrays=False,
        supports_json=True,
        supports_enums=True,
        supports_uuid=False,
        supports_inheritance=False,
        max_identifier_length=64,
        reserved_keywords=frozenset(_COMMON_RESERVED | {"ANALYZE", "BEFORE", "RANGE", "READ"}),
        type_names=dict(_BASE_TYPES),
        string_type="VARCHAR(255)",
    ),
    "postgresql": DialectFeatures(
        key="postgresql",
        name="PostgreSQL",
        version="15",
        sqlglot_dialect="postgres",
        supports_arrays=True,
        supports_json=True,
        supports_enums=True,
        supports_uuid=True,
        supports_inheritance=True,
        max_identifier_length=63,
        reserved_keywords=frozenset(_COMMON_RESERVED | {"ANALYSE", "ANALYZE", "ARRAY", "USER"}),
        type_names={
            **_BASE_TYPES,
            ColumnType.FLOAT: "REAL",
            ColumnType.DOUBLE: "DOUBLE PRECISION",
        },
        string_type="TEXT",
    ),
    "sqlserver": DialectFeatures(
        key="sqlserver",
        name="SQL Server",
        version="2022",
        sqlglot_dialect="tsql",
        supports_arrays=False,
        supports_json=False,
        supports_enums=False,
        supports_uuid=True,
        supports_inheritance=False,
        max_identifier_length=128,
        reserved_keywords=frozenset(_COMMON_RESERVED | {"AUTHORIZATION", "BACKUP", "USER"}),
        type_names={
            **_BASE_TYPES,
            ColumnType.VARCHAR: "NVARCHAR",
            ColumnType.TEXT: "NVARCHAR(MAX)",
            ColumnType.BOOLEAN: "BIT",
            ColumnType.TIMESTAMP: "DATETIME2",
            ColumnType.DOUBLE: "DOUBLE PRECISION",
            ColumnType.UUID: "UNIQUEIDENTIFIER",
        },
        string_type="NVARCHAR(255)",
    ),
    "sqlite": DialectFeatures(
        key="sqlite",
        name="SQLite",
        version="3.41",
        sqlglot_dialect="sqlite",
        supports_arrays=False,
        supports_json=True,
        supports_enums=False,
        supports_uuid=False,
        supports_inheritance=False,
        max_identifier_length=1024,
        reserved_keywords=frozenset(_COMMON_RESERVED | {"ABORT", "ACTION", "AFTER"}),
        type_names={**_BASE_TYPES, ColumnType.INT: "INTEGER"},
        string_type="TEXT",
    ),
    "oracle": DialectFeatures(
        key="oracle",
        name="Oracle",
        version="21c",
        sqlglot_dialect="oracle",
        supports_arrays=False,
        supports_json=True,
        supports_enums=False,
        supports_uuid=False,
        supports_inheritance=False,
        max_identifier_length=128,
        reserved_keywords=frozenset(_COMMON_RESERVED | {"ACCESS", "NUMBER", "USER"}),
        type_names={
            **_BASE_TYPES,
            ColumnType.INT: "INTEGER",
            ColumnType.VARCHAR: "VARCHAR2",
            ColumnType.TEXT: "CLOB",
            ColumnType.BOOLEAN: "NUMBER(1)",
            ColumnType.DOUBLE: "BINARY_DOUBLE",
            ColumnType.DECIMAL: "NUMBER",
        },
        string_type="VARCHAR2(255)",
    ),
}


def get_dialect(dialect: str) -> DialectFeatures:
    """Look up a dialect by key."""
    try:
        return DIALECT_FEATURES[dialect.lower()]
    except KeyError:
        raise UnknownDialectError(dialect) from None


def validate_identifier(name: str, dialect: str) -> bool:
    """Check that ``name`` fits the dialect's length limit and is not reserved.

    Unknown dialects accept every identifier.
    """
    features = DIALECT_FEATURES.get(dialect.lower())
    if features is None:
        return True

    if not name or len(name) > features.max_identifier_length:
        return False

    return name.upper() not in features.reserved_keywords


def get_supported_types(dialect: str) -> list[ColumnType]:
    """Column types with a native rendering in ``dialect``."""
    features = get_dialect(dialect)
    return [t for t in ColumnType if features.supports(t)]
