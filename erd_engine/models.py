"""Intermediate representation for database schemas."""

from dataclasses import dataclass, field
from enum import Enum


class ColumnType(str, Enum):
    """Column types understood by the parser and generator."""
    INT = "INT"
    VARCHAR = "VARCHAR"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    JSON = "JSON"
    UUID = "UUID"
    ENUM = "ENUM"
    ARRAY = "ARRAY"


class ConstraintKind(str, Enum):
    """Kinds of column-level constraint."""
    CHECK = "CHECK"
    UNIQUE = "UNIQUE"
    DEFAULT = "DEFAULT"


class RelationshipType(str, Enum):
    """Cardinality of a relationship between two tables."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


@dataclass
class Constraint:
    """Column-level constraint.

    CHECK constraints carry an ``expression``, DEFAULT constraints a ``value``.
    """
    kind: ConstraintKind
    expression: str | None = None
    value: str | None = None


@dataclass
class ForeignKeyReference:
    """Reference to another table's column."""
    table: str
    column: str


@dataclass
class Column:
    """Database column definition."""
    name: str
    type: ColumnType = ColumnType.VARCHAR
    id: str = ""
    length: int | None = None
    scale: int | None = None
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    references: ForeignKeyReference | None = None
    constraints: list[Constraint] = field(default_factory=list)
    values: list[str] = field(default_factory=list)
    element_type: ColumnType | None = None

    @property
    def is_foreign_key(self) -> bool:
        return self.references is not None

    @property
    def references_table(self) -> str | None:
        return self.references.table if self.references else None

    @property
    def references_column(self) -> str | None:
        return self.references.column if self.references else None

    @property
    def default(self) -> str | None:
        """Value of the first DEFAULT constraint, if any."""
        for constraint in self.constraints:
            if constraint.kind == ConstraintKind.DEFAULT:
                return constraint.value
        return None

    @property
    def checks(self) -> list[str]:
        return [
            c.expression for c in self.constraints
            if c.kind == ConstraintKind.CHECK and c.expression
        ]


@dataclass
class Table:
    """Database table definition."""
    name: str
    columns: list[Column] = field(default_factory=list)
    id: str = ""

    def get_column(self, name: str) -> Column | None:
        """Find a column by name, case-insensitively."""
        lowered = name.lower()
        return next((c for c in self.columns if c.name.lower() == lowered), None)

    @property
    def primary_key_columns(self) -> list[Column]:
        return [c for c in self.columns if c.primary_key]

    @property
    def foreign_key_columns(self) -> list[Column]:
        return [c for c in self.columns if c.is_foreign_key]


@dataclass
class RelationshipEdge:
    """Directed relationship between two tables, keyed by table id.

    ``source`` is the referenced (parent) table, ``target`` the table holding
    the foreign key column.
    """
    id: str
    source: str
    target: str
    relationship_type: RelationshipType = RelationshipType.ONE_TO_MANY
    source_column: str | None = None
    target_column: str | None = None


@dataclass
class Schema:
    """Complete database schema."""
    tables: list[Table] = field(default_factory=list)
    edges: list[RelationshipEdge] = field(default_factory=list)
    dialect: str = "mysql"

    def get_table(self, name: str) -> Table | None:
        """Find a table by name, case-insensitively."""
        lowered = name.lower()
        return next((t for t in self.tables if t.name.lower() == lowered), None)

    def get_table_by_id(self, table_id: str) -> Table | None:
        return next((t for t in self.tables if t.id == table_id), None)

    def edges_between(self, first: Table, second: Table) -> list[RelationshipEdge]:
        """Edges connecting two tables in either direction."""
        ids = {first.id, second.id}
        return [
            e for e in self.edges
            if {e.source, e.target} == ids and e.source != e.target
        ]


@dataclass
class RelationshipSuggestion:
    """Inferred, unconfirmed relationship between two tables."""
    id: str
    source_table: str
    target_table: str
    relationship_type: RelationshipType
    confidence: float
    reason: str
    source_column: str | None = None
    target_column: str | None = None


@dataclass
class PositionedTable(Table):
    """Table with layout position."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_table(cls, table: Table, **geometry: float) -> "PositionedTable":
        return cls(name=table.name, columns=table.columns, id=table.id, **geometry)

    def to_table(self) -> Table:
        return Table(name=self.name, columns=self.columns, id=self.id)


@dataclass
class PositionedSchema:
    """Schema with positioned tables."""
    tables: list[PositionedTable] = field(default_factory=list)
    edges: list[RelationshipEdge] = field(default_factory=list)
    dialect: str = "mysql"


def singularize(name: str) -> str:
    """Best-effort English singular of a table name."""
    lowered = name.lower()
    if lowered.endswith("ies") and len(name) > 3:
        return name[:-3] + ("Y" if name[-3:].isupper() else "y")
    if lowered.endswith(("sses", "xes", "zes", "ches", "shes")):
        return name[:-2]
    if lowered.endswith("s") and not lowered.endswith("ss") and len(name) > 1:
        return name[:-1]
    return name
