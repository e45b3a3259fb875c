"""erd-engine: parse, generate, analyse and lay out relational schemas."""

from erd_engine.analysis import SchemaSuggestion, analyze_schema
from erd_engine.dialects import DIALECT_FEATURES, UnknownDialectError, validate_identifier
from erd_engine.generators import format_sql_for_display, generate_orm, generate_sql
from erd_engine.inference import apply_suggestion, infer_advanced, infer_basic
from erd_engine.models import (
    Column,
    ColumnType,
    Constraint,
    ConstraintKind,
    ForeignKeyReference,
    PositionedSchema,
    PositionedTable,
    RelationshipEdge,
    RelationshipSuggestion,
    RelationshipType,
    Schema,
    Table,
)
from erd_engine.parsers import parse_sql
from erd_engine.validation import ValidationResult, ValidationRule, validate_schema

__version__ = "0.1.0"
__all__ = [
    "DIALECT_FEATURES",
    "Column",
    "ColumnType",
    "Constraint",
    "ConstraintKind",
    "ForeignKeyReference",
    "PositionedSchema",
    "PositionedTable",
    "RelationshipEdge",
    "RelationshipSuggestion",
    "RelationshipType",
    "Schema",
    "SchemaSuggestion",
    "Table",
    "UnknownDialectError",
    "ValidationResult",
    "ValidationRule",
    "analyze_schema",
    "apply_suggestion",
    "format_sql_for_display",
    "generate_orm",
    "generate_sql",
    "infer_advanced",
    "infer_basic",
    "parse_sql",
    "validate_identifier",
    "validate_schema",
]
