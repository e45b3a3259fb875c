"""Output generators for SQL, ORM models and diagram formats."""

from erd_engine.generators.drawio import DrawioOptions, generate_drawio
from erd_engine.generators.orm import ORM_TARGETS, UnknownORMTargetError, generate_orm
from erd_engine.generators.sql import format_sql_for_display, generate_sql, quote_identifier

__all__ = [
    "ORM_TARGETS",
    "DrawioOptions",
    "UnknownORMTargetError",
    "format_sql_for_display",
    "generate_drawio",
    "generate_orm",
    "generate_sql",
    "quote_identifier",
]
