"""SQL parsers."""

from erd_engine.parsers.ddl import DDLParser, parse_sql

__all__ = ["DDLParser", "parse_sql"]
