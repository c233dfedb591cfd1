"""Database metadata access.

This package provides the per-dialect query strategies and the readers for
column, type and foreign key metadata.
"""

from fieldgen.database.dialects import Dialect, MysqlDialect, PostgresDialect, SqliteDialect, get_dialect
from fieldgen.database.engine import create_database_engine, detect_database_type, sanitize_connection_string
from fieldgen.database.introspection import ColumnIntrospector
from fieldgen.database.relationships import ConstraintExtractor
from fieldgen.database.type_mapping import TypeMapper, resolve_precision

__all__ = [
    # Dialects
    "Dialect",
    "PostgresDialect",
    "MysqlDialect",
    "SqliteDialect",
    "get_dialect",
    # Engine
    "create_database_engine",
    "detect_database_type",
    "sanitize_connection_string",
    # Introspection
    "ColumnIntrospector",
    "ConstraintExtractor",
    # Type mapping
    "TypeMapper",
    "resolve_precision",
]
