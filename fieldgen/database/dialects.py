"""Per-database query strategies for reading column and foreign key metadata.

Each dialect supplies the information-schema query text, converts raw rows
into ColumnMetadata, and carries the policy constants that differ between
engines (auto-increment detection, precision fallback, 'id' matching).
"""

import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import URL

from fieldgen.models import ColumnMetadata
from fieldgen.policies import AutoIncrementPolicy, PrecisionFallback, PrimaryKeyMatch


class Dialect:
    """Base query strategy. Subclasses fill in the SQL and the policies."""

    name: str = ""
    columns_query: str = ""
    constraints_query: str = ""
    # None means an empty column result is taken as a missing table
    table_exists_query: str | None = None

    nullable_sentinel: str = "YES"
    auto_increment_marker: str = ""
    auto_increment_policy: AutoIncrementPolicy = AutoIncrementPolicy.NAME_IS_ID
    precision_fallback: PrecisionFallback = PrecisionFallback.NONE
    primary_key_match: PrimaryKeyMatch = PrimaryKeyMatch.EXACT

    def default_catalog(self, url: URL) -> str:
        """Catalog/schema name to use when none is given"""
        return url.database or ""

    def normalize_column(self, row: Mapping[str, Any]) -> ColumnMetadata:
        """Convert one row of the columns query into ColumnMetadata"""
        return ColumnMetadata(
            name=row["column_name"],
            default=_as_text(row.get("column_default")),
            is_nullable=str(row.get("is_nullable") or ""),
            data_type=str(row["data_type"]).strip().lower(),
            character_maximum_length=_as_int(row.get("character_maximum_length")),
            column_type=str(row.get("column_type") or row["data_type"]),
            comment=row.get("column_comment") or None,
            ordinal_position=_as_int(row.get("ordinal_position")),
            extra=str(row.get("extra") or ""),
        )

    def is_boolean(self, column: ColumnMetadata) -> bool:
        """Whether the column stores a single-bit boolean"""
        return column.column_type.strip().lower().startswith("tinyint(1)") or column.data_type in ("bool", "boolean")


class PostgresDialect(Dialect):
    name = "postgresql"

    columns_query = """
SELECT
    column_name AS column_name,
    column_default AS column_default,
    UPPER(is_nullable) AS is_nullable,
    LOWER(data_type) AS data_type,
    character_maximum_length AS character_maximum_length,
    CASE
        WHEN numeric_precision IS NOT NULL AND LOWER(data_type) IN ('numeric', 'decimal')
            THEN LOWER(data_type) || '(' || numeric_precision || ',' || COALESCE(numeric_scale, 0) || ')'
        ELSE LOWER(data_type)
    END AS column_type,
    col_description(
        (quote_ident(table_schema) || '.' || quote_ident(table_name))::regclass,
        ordinal_position
    ) AS column_comment,
    ordinal_position AS ordinal_position
FROM information_schema.columns
WHERE table_name = :table_name
  AND table_catalog = :catalog
  AND table_schema = current_schema()
ORDER BY ordinal_position ASC
"""

    constraints_query = """
SELECT
    kcu.column_name AS "foreign",
    ccu.table_name AS "references",
    ccu.column_name AS "on",
    rc.update_rule AS "on_update",
    rc.delete_rule AS "on_delete"
FROM information_schema.table_constraints AS tc
JOIN information_schema.key_column_usage AS kcu
    ON tc.constraint_name = kcu.constraint_name
    AND tc.constraint_schema = kcu.constraint_schema
JOIN information_schema.constraint_column_usage AS ccu
    ON ccu.constraint_name = tc.constraint_name
    AND ccu.constraint_schema = tc.constraint_schema
LEFT JOIN information_schema.referential_constraints AS rc
    ON rc.constraint_name = tc.constraint_name
    AND rc.constraint_schema = tc.constraint_schema
WHERE tc.constraint_type = 'FOREIGN KEY'
  AND tc.table_name = :table_name
  AND tc.table_catalog = :catalog
  AND tc.table_schema = current_schema()
ORDER BY kcu.ordinal_position
"""

    table_exists_query = """
SELECT 1
FROM information_schema.tables
WHERE table_name = :table_name
  AND table_catalog = :catalog
  AND table_schema = current_schema()
"""

    auto_increment_marker = "nextval("
    auto_increment_policy = AutoIncrementPolicy.DEFAULT_PREFIX
    precision_fallback = PrecisionFallback.DEFAULT_PAIR
    primary_key_match = PrimaryKeyMatch.EXACT

    def is_boolean(self, column: ColumnMetadata) -> bool:
        return column.data_type == "boolean"


class MysqlDialect(Dialect):
    name = "mysql"

    columns_query = """
SELECT
    COLUMN_NAME AS column_name,
    COLUMN_DEFAULT AS column_default,
    UPPER(IS_NULLABLE) AS is_nullable,
    LOWER(DATA_TYPE) AS data_type,
    CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
    COLUMN_TYPE AS column_type,
    COLUMN_COMMENT AS column_comment,
    ORDINAL_POSITION AS ordinal_position,
    UPPER(EXTRA) AS extra
FROM INFORMATION_SCHEMA.COLUMNS
WHERE TABLE_NAME = :table_name
  AND TABLE_SCHEMA = :catalog
ORDER BY ORDINAL_POSITION ASC
"""

    constraints_query = """
SELECT
    u.COLUMN_NAME AS `foreign`,
    r.REFERENCED_TABLE_NAME AS `references`,
    u.REFERENCED_COLUMN_NAME AS `on`,
    r.UPDATE_RULE AS `on_update`,
    r.DELETE_RULE AS `on_delete`
FROM INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS AS r
INNER JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS u
    ON u.CONSTRAINT_NAME = r.CONSTRAINT_NAME
    AND u.TABLE_SCHEMA = r.CONSTRAINT_SCHEMA
    AND u.TABLE_NAME = r.TABLE_NAME
WHERE u.TABLE_NAME = :table_name
  AND u.CONSTRAINT_SCHEMA = :catalog
ORDER BY u.ORDINAL_POSITION
"""

    table_exists_query = """
SELECT 1
FROM INFORMATION_SCHEMA.TABLES
WHERE TABLE_NAME = :table_name
  AND TABLE_SCHEMA = :catalog
"""

    auto_increment_marker = "AUTO_INCREMENT"
    auto_increment_policy = AutoIncrementPolicy.EXTRA_FLAG
    precision_fallback = PrecisionFallback.NONE
    primary_key_match = PrimaryKeyMatch.NORMALIZED


# sqlite declared types, e.g. "VARCHAR(255)", "DECIMAL(10, 2)", "INTEGER UNSIGNED"
_SQLITE_TYPE_PATTERN = re.compile(
    r"^\s*([A-Za-z][A-Za-z ]*?)\s*(?:\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\))?\s*(unsigned)?\s*$",
    re.IGNORECASE,
)
_LENGTH_TYPE_MARKERS = ("char", "text", "binary", "blob", "clob")


class SqliteDialect(Dialect):
    name = "sqlite"

    columns_query = """
SELECT
    name AS column_name,
    dflt_value AS column_default,
    CASE WHEN "notnull" = 0 AND pk = 0 THEN 'YES' ELSE 'NO' END AS is_nullable,
    type AS column_type,
    cid + 1 AS ordinal_position
FROM pragma_table_info(:table_name, :catalog)
ORDER BY cid ASC
"""

    # "to" is NULL when the key references the parent's primary key implicitly
    constraints_query = """
SELECT
    fk."from" AS "foreign",
    fk."table" AS "references",
    COALESCE(
        fk."to",
        (SELECT pk_col.name FROM pragma_table_info(fk."table", :catalog) AS pk_col WHERE pk_col.pk = fk.seq + 1)
    ) AS "on",
    fk.on_update AS on_update,
    fk.on_delete AS on_delete
FROM pragma_foreign_key_list(:table_name, :catalog) AS fk
ORDER BY fk.id, fk.seq
"""

    auto_increment_policy = AutoIncrementPolicy.NAME_IS_ID
    precision_fallback = PrecisionFallback.NONE
    primary_key_match = PrimaryKeyMatch.EXACT

    def default_catalog(self, url: URL) -> str:
        return "main"

    def normalize_column(self, row: Mapping[str, Any]) -> ColumnMetadata:
        declared = str(row.get("column_type") or "")
        data_type, length = parse_declared_type(declared)
        return ColumnMetadata(
            name=row["column_name"],
            default=_as_text(row.get("column_default")),
            is_nullable=str(row.get("is_nullable") or ""),
            data_type=data_type,
            character_maximum_length=length,
            column_type=declared.strip().lower(),
            ordinal_position=_as_int(row.get("ordinal_position")),
        )


def parse_declared_type(declared: str) -> tuple[str, int | None]:
    """Split a declared column type into its base name and character length.

    Args:
        declared: Declared type, e.g. 'VARCHAR(255)'

    Returns:
        Tuple of (lower-case base type, length or None)
    """
    match = _SQLITE_TYPE_PATTERN.match(declared)
    if not match:
        return declared.strip().lower(), None

    base = match.group(1).strip().lower()
    size = match.group(2)
    if size is not None and match.group(3) is None and any(m in base for m in _LENGTH_TYPE_MARKERS):
        return base, int(size)
    return base, None


DIALECTS: dict[str, type[Dialect]] = {
    "postgresql": PostgresDialect,
    "postgres": PostgresDialect,
    "pgsql": PostgresDialect,
    "mysql": MysqlDialect,
    "mariadb": MysqlDialect,
    "sqlite": SqliteDialect,
}


def get_dialect(name: str) -> Dialect:
    """Get the query strategy for a database type.

    Args:
        name: Database type or SQLAlchemy dialect name (postgresql, mysql, sqlite)

    Raises:
        ValueError: If the database type is not supported
    """
    dialect_cls = DIALECTS.get(name.strip().lower())
    if dialect_cls is None:
        raise ValueError(f"Unsupported database_type: {name}. Must be 'postgresql', 'mysql', or 'sqlite'")
    return dialect_cls()


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
