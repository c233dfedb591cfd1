"""Foreign key constraint extraction."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from fieldgen.database.dialects import Dialect
from fieldgen.errors import DataAccessError, MalformedConstraintError
from fieldgen.models import ForeignConstraint

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("foreign", "references", "on")


class ConstraintExtractor:
    """Read and cache the foreign keys declared on tables.

    The cache is keyed by (catalog, table_name) and lives as long as the
    extractor, so each table is queried at most once.

    Args:
        connection: Open SQLAlchemy connection
        dialect: Query strategy for the connected database
    """

    def __init__(self, connection: Connection, dialect: Dialect) -> None:
        self.connection = connection
        self.dialect = dialect
        self._cache: dict[tuple[str, str], list[ForeignConstraint]] = {}

    def get_constraints(self, table_name: str, catalog: str) -> list[ForeignConstraint]:
        """Get the foreign keys of a table, querying only on first use.

        Raises:
            DataAccessError: If the query fails
            MalformedConstraintError: If a row lacks its column or referenced table/column
        """
        key = (catalog, table_name)
        if key in self._cache:
            logger.debug(f"Using cached foreign keys for '{catalog}.{table_name}'")
            return self._cache[key]

        constraints = self._fetch_constraints(table_name, catalog)
        self._cache[key] = constraints
        return constraints

    def get_constraint(self, table_name: str, catalog: str, column_name: str) -> ForeignConstraint | None:
        """Get the foreign key declared on a column, or None.

        The first constraint in query order wins if several share the column.
        """
        for constraint in self.get_constraints(table_name, catalog):
            if constraint.field == column_name.lower():
                return constraint
        return None

    def clear(self) -> None:
        self._cache.clear()

    def _fetch_constraints(self, table_name: str, catalog: str) -> list[ForeignConstraint]:
        params = {"table_name": table_name, "catalog": catalog}
        logger.debug(f"Reading foreign keys for '{catalog}.{table_name}' ({self.dialect.name})")

        try:
            rows = self.connection.execute(text(self.dialect.constraints_query), params).mappings().all()
        except SQLAlchemyError as e:
            raise DataAccessError(f"Could not read foreign keys for table '{table_name}': {e}", table_name) from e

        return [normalize_constraint(table_name, row) for row in rows]


def normalize_constraint(table_name: str, row: Mapping[str, Any]) -> ForeignConstraint:
    """Build a lower-cased ForeignConstraint from a constraints query row.

    Raises:
        MalformedConstraintError: If the source column, referenced table or referenced column is missing
    """
    if any(not row.get(key) for key in _REQUIRED_KEYS):
        raise MalformedConstraintError(table_name, dict(row))

    return ForeignConstraint(
        field=str(row["foreign"]).lower(),
        references=str(row["references"]).lower(),
        on=str(row["on"]).lower(),
        on_delete=_lower(row.get("on_delete")),
        on_update=_lower(row.get("on_update")),
    )


def _lower(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).lower()
