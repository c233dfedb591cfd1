"""Column metadata introspection."""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from fieldgen.database.dialects import Dialect
from fieldgen.errors import DataAccessError
from fieldgen.models import ColumnMetadata

logger = logging.getLogger(__name__)


class ColumnIntrospector:
    """Read column metadata for one table at a time.

    Args:
        connection: Open SQLAlchemy connection
        dialect: Query strategy for the connected database
    """

    def __init__(self, connection: Connection, dialect: Dialect) -> None:
        self.connection = connection
        self.dialect = dialect

    def get_columns(self, table_name: str, catalog: str) -> list[ColumnMetadata]:
        """Get the columns of a table in ordinal order.

        Args:
            table_name: Table name (exact match)
            catalog: Catalog/schema name (exact match)

        Returns:
            List of ColumnMetadata. Empty if the table exists but has no columns.

        Raises:
            DataAccessError: If the query fails or the table does not exist
        """
        params = {"table_name": table_name, "catalog": catalog}
        logger.debug(f"Reading columns for '{catalog}.{table_name}' ({self.dialect.name})")

        try:
            rows = self.connection.execute(text(self.dialect.columns_query), params).mappings().all()
        except SQLAlchemyError as e:
            raise DataAccessError(f"Could not read columns for table '{table_name}': {e}", table_name) from e

        if not rows:
            if not self.table_exists(table_name, catalog):
                raise DataAccessError(f"Table '{table_name}' not found in '{catalog}'", table_name)
            logger.warning(f"Table '{catalog}.{table_name}' has no columns")
            return []

        return [self.dialect.normalize_column(row) for row in rows]

    def table_exists(self, table_name: str, catalog: str) -> bool:
        """Check whether a table exists in the catalog/schema.

        Dialects without an existence query treat a column-less result as a missing table.
        """
        if self.dialect.table_exists_query is None:
            return False

        params = {"table_name": table_name, "catalog": catalog}
        try:
            result = self.connection.execute(text(self.dialect.table_exists_query), params)
            return result.first() is not None
        except SQLAlchemyError as e:
            raise DataAccessError(f"Could not check whether table '{table_name}' exists: {e}", table_name) from e
