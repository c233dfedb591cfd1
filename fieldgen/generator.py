"""Field generation for whole tables and schemas.

These helpers own the engine lifecycle: each call opens one engine, runs on a
single connection and disposes the engine before returning.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from fieldgen.assembler import FieldAssembler, locale_group
from fieldgen.config import GeneratorConfig
from fieldgen.database.dialects import Dialect
from fieldgen.database.engine import create_database_engine, sanitize_connection_string
from fieldgen.database.introspection import ColumnIntrospector
from fieldgen.database.type_mapping import TypeMapper
from fieldgen.errors import DataAccessError, UnmappedTypesError
from fieldgen.models import FieldDescriptor

logger = logging.getLogger(__name__)


def list_tables(connection: Connection, dialect: Dialect, catalog: str) -> list[str]:
    """List the tables visible in a catalog/schema, sorted by name.

    Raises:
        DataAccessError: If the tables cannot be listed
    """
    # PostgreSQL catalogs are databases and sqlite uses 'main'; only MySQL maps catalog to schema
    schema = catalog if dialect.name == "mysql" else None
    try:
        return sorted(inspect(connection).get_table_names(schema=schema))
    except SQLAlchemyError as e:
        raise DataAccessError(f"Could not list tables in '{catalog}': {e}") from e


def find_unmapped_types(
    connection: Connection,
    dialect: Dialect,
    table_names: Iterable[str],
    catalog: str,
    config: GeneratorConfig,
) -> dict[str, list[str]]:
    """Collect every unmapped native type, per table.

    Returns:
        Mapping of table name to its unmapped types. Tables with none are left out.
    """
    introspector = ColumnIntrospector(connection, dialect)
    mapper = TypeMapper(config.data_type_map)

    unmapped: dict[str, list[str]] = {}
    for table_name in table_names:
        columns = introspector.get_columns(table_name, catalog)
        missing = mapper.find_unmapped(column.data_type for column in columns)
        if missing:
            logger.warning(f"Table '{table_name}' uses unmapped types: {', '.join(missing)}")
            unmapped[table_name] = missing
    return unmapped


def generate_table_fields(
    connection_string: str,
    table_name: str,
    database_type: str | None = None,
    catalog: str | None = None,
    config: GeneratorConfig | None = None,
) -> list[FieldDescriptor]:
    """Generate the field descriptors for one table.

    Args:
        connection_string: Database connection string
        table_name: Table to read
        database_type: Database type (postgresql, mysql, sqlite). Detected when omitted.
        catalog: Catalog/schema name (defaults to the connection's database)
        config: Generator configuration

    Returns:
        List of FieldDescriptor in column order

    Raises:
        ValueError: If the database type is not supported
        DataAccessError: If the metadata cannot be read
        UnmappedTypeError: If a column type is not in the type map
    """
    config = config or GeneratorConfig()
    engine, dialect = create_database_engine(connection_string, database_type)
    logger.debug(f"Generating fields for '{table_name}' from {sanitize_connection_string(connection_string)}")

    try:
        catalog = catalog or dialect.default_catalog(engine.url)
        with engine.connect() as conn:
            assembler = FieldAssembler(conn, dialect, config)
            return assembler.assemble(table_name, catalog)
    finally:
        engine.dispose()


def generate_schema_fields(
    connection_string: str,
    tables: list[str] | None = None,
    database_type: str | None = None,
    catalog: str | None = None,
    config: GeneratorConfig | None = None,
) -> dict[str, list[FieldDescriptor]]:
    """Generate field descriptors for several tables.

    Every table is scanned for unmapped types before any descriptor is built,
    so all of them are reported together.

    Args:
        connection_string: Database connection string
        tables: Tables to read (None = all tables in the catalog)
        database_type: Database type (postgresql, mysql, sqlite). Detected when omitted.
        catalog: Catalog/schema name (defaults to the connection's database)
        config: Generator configuration

    Returns:
        Mapping of table name to its descriptors, in table order

    Raises:
        UnmappedTypesError: If any table uses a type missing from the type map
        DataAccessError: If the metadata cannot be read
    """
    config = config or GeneratorConfig()
    engine, dialect = create_database_engine(connection_string, database_type)

    try:
        catalog = catalog or dialect.default_catalog(engine.url)
        with engine.connect() as conn:
            table_names = tables if tables is not None else list_tables(conn, dialect, catalog)

            unmapped = find_unmapped_types(conn, dialect, table_names, catalog, config)
            if unmapped:
                raise UnmappedTypesError(unmapped)

            assembler = FieldAssembler(conn, dialect, config)
            results = assembler.assemble_many(table_names, catalog)

        logger.info(f"Generated fields for {len(results)} table(s)")
        return results
    finally:
        engine.dispose()


def scan_unmapped_types(
    connection_string: str,
    tables: list[str] | None = None,
    database_type: str | None = None,
    catalog: str | None = None,
    config: GeneratorConfig | None = None,
) -> dict[str, list[str]]:
    """Report the unmapped native types of several tables without building descriptors.

    Returns:
        Mapping of table name to its unmapped types (empty when everything is mapped)
    """
    config = config or GeneratorConfig()
    engine, dialect = create_database_engine(connection_string, database_type)

    try:
        catalog = catalog or dialect.default_catalog(engine.url)
        with engine.connect() as conn:
            table_names = tables if tables is not None else list_tables(conn, dialect, catalog)
            return find_unmapped_types(conn, dialect, table_names, catalog, config)
    finally:
        engine.dispose()


def to_template_payload(table_name: str, fields: Iterable[FieldDescriptor]) -> dict[str, Any]:
    """Bundle a table's descriptors with the locale group its templates translate under."""
    return {
        "locale-group": locale_group(table_name),
        "fields": [field.to_template_dict() for field in fields],
    }
