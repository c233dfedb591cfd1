"""Database connection and engine management."""

import re
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError

from fieldgen.database.dialects import Dialect, get_dialect


def sanitize_connection_string(connection_string: str) -> str:
    """Sanitize a database connection string by removing passwords for logging.

    Args:
        connection_string: The database connection string

    Returns:
        Sanitized connection string with password replaced by ***
    """
    parsed = urlparse(connection_string)
    if parsed.password:
        return connection_string.replace(f":{parsed.password}@", ":***@")

    # Matches :password@ in strings urlparse could not split
    return re.sub(r"://([^:/@]+):([^@/]+)@", r"://\1:***@", connection_string)


def detect_database_type(connection_string: str) -> str:
    """Get the database type from a connection string, e.g. 'postgresql+psycopg2://...' -> 'postgresql'

    Raises:
        ValueError: If the connection string cannot be parsed
    """
    try:
        return make_url(connection_string).get_backend_name()
    except ArgumentError as e:
        raise ValueError(f"Invalid connection string: {sanitize_connection_string(connection_string)}") from e


def create_database_engine(connection_string: str, database_type: str | None = None) -> tuple[Engine, Dialect]:
    """Create a SQLAlchemy engine and the matching query strategy.

    Args:
        connection_string: The database connection string
        database_type: The database type (postgresql, mysql, sqlite). Detected from
            the connection string when omitted.

    Returns:
        Tuple of (Engine, Dialect)

    Raises:
        ValueError: If the database type is not supported
    """
    dialect = get_dialect(database_type or detect_database_type(connection_string))

    connect_args: dict[str, Any] = {}
    if dialect.name == "sqlite":
        connect_args = {"check_same_thread": False}

    engine = create_engine(connection_string, connect_args=connect_args, echo=False)
    return engine, dialect
