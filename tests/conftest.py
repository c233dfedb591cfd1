"""Pytest configuration and shared fixtures"""

import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection

from fieldgen.config import GeneratorConfig

Rows = list[dict[str, Any]]


@pytest.fixture
def shop_db_path(tmp_path: Path) -> Path:
    """Create a SQLite database with users and orders tables"""
    db_path = tmp_path / "shop.db"

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            email VARCHAR(255) NOT NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1,
            bio TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            total DECIMAL(10,2),
            status VARCHAR(20) DEFAULT 'new',
            notes TEXT
        )
    """)

    conn.commit()
    conn.close()

    return db_path


@pytest.fixture
def shop_db(shop_db_path: Path) -> str:
    """Connection string for the shop database"""
    return f"sqlite:///{shop_db_path}"


@pytest.fixture
def shop_connection(shop_db: str) -> Iterator[Connection]:
    """Open SQLAlchemy connection to the shop database"""
    engine = create_engine(shop_db)
    with engine.connect() as conn:
        yield conn
    engine.dispose()


@pytest.fixture
def blog_connection(tmp_path: Path) -> Iterator[Connection]:
    """Open connection to a SQLite database whose foreign keys name only the parent table"""
    db_path = tmp_path / "blog.db"

    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT);
        CREATE TABLE tags (label TEXT);
        CREATE TABLE memberships (team_id INTEGER, user_id INTEGER, PRIMARY KEY (team_id, user_id));
        CREATE TABLE posts (
            id INTEGER PRIMARY KEY,
            user_id INTEGER REFERENCES users ON DELETE SET NULL,
            title VARCHAR(120) NOT NULL
        );
        CREATE TABLE grants (
            id INTEGER PRIMARY KEY,
            team_id INTEGER,
            member_id INTEGER,
            FOREIGN KEY (team_id, member_id) REFERENCES memberships
        );
        CREATE TABLE tagged (id INTEGER PRIMARY KEY, tag TEXT REFERENCES tags);
    """)
    conn.commit()
    conn.close()

    engine = create_engine(f"sqlite:///{db_path}")
    with engine.connect() as connection:
        yield connection
    engine.dispose()


@pytest.fixture
def config() -> GeneratorConfig:
    """Default generator configuration"""
    return GeneratorConfig()


def make_result(rows: Rows) -> MagicMock:
    """Build a fake SQLAlchemy result returning the given rows"""
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    result.first.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def fake_connection() -> Callable[..., MagicMock]:
    """Build a fake connection that answers column, constraint and table-exists queries.

    The query is recognised by the information-schema view it reads.
    """

    def factory(columns: Rows | None = None, constraints: Rows | None = None, table_exists: bool = True) -> MagicMock:
        def execute(statement: Any, params: dict[str, Any] | None = None) -> MagicMock:
            sql = str(statement).lower()
            if "constraint" in sql or "foreign_key_list" in sql:
                return make_result(constraints or [])
            if "information_schema.tables" in sql:
                return make_result([{"exists": 1}] if table_exists else [])
            return make_result(columns or [])

        connection = MagicMock()
        connection.execute.side_effect = execute
        return connection

    return factory


def pg_column(
    name: str,
    data_type: str,
    column_type: str | None = None,
    default: str | None = None,
    is_nullable: str = "YES",
    length: int | None = None,
    position: int = 1,
) -> dict[str, Any]:
    """Row shaped like the PostgreSQL columns query"""
    return {
        "column_name": name,
        "column_default": default,
        "is_nullable": is_nullable,
        "data_type": data_type,
        "character_maximum_length": length,
        "column_type": column_type or data_type,
        "column_comment": None,
        "ordinal_position": position,
    }


@pytest.fixture
def pg_row() -> Callable[..., dict[str, Any]]:
    """Factory for PostgreSQL column rows"""
    return pg_column
