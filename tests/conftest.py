"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from model_query.core.connection import ConnectionConfig
from model_query.core.database import Database
from model_query.query.builder import Query

SCHEMA = [
    "CREATE TABLE authors (id INTEGER PRIMARY KEY, name TEXT NOT NULL)",
    "CREATE TABLE books (id INTEGER PRIMARY KEY, title TEXT NOT NULL, author_id INTEGER, "
    "FOREIGN KEY (author_id) REFERENCES authors(id))",
    "INSERT INTO authors (id, name) VALUES (1, 'Alice'), (2, 'Bob'), (3, 'Carol')",
    "INSERT INTO books (id, title, author_id) VALUES "
    "(1, 'Alpha', 1), (2, 'Beta', 1), (3, 'Gamma', 2), (4, 'Anonymous', NULL)",
]


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def database(sqlite_config: ConnectionConfig) -> Iterator[Database]:
    """Database over an in-memory SQLite with authors and books.

    Alice wrote Alpha and Beta, Bob wrote Gamma, Carol wrote nothing and
    Anonymous has no author.
    """
    db = Database.from_config(sqlite_config)
    with db.connection_manager.get_connection() as conn:
        for statement in SCHEMA:
            conn.execute(statement)
        conn.commit()
    yield db
    db.close()


@pytest.fixture
def fake_database() -> MagicMock:
    """Database double whose select returns no rows unless told otherwise."""
    db = MagicMock(spec=Database)
    db.select.return_value = []
    return db


@pytest.fixture
def base_query(fake_database: MagicMock) -> Query:
    return Query(fake_database, "books")
