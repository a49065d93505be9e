"""Statement execution.

The Database runs compiled SQL through the configured adapter and hands
out query builders. Driver failures are wrapped into DatabaseError with
the driver exception as the cause.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from model_query.core.connection import ConnectionConfig, ConnectionManager
from model_query.core.exceptions import DatabaseError
from model_query.core.params import normalize_params
from model_query.query.builder import Query
from model_query.query.compiler import Compiler
from model_query.query.model_query import ModelQuery

if TYPE_CHECKING:
    from model_query.models.model import ModelDescriptor

logger = logging.getLogger(__name__)


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Already dict-like (e.g., psycopg dict_row)
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    # sqlite3.Row and plain tuples
    return [dict(zip(columns, row, strict=True)) for row in rows]


class Database:
    """Runs compiled SELECT statements and creates query builders."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        compiler: Compiler | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle
        self.compiler = compiler or Compiler()

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Database:
        """Create a Database from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Database instance
        """
        return cls(ConnectionManager(config))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def table(self, name: str, alias: str | None = None) -> ModelQuery:
        """Start a query over a table, returning plain row dicts."""
        return ModelQuery(Query(self, name, alias, self.compiler))

    def model(self, model: ModelDescriptor) -> ModelQuery:
        """Start a query over a model's table, returning model instances."""
        return ModelQuery(Query(self, model.get_table(), compiler=self.compiler), model)

    def select(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a statement and return all rows as dicts."""
        with self._connection_manager.get_connection() as conn:
            cursor = self._execute(conn, sql, params)
            return _rows_to_dicts(cursor)

    def scalar(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        """Run a statement and return the first column of the first row."""
        with self._connection_manager.get_connection() as conn:
            cursor = self._execute(conn, sql, params)
            row = cursor.fetchone()

        if row is None:
            return None
        if isinstance(row, dict):
            return next(iter(row.values()))
        return row[0]

    def close(self) -> None:
        self._connection_manager.close_pool()

    def _execute(self, conn: Any, sql: str, params: dict[str, Any] | None) -> Any:
        sql = normalize_params(sql, self._paramstyle)
        logger.debug("Executing %s with %s", sql, params)
        try:
            return self._connection_manager.adapter.execute(conn, sql, params)
        except Exception as e:
            raise DatabaseError(str(e), sql) from e
