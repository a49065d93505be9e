"""Query layer exception hierarchy.

These are raised by the generic query builder and the execution layer.
Model-aware code translates them into ``model_query.exceptions``; raw
driver exceptions are never exposed to callers, they are wrapped into
DatabaseError first.
"""

from __future__ import annotations


class QueryLayerError(Exception):
    """Base exception for all query layer errors."""


class InvalidArgumentError(QueryLayerError):
    """Raised when a builder method receives an unusable argument."""


class IncorrectQueryError(QueryLayerError):
    """Raised when a query cannot be compiled in its current state."""


class DatabaseError(QueryLayerError):
    """Raised when the database driver fails to run a statement."""

    def __init__(self, message: str, sql: str | None = None) -> None:
        self.sql = sql
        super().__init__(message)


# --- Adapter ---


class AdapterError(QueryLayerError):
    """Raised when a database adapter cannot be loaded."""
