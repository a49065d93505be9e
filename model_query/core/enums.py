"""Enumerations shared by the query and execution layers."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class AppendRule(Enum):
    """How a criterion is joined to the criteria before it."""

    AND = "AND"
    OR = "OR"
