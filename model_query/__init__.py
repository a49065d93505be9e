"""model-query - model-aware query building over a plain SQL query layer."""

from __future__ import annotations

from model_query.core.connection import ConnectionConfig, ConnectionManager
from model_query.core.database import Database
from model_query.core.enums import AppendRule, DatabaseBackend
from model_query.exceptions import (
    ColumnMismatchError,
    DatabaseError,
    IncorrectQueryError,
    InvalidArgumentError,
    ModelQueryError,
    NotAModelQueryError,
    RelationError,
    UndefinedRelationError,
)
from model_query.mapping.model import ModelMapper
from model_query.models.model import Model, ModelDescriptor
from model_query.models.registry import ModelRegistry
from model_query.models.relations import BelongsTo, EqualFields, HasMany, Relation
from model_query.query.builder import Query
from model_query.query.model_query import ModelQuery
from model_query.query.proxy import QueryProxy
from model_query.repository.base import Repository

__version__ = "0.1.0"

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "Database",
    # Query
    "Query",
    "QueryProxy",
    "ModelQuery",
    # Models
    "Model",
    "ModelDescriptor",
    "ModelRegistry",
    "Relation",
    "EqualFields",
    "BelongsTo",
    "HasMany",
    # Mapping
    "ModelMapper",
    # Repository
    "Repository",
    # Enums
    "AppendRule",
    "DatabaseBackend",
    # Exceptions
    "ModelQueryError",
    "InvalidArgumentError",
    "IncorrectQueryError",
    "NotAModelQueryError",
    "DatabaseError",
    "RelationError",
    "UndefinedRelationError",
    "ColumnMismatchError",
]
