"""Repository base class.

Thin wrapper over Database + model for DDD-oriented usage.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from model_query.core.database import Database
from model_query.query.model_query import ModelQuery

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository class bound to one model.

    Subclasses add domain-specific finders on top of `query()`.
    """

    def __init__(self, database: Database, model: type[T]) -> None:
        self.database = database
        self.model = model

    def query(self) -> ModelQuery:
        """Start a new query for the model."""
        return self.database.model(self.model)  # type: ignore[arg-type]

    def find(self, id: Any) -> Any:
        """Get a model or a list of models by identifier."""
        return self.query().find(id)

    def all(self) -> list[T]:
        return self.query().get()
