"""Model base class and the descriptor protocol ModelQuery relies on.

A model class is its own descriptor: table name, identifier field, row
construction and relation lookup are classmethods. Any other object with
the same methods can be bound to a ModelQuery as well.

    @dataclass
    class Book(Model):
        __table__ = "books"
        __relations__ = {"author": BelongsTo("Author", "author_id")}

        id: int
        title: str
        author_id: int
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, ClassVar, Protocol, runtime_checkable

from model_query.mapping.model import ModelMapper
from model_query.models.registry import default_registry
from model_query.models.relations import Relation


@runtime_checkable
class ModelDescriptor(Protocol):
    """What a ModelQuery needs to know about its model."""

    def get_table(self) -> str:
        """Name of the table the model is stored in."""
        ...

    def get_identifier_field(self) -> str:
        """Name of the identifier column."""
        ...

    def create_from_row(self, row: dict[str, Any]) -> Any:
        """Build a model instance from a fetched row."""
        ...

    def get_relation(self, name: str) -> Relation | None:
        """Look up a relation by name, None when there is no such relation."""
        ...


class RowMapper(Protocol):
    """Builds one model instance from a fetched row."""

    def map_one(self, row: dict[str, Any]) -> Any:
        ...



@lru_cache(maxsize=None)
def _default_mapper(model_cls: type) -> ModelMapper[Any]:
    return ModelMapper(model_cls, aliases=getattr(model_cls, "__aliases__", None))


class Model:
    """Base class for models.

    Class attributes:
        __table__: Table name, the lowercased class name when not set.
        __identifier__: Identifier column, ``id`` by default.
        __relations__: Relations by name.
        __aliases__: Optional column-name to field-name mapping for rows.
    """

    __table__: ClassVar[str | None] = None
    __identifier__: ClassVar[str] = "id"
    __relations__: ClassVar[dict[str, Relation]] = {}
    __aliases__: ClassVar[dict[str, str] | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        default_registry.register(cls)

    @classmethod
    def get_table(cls) -> str:
        return cls.__table__ or cls.__name__.lower()

    @classmethod
    def get_identifier_field(cls) -> str:
        return cls.__identifier__

    @classmethod
    def get_mapper(cls) -> RowMapper:
        return _default_mapper(cls)

    @classmethod
    def create_from_row(cls, row: dict[str, Any]) -> Any:
        return cls.get_mapper().map_one(row)

    @classmethod
    def get_relation(cls, name: str) -> Relation | None:
        return cls.__relations__.get(name)

    def get_identifier(self) -> Any:
        return getattr(self, self.get_identifier_field())
