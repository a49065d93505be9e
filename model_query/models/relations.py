"""Model relations.

A relation knows how to add "related to ..." criteria to a query of its
owning model. ModelQuery only calls `apply_to_query_where`; everything
about how the criteria are shaped lives here.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from model_query.core.enums import AppendRule
from model_query.exceptions import InvalidArgumentError, RelationError
from model_query.models.registry import ModelRegistry, default_registry

if TYPE_CHECKING:
    from model_query.query.model_query import ModelQuery

# Sub-query aliases must differ from every table an outer query may use
_alias_counter = itertools.count(1)


@runtime_checkable
class Relation(Protocol):
    """Relation protocol."""

    def apply_to_query_where(self, query: ModelQuery, targets: list[Any]) -> None:
        """Add criteria matching rows related to any of the targets.

        Each target is a model instance, a callable that adds criteria to a
        query of the related model, or None for "related to anything".
        """
        ...


class EqualFields:
    """Relation where a field of this model equals a field of the related model.

    Args:
        model: Related model class or its registered class name.
        self_field: Column of the owning model.
        foreign_field: Column of the related model.
        registry: Registry to resolve a model name in.
    """

    def __init__(
        self,
        model: type | str,
        self_field: str,
        foreign_field: str,
        registry: ModelRegistry | None = None,
    ) -> None:
        self._model = model
        self.self_field = self_field
        self.foreign_field = foreign_field
        self._registry = registry or default_registry

    def get_related_model(self) -> type:
        """The related model class, resolving a name on first use."""
        if isinstance(self._model, str):
            model = self._registry.get_model(self._model)
            if model is None:
                raise RelationError(f"The related model `{self._model}` is not registered")
            self._model = model
        return self._model

    def apply_to_query_where(self, query: ModelQuery, targets: list[Any]) -> None:
        related = self.get_related_model()
        owner = query.get_table_identifier()

        def apply_targets(group: ModelQuery) -> None:
            for target in targets:
                self._apply_target(group, owner, related, target)

        query.where(apply_targets)

    def _apply_target(self, query: ModelQuery, owner: str, related: type, target: Any) -> None:
        self_column = f"{owner}.{self.self_field}"

        if target is None:
            query.where_exists(self._related_query(query, owner, related), append_rule=AppendRule.OR)
            return

        if isinstance(target, related):
            value = getattr(target, self.foreign_field, None)
            if value is None:
                raise InvalidArgumentError(
                    f"The {related.__name__} target has no `{self.foreign_field}` value to relate to"
                )
            query.where(self_column, "=", value, append_rule=AppendRule.OR)
            return

        if callable(target) and not isinstance(target, type):
            query.where_exists(
                self._related_query(query, owner, related, target), append_rule=AppendRule.OR
            )
            return

        raise InvalidArgumentError(
            f"A relation target must be a {related.__name__} instance, a callable or None, "
            f"{type(target).__name__} given"
        )

    def _related_query(
        self,
        query: ModelQuery,
        owner: str,
        related: type,
        callback: Callable[[Any], Any] | None = None,
    ) -> ModelQuery:
        alias = f"{related.get_table()}_{next(_alias_counter)}"  # type: ignore[attr-defined]
        subquery = query.make_model_sub_query(related, alias)  # type: ignore[arg-type]
        subquery.where_column(f"{alias}.{self.foreign_field}", "=", f"{owner}.{self.self_field}")
        if callback is not None:
            subquery.where(callback)
        return subquery

    def __repr__(self) -> str:
        model = self._model if isinstance(self._model, str) else self._model.__name__
        return f"{type(self).__name__}({model!r}, {self.self_field!r}, {self.foreign_field!r})"


class BelongsTo(EqualFields):
    """This model holds the related model's identifier (`book.author_id -> author.id`).

    Args:
        model: Related model class or its registered class name.
        foreign_key: Column of this model holding the related identifier.
        identifier_field: Related column, the related model's identifier
            field when omitted.
    """

    def __init__(
        self,
        model: type | str,
        foreign_key: str,
        identifier_field: str | None = None,
        registry: ModelRegistry | None = None,
    ) -> None:
        super().__init__(model, foreign_key, identifier_field or "", registry)
        self._identifier_field = identifier_field

    def get_related_model(self) -> type:
        model = super().get_related_model()
        if not self._identifier_field:
            self.foreign_field = model.get_identifier_field()  # type: ignore[attr-defined]
        return model


class HasMany(EqualFields):
    """The related model holds this model's identifier (`author.id <- book.author_id`).

    Args:
        model: Related model class or its registered class name.
        foreign_key: Column of the related model holding this model's identifier.
        identifier_field: Column of this model, the owning model's identifier
            field when omitted.
    """

    def __init__(
        self,
        model: type | str,
        foreign_key: str,
        identifier_field: str | None = None,
        registry: ModelRegistry | None = None,
    ) -> None:
        super().__init__(model, identifier_field or "", foreign_key, registry)
        self._identifier_field = identifier_field

    def apply_to_query_where(self, query: ModelQuery, targets: list[Any]) -> None:
        if not self._identifier_field:
            owner = query.model
            self.self_field = owner.get_identifier_field() if owner is not None else "id"
        super().apply_to_query_where(query, targets)
