"""Query builder for targeting a model.

ModelQuery binds a query to a model (any ModelDescriptor, usually a Model
subclass). Fetched rows become model instances, relations declared on the
model can be used as criteria, and query layer errors are translated into
``model_query.exceptions``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from model_query.core.enums import AppendRule
from model_query.exceptions import (
    NotAModelQueryError,
    UndefinedRelationError,
    translate_exception,
)
from model_query.query.builder import Query
from model_query.query.proxy import QueryProxy

if TYPE_CHECKING:
    from model_query.models.model import ModelDescriptor

logger = logging.getLogger(__name__)

_ID_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ModelQuery(QueryProxy):
    """Query decorator bound to an optional model.

    Args:
        base_query: Underlying query. The proxy takes ownership of it.
        model: Target model, already known to satisfy ModelDescriptor.
            None makes a plain query that returns row dicts.
    """

    def __init__(self, base_query: Query, model: ModelDescriptor | None = None) -> None:
        super().__init__(base_query)
        self.set_model(model)

    @property
    def model(self) -> ModelDescriptor | None:
        return self._model

    def set_model(self, model: ModelDescriptor | None) -> None:
        """FOR INNER USAGE ONLY! Rebind the model of a derived query."""
        self._model = model

    def find(self, id: Any) -> Any:
        """Get models by identifier.

        Args:
            id: An identifier or a list/tuple/set of identifiers.

        Returns:
            For a single identifier, the model or None. For several, a list
            of the models found, in no particular order.

        Raises:
            NotAModelQueryError: If no model is bound.
            InvalidArgumentError, IncorrectQueryError, DatabaseError
        """
        model = self._require_model("find")
        id_field = model.get_identifier_field()

        if id is None:
            # An identifier never equals NULL
            return None
        if isinstance(id, _ID_SEQUENCE_TYPES):
            return self.clone().where_in(id_field, id).get()
        return self.clone().where(id_field, id).first()

    def where_relation(
        self,
        relation_name: str,
        target: Any = None,
        negate: bool = False,
        append_rule: AppendRule = AppendRule.AND,
    ) -> ModelQuery:
        """Add a model relation criterion.

        Args:
            relation_name: Relation name on the bound model.
            target: A model means "related to this model". A callable means
                "related to a model matching the criteria the callable adds".
                None means "related to anything".
            negate: Whether the rule should be "not related".
            append_rule: How the criterion joins the criteria before it.

        Returns:
            This query.

        Raises:
            NotAModelQueryError: If no model is bound.
            UndefinedRelationError: If the model has no such relation.
        """
        model = self._require_model("where_relation")
        relation = model.get_relation(relation_name)

        if relation is None:
            raise UndefinedRelationError(getattr(model, "__name__", repr(model)), relation_name)

        def apply_relation(query: ModelQuery) -> None:
            relation.apply_to_query_where(query, [target])

        if negate:
            return self.where_not(apply_relation, append_rule)  # type: ignore[no-any-return]
        return self.where(apply_relation, append_rule=append_rule)  # type: ignore[no-any-return]

    def or_where_relation(self, relation_name: str, target: Any = None) -> ModelQuery:
        return self.where_relation(relation_name, target, False, AppendRule.OR)

    def where_no_relation(self, relation_name: str, target: Any = None) -> ModelQuery:
        return self.where_relation(relation_name, target, True)

    def or_where_no_relation(self, relation_name: str, target: Any = None) -> ModelQuery:
        return self.where_relation(relation_name, target, True, AppendRule.OR)

    def make_model_sub_query(self, model: ModelDescriptor, alias: str | None = None) -> ModelQuery:
        """Start a sub-query over another model's table, bound to that model."""
        query = type(self)(self._call_base("make_copy_for_sub_query"))
        query.set_model(model)
        return query.table(model.get_table(), alias)  # type: ignore[no-any-return]

    # --- Hooks ---

    def resolve_criteria_group_closure(self, callback: Callable[[Any], Any]) -> Query:
        query = type(self)(self._base_query.make_copy_for_criteria_group(), self._model)
        return self._resolve_closure(callback, query)

    def process_fetched_row(self, row: dict[str, Any]) -> Any:
        if self._model is not None:
            return self._model.create_from_row(row)
        return super().process_fetched_row(row)

    def handle_base_query_exception(self, exception: Exception) -> None:
        translated = translate_exception(exception)
        if translated is not None:
            logger.debug(
                "Translated %s into %s", type(exception).__name__, type(translated).__name__
            )
            raise translated from exception
        super().handle_base_query_exception(exception)

    def _require_model(self, operation: str) -> ModelDescriptor:
        if self._model is None:
            raise NotAModelQueryError(operation)
        return self._model
