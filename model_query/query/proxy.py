"""Generic query decorator.

A QueryProxy owns a base Query and forwards every builder call to it.
Calls that return the base query return the proxy instead, so chains stay
on the decorator. Every call into the base query goes through
`handle_base_query_exception`, and the proxy registers itself as the base
query's closure resolver so closures receive proxies too.
"""

from __future__ import annotations

import copy
import functools
from collections.abc import Callable
from typing import Any

from model_query.query.builder import Query


class QueryProxy:
    """Decorates a base Query.

    Args:
        base_query: The query to decorate. The proxy takes ownership of it.
    """

    def __init__(self, base_query: Query) -> None:
        self._base_query = base_query
        base_query.set_closure_resolver(self)

    @property
    def base_query(self) -> Query:
        return self._base_query

    def __getattr__(self, name: str) -> Any:
        # Private names and lookups made before __init__ ran are never forwarded
        if name.startswith("_"):
            raise AttributeError(name)

        attribute = getattr(self._base_query, name)
        if not callable(attribute):
            return attribute

        @functools.wraps(attribute)
        def forward(*args: Any, **kwargs: Any) -> Any:
            return self._call_base(name, *args, **kwargs)

        return forward

    def __repr__(self) -> str:
        return f"<{type(self).__name__} table={self._base_query.table_name!r}>"

    # --- Fetching ---

    def get(self) -> list[Any]:
        rows = self._call_base("get")
        return [self.process_fetched_row(row) for row in rows]

    def first(self) -> Any:
        row = self._call_base("first")
        return None if row is None else self.process_fetched_row(row)

    def clone(self) -> QueryProxy:
        """Copy the proxy together with an independent copy of the base query."""
        clone = copy.copy(self)
        clone._base_query = self._call_base("clone")
        clone._base_query.set_closure_resolver(clone)
        return clone

    # --- Hooks ---

    def process_fetched_row(self, row: dict[str, Any]) -> Any:
        return row

    def resolve_criteria_group_closure(self, callback: Callable[[Any], Any]) -> Query:
        query = type(self)(self._base_query.make_copy_for_criteria_group())
        return self._resolve_closure(callback, query)

    def resolve_sub_query_closure(self, callback: Callable[[Any], Any]) -> Query:
        query = type(self)(self._base_query.make_copy_for_sub_query())
        return self._resolve_closure(callback, query)

    def handle_base_query_exception(self, exception: Exception) -> None:
        """Raise a replacement for an error from the base query.

        Returning without raising lets the original exception propagate
        unchanged.
        """

    # --- Internals ---

    @staticmethod
    def _resolve_closure(callback: Callable[[Any], Any], query: QueryProxy) -> Query:
        result = callback(query)
        if isinstance(result, QueryProxy):
            return result.base_query
        if isinstance(result, Query):
            return result
        return query.base_query

    @staticmethod
    def _unwrap(value: Any) -> Any:
        return value.base_query if isinstance(value, QueryProxy) else value

    def _call_base(self, method: str, *args: Any, **kwargs: Any) -> Any:
        args = tuple(self._unwrap(arg) for arg in args)
        kwargs = {key: self._unwrap(value) for key, value in kwargs.items()}
        try:
            result = getattr(self._base_query, method)(*args, **kwargs)
        except Exception as exception:
            self.handle_base_query_exception(exception)
            raise
        return self if result is self._base_query else result
