"""Fluent SELECT query builder.

The Query collects a table, columns, criteria, ordering and paging, and
runs through a Database when fetched. Closures passed to `where`,
`where_not` and `where_exists` are resolved immediately into criteria.
Resolution is delegated to a closure resolver when one is registered, which
lets a decorating proxy hand its own kind of query object to the closure.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Protocol

from model_query.core.enums import AppendRule
from model_query.core.exceptions import IncorrectQueryError, InvalidArgumentError
from model_query.query.compiler import Compiler
from model_query.query.criteria import (
    OPERATORS,
    ColumnsCriterion,
    Criterion,
    ExistsCriterion,
    GroupCriterion,
    InCriterion,
    NullCriterion,
    ValueCriterion,
)

if TYPE_CHECKING:
    from model_query.core.database import Database

_UNSET: Any = object()


class ClosureResolver(Protocol):
    """Turns a closure into the query object whose criteria it produced."""

    def resolve_criteria_group_closure(self, callback: Callable[[Any], Any]) -> Query: ...

    def resolve_sub_query_closure(self, callback: Callable[[Any], Any]) -> Query: ...


class Query:
    """Generic SELECT query builder.

    Args:
        database: Database used to run the query. Queries without one can
            still be built and compiled.
        table: Table to select from.
        alias: Optional table alias.
        compiler: Statement compiler, a default Compiler when omitted.
    """

    def __init__(
        self,
        database: Database | None = None,
        table: str | None = None,
        alias: str | None = None,
        compiler: Compiler | None = None,
    ) -> None:
        self.database = database
        self.table_name = table
        self.table_alias = alias
        self.compiler = compiler or Compiler()
        self.columns: list[str] = []
        self.criteria: list[Criterion] = []
        self.orders: list[tuple[str, str]] = []
        self.limit_value: int | None = None
        self.offset_value: int | None = None
        self._closure_resolver: ClosureResolver | None = None

    # --- Copies ---

    def set_closure_resolver(self, resolver: ClosureResolver | None) -> None:
        self._closure_resolver = resolver

    def clone(self) -> Query:
        """Make an independent copy; the closure resolver is not carried over."""
        clone = copy.copy(self)
        clone.columns = list(self.columns)
        clone.criteria = list(self.criteria)
        clone.orders = list(self.orders)
        clone._closure_resolver = None
        return clone

    def make_copy_for_criteria_group(self) -> Query:
        """Empty query over the same table, for collecting a criteria group."""
        return Query(self.database, self.table_name, self.table_alias, self.compiler)

    def make_copy_for_sub_query(self) -> Query:
        """Empty query with no table, for building a sub-query."""
        return Query(self.database, compiler=self.compiler)

    def get_table_identifier(self) -> str:
        """Name the columns of this query's table should be qualified with."""
        name = self.table_alias or self.table_name
        if not name:
            raise IncorrectQueryError("The query has no table")
        return name

    # --- Building ---

    def table(self, name: str, alias: str | None = None) -> Query:
        if not name:
            raise InvalidArgumentError("A table name must not be empty")
        self.table_name = name
        self.table_alias = alias
        return self

    def select(self, *columns: str) -> Query:
        self.columns.extend(columns)
        return self

    def where(
        self,
        column: str | Callable[[Any], Any],
        operator: Any = _UNSET,
        value: Any = _UNSET,
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        """Add a criterion.

        `where(callback)` adds a criteria group built by the callback,
        `where(column, value)` compares with `=` and
        `where(column, operator, value)` uses the given operator.
        Comparing with `None` through `=` or `!=` becomes IS [NOT] NULL.
        """
        if callable(column):
            self._add_group(column, False, append_rule)
            return self

        if operator is _UNSET:
            raise InvalidArgumentError(f"No value given to compare the `{column}` column with")
        if value is _UNSET:
            operator, value = "=", operator

        operator = self._check_operator(operator)
        self._check_column(column)

        if value is None and operator in ("=", "!=", "<>"):
            self.criteria.append(NullCriterion(column, operator != "=", append_rule))
        else:
            self.criteria.append(ValueCriterion(column, operator, value, append_rule))
        return self

    def or_where(
        self,
        column: str | Callable[[Any], Any],
        operator: Any = _UNSET,
        value: Any = _UNSET,
    ) -> Query:
        return self.where(column, operator, value, AppendRule.OR)

    def where_not(
        self,
        callback: Callable[[Any], Any],
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        """Add a negated criteria group built by the callback."""
        if not callable(callback):
            raise InvalidArgumentError("where_not expects a callable building a criteria group")
        self._add_group(callback, True, append_rule)
        return self

    def or_where_not(self, callback: Callable[[Any], Any]) -> Query:
        return self.where_not(callback, AppendRule.OR)

    def where_in(
        self,
        column: str,
        values: Iterable[Any],
        negate: bool = False,
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        self._check_column(column)
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            raise InvalidArgumentError(
                f"The values for `{column}` must be an iterable, {type(values).__name__} given"
            )
        self.criteria.append(InCriterion(column, tuple(values), negate, append_rule))
        return self

    def or_where_in(self, column: str, values: Iterable[Any]) -> Query:
        return self.where_in(column, values, append_rule=AppendRule.OR)

    def where_not_in(self, column: str, values: Iterable[Any]) -> Query:
        return self.where_in(column, values, negate=True)

    def where_null(
        self,
        column: str,
        negate: bool = False,
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        self._check_column(column)
        self.criteria.append(NullCriterion(column, negate, append_rule))
        return self

    def where_not_null(self, column: str) -> Query:
        return self.where_null(column, negate=True)

    def where_column(
        self,
        left: str,
        operator: str,
        right: str,
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        self._check_column(left)
        self._check_column(right)
        operator = self._check_operator(operator)
        self.criteria.append(ColumnsCriterion(left, operator, right, append_rule))
        return self

    def where_exists(
        self,
        subquery: Query | Callable[[Any], Any],
        negate: bool = False,
        append_rule: AppendRule = AppendRule.AND,
    ) -> Query:
        """Add an EXISTS criterion from a ready query or a callback filling one."""
        if isinstance(subquery, Query):
            resolved = subquery
        elif callable(subquery):
            resolved = self._resolver().resolve_sub_query_closure(subquery)
        else:
            raise InvalidArgumentError(
                f"where_exists expects a query or a callable, {type(subquery).__name__} given"
            )
        self.criteria.append(ExistsCriterion(resolved, negate, append_rule))
        return self

    def where_not_exists(self, subquery: Query | Callable[[Any], Any]) -> Query:
        return self.where_exists(subquery, negate=True)

    def order_by(self, column: str, direction: str = "asc") -> Query:
        self._check_column(column)
        direction = direction.upper()
        if direction not in ("ASC", "DESC"):
            raise InvalidArgumentError(f"Unknown order direction: {direction}")
        self.orders.append((column, direction))
        return self

    def limit(self, limit: int | None) -> Query:
        if limit is not None and limit < 0:
            raise InvalidArgumentError("The limit must not be negative")
        self.limit_value = limit
        return self

    def offset(self, offset: int | None) -> Query:
        if offset is not None and offset < 0:
            raise InvalidArgumentError("The offset must not be negative")
        self.offset_value = offset
        return self

    # --- Closures ---

    def resolve_criteria_group_closure(self, callback: Callable[[Any], Any]) -> Query:
        """Run the callback against an empty criteria-group copy of this query."""
        return self._resolve_closure(callback, self.make_copy_for_criteria_group())

    def resolve_sub_query_closure(self, callback: Callable[[Any], Any]) -> Query:
        """Run the callback against an empty sub-query."""
        return self._resolve_closure(callback, self.make_copy_for_sub_query())

    @staticmethod
    def _resolve_closure(callback: Callable[[Any], Any], query: Query) -> Query:
        result = callback(query)
        return result if isinstance(result, Query) else query

    def _resolver(self) -> ClosureResolver:
        return self._closure_resolver if self._closure_resolver is not None else self

    def _add_group(
        self,
        callback: Callable[[Any], Any],
        negate: bool,
        append_rule: AppendRule,
    ) -> None:
        group = self._resolver().resolve_criteria_group_closure(callback)
        self.criteria.append(GroupCriterion(tuple(group.criteria), negate, append_rule))

    @staticmethod
    def _check_operator(operator: Any) -> str:
        if not isinstance(operator, str) or operator.upper() not in OPERATORS:
            raise InvalidArgumentError(f"Unknown comparison operator: {operator!r}")
        return operator.upper()

    @staticmethod
    def _check_column(column: Any) -> None:
        if not isinstance(column, str) or not column:
            raise InvalidArgumentError(f"A column name must be a non-empty string, {column!r} given")

    # --- Fetching ---

    def compile(self) -> tuple[str, dict[str, Any]]:
        return self.compiler.compile_select(self)

    def get(self) -> list[dict[str, Any]]:
        """Fetch all matching rows as dicts."""
        sql, params = self.compile()
        return self._database().select(sql, params)

    def first(self) -> dict[str, Any] | None:
        """Fetch the first matching row, or None. The query itself is not limited."""
        limit = 1 if self.limit_value is None else min(self.limit_value, 1)
        rows = self.clone().limit(limit).get()
        return rows[0] if rows else None

    def count(self) -> int:
        sql, params = self.compiler.compile_count(self)
        return int(self._database().scalar(sql, params) or 0)

    def _database(self) -> Database:
        if self.database is None:
            raise IncorrectQueryError("The query is not attached to a database")
        return self.database
