"""SELECT statement compiler.

Turns a Query into SQL text with `:name` placeholders plus the dict of
bound values. Identifiers are double-quoted, which SQLite and PostgreSQL
both accept. Bare column names are qualified with the table (or alias) of
the query they belong to, so an unknown column is an error instead of a
string literal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from model_query.core.exceptions import IncorrectQueryError, InvalidArgumentError
from model_query.core.params import ParamBag
from model_query.query.criteria import (
    ColumnsCriterion,
    Criterion,
    ExistsCriterion,
    GroupCriterion,
    InCriterion,
    NullCriterion,
    ValueCriterion,
)

if TYPE_CHECKING:
    from model_query.query.builder import Query


class Compiler:
    """Compiles SELECT and COUNT statements."""

    quote_char = '"'

    def compile_select(self, query: Query) -> tuple[str, dict[str, Any]]:
        bag = ParamBag()
        sql = self._select(query, bag)
        return sql, bag.values

    def compile_count(self, query: Query) -> tuple[str, dict[str, Any]]:
        bag = ParamBag()
        inner = self._select(query, bag)
        return f'SELECT COUNT(*) AS "aggregate" FROM ({inner}) AS "counted"', bag.values

    def quote_identifier(self, name: str) -> str:
        """Quote a possibly table-qualified identifier (`books.id`)."""
        if not name:
            raise InvalidArgumentError("An identifier must not be empty")
        parts = []
        for part in name.split("."):
            if part == "*":
                parts.append(part)
                continue
            escaped = part.replace(self.quote_char, self.quote_char * 2)
            parts.append(f"{self.quote_char}{escaped}{self.quote_char}")
        return ".".join(parts)

    def quote_column(self, column: str, owner: str) -> str:
        """Quote a column, qualifying it with `owner` unless it already is."""
        if "." in column or column == "*":
            return self.quote_identifier(column)
        return f"{self.quote_identifier(owner)}.{self.quote_identifier(column)}"

    def _select(self, query: Query, bag: ParamBag) -> str:
        if not query.table_name:
            raise IncorrectQueryError("The query has no table to select from")

        owner = query.get_table_identifier()
        columns = ", ".join(self.quote_column(c, owner) for c in query.columns) or "*"
        sql = f"SELECT {columns} FROM {self._table(query)}"

        where = self._criteria(query.criteria, bag, owner)
        if where:
            sql += f" WHERE {where}"

        if query.orders:
            orders = ", ".join(
                f"{self.quote_column(column, owner)} {direction}"
                for column, direction in query.orders
            )
            sql += f" ORDER BY {orders}"

        if query.limit_value is not None:
            sql += f" LIMIT {int(query.limit_value)}"
            if query.offset_value is not None:
                sql += f" OFFSET {int(query.offset_value)}"
        elif query.offset_value is not None:
            raise IncorrectQueryError("An offset can only be used together with a limit")

        return sql

    def _table(self, query: Query) -> str:
        table = self.quote_identifier(query.table_name)  # type: ignore[arg-type]
        if query.table_alias:
            table += f" AS {self.quote_identifier(query.table_alias)}"
        return table

    def _criteria(
        self, criteria: tuple[Criterion, ...] | list[Criterion], bag: ParamBag, owner: str
    ) -> str:
        sql = ""
        for index, criterion in enumerate(criteria):
            part = self._criterion(criterion, bag, owner)
            if index == 0:
                sql = part
            else:
                sql += f" {criterion.append_rule.value} {part}"
        return sql

    def _criterion(self, criterion: Criterion, bag: ParamBag, owner: str) -> str:
        if isinstance(criterion, ValueCriterion):
            column = self.quote_column(criterion.column, owner)
            return f"{column} {criterion.operator} {bag.bind(criterion.value)}"

        if isinstance(criterion, InCriterion):
            if not criterion.values:
                # IN () matches nothing, NOT IN () matches everything
                return "1 = 1" if criterion.negate else "1 = 0"
            placeholders = ", ".join(bag.bind(value) for value in criterion.values)
            keyword = "NOT IN" if criterion.negate else "IN"
            return f"{self.quote_column(criterion.column, owner)} {keyword} ({placeholders})"

        if isinstance(criterion, NullCriterion):
            keyword = "IS NOT NULL" if criterion.negate else "IS NULL"
            return f"{self.quote_column(criterion.column, owner)} {keyword}"

        if isinstance(criterion, ColumnsCriterion):
            left = self.quote_column(criterion.left, owner)
            right = self.quote_column(criterion.right, owner)
            return f"{left} {criterion.operator} {right}"

        if isinstance(criterion, GroupCriterion):
            inner = self._criteria(criterion.criteria, bag, owner) or "1 = 1"
            return f"NOT ({inner})" if criterion.negate else f"({inner})"

        if isinstance(criterion, ExistsCriterion):
            keyword = "NOT EXISTS" if criterion.negate else "EXISTS"
            return f"{keyword} ({self._select(criterion.subquery, bag)})"

        raise IncorrectQueryError(f"Unknown criterion type: {type(criterion).__name__}")
