"""Criterion value objects.

A query keeps its WHERE clause as a flat list of criteria; nested groups
and EXISTS sub-queries hold their own criteria. Criteria are immutable, so
copying the list is enough to branch a query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from model_query.core.enums import AppendRule

if TYPE_CHECKING:
    from model_query.query.builder import Query

OPERATORS = frozenset({"=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE"})


@dataclass(frozen=True)
class ValueCriterion:
    """`column <operator> value`"""

    column: str
    operator: str
    value: Any
    append_rule: AppendRule = AppendRule.AND


@dataclass(frozen=True)
class InCriterion:
    """`column [NOT] IN (values...)`"""

    column: str
    values: tuple[Any, ...]
    negate: bool = False
    append_rule: AppendRule = AppendRule.AND


@dataclass(frozen=True)
class NullCriterion:
    """`column IS [NOT] NULL`"""

    column: str
    negate: bool = False
    append_rule: AppendRule = AppendRule.AND


@dataclass(frozen=True)
class ColumnsCriterion:
    """`left_column <operator> right_column`"""

    left: str
    operator: str
    right: str
    append_rule: AppendRule = AppendRule.AND


@dataclass(frozen=True)
class GroupCriterion:
    """A parenthesised group of criteria, optionally negated."""

    criteria: tuple[Criterion, ...]
    negate: bool = False
    append_rule: AppendRule = AppendRule.AND


@dataclass(frozen=True)
class ExistsCriterion:
    """`[NOT] EXISTS (sub-query)`"""

    subquery: Query
    negate: bool = False
    append_rule: AppendRule = AppendRule.AND


Criterion = Union[
    ValueCriterion,
    InCriterion,
    NullCriterion,
    ColumnsCriterion,
    GroupCriterion,
    ExistsCriterion,
]
