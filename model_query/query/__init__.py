"""Query layer - criteria, compiler, builder and decorators."""

from __future__ import annotations

from model_query.query.builder import Query
from model_query.query.compiler import Compiler
from model_query.query.model_query import ModelQuery
from model_query.query.proxy import QueryProxy

__all__ = [
    "Query",
    "Compiler",
    "QueryProxy",
    "ModelQuery",
]
