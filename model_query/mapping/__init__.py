"""Mapping layer - transform row dicts into typed objects."""

from __future__ import annotations

from model_query.mapping.model import ModelMapper

__all__ = ["ModelMapper"]
