"""Repository layer - DDD repository pattern."""

from __future__ import annotations

from model_query.repository.base import Repository

__all__ = [
    "Repository",
]
