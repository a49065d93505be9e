"""Model layer - model base class, registry and relations."""

from __future__ import annotations

from model_query.models.model import Model, ModelDescriptor
from model_query.models.registry import ModelRegistry, default_registry
from model_query.models.relations import BelongsTo, EqualFields, HasMany, Relation

__all__ = [
    "Model",
    "ModelDescriptor",
    "ModelRegistry",
    "default_registry",
    "Relation",
    "EqualFields",
    "BelongsTo",
    "HasMany",
]
