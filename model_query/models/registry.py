"""Model registry for resolving models by name.

Relations may name their related model as a string so that models can
refer to each other regardless of definition order.
"""

from __future__ import annotations


class ModelRegistry:
    """Registered model classes, keyed by class name and by table name."""

    def __init__(self) -> None:
        self._models: dict[str, type] = {}
        self._models_by_table: dict[str, type] = {}

    def register(self, model_cls: type) -> None:
        """Register a model class.

        A class registered under an existing name replaces the earlier one,
        which keeps redefinitions (tests, reloads) working.
        """
        self._models[model_cls.__name__] = model_cls
        table = getattr(model_cls, "get_table", None)
        if table is not None:
            self._models_by_table[table()] = model_cls

    def get_model(self, name: str) -> type | None:
        return self._models.get(name)

    def get_model_by_table(self, table_name: str) -> type | None:
        return self._models_by_table.get(table_name)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


# Registry every Model subclass is added to
default_registry = ModelRegistry()
