"""Row-to-model mapper.

Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from model_query.exceptions import ColumnMismatchError

T = TypeVar("T")


class ModelMapper(Generic[T]):
    """Builds instances of a target class from row dicts.

    Detection order:
    1. Pydantic BaseModel -> model_validate(row)
    2. dataclass -> target_class(**row), columns without a field are dropped
       unless strict
    3. Plain class -> target_class(**row)

    Args:
        target_class: The class to construct from row data.
        aliases: Optional column-name to field-name mapping.
        strict: Pass every column to dataclasses, failing on unknown ones.
    """

    def __init__(
        self,
        target_class: type[T],
        aliases: dict[str, str] | None = None,
        strict: bool = False,
    ) -> None:
        self._target_class = target_class
        self._aliases = aliases
        self._is_pydantic = issubclass(target_class, BaseModel)
        self._fields: frozenset[str] | None = None
        if dataclasses.is_dataclass(target_class) and not strict:
            self._fields = frozenset(
                field.name for field in dataclasses.fields(target_class) if field.init
            )

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def _prepare(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._aliases:
            row = {self._aliases.get(key, key): value for key, value in row.items()}
        if self._fields is not None:
            row = {key: value for key, value in row.items() if key in self._fields}
        return row

    def map_one(self, row: dict[str, Any]) -> T:
        """Map a single row to a target_class instance."""
        row = self._prepare(row)

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(row)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                missing = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
                raise ColumnMismatchError(self._target_class.__name__, missing) from e

        try:
            return self._target_class(**row)
        except TypeError as e:
            raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e
