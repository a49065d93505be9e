"""Model query exception hierarchy.

Errors raised by the query layer underneath a ModelQuery are translated
into these through EXCEPTION_TRANSLATIONS. The translated error keeps the
original message and exposes the original exception as ``original`` and
as ``__cause__``.
"""

from __future__ import annotations

from model_query.core import exceptions as query_errors


class ModelQueryError(Exception):
    """Base exception for all model query errors."""

    def __init__(self, message: str = "", original: BaseException | None = None) -> None:
        self.original = original
        super().__init__(message)


class InvalidArgumentError(ModelQueryError):
    """Raised when an operation receives an unusable argument."""


class IncorrectQueryError(ModelQueryError):
    """Raised when the query cannot do what is asked in its current state."""


class NotAModelQueryError(IncorrectQueryError):
    """Raised when a model-aware operation runs on a query with no model bound."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"This query is not a model query, `{operation}` needs a model")


class DatabaseError(ModelQueryError):
    """Raised when the database fails to run a statement."""


# --- Relations ---


class RelationError(ModelQueryError):
    """Base for relation errors."""


class UndefinedRelationError(RelationError):
    """Raised when a model does not define the requested relation."""

    def __init__(self, model_name: str, relation_name: str) -> None:
        self.model_name = model_name
        self.relation_name = relation_name
        super().__init__(f"The relation `{relation_name}` is not defined in the {model_name} model")


# --- Mapping ---


class ColumnMismatchError(ModelQueryError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


# Checked in order; the first matching source kind wins.
EXCEPTION_TRANSLATIONS: tuple[tuple[type[Exception], type[ModelQueryError]], ...] = (
    (query_errors.InvalidArgumentError, InvalidArgumentError),
    (query_errors.IncorrectQueryError, IncorrectQueryError),
    (query_errors.DatabaseError, DatabaseError),
)


def translate_exception(exception: BaseException) -> ModelQueryError | None:
    """Build the model query error for a query layer error.

    Returns:
        The translated error, or None when the exception kind has no
        translation and must propagate unchanged.
    """
    for source, target in EXCEPTION_TRANSLATIONS:
        if isinstance(exception, source):
            return target(str(exception), exception)
    return None
