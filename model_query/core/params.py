"""SQL parameter collection and normalization.

The compiler emits `:name` placeholders and collects the bound values in a
ParamBag. Before execution the placeholders are converted to the adapter's
driver-specific format, leaving string literals and PostgreSQL
`::typecast` syntax alone.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


class ParamBag:
    """Collects bound values and hands out unique `:name` placeholders."""

    def __init__(self, prefix: str = "p") -> None:
        self._prefix = prefix
        self._values: dict[str, Any] = {}

    def bind(self, value: Any) -> str:
        """Store *value* and return the placeholder that refers to it."""
        name = f"{self._prefix}{len(self._values) + 1}"
        self._values[name] = value
        return f":{name}"

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def __len__(self) -> int:
        return len(self._values)


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:]))

    return "".join(parts)
