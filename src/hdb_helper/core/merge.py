"""Structural deep merge for JSON documents.

Values are treated as a tagged union: ``dict`` is a JSON object and is
merged key by key; everything else — arrays, scalars, ``None`` — is a leaf
and is replaced wholesale.  Callers that want a union of two arrays must
build it before merging.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new object with *updates* merged over *base*.

    Neither input is mutated.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": [1, 2]}}, {"b": {"c": [3], "d": 4}})
        {'a': 1, 'b': {'c': [3], 'd': 4}}
    """
    result: dict[str, Any] = {key: _copy(value) for key, value in base.items()}
    for key, value in updates.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = _copy(value)
    return result


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy(item) for item in value]
    return value
