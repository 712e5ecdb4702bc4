"""Tests for the structural deep merge (core/merge.py)."""

from __future__ import annotations

from typing import Any

from hdb_helper.core.merge import deep_merge


class TestDeepMerge:
    def test_nested_objects_merge(self) -> None:
        base = {"environments": {"DEV": {"username": "a", "password": "b"}}}
        updates = {"environments": {"DEV": {"password": "c"}, "QA": {"username": "q"}}}
        assert deep_merge(base, updates) == {
            "environments": {
                "DEV": {"username": "a", "password": "c"},
                "QA": {"username": "q"},
            },
        }

    def test_arrays_are_replaced_not_concatenated(self) -> None:
        base = {"instances": ["https://a:9925", "https://b:9925"]}
        assert deep_merge(base, {"instances": ["https://c:9925"]}) == {
            "instances": ["https://c:9925"],
        }

    def test_scalar_replaces_object(self) -> None:
        assert deep_merge({"defaultEnv": {"x": 1}}, {"defaultEnv": "DEV"}) == {"defaultEnv": "DEV"}

    def test_none_overwrites(self) -> None:
        assert deep_merge({"defaultEnv": "DEV"}, {"defaultEnv": None}) == {"defaultEnv": None}

    def test_inputs_not_mutated(self) -> None:
        base: dict[str, Any] = {"a": {"b": [1]}}
        updates: dict[str, Any] = {"a": {"c": 2}}
        result = deep_merge(base, updates)
        result["a"]["b"].append(99)
        assert base == {"a": {"b": [1]}}
        assert updates == {"a": {"c": 2}}

    def test_empty_updates_copy(self) -> None:
        base = {"a": 1}
        result = deep_merge(base, {})
        assert result == base
        assert result is not base
