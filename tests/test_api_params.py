"""Tests for command-line parameter parsing (core/api_params.py)."""

from __future__ import annotations

import pytest

from hdb_helper.core.api_params import (
    build_payload,
    coerce_value,
    parse_json_param,
    parse_params,
)
from hdb_helper.exceptions import ValidationError


class TestCoerceValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("-7", -7),
            ("0", 0),
            ("3.5", 3.5),
            ("007", "007"),
            ("dev", "dev"),
            ("1e5", "1e5"),
        ],
    )
    def test_values(self, raw: str, expected: object) -> None:
        assert coerce_value(raw) == expected
        assert type(coerce_value(raw)) is type(expected)


class TestParseParams:
    def test_all_forms(self) -> None:
        tokens = ["--schema=dev", "table=dog", "--limit", "10", "--verbose"]
        assert parse_params(tokens) == {
            "schema": "dev",
            "table": "dog",
            "limit": 10,
            "verbose": True,
        }

    def test_flag_followed_by_option(self) -> None:
        assert parse_params(["--a", "--b=1"]) == {"a": True, "b": 1}

    def test_value_may_contain_equals(self) -> None:
        assert parse_params(["sql=SELECT * FROM t WHERE a=1"]) == {
            "sql": "SELECT * FROM t WHERE a=1",
        }

    def test_bare_token_rejected(self) -> None:
        with pytest.raises(ValidationError, match="stray"):
            parse_params(["stray"])

    def test_missing_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_params(["=value"])


class TestJsonParam:
    def test_none_is_empty(self) -> None:
        assert parse_json_param(None) == {}

    def test_malformed(self) -> None:
        with pytest.raises(ValidationError, match="Failed to parse JSON"):
            parse_json_param("{nope")

    def test_must_be_object(self) -> None:
        with pytest.raises(ValidationError):
            parse_json_param("[1, 2]")


class TestBuildPayload:
    def test_json_wins(self) -> None:
        payload = build_payload(["--limit=5", "table=dog"], '{"limit": 1, "records": [{"id": 1}]}')
        assert payload == {"limit": 1, "table": "dog", "records": [{"id": 1}]}
