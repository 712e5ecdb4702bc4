"""Turn command-line tokens into an operations-API request payload.

Accepted forms::

    --key=value   key=value   --key value   --flag
    --json='{"nested": {"key": "value"}}'

Values that look like booleans or numbers are coerced the way the HarperDB
API expects them; everything else stays a string.  Keys from ``--json``
win over simple parameters.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any

from hdb_helper.exceptions import ValidationError

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$")


def coerce_value(raw: str) -> Any:
    """Convert ``"true"``/``"false"``/numeric strings; leave the rest alone."""
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    digits = raw.lstrip("-")
    # Leading zeros mark identifiers such as zip codes, not numbers.
    if _INT_RE.match(raw) and (digits == "0" or not digits.startswith("0")):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    return raw


def parse_params(tokens: Sequence[str]) -> dict[str, Any]:
    """Parse ``key=value`` style *tokens* into a payload dict.

    Raises
    ------
    ValidationError
        On a bare token that is not a ``key=value`` pair.
    """
    params: dict[str, Any] = {}
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        dashed = token.startswith("-")
        body = token.lstrip("-")
        if "=" in body:
            key, _, value = body.partition("=")
            params[_check_key(key, token)] = coerce_value(value)
        elif dashed and body:
            if index < len(tokens) and not tokens[index].startswith("-"):
                params[_check_key(body, token)] = coerce_value(tokens[index])
                index += 1
            else:
                params[_check_key(body, token)] = True
        else:
            raise ValidationError(
                f"Unexpected argument {token!r}.",
                hint="Pass parameters as --key=value or key=value.",
            )
    return params


def parse_json_param(raw: str | None) -> dict[str, Any]:
    """Parse the ``--json`` argument, which must be a JSON object."""
    if raw is None:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Failed to parse JSON parameter: {exc}") from exc
    if not isinstance(value, dict):
        raise ValidationError("The --json parameter must be a JSON object.")
    return value


def build_payload(tokens: Sequence[str], json_arg: str | None = None) -> dict[str, Any]:
    """Combine simple parameters with the ``--json`` object."""
    payload = parse_params(tokens)
    payload.update(parse_json_param(json_arg))
    return payload


def _check_key(key: str, token: str) -> str:
    key = key.strip()
    if not key:
        raise ValidationError(f"Missing parameter name in {token!r}.")
    return key
