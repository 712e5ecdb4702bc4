"""Pure text handling for the legacy ``KEY="value"`` credential file.

Parsing is delegated to python-dotenv.  Updates are a line-level patch so
comments, blank lines and key order survive a rewrite; file I/O stays in
:mod:`hdb_helper.infra.credential_store`.
"""

from __future__ import annotations

import io
import re
from collections.abc import Mapping, Sequence

from dotenv import dotenv_values

_KEY_RE = re.compile(r"^\s*(?:export\s+)?([^=#\s][^=]*?)\s*=")


def parse_env_text(text: str) -> dict[str, str]:
    """Parse dotenv-formatted *text* into a plain mapping.

    Blank lines and ``#`` comments are ignored.  Keys declared without a
    value (``KEY`` alone on a line) are dropped.
    """
    values = dotenv_values(stream=io.StringIO(text))
    return {key: value for key, value in values.items() if value is not None}


def line_key(line: str) -> str | None:
    """Return the key assigned on *line*, or ``None`` for comments/blanks."""
    if not line.strip() or line.lstrip().startswith("#"):
        return None
    match = _KEY_RE.match(line)
    return match.group(1) if match else None


def update_env_lines(
    lines: Sequence[str],
    updates: Mapping[str, str],
) -> list[str]:
    """Apply *updates* to *lines* and return the patched copy.

    Every assignment whose key is in *updates* is rewritten in place as
    ``key="value"``; keys not found anywhere are appended in the order
    given.  Applying the same updates twice yields the same lines.
    """
    pending = dict(updates)
    result: list[str] = []
    for line in lines:
        key = line_key(line)
        if key is not None and key in updates:
            result.append(_format_line(key, updates[key]))
            pending.pop(key, None)
        else:
            result.append(line)

    result.extend(_format_line(key, value) for key, value in pending.items())
    return result


def update_env_text(text: str, updates: Mapping[str, str]) -> str:
    """Line-preserving patch of a whole file body.

    The result always ends with exactly one newline.
    """
    lines = text.split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(update_env_lines(lines, updates)) + "\n"


def _format_line(key: str, value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{key}="{escaped}"'
