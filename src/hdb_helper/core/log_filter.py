"""Filtering and de-duplication of ``read_log`` entries.

Tail mode polls the same lookback window repeatedly, so entries are keyed
by a SHA-256 of timestamp + message and each one is reported only once.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from hdb_helper.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class LogLine:
    """One entry to display, with the spans of *message* that matched."""

    entry: dict[str, Any]
    matches: tuple[tuple[int, int], ...] = ()

    @property
    def message(self) -> str:
        return str(self.entry.get("message", ""))


def compile_filter(pattern: str | None) -> re.Pattern[str] | None:
    """Compile ``/regex/`` or plain text into a case-insensitive pattern.

    Plain text is still treated as a regular expression, matching the
    behaviour operators already rely on.
    """
    if not pattern:
        return None
    source = pattern[1:-1] if len(pattern) > 1 and pattern.startswith("/") and pattern.endswith("/") else pattern
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise ValidationError(f"Invalid log filter {pattern!r}: {exc}") from exc


def entry_key(entry: Mapping[str, Any]) -> str:
    digest = hashlib.sha256()
    digest.update(f"{entry.get('timestamp', '')}{entry.get('message', '')}".encode())
    return digest.hexdigest()


def lookback_window(minutes: int, *, now: datetime | None = None) -> tuple[str, str]:
    """Return ISO-8601 ``(from, until)`` strings covering the last *minutes*."""
    if minutes < 0:
        raise ValidationError("Lookback must be zero or more minutes.")
    until = now or datetime.now(timezone.utc)
    start = until - timedelta(minutes=minutes)
    return _iso(start), _iso(until)


class LogFilter:
    """Stateful filter: drops entries already seen, keeps matches only."""

    def __init__(self, pattern: str | None = None) -> None:
        self._regex = compile_filter(pattern)
        self._seen: set[str] = set()

    @property
    def pattern(self) -> re.Pattern[str] | None:
        return self._regex

    def apply(self, entries: Iterable[Mapping[str, Any]]) -> list[LogLine]:
        lines: list[LogLine] = []
        for entry in entries:
            key = entry_key(entry)
            if key in self._seen:
                continue
            self._seen.add(key)

            if self._regex is None:
                lines.append(LogLine(entry=dict(entry)))
                continue
            message = str(entry.get("message", ""))
            spans = tuple(m.span() for m in self._regex.finditer(message) if m.end() > m.start())
            if spans:
                lines.append(LogLine(entry=dict(entry), matches=spans))
        return lines


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
