"""Single-keypress input for the auto-confirm countdown.

The terminal is switched to cbreak mode (no line buffering, no echo,
signals still delivered) for the duration of a ``with`` block and the
saved attributes are restored exactly once on every exit path.
Windows consoles need no mode switch; keys are polled through
:mod:`msvcrt`.
"""

from __future__ import annotations

import math
import os
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from types import TracebackType
from typing import IO, Any, Protocol

TICK_SECONDS: float = 0.1

ESC: str = "\x1b"
ACCEPT_KEYS: frozenset[str] = frozenset({"\r", "\n", " ", "y", "Y"})
CANCEL_KEYS: frozenset[str] = frozenset({ESC, "n", "N"})


class KeyReader(Protocol):
    """A context manager that yields keypresses while active."""

    def __enter__(self) -> KeyReader:
        ...  # pragma: no cover

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...  # pragma: no cover

    def read_key(self, timeout: float) -> str | None:
        """Return one key, or ``None`` if none arrived within *timeout*."""
        ...  # pragma: no cover


@contextmanager
def raw_input_mode(stream: IO[Any] | None = None) -> Iterator[None]:
    """Put *stream*'s terminal in cbreak mode until the block exits.

    A no-op on Windows and when *stream* is not a TTY.
    """
    stream = sys.stdin if stream is None else stream
    if os.name == "nt" or not stream.isatty():
        yield
        return

    import termios
    import tty

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class TerminalKeyReader:
    """Reads keys from the controlling terminal."""

    def __init__(self, stream: IO[Any] | None = None) -> None:
        self._stream = sys.stdin if stream is None else stream
        self._mode: Any = None

    def __enter__(self) -> TerminalKeyReader:
        self._mode = raw_input_mode(self._stream)
        self._mode.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        mode, self._mode = self._mode, None
        if mode is not None:
            mode.__exit__(exc_type, exc, tb)

    def read_key(self, timeout: float) -> str | None:
        if os.name == "nt":
            return self._read_key_windows(timeout)
        return self._read_key_posix(timeout)

    def _read_key_posix(self, timeout: float) -> str | None:
        import select

        fd = self._stream.fileno()
        ready, _, _ = select.select([fd], [], [], max(timeout, 0))
        if not ready:
            return None
        key = os.read(fd, 1).decode(errors="ignore")
        if key == ESC:
            # Arrow and function keys arrive as ESC-prefixed sequences;
            # only a lone ESC counts as a keypress.
            pending, _, _ = select.select([fd], [], [], 0.01)
            if pending:
                os.read(fd, 8)
                return None
        return key

    def _read_key_windows(self, timeout: float) -> str | None:
        import msvcrt

        deadline = time.monotonic() + max(timeout, 0)
        while True:
            if msvcrt.kbhit():  # type: ignore[attr-defined]
                key = msvcrt.getwch()  # type: ignore[attr-defined]
                if key in ("\x00", "\xe0"):
                    msvcrt.getwch()  # type: ignore[attr-defined]
                    return None
                return key
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.02)


def run_countdown(
    reader: KeyReader,
    timeout: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    on_tick: Callable[[int], None] | None = None,
) -> bool:
    """Race a *timeout*-second deadline against operator keypresses.

    Returns ``True`` when the deadline passes or an accept key is pressed,
    ``False`` on a cancel key.  Other keys are ignored.  *on_tick* receives
    the whole seconds remaining before every wait.
    """
    deadline = clock() + timeout
    with reader:
        while True:
            remaining = deadline - clock()
            if remaining <= 0:
                return True
            if on_tick is not None:
                on_tick(math.ceil(remaining))
            key = reader.read_key(min(remaining, TICK_SECONDS))
            if key is None:
                continue
            if key in ACCEPT_KEYS:
                return True
            if key in CANCEL_KEYS:
                return False
