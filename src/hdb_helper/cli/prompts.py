"""Interactive prompts backed by questionary, plus the timed auto-confirm.

:class:`QuestionaryPrompter` satisfies
:class:`~hdb_helper.core.protocols.Prompter`.  Every questionary prompt
returns ``None`` when the operator presses Ctrl+C or Esc; that ``None`` is
passed through so callers can treat it as a cancellation.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any

from hdb_helper.cli.console import console, get_rich_console
from hdb_helper.cli.keypress import KeyReader, TerminalKeyReader, run_countdown
from hdb_helper.exceptions import MissingDependencyError

logger = logging.getLogger(__name__)


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _import_rich_live() -> type[Any]:
    """Import rich Live lazily for the countdown display."""
    try:
        from rich.live import Live
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Live


def _countdown_text(message: str, hint: str, seconds: int) -> str:
    suffix = f"  [dim]{hint}[/dim]" if hint else ""
    return f"[bold cyan]?[/bold cyan] {message} [dim]({seconds}s)[/dim]{suffix}"


class QuestionaryPrompter:
    """Terminal prompter used by the real CLI.

    Parameters
    ----------
    reader_factory:
        Builds the key reader for :meth:`auto_confirm`.
    stdin:
        Stream checked for interactivity before counting down.
    """

    def __init__(
        self,
        *,
        reader_factory: Callable[[], KeyReader] = TerminalKeyReader,
        stdin: Any = None,
    ) -> None:
        self._reader_factory = reader_factory
        self._stdin = sys.stdin if stdin is None else stdin

    def confirm(self, message: str, *, default: bool = True) -> bool | None:
        questionary = _import_questionary()
        return questionary.confirm(message, default=default).ask()

    def select(self, message: str, choices: Sequence[str]) -> str | None:
        questionary = _import_questionary()
        return questionary.select(
            message,
            choices=list(choices),
            use_arrow_keys=True,
        ).ask()

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str] | None:
        questionary = _import_questionary()
        return questionary.checkbox(message, choices=list(choices)).ask()

    def text(
        self,
        message: str,
        *,
        default: str = "",
        validate: Callable[[str], bool | str] | None = None,
    ) -> str | None:
        questionary = _import_questionary()
        kwargs: dict[str, Any] = {"default": default}
        if validate is not None:
            kwargs["validate"] = validate
        return questionary.text(message, **kwargs).ask()

    def password(self, message: str) -> str | None:
        questionary = _import_questionary()
        return questionary.password(message).ask()

    def auto_confirm(self, message: str, timeout: float, *, hint: str = "") -> bool:
        """Show a countdown; proceed on timeout or Enter, back out on Esc."""
        if timeout <= 0:
            return True
        if not self._stdin.isatty():
            logger.debug("stdin is not a terminal; auto-confirming %r", message)
            return True

        live_class = _import_rich_live()
        with live_class(
            _countdown_text(message, hint, int(timeout)),
            console=get_rich_console(),
            transient=True,
            auto_refresh=False,
        ) as live:
            accepted = run_countdown(
                self._reader_factory(),
                timeout,
                on_tick=lambda seconds: live.update(
                    _countdown_text(message, hint, seconds), refresh=True,
                ),
            )

        mark = "[green]✓[/green]" if accepted else "[yellow]✗[/yellow]"
        console.print(f"{mark} [dim]{message}[/dim]")
        return accepted
