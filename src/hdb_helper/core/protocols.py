"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and the CLI's
prompt implementation must satisfy.  Core code depends ONLY on these
protocols — never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from hdb_helper.core.models import SelectionDocument


class CredentialSource(Protocol):
    """Contract for the legacy credential file."""

    def exists(self) -> bool:
        ...  # pragma: no cover

    def read(self) -> dict[str, str]:
        """Return all key/value pairs.

        Raises
        ------
        ParseError
            When the file is absent or unreadable.
        """
        ...  # pragma: no cover

    def reset(self) -> None:
        """Rewrite the file to its pristine template."""
        ...  # pragma: no cover


class SelectionRepository(Protocol):
    """Contract for the persisted selection document."""

    def load(self, default: Any = ...) -> SelectionDocument:
        ...  # pragma: no cover

    def load_or_empty(self) -> SelectionDocument:
        """Load the document, treating a missing file as empty."""
        ...  # pragma: no cover

    def merge(self, updates: Mapping[str, Any]) -> dict[str, Any]:
        """Deep-merge *updates* into the document and persist it."""
        ...  # pragma: no cover


class Prompter(Protocol):
    """Interactive questions asked of the operator.

    Every method returns ``None`` when the operator aborts the prompt
    (Ctrl+C or Esc), except :meth:`auto_confirm`, which always yields a
    decision.
    """

    def confirm(self, message: str, *, default: bool = True) -> bool | None:
        ...  # pragma: no cover

    def select(self, message: str, choices: Sequence[str]) -> str | None:
        ...  # pragma: no cover

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str] | None:
        ...  # pragma: no cover

    def text(
        self,
        message: str,
        *,
        default: str = "",
        validate: Callable[[str], bool | str] | None = None,
    ) -> str | None:
        """Ask for free text.

        *validate* returns ``True`` to accept or an error message to show
        while re-prompting.
        """
        ...  # pragma: no cover

    def password(self, message: str) -> str | None:
        ...  # pragma: no cover

    def auto_confirm(self, message: str, timeout: float, *, hint: str = "") -> bool:
        """Count down *timeout* seconds and proceed unless the operator cancels.

        Returns ``True`` on timeout or an accept key, ``False`` on a cancel
        key.
        """
        ...  # pragma: no cover
