"""Shared pytest fixtures and configuration for the hdb-helper test suite.

Guidelines
----------
* No network access in any test — httpx goes through ``MockTransport``.
* No real terminal — prompts are answered by :class:`FakePrompter`.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state (each gets its own project directory).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from hdb_helper.infra.project import Project
from hdb_helper.utils.settings import Settings


class FakePrompter:
    """Scripted :class:`~hdb_helper.core.protocols.Prompter`.

    Each method pops the next answer from its own queue.  Every question
    asked is recorded in :attr:`asked` as ``(method, message)``.
    """

    def __init__(
        self,
        *,
        confirms: Sequence[bool | None] = (),
        selects: Sequence[str | None] = (),
        checkboxes: Sequence[list[str] | None] = (),
        texts: Sequence[str | None] = (),
        passwords: Sequence[str | None] = (),
        auto_confirms: Sequence[bool] = (),
    ) -> None:
        self.confirms = list(confirms)
        self.selects = list(selects)
        self.checkboxes = list(checkboxes)
        self.texts = list(texts)
        self.passwords = list(passwords)
        self.auto_confirms = list(auto_confirms)
        self.asked: list[tuple[str, str]] = []

    def _next(self, queue: list[Any], method: str, message: str) -> Any:
        self.asked.append((method, message))
        if not queue:
            raise AssertionError(f"Unexpected {method} prompt: {message!r}")
        return queue.pop(0)

    def confirm(self, message: str, *, default: bool = True) -> bool | None:
        return self._next(self.confirms, "confirm", message)

    def select(self, message: str, choices: Sequence[str]) -> str | None:
        return self._next(self.selects, "select", message)

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str] | None:
        return self._next(self.checkboxes, "checkbox", message)

    def text(
        self,
        message: str,
        *,
        default: str = "",
        validate: Callable[[str], bool | str] | None = None,
    ) -> str | None:
        return self._next(self.texts, "text", message)

    def password(self, message: str) -> str | None:
        return self._next(self.passwords, "password", message)

    def auto_confirm(self, message: str, timeout: float, *, hint: str = "") -> bool:
        return self._next(self.auto_confirms, "auto_confirm", message)

    def methods_asked(self) -> list[str]:
        return [method for method, _ in self.asked]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop runtime overrides from the host and restore logger propagation."""
    for name in (
        "HDB_ENV",
        "HDB_INSTANCE",
        "HDB_PROJECT_DIR",
        "HDB_EXEC",
        "HDB_CONFIRM_TIMEOUT",
        "HDB_API_TIMEOUT",
        "CLI_TARGET_USERNAME",
        "CLI_TARGET_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    package_logger = logging.getLogger("hdb_helper")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(project_dir=tmp_path, confirm_timeout=0.0)


@pytest.fixture
def project(settings: Settings) -> Project:
    return Project(settings)


@pytest.fixture
def initialized_project(project: Project) -> Project:
    project.initialize()
    return project


def write_document(project: Project, data: dict[str, Any]) -> None:
    """Write a raw selection document for *project*."""
    project.settings.config_file.write_text(json.dumps(data), encoding="utf-8")


def read_document(project: Project) -> dict[str, Any]:
    return json.loads(project.settings.config_file.read_text(encoding="utf-8"))


def sample_document() -> dict[str, Any]:
    """Two environments; DEV has two instances and is the default."""
    return {
        "environments": {
            "DEV": {
                "username": "dev_user",
                "password": "dev_pass",
                "instances": ["https://dev-a:9925", "https://dev-b:9925"],
            },
            "PROD": {
                "username": "prod_user",
                "password": "prod_pass",
                "instances": ["https://prod:9925"],
            },
        },
        "defaultEnv": "DEV",
        "defaultInstance": "https://dev-a:9925",
    }
