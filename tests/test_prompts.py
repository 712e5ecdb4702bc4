"""Tests for the questionary-backed prompter (cli/prompts.py)."""

from __future__ import annotations

import io
from types import TracebackType
from unittest.mock import MagicMock, patch

import pytest

from hdb_helper.cli.keypress import ESC
from hdb_helper.cli.prompts import QuestionaryPrompter
from hdb_helper.exceptions import MissingDependencyError


class _TtyStream(io.StringIO):
    def isatty(self) -> bool:
        return True


class _OneKeyReader:
    def __init__(self, key: str) -> None:
        self.key = key
        self.exited = False

    def __enter__(self) -> _OneKeyReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.exited = True

    def read_key(self, timeout: float) -> str | None:
        return self.key


# ---------------------------------------------------------------------------
# auto_confirm
# ---------------------------------------------------------------------------

class TestAutoConfirm:
    def test_non_tty_proceeds_without_reading_keys(self) -> None:
        factory = MagicMock()
        prompter = QuestionaryPrompter(reader_factory=factory, stdin=io.StringIO())
        assert prompter.auto_confirm("Go?", 3.0) is True
        factory.assert_not_called()

    def test_zero_timeout_proceeds(self) -> None:
        factory = MagicMock()
        prompter = QuestionaryPrompter(reader_factory=factory, stdin=_TtyStream())
        assert prompter.auto_confirm("Go?", 0) is True
        factory.assert_not_called()

    def test_enter_accepts(self) -> None:
        reader = _OneKeyReader("\r")
        prompter = QuestionaryPrompter(reader_factory=lambda: reader, stdin=_TtyStream())
        assert prompter.auto_confirm("Go?", 3.0, hint="Press ESC to change") is True
        assert reader.exited

    def test_escape_declines(self) -> None:
        reader = _OneKeyReader(ESC)
        prompter = QuestionaryPrompter(reader_factory=lambda: reader, stdin=_TtyStream())
        assert prompter.auto_confirm("Go?", 3.0) is False
        assert reader.exited


# ---------------------------------------------------------------------------
# questionary delegation
# ---------------------------------------------------------------------------

class TestQuestionaryDelegation:
    @patch("hdb_helper.cli.prompts._import_questionary")
    def test_select_passes_choices(self, mock_import: MagicMock) -> None:
        questionary = MagicMock()
        questionary.select.return_value.ask.return_value = "DEV"
        mock_import.return_value = questionary

        assert QuestionaryPrompter().select("Pick", ("DEV", "PROD")) == "DEV"
        questionary.select.assert_called_once_with(
            "Pick",
            choices=["DEV", "PROD"],
            use_arrow_keys=True,
        )

    @patch("hdb_helper.cli.prompts._import_questionary")
    def test_cancelled_prompt_returns_none(self, mock_import: MagicMock) -> None:
        questionary = MagicMock()
        questionary.confirm.return_value.ask.return_value = None
        mock_import.return_value = questionary

        assert QuestionaryPrompter().confirm("Sure?") is None

    @patch("hdb_helper.cli.prompts._import_questionary")
    def test_text_forwards_validator(self, mock_import: MagicMock) -> None:
        questionary = MagicMock()
        questionary.text.return_value.ask.return_value = "x"
        mock_import.return_value = questionary

        def validate(value: str) -> bool:
            return True

        QuestionaryPrompter().text("Name:", default="d", validate=validate)
        questionary.text.assert_called_once_with("Name:", default="d", validate=validate)

    @patch.dict("sys.modules", {"questionary": None})
    def test_missing_questionary(self) -> None:
        with pytest.raises(MissingDependencyError, match="questionary"):
            QuestionaryPrompter().password("Password:")
