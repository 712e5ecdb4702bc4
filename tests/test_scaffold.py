"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import sys

import pytest

from hdb_helper import __version__
from hdb_helper.cli import exit_codes
from hdb_helper.cli.app import main
from hdb_helper.exceptions import (
    ApiConnectionError,
    ApiError,
    ApiOperationError,
    CommandFailedError,
    ConfigCorruptError,
    EnvironmentNotFoundError,
    ExecutableNotFoundError,
    HdbHelperError,
    InstanceNotFoundError,
    MissingDependencyError,
    NoEnvironmentsConfiguredError,
    NotInitializedError,
    ParseError,
    UserCancelledError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ParseError,
            ConfigCorruptError,
            NoEnvironmentsConfiguredError,
            ValidationError,
            NotInitializedError,
            UserCancelledError,
            ApiError,
            ExecutableNotFoundError,
            MissingDependencyError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[HdbHelperError]
    ) -> None:
        assert issubclass(exc_class, HdbHelperError)

    def test_api_errors_share_base(self) -> None:
        assert issubclass(ApiConnectionError, ApiError)
        assert issubclass(ApiOperationError, ApiError)

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(HdbHelperError, Exception)

    def test_hint_is_stored(self) -> None:
        err = HdbHelperError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = HdbHelperError("boom")
        assert err.hint is None

    def test_environment_not_found_names_environment(self) -> None:
        err = EnvironmentNotFoundError("GHOST")
        assert "GHOST" in str(err)
        assert err.name == "GHOST"

    def test_instance_not_found_fields(self) -> None:
        err = InstanceNotFoundError("https://x:9925", "DEV")
        assert err.instance_url == "https://x:9925"
        assert err.environment_name == "DEV"

    def test_status_and_returncode(self) -> None:
        assert ApiOperationError("x", status_code=404).status_code == 404
        assert CommandFailedError("x", returncode=2).returncode == 2


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2

    def test_user_cancelled_is_distinct(self) -> None:
        assert exit_codes.USER_CANCELLED not in (
            exit_codes.SUCCESS,
            exit_codes.GENERAL_ERROR,
            exit_codes.UNEXPECTED_ERROR,
        )

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# Bootstrap without optional UI packages
# ---------------------------------------------------------------------------

class TestBootstrap:
    def test_no_args_returns_success(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_help_works_without_rich_or_questionary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("rich", "rich.console", "rich.logging", "rich.table", "questionary"):
            monkeypatch.setitem(sys.modules, name, None)

        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
