"""Custom exception hierarchy for hdb-helper.

All exceptions that cross layer boundaries must inherit from
:class:`HdbHelperError`.  Raw third-party exceptions (httpx, json,
subprocess, OS errors) must NEVER propagate beyond the infrastructure
layer — they are caught and re-raised as a typed subclass defined here.

Hierarchy
---------
HdbHelperError
├── ParseError
├── ConfigCorruptError
├── EnvironmentNotFoundError
├── InstanceNotFoundError
├── NoEnvironmentsConfiguredError
├── ValidationError
├── NotInitializedError
├── UserCancelledError
├── ApiError
│   ├── ApiConnectionError
│   └── ApiOperationError
├── CommandFailedError
├── ExecutableNotFoundError
└── MissingDependencyError
"""

from __future__ import annotations


class HdbHelperError(Exception):
    """Base exception for all hdb-helper errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Persisted configuration ----------------------------------------------

class ParseError(HdbHelperError):
    """Raised when the legacy credential file is absent or unreadable."""


class ConfigCorruptError(HdbHelperError):
    """Raised when the selection document cannot be parsed."""


class NotInitializedError(HdbHelperError):
    """Raised when the project directory has no configuration files."""


# --- Lookups ---------------------------------------------------------------

class EnvironmentNotFoundError(HdbHelperError):
    """Raised when a named environment is not in the selection document."""

    def __init__(self, name: str, *, hint: str | None = None) -> None:
        super().__init__(f'Environment "{name}" not found.', hint=hint)
        self.name: str = name


class InstanceNotFoundError(HdbHelperError):
    """Raised when an instance URL is not part of the chosen environment."""

    def __init__(
        self,
        instance_url: str,
        environment_name: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f'Instance "{instance_url}" not found in environment '
            f'"{environment_name}".',
            hint=hint,
        )
        self.instance_url: str = instance_url
        self.environment_name: str = environment_name


class NoEnvironmentsConfiguredError(HdbHelperError):
    """Raised when resolution needs an environment but none exist."""


# --- Operator input --------------------------------------------------------

class ValidationError(HdbHelperError):
    """Raised for a malformed environment name, instance URL, or parameter."""


class UserCancelledError(HdbHelperError):
    """Raised when the operator declines or aborts a prompt.

    Not a failure: the CLI boundary maps it to a distinct exit status.
    """


# --- API -------------------------------------------------------------------

class ApiError(HdbHelperError):
    """Base class for failures talking to the operations API."""


class ApiConnectionError(ApiError):
    """Raised when the instance cannot be reached."""


class ApiOperationError(ApiError):
    """Raised when the instance answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int = status_code


# --- Local executable ------------------------------------------------------

class CommandFailedError(HdbHelperError):
    """Raised when the wrapped executable exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int = returncode


class ExecutableNotFoundError(HdbHelperError):
    """Raised when the ``harperdb`` executable cannot be located."""


# --- Environment / tooling -------------------------------------------------

class MissingDependencyError(HdbHelperError):
    """Raised when an optional UI dependency is not installed."""
