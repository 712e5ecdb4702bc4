"""Project-wide constants: file names, templates, and command tables."""

from __future__ import annotations

ENV_FILE: str = ".env.harperdb"
"""Legacy credential file, kept only as a one-time import source."""

CONFIG_FILE: str = ".hdbconfig.json"
"""Authoritative selection document."""

GITIGNORE_FILE: str = ".gitignore"
GITIGNORE_HEADER: str = "# HarperDB Helper Configuration"

ENV_FILE_TEMPLATE: str = """\
# HarperDB Helper credentials (legacy format).
#
# Environments now live in .hdbconfig.json. Any ENV_<NAME>_USERNAME,
# ENV_<NAME>_PASSWORD and ENV_<NAME>_INSTANCES entries added here are
# imported into .hdbconfig.json on the next command and this file is
# reset afterwards.
"""

DEFAULT_USERNAME: str = "HDB_ADMIN"

INSTANCE_SCHEME: str = "https"
INSTANCE_PORT: int = 9925

LEGACY_ENV_NAME: str = "DEFAULT"
"""Name given to the environment described by the unnamespaced legacy keys."""

LEGACY_TARGET_KEY: str = "HARPERDB_TARGET"
LEGACY_USERNAME_KEY: str = "CLI_TARGET_USERNAME"
LEGACY_PASSWORD_KEY: str = "CLI_TARGET_PASSWORD"

RUNTIME_ENV_VAR: str = "HDB_ENV"
RUNTIME_INSTANCE_VAR: str = "HDB_INSTANCE"

HDB_EXEC: str = "harperdb"

HDB_EXEC_COMMANDS: tuple[str, ...] = ("deploy_component", "restart", "run", "dev")
"""Commands run through the local executable instead of the API."""

BYPASS_PROMPT: tuple[str, ...] = ("init", "run", "dev")
"""Commands that skip the pre-run confirmation countdown."""

AUTO_RESTART_COMMANDS: tuple[str, ...] = ("deploy_component", "drop", "reset")

RETAIN_COMPONENTS: tuple[str, ...] = ("prometheus_exporter", "status-check")
"""Components never offered for dropping."""

CONFIRM_TIMEOUT_SECONDS: float = 3.0
API_TIMEOUT_SECONDS: float = 30.0
LOG_POLL_INTERVAL_SECONDS: float = 1.0
DEFAULT_LOG_LOOKBACK_MINUTES: int = 15
