"""Runtime settings read from the process environment.

Only tool behaviour is configured here (where the project lives, which
executable to run, timeouts).  Environment *selection* variables
(``HDB_ENV`` / ``HDB_INSTANCE``) belong to the resolver and are read there.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from hdb_helper.exceptions import ValidationError
from hdb_helper.utils import constants


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable per-invocation tool settings."""

    project_dir: Path
    """Directory holding ``.env.harperdb`` and ``.hdbconfig.json``."""

    executable: str = constants.HDB_EXEC
    """Name or path of the wrapped HarperDB executable."""

    confirm_timeout: float = constants.CONFIRM_TIMEOUT_SECONDS
    """Seconds the auto-confirm countdown waits before proceeding."""

    api_timeout: float = constants.API_TIMEOUT_SECONDS
    """Seconds before an API request is abandoned."""

    @property
    def env_file(self) -> Path:
        return self.project_dir / constants.ENV_FILE

    @property
    def config_file(self) -> Path:
        return self.project_dir / constants.CONFIG_FILE

    @property
    def gitignore_file(self) -> Path:
        return self.project_dir / constants.GITIGNORE_FILE

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``HDB_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        project_dir = Path(env.get("HDB_PROJECT_DIR") or Path.cwd())
        return cls(
            project_dir=project_dir,
            executable=env.get("HDB_EXEC") or constants.HDB_EXEC,
            confirm_timeout=_read_seconds(
                env, "HDB_CONFIRM_TIMEOUT", constants.CONFIRM_TIMEOUT_SECONDS,
            ),
            api_timeout=_read_seconds(
                env, "HDB_API_TIMEOUT", constants.API_TIMEOUT_SECONDS,
            ),
        )


def _read_seconds(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError(
            f"{name} must be a number of seconds, got {raw!r}.",
        ) from exc
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number of seconds, got {raw!r}.")
    if value < 0:
        raise ValidationError(f"{name} must not be negative, got {raw!r}.")
    return value
