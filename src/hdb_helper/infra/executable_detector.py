"""Infrastructure: ``harperdb`` executable detection and install guidance.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from hdb_helper.exceptions import ExecutableNotFoundError
from hdb_helper.utils import constants

INSTALL_COMMANDS: tuple[str, ...] = ("npm install -g harperdb",)


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecutableStatus:
    """Result of probing for the wrapped executable.

    Attributes
    ----------
    name : str
        Name or path that was looked up.
    found : bool
        Whether the executable was located.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested install commands.  Empty when already present.
    """

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


def detect_executable(name: str = constants.HDB_EXEC) -> ExecutableStatus:
    """Probe PATH for *name*.

    Returns a status regardless of the outcome — the caller decides
    whether to abort or merely warn.
    """
    result = shutil.which(name)
    if result is not None:
        return ExecutableStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )
    return ExecutableStatus(
        name=name,
        found=False,
        path=None,
        install_commands=INSTALL_COMMANDS,
    )


def require_executable(name: str = constants.HDB_EXEC) -> Path:
    """Locate *name* or raise :class:`ExecutableNotFoundError`."""
    status = detect_executable(name)
    if not status.found or status.path is None:
        raise ExecutableNotFoundError(
            f"{name} is not installed or not on PATH.",
            hint="Install it with:\n" + "\n".join(f"  {cmd}" for cmd in status.install_commands),
        )
    return status.path
