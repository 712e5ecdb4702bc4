"""Infrastructure: run lifecycle commands through the ``harperdb`` executable.

The resolved instance is appended as ``target=<url>`` and the credentials
are passed in the child's environment, which is built from a copy of
``os.environ`` — the parent process environment is never modified.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Mapping, Sequence

from hdb_helper.core.models import ResolvedConfiguration
from hdb_helper.exceptions import CommandFailedError
from hdb_helper.infra.executable_detector import require_executable
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)


class HarperDBRunner:
    """Runs one ``harperdb`` command at a time against the resolved target."""

    def __init__(
        self,
        target: ResolvedConfiguration,
        *,
        executable: str = constants.HDB_EXEC,
        base_environ: Mapping[str, str] | None = None,
    ) -> None:
        self._target = target
        self._executable = executable
        self._base_environ = base_environ

    def build_args(self, command: str, args: Sequence[str] = ()) -> list[str]:
        return [command, *args, f"target={self._target.instance_url}"]

    def build_environ(self) -> dict[str, str]:
        environ = dict(os.environ if self._base_environ is None else self._base_environ)
        environ.update(self._target.as_environ())
        return environ

    def run(self, command: str, args: Sequence[str] = ()) -> None:
        """Run ``harperdb <command> [args...] target=<url>``, streaming output.

        Raises
        ------
        ExecutableNotFoundError
            When the executable is not on PATH.
        CommandFailedError
            When the process exits with a non-zero status.
        """
        executable = str(require_executable(self._executable))
        argv = self.build_args(command, args)
        logger.info("Running command: %s %s", self._executable, " ".join(argv))

        started = time.perf_counter()
        try:
            completed = subprocess.run(
                [executable, *argv],
                env=self.build_environ(),
                check=False,
            )
        except OSError as exc:
            raise CommandFailedError(
                f"Failed to start {self._executable}: {exc}",
                returncode=-1,
            ) from exc
        elapsed = time.perf_counter() - started
        logger.info("Command completed in %.2f seconds", elapsed)

        if completed.returncode != 0:
            raise CommandFailedError(
                f"{self._executable} {command} exited with code {completed.returncode}.",
                returncode=completed.returncode,
            )

    def restart(self) -> None:
        self.run("restart")
