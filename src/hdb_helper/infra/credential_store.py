"""Infrastructure: the legacy ``.env.harperdb`` credential file.

The file is no longer authoritative — it is read so the migrator can
import any environments an operator still writes there, and reset to a
comment-only template once they have been imported.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from hdb_helper.core.envfile import parse_env_text, update_env_text
from hdb_helper.exceptions import ParseError
from hdb_helper.infra.fileio import atomic_write_text
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)


class CredentialStore:
    """Read/patch access to one credential file.

    Parameters
    ----------
    path:
        Location of the ``.env.harperdb`` file.
    template:
        Body written by :meth:`create` and :meth:`reset`.
    """

    def __init__(self, path: Path, *, template: str = constants.ENV_FILE_TEMPLATE) -> None:
        self.path: Path = Path(path)
        self._template: str = template

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        """Return the raw file body.

        Raises
        ------
        ParseError
            When the file is absent or cannot be read.
        """
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ParseError(
                f"{self.path.name} not found.",
                hint="Run `hdb init` to create the project configuration.",
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"Cannot read {self.path.name}: {exc}") from exc

    def read(self) -> dict[str, str]:
        """Parse the file into a key/value mapping."""
        return parse_env_text(self.read_text())

    def update(self, updates: Mapping[str, str]) -> None:
        """Patch *updates* into the file, preserving comments and order."""
        atomic_write_text(self.path, update_env_text(self.read_text(), updates))
        logger.debug("Updated %d key(s) in %s", len(updates), self.path.name)

    def create(self) -> bool:
        """Write the template if the file is missing.  Returns ``True`` if created."""
        if self.exists():
            return False
        atomic_write_text(self.path, self._template)
        return True

    def reset(self) -> None:
        """Overwrite the file with the pristine template."""
        atomic_write_text(self.path, self._template)
        logger.debug("Reset %s to template", self.path.name)
