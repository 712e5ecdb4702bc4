"""Infrastructure: project directory bootstrap.

Creates the two configuration files and keeps them out of version
control.  Reports what it did as a list of messages; the CLI layer
decides how to show them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hdb_helper.infra.credential_store import CredentialStore
from hdb_helper.infra.fileio import atomic_write_text
from hdb_helper.infra.selection_store import SelectionStore
from hdb_helper.utils import constants
from hdb_helper.utils.settings import Settings

IGNORE_ENTRIES: tuple[str, ...] = (constants.CONFIG_FILE, constants.ENV_FILE)


@dataclass
class Project:
    """The configuration files of one project directory."""

    settings: Settings
    credentials: CredentialStore = field(init=False)
    selection: SelectionStore = field(init=False)

    def __post_init__(self) -> None:
        self.credentials = CredentialStore(self.settings.env_file)
        self.selection = SelectionStore(self.settings.config_file)

    def is_initialized(self) -> bool:
        return self.credentials.exists() and self.selection.exists()

    def initialize(self) -> list[str]:
        """Create missing files and update ``.gitignore``.

        Existing files are left untouched.  Returns human-readable notes.
        """
        notes: list[str] = []
        if self.credentials.create():
            notes.append(f"Created {constants.ENV_FILE}")
        if self.selection.create():
            notes.append(f"Created {constants.CONFIG_FILE}")
        note = self._update_gitignore()
        if note:
            notes.append(note)
        return notes

    def _update_gitignore(self) -> str | None:
        path = self.settings.gitignore_file
        if not path.exists():
            atomic_write_text(
                path,
                "\n".join((constants.GITIGNORE_HEADER, *IGNORE_ENTRIES)) + "\n",
            )
            return f"Created {constants.GITIGNORE_FILE}"

        contents = path.read_text(encoding="utf-8")
        present = {line.strip() for line in contents.splitlines()}
        missing = [entry for entry in IGNORE_ENTRIES if entry not in present]
        if not missing:
            return None

        prefix = contents if contents.endswith("\n") or not contents else contents + "\n"
        block = [constants.GITIGNORE_HEADER, *missing]
        if constants.GITIGNORE_HEADER in present:
            block = missing
        atomic_write_text(path, prefix + "\n".join(block) + "\n")
        return f"Updated {constants.GITIGNORE_FILE}"
