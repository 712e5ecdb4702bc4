"""Infrastructure: the ``.hdbconfig.json`` selection document.

This file is the single authoritative store of environments and the
default selection.  It is written with sorted keys and two-space
indentation so changes read well in a diff.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from hdb_helper.core.merge import deep_merge
from hdb_helper.core.models import SelectionDocument, empty_document
from hdb_helper.exceptions import ConfigCorruptError, ValidationError
from hdb_helper.infra.fileio import atomic_write_text

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class SelectionStore:
    """JSON-backed persistence for :class:`SelectionDocument`."""

    def __init__(self, path: Path) -> None:
        self.path: Path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    # ------------------------------------------------------------------
    # Raw JSON access
    # ------------------------------------------------------------------

    def read(self, default: Any = _MISSING) -> Any:
        """Return the parsed document.

        When the file is missing or unparseable, *default* is returned if
        supplied; otherwise :class:`ConfigCorruptError` is raised.
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top-level value is not a JSON object")
        except (OSError, ValueError) as exc:
            if default is not _MISSING:
                return default
            raise ConfigCorruptError(
                f"Error parsing {self.path.name}: {exc}",
                hint="Fix or delete the file, then run `hdb config init`.",
            ) from exc
        return data

    def write(self, data: Mapping[str, Any]) -> None:
        """Serialize *data* and atomically replace the file."""
        text = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
        atomic_write_text(self.path, text + "\n")
        logger.debug("Wrote %s", self.path.name)

    def merge(self, updates: Mapping[str, Any]) -> dict[str, Any]:
        """Deep-merge *updates* into the stored document and write it back.

        Arrays in *updates* replace the stored arrays.  An unreadable file raises
        :class:`ConfigCorruptError` before anything is written.
        """
        current = self.read() if self.exists() else empty_document()
        merged = deep_merge(current, updates)
        self.write(merged)
        return merged

    def create(self) -> bool:
        """Write an empty document if the file is missing.  Returns ``True`` if created."""
        if self.exists():
            return False
        self.write(empty_document())
        return True

    # ------------------------------------------------------------------
    # Typed access
    # ------------------------------------------------------------------

    def load(self, default: Any = _MISSING) -> SelectionDocument:
        """Read and convert to a :class:`SelectionDocument`."""
        data = self.read(default)
        try:
            return SelectionDocument.from_dict(data)
        except ValidationError as exc:
            raise ConfigCorruptError(
                f"Invalid environment record in {self.path.name}: {exc}",
            ) from exc

    def load_or_empty(self) -> SelectionDocument:
        """Like :meth:`load`, but a missing file yields an empty document.

        A file that exists but cannot be parsed still raises
        :class:`ConfigCorruptError`.
        """
        if not self.exists():
            return self.load(empty_document())
        return self.load()
