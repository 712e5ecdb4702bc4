"""Infrastructure layer — files, the operations API, and the local executable.

Every raw third-party or OS exception must be caught here and re-raised
as a :class:`~hdb_helper.exceptions.HdbHelperError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from hdb_helper.infra.api_client import ApiClient
from hdb_helper.infra.credential_store import CredentialStore
from hdb_helper.infra.executable_detector import (
    ExecutableStatus,
    detect_executable,
    require_executable,
)
from hdb_helper.infra.harperdb_runner import HarperDBRunner
from hdb_helper.infra.project import Project
from hdb_helper.infra.selection_store import SelectionStore

__all__: list[str] = [
    "ApiClient",
    "CredentialStore",
    "ExecutableStatus",
    "HarperDBRunner",
    "Project",
    "SelectionStore",
    "detect_executable",
    "require_executable",
]
