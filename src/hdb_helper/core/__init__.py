"""Core / service layer — environment resolution and pure transformations.

Rules
-----
* No ``print()`` calls; diagnostics go through :mod:`logging`.
* No imports from ``cli`` or ``infra``; stores are reached through
  :mod:`hdb_helper.core.protocols`.
* File and network I/O are left to the infrastructure layer.
"""

from hdb_helper.core.migrator import MigrationResult, migrate_legacy_credentials
from hdb_helper.core.models import (
    Environment,
    ResolvedConfiguration,
    SelectionDocument,
    normalize_instance_url,
    validate_environment_name,
)
from hdb_helper.core.protocols import CredentialSource, Prompter, SelectionRepository
from hdb_helper.core.resolver import EnvironmentResolver

__all__: list[str] = [
    "CredentialSource",
    "Environment",
    "EnvironmentResolver",
    "MigrationResult",
    "Prompter",
    "ResolvedConfiguration",
    "SelectionDocument",
    "SelectionRepository",
    "migrate_legacy_credentials",
    "normalize_instance_url",
    "validate_environment_name",
]
