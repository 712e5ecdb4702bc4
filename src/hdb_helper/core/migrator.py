"""One-way import of legacy credential-file environments.

Older projects kept credentials in ``.env.harperdb``, either as one
unnamespaced target (``HARPERDB_TARGET`` / ``CLI_TARGET_*``) or as
namespaced ``ENV_<NAME>_USERNAME`` / ``_PASSWORD`` / ``_INSTANCES`` groups.
:func:`migrate_legacy_credentials` copies every such environment into the
selection document and then resets the credential file, so running it on
every command is safe.

Guarantees
----------
* An existing environment is never overwritten: the imported one is stored
  as ``<NAME>_COPY`` (then ``_COPY2``, ``_COPY3`` …).
* Nothing is written unless at least one environment was imported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Container, Mapping
from dataclasses import dataclass, field

from hdb_helper.core.models import (
    Environment,
    normalize_instances,
    split_instance_list,
)
from hdb_helper.core.protocols import CredentialSource, SelectionRepository
from hdb_helper.exceptions import ValidationError
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)

_NAMESPACED_KEY_RE = re.compile(r"^ENV_([A-Za-z0-9_]+?)_(USERNAME|PASSWORD|INSTANCES)$")


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Outcome of one migration pass."""

    migrated: dict[str, str] = field(default_factory=dict)
    """Legacy environment name → name it was stored under."""

    skipped: tuple[str, ...] = ()
    """Legacy environment names that had no usable instance."""

    def __bool__(self) -> bool:
        return bool(self.migrated)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def group_legacy_keys(values: Mapping[str, str]) -> dict[str, dict[str, str]]:
    """Group legacy keys by environment name.

    Returns ``{NAME: {"USERNAME": ..., "PASSWORD": ..., "INSTANCES": ...}}``
    with only the fields actually present.
    """
    groups: dict[str, dict[str, str]] = {}
    for key, value in values.items():
        match = _NAMESPACED_KEY_RE.match(key)
        if match:
            name, part = match.group(1).upper(), match.group(2)
            groups.setdefault(name, {})[part] = value

    target = values.get(constants.LEGACY_TARGET_KEY, "").strip()
    if target and "<" not in target:
        group = groups.setdefault(constants.LEGACY_ENV_NAME, {})
        group.setdefault("INSTANCES", target)
        if constants.LEGACY_USERNAME_KEY in values:
            group.setdefault("USERNAME", values[constants.LEGACY_USERNAME_KEY])
        if constants.LEGACY_PASSWORD_KEY in values:
            group.setdefault("PASSWORD", values[constants.LEGACY_PASSWORD_KEY])
    return groups


def build_environment(name: str, fields: Mapping[str, str]) -> Environment:
    """Build an :class:`Environment` from one legacy group.

    Raises
    ------
    ValidationError
        When the group has no valid instance URL.
    """
    instances = normalize_instances(split_instance_list(fields.get("INSTANCES", "")))
    return Environment(
        name=name,
        username=fields.get("USERNAME") or constants.DEFAULT_USERNAME,
        password=fields.get("PASSWORD") or "",
        instances=instances,
    )


def unique_name(name: str, taken: Container[str]) -> str:
    """Return *name*, or the first free ``_COPY`` variant of it."""
    if name not in taken:
        return name
    candidate = f"{name}_COPY"
    counter = 2
    while candidate in taken:
        candidate = f"{name}_COPY{counter}"
        counter += 1
    return candidate


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------

def migrate_legacy_credentials(
    credentials: CredentialSource,
    selection: SelectionRepository,
) -> MigrationResult:
    """Import legacy environments into the selection document.

    Returns a falsy :class:`MigrationResult` when there was nothing to do.
    """
    if not credentials.exists():
        return MigrationResult()

    values = credentials.read()
    if not values:
        return MigrationResult()

    groups = group_legacy_keys(values)
    if not groups:
        return MigrationResult()

    document = selection.load_or_empty()
    taken = set(document.environments)
    migrated: dict[str, str] = {}
    skipped: list[str] = []
    records: dict[str, dict[str, object]] = {}

    for legacy_name in sorted(groups):
        try:
            env = build_environment(legacy_name, groups[legacy_name])
        except ValidationError as exc:
            logger.warning("Skipping legacy environment %s: %s", legacy_name, exc)
            skipped.append(legacy_name)
            continue
        stored_name = unique_name(legacy_name, taken)
        if stored_name != legacy_name:
            logger.warning(
                "Environment %s already exists; importing it as %s",
                legacy_name,
                stored_name,
            )
        taken.add(stored_name)
        migrated[legacy_name] = stored_name
        records[stored_name] = env.to_dict()

    if not migrated:
        return MigrationResult(skipped=tuple(skipped))

    selection.merge({"environments": records})
    credentials.reset()
    logger.info(
        "Migrated %d environment(s) from %s to %s",
        len(migrated),
        constants.ENV_FILE,
        constants.CONFIG_FILE,
    )
    return MigrationResult(migrated=migrated, skipped=tuple(skipped))
