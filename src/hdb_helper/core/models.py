"""Domain models for hdb-helper.

All models are **frozen** dataclasses — immutable value objects.  The
module also owns the two normalization rules every layer relies on:
environment names are uppercased ``[A-Za-z0-9_]+`` identifiers, and
instance URLs are rewritten to ``https://<host>:9925``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from hdb_helper.exceptions import ValidationError
from hdb_helper.utils import constants

_ENV_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
_HOST_RE = re.compile(r"^[a-z0-9](?:[a-z0-9.-]*[a-z0-9])?$")


# ---------------------------------------------------------------------------
# Normalization rules
# ---------------------------------------------------------------------------

def validate_environment_name(name: str) -> str:
    """Return *name* uppercased, or raise :class:`ValidationError`."""
    candidate = name.strip()
    if not _ENV_NAME_RE.match(candidate):
        raise ValidationError(
            "Name can only contain letters, numbers, and underscores.",
        )
    return candidate.upper()


def normalize_instance_url(value: str) -> str:
    """Rewrite a hostname or URL to the canonical ``https://host:9925`` form.

    ``foo``, ``foo:1234``, ``http://foo/bar`` and ``https://foo:9925`` all
    name the same instance.  Normalizing a normalized URL is a no-op.
    """
    raw = value.strip()
    if not raw:
        raise ValidationError("Invalid instance URL: value is empty.")

    if raw.lower().startswith(("http://", "https://")):
        try:
            host = urlsplit(raw).hostname
        except ValueError as exc:
            raise ValidationError(f"Invalid instance URL: {exc}") from exc
    else:
        host = raw.split("/", 1)[0].rsplit(":", 1)[0]

    host = (host or "").lower()
    if not _HOST_RE.match(host):
        raise ValidationError(f"Invalid instance URL: {value!r}")
    return f"{constants.INSTANCE_SCHEME}://{host}:{constants.INSTANCE_PORT}"


def normalize_instances(values: Iterable[str]) -> tuple[str, ...]:
    """Normalize and de-duplicate *values*, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(normalize_instance_url(value), None)
    return tuple(seen)


def split_instance_list(text: str) -> list[str]:
    """Split a comma-separated instance list, dropping empty items."""
    return [part.strip() for part in text.split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Environment:
    """A named credential set with one or more instance URLs."""

    name: str
    username: str
    password: str = field(repr=False)
    """Secret — excluded from ``repr`` so it never reaches logs."""

    instances: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.instances:
            raise ValidationError(
                f'Environment "{self.name}" must have at least one instance.',
            )

    @classmethod
    def create(
        cls,
        name: str,
        username: str,
        password: str,
        instances: Iterable[str],
    ) -> Environment:
        """Build an environment from operator input, validating every field."""
        return cls(
            name=validate_environment_name(name),
            username=username,
            password=password,
            instances=normalize_instances(instances),
        )

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> Environment:
        instances = data.get("instances") or []
        if isinstance(instances, str):
            instances = split_instance_list(instances)
        return cls(
            name=name,
            username=str(data.get("username") or constants.DEFAULT_USERNAME),
            password=str(data.get("password") or ""),
            instances=tuple(str(url) for url in instances),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "password": self.password,
            "instances": list(self.instances),
        }

    def has_instance(self, url: str) -> bool:
        return url in self.instances


# ---------------------------------------------------------------------------
# Selection document
# ---------------------------------------------------------------------------

def empty_document() -> dict[str, Any]:
    """On-disk form of a freshly initialized selection document."""
    return {"environments": {}, "defaultEnv": None, "defaultInstance": None}


@dataclass(frozen=True, slots=True)
class SelectionDocument:
    """Typed view of ``.hdbconfig.json``."""

    environments: dict[str, Environment] = field(default_factory=dict)
    default_env: str | None = None
    default_instance: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SelectionDocument:
        raw_envs = data.get("environments") or {}
        if not isinstance(raw_envs, Mapping):
            raise ValidationError('"environments" must be a JSON object.')
        environments: dict[str, Environment] = {}
        for name, record in raw_envs.items():
            if not isinstance(record, Mapping):
                raise ValidationError(
                    f'Environment "{name}" must be a JSON object.',
                )
            environments[name] = Environment.from_dict(name, record)
        return cls(
            environments=environments,
            default_env=data.get("defaultEnv") or None,
            default_instance=data.get("defaultInstance") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "environments": {
                name: env.to_dict() for name, env in self.environments.items()
            },
            "defaultEnv": self.default_env,
            "defaultInstance": self.default_instance,
        }

    @property
    def names(self) -> list[str]:
        return sorted(self.environments)

    def get(self, name: str) -> Environment | None:
        return self.environments.get(name)

    def default_selection(self) -> tuple[Environment, str] | None:
        """Return the persisted default pair, or ``None`` if absent or stale."""
        if not self.default_env or not self.default_instance:
            return None
        env = self.environments.get(self.default_env)
        if env is None or not env.has_instance(self.default_instance):
            return None
        return env, self.default_instance


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ResolvedConfiguration:
    """The environment, instance and credentials chosen for one invocation.

    Produced by the resolver and handed explicitly to command dispatch.
    Never persisted.
    """

    environment_name: str
    instance_url: str
    username: str
    password: str = field(repr=False)
    source: str = "interactive"
    """Which resolution step produced this bundle."""

    @property
    def auth(self) -> tuple[str, str]:
        return self.username, self.password

    def as_environ(self) -> dict[str, str]:
        """Variables the ``harperdb`` executable reads for a remote target."""
        return {
            constants.LEGACY_TARGET_KEY: self.instance_url,
            constants.LEGACY_USERNAME_KEY: self.username,
            constants.LEGACY_PASSWORD_KEY: self.password,
            constants.RUNTIME_ENV_VAR: self.environment_name,
        }
