"""Environment resolution — which environment and instance this run targets.

Sources are consulted in strict priority order; the first that applies
wins:

1. ``HDB_ENV`` + ``HDB_INSTANCE`` in the process environment (trusted as-is).
2. ``--env`` + ``--instance`` on the command line (validated).
3. The persisted default pair, behind a short auto-confirm countdown.
4. Interactive selection from the configured environments.

The outcome is a :class:`ResolvedConfiguration` returned to the caller and
passed explicitly to command dispatch.  Nothing is written to
``os.environ``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from hdb_helper.core.models import (
    Environment,
    ResolvedConfiguration,
    SelectionDocument,
    normalize_instance_url,
)
from hdb_helper.core.protocols import Prompter, SelectionRepository
from hdb_helper.exceptions import (
    EnvironmentNotFoundError,
    InstanceNotFoundError,
    NoEnvironmentsConfiguredError,
    UserCancelledError,
)
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)

SOURCE_ENVIRON = "environ"
SOURCE_FLAGS = "flags"
SOURCE_DEFAULT = "default"
SOURCE_INTERACTIVE = "interactive"


class EnvironmentResolver:
    """Produce exactly one :class:`ResolvedConfiguration` per invocation.

    Parameters
    ----------
    store:
        Source of the persisted selection document.
    prompter:
        Used for the default-confirmation countdown and interactive picks.
    environ:
        Process environment to read overrides from (``os.environ`` when
        ``None``).
    confirm_timeout:
        Seconds the default-confirmation countdown runs.
    """

    def __init__(
        self,
        store: SelectionRepository,
        prompter: Prompter,
        *,
        environ: Mapping[str, str] | None = None,
        confirm_timeout: float = constants.CONFIRM_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._prompter = prompter
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._confirm_timeout = confirm_timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        *,
        env: str | None = None,
        instance: str | None = None,
    ) -> ResolvedConfiguration:
        """Resolve the target for this invocation.

        Raises
        ------
        EnvironmentNotFoundError
            ``--env`` names an environment that does not exist.
        InstanceNotFoundError
            ``--instance`` is not one of the environment's instances.
        NoEnvironmentsConfiguredError
            Interactive selection is needed but nothing is configured.
        UserCancelledError
            The operator aborted an interactive selection.
        """
        document = self._store.load()

        resolved = self._from_environ(document)
        if resolved is not None:
            return resolved

        if env and instance:
            return self._from_flags(document, env, instance)
        if env or instance:
            logger.warning(
                "--env and --instance must be given together; ignoring %s",
                "--env" if env else "--instance",
            )

        resolved = self._from_defaults(document)
        if resolved is not None:
            return resolved

        return self._interactive(document)

    # ------------------------------------------------------------------
    # Resolution steps
    # ------------------------------------------------------------------

    def _from_environ(self, document: SelectionDocument) -> ResolvedConfiguration | None:
        name = self._environ.get(constants.RUNTIME_ENV_VAR)
        url = self._environ.get(constants.RUNTIME_INSTANCE_VAR)
        if not name or not url:
            return None

        known = document.get(name.strip().upper())
        if known is not None:
            username, password = known.username, known.password
        else:
            username = self._environ.get(constants.LEGACY_USERNAME_KEY, "")
            password = self._environ.get(constants.LEGACY_PASSWORD_KEY, "")
        logger.debug("Using %s/%s from the process environment", name, url)
        return ResolvedConfiguration(
            environment_name=name,
            instance_url=url,
            username=username,
            password=password,
            source=SOURCE_ENVIRON,
        )

    def _from_flags(
        self,
        document: SelectionDocument,
        env: str,
        instance: str,
    ) -> ResolvedConfiguration:
        name = env.strip().upper()
        selected = document.get(name)
        if selected is None:
            raise EnvironmentNotFoundError(
                name,
                hint=_available_hint(document),
            )
        url = normalize_instance_url(instance)
        if not selected.has_instance(url):
            raise InstanceNotFoundError(
                url,
                name,
                hint="Configured instances: " + ", ".join(selected.instances),
            )
        return _bundle(selected, url, SOURCE_FLAGS)

    def _from_defaults(self, document: SelectionDocument) -> ResolvedConfiguration | None:
        if not document.default_env or not document.default_instance:
            return None

        selection = document.default_selection()
        if selection is None:
            logger.warning(
                "Invalid default environment or instance: %s - %s",
                document.default_env,
                document.default_instance,
            )
            return None

        selected, url = selection
        keep = self._prompter.auto_confirm(
            f"Using default environment: {selected.name} ({url})",
            self._confirm_timeout,
            hint="Press ESC to change",
        )
        if not keep:
            return None
        return _bundle(selected, url, SOURCE_DEFAULT)

    def _interactive(self, document: SelectionDocument) -> ResolvedConfiguration:
        if not document.environments:
            raise NoEnvironmentsConfiguredError(
                "No environments configured.",
                hint="Run `hdb config add-env` to add one.",
            )

        name = self._prompter.select("Select environment:", document.names)
        if name is None:
            raise UserCancelledError("No environment selected.")
        selected = document.environments[name]

        if len(selected.instances) == 1:
            url = selected.instances[0]
        else:
            picked = self._prompter.select("Select instance:", list(selected.instances))
            if picked is None:
                raise UserCancelledError("No instance selected.")
            url = picked
        return _bundle(selected, url, SOURCE_INTERACTIVE)


def _bundle(env: Environment, url: str, source: str) -> ResolvedConfiguration:
    return ResolvedConfiguration(
        environment_name=env.name,
        instance_url=url,
        username=env.username,
        password=env.password,
        source=source,
    )


def _available_hint(document: SelectionDocument) -> str:
    if not document.environments:
        return "No environments configured. Run `hdb config add-env`."
    return "Available environments: " + ", ".join(document.names)
