"""``hdb config`` — manage environments, instances, and the default selection.

Actions
-------
* ``init``          create the configuration files and import legacy data
* ``add-env``       add (or replace) an environment interactively
* ``add-instance``  add an instance URL to an existing environment
* ``list``          show environments and instances
* ``use``           set the default environment and instance
* ``select``        informational; selection happens when commands run
"""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence

from hdb_helper.cli import exit_codes
from hdb_helper.cli.console import console
from hdb_helper.core.migrator import migrate_legacy_credentials
from hdb_helper.core.models import (
    Environment,
    SelectionDocument,
    normalize_instance_url,
    split_instance_list,
    validate_environment_name,
)
from hdb_helper.core.protocols import Prompter
from hdb_helper.exceptions import (
    EnvironmentNotFoundError,
    InstanceNotFoundError,
    NoEnvironmentsConfiguredError,
    NotInitializedError,
    UserCancelledError,
    ValidationError,
)
from hdb_helper.infra.project import Project
from hdb_helper.utils import constants

ACTIONS: tuple[str, ...] = ("init", "add-env", "add-instance", "list", "use", "select")

INSTANCE_URL_MESSAGE = (
    "Format: https://<instance_hostname>:9925\n"
    "Or just enter the instance hostname (e.g. my-instance.harperfabric.com):"
)


# ---------------------------------------------------------------------------
# Input validation adapters
# ---------------------------------------------------------------------------

def _as_validator(check: Callable[[str], object]) -> Callable[[str], bool | str]:
    """Adapt a raising check into questionary's ``True``-or-message form."""

    def validate(value: str) -> bool | str:
        try:
            check(value)
        except ValidationError as exc:
            return str(exc)
        return True

    return validate


def _check_instance_list(value: str) -> None:
    for url in split_instance_list(value):
        normalize_instance_url(url)


def _required(answer: str | None, what: str) -> str:
    if answer is None:
        raise UserCancelledError(f"No {what} entered.")
    return answer


def _load(project: Project) -> SelectionDocument:
    return project.selection.load_or_empty()


# ---------------------------------------------------------------------------
# Interactive building blocks
# ---------------------------------------------------------------------------

def prompt_environment_name(prompter: Prompter) -> str:
    answer = prompter.text(
        "Environment name:",
        validate=_as_validator(validate_environment_name),
    )
    return validate_environment_name(_required(answer, "environment name"))


def collect_instances(prompter: Prompter) -> tuple[str, ...]:
    """Ask for instance URLs until the operator submits an empty line.

    An empty line is refused until at least one instance has been given.
    """
    instances: dict[str, None] = {}
    while True:
        answer = prompter.text(
            "Instance URL (empty to finish, or comma-separated for multiple)\n"
            + INSTANCE_URL_MESSAGE,
            validate=_as_validator(_check_instance_list),
        )
        values = split_instance_list(_required(answer, "instance URL"))
        if not values:
            if instances:
                return tuple(instances)
            console.print("[yellow]At least one instance URL is required.[/yellow]")
            continue
        for value in values:
            instances.setdefault(normalize_instance_url(value), None)
        console.print(f"[dim]Instances so far: {', '.join(instances)}[/dim]")


def choose_instance(prompter: Prompter, env: Environment, message: str) -> str:
    if len(env.instances) == 1:
        return env.instances[0]
    picked = prompter.select(message, list(env.instances))
    if picked is None:
        raise UserCancelledError("No instance selected.")
    return picked


def choose_environment(prompter: Prompter, document: SelectionDocument, message: str) -> str:
    if not document.environments:
        raise NoEnvironmentsConfiguredError(
            "No environments configured. Add one first.",
            hint="Run `hdb config add-env`.",
        )
    name = prompter.select(message, document.names)
    if name is None:
        raise UserCancelledError("No environment selected.")
    return name


def set_default(project: Project, name: str, instance_url: str) -> None:
    project.selection.merge({"defaultEnv": name, "defaultInstance": instance_url})
    console.print(f"Set default environment to [bold]{name}[/bold] ({instance_url})")


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def add_environment(project: Project, prompter: Prompter) -> Environment:
    """Interactively add an environment and optionally make it the default."""
    document = _load(project)

    name = prompt_environment_name(prompter)
    if name in document.environments:
        replace = prompter.confirm(
            f"Environment {name} already exists. Replace it?",
            default=False,
        )
        if not replace:
            raise UserCancelledError(f"Environment {name} left unchanged.")

    username = _required(
        prompter.text("Username:", default=constants.DEFAULT_USERNAME),
        "username",
    ).strip() or constants.DEFAULT_USERNAME
    password = _required(prompter.password("Password:"), "password")
    instances = collect_instances(prompter)

    env = Environment(name=name, username=username, password=password, instances=instances)
    project.selection.merge({"environments": {name: env.to_dict()}})
    console.print(f"[green]Added environment:[/green] {name}")

    make_default = prompter.confirm(
        "Would you like to set this as the default environment?",
        default=document.default_env is None,
    )
    if make_default:
        set_default(project, name, choose_instance(prompter, env, "Select default instance:"))
    return env


def add_instance(project: Project, prompter: Prompter) -> str:
    """Add one instance URL to an environment chosen by the operator."""
    document = _load(project)
    name = choose_environment(prompter, document, "Select environment:")
    answer = prompter.text(
        "Instance URL\n" + INSTANCE_URL_MESSAGE,
        validate=_as_validator(normalize_instance_url),
    )
    url = normalize_instance_url(_required(answer, "instance URL"))

    env = document.environments[name]
    if env.has_instance(url):
        console.print(f"[yellow]{url} is already configured for {name}.[/yellow]")
        return url

    instances = [*env.instances, url]
    project.selection.merge({"environments": {name: {"instances": instances}}})
    console.print(f"[green]Added instance to {name}:[/green] {url}")
    return url


def use_environment(
    project: Project,
    prompter: Prompter,
    *,
    env_name: str | None = None,
    instance: str | None = None,
) -> tuple[str, str]:
    """Persist the default environment/instance pair."""
    document = _load(project)
    if env_name:
        name = env_name.strip().upper()
        if name not in document.environments:
            raise EnvironmentNotFoundError(
                name,
                hint="Available environments: " + (", ".join(document.names) or "none"),
            )
    else:
        name = choose_environment(prompter, document, "Select environment to use as default:")

    env = document.environments[name]
    if instance:
        url = normalize_instance_url(instance)
        if not env.has_instance(url):
            raise InstanceNotFoundError(url, name)
    else:
        url = choose_instance(prompter, env, "Select instance to use as default:")

    set_default(project, name, url)
    return name, url


def list_environments(project: Project) -> int:
    from hdb_helper.cli.summary import render_environments

    if not project.selection.exists():
        raise NotInitializedError(
            "Project is not initialized.",
            hint="Run `hdb init` to create the configuration files.",
        )
    document = _load(project)
    if not document.environments:
        console.print("No environments found.")
        return exit_codes.SUCCESS
    render_environments(document)
    return exit_codes.SUCCESS


def init_project(project: Project, prompter: Prompter) -> int:
    """Create configuration files, import legacy data, and offer to add an environment."""
    for note in project.initialize():
        console.print(note)

    migrate_legacy_credentials(project.credentials, project.selection)

    if _load(project).environments:
        return exit_codes.SUCCESS

    add_now = prompter.confirm(
        "No environments configured. Would you like to add one now?",
        default=True,
    )
    if add_now:
        add_environment(project, prompter)
    else:
        console.print("Run [bold]hdb config add-env[/bold] when you're ready to add an environment.")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdb config",
        description="Manage HarperDB environments and the default selection.",
    )
    parser.add_argument("action", choices=ACTIONS, help="Action to perform.")
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Environment name for 'use' (same as --env).",
    )
    parser.add_argument("--env", default=None, help="Environment name (non-interactive).")
    parser.add_argument("--instance", default=None, help="Instance URL (non-interactive).")
    return parser


def run_config(
    project: Project,
    prompter: Prompter,
    argv: Sequence[str],
    *,
    env: str | None = None,
    instance: str | None = None,
) -> int:
    """Parse *argv* and run one ``hdb config`` action."""
    args = build_parser().parse_args(list(argv))
    env_name = args.name or args.env or env
    instance_url = args.instance or instance

    if args.action == "init":
        return init_project(project, prompter)
    if args.action == "list":
        return list_environments(project)
    if args.action == "select":
        console.print("Environment/instance selection will occur when running commands.")
        return exit_codes.SUCCESS

    if not project.is_initialized():
        for note in project.initialize():
            console.print(note)

    if args.action == "add-env":
        add_environment(project, prompter)
    elif args.action == "add-instance":
        add_instance(project, prompter)
    elif args.action == "use":
        use_environment(project, prompter, env_name=env_name, instance=instance_url)
    return exit_codes.SUCCESS
