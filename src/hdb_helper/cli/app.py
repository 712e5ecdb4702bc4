"""CLI application entry point and command routing for hdb-helper.

This module is the **sole error boundary** for the entire application.
It catches :class:`~hdb_helper.exceptions.HdbHelperError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core and
  infrastructure layers and to the per-command CLI modules.
* The resolved target is built once per invocation and passed explicitly
  to whichever handler runs; ``os.environ`` is never written.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hdb_helper.cli import exit_codes
from hdb_helper.cli.console import configure_logging, console
from hdb_helper.core.models import ResolvedConfiguration
from hdb_helper.core.protocols import Prompter
from hdb_helper.exceptions import HdbHelperError, UserCancelledError, ValidationError
from hdb_helper.infra.project import Project
from hdb_helper.utils import constants
from hdb_helper.utils.settings import Settings
from hdb_helper.version import __version__

if TYPE_CHECKING:
    from hdb_helper.infra.api_client import ApiClient


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Everything after the command name is handed to the command untouched,
    except the global options, which may appear on either side of it:

    * ``hdb <command> [args...]``  — run a command against the resolved instance
    * ``hdb init`` / ``hdb config <action>``  — manage project configuration
    * ``hdb doctor``  — environment diagnostics
    * ``hdb --version``
    """
    parser = argparse.ArgumentParser(
        prog="hdb",
        description="Run HarperDB commands against a selected environment and instance.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--env", default=None, help="Environment name (requires --instance).")
    parser.add_argument("--instance", default=None, help="Instance URL or hostname (requires --env).")
    parser.add_argument(
        "--restart",
        action="store_true",
        help="Restart the instance after the command succeeds.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="HarperDB command or operation, or one of: init, config, api, components, logs, doctor.",
    )
    parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


@dataclass
class GlobalOptions:
    """Global options collected from both sides of the command name."""

    env: str | None = None
    instance: str | None = None
    restart: bool = False
    verbose: bool = False


def _pop_option(tokens: list[str], names: Sequence[str]) -> tuple[str | None, list[str]]:
    """Remove ``NAME VALUE`` or ``NAME=VALUE`` from *tokens*; return the value and the rest."""
    value: str | None = None
    rest: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        name, sep, inline = token.partition("=")
        if name not in names:
            rest.append(token)
        elif sep:
            value = inline
        elif index < len(tokens):
            value = tokens[index]
            index += 1
        else:
            raise ValidationError(f"Option {token} expects a value.")
    return value, rest


def _split_global_options(
    args: argparse.Namespace,
) -> tuple[GlobalOptions, list[str]]:
    """Merge global options given after the command into those given before it."""
    rest = list(args.args)
    env, rest = _pop_option(rest, ("--env",))
    instance, rest = _pop_option(rest, ("--instance",))

    remaining: list[str] = []
    restart, verbose = args.restart, args.verbose
    for token in rest:
        if token == "--restart":
            restart = True
        elif token in ("-v", "--verbose"):
            verbose = True
        else:
            remaining.append(token)

    options = GlobalOptions(
        env=env or args.env,
        instance=instance or args.instance,
        restart=restart,
        verbose=verbose,
    )
    return options, remaining


def _make_prompter() -> Prompter:
    from hdb_helper.cli.prompts import QuestionaryPrompter

    return QuestionaryPrompter()


# ---------------------------------------------------------------------------
# Shared pre-dispatch flow
# ---------------------------------------------------------------------------

def _ensure_initialized(project: Project, prompter: Prompter) -> None:
    if project.is_initialized():
        return
    answer = prompter.confirm(
        "Project configuration not found. Would you like to initialize it now?",
        default=True,
    )
    if not answer:
        raise UserCancelledError(
            "Project not initialized.",
            hint="Run `hdb init` to set up the configuration files.",
        )
    for note in project.initialize():
        console.print(note)


def _prepare_invocation(
    project: Project,
    prompter: Prompter,
    command: str,
    args: Sequence[str],
    options: GlobalOptions,
) -> ResolvedConfiguration:
    """Initialize, migrate, resolve the target, and confirm before running.

    Every command outside ``BYPASS_PROMPT`` gets a pre-run countdown,
    whichever way the target was resolved.
    """
    from hdb_helper.cli.summary import render_configuration
    from hdb_helper.core.migrator import migrate_legacy_credentials
    from hdb_helper.core.resolver import EnvironmentResolver

    settings = project.settings
    _ensure_initialized(project, prompter)
    migrate_legacy_credentials(project.credentials, project.selection)

    resolver = EnvironmentResolver(
        project.selection,
        prompter,
        confirm_timeout=settings.confirm_timeout,
    )
    target = resolver.resolve(env=options.env, instance=options.instance)
    render_configuration(target, command, args)

    if command not in constants.BYPASS_PROMPT:
        proceed = prompter.auto_confirm(
            f"Run {command} on {target.environment_name} ({target.instance_url})",
            settings.confirm_timeout,
            hint="Press ESC to cancel",
        )
        if not proceed:
            raise UserCancelledError("Command cancelled.")
    return target


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from hdb_helper.cli.doctor import run_doctor

    return run_doctor(settings)


def _handle_init(project: Project, prompter: Prompter) -> int:
    from hdb_helper.cli.config_cmd import init_project

    return init_project(project, prompter)


def _handle_config(
    project: Project,
    prompter: Prompter,
    args: Sequence[str],
    options: GlobalOptions,
) -> int:
    from hdb_helper.cli.config_cmd import run_config

    return run_config(project, prompter, args, env=options.env, instance=options.instance)


def _restart(target: ResolvedConfiguration, settings: Settings) -> None:
    from hdb_helper.infra.harperdb_runner import HarperDBRunner

    console.print("[bold]Restarting HarperDB…[/bold]")
    HarperDBRunner(target, executable=settings.executable).restart()
    console.print("[bold green]Restart complete.[/bold green]")


def _handle_api(client: ApiClient, args: Sequence[str]) -> int:
    """``hdb api <operation> [params...] [--json '{...}']``."""
    from hdb_helper.core.api_params import build_payload

    json_arg, rest = _pop_option(list(args), ("-j", "--json"))
    if not rest or rest[0].startswith("-"):
        raise ValidationError(
            "Missing operation name.",
            hint="Usage: hdb api <operation> [--key=value ...] [--json '{...}']",
        )
    operation, params = rest[0], rest[1:]
    payload = build_payload(params, json_arg)
    console.print_json(client.run(operation, payload))
    return exit_codes.SUCCESS


def _handle_components(
    client: ApiClient,
    prompter: Prompter,
    action: str,
    target: ResolvedConfiguration,
    settings: Settings,
    options: GlobalOptions,
) -> int:
    from hdb_helper.cli.components import run_components

    dropped = run_components(client, prompter, action)
    if dropped or options.restart:
        _restart(target, settings)
    return exit_codes.SUCCESS


def _dispatch(
    project: Project,
    prompter: Prompter,
    command: str,
    args: list[str],
    options: GlobalOptions,
) -> int:
    """Run *command* against the resolved instance."""
    from hdb_helper.infra.api_client import ApiClient

    settings = project.settings

    component_action: str | None = None
    if command == "components":
        from hdb_helper.cli.components import build_parser as build_components_parser

        component_action = build_components_parser().parse_args(args).action

    target = _prepare_invocation(project, prompter, command, args, options)
    client = ApiClient(target, timeout=settings.api_timeout)

    if component_action is not None:
        return _handle_components(client, prompter, component_action, target, settings, options)

    if command == "api":
        code = _handle_api(client, args)
    elif command == "logs":
        from hdb_helper.cli.logs import run_logs

        code = run_logs(client, args)
    elif command in constants.HDB_EXEC_COMMANDS:
        from hdb_helper.infra.harperdb_runner import HarperDBRunner

        HarperDBRunner(target, executable=settings.executable).run(command, args)
        code = exit_codes.SUCCESS
    else:
        from hdb_helper.core.api_params import build_payload

        console.print_json(client.run(command, build_payload(args)))
        code = exit_codes.SUCCESS

    wants_restart = options.restart or command in constants.AUTO_RESTART_COMMANDS
    if wants_restart and command != "restart":
        _restart(target, settings)
    return code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the hdb CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    parsed = parser.parse_args(argv)
    options, args = _split_global_options(parsed)
    configure_logging(options.verbose)

    if parsed.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    command: str = parsed.command
    settings = Settings.from_environ()

    if command == "doctor":
        return _handle_doctor(settings)

    project = Project(settings)
    prompter = _make_prompter()

    if command == "init":
        return _handle_init(project, prompter)
    if command == "config":
        return _handle_config(project, prompter, args, options)
    return _dispatch(project, prompter, command, args, options)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except UserCancelledError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        if exc.hint:
            console.print(f"[dim]{exc.hint}[/dim]")
        sys.exit(exit_codes.USER_CANCELLED)
    except HdbHelperError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
