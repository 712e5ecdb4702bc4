"""``hdb doctor`` — environment and project diagnostics.

Gathers system and project information and renders a Rich table
summarising whether hdb-helper can operate from the current directory.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  It only collects and displays
diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from hdb_helper.cli import exit_codes
from hdb_helper.cli.console import console
from hdb_helper.exceptions import HdbHelperError
from hdb_helper.infra.executable_detector import detect_executable
from hdb_helper.infra.project import Project
from hdb_helper.utils import constants
from hdb_helper.utils.settings import Settings
from hdb_helper.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _executable_check(settings: Settings) -> tuple[str, str, str]:
    """Return (label, value, status) for the wrapped executable row."""
    status_obj = detect_executable(settings.executable)
    if status_obj.found:
        return settings.executable, str(status_obj.path), "[green]OK[/green]"
    return settings.executable, "not found", "[yellow]WARN[/yellow]"


def _project_check(project: Project) -> tuple[str, str, str]:
    """Return (label, value, status) for the project initialization row."""
    if project.is_initialized():
        return "Project", str(project.settings.project_dir), "[green]OK[/green]"
    return "Project", "not initialized (run `hdb init`)", "[yellow]WARN[/yellow]"


def _environments_check(project: Project) -> tuple[str, str, str]:
    """Return (label, value, status) for the configured environments row."""
    if not project.selection.exists():
        return "Environments", "none", "[yellow]WARN[/yellow]"
    try:
        document = project.selection.load()
    except HdbHelperError as exc:
        return "Environments", str(exc), "[red]FAIL[/red]"
    if not document.environments:
        return "Environments", "none", "[yellow]WARN[/yellow]"
    value = ", ".join(document.names)
    if document.default_env:
        value += f" (default: {document.default_env})"
    return "Environments", value, "[green]OK[/green]"


def _hdb_helper_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the hdb-helper version row."""
    return "hdb-helper", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nhdb doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.  Warnings do not fail.
    """
    settings = settings or Settings.from_environ()
    project = Project(settings)
    checks = [
        _hdb_helper_version_check(),
        _python_version_check(),
        _executable_check(settings),
        _project_check(project),
        _environments_check(project),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
    else:
        table = Table(
            title="hdb doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)
        console.print()
        console.print(table)
        console.print()

    executable = detect_executable(settings.executable)
    if not executable.found:
        console.print(f"{settings.executable} is not installed. Lifecycle commands "
                      f"({', '.join(constants.HDB_EXEC_COMMANDS)}) need it:")
        for cmd in executable.install_commands:
            console.print(f"  {cmd}")
        console.print()

    if has_failure:
        console.print("Some checks failed.")
        return exit_codes.GENERAL_ERROR
    console.print("All checks passed.")
    return exit_codes.SUCCESS
