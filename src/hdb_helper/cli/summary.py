"""Rich rendering of environments and of the resolved configuration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from hdb_helper.cli.console import console
from hdb_helper.core.models import ResolvedConfiguration, SelectionDocument
from hdb_helper.exceptions import MissingDependencyError


def _import_rich_tree() -> type[Any]:
    """Import rich Tree lazily."""
    try:
        from rich.tree import Tree
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Tree


def render_configuration(
    target: ResolvedConfiguration,
    command: str,
    args: Sequence[str] = (),
) -> None:
    """Print the environment → instance the command is about to hit."""
    tree_class = _import_rich_tree()
    tree = tree_class("[bold]Configuration[/bold]", guide_style="dim")
    env_branch = tree.add("[yellow]Environment[/yellow]")
    env_branch.add(
        f"[cyan]{target.environment_name}[/cyan] → [green]{target.instance_url}[/green]",
    )
    env_branch.add(f"[dim]as[/dim] [blue]{target.username}[/blue]")
    command_branch = tree.add("[yellow]Command[/yellow]")
    command_branch.add(" ".join([command, *args]))

    console.print()
    console.print(tree)
    console.print()


def render_environments(document: SelectionDocument) -> None:
    """Print every environment and its instances.  Passwords are never shown."""
    tree_class = _import_rich_tree()
    tree = tree_class("[bold]Environments[/bold]", guide_style="dim")
    for name in document.names:
        env = document.environments[name]
        is_default = name == document.default_env
        label = f"[bold cyan]{name}[/bold cyan]"
        if is_default:
            label += " [green](default)[/green]"
        branch = tree.add(label)
        branch.add(f"[dim]Username:[/dim] {env.username}")
        instances = branch.add("[dim]Instances:[/dim]")
        for url in env.instances:
            marker = " [green]★[/green]" if is_default and url == document.default_instance else ""
            instances.add(f"{url}{marker}")
    console.print(tree)
