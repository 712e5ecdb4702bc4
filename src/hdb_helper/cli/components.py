"""``hdb components list|drop|reset`` — manage components on the instance.

Components named in :data:`~hdb_helper.utils.constants.RETAIN_COMPONENTS`
are never offered for dropping.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Any

from hdb_helper.cli.console import console
from hdb_helper.core.protocols import Prompter
from hdb_helper.infra.api_client import ApiClient
from hdb_helper.utils import constants

ACTIONS: tuple[str, ...] = ("list", "drop", "reset")


def component_names(response: Any) -> list[str]:
    """Extract component names from a ``get_components`` response."""
    entries = response.get("entries", []) if isinstance(response, dict) else []
    return [str(entry["name"]) for entry in entries if isinstance(entry, dict) and "name" in entry]


def droppable(names: Sequence[str]) -> list[str]:
    return [name for name in names if name not in constants.RETAIN_COMPONENTS]


def list_components(client: ApiClient) -> list[str]:
    names = component_names(client.run("get_components"))
    if not names:
        console.print("No components found.")
        return names
    console.print("[bold]Available components:[/bold]")
    for name in names:
        console.print(f"  - {name}")
    return names


def drop_components(client: ApiClient, names: Sequence[str]) -> list[str]:
    """Drop each of *names* and return the ones dropped."""
    dropped: list[str] = []
    for name in names:
        result = client.run("drop_component", {"project": name})
        console.print(f"[green]Dropped[/green] {name}: {_message(result)}")
        dropped.append(name)
    return dropped


def drop_interactive(client: ApiClient, prompter: Prompter) -> list[str]:
    candidates = droppable(component_names(client.run("get_components")))
    if not candidates:
        console.print("No components available for deletion.")
        return []

    selected = prompter.checkbox("Select components to drop:", candidates)
    if not selected:
        console.print("No components selected. Exiting...")
        return []

    confirmed = prompter.confirm(f"Are you sure you want to delete [{', '.join(selected)}]?")
    if not confirmed:
        console.print("Exiting...")
        return []
    return drop_components(client, selected)


def reset_components(client: ApiClient, prompter: Prompter) -> list[str]:
    candidates = droppable(component_names(client.run("get_components")))
    if not candidates:
        console.print("No components available for deletion.")
        return []

    retained = ", ".join(constants.RETAIN_COMPONENTS)
    confirmed = prompter.confirm(
        f"Are you sure you want to delete all components except [{retained}]?",
    )
    if not confirmed:
        console.print("Exiting...")
        return []
    return drop_components(client, candidates)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdb components",
        description="List, drop, or reset components deployed on a HarperDB instance.",
    )
    parser.add_argument("action", choices=ACTIONS)
    return parser


def run_components(client: ApiClient, prompter: Prompter, action: str) -> list[str]:
    """Run *action*; returns the names of dropped components (empty for ``list``)."""
    if action == "list":
        list_components(client)
        return []
    if action == "drop":
        return drop_interactive(client, prompter)
    return reset_components(client, prompter)


def _message(result: Any) -> str:
    if isinstance(result, dict) and "message" in result:
        return str(result["message"])
    return str(result)
