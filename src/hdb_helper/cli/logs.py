"""``hdb logs`` — read instance logs with filtering and optional tailing."""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from hdb_helper.cli import exit_codes
from hdb_helper.cli.console import console
from hdb_helper.core.log_filter import LogFilter, LogLine, lookback_window
from hdb_helper.exceptions import ApiError, MissingDependencyError
from hdb_helper.infra.api_client import ApiClient
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)


def _import_rich_text() -> type[Any]:
    """Import rich Text lazily for highlighted output."""
    try:
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hdb logs",
        description="Retrieve logs from HarperDB with filtering and lookback duration.",
    )
    parser.add_argument("-f", "--filter", default=None, help="Keyword or /regex/ to match.")
    parser.add_argument(
        "-t",
        "--lookback",
        type=int,
        default=constants.DEFAULT_LOG_LOOKBACK_MINUTES,
        help="Lookback duration in minutes (default: %(default)s).",
    )
    parser.add_argument("-l", "--level", default=None, help="Only entries at this level.")
    parser.add_argument("--tail", action="store_true", help="Keep polling for new entries.")
    return parser


def render_line(line: LogLine) -> None:
    """Print one entry, highlighting the filter matches in its message."""
    text_class = _import_rich_text()
    console.print(text_class(str(line.entry.get("timestamp", "")), style="bold"))
    for key, value in line.entry.items():
        if key == "message" and line.matches:
            message = text_class(line.message)
            for start, end in line.matches:
                message.stylize("bold red", start, end)
            console.print(text_class(f"  {key}: ").append_text(message))
        else:
            console.print(text_class(f"  {key}: {value}"))
    console.print()


def fetch_once(
    client: ApiClient,
    log_filter: LogFilter,
    lookback: int,
    level: str | None,
) -> list[LogLine]:
    start, until = lookback_window(lookback)
    logger.info("Getting logs from %s to %s", start, until)
    params: dict[str, Any] = {"from": start, "until": until, "order": "asc"}
    if level:
        params["level"] = level
    entries = client.run("read_log", params)
    return log_filter.apply(entries if isinstance(entries, list) else [])


def run_logs(
    client: ApiClient,
    argv: Sequence[str],
    *,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: int | None = None,
) -> int:
    """Print matching log entries; with ``--tail`` keep polling until interrupted.

    In tail mode a failed poll is logged and retried.  *max_polls* bounds
    the loop.
    """
    args = build_parser().parse_args(list(argv))
    log_filter = LogFilter(args.filter)
    label = f"Logs matching {args.filter}:" if args.filter else "All logs:"

    polls = 0
    while True:
        try:
            lines = fetch_once(client, log_filter, args.lookback, args.level)
        except ApiError as exc:
            if not args.tail:
                raise
            logger.error("Error occurred while retrieving logs: %s", exc)
            lines = []

        if lines or polls == 0:
            console.print(f"[dim]{label} {len(lines)}[/dim]\n")
        for line in lines:
            render_line(line)

        polls += 1
        if not args.tail or (max_polls is not None and polls >= max_polls):
            return exit_codes.SUCCESS
        sleep(constants.LOG_POLL_INTERVAL_SECONDS)
