"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from hdb_helper.exceptions import MissingDependencyError

_PACKAGE_LOGGER = "hdb_helper"


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object, **kwargs: Any) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except MissingDependencyError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects, **kwargs)

	def print_json(self, data: Any) -> None:
		"""Pretty-print *data* as JSON on stdout."""
		text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
		try:
			console_class = _load_rich_console_class()
		except MissingDependencyError:
			print(text)
			return
		console_class().print_json(text)


console = _ConsoleProxy()


def configure_logging(verbose: bool = False) -> None:
	"""Route the package logger through Rich on stderr.

	INFO and above by default; DEBUG with ``verbose``.  Safe to call more
	than once — existing handlers are replaced.
	"""
	logger = logging.getLogger(_PACKAGE_LOGGER)
	logger.setLevel(logging.DEBUG if verbose else logging.INFO)
	logger.propagate = False
	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	try:
		from rich.logging import RichHandler

		handler: logging.Handler = RichHandler(
			console=get_rich_console(),
			show_path=verbose,
			markup=False,
			rich_tracebacks=True,
			log_time_format="%Y-%m-%d %H:%M:%S",
		)
		handler.setFormatter(logging.Formatter("%(message)s"))
	except (ModuleNotFoundError, MissingDependencyError):
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(
			logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S"),
		)
	logger.addHandler(handler)
