"""Allow ``python -m hdb_helper`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m hdb_helper`` behaves identically to the ``hdb`` console script.
"""

from __future__ import annotations

from hdb_helper.cli.app import cli

if __name__ == "__main__":
    cli()
