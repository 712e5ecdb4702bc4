"""hdb-helper — command-line helper for operating remote HarperDB instances.

Wraps the local ``harperdb`` executable for lifecycle commands and forwards
everything else to the instance's operations API, with per-project
environment selection.
"""

from hdb_helper.version import __version__

__all__: list[str] = ["__version__"]
