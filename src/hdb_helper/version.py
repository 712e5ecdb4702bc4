"""Single source of the hdb-helper version string."""

__version__: str = "0.3.0"
