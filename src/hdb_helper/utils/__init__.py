"""Shared utilities — constants, settings, and cross-cutting concerns.

Rules
-----
* No business logic.
* No user-facing output.
* Importable by any layer.
"""
