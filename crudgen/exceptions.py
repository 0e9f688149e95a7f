# File: crudgen/exceptions.py
"""
CrudGen - Exception Hierarchy
==============================

Every failure the pipeline knows how to report derives from
``CrudGenError``.  The orchestrator catches these (plus ``OSError``) at a
single point, records the message unmodified in the run report, and stops.
"""

from __future__ import annotations

from typing import List


class CrudGenError(Exception):
    """Base class for all scaffolding failures."""


class ConfigError(CrudGenError):
    """Configuration could not be loaded or failed validation."""


class SchemaReadError(CrudGenError):
    """The schema source could not be read."""


class TableNotFoundError(CrudGenError):
    """The requested table does not exist in the schema source."""

    def __init__(self, table: str) -> None:
        super().__init__(f"`{table}` table not exist")
        self.table: str = table


class StubNotFoundError(CrudGenError):
    """A stub template is missing from the stub directory."""

    def __init__(self, name: str, path: str) -> None:
        super().__init__(f"Stub '{name}' not found at {path}")
        self.name: str = name
        self.path: str = path


class LayoutBootstrapError(CrudGenError):
    """The shared layout is missing and could not be created."""


__all__: List[str] = [
    "CrudGenError",
    "ConfigError",
    "SchemaReadError",
    "TableNotFoundError",
    "StubNotFoundError",
    "LayoutBootstrapError",
]
