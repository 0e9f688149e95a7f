# File: crudgen/schema.py
"""
CrudGen - Schema Readers
=========================

The pipeline needs exactly two things from a schema source: whether a
table exists, and its ordered ``(name, storage type)`` column list.

* ``SqlAlchemySchemaReader``: live database through SQLAlchemy's
  runtime inspection API.
* ``FileSchemaReader``: a YAML or JSON file, for offline use::

      tables:
        blog_posts:
          - {name: id, type: bigint, nullable: false}
          - {name: title, type: varchar}
          - {name: body, type: text}

  A table may also be a plain ``column: type`` mapping.

Column lists are read once per table and cached for the reader's
lifetime (one generation run).
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, SQLAlchemyError

from crudgen.exceptions import ConfigError, SchemaReadError, TableNotFoundError
from crudgen.models import ColumnDescriptor

logger: logging.Logger = logging.getLogger("crudgen.schema")


# ---------------------------------------------------------------------------
# Structured file loading (shared with config loading)
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. An empty document is an empty mapping."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_structured_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON or YAML file into a dict, dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix == ".json":
        return _load_json_file(path)
    # YAML is a superset of JSON, so it also covers unknown extensions.
    return _load_yaml_file(path)


# ---------------------------------------------------------------------------
# Reader interface
# ---------------------------------------------------------------------------


class SchemaReader(ABC):
    """Read-only view of table metadata with per-table caching."""

    def __init__(self) -> None:
        self._cache: Dict[str, List[ColumnDescriptor]] = {}

    @abstractmethod
    def has_table(self, table: str) -> bool:
        """True if *table* exists."""

    @abstractmethod
    def _read_columns(self, table: str) -> List[ColumnDescriptor]:
        """Fetch the ordered column list of an existing table."""

    def get_columns(self, table: str) -> List[ColumnDescriptor]:
        """Ordered column descriptors of *table* (cached after the first call)."""
        if table not in self._cache:
            if not self.has_table(table):
                raise TableNotFoundError(table)
            self._cache[table] = self._read_columns(table)
            logger.debug(
                "Read %d column(s) for table '%s'.", len(self._cache[table]), table
            )
        return list(self._cache[table])


# ---------------------------------------------------------------------------
# SQLAlchemy reader
# ---------------------------------------------------------------------------


class SqlAlchemySchemaReader(SchemaReader):
    """
    Reads table metadata from a live database.

    Accepts either a SQLAlchemy URL or an existing ``Engine``.
    """

    def __init__(self, source: Union[str, Engine], schema: Optional[str] = None) -> None:
        super().__init__()
        try:
            self._engine: Engine = (
                create_engine(source) if isinstance(source, str) else source
            )
        except (SQLAlchemyError, ImportError) as exc:
            raise SchemaReadError(f"Cannot connect to database: {exc}") from exc
        self._schema: Optional[str] = schema

    def _type_name(self, type_: Any) -> str:
        try:
            return str(type_.compile(dialect=self._engine.dialect))
        except CompileError:
            return type(type_).__name__

    def has_table(self, table: str) -> bool:
        try:
            return bool(inspect(self._engine).has_table(table, schema=self._schema))
        except SQLAlchemyError as exc:
            raise SchemaReadError(f"Cannot inspect database: {exc}") from exc

    def _read_columns(self, table: str) -> List[ColumnDescriptor]:
        try:
            raw: List[Dict[str, Any]] = inspect(self._engine).get_columns(
                table, schema=self._schema
            )
        except SQLAlchemyError as exc:
            raise SchemaReadError(f"Cannot read columns of '{table}': {exc}") from exc
        return [
            ColumnDescriptor(
                name=col["name"],
                storage_type=self._type_name(col["type"]),
                nullable=bool(col.get("nullable", True)),
            )
            for col in raw
        ]


# ---------------------------------------------------------------------------
# File reader
# ---------------------------------------------------------------------------


class FileSchemaReader(SchemaReader):
    """Reads table metadata from a YAML/JSON schema file."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self._path: Path = Path(path)
        try:
            raw: Dict[str, Any] = load_structured_file(self._path)
        except (FileNotFoundError, ValueError) as exc:
            raise SchemaReadError(str(exc)) from exc

        tables: Any = raw.get("tables", raw)
        if not isinstance(tables, dict):
            raise SchemaReadError(
                f"Expected 'tables' to be a mapping in {self._path}, "
                f"got {type(tables).__name__}."
            )
        self._tables: Dict[str, Any] = tables

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def _read_columns(self, table: str) -> List[ColumnDescriptor]:
        entry: Any = self._tables[table] or []
        try:
            if isinstance(entry, dict):
                return [
                    ColumnDescriptor(name=str(name), storage_type=str(type_ or ""))
                    for name, type_ in entry.items()
                ]
            return [
                ColumnDescriptor(
                    name=str(col["name"]),
                    storage_type=str(col.get("type", "") or ""),
                    nullable=bool(col.get("nullable", True)),
                )
                for col in entry
            ]
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise SchemaReadError(
                f"Malformed column list for table '{table}' in {self._path}: {exc}"
            ) from exc


def make_schema_reader(
    database_url: Optional[str] = None,
    schema_file: Optional[str] = None,
) -> SchemaReader:
    """Pick the reader for the configured schema source (file wins)."""
    if schema_file:
        return FileSchemaReader(schema_file)
    if database_url:
        return SqlAlchemySchemaReader(database_url)
    raise ConfigError(
        "No schema source configured. Use --database-url or --schema-file."
    )


__all__: List[str] = [
    "load_structured_file",
    "SchemaReader",
    "SqlAlchemySchemaReader",
    "FileSchemaReader",
    "make_schema_reader",
]
