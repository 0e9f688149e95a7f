"""
tests/conftest.py
Shared fixtures for the crudgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
Schema sources are YAML files or SQLite databases created per test.
"""

from __future__ import annotations

import copy
import pathlib
from typing import Any, Callable, Dict, List

import pytest
import yaml

from crudgen.layout import LayoutProvider
from crudgen.models import ColumnDescriptor, GenerationConfig
from crudgen.schema import FileSchemaReader


# ---------------------------------------------------------------------------
# Raw schema data
# ---------------------------------------------------------------------------

_SCHEMA: Dict[str, Any] = {
    "tables": {
        "blog_posts": [
            {"name": "id", "type": "bigint", "nullable": False},
            {"name": "title", "type": "varchar(255)", "nullable": False},
            {"name": "body", "type": "text"},
            {"name": "published", "type": "boolean"},
            {"name": "created_at", "type": "timestamp"},
            {"name": "updated_at", "type": "timestamp"},
        ],
        "invoices": {
            "id": "bigint",
            "number": "varchar(32)",
            "amount": "integer",
            "issued_on": "date",
            "paid_at": "datetime",
        },
        "sessions": [
            {"name": "id", "type": "bigint"},
            {"name": "created_at", "type": "timestamp"},
            {"name": "updated_at", "type": "timestamp"},
        ],
    }
}


@pytest.fixture()
def schema_dict() -> Dict[str, Any]:
    """Deep copy so each test can mutate freely."""
    return copy.deepcopy(_SCHEMA)


@pytest.fixture()
def schema_yaml_path(schema_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the schema dict to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(schema_dict, fh, default_flow_style=False, sort_keys=False)
    return path


@pytest.fixture()
def schema_reader(schema_yaml_path: pathlib.Path) -> FileSchemaReader:
    return FileSchemaReader(schema_yaml_path)


@pytest.fixture()
def blog_post_columns() -> List[ColumnDescriptor]:
    return [
        ColumnDescriptor(name="id", storage_type="bigint", nullable=False),
        ColumnDescriptor(name="title", storage_type="varchar(255)", nullable=False),
        ColumnDescriptor(name="body", storage_type="text"),
        ColumnDescriptor(name="published", storage_type="boolean"),
        ColumnDescriptor(name="created_at", storage_type="timestamp"),
        ColumnDescriptor(name="updated_at", storage_type="timestamp"),
    ]


# ---------------------------------------------------------------------------
# Target application
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Empty Laravel application root."""
    path = tmp_path / "laravel"
    path.mkdir()
    return path


@pytest.fixture()
def config(app_dir: pathlib.Path) -> GenerationConfig:
    """Default configuration pointed at the temporary application."""
    return GenerationConfig(base_path=str(app_dir))


# ---------------------------------------------------------------------------
# Injected collaborators
# ---------------------------------------------------------------------------


class RecordingLayoutProvider(LayoutProvider):
    """Layout provider that only counts calls and returns a fixed answer."""

    def __init__(self, result: bool = True) -> None:
        self.result: bool = result
        self.calls: int = 0

    def ensure_layout(self) -> bool:
        self.calls += 1
        return self.result


@pytest.fixture()
def layout_provider() -> RecordingLayoutProvider:
    return RecordingLayoutProvider()


@pytest.fixture()
def failing_layout_provider() -> RecordingLayoutProvider:
    return RecordingLayoutProvider(result=False)


@pytest.fixture()
def echo_lines() -> List[str]:
    """Collects operator output; pass ``echo_lines.append`` as ``echo``."""
    return []


@pytest.fixture()
def write_yaml(tmp_path: pathlib.Path) -> Callable[[str, Dict[str, Any]], pathlib.Path]:
    """Factory: write a dict as YAML under tmp_path and return the path."""

    def _write(name: str, data: Dict[str, Any]) -> pathlib.Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.dump(data, fh, default_flow_style=False, sort_keys=False)
        return path

    return _write
