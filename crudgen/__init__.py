# File: crudgen/__init__.py
"""
CrudGen - CRUD Scaffolding for Laravel Applications
=====================================================

Reads the columns of one database table and generates a resource
controller, an Eloquent model, a form request and five Blade views
(index, create, edit, form, show), then prints the resource route the
operator has to register.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ CrudGenerator  │────▶│ StubLoader +     │
    │   (cli.py)   │     │ (generator.py) │     │ FieldRenderer    │
    └──────────────┘     └───────┬───────┘     │  (templates.py)  │
                                 │             └──────────────────┘
              ┌─────────────┬────┴─────┬─────────────┬───────────┐
              ▼             ▼          ▼             ▼           ▼
         ┌────────┐   ┌─────────┐ ┌────────┐  ┌──────────┐ ┌─────────┐
         │ schema │   │ columns │ │ naming │  │exporters │ │ layout  │
         └────────┘   └─────────┘ └────────┘  └──────────┘ └─────────┘

Usage::

    # As a library
    from crudgen import CrudGenerator, GenerationConfig, FileSchemaReader
    gen = CrudGenerator(GenerationConfig(base_path="."), reader=FileSchemaReader("schema.yaml"))
    report = gen.generate("blog_posts")

    # From the command line
    python -m crudgen blog_posts --database-url sqlite:///database/database.sqlite
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from crudgen.exceptions import (
    ConfigError,
    CrudGenError,
    LayoutBootstrapError,
    SchemaReadError,
    StubNotFoundError,
    TableNotFoundError,
)
from crudgen.models import (
    ColumnDescriptor,
    FieldViewModel,
    GenerationConfig,
    InputKind,
    NamingVocabulary,
    Stack,
)
from crudgen.columns import build_field_view_models, filter_columns, map_input_kind
from crudgen.naming import build_replacements, resolve_naming, route_line
from crudgen.templates import StubLoader, get_renderer, substitute
from crudgen.schema import FileSchemaReader, SchemaReader, SqlAlchemySchemaReader
from crudgen.exporters import ArtifactPaths, ArtifactWriter, FileRecord
from crudgen.layout import ArtisanLayoutProvider, LayoutProvider, NullLayoutProvider
from crudgen.validators import ValidationResult, validate_full
from crudgen.generator import CrudGenerator, GenerationReport, load_config_file

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "CrudGenerator",
    "GenerationReport",
    "load_config_file",
    # Models
    "ColumnDescriptor",
    "FieldViewModel",
    "GenerationConfig",
    "InputKind",
    "NamingVocabulary",
    "Stack",
    # Errors
    "CrudGenError",
    "ConfigError",
    "SchemaReadError",
    "TableNotFoundError",
    "StubNotFoundError",
    "LayoutBootstrapError",
    # Pipeline pieces
    "filter_columns",
    "map_input_kind",
    "build_field_view_models",
    "resolve_naming",
    "build_replacements",
    "route_line",
    "substitute",
    "StubLoader",
    "get_renderer",
    "SchemaReader",
    "SqlAlchemySchemaReader",
    "FileSchemaReader",
    "ArtifactPaths",
    "ArtifactWriter",
    "FileRecord",
    "LayoutProvider",
    "ArtisanLayoutProvider",
    "NullLayoutProvider",
    # Validation
    "validate_full",
    "ValidationResult",
]
