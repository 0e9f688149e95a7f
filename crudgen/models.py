# File: crudgen/models.py
"""
CrudGen - Core Data Models
===========================
Pydantic V2 models representing table metadata, per-field presentation
data, the naming vocabulary and the generation configuration.  These
models are the single source of truth for the whole pipeline:

    Schema Read → Filter / Map → Resolve Naming → Render Stubs → Write

Column descriptors, field view-models and the naming vocabulary are
frozen: they are computed once per run and only ever read afterwards.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.models")

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# Structural / system columns that never appear in forms or views.
DEFAULT_UNWANTED_COLUMNS: Tuple[str, ...] = (
    "id",
    "uuid",
    "ulid",
    "password",
    "email_verified_at",
    "remember_token",
    "created_at",
    "updated_at",
    "deleted_at",
)

DEFAULT_MODEL_NAMESPACE: str = "App\\Models"
DEFAULT_CONTROLLER_NAMESPACE: str = "App\\Http\\Controllers"
DEFAULT_REQUEST_NAMESPACE: str = "App\\Http\\Requests"
DEFAULT_LAYOUT: str = "layouts.app"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class InputKind(str, Enum):
    """Presentation input kinds; values are the HTML input type names."""

    NUMBER = "number"
    CHECKBOX = "checkbox"
    MULTILINE_TEXT = "textarea"
    DATE = "date"
    DATE_TIME = "datetime-local"
    TEXT = "text"


class Stack(str, Enum):
    """Markup flavours for generated views."""

    BOOTSTRAP = "bootstrap"
    TAILWIND = "tailwind"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
    protected_namespaces=(),
)

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
    protected_namespaces=(),
)


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------


class ColumnDescriptor(BaseModel):
    """One column as reported by the schema reader."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    storage_type: str = Field(
        default="",
        description="Storage type as reported by the database (e.g. 'varchar').",
    )
    nullable: bool = Field(default=True, description="Whether the column allows NULL.")

    def __repr__(self) -> str:
        null: str = "NULL" if self.nullable else "NOT NULL"
        return f"<ColumnDescriptor {self.name}: {self.storage_type} {null}>"


class FieldViewModel(BaseModel):
    """Everything needed to render one form row / table cell / detail line."""

    model_config = _FROZEN_CONFIG

    title: str = Field(..., description="Human label, e.g. 'Published At'.")
    column: str = Field(..., min_length=1, description="Column name.")
    input_kind: InputKind = Field(..., description="Presentation input kind.")
    nullable: bool = Field(default=True)

    def __repr__(self) -> str:
        return f"<FieldViewModel {self.column}:{self.input_kind.name}>"


class NamingVocabulary(BaseModel):
    """
    Every naming variant derived from the entity name.

    Computed once per run from the entity name and the configured
    namespaces; immutable afterwards.
    """

    model_config = _FROZEN_CONFIG

    table: str = Field(..., description="Source table name.")
    model_name: str = Field(..., description="PascalCase singular class name.")
    model_title: str = Field(..., description="Title Case singular.")
    model_title_plural: str = Field(..., description="Title Case plural.")
    model_name_camel: str = Field(..., description="camelCase singular.")
    model_name_camel_plural: str = Field(..., description="camelCase plural.")
    model_name_plural_upper: str = Field(..., description="PascalCase plural.")
    model_name_snake: str = Field(..., description="snake_case singular.")
    model_view: str = Field(..., description="kebab-case view folder name.")
    model_route: str = Field(..., description="URL route slug.")
    model_namespace: str
    controller_namespace: str
    request_namespace: str
    layout: str = Field(default="", description="Shared layout identifier.")

    @computed_field  # type: ignore[misc]
    @property
    def controller_name(self) -> str:
        return f"{self.model_name}Controller"

    @computed_field  # type: ignore[misc]
    @property
    def request_name(self) -> str:
        return f"{self.model_name}Request"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Master configuration for one generation run.

    Passed explicitly to the orchestrator; every value has a documented
    default so an empty config file is a valid config.
    """

    model_config = _SHARED_CONFIG

    # -- Target project -----------------------------------------------------
    base_path: str = Field(
        default=".", description="Root of the target application."
    )

    # -- Columns ------------------------------------------------------------
    unwanted_columns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_UNWANTED_COLUMNS),
        description="Columns never shown in generated forms or views.",
    )

    # -- Namespaces ---------------------------------------------------------
    model_namespace: str = Field(default=DEFAULT_MODEL_NAMESPACE)
    controller_namespace: str = Field(default=DEFAULT_CONTROLLER_NAMESPACE)
    request_namespace: str = Field(default=DEFAULT_REQUEST_NAMESPACE)

    # -- Views --------------------------------------------------------------
    layout: Optional[str] = Field(
        default=DEFAULT_LAYOUT,
        description="Shared layout view; None disables the layout check.",
    )
    stack: Stack = Field(
        default=Stack.BOOTSTRAP, description="Markup flavour of generated views."
    )
    stub_path: Optional[str] = Field(
        default=None,
        description="Custom stub directory ('default' or None = packaged stubs).",
    )

    # -- Schema source ------------------------------------------------------
    database_url: Optional[str] = Field(
        default=None, description="SQLAlchemy URL of the live database."
    )
    schema_file: Optional[str] = Field(
        default=None, description="YAML/JSON file describing table columns."
    )

    # -- Behaviour ----------------------------------------------------------
    force: bool = Field(
        default=False, description="Overwrite existing files without asking."
    )

    @field_validator(
        "model_namespace", "controller_namespace", "request_namespace"
    )
    @classmethod
    def _strip_namespace(cls, v: str) -> str:
        stripped: str = v.strip().strip("\\")
        if not stripped:
            raise ValueError("Namespace must not be empty.")
        return stripped

    @field_validator("unwanted_columns")
    @classmethod
    def _normalise_unwanted(cls, v: List[str]) -> List[str]:
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("layout")
    @classmethod
    def _blank_layout_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def namespaces(self) -> Dict[str, str]:
        return {
            "model": self.model_namespace,
            "controller": self.controller_namespace,
            "request": self.request_namespace,
        }


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_UNWANTED_COLUMNS",
    "DEFAULT_MODEL_NAMESPACE",
    "DEFAULT_CONTROLLER_NAMESPACE",
    "DEFAULT_REQUEST_NAMESPACE",
    "DEFAULT_LAYOUT",
    "InputKind",
    "Stack",
    "ColumnDescriptor",
    "FieldViewModel",
    "NamingVocabulary",
    "GenerationConfig",
]

logger.debug("crudgen.models loaded: %d public symbols.", len(__all__))
