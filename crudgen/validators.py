# File: crudgen/validators.py
"""
CrudGen - Configuration & Precondition Validators
===================================================
Pure-function checks run before anything is written:

* namespaces are well-formed and rooted at ``App``;
* denylisted column names are identifiers;
* the route override can be emitted into a PHP string literal;
* every stub the run will need exists in the stub directory.

Errors abort the run; warnings are logged and generation continues.

Usage by downstream modules:
    from crudgen.validators import validate_full
    result = validate_full(config, loader, renderer, route=None)
    if not result.is_valid:
        ...
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from crudgen.models import GenerationConfig
from crudgen.templates import FieldRenderer, StubLoader

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def is_valid(self) -> bool:
        return not any(e.is_error for e in self._items)

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_NAMESPACE_RE: re.Pattern[str] = re.compile(r"^[A-Z][A-Za-z0-9_]*(\\[A-Z][A-Za-z0-9_]*)*$")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_ROUTE_FORBIDDEN_RE: re.Pattern[str] = re.compile(r"['\"\\]")
_LAYOUT_RE: re.Pattern[str] = re.compile(r"^[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*$")


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_generation_config(config: GenerationConfig) -> ValidationResult:
    """Namespaces, layout identifier and denylist entries."""
    result: ValidationResult = ValidationResult()

    for kind, namespace in config.namespaces().items():
        ctx: Dict[str, Any] = {"namespace": namespace, "kind": kind}
        if not _NAMESPACE_RE.match(namespace):
            result.add_error(
                "INVALID_NAMESPACE",
                f"The {kind} namespace '{namespace}' is not a valid PHP namespace.",
                ctx,
            )
        elif namespace.split("\\")[0] != "App":
            result.add_warning(
                "NAMESPACE_OUTSIDE_APP",
                f"The {kind} namespace '{namespace}' is not rooted at 'App'; "
                f"files will be written under app/{namespace.replace(chr(92), '/')}.",
                ctx,
            )

    if config.layout is not None and not _LAYOUT_RE.match(config.layout):
        result.add_error(
            "INVALID_LAYOUT",
            f"Layout '{config.layout}' is not a valid dotted view name.",
            {"layout": config.layout},
        )

    for name in config.unwanted_columns:
        if not _IDENTIFIER_RE.match(name):
            result.add_warning(
                "UNWANTED_COLUMN_NOT_IDENTIFIER",
                f"Unwanted column '{name}' is not a valid column identifier "
                "and will never match.",
                {"column": name},
            )

    return result


def validate_route(route: Optional[str]) -> ValidationResult:
    """
    An explicit route override is used as given.

    It only has to be non-blank and free of characters that would end the
    single-quoted PHP string it is emitted into.
    """
    result: ValidationResult = ValidationResult()
    if route is None:
        return result
    if not route.strip():
        result.add_error(
            "INVALID_ROUTE",
            "Route override must not be blank.",
            {"route": route},
        )
    elif _ROUTE_FORBIDDEN_RE.search(route):
        result.add_error(
            "INVALID_ROUTE",
            f"Route '{route}' must not contain quotes or backslashes.",
            {"route": route},
        )
    return result


def validate_stubs(loader: StubLoader, renderer: FieldRenderer) -> ValidationResult:
    """Every stub the run needs must exist before anything is written."""
    result: ValidationResult = ValidationResult()

    if not loader.root.is_dir():
        result.add_error(
            "STUB_DIR_MISSING",
            f"Stub directory not found: {loader.root}",
            {"stub_path": str(loader.root)},
        )
        return result

    required: List[str] = ["controller", "model", "request"]
    required.extend(renderer.required_stubs())
    for name in required:
        if not loader.exists(name):
            result.add_error(
                "STUB_MISSING",
                f"Stub '{name}' not found at {loader.path_for(name)}",
                {"stub": name},
            )
    return result


def validate_full(
    config: GenerationConfig,
    loader: StubLoader,
    renderer: FieldRenderer,
    route: Optional[str] = None,
) -> ValidationResult:
    """
    **Master validation entry point.**

    Called by the orchestrator before the table check and before any
    file is touched.
    """
    result: ValidationResult = ValidationResult()
    result.merge(validate_generation_config(config))
    result.merge(validate_route(route))
    result.merge(validate_stubs(loader, renderer))

    if result.is_valid:
        logger.info("Validation PASSED. %s", result.summary())
    else:
        logger.error("Validation FAILED. %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_generation_config",
    "validate_route",
    "validate_stubs",
    "validate_full",
]
