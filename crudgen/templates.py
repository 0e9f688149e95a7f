# File: crudgen/templates.py
"""
CrudGen - Stub Template Engine
===============================

Three pieces live here:

1. ``substitute``: literal placeholder substitution.  One compiled
   alternation of every key (longest first) is applied in a single
   left-to-right, non-overlapping pass, so a substituted value is never
   scanned again and unknown tokens survive verbatim.
2. ``StubLoader``: resolves stub names (``controller``,
   ``views/bootstrap/index``) to files under the packaged or a custom
   stub directory.
3. ``FieldRenderer``: per-column markup strategy.  One subclass per
   view stack; each renders the header cell, body cell, detail row and
   form field of a column from its own stubs.

Placeholder tokens use the ``{{identifier}}`` form.  Blade echoes always
carry inner whitespace (``{{ $post->title }}``) and never collide with a
token.
"""

from __future__ import annotations

import functools
import html
import logging
import re
from abc import ABC
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Type

from crudgen.exceptions import ConfigError, StubNotFoundError
from crudgen.models import FieldViewModel, InputKind, Stack
from crudgen.naming import PlaceholderMap, merge_replacements
from crudgen.utils import read_file, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_STUB_DIR: Path = Path(__file__).resolve().parent / "stubs"

# Views generated for every resource, in generation order.
VIEW_NAMES: Tuple[str, ...] = ("index", "create", "edit", "form", "show")

# PHP date() formats accepted by the matching HTML input types.
_DATE_FORMATS: Dict[InputKind, str] = {
    InputKind.DATE: "Y-m-d",
    InputKind.DATE_TIME: "Y-m-d\\TH:i",
}


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=64)
def _token_pattern(keys: Tuple[str, ...]) -> re.Pattern[str]:
    ordered: List[str] = sorted(keys, key=len, reverse=True)
    return re.compile("|".join(re.escape(k) for k in ordered))


def substitute(template: str, replacements: Mapping[str, str]) -> str:
    """
    Replace every occurrence of every key of *replacements* in *template*.

    Keys are matched literally; where two keys could match at the same
    position the longer one wins.  Values are inserted as-is and never
    re-scanned.  A template without any key is returned unchanged.
    """
    keys: Tuple[str, ...] = tuple(sorted(k for k in replacements if k))
    if not template or not keys:
        return template
    pattern: re.Pattern[str] = _token_pattern(keys)
    return pattern.sub(lambda m: replacements[m.group(0)], template)


# ---------------------------------------------------------------------------
# Stub loading
# ---------------------------------------------------------------------------


class StubLoader:
    """
    Loads stub templates by name.

    ``None``, ``""`` and ``"default"`` select the stubs shipped with the
    package.  Loaded stubs are cached for the lifetime of the loader.
    """

    def __init__(self, stub_path: Optional[str] = None) -> None:
        if stub_path in (None, "", "default"):
            self._root: Path = DEFAULT_STUB_DIR
        else:
            self._root = Path(str(stub_path)).expanduser()
        self._cache: Dict[str, str] = {}
        logger.debug("StubLoader rooted at %s.", self._root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        return self._root / f"{name.lower()}.stub"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> str:
        if name in self._cache:
            return self._cache[name]
        path: Path = self.path_for(name)
        if not path.is_file():
            raise StubNotFoundError(name, str(path))
        content: str = read_file(path)
        self._cache[name] = content
        logger.debug("Loaded stub '%s' (%d bytes).", name, len(content))
        return content

    def render(self, name: str, replacements: Mapping[str, str]) -> str:
        """Load stub *name* and substitute *replacements* into it."""
        return substitute(self.load(name), replacements)


# ---------------------------------------------------------------------------
# Field rendering strategies
# ---------------------------------------------------------------------------


class FieldRenderer(ABC):
    """
    Renders the per-column chunks of the view stubs for one markup stack.

    Subclasses set ``stack`` (the stub sub-directory under ``views/``) and
    ``form_stubs`` (input kinds that need a dedicated form-field stub; all
    other kinds use ``form-field`` with ``{{inputType}}``).
    """

    stack: str = ""
    form_stubs: Dict[InputKind, str] = {}

    def __init__(self, loader: StubLoader) -> None:
        self._loader: StubLoader = loader

    # -- Stub names ---------------------------------------------------------

    def view_stub(self, view: str) -> str:
        return f"views/{self.stack}/{view}"

    def form_stub_for(self, kind: InputKind) -> str:
        return self.view_stub(self.form_stubs.get(kind, "form-field"))

    def required_stubs(self) -> List[str]:
        names: List[str] = [self.view_stub(v) for v in VIEW_NAMES]
        names.extend(
            self.view_stub(v) for v in ("table-head", "table-cell", "view-field", "form-field")
        )
        names.extend(self.view_stub(v) for v in sorted(set(self.form_stubs.values())))
        return names

    # -- Per-field rendering ------------------------------------------------

    @staticmethod
    def field_replacements(field: FieldViewModel) -> PlaceholderMap:
        return {
            "{{title}}": html.escape(field.title),
            "{{column}}": html.escape(field.column),
            "{{column_snake}}": to_snake_case(field.column),
            "{{inputType}}": field.input_kind.value,
            "{{dateFormat}}": _DATE_FORMATS.get(field.input_kind, ""),
        }

    def _render_field(
        self, stub: str, field: FieldViewModel, base: PlaceholderMap
    ) -> str:
        replace: PlaceholderMap = merge_replacements(base, self.field_replacements(field))
        return self._loader.render(stub, replace)

    def table_head(self, field: FieldViewModel, base: PlaceholderMap) -> str:
        return self._render_field(self.view_stub("table-head"), field, base)

    def table_cell(self, field: FieldViewModel, base: PlaceholderMap) -> str:
        return self._render_field(self.view_stub("table-cell"), field, base)

    def detail_row(self, field: FieldViewModel, base: PlaceholderMap) -> str:
        return self._render_field(self.view_stub("view-field"), field, base)

    def form_field(self, field: FieldViewModel, base: PlaceholderMap) -> str:
        return self._render_field(self.form_stub_for(field.input_kind), field, base)

    # -- Aggregate blocks ---------------------------------------------------

    def render_blocks(
        self,
        fields: Sequence[FieldViewModel],
        base: PlaceholderMap,
    ) -> PlaceholderMap:
        """
        Build the four aggregate view blocks.

        One chunk per field, concatenated in field order with no delimiter.
        """
        head: List[str] = []
        body: List[str] = []
        rows: List[str] = []
        form: List[str] = []

        for field in fields:
            head.append(self.table_head(field, base))
            body.append(self.table_cell(field, base))
            rows.append(self.detail_row(field, base))
            form.append(self.form_field(field, base))

        return {
            "{{tableHeader}}": "".join(head),
            "{{tableBody}}": "".join(body),
            "{{viewRows}}": "".join(rows),
            "{{form}}": "".join(form),
        }


class BootstrapFieldRenderer(FieldRenderer):
    """Plain HTML markup with Bootstrap 5 classes."""

    stack = Stack.BOOTSTRAP.value
    form_stubs = {
        InputKind.MULTILINE_TEXT: "form-field-textarea",
        InputKind.CHECKBOX: "form-field-checkbox",
        InputKind.DATE: "form-field-date",
        InputKind.DATE_TIME: "form-field-date",
    }


class TailwindFieldRenderer(FieldRenderer):
    """Blade component markup (``<x-input-label>``, ``<x-text-input>``) styled with Tailwind."""

    stack = Stack.TAILWIND.value
    form_stubs = {
        InputKind.MULTILINE_TEXT: "form-field-textarea",
        InputKind.CHECKBOX: "form-field-checkbox",
        InputKind.DATE: "form-field-date",
        InputKind.DATE_TIME: "form-field-date",
    }


_RENDERERS: Dict[str, Type[FieldRenderer]] = {
    BootstrapFieldRenderer.stack: BootstrapFieldRenderer,
    TailwindFieldRenderer.stack: TailwindFieldRenderer,
}


def get_renderer(stack: str, loader: StubLoader) -> FieldRenderer:
    """Instantiate the field renderer registered for *stack*."""
    try:
        renderer_cls: Type[FieldRenderer] = _RENDERERS[getattr(stack, "value", stack)]
    except KeyError:
        raise ConfigError(
            f"Unknown stack '{stack}'. Available: {', '.join(sorted(_RENDERERS))}."
        ) from None
    return renderer_cls(loader)


def available_stacks() -> List[str]:
    return sorted(_RENDERERS)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_STUB_DIR",
    "VIEW_NAMES",
    "substitute",
    "StubLoader",
    "FieldRenderer",
    "BootstrapFieldRenderer",
    "TailwindFieldRenderer",
    "get_renderer",
    "available_stacks",
]

logger.debug("crudgen.templates loaded.")
