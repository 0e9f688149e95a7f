# File: crudgen/columns.py
"""
CrudGen - Column Filter & Type Mapper
======================================

Turns the raw column list of a table into the per-field data the view
stubs need:

    ColumnDescriptor[]  --filter-->  ColumnDescriptor[]  --map-->  FieldViewModel[]

Neither step can fail.  Unknown storage types fall back to a plain text
input, and a table whose every column is denylisted simply yields no
fields.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Sequence

from crudgen.models import ColumnDescriptor, FieldViewModel, InputKind
from crudgen.utils import column_title

logger: logging.Logger = logging.getLogger("crudgen.columns")

# Storage type token → input kind.  Tokens are lower-case and stripped of
# length/precision arguments and qualifiers before lookup.
_INPUT_KIND_MAP: Dict[str, InputKind] = {
    "int": InputKind.NUMBER,
    "integer": InputKind.NUMBER,
    "int4": InputKind.NUMBER,
    "int8": InputKind.NUMBER,
    "smallint": InputKind.NUMBER,
    "bigint": InputKind.NUMBER,
    "biginteger": InputKind.NUMBER,
    "bool": InputKind.CHECKBOX,
    "boolean": InputKind.CHECKBOX,
    "text": InputKind.MULTILINE_TEXT,
    "mediumtext": InputKind.MULTILINE_TEXT,
    "longtext": InputKind.MULTILINE_TEXT,
    "date": InputKind.DATE,
    "datetime": InputKind.DATE_TIME,
    "timestamp": InputKind.DATE_TIME,
    "timestamptz": InputKind.DATE_TIME,
}

# Laravel validation rule per input kind (appended after required/nullable).
_RULE_MAP: Dict[InputKind, str] = {
    InputKind.NUMBER: "integer",
    InputKind.CHECKBOX: "boolean",
    InputKind.MULTILINE_TEXT: "string",
    InputKind.DATE: "date",
    InputKind.DATE_TIME: "date",
    InputKind.TEXT: "string",
}

# Eloquent cast per input kind; kinds without an entry are left uncast.
_CAST_MAP: Dict[InputKind, str] = {
    InputKind.DATE: "date",
    InputKind.DATE_TIME: "datetime",
}

_TYPE_TOKEN_RE: re.Pattern[str] = re.compile(r"[\s(]")


def storage_type_token(storage_type: str) -> str:
    """
    Normalise a storage type to its family token.

    Examples:
        >>> storage_type_token("VARCHAR(255)")
        'varchar'
        >>> storage_type_token("TIMESTAMP WITHOUT TIME ZONE")
        'timestamp'
    """
    stripped: str = (storage_type or "").strip().lower()
    return _TYPE_TOKEN_RE.split(stripped, maxsplit=1)[0]


def map_input_kind(storage_type: str) -> InputKind:
    """Map a storage type to an input kind; anything unrecognised is TEXT."""
    return _INPUT_KIND_MAP.get(storage_type_token(storage_type), InputKind.TEXT)


def filter_columns(
    columns: Iterable[ColumnDescriptor],
    denylist: Iterable[str],
) -> List[ColumnDescriptor]:
    """Drop denylisted columns, keeping the original order."""
    unwanted = frozenset(denylist)
    kept: List[ColumnDescriptor] = [c for c in columns if c.name not in unwanted]
    logger.debug(
        "Filtered columns: kept %s", ", ".join(c.name for c in kept) or "(none)"
    )
    return kept


def build_field_view_models(
    columns: Sequence[ColumnDescriptor],
) -> List[FieldViewModel]:
    """One FieldViewModel per (already filtered) column."""
    fields: List[FieldViewModel] = []
    for col in columns:
        kind: InputKind = map_input_kind(col.storage_type)
        if kind is InputKind.TEXT and storage_type_token(col.storage_type) not in (
            "varchar", "char", "string", ""
        ):
            logger.debug(
                "Column '%s' has unmapped type '%s'; using text input.",
                col.name,
                col.storage_type,
            )
        fields.append(
            FieldViewModel(
                title=column_title(col.name),
                column=col.name,
                input_kind=kind,
                nullable=col.nullable,
            )
        )
    return fields


def fillable_list(columns: Sequence[ColumnDescriptor]) -> str:
    """``'title', 'body', 'published'`` for the model's mass-assignable list."""
    return ", ".join(f"'{c.name}'" for c in columns)


def validation_rules(fields: Sequence[FieldViewModel], indent: str = " " * 12) -> str:
    """
    Laravel rule lines for the form request, one per field.

    Each line reads ``'column' => 'required|string',``; nullable columns
    use ``nullable`` instead of ``required``.
    """
    lines: List[str] = []
    for field in fields:
        presence: str = "nullable" if field.nullable else "required"
        rule: str = f"{presence}|{_RULE_MAP[field.input_kind]}"
        lines.append(f"{indent}'{field.column}' => '{rule}',")
    return "\n".join(lines)


def model_casts(fields: Sequence[FieldViewModel]) -> str:
    """``'issued_on' => 'date'`` entries for the model's ``$casts`` array."""
    return ", ".join(
        f"'{f.column}' => '{_CAST_MAP[f.input_kind]}'"
        for f in fields
        if f.input_kind in _CAST_MAP
    )


__all__: List[str] = [
    "storage_type_token",
    "map_input_kind",
    "filter_columns",
    "build_field_view_models",
    "fillable_list",
    "validation_rules",
    "model_casts",
]
