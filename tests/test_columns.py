"""
tests/test_columns.py
Unit tests for crudgen.columns (column filter and type mapper).
"""

from __future__ import annotations

from typing import List

import pytest

from crudgen.columns import (
    build_field_view_models,
    fillable_list,
    filter_columns,
    map_input_kind,
    model_casts,
    storage_type_token,
    validation_rules,
)
from crudgen.models import DEFAULT_UNWANTED_COLUMNS, ColumnDescriptor, FieldViewModel, InputKind


# ===========================================================================
# Column filter
# ===========================================================================


class TestFilterColumns:

    def test_default_denylist(self, blog_post_columns: List[ColumnDescriptor]) -> None:
        kept = filter_columns(blog_post_columns, DEFAULT_UNWANTED_COLUMNS)
        assert [c.name for c in kept] == ["title", "body", "published"]

    def test_order_is_preserved(self) -> None:
        cols = [ColumnDescriptor(name=n) for n in ("z", "id", "a", "m")]
        assert [c.name for c in filter_columns(cols, ["id"])] == ["z", "a", "m"]

    def test_idempotent(self, blog_post_columns: List[ColumnDescriptor]) -> None:
        once = filter_columns(blog_post_columns, DEFAULT_UNWANTED_COLUMNS)
        twice = filter_columns(once, DEFAULT_UNWANTED_COLUMNS)
        assert once == twice

    def test_everything_filtered_is_valid(self) -> None:
        cols = [ColumnDescriptor(name="id"), ColumnDescriptor(name="created_at")]
        assert filter_columns(cols, DEFAULT_UNWANTED_COLUMNS) == []

    def test_empty_denylist_keeps_all(self, blog_post_columns: List[ColumnDescriptor]) -> None:
        assert filter_columns(blog_post_columns, []) == blog_post_columns


# ===========================================================================
# Type mapper
# ===========================================================================


class TestMapInputKind:

    @pytest.mark.parametrize(
        "storage_type, kind",
        [
            ("int", InputKind.NUMBER),
            ("INTEGER", InputKind.NUMBER),
            ("bigint", InputKind.NUMBER),
            ("BIGINT UNSIGNED", InputKind.NUMBER),
            ("smallint", InputKind.NUMBER),
            ("int8", InputKind.NUMBER),
            ("bool", InputKind.CHECKBOX),
            ("BOOLEAN", InputKind.CHECKBOX),
            ("text", InputKind.MULTILINE_TEXT),
            ("longtext", InputKind.MULTILINE_TEXT),
            ("date", InputKind.DATE),
            ("datetime", InputKind.DATE_TIME),
            ("timestamp", InputKind.DATE_TIME),
            ("TIMESTAMP WITHOUT TIME ZONE", InputKind.DATE_TIME),
            ("timestamptz", InputKind.DATE_TIME),
            ("varchar(255)", InputKind.TEXT),
            ("geometry", InputKind.TEXT),
            ("", InputKind.TEXT),
        ],
    )
    def test_mapping(self, storage_type: str, kind: InputKind) -> None:
        assert map_input_kind(storage_type) is kind

    def test_token(self) -> None:
        assert storage_type_token("VARCHAR(255)") == "varchar"
        assert storage_type_token("  Timestamp With Time Zone ") == "timestamp"
        assert storage_type_token("") == ""

    def test_input_kind_values_are_html_types(self) -> None:
        assert InputKind.MULTILINE_TEXT.value == "textarea"
        assert InputKind.DATE_TIME.value == "datetime-local"


# ===========================================================================
# Field view-models
# ===========================================================================


class TestFieldViewModels:

    def test_blog_post_fields(self, blog_post_columns: List[ColumnDescriptor]) -> None:
        kept = filter_columns(blog_post_columns, DEFAULT_UNWANTED_COLUMNS)
        fields = build_field_view_models(kept)
        assert [(f.title, f.input_kind) for f in fields] == [
            ("Title", InputKind.TEXT),
            ("Body", InputKind.MULTILINE_TEXT),
            ("Published", InputKind.CHECKBOX),
        ]

    def test_title_from_snake_case(self) -> None:
        fields = build_field_view_models(
            [ColumnDescriptor(name="published_at", storage_type="timestamp")]
        )
        assert fields[0].title == "Published At"
        assert fields[0].column == "published_at"
        assert fields[0].input_kind is InputKind.DATE_TIME

    def test_nullable_is_carried(self) -> None:
        fields = build_field_view_models(
            [ColumnDescriptor(name="title", storage_type="varchar", nullable=False)]
        )
        assert fields[0].nullable is False


# ===========================================================================
# Model / request fragments
# ===========================================================================


class TestFragments:

    def test_fillable_list(self) -> None:
        cols = [ColumnDescriptor(name="title"), ColumnDescriptor(name="body")]
        assert fillable_list(cols) == "'title', 'body'"

    def test_fillable_list_empty(self) -> None:
        assert fillable_list([]) == ""

    def test_validation_rules(self) -> None:
        fields = [
            FieldViewModel(title="Title", column="title", input_kind=InputKind.TEXT, nullable=False),
            FieldViewModel(title="Amount", column="amount", input_kind=InputKind.NUMBER),
            FieldViewModel(title="Paid", column="paid", input_kind=InputKind.CHECKBOX),
            FieldViewModel(title="Due", column="due", input_kind=InputKind.DATE),
        ]
        assert validation_rules(fields, indent="") == "\n".join(
            [
                "'title' => 'required|string',",
                "'amount' => 'nullable|integer',",
                "'paid' => 'nullable|boolean',",
                "'due' => 'nullable|date',",
            ]
        )

    def test_validation_rules_default_indent(self) -> None:
        fields = [FieldViewModel(title="Body", column="body", input_kind=InputKind.MULTILINE_TEXT)]
        assert validation_rules(fields) == " " * 12 + "'body' => 'nullable|string',"

    def test_model_casts_dates_only(self) -> None:
        fields = [
            FieldViewModel(title="Number", column="number", input_kind=InputKind.TEXT),
            FieldViewModel(title="Issued On", column="issued_on", input_kind=InputKind.DATE),
            FieldViewModel(title="Paid At", column="paid_at", input_kind=InputKind.DATE_TIME),
        ]
        assert model_casts(fields) == "'issued_on' => 'date', 'paid_at' => 'datetime'"

    def test_model_casts_empty(self) -> None:
        fields = [FieldViewModel(title="Body", column="body", input_kind=InputKind.MULTILINE_TEXT)]
        assert model_casts(fields) == ""
