"""Unit tests for raw step arguments."""

from __future__ import annotations

import pytest

from stepbind.steps import (
    DocString,
    DocStringValue,
    Table,
    TableRow,
    TableValue,
    TextValue,
    raw_argument,
)


class TestTable:
    def test_from_cells(self) -> None:
        table = Table.from_cells([["name", "age"], ["ann", "7"]])
        assert len(table) == 2
        assert table.rows[0] == TableRow(cells=("name", "age"))
        assert [list(row) for row in table] == [["name", "age"], ["ann", "7"]]

    def test_to_cells(self) -> None:
        cells = [["a"], ["b"]]
        assert Table.from_cells(cells).to_cells() == cells

    def test_empty_table(self) -> None:
        assert len(Table()) == 0

    def test_row_length(self) -> None:
        assert len(TableRow(cells=("a", "b", "c"))) == 3

    def test_table_is_immutable(self) -> None:
        table = Table.from_cells([["a"]])
        with pytest.raises(AttributeError):
            table.rows = ()  # type: ignore[misc]


class TestRawArgument:
    def test_str_becomes_text_value(self) -> None:
        assert raw_argument("5") == TextValue("5")

    def test_table_becomes_table_value(self) -> None:
        table = Table.from_cells([["x"]])
        assert raw_argument(table) == TableValue(table)

    def test_doc_string_becomes_doc_string_value(self) -> None:
        doc = DocString("text", "text/plain")
        assert raw_argument(doc) == DocStringValue(doc)

    @pytest.mark.parametrize(
        "raw", [TextValue("a"), TableValue(), DocStringValue()]
    )
    def test_tagged_values_unchanged(self, raw: object) -> None:
        assert raw_argument(raw) is raw

    @pytest.mark.parametrize("value", [12, None, [], b"x"])
    def test_other_values_unchanged(self, value: object) -> None:
        assert raw_argument(value) is value

    def test_absent_defaults(self) -> None:
        assert TableValue().table is None
        assert DocStringValue().doc_string is None
        assert DocString("x").content_type == ""
