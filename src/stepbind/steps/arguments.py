"""Raw step arguments as handed over by the step matcher.

Every handler parameter position receives exactly one raw argument: the text
captured from the step line, the data table attached to the step, or the doc
string attached to the step.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

__all__ = [
    "TableRow",
    "Table",
    "DocString",
    "TextValue",
    "TableValue",
    "DocStringValue",
    "RawArgument",
    "raw_argument",
]


@dataclass(frozen=True, slots=True)
class TableRow:
    """One row of a data table.

    Attributes:
        cells: Cell values, left to right.
    """

    cells: tuple[str, ...]

    def __iter__(self) -> Iterator[str]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True, slots=True)
class Table:
    """Data table attached to a step.

    Attributes:
        rows: Table rows, top to bottom. The first row is commonly a header.
    """

    rows: tuple[TableRow, ...] = ()

    @classmethod
    def from_cells(cls, rows: Iterable[Iterable[str]]) -> Table:
        """Build a table from nested cell values.

        Example:
            >>> Table.from_cells([["name", "age"], ["ann", "7"]]).rows[1].cells
            ('ann', '7')
        """
        return cls(rows=tuple(TableRow(cells=tuple(row)) for row in rows))

    def to_cells(self) -> list[list[str]]:
        return [list(row.cells) for row in self.rows]

    def __iter__(self) -> Iterator[TableRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True, slots=True)
class DocString:
    """Multi-line text block attached to a step.

    Attributes:
        content: Text of the block.
        content_type: Media type written after the opening delimiter, if any.
    """

    content: str
    content_type: str = ""


@dataclass(frozen=True, slots=True)
class TextValue:
    """Plain text captured from the step line."""

    text: str


@dataclass(frozen=True, slots=True)
class TableValue:
    """Table attached to the step. ``table=None`` means no table was supplied."""

    table: Table | None = None


@dataclass(frozen=True, slots=True)
class DocStringValue:
    """Doc string attached to the step. ``doc_string=None`` means none supplied."""

    doc_string: DocString | None = None


RawArgument: TypeAlias = TextValue | TableValue | DocStringValue

_RAW_TYPES = (TextValue, TableValue, DocStringValue)


def raw_argument(value: Any) -> Any:
    """Lift a plain Python value into its raw argument tag.

    ``str`` becomes TextValue, Table becomes TableValue and DocString becomes
    DocStringValue. Raw arguments are returned unchanged. Any other value is
    returned as is; the converter reports it as a conversion failure.
    """
    if isinstance(value, _RAW_TYPES):
        return value
    if isinstance(value, str):
        return TextValue(value)
    if isinstance(value, Table):
        return TableValue(value)
    if isinstance(value, DocString):
        return DocStringValue(value)
    return value
