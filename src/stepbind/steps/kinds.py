"""Parameter kinds accepted by step handlers.

A handler's parameters are classified once, when the handler is described,
into the closed ParameterKind set below. The converter and invoker only ever
switch on these kinds; they never look at Python annotations.
"""

from __future__ import annotations

from enum import Enum
from typing import NewType

__all__ = [
    "ParameterKind",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Float64",
]

# Width markers for handler annotations. Plain ``int`` and ``float`` are
# treated as Int64 and Float64.
Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)


class ParameterKind(str, Enum):
    """Classification of a handler parameter's accepted shape."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    TEXT = "text"
    BYTES = "bytes"
    TABLE = "table"
    DOC_STRING = "doc_string"
    UNSUPPORTED = "unsupported"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_WIDTHS

    @property
    def is_float(self) -> bool:
        return self in _FLOAT_WIDTHS

    @property
    def is_scalar(self) -> bool:
        """True for kinds converted from a text raw argument."""
        return self.is_integer or self.is_float or self in _TEXT_KINDS

    @property
    def is_reference(self) -> bool:
        """True for kinds that receive a table or doc string by reference."""
        return self in (ParameterKind.TABLE, ParameterKind.DOC_STRING)

    @property
    def bit_width(self) -> int | None:
        """Width in bits for numeric kinds, None otherwise."""
        if self.is_integer:
            return _INTEGER_WIDTHS[self]
        return _FLOAT_WIDTHS.get(self)


_INTEGER_WIDTHS: dict[ParameterKind, int] = {
    ParameterKind.INT8: 8,
    ParameterKind.INT16: 16,
    ParameterKind.INT32: 32,
    ParameterKind.INT64: 64,
}

_FLOAT_WIDTHS: dict[ParameterKind, int] = {
    ParameterKind.FLOAT32: 32,
    ParameterKind.FLOAT64: 64,
}

_TEXT_KINDS = (ParameterKind.TEXT, ParameterKind.BYTES)
