"""Argument converter.

Converts the raw arguments of a step into the values a handler declared. The
arity check always runs first; positions are then converted left to right and
the first failing position stops the conversion.

Conversion rules, keyed by parameter kind:

    int8/16/32/64   text -> base-10 integer within the signed width range
    float32/64      text -> decimal or hex float (0x1p-2) within the
                    precision's finite range
    text            text -> unchanged
    bytes           text -> encoded bytes
    table           table (or no table) -> passed through by reference
    doc_string      doc string (or none) -> passed through by reference
    unsupported     always rejected, whatever the raw value

Any other raw tag for a supported kind is a conversion failure.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Sequence
from typing import Any

from stepbind.constants import (
    DEFAULT_TEXT_ENCODING,
    INFINITY_LITERALS,
    signed_range,
)
from stepbind.steps.arguments import DocStringValue, TableValue, TextValue
from stepbind.steps.errors import (
    ArgumentConversionError,
    ArgumentCountMismatchError,
    UnsupportedArgumentTypeError,
)
from stepbind.steps.kinds import ParameterKind

__all__ = [
    "convert_arguments",
    "convert_argument",
]

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)

# Hexadecimal mantissa with a mandatory binary exponent, e.g. 0x1.8p3
_HEX_FLOAT_PATTERN = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+",
    re.ASCII,
)


def _parse_integer(position: int, kind: ParameterKind, raw: TextValue) -> int:
    text = raw.text
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ArgumentConversionError(
            position, kind, raw, "invalid base-10 integer syntax"
        )
    value = int(text)
    width = kind.bit_width
    if width is None or not kind.is_integer:
        raise ValueError(f"{kind.value} is not an integer kind")
    low, high = signed_range(width)
    if not low <= value <= high:
        raise ArgumentConversionError(
            position, kind, raw, f"value out of range for {width}-bit integer"
        )
    return value


def _parse_float(position: int, kind: ParameterKind, raw: TextValue) -> float:
    text = raw.text
    if not text or text != text.strip() or "_" in text:
        raise ArgumentConversionError(position, kind, raw, "invalid decimal syntax")
    try:
        if _HEX_FLOAT_PATTERN.fullmatch(text):
            value = float.fromhex(text)
        else:
            value = float(text)
    except ValueError as e:
        raise ArgumentConversionError(
            position, kind, raw, "invalid decimal syntax"
        ) from e
    except OverflowError as e:
        raise ArgumentConversionError(
            position, kind, raw, "value out of range for 64-bit float"
        ) from e

    explicit_infinity = text.lower() in INFINITY_LITERALS
    if math.isinf(value) and not explicit_infinity:
        raise ArgumentConversionError(
            position, kind, raw, "value out of range for 64-bit float"
        )
    if kind is ParameterKind.FLOAT32 and math.isfinite(value):
        # Round to single precision; struct refuses values that round past
        # FLOAT32_MAX.
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError as e:
            raise ArgumentConversionError(
                position, kind, raw, "value out of range for 32-bit float"
            ) from e
    return value


def convert_argument(
    position: int,
    kind: ParameterKind,
    raw: Any,
    *,
    declared: str | None = None,
    encoding: str = DEFAULT_TEXT_ENCODING,
) -> Any:
    """Convert the raw argument at one parameter position.

    Args:
        position: Zero-based parameter position (for error messages).
        kind: Declared parameter kind.
        raw: Raw argument supplied at that position.
        declared: Declared parameter shape as text (for error messages).
        encoding: Encoding used for byte-sequence parameters.

    Returns:
        The value to pass to the handler.

    Raises:
        UnsupportedArgumentTypeError: If ``kind`` is UNSUPPORTED.
        ArgumentConversionError: If ``raw`` cannot become ``kind``.
    """
    if kind is ParameterKind.UNSUPPORTED:
        raise UnsupportedArgumentTypeError(position, declared or kind.value, raw)

    if kind.is_scalar:
        if not isinstance(raw, TextValue):
            raise ArgumentConversionError(
                position, kind, raw, "only text can be converted to a scalar"
            )
        if kind.is_integer:
            return _parse_integer(position, kind, raw)
        if kind.is_float:
            return _parse_float(position, kind, raw)
        if kind is ParameterKind.BYTES:
            try:
                return raw.text.encode(encoding)
            except UnicodeEncodeError as e:
                raise ArgumentConversionError(
                    position, kind, raw, f"cannot encode text as {encoding}"
                ) from e
        return raw.text

    if kind is ParameterKind.TABLE:
        if not isinstance(raw, TableValue):
            raise ArgumentConversionError(
                position, kind, raw, "a table argument is required"
            )
        return raw.table

    if kind is ParameterKind.DOC_STRING:
        if not isinstance(raw, DocStringValue):
            raise ArgumentConversionError(
                position, kind, raw, "a doc string argument is required"
            )
        return raw.doc_string

    raise UnsupportedArgumentTypeError(position, declared or kind.value, raw)


def convert_arguments(
    kinds: Sequence[ParameterKind],
    arguments: Sequence[Any],
    *,
    declared: Sequence[str] | None = None,
    encoding: str = DEFAULT_TEXT_ENCODING,
) -> list[Any]:
    """Convert every raw argument into its parameter's kind.

    Args:
        kinds: Handler parameter kinds, in declaration order.
        arguments: Raw arguments, one per parameter.
        declared: Declared parameter shapes as text (for error messages).
        encoding: Encoding used for byte-sequence parameters.

    Returns:
        Converted values, in declaration order.

    Raises:
        ArgumentCountMismatchError: If the counts differ. Checked before any
            parameter kind is looked at.
        UnsupportedArgumentTypeError: For the first unsupported parameter.
        ArgumentConversionError: For the first raw value that cannot convert.

    Example:
        >>> convert_arguments(
        ...     [ParameterKind.INT8, ParameterKind.BYTES],
        ...     [TextValue("12"), TextValue("str")],
        ... )
        [12, b'str']
    """
    if len(arguments) != len(kinds):
        raise ArgumentCountMismatchError(expected=len(kinds), actual=len(arguments))

    return [
        convert_argument(
            position,
            kind,
            raw,
            declared=declared[position] if declared else None,
            encoding=encoding,
        )
        for position, (kind, raw) in enumerate(zip(kinds, arguments, strict=True))
    ]
