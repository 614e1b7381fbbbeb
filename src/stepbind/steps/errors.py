"""Error types raised while describing handlers and converting arguments.

Exception Hierarchy:
    StepbindError
    └── StepError (base for all step engine errors)
        ├── HandlerDefinitionError (handler cannot be described)
        └── StepArgumentError (raised before the handler is invoked)
            ├── ArgumentCountMismatchError (wrong number of raw arguments)
            ├── UnsupportedArgumentTypeError (parameter shape not supported)
            └── ArgumentConversionError (raw value cannot be converted)

Message prefixes are stable so reports can tell the kinds apart.
"""

from __future__ import annotations

from typing import Any, ClassVar

from stepbind.exceptions import StepbindError
from stepbind.steps.arguments import DocStringValue, TableValue, TextValue
from stepbind.steps.kinds import ParameterKind
from stepbind.steps.outcome import FailureKind

__all__ = [
    "StepError",
    "HandlerDefinitionError",
    "StepArgumentError",
    "ArgumentCountMismatchError",
    "UnsupportedArgumentTypeError",
    "ArgumentConversionError",
    "describe_raw",
]


def describe_raw(raw: Any) -> str:
    """Short human-readable description of a raw argument for messages."""
    if isinstance(raw, TextValue):
        return f'"{raw.text}"'
    if isinstance(raw, TableValue):
        return "table" if raw.table is not None else "absent table"
    if isinstance(raw, DocStringValue):
        return "doc string" if raw.doc_string is not None else "absent doc string"
    return type(raw).__name__


class StepError(StepbindError):
    """Base exception for the step engine."""

    pass


class HandlerDefinitionError(StepError):
    """Raised when a handler cannot be described.

    Attributes:
        handler_name: Name of the offending handler, if known.
    """

    def __init__(self, message: str, handler_name: str | None = None) -> None:
        self.handler_name = handler_name
        super().__init__(message)


class StepArgumentError(StepError):
    """Base for errors that stop a step before its handler is called.

    Attributes:
        kind: Failure classification reported in the step outcome.
    """

    kind: ClassVar[FailureKind]


class ArgumentCountMismatchError(StepArgumentError):
    """Raised when the raw argument count differs from the parameter count.

    Attributes:
        expected: Number of handler parameters.
        actual: Number of raw arguments matched from the step.
    """

    kind = FailureKind.ARGUMENT_COUNT_MISMATCH

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"argument count mismatch: handler expects {expected} arguments, "
            f"but {actual} were matched from step"
        )


class UnsupportedArgumentTypeError(StepArgumentError):
    """Raised when a parameter's declared shape is outside the supported set.

    The raw argument plays no part in the decision; it is kept for context.

    Attributes:
        position: Zero-based parameter position.
        declared: Declared shape of the parameter, as text.
        raw: Raw argument supplied at that position, if any.
    """

    kind = FailureKind.UNSUPPORTED_ARGUMENT_TYPE

    def __init__(self, position: int, declared: str, raw: Any = None) -> None:
        self.position = position
        self.declared = declared
        self.raw = raw
        super().__init__(
            f"unsupported argument type: parameter {position} "
            f"declared as {declared} is not supported"
        )


class ArgumentConversionError(StepArgumentError):
    """Raised when a raw value cannot become the declared parameter kind.

    Attributes:
        position: Zero-based parameter position.
        parameter_kind: Declared kind of the parameter.
        raw: Raw argument that failed to convert.
        reason: Why conversion failed.
    """

    kind = FailureKind.CONVERSION_FAILURE

    def __init__(
        self,
        position: int,
        parameter_kind: ParameterKind,
        raw: Any,
        reason: str,
    ) -> None:
        self.position = position
        self.parameter_kind = parameter_kind
        self.raw = raw
        self.reason = reason
        super().__init__(
            f"cannot convert argument {position}: {describe_raw(raw)} "
            f"to {parameter_kind.value}: {reason}"
        )
