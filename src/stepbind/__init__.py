"""stepbind - step argument conversion and invocation for BDD test runners.

Once a step has been matched to a handler, stepbind converts the raw textual
and tabular arguments into the handler's declared parameter kinds, calls the
handler and classifies the outcome.

Example:
    >>> from stepbind import Int8, StepInvoker, TextValue, describe_handler
    >>> def i_have_apples(count: Int8) -> None:
    ...     assert count > 0
    >>> outcome = StepInvoker().attempt(
    ...     describe_handler(i_have_apples), [TextValue("5")]
    ... )
    >>> outcome.passed
    True
"""

from __future__ import annotations

from stepbind.steps import (
    ArgumentConversionError,
    ArgumentCountMismatchError,
    DocString,
    DocStringValue,
    FailureKind,
    Float32,
    Float64,
    HandlerDefinitionError,
    HandlerDescriptor,
    Int8,
    Int16,
    Int32,
    Int64,
    ParameterKind,
    RawArgument,
    StepArgumentError,
    StepInvoker,
    StepOutcome,
    StepStatus,
    Table,
    TableRow,
    TableValue,
    TextValue,
    UnsupportedArgumentTypeError,
    attempt_step,
    convert_arguments,
    describe_handler,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ArgumentConversionError",
    "ArgumentCountMismatchError",
    "DocString",
    "DocStringValue",
    "FailureKind",
    "Float32",
    "Float64",
    "HandlerDefinitionError",
    "HandlerDescriptor",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "ParameterKind",
    "RawArgument",
    "StepArgumentError",
    "StepInvoker",
    "StepOutcome",
    "StepStatus",
    "Table",
    "TableRow",
    "TableValue",
    "TextValue",
    "UnsupportedArgumentTypeError",
    "attempt_step",
    "convert_arguments",
    "describe_handler",
]
