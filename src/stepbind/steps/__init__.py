"""Step argument conversion and invocation engine.

Data flows one way: a HandlerDescriptor plus the step's raw arguments go
through the converter, the invoker calls the handler, and the classifier
turns the handler's behaviour into a StepOutcome.

Example:
    >>> from stepbind.steps import StepInvoker, Table, TableValue, describe_handler
    >>> def these_users(users: Table | None) -> None:
    ...     assert users is None or len(users) > 1
    >>> StepInvoker().attempt(describe_handler(these_users), [TableValue()]).passed
    True
"""

from __future__ import annotations

from stepbind.steps.arguments import (
    DocString,
    DocStringValue,
    RawArgument,
    Table,
    TableRow,
    TableValue,
    TextValue,
    raw_argument,
)
from stepbind.steps.converter import convert_argument, convert_arguments
from stepbind.steps.descriptor import (
    HandlerDescriptor,
    classify_annotation,
    describe_handler,
)
from stepbind.steps.errors import (
    ArgumentConversionError,
    ArgumentCountMismatchError,
    HandlerDefinitionError,
    StepArgumentError,
    StepError,
    UnsupportedArgumentTypeError,
)
from stepbind.steps.invoker import StepInvoker, attempt_step, invoke
from stepbind.steps.kinds import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    ParameterKind,
)
from stepbind.steps.outcome import (
    FailureKind,
    StepOutcome,
    StepStatus,
    classify_exception,
    classify_result,
)

__all__ = [
    # Kinds
    "ParameterKind",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Float64",
    # Raw arguments
    "DocString",
    "DocStringValue",
    "RawArgument",
    "Table",
    "TableRow",
    "TableValue",
    "TextValue",
    "raw_argument",
    # Descriptor
    "HandlerDescriptor",
    "classify_annotation",
    "describe_handler",
    # Conversion and invocation
    "convert_argument",
    "convert_arguments",
    "StepInvoker",
    "attempt_step",
    "invoke",
    # Outcome
    "FailureKind",
    "StepOutcome",
    "StepStatus",
    "classify_exception",
    "classify_result",
    # Errors
    "ArgumentConversionError",
    "ArgumentCountMismatchError",
    "HandlerDefinitionError",
    "StepArgumentError",
    "StepError",
    "UnsupportedArgumentTypeError",
]
