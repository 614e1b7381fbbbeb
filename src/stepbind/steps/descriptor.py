"""Handler descriptors.

A HandlerDescriptor is built once, when a step handler is registered, and is
reused for every step that matches the handler. It records the handler's
parameter kinds so that the converter never has to look at Python type
annotations while steps run.
"""

from __future__ import annotations

import inspect
import os
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from stepbind.logging import get_logger
from stepbind.steps.arguments import DocString, Table
from stepbind.steps.errors import HandlerDefinitionError
from stepbind.steps.kinds import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    ParameterKind,
)

__all__ = [
    "HandlerDescriptor",
    "describe_handler",
    "classify_annotation",
]

logger = get_logger(__name__)

_ANNOTATION_KINDS: dict[Any, ParameterKind] = {
    Int8: ParameterKind.INT8,
    Int16: ParameterKind.INT16,
    Int32: ParameterKind.INT32,
    Int64: ParameterKind.INT64,
    int: ParameterKind.INT64,
    Float32: ParameterKind.FLOAT32,
    Float64: ParameterKind.FLOAT64,
    float: ParameterKind.FLOAT64,
    str: ParameterKind.TEXT,
    bytes: ParameterKind.BYTES,
    Table: ParameterKind.TABLE,
    DocString: ParameterKind.DOC_STRING,
}

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """Registered step handler together with its parameter kinds.

    Attributes:
        handler: Callable invoked with the converted arguments, positionally.
        kinds: Kind of each handler parameter, in declaration order.
        name: Handler name used in logs and reports.
        location: ``file:line`` of the handler definition, used as the
            report's match location.
        declared: Declared shape of each parameter as text (for messages).
        parameter_names: Name of each parameter.
    """

    handler: Callable[..., Any]
    kinds: tuple[ParameterKind, ...]
    name: str = ""
    location: str = ""
    declared: tuple[str, ...] = field(default=())
    parameter_names: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        for attr in ("declared", "parameter_names"):
            values = getattr(self, attr)
            if values and len(values) != len(self.kinds):
                raise ValueError(f"{attr} must have one entry per parameter kind")

    @property
    def arity(self) -> int:
        return len(self.kinds)

    def declared_shape(self, position: int) -> str:
        """Declared shape of a parameter, falling back to its kind."""
        if self.declared:
            return self.declared[position]
        return self.kinds[position].value


def _unwrap_annotated(annotation: Any) -> Any:
    if typing.get_origin(annotation) is typing.Annotated:
        return typing.get_args(annotation)[0]
    return annotation


def _optional_reference_kind(annotation: Any) -> ParameterKind | None:
    """Kind of ``Table | None`` / ``DocString | None``, None for anything else."""
    if typing.get_origin(annotation) not in (typing.Union, types.UnionType):
        return None
    members = [a for a in typing.get_args(annotation) if a is not type(None)]
    if len(members) != 1:
        return None
    kind = _ANNOTATION_KINDS.get(members[0])
    if kind is not None and kind.is_reference:
        return kind
    return None


def classify_annotation(annotation: Any) -> ParameterKind:
    """Map a resolved parameter annotation onto its ParameterKind.

    Example:
        >>> classify_annotation(Int16)
        <ParameterKind.INT16: 'int16'>
        >>> classify_annotation(list[str])
        <ParameterKind.UNSUPPORTED: 'unsupported'>
    """
    if annotation is inspect.Parameter.empty:
        return ParameterKind.UNSUPPORTED
    annotation = _unwrap_annotated(annotation)
    reference = _optional_reference_kind(annotation)
    if reference is not None:
        return reference
    try:
        return _ANNOTATION_KINDS.get(annotation, ParameterKind.UNSUPPORTED)
    except TypeError:
        # unhashable annotation objects
        return ParameterKind.UNSUPPORTED


def _format_annotation(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "<unannotated>"
    if isinstance(annotation, str):
        return annotation
    if typing.get_args(annotation):
        return repr(annotation).replace("typing.", "")
    if isinstance(annotation, type):
        return annotation.__qualname__
    return str(getattr(annotation, "__name__", repr(annotation)))


def _call_target(func: Callable[..., Any]) -> Callable[..., Any]:
    if inspect.isfunction(func) or inspect.ismethod(func):
        return func
    if inspect.isclass(func):
        # Parameters come from __init__; class-level annotations are not
        # parameters.
        init = func.__init__
        return init if inspect.isfunction(init) else func
    return getattr(func, "__call__", func)


def _resolve_hints(target: Callable[..., Any], name: str) -> dict[str, Any]:
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError) as e:
        # Unresolvable forward references leave those parameters unannotated,
        # which classifies them as unsupported.
        logger.warning("handler_annotations_unresolved", handler=name, error=str(e))
        return {}


def _location(func: Callable[..., Any]) -> str:
    code = getattr(inspect.unwrap(_call_target(func)), "__code__", None)
    if code is None:
        return ""
    return f"{os.path.basename(code.co_filename)}:{code.co_firstlineno}"


def describe_handler(
    func: Callable[..., Any], *, name: str | None = None
) -> HandlerDescriptor:
    """Build a HandlerDescriptor from a handler's signature.

    Each parameter is classified from its resolved annotation. Parameters that
    are not positional (``*args``, keyword-only, ``**kwargs``) are always
    unsupported, as is any annotation outside the supported set.

    Args:
        func: Step handler.
        name: Name for logs and reports (defaults to the qualified name).

    Returns:
        HandlerDescriptor for the handler.

    Raises:
        HandlerDefinitionError: If ``func`` is not callable or its signature
            cannot be inspected.

    Example:
        >>> def eat(count: Int8, table: Table | None) -> None: ...
        >>> describe_handler(eat).kinds
        (<ParameterKind.INT8: 'int8'>, <ParameterKind.TABLE: 'table'>)
    """
    handler_name = name or getattr(func, "__qualname__", None) or repr(func)
    if not callable(func):
        raise HandlerDefinitionError(
            f"Step handler '{handler_name}' must be callable. "
            f"Got {type(func).__name__} instead.",
            handler_name=handler_name,
        )

    try:
        signature = inspect.signature(func)
    except (ValueError, TypeError) as e:
        raise HandlerDefinitionError(
            f"Cannot inspect signature of step handler '{handler_name}': {e}",
            handler_name=handler_name,
        ) from e

    hints = _resolve_hints(_call_target(func), handler_name)

    kinds: list[ParameterKind] = []
    declared: list[str] = []
    names: list[str] = []
    for parameter in signature.parameters.values():
        annotation = hints.get(parameter.name, parameter.annotation)
        if parameter.kind in _POSITIONAL and not isinstance(annotation, str):
            kind = classify_annotation(annotation)
        else:
            kind = ParameterKind.UNSUPPORTED
        kinds.append(kind)
        declared.append(_format_annotation(annotation))
        names.append(parameter.name)

    descriptor = HandlerDescriptor(
        handler=func,
        kinds=tuple(kinds),
        name=handler_name,
        location=_location(func),
        declared=tuple(declared),
        parameter_names=tuple(names),
    )
    logger.debug(
        "handler_described",
        handler=handler_name,
        kinds=[k.value for k in descriptor.kinds],
    )
    return descriptor
