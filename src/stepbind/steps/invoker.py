"""Step invoker.

Runs one step attempt: argument count check, argument conversion, handler
call and outcome classification, as a single synchronous call. The handler is
only called once every argument converted.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from stepbind.config import InvocationConfig
from stepbind.logging import get_logger
from stepbind.steps.arguments import raw_argument
from stepbind.steps.converter import convert_arguments
from stepbind.steps.descriptor import HandlerDescriptor
from stepbind.steps.errors import StepArgumentError
from stepbind.steps.outcome import (
    StepOutcome,
    classify_exception,
    classify_result,
)

__all__ = [
    "StepInvoker",
    "invoke",
    "attempt_step",
]

logger = get_logger(__name__)


def invoke(descriptor: HandlerDescriptor, values: Sequence[Any]) -> Any:
    """Call the handler with fully converted values, in declaration order.

    Raises:
        ValueError: If the number of values differs from the handler arity.
    """
    if len(values) != descriptor.arity:
        raise ValueError(
            f"handler '{descriptor.name}' takes {descriptor.arity} values, "
            f"got {len(values)}"
        )
    return descriptor.handler(*values)


class StepInvoker:
    """Attempts steps against their handler descriptors.

    The invoker keeps no state between attempts; one instance can serve any
    number of steps.

    Example:
        ```python
        invoker = StepInvoker(config.invocation)
        outcome = invoker.attempt(descriptor, [TextValue("5")])
        if not outcome.passed:
            print(outcome.failure_kind, outcome.message)
        ```
    """

    def __init__(self, config: InvocationConfig | None = None) -> None:
        self._config = config or InvocationConfig()

    @property
    def config(self) -> InvocationConfig:
        return self._config

    def attempt(
        self, descriptor: HandlerDescriptor, arguments: Sequence[Any]
    ) -> StepOutcome:
        """Convert arguments, call the handler and classify the outcome.

        Args:
            descriptor: Handler to run.
            arguments: Raw arguments, one per handler parameter. Plain ``str``,
                Table and DocString values are accepted as their raw tags.

        Returns:
            StepOutcome stamped with the attempt duration and finish time.

        Raises:
            Exception: Whatever the handler raised, when the configuration
                disables exception capture (AssertionError excepted).
        """
        log = logger.bind(handler=descriptor.name)
        started = time.perf_counter_ns()
        outcome = self._attempt(descriptor, arguments, log)
        duration_ns = time.perf_counter_ns() - started
        outcome = outcome.with_timing(duration_ns, datetime.now(UTC))

        if outcome.passed:
            log.debug("step_passed", duration_ns=duration_ns)
        else:
            log.info(
                "step_failed",
                failure_kind=outcome.failure_kind,
                error=outcome.message,
                duration_ns=duration_ns,
            )
        return outcome

    def _attempt(
        self,
        descriptor: HandlerDescriptor,
        arguments: Sequence[Any],
        log: Any,
    ) -> StepOutcome:
        try:
            values = convert_arguments(
                descriptor.kinds,
                [raw_argument(a) for a in arguments],
                declared=descriptor.declared or None,
                encoding=self._config.text_encoding,
            )
        except StepArgumentError as e:
            log.debug("argument_conversion_failed", kind=e.kind.value, error=e.message)
            return StepOutcome.create_failed(e.message, e.kind)

        try:
            result = invoke(descriptor, values)
        except Exception as e:
            if not self._config.capture_exceptions:
                log.debug("handler_exception_propagated", error_type=type(e).__name__)
            return classify_exception(e, capture=self._config.capture_exceptions)
        return classify_result(result)


def attempt_step(
    descriptor: HandlerDescriptor,
    arguments: Sequence[Any],
    config: InvocationConfig | None = None,
) -> StepOutcome:
    """Attempt a single step with a throwaway invoker.

    Example:
        >>> def has_bytes(data: bytes) -> None:
        ...     assert data == b"str"
        >>> attempt_step(describe_handler(has_bytes), ["str"]).passed
        True
    """
    return StepInvoker(config).attempt(descriptor, arguments)
