"""Step outcomes and the outcome classifier.

A step attempt either fully succeeds (the handler was called and reported no
problem) or fully fails, before invocation (argument count, unsupported
parameter type, conversion) or after it (handler-reported failure).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

__all__ = [
    "StepStatus",
    "FailureKind",
    "StepOutcome",
    "classify_result",
    "classify_exception",
]


class StepStatus(str, Enum):
    """Status of a step as it appears in reports.

    The engine only produces PASSED and FAILED. SKIPPED, UNDEFINED and PENDING
    are assigned by the scenario executor and accepted by the report formatter.
    """

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNDEFINED = "undefined"
    PENDING = "pending"


class FailureKind(str, Enum):
    """Why a step attempt failed."""

    ARGUMENT_COUNT_MISMATCH = "argument_count_mismatch"
    UNSUPPORTED_ARGUMENT_TYPE = "unsupported_argument_type"
    CONVERSION_FAILURE = "conversion_failure"
    HANDLER_REPORTED_FAILURE = "handler_reported_failure"
    HANDLER_RAISED = "handler_raised"

    @property
    def before_invocation(self) -> bool:
        """True when the handler was never called."""
        return self in (
            FailureKind.ARGUMENT_COUNT_MISMATCH,
            FailureKind.UNSUPPORTED_ARGUMENT_TYPE,
            FailureKind.CONVERSION_FAILURE,
        )


@dataclass(frozen=True, slots=True)
class StepOutcome:
    """Result of one step attempt.

    Attributes:
        status: PASSED or FAILED.
        message: Failure message, None for passed steps. Handler messages are
            kept exactly as the handler produced them.
        failure_kind: Failure classification, None for passed steps.
        duration_ns: Wall time of the attempt in nanoseconds.
        finished_at: UTC time the attempt finished, when measured.
    """

    status: StepStatus
    message: str | None = None
    failure_kind: FailureKind | None = None
    duration_ns: int = 0
    finished_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.status not in (StepStatus.PASSED, StepStatus.FAILED):
            raise ValueError("step outcome status must be passed or failed")
        if self.duration_ns < 0:
            raise ValueError("duration_ns must be non-negative")
        if self.status is StepStatus.FAILED:
            if self.message is None or self.failure_kind is None:
                raise ValueError("Failed outcomes must have a message and a kind")
        elif self.message is not None or self.failure_kind is not None:
            raise ValueError("Passed outcomes cannot carry a failure")

    @classmethod
    def create_passed(cls) -> StepOutcome:
        return cls(status=StepStatus.PASSED)

    @classmethod
    def create_failed(cls, message: str, kind: FailureKind) -> StepOutcome:
        return cls(status=StepStatus.FAILED, message=message, failure_kind=kind)

    @property
    def passed(self) -> bool:
        return self.status is StepStatus.PASSED

    def with_timing(self, duration_ns: int, finished_at: datetime) -> StepOutcome:
        """Return a copy stamped with the attempt's timing."""
        return dataclasses.replace(
            self, duration_ns=duration_ns, finished_at=finished_at
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging and report assembly."""
        return {
            "status": self.status.value,
            "message": self.message,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "duration_ns": self.duration_ns,
            "finished_at": (
                self.finished_at.isoformat() if self.finished_at else None
            ),
        }


def classify_result(result: Any) -> StepOutcome:
    """Classify a handler's return value.

    ``None`` (or any other value) means no problem occurred. An exception
    instance returned by the handler is an explicit failure and its text is
    reported unchanged.

    Example:
        >>> classify_result(None).passed
        True
        >>> classify_result(ValueError("expected 5 apples, got 4")).message
        'expected 5 apples, got 4'
    """
    if isinstance(result, BaseException):
        return StepOutcome.create_failed(
            str(result), FailureKind.HANDLER_REPORTED_FAILURE
        )
    return StepOutcome.create_passed()


def classify_exception(exc: Exception, *, capture: bool) -> StepOutcome:
    """Classify an exception raised by a handler.

    AssertionError is an explicit failure and keeps its text unchanged. Any
    other exception becomes a HANDLER_RAISED failure when ``capture`` is true
    and is re-raised otherwise.
    """
    if isinstance(exc, AssertionError):
        return StepOutcome.create_failed(
            str(exc), FailureKind.HANDLER_REPORTED_FAILURE
        )
    if not capture:
        raise exc
    return StepOutcome.create_failed(
        f"{type(exc).__name__}: {exc}", FailureKind.HANDLER_RAISED
    )
