"""Unit tests for step outcomes and the outcome classifier."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from stepbind.steps import (
    FailureKind,
    StepOutcome,
    StepStatus,
    classify_exception,
    classify_result,
)


class TestStepOutcome:
    """Tests for StepOutcome invariants and helpers."""

    def test_create_passed(self) -> None:
        outcome = StepOutcome.create_passed()
        assert outcome.passed
        assert outcome.status is StepStatus.PASSED
        assert outcome.message is None
        assert outcome.failure_kind is None

    def test_create_failed(self) -> None:
        outcome = StepOutcome.create_failed("boom", FailureKind.HANDLER_RAISED)
        assert not outcome.passed
        assert outcome.message == "boom"
        assert outcome.failure_kind is FailureKind.HANDLER_RAISED

    def test_empty_failure_message_allowed(self) -> None:
        outcome = StepOutcome.create_failed("", FailureKind.HANDLER_REPORTED_FAILURE)
        assert outcome.message == ""

    @pytest.mark.parametrize(
        "status", [StepStatus.SKIPPED, StepStatus.UNDEFINED, StepStatus.PENDING]
    )
    def test_only_passed_or_failed(self, status: StepStatus) -> None:
        with pytest.raises(ValueError, match="passed or failed"):
            StepOutcome(status=status)

    def test_failed_requires_message_and_kind(self) -> None:
        with pytest.raises(ValueError, match="must have a message and a kind"):
            StepOutcome(status=StepStatus.FAILED, message="x")
        with pytest.raises(ValueError, match="must have a message and a kind"):
            StepOutcome(
                status=StepStatus.FAILED, failure_kind=FailureKind.HANDLER_RAISED
            )

    def test_passed_cannot_carry_failure(self) -> None:
        with pytest.raises(ValueError, match="cannot carry a failure"):
            StepOutcome(status=StepStatus.PASSED, message="x")

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            StepOutcome(status=StepStatus.PASSED, duration_ns=-1)

    def test_with_timing_returns_copy(self) -> None:
        finished = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        outcome = StepOutcome.create_passed()
        timed = outcome.with_timing(1500, finished)

        assert timed.duration_ns == 1500
        assert timed.finished_at == finished
        assert outcome.duration_ns == 0
        assert outcome.finished_at is None

    def test_to_dict(self) -> None:
        finished = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        outcome = StepOutcome.create_failed(
            "bad", FailureKind.CONVERSION_FAILURE
        ).with_timing(10, finished)

        assert outcome.to_dict() == {
            "status": "failed",
            "message": "bad",
            "failure_kind": "conversion_failure",
            "duration_ns": 10,
            "finished_at": "2024-01-02T03:04:05+00:00",
        }

    def test_to_dict_passed(self) -> None:
        data = StepOutcome.create_passed().to_dict()
        assert data["status"] == "passed"
        assert data["failure_kind"] is None
        assert data["finished_at"] is None


class TestFailureKind:
    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (FailureKind.ARGUMENT_COUNT_MISMATCH, True),
            (FailureKind.UNSUPPORTED_ARGUMENT_TYPE, True),
            (FailureKind.CONVERSION_FAILURE, True),
            (FailureKind.HANDLER_REPORTED_FAILURE, False),
            (FailureKind.HANDLER_RAISED, False),
        ],
    )
    def test_before_invocation(self, kind: FailureKind, expected: bool) -> None:
        assert kind.before_invocation is expected


class TestClassifier:
    """Tests for classify_result and classify_exception."""

    def test_none_passes(self) -> None:
        assert classify_result(None).passed

    @pytest.mark.parametrize("value", [0, False, "", "text", [1], object()])
    def test_other_values_pass(self, value: object) -> None:
        assert classify_result(value).passed

    def test_returned_exception_fails_verbatim(self) -> None:
        outcome = classify_result(ValueError("  spaced  message "))
        assert outcome.failure_kind is FailureKind.HANDLER_REPORTED_FAILURE
        assert outcome.message == "  spaced  message "

    def test_assertion_error_is_reported_failure(self) -> None:
        outcome = classify_exception(AssertionError("expected 5"), capture=True)
        assert outcome.failure_kind is FailureKind.HANDLER_REPORTED_FAILURE
        assert outcome.message == "expected 5"

    def test_assertion_error_without_capture(self) -> None:
        outcome = classify_exception(AssertionError("expected 5"), capture=False)
        assert outcome.failure_kind is FailureKind.HANDLER_REPORTED_FAILURE

    def test_other_exception_captured(self) -> None:
        outcome = classify_exception(KeyError("k"), capture=True)
        assert outcome.failure_kind is FailureKind.HANDLER_RAISED
        assert outcome.message == "KeyError: 'k'"

    def test_other_exception_reraised(self) -> None:
        with pytest.raises(ZeroDivisionError):
            classify_exception(ZeroDivisionError("x"), capture=False)
