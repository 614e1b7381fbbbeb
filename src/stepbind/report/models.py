"""Pydantic records consumed by the cucumber report formatter.

The scenario executor assembles these records from the parsed feature files
and from the StepOutcome of every step attempt. They can also be loaded from
a YAML/JSON results file with ``load_features``.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from stepbind.steps.descriptor import HandlerDescriptor
from stepbind.steps.outcome import StepOutcome, StepStatus

__all__ = [
    "TagRecord",
    "CommentRecord",
    "DocStringRecord",
    "ExampleRowRecord",
    "StepRecord",
    "ScenarioRecord",
    "FeatureRecord",
    "load_features",
]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TagRecord(_Record):
    name: str = Field(..., min_length=1)
    line: int = Field(default=0, ge=0)


class CommentRecord(_Record):
    text: str
    line: int = Field(default=0, ge=0)


class DocStringRecord(_Record):
    """Doc string attached to a step.

    Attributes:
        content: Text of the block.
        content_type: Media type after the opening delimiter.
        line: Line of the opening delimiter.
    """

    content: str
    content_type: str = ""
    line: int = Field(default=0, ge=0)


class ExampleRowRecord(_Record):
    """Examples table row a scenario outline was expanded from.

    Attributes:
        name: Name of the Examples block.
        index: Zero-based index of the row in the table body.
        line: Line of the row.
        tags: Tags of the Examples block.
    """

    name: str = ""
    index: int = Field(..., ge=0)
    line: int = Field(..., ge=0)
    tags: list[TagRecord] = Field(default_factory=list)


class StepRecord(_Record):
    """One executed (or skipped) step.

    Attributes:
        id: Step identifier; steps are reported in id order.
        keyword: Gherkin keyword including trailing space ("Given ").
        text: Step text.
        line: Line of the step in the feature file.
        status: Step status.
        error_message: Failure message, if any.
        match_location: Location of the matched handler (``file:line``).
        finished_at: Time the step finished; drives the reported duration.
        doc_string: Doc string attached to the step.
        rows: Data table attached to the step, as cell values.
    """

    id: str = Field(..., min_length=1)
    keyword: str
    text: str
    line: int = Field(..., ge=0)
    status: StepStatus
    error_message: str | None = None
    match_location: str | None = None
    finished_at: datetime | None = None
    doc_string: DocStringRecord | None = None
    rows: list[list[str]] | None = None

    @classmethod
    def from_outcome(
        cls,
        *,
        id: str,
        keyword: str,
        text: str,
        line: int,
        outcome: StepOutcome,
        descriptor: HandlerDescriptor | None = None,
        doc_string: DocStringRecord | None = None,
        rows: Sequence[Sequence[str]] | None = None,
    ) -> StepRecord:
        """Build a record from the outcome of a step attempt."""
        return cls(
            id=id,
            keyword=keyword,
            text=text,
            line=line,
            status=outcome.status,
            error_message=outcome.message,
            match_location=descriptor.location if descriptor else None,
            finished_at=outcome.finished_at,
            doc_string=doc_string,
            rows=[list(row) for row in rows] if rows is not None else None,
        )


class ScenarioRecord(_Record):
    """One scenario (or one expanded scenario outline row).

    Attributes:
        id: Scenario identifier; scenarios are reported in id order.
        keyword: Gherkin keyword ("Scenario", "Scenario Outline").
        name: Scenario name after outline expansion.
        description: Free text below the scenario line.
        line: Line of the scenario.
        tags: Scenario tags.
        started_at: Time the scenario started.
        example: Examples row for expanded outlines.
        steps: Steps of the scenario.
    """

    id: str = Field(..., min_length=1)
    keyword: str
    name: str
    description: str = ""
    line: int = Field(..., ge=0)
    tags: list[TagRecord] = Field(default_factory=list)
    started_at: datetime | None = None
    example: ExampleRowRecord | None = None
    steps: list[StepRecord] = Field(default_factory=list)


class FeatureRecord(_Record):
    uri: str
    keyword: str
    name: str
    description: str = ""
    line: int = Field(default=1, ge=0)
    tags: list[TagRecord] = Field(default_factory=list)
    comments: list[CommentRecord] = Field(default_factory=list)
    scenarios: list[ScenarioRecord] = Field(default_factory=list)


_FEATURES_ADAPTER = TypeAdapter(list[FeatureRecord])


def load_features(data: Any) -> list[FeatureRecord]:
    """Validate plain data (from YAML or JSON) into feature records.

    Accepts either a list of features or a mapping with a ``features`` key.

    Raises:
        pydantic.ValidationError: If the data does not match the schema.
    """
    if isinstance(data, dict) and "features" in data:
        data = data["features"]
    return _FEATURES_ADAPTER.validate_python(data)
