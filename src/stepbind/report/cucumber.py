"""Cucumber JSON report formatter.

Renders feature records into the JSON document produced by the reference
ruby cucumber implementation. Field order and omission rules follow that
output: empty lists, empty error messages and missing durations are left
out, while ``description`` and ``match`` are always present.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import IO, Any

from stepbind.config import ReportConfig
from stepbind.logging import get_logger
from stepbind.report.models import (
    FeatureRecord,
    ScenarioRecord,
    StepRecord,
    TagRecord,
)
from stepbind.steps.outcome import StepStatus

__all__ = [
    "CucumberFormatter",
    "CukeFeature",
    "CukeElement",
    "CukeStep",
    "make_cuke_id",
]

logger = get_logger(__name__)

# Statuses whose steps never ran, so they carry no duration
_UNTIMED = (StepStatus.UNDEFINED, StepStatus.PENDING, StepStatus.SKIPPED)

# Statuses without a matched handler; the match points at the step itself
_UNMATCHED = (StepStatus.UNDEFINED, StepStatus.PENDING)


def make_cuke_id(name: str) -> str:
    """Lower-case a name and replace spaces with dashes."""
    return name.lower().replace(" ", "-")


def _sort_key(identifier: str) -> tuple[int, int, str]:
    # numeric ids sort numerically, everything else lexically after them
    if identifier.isdigit():
        return 0, int(identifier), ""
    return 1, 0, identifier


def _nanoseconds(delta: timedelta) -> int:
    return (delta // timedelta(microseconds=1)) * 1000


def _tags(tags: Sequence[TagRecord]) -> list[dict[str, Any]]:
    return [{"name": tag.name, "line": tag.line} for tag in tags]


@dataclass(slots=True)
class CukeStep:
    keyword: str
    name: str
    line: int
    match_location: str
    status: str
    error_message: str = ""
    duration: int | None = None
    doc_string: dict[str, Any] | None = None
    rows: list[list[str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "keyword": self.keyword,
            "name": self.name,
            "line": self.line,
        }
        if self.doc_string is not None:
            data["doc_string"] = self.doc_string
        data["match"] = {"location": self.match_location}
        result: dict[str, Any] = {"status": self.status}
        if self.error_message:
            result["error_message"] = self.error_message
        if self.duration is not None:
            result["duration"] = self.duration
        data["result"] = result
        if self.rows:
            data["rows"] = [{"cells": cells} for cells in self.rows]
        return data


@dataclass(slots=True)
class CukeElement:
    id: str
    keyword: str
    name: str
    description: str
    line: int
    type: str = "scenario"
    tags: list[dict[str, Any]] = field(default_factory=list)
    steps: list[CukeStep] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "keyword": self.keyword,
            "name": self.name,
            "description": self.description,
            "line": self.line,
            "type": self.type,
        }
        if self.tags:
            data["tags"] = self.tags
        if self.steps:
            data["steps"] = [step.to_dict() for step in self.steps]
        return data


@dataclass(slots=True)
class CukeFeature:
    uri: str
    id: str
    keyword: str
    name: str
    description: str
    line: int
    comments: list[dict[str, Any]] = field(default_factory=list)
    tags: list[dict[str, Any]] = field(default_factory=list)
    elements: list[CukeElement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "uri": self.uri,
            "id": self.id,
            "keyword": self.keyword,
            "name": self.name,
            "description": self.description,
            "line": self.line,
        }
        if self.comments:
            data["comments"] = self.comments
        if self.tags:
            data["tags"] = self.tags
        if self.elements:
            data["elements"] = [element.to_dict() for element in self.elements]
        return data


class CucumberFormatter:
    """Builds and renders cucumber JSON documents.

    Example:
        ```python
        formatter = CucumberFormatter(config.report)
        formatter.write(features, sys.stdout)
        ```
    """

    def __init__(self, config: ReportConfig | None = None) -> None:
        self._config = config or ReportConfig()

    def build(self, features: Sequence[FeatureRecord]) -> list[CukeFeature]:
        """Build the report structure, features sorted by name."""
        return [
            self._build_feature(feature)
            for feature in sorted(features, key=lambda f: f.name)
        ]

    def render(self, features: Sequence[FeatureRecord]) -> str:
        """Render the report as JSON text with a trailing newline."""
        document = [feature.to_dict() for feature in self.build(features)]
        indent = self._config.indent or None
        return json.dumps(document, indent=indent, ensure_ascii=False) + "\n"

    def write(self, features: Sequence[FeatureRecord], stream: IO[str]) -> None:
        stream.write(self.render(features))
        logger.debug("cucumber_report_written", features=len(features))

    def _build_feature(self, feature: FeatureRecord) -> CukeFeature:
        cuke_feature = CukeFeature(
            uri=feature.uri,
            id=make_cuke_id(feature.name),
            keyword=feature.keyword,
            name=feature.name,
            description=feature.description,
            line=feature.line,
            comments=[
                {"value": comment.text.strip(), "line": comment.line}
                for comment in feature.comments
            ],
            tags=_tags(feature.tags),
        )

        for scenario in sorted(feature.scenarios, key=lambda s: _sort_key(s.id)):
            element = self._build_element(feature, scenario)
            element.id = f"{cuke_feature.id};{make_cuke_id(element.name)}{element.id}"
            element.tags = cuke_feature.tags + element.tags
            cuke_feature.elements.append(element)

        return cuke_feature

    def _build_element(
        self, feature: FeatureRecord, scenario: ScenarioRecord
    ) -> CukeElement:
        element = CukeElement(
            id="",
            keyword=scenario.keyword,
            name=scenario.name,
            description=scenario.description,
            line=scenario.line,
            tags=_tags(scenario.tags),
        )

        example = scenario.example
        if example is not None:
            element.tags.extend(_tags(example.tags))
            element.id = f";{make_cuke_id(example.name)};{example.index + 2}"
            element.line = example.line

        previous_finish = scenario.started_at
        for step in sorted(scenario.steps, key=lambda s: _sort_key(s.id)):
            cuke_step = self._build_step(feature, scenario, step)
            cuke_step.duration = self._duration(step, previous_finish)
            previous_finish = step.finished_at
            element.steps.append(cuke_step)

        return element

    def _build_step(
        self, feature: FeatureRecord, scenario: ScenarioRecord, step: StepRecord
    ) -> CukeStep:
        line = scenario.example.line if scenario.example is not None else step.line

        if step.status in _UNMATCHED:
            match_location = f"{feature.uri}:{step.line}"
        else:
            match_location = step.match_location or ""

        doc_string = None
        if step.doc_string is not None:
            doc_string = {
                "value": step.doc_string.content,
                "content_type": step.doc_string.content_type.strip(),
                "line": step.doc_string.line,
            }

        return CukeStep(
            keyword=step.keyword,
            name=step.text,
            line=line,
            match_location=match_location,
            status=step.status.value,
            error_message=step.error_message or "",
            doc_string=doc_string,
            rows=[list(cells) for cells in step.rows or []],
        )

    @staticmethod
    def _duration(step: StepRecord, previous_finish: datetime | None) -> int | None:
        if step.status in _UNTIMED:
            return None
        if step.finished_at is None or previous_finish is None:
            return None
        return _nanoseconds(step.finished_at - previous_finish)
