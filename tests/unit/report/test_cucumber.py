"""Unit tests for the cucumber JSON report formatter."""

from __future__ import annotations

import io
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from stepbind.config import ReportConfig
from stepbind.report import (
    CommentRecord,
    CucumberFormatter,
    DocStringRecord,
    ExampleRowRecord,
    FeatureRecord,
    ScenarioRecord,
    StepRecord,
    TagRecord,
    make_cuke_id,
)
from stepbind.steps import StepStatus

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


def ms(value: int) -> datetime:
    return T0 + timedelta(milliseconds=value)


@pytest.fixture
def plain_scenario() -> ScenarioRecord:
    return ScenarioRecord(
        id="3",
        keyword="Scenario",
        name="Eat 5 out of 12",
        line=5,
        started_at=T0,
        steps=[
            StepRecord(
                id="7",
                keyword="Then ",
                text="I should have 7 cucumbers",
                line=8,
                status=StepStatus.SKIPPED,
                match_location="steps.py:30",
            ),
            StepRecord(
                id="5",
                keyword="Given ",
                text="there are 12 cucumbers",
                line=6,
                status=StepStatus.PASSED,
                match_location="steps.py:10",
                finished_at=ms(1),
            ),
            StepRecord(
                id="6",
                keyword="When ",
                text="I eat 5 cucumbers",
                line=7,
                status=StepStatus.FAILED,
                error_message="expected 5, got 4",
                match_location="steps.py:20",
                finished_at=ms(3),
            ),
        ],
    )


@pytest.fixture
def outline_scenario() -> ScenarioRecord:
    return ScenarioRecord(
        id="10",
        keyword="Scenario Outline",
        name="Eat 3",
        line=11,
        tags=[TagRecord(name="@outline", line=10)],
        started_at=T0,
        example=ExampleRowRecord(
            name="Small Amounts",
            index=0,
            line=16,
            tags=[TagRecord(name="@ex", line=14)],
        ),
        steps=[
            StepRecord(
                id="1",
                keyword="When ",
                text="I eat 3 cucumbers",
                line=12,
                status=StepStatus.UNDEFINED,
                doc_string=DocStringRecord(
                    content="hello", content_type=" text/plain ", line=13
                ),
            ),
        ],
    )


@pytest.fixture
def feature(
    plain_scenario: ScenarioRecord, outline_scenario: ScenarioRecord
) -> FeatureRecord:
    return FeatureRecord(
        uri="features/eat.feature",
        keyword="Feature",
        name="Eat Cucumbers",
        tags=[TagRecord(name="@food", line=1)],
        comments=[CommentRecord(text="  # language: en  ", line=1)],
        scenarios=[outline_scenario, plain_scenario],
    )


def render(features: list[FeatureRecord], **config: Any) -> list[dict[str, Any]]:
    formatter = CucumberFormatter(ReportConfig(**config))
    document: list[dict[str, Any]] = json.loads(formatter.render(features))
    return document


class TestMakeCukeId:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Eat Cucumbers", "eat-cucumbers"),
            ("Eat 5 out of 12", "eat-5-out-of-12"),
            ("already-dashed", "already-dashed"),
            ("", ""),
        ],
    )
    def test_make_cuke_id(self, name: str, expected: str) -> None:
        assert make_cuke_id(name) == expected


class TestFeatureOutput:
    """Tests for feature level fields."""

    def test_feature_fields(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])

        assert list(data) == [
            "uri",
            "id",
            "keyword",
            "name",
            "description",
            "line",
            "comments",
            "tags",
            "elements",
        ]
        assert data["uri"] == "features/eat.feature"
        assert data["id"] == "eat-cucumbers"
        assert data["description"] == ""
        assert data["line"] == 1
        assert data["comments"] == [{"value": "# language: en", "line": 1}]
        assert data["tags"] == [{"name": "@food", "line": 1}]

    def test_empty_lists_omitted(self) -> None:
        bare = FeatureRecord(uri="features/x.feature", keyword="Feature", name="X")
        (data,) = render([bare])

        assert "comments" not in data
        assert "tags" not in data
        assert "elements" not in data
        assert data["description"] == ""

    def test_features_sorted_by_name(self) -> None:
        features = [
            FeatureRecord(uri=f"features/{name}.feature", keyword="Feature", name=name)
            for name in ("Zebra", "Apple", "Mango")
        ]
        names = [data["name"] for data in render(features)]
        assert names == ["Apple", "Mango", "Zebra"]

    def test_no_features(self) -> None:
        assert render([]) == []


class TestElementOutput:
    """Tests for scenario elements."""

    def test_scenarios_sorted_by_numeric_id(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        assert [e["name"] for e in data["elements"]] == ["Eat 5 out of 12", "Eat 3"]

    def test_plain_scenario(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        element = data["elements"][0]

        assert list(element) == [
            "id",
            "keyword",
            "name",
            "description",
            "line",
            "type",
            "tags",
            "steps",
        ]
        assert element["id"] == "eat-cucumbers;eat-5-out-of-12"
        assert element["line"] == 5
        assert element["type"] == "scenario"
        assert element["tags"] == [{"name": "@food", "line": 1}]

    def test_outline_scenario(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        element = data["elements"][1]

        assert element["id"] == "eat-cucumbers;eat-3;small-amounts;2"
        assert element["keyword"] == "Scenario Outline"
        assert element["line"] == 16
        assert element["tags"] == [
            {"name": "@food", "line": 1},
            {"name": "@outline", "line": 10},
            {"name": "@ex", "line": 14},
        ]

    def test_scenario_without_steps_or_tags(self) -> None:
        feature = FeatureRecord(
            uri="features/x.feature",
            keyword="Feature",
            name="X",
            scenarios=[
                ScenarioRecord(id="1", keyword="Scenario", name="Empty", line=3)
            ],
        )
        (data,) = render([feature])
        element = data["elements"][0]

        assert "steps" not in element
        assert "tags" not in element


class TestStepOutput:
    """Tests for step entries."""

    def test_steps_sorted_and_timed(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        steps = data["elements"][0]["steps"]

        assert [s["line"] for s in steps] == [6, 7, 8]
        assert steps[0] == {
            "keyword": "Given ",
            "name": "there are 12 cucumbers",
            "line": 6,
            "match": {"location": "steps.py:10"},
            "result": {"status": "passed", "duration": 1_000_000},
        }
        assert steps[1]["result"] == {
            "status": "failed",
            "error_message": "expected 5, got 4",
            "duration": 2_000_000,
        }

    def test_skipped_step_has_no_duration(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        skipped = data["elements"][0]["steps"][2]

        assert skipped["result"] == {"status": "skipped"}
        assert skipped["match"] == {"location": "steps.py:30"}

    def test_undefined_outline_step(self, feature: FeatureRecord) -> None:
        (data,) = render([feature])
        (step,) = data["elements"][1]["steps"]

        assert list(step) == [
            "keyword",
            "name",
            "line",
            "doc_string",
            "match",
            "result",
        ]
        assert step["line"] == 16
        assert step["match"] == {"location": "features/eat.feature:12"}
        assert step["result"] == {"status": "undefined"}
        assert step["doc_string"] == {
            "value": "hello",
            "content_type": "text/plain",
            "line": 13,
        }

    def test_pending_step_matches_its_own_line(self) -> None:
        step = StepRecord(
            id="1",
            keyword="Given ",
            text="something pending",
            line=4,
            status=StepStatus.PENDING,
            match_location="steps.py:99",
            finished_at=ms(5),
        )
        feature = FeatureRecord(
            uri="features/p.feature",
            keyword="Feature",
            name="P",
            scenarios=[
                ScenarioRecord(
                    id="1",
                    keyword="Scenario",
                    name="S",
                    line=3,
                    started_at=T0,
                    steps=[step],
                )
            ],
        )
        (data,) = render([feature])
        (cuke_step,) = data["elements"][0]["steps"]

        assert cuke_step["match"] == {"location": "features/p.feature:4"}
        assert cuke_step["result"] == {"status": "pending"}

    def test_rows_and_missing_match(self) -> None:
        step = StepRecord(
            id="1",
            keyword="Given ",
            text="these users",
            line=4,
            status=StepStatus.PASSED,
            rows=[["name", "age"], ["ann", "7"]],
        )
        feature = FeatureRecord(
            uri="features/u.feature",
            keyword="Feature",
            name="U",
            scenarios=[
                ScenarioRecord(
                    id="1", keyword="Scenario", name="S", line=3, steps=[step]
                )
            ],
        )
        (data,) = render([feature])
        (cuke_step,) = data["elements"][0]["steps"]

        assert cuke_step["match"] == {"location": ""}
        assert cuke_step["rows"] == [
            {"cells": ["name", "age"]},
            {"cells": ["ann", "7"]},
        ]
        assert "duration" not in cuke_step["result"]


class TestRendering:
    """Tests for JSON text rendering."""

    def test_default_indent(self, feature: FeatureRecord) -> None:
        text = CucumberFormatter().render([feature])
        assert text.endswith("\n")
        assert '\n    {\n        "uri"' in text

    def test_zero_indent_renders_one_line(self, feature: FeatureRecord) -> None:
        text = CucumberFormatter(ReportConfig(indent=0)).render([feature])
        assert text.count("\n") == 1

    def test_non_ascii_kept(self) -> None:
        feature = FeatureRecord(
            uri="features/c.feature", keyword="Fonctionnalité", name="Café"
        )
        text = CucumberFormatter().render([feature])
        assert "Fonctionnalité" in text
        assert '"café"' in text

    def test_write_to_stream(self, feature: FeatureRecord) -> None:
        stream = io.StringIO()
        formatter = CucumberFormatter()
        formatter.write([feature], stream)
        assert stream.getvalue() == formatter.render([feature])
