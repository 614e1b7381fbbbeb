"""Cucumber-compatible JSON reporting of step outcomes."""

from __future__ import annotations

from stepbind.report.cucumber import CucumberFormatter, make_cuke_id
from stepbind.report.models import (
    CommentRecord,
    DocStringRecord,
    ExampleRowRecord,
    FeatureRecord,
    ScenarioRecord,
    StepRecord,
    TagRecord,
    load_features,
)

__all__ = [
    "CucumberFormatter",
    "make_cuke_id",
    "CommentRecord",
    "DocStringRecord",
    "ExampleRowRecord",
    "FeatureRecord",
    "ScenarioRecord",
    "StepRecord",
    "TagRecord",
    "load_features",
]
