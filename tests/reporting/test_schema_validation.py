"""Tests for JSON Schema validation of evaluation results and reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from permitlogic.config import PermitLogicConfig, config_fingerprint
from permitlogic.constants.reporting import SCHEMA_VERSION
from permitlogic.engine.runtime import PolicyEngine
from permitlogic.model.policy import Category
from permitlogic.reporting.writer import build_report, write_report

SCHEMAS_DIR: Path = Path(__file__).resolve().parents[2] / "schemas"
RESULT_SCHEMA_PATH: Path = SCHEMAS_DIR / "evaluation_result.schema.json"
REPORT_SCHEMA_PATH: Path = SCHEMAS_DIR / "evaluation_report.schema.json"


def _load_schema(path: Path) -> dict[str, Any]:
    """Load a JSON Schema file from disk."""
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture()
def result_schema() -> dict[str, Any]:
    """Load the evaluation result JSON Schema."""
    return _load_schema(RESULT_SCHEMA_PATH)


@pytest.fixture()
def report_schema() -> dict[str, Any]:
    """Load the evaluation report JSON Schema."""
    return _load_schema(REPORT_SCHEMA_PATH)


def _build(engine: PolicyEngine, values: dict[str, Any], *, analyze: bool = False) -> dict[str, Any]:
    fact = engine.make_fact(values)
    results = engine.evaluate_all(fact, [Category.ESCORT, Category.PERMIT])
    conflicts = {category: engine.analyze(fact, category) for category in results} if analyze else None
    return build_report(
        fact,
        results,
        policy_fingerprint=engine.fingerprint(),
        config_fingerprint=config_fingerprint(PermitLogicConfig()),
        conflicts=conflicts,
    )


def test_schemas_are_valid_draft_2020_12(result_schema: dict[str, Any], report_schema: dict[str, Any]) -> None:
    jsonschema.Draft202012Validator.check_schema(result_schema)
    jsonschema.Draft202012Validator.check_schema(report_schema)


def test_result_matches_schema(bundled_engine: PolicyEngine, result_schema: dict[str, Any]) -> None:
    result = bundled_engine.evaluate({"height_ft": 15}, Category.ESCORT)

    jsonschema.validate(result.to_dict(), result_schema, cls=jsonschema.Draft202012Validator)


def test_empty_result_matches_schema(bundled_engine: PolicyEngine, result_schema: dict[str, Any]) -> None:
    result = bundled_engine.evaluate({}, Category.SPEED)

    jsonschema.validate(result.to_dict(), result_schema, cls=jsonschema.Draft202012Validator)


def test_report_matches_schema(bundled_engine: PolicyEngine, report_schema: dict[str, Any]) -> None:
    report = _build(bundled_engine, {"height_ft": 15, "bridge_traffic_direction": "two_way"}, analyze=True)

    jsonschema.validate(report, report_schema, cls=jsonschema.Draft202012Validator)
    assert report["schema_version"] == SCHEMA_VERSION
    assert set(report["conflicts"]) == {"escort"}


def test_written_report_matches_schema(
    tmp_path: Path, bundled_engine: PolicyEngine, report_schema: dict[str, Any]
) -> None:
    out_path = tmp_path / "report.json"
    write_report(out_path, _build(bundled_engine, {"width_ft": 14, "num_lanes_same_direction": 2}))

    jsonschema.validate(
        json.loads(out_path.read_text(encoding="utf-8")), report_schema, cls=jsonschema.Draft202012Validator
    )


def test_report_schema_rejects_bad_fingerprint(bundled_engine: PolicyEngine, report_schema: dict[str, Any]) -> None:
    report = _build(bundled_engine, {})
    report["policy_fingerprint"] = "not-a-hash"

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(report, report_schema, cls=jsonschema.Draft202012Validator)
