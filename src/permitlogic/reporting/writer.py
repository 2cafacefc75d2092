"""JSON report builder and writer."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from permitlogic.constants.reporting import REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX, SCHEMA_VERSION
from permitlogic.engine.conflicts import ConflictReport
from permitlogic.io import write_json_atomic
from permitlogic.model.facts import Fact
from permitlogic.model.policy import Category
from permitlogic.model.results import EvaluationResult


def build_report(
    fact: Fact,
    results: Mapping[Category, EvaluationResult],
    *,
    policy_fingerprint: str,
    config_fingerprint: str,
    conflicts: Mapping[Category, ConflictReport] | None = None,
) -> dict[str, Any]:
    """Build the serializable evaluation report."""
    conflicts = conflicts or {}
    return {
        "schema_version": SCHEMA_VERSION,
        "policy_fingerprint": policy_fingerprint,
        "config_fingerprint": config_fingerprint,
        "fact": fact.to_dict(),
        "results": [result.to_dict() for result in results.values()],
        "conflicts": {
            category.value: report.to_dict()["conflicts"]
            for category, report in conflicts.items()
            if report.has_conflicts
        },
    }


def write_report(path: Path, report: dict[str, Any]) -> None:
    """Write *report* to *path* atomically."""
    write_json_atomic(
        path=path,
        payload=report,
        temp_prefix=REPORT_TEMP_PREFIX,
        temp_suffix=REPORT_TEMP_SUFFIX,
    )
