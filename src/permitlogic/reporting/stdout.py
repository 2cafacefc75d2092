"""Human-readable stdout reporter for evaluation results."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from permitlogic.constants.branding import ASCII_LOGO_LINES, EVALUATION_TITLE
from permitlogic.constants.reporting import ANSI_BOLD, ANSI_DIM, ANSI_GREEN, ANSI_RESET, ANSI_YELLOW
from permitlogic.engine.conflicts import ConflictReport
from permitlogic.model.policy import Category
from permitlogic.model.results import EvaluationResult


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{ANSI_RESET}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, sort_keys=True)
    return str(value)


class StdoutReporter:
    """Formats evaluation results as terminal output, one block per category."""

    def __init__(
        self,
        results: Mapping[Category, EvaluationResult],
        *,
        color: bool = True,
        verbose: bool = False,
        fingerprint: str | None = None,
        conflicts: Mapping[Category, ConflictReport] | None = None,
    ) -> None:
        self._results = results
        self._color = color
        self._verbose = verbose
        self._fingerprint = fingerprint
        self._conflicts = conflicts or {}

    def render(self) -> str:
        """Render the full report as a single string."""
        sections = [self._render_header()]
        sections.extend(self._render_category(result) for result in self._results.values())
        return "\n".join(section for section in sections if section)

    def _render_header(self) -> str:
        matched = sum(1 for result in self._results.values() if result.matched)
        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            f"  {ASCII_LOGO_LINES[1]}",
            f"  {EVALUATION_TITLE}",
            "  " + "─" * 38,
            "",
            f"  Categories  {len(self._results)} evaluated / {matched} with matches",
        ]
        if self._verbose and self._fingerprint:
            lines.append(f"  Policy set  {self._fingerprint[:12]}")
        lines.append("")
        return "\n".join(lines)

    def _render_category(self, result: EvaluationResult) -> str:
        title = result.category.value.upper()
        lines = [f"  {_colorize(title, ANSI_BOLD) if self._color else title}"]

        if result.matched:
            count = f"{len(result.matched_policy_ids)} matched"
            lines.append(f"    Policies  {_colorize(count, ANSI_YELLOW) if self._color else count}")
            for policy_id in result.matched_policy_ids:
                lines.append(f"      - {policy_id}")
        else:
            message = "no policies apply"
            lines.append(f"    Policies  {_colorize(message, ANSI_GREEN) if self._color else message}")

        if result.output:
            width = max(len(field) for field in result.output)
            lines.append("    Output")
            for field, value in result.output.items():
                lines.append(f"      {field:<{width}}  {_format_value(value)}")

        report = self._conflicts.get(result.category)
        if report is not None and report.has_conflicts:
            lines.append("    Review")
            for conflict in report.conflicts:
                text = f"{conflict.kind}: {conflict.description}"
                lines.append(f"      {_colorize(text, ANSI_DIM) if self._color else text}")

        lines.append("")
        return "\n".join(lines)
