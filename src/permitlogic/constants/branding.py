"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "PERMITLOGIC"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ PERMITLOGIC",
    "     // compliance policies for oversize loads",
)
EVALUATION_TITLE: str = "Evaluation"
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} policy evaluator"))
