"""Configuration file constants."""

from __future__ import annotations

CONFIG_FILENAME: str = "permitlogic.yaml"
DEFAULT_STRICT_FACTS: bool = False
