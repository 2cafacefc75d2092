"""Configuration-related exceptions."""

from __future__ import annotations

from permitlogic.exceptions.base import PermitLogicError


class ConfigError(PermitLogicError, ValueError):
    """Raised when engine configuration is invalid."""
