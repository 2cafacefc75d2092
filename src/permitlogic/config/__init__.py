"""Configuration loading, validation, and fingerprinting for Permitlogic."""

from __future__ import annotations

from permitlogic.config.fingerprint import config_fingerprint
from permitlogic.config.loader import load_config
from permitlogic.config.model import PermitLogicConfig
from permitlogic.config.validator import validate_config_file

__all__ = [
    "PermitLogicConfig",
    "config_fingerprint",
    "load_config",
    "validate_config_file",
]
