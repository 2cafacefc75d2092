"""Preflight validation orchestrator.

Combines config-file and policy-source validation into a single entry
point for ``permitlogic validate``.
"""

from __future__ import annotations

from pathlib import Path

from permitlogic.config import load_config, validate_config_file
from permitlogic.config.model import PermitLogicConfig
from permitlogic.engine.validation import validate_policy_sources
from permitlogic.exceptions import ConfigError
from permitlogic.exceptions.validation import ValidationError, sort_errors


def preflight_validate(
    root: Path,
    config_path: Path | None = None,
    *,
    policies_dir: Path | None = None,
    policy_files: tuple[Path, ...] | None = None,
) -> list[ValidationError]:
    """Run all preflight validation checks and return errors in deterministic order.

    Policies are checked against the configured registry when the config is
    valid, otherwise against the built-in catalog.
    """
    config_explicit = config_path is not None
    errors = validate_config_file(root, config_path, config_explicit=config_explicit)

    config = PermitLogicConfig()
    if not errors:
        try:
            config = load_config(root, config_path)
        except ConfigError:
            config = PermitLogicConfig()

    errors.extend(
        validate_policy_sources(config.build_registry(), policies_dir=policies_dir, policy_files=policy_files)
    )
    return sort_errors(errors)
