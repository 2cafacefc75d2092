"""Collect-all validation for policy sources.

Returns a list of :class:`ValidationError` instances rather than raising,
so callers can report every problem in one pass.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from permitlogic.constants.policy_schema import ALLOWED_TOP_KEYS, POLICY_FILE_SUFFIX, REQUIRED_TOP_KEYS
from permitlogic.constants.validation import (
    POL001,
    POL002,
    POL003,
    POL004,
    POL005,
    POL006,
    POL007,
    POL008,
    POL009,
)
from permitlogic.engine.compiler import compile_policy
from permitlogic.engine.loader import BUNDLED_POLICIES_DIR
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions.policy import PolicyCompileError, PolicySchemaError
from permitlogic.exceptions.validation import ValidationError


def validate_policy_sources(
    registry: AttributeRegistry,
    policies_dir: Path | None = None,
    policy_files: tuple[Path, ...] | None = None,
) -> list[ValidationError]:
    """Validate policy sources and return all validation errors.

    When both *policies_dir* and *policy_files* are provided a single
    ``POL009`` conflict error is returned immediately. With neither, the
    bundled pack is validated against *registry*.
    """
    errors: list[ValidationError] = []

    if policies_dir is not None and policy_files is not None:
        errors.append(
            ValidationError(
                code=POL009,
                path="",
                field="",
                message="policy source conflict: choose either --policies-dir or --policy-file, not both",
            )
        )
        return errors

    if policy_files is not None:
        paths = _resolve_explicit_files(policy_files, errors)
    else:
        paths = _resolve_policies_dir(policies_dir or BUNDLED_POLICIES_DIR, errors)

    loaded_sources: dict[str, str] = {}
    for path in paths:
        _validate_single_policy(path, registry, errors, loaded_sources)

    return errors


def _resolve_explicit_files(
    policy_files: tuple[Path, ...],
    errors: list[ValidationError],
) -> list[Path]:
    paths: list[Path] = []
    for policy_file in policy_files:
        resolved = policy_file.resolve()
        if not resolved.is_file():
            errors.append(
                ValidationError(
                    code=POL001,
                    path=str(resolved),
                    field="",
                    message=f"policy file not found: {resolved}",
                )
            )
            continue
        if resolved.suffix.lower() != POLICY_FILE_SUFFIX:
            errors.append(
                ValidationError(
                    code=POL002,
                    path=str(resolved),
                    field="",
                    message=f"policy file must use {POLICY_FILE_SUFFIX} extension: {resolved.name}",
                    hint=f"rename the file to use a {POLICY_FILE_SUFFIX} extension",
                )
            )
            continue
        if resolved not in paths:
            paths.append(resolved)
    return sorted(paths)


def _resolve_policies_dir(
    policies_dir: Path,
    errors: list[ValidationError],
) -> list[Path]:
    resolved = policies_dir.resolve()
    if not resolved.is_dir():
        errors.append(
            ValidationError(
                code=POL001,
                path=str(resolved),
                field="",
                message=f"policies directory not found: {resolved}",
            )
        )
        return []
    return sorted(resolved.glob(f"*{POLICY_FILE_SUFFIX}"))


def _validate_single_policy(
    path: Path,
    registry: AttributeRegistry,
    errors: list[ValidationError],
    loaded_sources: dict[str, str],
) -> None:
    path_str = str(path)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        errors.append(
            ValidationError(
                code=POL001,
                path=path_str,
                field="",
                message=f"failed to read policy file: {exc}",
            )
        )
        return
    except yaml.YAMLError as exc:
        errors.append(
            ValidationError(
                code=POL003,
                path=path_str,
                field="",
                message=f"invalid YAML: {exc}",
            )
        )
        return

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=POL004,
                path=path_str,
                field="",
                message=f"policy must be a mapping, got {type(raw).__name__}",
            )
        )
        return

    structural_errors = len(errors)
    for key in sorted(set(raw.keys()) - ALLOWED_TOP_KEYS):
        errors.append(
            ValidationError(
                code=POL005,
                path=path_str,
                field=str(key),
                message=f"unknown top-level key `{key}`",
            )
        )

    for key in sorted(REQUIRED_TOP_KEYS):
        if key not in raw:
            errors.append(
                ValidationError(
                    code=POL006,
                    path=path_str,
                    field=key,
                    message=f"missing required field `{key}`",
                )
            )

    _check_duplicate_id(raw, path_str, errors, loaded_sources)

    if len(errors) > structural_errors:
        return
    _check_compiles(raw, path_str, registry, errors)


def _check_duplicate_id(
    raw: dict[str, Any],
    path_str: str,
    errors: list[ValidationError],
    loaded_sources: dict[str, str],
) -> None:
    policy_id = raw.get("policy_id")
    if not isinstance(policy_id, str) or not policy_id.strip():
        return
    previous = loaded_sources.get(policy_id)
    if previous is not None:
        errors.append(
            ValidationError(
                code=POL008,
                path=path_str,
                field="policy_id",
                message=f"duplicate policy_id `{policy_id}`",
                hint=f"first defined in {previous}",
            )
        )
    else:
        loaded_sources[policy_id] = path_str


def _check_compiles(
    raw: dict[str, Any],
    path_str: str,
    registry: AttributeRegistry,
    errors: list[ValidationError],
) -> None:
    try:
        compile_policy(raw, path_str, registry)
    except (PolicySchemaError, PolicyCompileError) as exc:
        message = str(exc).removeprefix(f"{path_str}: ")
        errors.append(
            ValidationError(
                code=POL007,
                path=path_str,
                field=_field_of(message),
                message=message,
            )
        )


def _field_of(message: str) -> str:
    """Best-effort field name from a schema/compile message (``condition.all[0]: ...``)."""
    head = message.split(":", 1)[0].strip()
    if head.startswith(("condition", "output", "merge_strategies")) and " " not in head:
        return head
    for key in sorted(ALLOWED_TOP_KEYS):
        if f"'{key}'" in message:
            return key
    return ""
