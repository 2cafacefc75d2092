"""Policy loading: locate YAML policy files, parse them and compile them.

Sources are a policies directory, explicit policy files or the bundled pack.
Files are always processed in sorted path order so the resulting policy
sequence is deterministic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from permitlogic.constants.policy_schema import POLICY_FILE_SUFFIX
from permitlogic.engine.compiler import compile_policy
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions.policy import PolicyLoadError
from permitlogic.model.policy import Policy

logger = logging.getLogger(__name__)

BUNDLED_POLICIES_DIR: Path = Path(__file__).resolve().parents[1] / "policies"


def load_policies(
    registry: AttributeRegistry,
    policies_dir: Path | None = None,
    policy_files: tuple[Path, ...] | None = None,
) -> list[Policy]:
    """Load and compile every policy from the selected source.

    Raises PolicyLoadError for missing sources, unreadable files, bad YAML
    and duplicate policy ids. Schema and compile errors propagate unchanged.
    """
    policies: list[Policy] = []
    sources: dict[str, Path] = {}
    for path in collect_policy_paths(policies_dir, policy_files):
        raw = read_policy_document(path)
        policy = compile_policy(raw, str(path), registry)

        previous = sources.get(policy.policy_id)
        if previous is not None:
            raise PolicyLoadError(f"Duplicate policy_id '{policy.policy_id}' loaded from {previous} and {path}")
        sources[policy.policy_id] = path
        policies.append(policy)
        logger.debug("Loaded policy: %s from %s", policy.policy_id, path.name)

    logger.debug("Loaded %d policies", len(policies))
    return policies


def collect_policy_paths(
    policies_dir: Path | None = None,
    policy_files: tuple[Path, ...] | None = None,
) -> tuple[Path, ...]:
    """Resolve the policy source to a sorted tuple of YAML paths."""
    if policies_dir is not None and policy_files is not None:
        raise PolicyLoadError("Policy source conflict: choose either policies_dir or policy_files, not both.")

    if policy_files is not None:
        return _collect_explicit_policy_files(policy_files)

    selected = (policies_dir if policies_dir is not None else BUNDLED_POLICIES_DIR).resolve()
    if not selected.exists():
        raise PolicyLoadError(f"Policies directory does not exist: {selected}")
    if not selected.is_dir():
        raise PolicyLoadError(f"Policies directory is not a directory: {selected}")
    return tuple(sorted(path.resolve() for path in selected.glob(f"*{POLICY_FILE_SUFFIX}")))


def read_policy_document(path: Path) -> dict[str, Any]:
    """Parse one policy file into a mapping."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PolicyLoadError(f"Failed to read policy file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise PolicyLoadError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise PolicyLoadError(f"Policy file {path} must contain a mapping")
    return raw


def _collect_explicit_policy_files(policy_files: tuple[Path, ...]) -> tuple[Path, ...]:
    if len(policy_files) == 0:
        raise PolicyLoadError("At least one --policy-file path must be provided.")

    resolved_files: list[Path] = []
    seen: set[Path] = set()
    for policy_file in policy_files:
        resolved = policy_file.resolve()
        if resolved in seen:
            raise PolicyLoadError(f"Duplicate policy file path provided: {resolved}")
        seen.add(resolved)

        if not resolved.exists():
            raise PolicyLoadError(f"Policy file does not exist: {resolved}")
        if not resolved.is_file():
            raise PolicyLoadError(f"Policy file path is not a file: {resolved}")
        if resolved.suffix.lower() != POLICY_FILE_SUFFIX:
            raise PolicyLoadError(f"Policy file must use {POLICY_FILE_SUFFIX} extension: {resolved}")
        resolved_files.append(resolved)

    return tuple(sorted(resolved_files))
