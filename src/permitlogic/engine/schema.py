"""Strict schema validation for policy documents.

Validates parsed YAML dicts at load time. Raises PolicySchemaError on the
first violation; nothing is skipped.
"""

from __future__ import annotations

from typing import Any

from permitlogic.constants.policy_schema import (
    ALLOWED_TOP_KEYS,
    MERGE_STRATEGY_ALIASES,
    REQUIRED_TOP_KEYS,
)
from permitlogic.exceptions.policy import PolicySchemaError
from permitlogic.model.policy import Category, PolicyStatus

VALID_CATEGORIES: frozenset[str] = frozenset(category.value for category in Category)
VALID_STATUSES: frozenset[str] = frozenset(status.value for status in PolicyStatus)
OPTIONAL_TEXT_KEYS: tuple[str, ...] = ("title", "jurisdiction", "source_regulation", "notes")


def validate_policy(data: Any, source_path: str) -> None:
    """Validate a policy document dict. Raises PolicySchemaError on any violation."""
    if not isinstance(data, dict):
        raise PolicySchemaError(f"{source_path}: policy must be a mapping, got {type(data).__name__}")

    unknown_top = set(data.keys()) - ALLOWED_TOP_KEYS
    if unknown_top:
        raise PolicySchemaError(f"{source_path}: unknown top-level keys: {sorted(unknown_top)}")

    for key in sorted(REQUIRED_TOP_KEYS):
        if key not in data:
            raise PolicySchemaError(f"{source_path}: missing required key '{key}'")

    _validate_policy_id(data["policy_id"], source_path)
    _validate_category(data["category"], source_path)
    if "status" in data:
        _validate_status(data["status"], source_path)
    if "priority" in data:
        _validate_priority(data["priority"], source_path)
    for key in OPTIONAL_TEXT_KEYS:
        if key in data and data[key] is not None and not isinstance(data[key], str):
            raise PolicySchemaError(f"{source_path}: '{key}' must be a string")
    if "condition" in data:
        _validate_condition_root(data["condition"], source_path)
    _validate_output(data["output"], source_path)
    if "merge_strategies" in data:
        _validate_merge_strategies(data["merge_strategies"], source_path)


def _validate_policy_id(value: Any, path: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise PolicySchemaError(f"{path}: 'policy_id' must be a non-empty string")


def _validate_category(value: Any, path: str) -> None:
    if value not in VALID_CATEGORIES:
        raise PolicySchemaError(f"{path}: category must be one of {sorted(VALID_CATEGORIES)}, got {value!r}")


def _validate_status(value: Any, path: str) -> None:
    if value not in VALID_STATUSES:
        raise PolicySchemaError(f"{path}: status must be one of {sorted(VALID_STATUSES)}, got {value!r}")


def _validate_priority(value: Any, path: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise PolicySchemaError(f"{path}: 'priority' must be an integer, got {value!r}")


def _validate_condition_root(value: Any, path: str) -> None:
    if value is not None and not isinstance(value, (dict, list)):
        raise PolicySchemaError(f"{path}: 'condition' must be a mapping or a list of conditions")


def _validate_output(output: Any, path: str) -> None:
    if not isinstance(output, dict):
        raise PolicySchemaError(f"{path}: 'output' must be a mapping")
    for field, value in output.items():
        if not isinstance(field, str) or not field.strip():
            raise PolicySchemaError(f"{path}: output field names must be non-empty strings")
        if not _is_output_value(value):
            raise PolicySchemaError(
                f"{path}: output.{field} must be a number, boolean, string or list, got {type(value).__name__}"
            )


def _is_output_value(value: Any) -> bool:
    if isinstance(value, (bool, int, float, str)):
        return True
    if isinstance(value, list):
        return all(item is not None and not isinstance(item, list) for item in value)
    return False


def _validate_merge_strategies(strategies: Any, path: str) -> None:
    if not isinstance(strategies, dict):
        raise PolicySchemaError(f"{path}: 'merge_strategies' must be a mapping")
    for field, strategy in strategies.items():
        if not isinstance(field, str) or not field.strip():
            raise PolicySchemaError(f"{path}: merge_strategies keys must be non-empty strings")
        if not isinstance(strategy, str) or strategy.lower() not in MERGE_STRATEGY_ALIASES:
            raise PolicySchemaError(
                f"{path}: merge_strategies.{field} must be one of {sorted(MERGE_STRATEGY_ALIASES)}, got {strategy!r}"
            )
