"""Shared helpers for engine test modules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from permitlogic.engine.clause import build_clause
from permitlogic.engine.registry import AttributeRegistry, build_default_registry
from permitlogic.model.attributes import Attribute, ValueKind
from permitlogic.model.conditions import Clause, Condition, always
from permitlogic.model.policy import Category, MergeStrategy, Policy, PolicyStatus

EXTRA_ATTRIBUTE: Attribute = Attribute("trailer_axle_groups", ValueKind.NUMBER)


def _minimal_policy(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid policy document, merged with *overrides*."""
    base: dict[str, Any] = {
        "policy_id": "test_policy",
        "category": "escort",
        "condition": {"attribute": "width_ft", "operator": ">", "value": 12},
        "output": {"front_escorts": 1},
    }
    base.update(overrides)
    return base


def _write_policy_file(path: Path, **overrides: Any) -> Path:
    """Write a minimal policy YAML file to *path*."""
    payload = _minimal_policy(**overrides)
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def _extended_registry() -> AttributeRegistry:
    """Built-in registry plus one attribute the default registry lacks."""
    return build_default_registry(extra=(EXTRA_ATTRIBUTE,))


def _clause(attribute: str, operator: str, value: Any, registry: AttributeRegistry | None = None) -> Clause:
    """Build a clause against *registry* (default: built-in catalog)."""
    return build_clause(attribute, operator, value, registry or build_default_registry())


def _policy(
    policy_id: str,
    condition: Condition | None = None,
    output: Mapping[str, Any] | None = None,
    *,
    priority: int | None = None,
    strategies: Mapping[str, MergeStrategy] | None = None,
    status: PolicyStatus = PolicyStatus.PUBLISHED,
    category: Category = Category.ESCORT,
) -> Policy:
    """Construct a Policy directly, bypassing the document compiler."""
    return Policy(
        policy_id=policy_id,
        category=category,
        condition=condition if condition is not None else always(),
        output=dict(output or {}),
        merge_strategies=dict(strategies or {}),
        priority=priority,
        status=status,
    )
