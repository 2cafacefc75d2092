"""Policy evaluation engine."""

from __future__ import annotations

from typing import Any

from .clause import build_clause, evaluate_clause
from .condition import all_of, any_of, evaluate_condition
from .conflicts import ConflictKind, ConflictReport, analyze_conflicts
from .matcher import match_policies, order_policies
from .merge import merge
from .registry import AttributeRegistry, build_default_registry

__all__ = [
    "AttributeRegistry",
    "ConflictKind",
    "ConflictReport",
    "PolicyEngine",
    "all_of",
    "analyze_conflicts",
    "any_of",
    "build_clause",
    "build_default_registry",
    "evaluate_clause",
    "evaluate_condition",
    "match_policies",
    "merge",
    "order_policies",
]


def __getattr__(name: str) -> Any:
    """Lazily expose PolicyEngine to avoid an import cycle with the config package."""
    if name == "PolicyEngine":
        from .runtime import PolicyEngine

        return PolicyEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
