"""Policy, category and merge-strategy models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from permitlogic.model.conditions import Condition, always


class Category(StrEnum):
    """Compliance domain a policy belongs to."""

    ESCORT = "escort"
    PERMIT = "permit"
    SPEED = "speed"
    HOURS = "hours"
    ROUTE = "route"
    UTILITY = "utility"
    DIMENSION = "dimension"


class PolicyStatus(StrEnum):
    """Authoring lifecycle state. Only published policies are matched."""

    DRAFT = "draft"
    IN_REVIEW = "in_review"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class MergeStrategy(StrEnum):
    """Rule for combining one output field across matched policies."""

    MAX = "max"
    MIN = "min"
    SUM = "sum"
    FIRST = "first"
    LAST = "last"
    UNION = "union"
    INTERSECTION = "intersection"


@dataclass(frozen=True)
class Policy:
    """A unit of compliance logic: condition, output and per-field strategies."""

    policy_id: str
    category: Category
    condition: Condition = field(default_factory=always)
    output: dict[str, Any] = field(default_factory=dict)
    merge_strategies: dict[str, MergeStrategy] = field(default_factory=dict)
    priority: int | None = None
    status: PolicyStatus = PolicyStatus.PUBLISHED
    title: str = ""
    jurisdiction: str | None = None
    source_regulation: str | None = None
    notes: str | None = None

    @property
    def is_published(self) -> bool:
        return self.status is PolicyStatus.PUBLISHED


class FieldKind(StrEnum):
    """Value kind of a policy output field."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"
    LIST = "list"
