"""Schema constants for policy documents."""

from __future__ import annotations

from permitlogic.model.attributes import Operator
from permitlogic.model.policy import MergeStrategy

REQUIRED_TOP_KEYS: frozenset[str] = frozenset({"policy_id", "category", "output"})
ALLOWED_TOP_KEYS: frozenset[str] = REQUIRED_TOP_KEYS | {
    "title",
    "status",
    "priority",
    "condition",
    "merge_strategies",
    "jurisdiction",
    "source_regulation",
    "notes",
}

CLAUSE_KEYS: frozenset[str] = frozenset({"attribute", "operator", "value"})
GROUP_KEYS: dict[str, str] = {"all": "and", "any": "or"}

OPERATOR_ALIASES: dict[str, Operator] = {
    "=": Operator.EQ,
    "==": Operator.EQ,
    "!=": Operator.NOT_EQ,
    ">": Operator.GT,
    ">=": Operator.GTE,
    "<": Operator.LT,
    "<=": Operator.LTE,
    **{operator.value: operator for operator in Operator},
}

MERGE_STRATEGY_ALIASES: dict[str, MergeStrategy] = {
    "or": MergeStrategy.UNION,
    "and": MergeStrategy.INTERSECTION,
    **{strategy.value: strategy for strategy in MergeStrategy},
}

POLICY_FILE_SUFFIX: str = ".yaml"
