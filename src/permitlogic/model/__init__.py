"""Core data models for Permitlogic."""

from .attributes import LEGAL_OPERATORS, Attribute, Operator, ValueKind
from .conditions import Clause, Condition, Group, Logic, always, condition_depth, iter_clauses
from .facts import Fact
from .policy import Category, FieldKind, MergeStrategy, Policy, PolicyStatus
from .results import EvaluationResult
from .values import BoolValue, ClauseValue, EnumValue, NumberValue, RangeValue, SetValue

__all__ = [
    "LEGAL_OPERATORS",
    "Attribute",
    "BoolValue",
    "Category",
    "Clause",
    "ClauseValue",
    "Condition",
    "EnumValue",
    "EvaluationResult",
    "Fact",
    "FieldKind",
    "Group",
    "Logic",
    "MergeStrategy",
    "NumberValue",
    "Operator",
    "Policy",
    "PolicyStatus",
    "RangeValue",
    "SetValue",
    "ValueKind",
    "always",
    "condition_depth",
    "iter_clauses",
]
