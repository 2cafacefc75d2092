"""Condition tree: clause leaves and AND/OR groups."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from permitlogic.exceptions.clause import IllegalOperatorError, MalformedValueError
from permitlogic.model.attributes import LEGAL_OPERATORS, RELATIONAL_OPERATORS, SET_OPERATORS, Operator, ValueKind
from permitlogic.model.values import BoolValue, ClauseValue, EnumValue, NumberValue, RangeValue, SetValue


class Logic(StrEnum):
    """How a group combines its children."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Clause:
    """One ``(attribute, operator, value)`` test.

    Instances are produced by :func:`permitlogic.engine.clause.build_clause`,
    which validates them against a registry. ``kind`` records the attribute
    kind the clause was validated for. Direct construction still checks that
    the operator is legal for ``kind`` and that the value has the operator's
    shape.
    """

    attribute: str
    operator: Operator
    value: ClauseValue
    kind: ValueKind

    def __post_init__(self) -> None:
        if self.operator not in LEGAL_OPERATORS[self.kind]:
            raise IllegalOperatorError(
                f"operator '{self.operator}' is not legal for {self.kind} attribute '{self.attribute}'"
            )
        expected = _expected_value_type(self.operator, self.kind)
        if not isinstance(self.value, expected):
            raise MalformedValueError(
                f"operator '{self.operator}' on '{self.attribute}' needs a {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )
        if isinstance(self.value, SetValue):
            _check_set_items(self.attribute, self.kind, self.value)


def _expected_value_type(operator: Operator, kind: ValueKind) -> type:
    if operator is Operator.BETWEEN:
        return RangeValue
    if operator in SET_OPERATORS:
        return SetValue
    if operator in RELATIONAL_OPERATORS or kind is ValueKind.NUMBER:
        return NumberValue
    if kind is ValueKind.BOOLEAN:
        return BoolValue
    return EnumValue


def _check_set_items(attribute: str, kind: ValueKind, value: SetValue) -> None:
    if not value.items:
        raise MalformedValueError(f"set operator on '{attribute}' needs at least one item")
    for item in value.items:
        if kind is ValueKind.NUMBER:
            valid = isinstance(item, (int, float)) and not isinstance(item, bool)
        else:
            valid = isinstance(item, str)
        if not valid:
            raise MalformedValueError(f"set item {item!r} does not fit {kind} attribute '{attribute}'")


@dataclass(frozen=True, eq=False)
class Group:
    """Boolean combination of child conditions.

    An empty AND group is always true and an empty OR group is always false.
    Equality is identity-based so deep trees never recurse through ``__eq__``.
    """

    logic: Logic
    children: tuple[Condition, ...] = field(default=())


Condition: TypeAlias = Clause | Group


def always() -> Group:
    """Return the empty AND group: a condition that always applies."""
    return Group(Logic.AND, ())


def iter_clauses(condition: Condition) -> Iterator[Clause]:
    """Yield every clause in the tree, depth-first, left to right."""
    stack: list[Condition] = [condition]
    while stack:
        node = stack.pop()
        if isinstance(node, Clause):
            yield node
            continue
        stack.extend(reversed(node.children))


def condition_depth(condition: Condition) -> int:
    """Return the nesting depth of a condition (a bare clause has depth 0)."""
    deepest = 0
    stack: list[tuple[Condition, int]] = [(condition, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Group):
            deepest = max(deepest, depth + 1)
            stack.extend((child, depth + 1) for child in node.children)
    return deepest
