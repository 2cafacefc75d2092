"""Logical combinator: evaluates AND/OR condition trees against a fact."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from permitlogic.engine.clause import evaluate_clause
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.model.conditions import Clause, Condition, Group, Logic
from permitlogic.model.values import to_plain
from permitlogic.types.common import FactScalar


def all_of(children: Iterable[Condition]) -> Group:
    """Build an AND group."""
    return Group(Logic.AND, tuple(children))


def any_of(children: Iterable[Condition]) -> Group:
    """Build an OR group."""
    return Group(Logic.OR, tuple(children))


@dataclass
class _Frame:
    group: Group
    index: int = 0


def evaluate_condition(
    condition: Condition,
    fact: Mapping[str, FactScalar],
    registry: AttributeRegistry,
) -> bool:
    """Evaluate a condition tree without recursion.

    Children are visited left to right. AND stops at the first false child
    and OR at the first true one. A group whose children are exhausted
    yields its vacuous value: True for AND, False for OR. Errors from clause
    evaluation propagate unchanged and abort the whole tree.
    """
    if isinstance(condition, Clause):
        return evaluate_clause(condition, fact, registry)

    stack: list[_Frame] = [_Frame(condition)]
    result: bool | None = None

    while stack:
        frame = stack[-1]
        short_circuit_on = frame.group.logic is Logic.OR

        if result is not None:
            if result is short_circuit_on:
                stack.pop()
                continue
            result = None

        children = frame.group.children
        if frame.index >= len(children):
            result = not short_circuit_on
            stack.pop()
            continue

        child = children[frame.index]
        frame.index += 1
        if isinstance(child, Clause):
            result = evaluate_clause(child, fact, registry)
        else:
            stack.append(_Frame(child))

    assert result is not None
    return result


def flatten_condition(condition: Condition) -> list[list[Any]]:
    """Return a pre-order token list describing *condition*.

    Groups become ``[logic, child_count]`` and clauses become
    ``[attribute, operator, value]``. The walk is iterative, so arbitrarily
    deep trees can be hashed or serialized.
    """
    tokens: list[list[Any]] = []
    pending: list[Condition] = [condition]
    while pending:
        node = pending.pop()
        if isinstance(node, Clause):
            tokens.append([node.attribute, node.operator.value, to_plain(node.value)])
            continue
        tokens.append([node.logic.value, len(node.children)])
        pending.extend(reversed(node.children))
    return tokens
