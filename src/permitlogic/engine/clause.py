"""Clause construction and single-clause evaluation.

Construction validates operator legality and value shape against the
registry, so evaluation can only fail on registry inconsistency or a fact
value of the wrong kind, never on a malformed clause.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

from permitlogic.constants.policy_schema import OPERATOR_ALIASES
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions.clause import ClauseError, IllegalOperatorError, MalformedValueError
from permitlogic.exceptions.evaluation import UnregisteredAttributeError
from permitlogic.exceptions.registry import UnknownAttributeError
from permitlogic.model.attributes import RELATIONAL_OPERATORS, SET_OPERATORS, Attribute, Operator, ValueKind
from permitlogic.model.conditions import Clause
from permitlogic.model.facts import coerce_fact_value
from permitlogic.model.values import BoolValue, ClauseValue, EnumValue, NumberValue, RangeValue, SetValue
from permitlogic.types.common import FactScalar


def parse_operator(token: Operator | str) -> Operator:
    """Resolve an operator name or symbol (``>=``, ``in`` ...) to an Operator."""
    if isinstance(token, Operator):
        return token
    if isinstance(token, str):
        operator = OPERATOR_ALIASES.get(token.strip().lower())
        if operator is not None:
            return operator
    raise IllegalOperatorError(f"unknown operator {token!r}")


def build_clause(
    attribute: str,
    operator: Operator | str,
    value: Any,
    registry: AttributeRegistry,
) -> Clause:
    """Validate and construct a clause against *registry*."""
    try:
        declared = registry.require(attribute)
    except UnknownAttributeError as exc:
        raise ClauseError(str(exc)) from exc

    resolved = parse_operator(operator)
    if resolved not in declared.legal_operators:
        legal = sorted(op.value for op in declared.legal_operators)
        raise IllegalOperatorError(
            f"operator '{resolved}' is not legal for {declared.kind} attribute '{attribute}' (legal: {legal})"
        )

    return Clause(
        attribute=attribute,
        operator=resolved,
        value=_build_value(declared, resolved, value),
        kind=declared.kind,
    )


def _build_value(attribute: Attribute, operator: Operator, raw: Any) -> ClauseValue:
    if operator is Operator.BETWEEN:
        return _build_range(attribute, raw)
    if operator in SET_OPERATORS:
        return _build_set(attribute, raw)
    if operator in RELATIONAL_OPERATORS:
        return NumberValue(_require_number(attribute, raw))
    return _build_scalar(attribute, raw)


def _build_scalar(attribute: Attribute, raw: Any) -> ClauseValue:
    if attribute.kind is ValueKind.NUMBER:
        return NumberValue(_require_number(attribute, raw))
    if attribute.kind is ValueKind.BOOLEAN:
        if not isinstance(raw, bool):
            raise MalformedValueError(f"'{attribute.name}' expects a boolean value, got {raw!r}")
        return BoolValue(raw)
    return EnumValue(_require_tag(attribute, raw))


def _build_range(attribute: Attribute, raw: Any) -> RangeValue:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise MalformedValueError(f"'between' on '{attribute.name}' expects a two-element [low, high] range")
    low = _require_number(attribute, raw[0])
    high = _require_number(attribute, raw[1])
    if not (math.isfinite(low) and math.isfinite(high)):
        raise MalformedValueError(f"'between' bounds on '{attribute.name}' must be finite")
    if low > high:
        raise MalformedValueError(f"'between' on '{attribute.name}' has low {low} greater than high {high}")
    return RangeValue(low, high)


def _build_set(attribute: Attribute, raw: Any) -> SetValue:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise MalformedValueError(f"set operator on '{attribute.name}' expects a non-empty list")
    items: list[float | str] = []
    for element in raw:
        item: float | str
        if attribute.kind is ValueKind.NUMBER:
            item = _require_number(attribute, element)
        else:
            item = _require_tag(attribute, element)
        if item not in items:
            items.append(item)
    return SetValue(tuple(items))


def _require_number(attribute: Attribute, raw: Any) -> float:
    if attribute.kind is not ValueKind.NUMBER:
        raise MalformedValueError(f"'{attribute.name}' is not a number attribute")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedValueError(f"'{attribute.name}' expects a number, got {raw!r}")
    number = float(raw)
    if math.isnan(number):
        raise MalformedValueError(f"'{attribute.name}' value must not be NaN")
    return number


def _require_tag(attribute: Attribute, raw: Any) -> str:
    if not isinstance(raw, str):
        raise MalformedValueError(f"'{attribute.name}' expects a string tag, got {raw!r}")
    if raw not in attribute.values:
        raise MalformedValueError(f"'{attribute.name}' value must be one of {list(attribute.values)}, got {raw!r}")
    return raw


def _scalar(value: ClauseValue) -> FactScalar:
    assert isinstance(value, (NumberValue, BoolValue, EnumValue))
    return value.value


def _number(value: ClauseValue) -> float:
    assert isinstance(value, NumberValue)
    return value.value


def _between(actual: FactScalar, value: ClauseValue) -> bool:
    assert isinstance(value, RangeValue)
    return value.contains(float(actual))


def _member(actual: FactScalar, value: ClauseValue) -> bool:
    assert isinstance(value, SetValue)
    return value.contains(actual)


_OPERATIONS: dict[Operator, Callable[[Any, ClauseValue], bool]] = {
    Operator.EQ: lambda actual, value: actual == _scalar(value),
    Operator.NOT_EQ: lambda actual, value: actual != _scalar(value),
    Operator.GT: lambda actual, value: actual > _number(value),
    Operator.GTE: lambda actual, value: actual >= _number(value),
    Operator.LT: lambda actual, value: actual < _number(value),
    Operator.LTE: lambda actual, value: actual <= _number(value),
    Operator.BETWEEN: _between,
    Operator.IN: _member,
    Operator.NOT_IN: lambda actual, value: not _member(actual, value),
}


def evaluate_clause(clause: Clause, fact: Mapping[str, FactScalar], registry: AttributeRegistry) -> bool:
    """Evaluate one clause against *fact*.

    An attribute absent from the fact leaves the clause unsatisfied and
    returns False for every operator. An attribute absent from the registry,
    or declared with a different kind, raises UnregisteredAttributeError.
    A fact value of the wrong kind raises FactError, so ``True`` never
    equals ``1`` here.
    """
    declared = registry.get(clause.attribute)
    if declared is None:
        raise UnregisteredAttributeError(f"condition references unregistered attribute '{clause.attribute}'")
    if declared.kind is not clause.kind:
        raise UnregisteredAttributeError(
            f"attribute '{clause.attribute}' is registered as {declared.kind} "
            f"but the clause was built for {clause.kind}"
        )

    if clause.attribute not in fact:
        return False
    actual = coerce_fact_value(declared, fact[clause.attribute])
    return bool(_OPERATIONS[clause.operator](actual, clause.value))
