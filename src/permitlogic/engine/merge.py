"""Merge resolver: collapses the outputs of matched policies into one record.

Each output field is merged independently. The strategy for a field comes
from the first matched policy that names one for it, then from the
caller-supplied overrides (normally the category defaults), then falls back
to ``last``. Values always come from every matched policy that sets the
field, even when the strategy was chosen by a single policy.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from permitlogic.constants.categories import FALLBACK_MERGE_STRATEGY, STRATEGY_FIELD_KINDS
from permitlogic.exceptions.evaluation import MergeTypeMismatchError
from permitlogic.model.policy import FieldKind, MergeStrategy, Policy
from permitlogic.types.common import OutputRecord

logger = logging.getLogger(__name__)


def infer_field_kind(value: Any) -> FieldKind | None:
    """Return the output kind of *value*, or None if it is not an output value."""
    if isinstance(value, bool):
        return FieldKind.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldKind.NUMBER
    if isinstance(value, str):
        return FieldKind.TEXT
    if isinstance(value, (list, tuple)):
        return FieldKind.LIST
    return None


def resolve_strategy(
    field: str,
    matched: Sequence[Policy],
    strategy_overrides: Mapping[str, MergeStrategy] | None = None,
) -> MergeStrategy:
    """Pick the strategy for *field*: earliest policy override, then caller overrides, then last."""
    for policy in matched:
        strategy = policy.merge_strategies.get(field)
        if strategy is not None:
            return strategy
    if strategy_overrides is not None and field in strategy_overrides:
        return strategy_overrides[field]
    return FALLBACK_MERGE_STRATEGY


def output_fields(matched: Sequence[Policy]) -> list[str]:
    """Fields set by any matched policy, in order of first appearance."""
    fields: list[str] = []
    for policy in matched:
        for name in policy.output:
            if name not in fields:
                fields.append(name)
    return fields


def merge(
    matched: Sequence[Policy],
    base_output: Mapping[str, Any],
    strategy_overrides: Mapping[str, MergeStrategy] | None = None,
    *,
    field_kinds: Mapping[str, FieldKind] | None = None,
) -> OutputRecord:
    """Merge matched policy outputs over *base_output*.

    With no matched policies the base output is returned unchanged. Fields no
    matched policy sets keep their base value; base values never take part in
    a strategy.
    """
    merged: OutputRecord = copy.deepcopy(dict(base_output))
    if not matched:
        return merged

    for field in output_fields(matched):
        values = [policy.output[field] for policy in matched if field in policy.output]
        strategy = resolve_strategy(field, matched, strategy_overrides)
        kind = _field_kind(field, values, field_kinds)
        if kind not in STRATEGY_FIELD_KINDS[strategy]:
            raise MergeTypeMismatchError(f"strategy '{strategy}' cannot merge {kind} field '{field}'")
        merged[field] = _STRATEGIES[strategy](values, kind)
        logger.debug("Merged field %s with %s over %d values", field, strategy, len(values))

    return merged


def _field_kind(field: str, values: list[Any], field_kinds: Mapping[str, FieldKind] | None) -> FieldKind:
    declared = field_kinds.get(field) if field_kinds is not None else None
    kinds: list[FieldKind] = []
    for value in values:
        kind = infer_field_kind(value)
        if kind is None:
            raise MergeTypeMismatchError(f"field '{field}' has unsupported value {value!r}")
        if kind not in kinds:
            kinds.append(kind)

    if declared is not None:
        stray = [kind for kind in kinds if kind is not declared]
        if stray:
            raise MergeTypeMismatchError(f"field '{field}' is declared {declared} but a policy sets a {stray[0]} value")
        return declared
    if len(kinds) > 1:
        raise MergeTypeMismatchError(f"field '{field}' mixes value kinds: {[str(kind) for kind in kinds]}")
    return kinds[0]


def _union(values: list[Any], kind: FieldKind) -> Any:
    if kind is FieldKind.BOOLEAN:
        return any(values)
    combined: list[Any] = []
    for value in values:
        for item in value:
            if item not in combined:
                combined.append(copy.deepcopy(item))
    return combined


def _intersection(values: list[Any], kind: FieldKind) -> Any:
    if kind is FieldKind.BOOLEAN:
        return all(values)
    common: list[Any] = []
    for item in values[0]:
        if item not in common and all(item in other for other in values[1:]):
            common.append(copy.deepcopy(item))
    return common


def _copy_list(value: Any, kind: FieldKind) -> Any:
    if kind is FieldKind.LIST:
        return [copy.deepcopy(item) for item in value]
    return value


_STRATEGIES: dict[MergeStrategy, Callable[[list[Any], FieldKind], Any]] = {
    MergeStrategy.MAX: lambda values, _: max(values),
    MergeStrategy.MIN: lambda values, _: min(values),
    MergeStrategy.SUM: lambda values, _: sum(values),
    MergeStrategy.FIRST: lambda values, kind: _copy_list(values[0], kind),
    MergeStrategy.LAST: lambda values, kind: _copy_list(values[-1], kind),
    MergeStrategy.UNION: _union,
    MergeStrategy.INTERSECTION: _intersection,
}
