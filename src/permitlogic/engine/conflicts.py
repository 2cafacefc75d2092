"""Advisory conflict analysis over a matched policy set.

Nothing here changes the merged output. The report points out where the
merge outcome depends on policy order or on which policy chose a field's
strategy, so that policy authors can review it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from permitlogic.engine.merge import output_fields, resolve_strategy
from permitlogic.model.conditions import iter_clauses
from permitlogic.model.policy import MergeStrategy, Policy

ORDER_DEPENDENT_STRATEGIES: frozenset[MergeStrategy] = frozenset({MergeStrategy.FIRST, MergeStrategy.LAST})


class ConflictKind(StrEnum):
    CONDITION_OVERLAP = "condition_overlap"
    STRATEGY_DISAGREEMENT = "strategy_disagreement"
    VALUE_CONTRADICTION = "value_contradiction"


@dataclass(frozen=True)
class Conflict:
    """One advisory finding about a matched policy set."""

    kind: ConflictKind
    policy_ids: tuple[str, ...]
    subject: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "policy_ids": list(self.policy_ids),
            "subject": self.subject,
            "description": self.description,
        }


@dataclass(frozen=True)
class ConflictReport:
    conflicts: tuple[Conflict, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def of_kind(self, kind: ConflictKind) -> tuple[Conflict, ...]:
        return tuple(conflict for conflict in self.conflicts if conflict.kind is kind)

    def to_dict(self) -> dict[str, Any]:
        return {"conflicts": [conflict.to_dict() for conflict in self.conflicts]}


def analyze_conflicts(
    matched: Sequence[Policy],
    strategy_overrides: Mapping[str, MergeStrategy] | None = None,
) -> ConflictReport:
    """Return condition overlaps, strategy disagreements and order-dependent values."""
    if len(matched) < 2:
        return ConflictReport()
    conflicts = [
        *find_condition_overlaps(matched),
        *find_strategy_disagreements(matched),
        *find_value_contradictions(matched, strategy_overrides),
    ]
    return ConflictReport(tuple(conflicts))


def find_condition_overlaps(matched: Sequence[Policy]) -> list[Conflict]:
    """Pairs of matched policies that constrain the same attribute."""
    attributes = {policy.policy_id: _attributes(policy) for policy in matched}
    conflicts: list[Conflict] = []
    for i, first in enumerate(matched):
        for second in matched[i + 1 :]:
            shared = [name for name in attributes[first.policy_id] if name in attributes[second.policy_id]]
            if not shared:
                continue
            conflicts.append(
                Conflict(
                    kind=ConflictKind.CONDITION_OVERLAP,
                    policy_ids=(first.policy_id, second.policy_id),
                    subject=", ".join(shared),
                    description=f"Both policies matched with conditions on: {', '.join(shared)}",
                )
            )
    return conflicts


def find_strategy_disagreements(matched: Sequence[Policy]) -> list[Conflict]:
    """Fields for which matched policies name different merge strategies."""
    conflicts: list[Conflict] = []
    for field in _strategy_fields(matched):
        named = [(p.policy_id, p.merge_strategies[field]) for p in matched if field in p.merge_strategies]
        distinct = {strategy for _, strategy in named}
        if len(distinct) < 2:
            continue
        winner_id, winner = named[0]
        conflicts.append(
            Conflict(
                kind=ConflictKind.STRATEGY_DISAGREEMENT,
                policy_ids=tuple(policy_id for policy_id, _ in named),
                subject=field,
                description=(
                    f"Policies disagree on the strategy for '{field}'; "
                    f"'{winner}' from {winner_id} applies to every matched value"
                ),
            )
        )
    return conflicts


def find_value_contradictions(
    matched: Sequence[Policy],
    strategy_overrides: Mapping[str, MergeStrategy] | None = None,
) -> list[Conflict]:
    """Fields resolved by first/last where contributing policies set different values."""
    conflicts: list[Conflict] = []
    for field in output_fields(matched):
        strategy = resolve_strategy(field, matched, strategy_overrides)
        if strategy not in ORDER_DEPENDENT_STRATEGIES:
            continue
        contributors = [policy for policy in matched if field in policy.output]
        distinct: list[Any] = []
        for policy in contributors:
            if policy.output[field] not in distinct:
                distinct.append(policy.output[field])
        if len(distinct) < 2:
            continue
        conflicts.append(
            Conflict(
                kind=ConflictKind.VALUE_CONTRADICTION,
                policy_ids=tuple(policy.policy_id for policy in contributors),
                subject=field,
                description=f"'{field}' is resolved by '{strategy}' over differing values {distinct!r}",
            )
        )
    return conflicts


def _attributes(policy: Policy) -> list[str]:
    names: list[str] = []
    for clause in iter_clauses(policy.condition):
        if clause.attribute not in names:
            names.append(clause.attribute)
    return names


def _strategy_fields(matched: Sequence[Policy]) -> list[str]:
    fields: list[str] = []
    for policy in matched:
        for name in policy.merge_strategies:
            if name not in fields:
                fields.append(name)
    return fields
