"""Tests for the merge resolver, including the reference escort scenarios."""

from __future__ import annotations

from typing import Any

import pytest

from permitlogic.engine.matcher import match_policies
from permitlogic.engine.merge import infer_field_kind, merge, resolve_strategy
from permitlogic.engine.registry import build_default_registry
from permitlogic.exceptions import MergeError, MergeTypeMismatchError
from permitlogic.model.policy import FieldKind, MergeStrategy, Policy

from .conftest import _clause, _policy

BASE_OUTPUT: dict[str, Any] = {"front_escorts": 0}


def _scenario_policies(strategy: MergeStrategy) -> list[Policy]:
    return [
        _policy(
            "A",
            _clause("width_ft", ">", 12),
            {"front_escorts": 1},
            priority=1,
            strategies={"front_escorts": strategy},
        ),
        _policy("B", _clause("width_ft", ">", 14), {"front_escorts": 2}, priority=2),
    ]


def _evaluate(policies: list[Policy], width: float) -> tuple[list[str], dict[str, Any]]:
    matched = match_policies(policies, {"width_ft": width}, build_default_registry())
    return [policy.policy_id for policy in matched], merge(matched, BASE_OUTPUT)


def test_scenario_max_over_two_matches() -> None:
    """width 15 matches A and B; max(1, 2) = 2."""
    matched, output = _evaluate(_scenario_policies(MergeStrategy.MAX), 15)
    assert matched == ["A", "B"]
    assert output == {"front_escorts": 2}


def test_scenario_sum_over_two_matches() -> None:
    """With sum the same match set yields 3."""
    _, output = _evaluate(_scenario_policies(MergeStrategy.SUM), 15)
    assert output == {"front_escorts": 3}


def test_scenario_single_match() -> None:
    """width 13 matches A only."""
    matched, output = _evaluate(_scenario_policies(MergeStrategy.MAX), 13)
    assert matched == ["A"]
    assert output == {"front_escorts": 1}


def test_scenario_no_match_returns_base() -> None:
    """width 10 matches nothing and the base output comes back."""
    matched, output = _evaluate(_scenario_policies(MergeStrategy.MAX), 10)
    assert matched == []
    assert output == BASE_OUTPUT


def test_no_match_returns_copy_of_base() -> None:
    """The fallback output is equal to, but independent of, the base record."""
    base = {"types": ["oversize"]}
    output = merge([], base)
    assert output == base
    output["types"].append("overweight")
    assert base == {"types": ["oversize"]}


def test_base_values_do_not_join_strategies() -> None:
    """Matched values replace base values even when max would prefer the base."""
    policies = [_policy("A", output={"front_escorts": 1})]
    output = merge(policies, {"front_escorts": 5, "rear_escorts": 0}, {"front_escorts": MergeStrategy.MAX})
    assert output == {"front_escorts": 1, "rear_escorts": 0}


@pytest.mark.parametrize(
    ("strategy", "values", "expected"),
    [
        pytest.param(MergeStrategy.MAX, [1, 3, 2], 3, id="max"),
        pytest.param(MergeStrategy.MIN, [55, 45, 50], 45, id="min"),
        pytest.param(MergeStrategy.SUM, [1, 1, 1], 3, id="sum"),
        pytest.param(MergeStrategy.FIRST, ["a", "b", "c"], "a", id="first"),
        pytest.param(MergeStrategy.LAST, ["a", "b", "c"], "c", id="last"),
        pytest.param(MergeStrategy.UNION, [["x", "y"], ["y", "z"], ["x"]], ["x", "y", "z"], id="union-list"),
        pytest.param(MergeStrategy.UNION, [False, True, False], True, id="union-boolean"),
        pytest.param(MergeStrategy.UNION, [False, False], False, id="union-boolean-all-false"),
        pytest.param(MergeStrategy.INTERSECTION, [["x", "y", "z"], ["z", "y"], ["y", "z", "w"]], ["y", "z"], id="intersection-list"),
        pytest.param(MergeStrategy.INTERSECTION, [True, False], False, id="intersection-boolean"),
        pytest.param(MergeStrategy.INTERSECTION, [True, True], True, id="intersection-boolean-all-true"),
    ],
)
def test_strategies(strategy: MergeStrategy, values: list[Any], expected: Any) -> None:
    """Each strategy combines every contributed value."""
    policies = [_policy(f"p{index}", output={"field": value}) for index, value in enumerate(values)]
    assert merge(policies, {}, {"field": strategy}) == {"field": expected}


def test_sum_skips_policies_without_the_field() -> None:
    """Policies that omit a field contribute nothing to its sum."""
    policies = [
        _policy("A", output={"front_escorts": 1}),
        _policy("B", output={"rear_escorts": 1}),
        _policy("C", output={"front_escorts": 2}),
    ]
    output = merge(policies, {}, {"front_escorts": MergeStrategy.SUM, "rear_escorts": MergeStrategy.SUM})
    assert output == {"front_escorts": 3, "rear_escorts": 1}


def test_unconfigured_field_falls_back_to_last() -> None:
    """A field with no strategy anywhere is last-write-wins over match order."""
    policies = [_policy("A", output={"lead": "x"}), _policy("B", output={"lead": "y"})]
    assert resolve_strategy("lead", policies) is MergeStrategy.LAST
    assert merge(policies, {}) == {"lead": "y"}


def test_policy_strategy_beats_overrides() -> None:
    """A strategy named by a matched policy wins over the category default."""
    policies = [
        _policy("A", output={"front_escorts": 1}, strategies={"front_escorts": MergeStrategy.SUM}),
        _policy("B", output={"front_escorts": 2}),
    ]
    assert merge(policies, {}, {"front_escorts": MergeStrategy.MAX}) == {"front_escorts": 3}


def test_earliest_policy_chooses_strategy_for_all_values() -> None:
    """The first policy naming a strategy decides it; values still come from every policy."""
    policies = [
        _policy("A", output={"front_escorts": 1}, priority=1, strategies={"front_escorts": MergeStrategy.FIRST}),
        _policy("B", output={"front_escorts": 2}, priority=2, strategies={"front_escorts": MergeStrategy.MAX}),
    ]
    assert merge(policies, {}) == {"front_escorts": 1}
    assert merge(list(reversed(policies)), {}) == {"front_escorts": 2}


def test_merge_is_idempotent_for_commutative_strategies() -> None:
    """Merging the same matched set twice gives the same output."""
    policies = [
        _policy("A", output={"front_escorts": 1, "height_pole": True, "notes": ["a"]}),
        _policy("B", output={"front_escorts": 2, "height_pole": False, "notes": ["b", "a"]}),
    ]
    overrides = {
        "front_escorts": MergeStrategy.MAX,
        "height_pole": MergeStrategy.UNION,
        "notes": MergeStrategy.UNION,
    }
    first = merge(policies, {}, overrides)
    assert first == merge(policies, {}, overrides)
    assert first == {"front_escorts": 2, "height_pole": True, "notes": ["a", "b"]}


def test_reordering_equal_priorities_changes_only_order_dependent_fields() -> None:
    """Swapping input order of equal-priority policies flips first/last fields only."""
    registry = build_default_registry()
    one = _policy("one", output={"lead": "x", "front_escorts": 1}, priority=5)
    two = _policy("two", output={"lead": "y", "front_escorts": 2}, priority=5)
    overrides = {"front_escorts": MergeStrategy.MAX}

    forward = merge(match_policies([one, two], {}, registry), {}, overrides)
    backward = merge(match_policies([two, one], {}, registry), {}, overrides)
    assert forward == {"lead": "y", "front_escorts": 2}
    assert backward == {"lead": "x", "front_escorts": 2}


def test_merged_lists_are_copies() -> None:
    """Mutating a merged list never reaches the policy output."""
    policy = _policy("A", output={"types": ["oversize"]})
    output = merge([policy], {}, {"types": MergeStrategy.LAST})
    output["types"].append("superload")
    assert policy.output["types"] == ["oversize"]


@pytest.mark.parametrize(
    ("strategy", "value"),
    [
        pytest.param(MergeStrategy.SUM, ["oversize"], id="sum-on-list"),
        pytest.param(MergeStrategy.MAX, "wide", id="max-on-text"),
        pytest.param(MergeStrategy.MIN, True, id="min-on-boolean"),
        pytest.param(MergeStrategy.UNION, 3, id="union-on-number"),
        pytest.param(MergeStrategy.INTERSECTION, "wide", id="intersection-on-text"),
    ],
)
def test_incompatible_strategy_raises(strategy: MergeStrategy, value: Any) -> None:
    """A strategy applied to a value kind it cannot merge is a type mismatch."""
    with pytest.raises(MergeTypeMismatchError, match="cannot merge"):
        merge([_policy("A", output={"field": value})], {}, {"field": strategy})


def test_mixed_value_kinds_raise() -> None:
    """Policies contributing different kinds to one field cannot be merged."""
    policies = [_policy("A", output={"field": 1}), _policy("B", output={"field": "one"})]
    with pytest.raises(MergeTypeMismatchError, match="mixes value kinds"):
        merge(policies, {})


def test_declared_field_kind_is_enforced() -> None:
    """A value that contradicts the declared field kind is a type mismatch."""
    with pytest.raises(MergeError, match="is declared number"):
        merge(
            [_policy("A", output={"front_escorts": "two"})],
            {},
            {"front_escorts": MergeStrategy.LAST},
            field_kinds={"front_escorts": FieldKind.NUMBER},
        )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        pytest.param(True, FieldKind.BOOLEAN, id="bool-before-int"),
        pytest.param(2, FieldKind.NUMBER, id="int"),
        pytest.param(2.5, FieldKind.NUMBER, id="float"),
        pytest.param("x", FieldKind.TEXT, id="text"),
        pytest.param(["x"], FieldKind.LIST, id="list"),
        pytest.param(None, None, id="none"),
    ],
)
def test_infer_field_kind(value: Any, expected: FieldKind | None) -> None:
    """Output kinds are inferred from Python types; bool is never a number."""
    assert infer_field_kind(value) is expected
