"""Tests for policy matching and match ordering."""

from __future__ import annotations

import logging

import pytest

from permitlogic.engine.matcher import match_policies, order_policies
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions import EvaluationError, FactError, UnregisteredAttributeError
from permitlogic.model.policy import PolicyStatus

from .conftest import _clause, _extended_registry, _policy


def test_order_by_priority_then_input_order() -> None:
    """Prioritized policies come first by ascending priority; ties and unprioritized keep input order."""
    policies = [
        _policy("none_a"),
        _policy("p2", priority=2),
        _policy("p1_a", priority=1),
        _policy("none_b"),
        _policy("p1_b", priority=1),
        _policy("p0", priority=0),
    ]
    ordered = [policy.policy_id for policy in order_policies(policies)]
    assert ordered == ["p0", "p1_a", "p1_b", "p2", "none_a", "none_b"]


def test_order_is_stable_for_negative_priorities() -> None:
    """Negative priorities sort before zero."""
    ordered = order_policies([_policy("zero", priority=0), _policy("neg", priority=-5)])
    assert [policy.policy_id for policy in ordered] == ["neg", "zero"]


def test_match_returns_true_conditions_in_order(registry: AttributeRegistry) -> None:
    """Only policies whose condition holds are returned, in match order."""
    policies = [
        _policy("wide", _clause("width_ft", ">", 14), priority=2),
        _policy("narrow", _clause("width_ft", ">", 12), priority=1),
        _policy("tall", _clause("height_ft", ">", 14.5)),
    ]
    matched = match_policies(policies, {"width_ft": 15.0}, registry)
    assert [policy.policy_id for policy in matched] == ["narrow", "wide"]


@pytest.mark.parametrize(
    "status",
    [PolicyStatus.DRAFT, PolicyStatus.IN_REVIEW, PolicyStatus.ARCHIVED],
    ids=["draft", "in_review", "archived"],
)
def test_unpublished_policies_never_match(registry: AttributeRegistry, status: PolicyStatus) -> None:
    """Only published policies take part in matching."""
    policies = [_policy("always_on"), _policy("hidden", status=status)]
    matched = match_policies(policies, {}, registry)
    assert [policy.policy_id for policy in matched] == ["always_on"]


def test_unpublished_broken_policy_is_not_evaluated(registry: AttributeRegistry) -> None:
    """Filtering happens before evaluation, so a broken draft cannot fail the match."""
    broken = _clause("trailer_axle_groups", ">", 2, _extended_registry())
    policies = [_policy("draft", broken, status=PolicyStatus.DRAFT)]
    assert match_policies(policies, {"trailer_axle_groups": 3}, registry) == []


def test_evaluation_error_aborts_match(registry: AttributeRegistry, caplog: pytest.LogCaptureFixture) -> None:
    """One failing policy fails the whole match and is logged with its id."""
    broken = _clause("trailer_axle_groups", ">", 2, _extended_registry())
    policies = [
        _policy("fine", _clause("width_ft", ">", 12), priority=1),
        _policy("broken", broken, priority=2),
    ]
    with caplog.at_level(logging.ERROR, logger="permitlogic.engine.matcher"):
        with pytest.raises(EvaluationError) as excinfo:
            match_policies(policies, {"width_ft": 15.0}, registry)
    assert isinstance(excinfo.value, UnregisteredAttributeError)
    assert "broken" in caplog.text


def test_empty_policy_list(registry: AttributeRegistry) -> None:
    """No policies means no matches."""
    assert match_policies([], {"width_ft": 15.0}, registry) == []


def test_wrong_kind_fact_value_aborts_match(registry: AttributeRegistry, caplog: pytest.LogCaptureFixture) -> None:
    """A boolean fact value for a number attribute fails the match instead of equalling 1."""
    policies = [_policy("one_lane", _clause("num_lanes_same_direction", "=", 1), priority=1)]
    with caplog.at_level(logging.ERROR, logger="permitlogic.engine.matcher"):
        with pytest.raises(FactError, match="must be a number"):
            match_policies(policies, {"num_lanes_same_direction": True}, registry)
    assert "one_lane" in caplog.text
