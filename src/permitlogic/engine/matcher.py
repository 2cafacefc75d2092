"""Policy matcher: selects the published policies whose condition holds."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from permitlogic.engine.condition import evaluate_condition
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions.clause import FactError
from permitlogic.exceptions.evaluation import EvaluationError
from permitlogic.model.policy import Policy
from permitlogic.types.common import FactScalar

logger = logging.getLogger(__name__)


def order_policies(policies: Sequence[Policy]) -> list[Policy]:
    """Sort by ascending priority; unprioritized policies follow, ties keep input order."""
    indexed = list(enumerate(policies))
    indexed.sort(
        key=lambda item: (
            item[1].priority is None,
            item[1].priority if item[1].priority is not None else 0,
            item[0],
        )
    )
    return [policy for _, policy in indexed]


def match_policies(
    policies: Sequence[Policy],
    fact: Mapping[str, FactScalar],
    registry: AttributeRegistry,
) -> list[Policy]:
    """Return the published policies whose condition evaluates true, in match order.

    Any evaluation error aborts the whole match; partial results are never
    returned.
    """
    matched: list[Policy] = []
    for policy in order_policies([p for p in policies if p.is_published]):
        try:
            applies = evaluate_condition(policy.condition, fact, registry)
        except (EvaluationError, FactError):
            logger.error("Condition evaluation failed for policy %s", policy.policy_id)
            raise
        if applies:
            matched.append(policy)

    logger.debug("Matched %d policies: %s", len(matched), [p.policy_id for p in matched])
    return matched
