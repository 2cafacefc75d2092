"""Deterministic policy runtime.

Holds an immutable snapshot of compiled policies, a frozen attribute
registry and the resolved config, and evaluates facts against them.
Nothing is mutated after construction, so one engine can serve concurrent
evaluations.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from permitlogic.config.model import PermitLogicConfig
from permitlogic.constants.categories import OUTPUT_FIELD_KINDS
from permitlogic.engine.condition import flatten_condition
from permitlogic.engine.conflicts import ConflictReport, analyze_conflicts
from permitlogic.engine.loader import load_policies
from permitlogic.engine.matcher import match_policies
from permitlogic.engine.merge import merge
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions.evaluation import MergeError
from permitlogic.exceptions.policy import PolicyLoadError
from permitlogic.model.facts import Fact
from permitlogic.model.policy import Category, Policy
from permitlogic.model.results import EvaluationResult

logger = logging.getLogger(__name__)


class PolicyEngine:
    """Evaluates facts against a fixed set of policies.

    Policies keep their input order; the matcher applies priority ordering
    per evaluation.
    """

    def __init__(
        self,
        policies: Iterable[Policy],
        registry: AttributeRegistry | None = None,
        config: PermitLogicConfig | None = None,
    ) -> None:
        self._config = config if config is not None else PermitLogicConfig()
        self._registry = registry if registry is not None else self._config.build_registry()
        self._policies: tuple[Policy, ...] = tuple(policies)

        seen: set[str] = set()
        for policy in self._policies:
            if policy.policy_id in seen:
                raise PolicyLoadError(f"Duplicate policy_id '{policy.policy_id}'")
            seen.add(policy.policy_id)

    @classmethod
    def from_sources(
        cls,
        *,
        policies_dir: Path | None = None,
        policy_files: tuple[Path, ...] | None = None,
        config: PermitLogicConfig | None = None,
    ) -> PolicyEngine:
        """Build an engine from policy YAML files, or the bundled pack when no source is given."""
        config = config if config is not None else PermitLogicConfig()
        registry = config.build_registry()
        policies = load_policies(registry, policies_dir=policies_dir, policy_files=policy_files)
        return cls(policies, registry, config)

    @property
    def policies(self) -> tuple[Policy, ...]:
        return self._policies

    @property
    def registry(self) -> AttributeRegistry:
        return self._registry

    @property
    def config(self) -> PermitLogicConfig:
        return self._config

    @property
    def policy_ids(self) -> list[str]:
        """Return policy IDs in input order."""
        return [policy.policy_id for policy in self._policies]

    @property
    def policy_count(self) -> int:
        """Number of loaded policies."""
        return len(self._policies)

    @property
    def categories(self) -> tuple[Category, ...]:
        """Categories with at least one policy, in declaration order."""
        present = {policy.category for policy in self._policies}
        return tuple(category for category in Category if category in present)

    def policies_for(self, category: Category | str) -> list[Policy]:
        category = Category(category)
        return [policy for policy in self._policies if policy.category is category]

    def make_fact(self, values: Mapping[str, Any]) -> Fact:
        """Validate raw values into a Fact. A Fact is returned as is."""
        if isinstance(values, Fact):
            return values
        return Fact.from_mapping(values, self._registry, strict=self._config.strict_facts)

    def evaluate(self, fact: Mapping[str, Any], category: Category | str) -> EvaluationResult:
        """Match and merge one category's policies for *fact*.

        Evaluation and merge errors propagate; a failed evaluation never
        looks like an empty match.
        """
        category = Category(category)
        fact = self.make_fact(fact)
        matched = match_policies(self.policies_for(category), fact, self._registry)
        try:
            output = merge(
                matched,
                self._config.base_output_for(category),
                self._config.strategy_overrides_for(category),
                field_kinds=OUTPUT_FIELD_KINDS.get(category),
            )
        except MergeError:
            logger.error("Merge failed for category %s over %s", category, [p.policy_id for p in matched])
            raise
        return EvaluationResult(
            category=category,
            matched_policy_ids=tuple(policy.policy_id for policy in matched),
            output=output,
        )

    def evaluate_all(
        self,
        fact: Mapping[str, Any],
        categories: Iterable[Category | str] | None = None,
    ) -> dict[Category, EvaluationResult]:
        """Evaluate every requested category (default: all present). Any failure aborts the batch."""
        fact = self.make_fact(fact)
        selected = self.categories if categories is None else tuple(Category(c) for c in categories)
        return {category: self.evaluate(fact, category) for category in selected}

    def analyze(self, fact: Mapping[str, Any], category: Category | str) -> ConflictReport:
        """Advisory conflict report for the policies *fact* matches in *category*."""
        category = Category(category)
        fact = self.make_fact(fact)
        matched = match_policies(self.policies_for(category), fact, self._registry)
        return analyze_conflicts(matched, self._config.strategy_overrides_for(category))

    def fingerprint(self) -> str:
        """Return a stable hash of the loaded policy set."""
        payload = [
            {
                "policy_id": policy.policy_id,
                "category": policy.category.value,
                "status": policy.status.value,
                "priority": policy.priority,
                "condition": flatten_condition(policy.condition),
                "output": policy.output,
                "merge_strategies": {field: strategy.value for field, strategy in policy.merge_strategies.items()},
            }
            for policy in self._policies
        ]
        blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.sha256(blob).hexdigest()
