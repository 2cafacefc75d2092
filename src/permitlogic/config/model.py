"""Config data model for Permitlogic evaluations."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from permitlogic.constants.attributes import DEFAULT_ATTRIBUTES
from permitlogic.constants.categories import DEFAULT_BASE_OUTPUTS, DEFAULT_MERGE_STRATEGIES
from permitlogic.constants.config import DEFAULT_STRICT_FACTS
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.model.attributes import Attribute
from permitlogic.model.policy import Category, MergeStrategy


@dataclass(frozen=True)
class PermitLogicConfig:
    """Resolved evaluation config.

    ``merge_strategies`` and ``base_outputs`` hold only the overrides read
    from the config file; the category defaults are applied on lookup.
    """

    attributes: tuple[Attribute, ...] = ()
    merge_strategies: dict[Category, dict[str, MergeStrategy]] = field(default_factory=dict)
    base_outputs: dict[Category, dict[str, Any]] = field(default_factory=dict)
    strict_facts: bool = DEFAULT_STRICT_FACTS

    def build_registry(self) -> AttributeRegistry:
        """Return a frozen registry of the built-in catalog plus configured attributes."""
        return AttributeRegistry((*DEFAULT_ATTRIBUTES, *self.attributes)).freeze()

    def strategy_overrides_for(self, category: Category) -> dict[str, MergeStrategy]:
        """Category default strategies with config overrides applied."""
        return {**DEFAULT_MERGE_STRATEGIES.get(category, {}), **self.merge_strategies.get(category, {})}

    def base_output_for(self, category: Category) -> dict[str, Any]:
        """Fresh copy of the fallback output for *category*."""
        base = {**DEFAULT_BASE_OUTPUTS.get(category, {}), **self.base_outputs.get(category, {})}
        return copy.deepcopy(base)
