"""Evaluation result model."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from permitlogic.model.policy import Category
from permitlogic.types.common import OutputRecord


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating one fact against one category's policies.

    An empty ``matched_policy_ids`` means the evaluation succeeded and no
    policy applied; ``output`` is then the category's base output.
    """

    category: Category
    matched_policy_ids: tuple[str, ...]
    output: OutputRecord = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return bool(self.matched_policy_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "matched_policy_ids": list(self.matched_policy_ids),
            "output": copy.deepcopy(self.output),
        }
