"""Closed tagged union of clause values.

Raw document values are converted into one of these shapes exactly once,
when the clause is constructed. Evaluation only ever sees these types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class NumberValue:
    """A single numeric operand."""

    value: float


@dataclass(frozen=True)
class BoolValue:
    """A single boolean operand."""

    value: bool


@dataclass(frozen=True)
class EnumValue:
    """A single enum tag operand."""

    value: str


@dataclass(frozen=True)
class RangeValue:
    """Inclusive numeric range used by ``between``."""

    low: float
    high: float

    def contains(self, number: float) -> bool:
        return self.low <= number <= self.high


@dataclass(frozen=True)
class SetValue:
    """Non-empty set of scalar operands, first-appearance order preserved."""

    items: tuple[float | str, ...]

    def contains(self, item: float | bool | str) -> bool:
        return item in self.items


ClauseValue: TypeAlias = NumberValue | BoolValue | EnumValue | RangeValue | SetValue


def to_plain(value: ClauseValue) -> float | bool | str | list[float | str]:
    """Return the document-shaped form of a clause value."""
    if isinstance(value, RangeValue):
        return [value.low, value.high]
    if isinstance(value, SetValue):
        return list(value.items)
    return value.value
