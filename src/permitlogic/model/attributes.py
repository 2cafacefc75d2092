"""Attribute, value-kind and operator definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from permitlogic.exceptions.registry import RegistryError


class ValueKind(StrEnum):
    """Kind of value an attribute holds."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class Operator(StrEnum):
    """Comparison operators usable in a clause."""

    EQ = "eq"
    NOT_EQ = "not_eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "not_in"


RELATIONAL_OPERATORS: frozenset[Operator] = frozenset({Operator.GT, Operator.GTE, Operator.LT, Operator.LTE})
SET_OPERATORS: frozenset[Operator] = frozenset({Operator.IN, Operator.NOT_IN})

LEGAL_OPERATORS: dict[ValueKind, frozenset[Operator]] = {
    ValueKind.NUMBER: frozenset(
        {Operator.EQ, Operator.NOT_EQ, Operator.BETWEEN, *RELATIONAL_OPERATORS, *SET_OPERATORS}
    ),
    ValueKind.ENUM: frozenset({Operator.EQ, Operator.NOT_EQ, *SET_OPERATORS}),
    ValueKind.BOOLEAN: frozenset({Operator.EQ, Operator.NOT_EQ}),
}


@dataclass(frozen=True)
class Attribute:
    """A named, typed input dimension a clause can test.

    ``values`` lists the allowed tags of an enum attribute and is empty for
    every other kind. ``unit`` is informational only.
    """

    name: str
    kind: ValueKind
    unit: str | None = None
    values: tuple[str, ...] = ()
    label: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise RegistryError("attribute name must be a non-empty string")
        if self.kind is ValueKind.ENUM and not self.values:
            raise RegistryError(f"enum attribute '{self.name}' must declare at least one allowed value")
        if self.kind is not ValueKind.ENUM and self.values:
            raise RegistryError(f"attribute '{self.name}' of kind {self.kind} cannot declare allowed values")

    @property
    def legal_operators(self) -> frozenset[Operator]:
        """Operators legal for this attribute's kind."""
        return LEGAL_OPERATORS[self.kind]

    @property
    def display_name(self) -> str:
        """Human-readable name, falling back to a title-cased attribute name."""
        if self.label:
            return self.label
        base = self.name.removesuffix("_ft").removesuffix("_lbs").removesuffix("_mph")
        return base.replace("_", " ").title()
