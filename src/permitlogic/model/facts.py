"""Immutable fact records describing one vehicle/load."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from permitlogic.exceptions.clause import FactError
from permitlogic.model.attributes import Attribute, ValueKind
from permitlogic.types.common import FactScalar

if TYPE_CHECKING:
    from permitlogic.engine.registry import AttributeRegistry

logger = logging.getLogger(__name__)


class Fact(Mapping[str, FactScalar]):
    """Read-only mapping from attribute name to a value of that attribute's kind.

    A fact need not describe every attribute; absent attributes make their
    clauses evaluate false.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, FactScalar] | None = None) -> None:
        self._values: Mapping[str, FactScalar] = MappingProxyType(dict(values or {}))

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any],
        registry: AttributeRegistry,
        *,
        strict: bool = False,
    ) -> Fact:
        """Validate raw values against *registry* and build a fact.

        Integers are normalized to floats for number attributes. Keys the
        registry does not declare are dropped, or rejected when *strict*.
        """
        invalid = [name for name in values if not isinstance(name, str)]
        if invalid:
            raise FactError(f"fact attribute names must be strings, got {sorted(map(repr, invalid))}")
        normalized: dict[str, FactScalar] = {}
        for name in sorted(values):
            raw = values[name]
            attribute = registry.get(name)
            if attribute is None:
                if strict:
                    raise FactError(f"fact attribute '{name}' is not declared in the registry")
                logger.debug("Ignoring undeclared fact attribute: %s", name)
                continue
            if raw is None:
                continue
            normalized[name] = coerce_fact_value(attribute, raw)
        return cls(normalized)

    def __getitem__(self, key: str) -> FactScalar:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Fact({dict(self._values)!r})"

    def to_dict(self) -> dict[str, FactScalar]:
        return dict(self._values)


def coerce_fact_value(attribute: Attribute, raw: Any) -> FactScalar:
    """Check *raw* against the attribute kind and return the normalized value."""
    if attribute.kind is ValueKind.NUMBER:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise FactError(f"fact attribute '{attribute.name}' must be a number, got {raw!r}")
        return float(raw)
    if attribute.kind is ValueKind.BOOLEAN:
        if not isinstance(raw, bool):
            raise FactError(f"fact attribute '{attribute.name}' must be a boolean, got {raw!r}")
        return raw
    if not isinstance(raw, str):
        raise FactError(f"fact attribute '{attribute.name}' must be a string tag, got {raw!r}")
    if raw not in attribute.values:
        raise FactError(
            f"fact attribute '{attribute.name}' must be one of {list(attribute.values)}, got {raw!r}"
        )
    return raw
