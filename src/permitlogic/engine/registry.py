"""Attribute registry: the declared set of evaluable attributes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from permitlogic.constants.attributes import DEFAULT_ATTRIBUTES
from permitlogic.exceptions.registry import DuplicateAttributeError, RegistryFrozenError, UnknownAttributeError
from permitlogic.model.attributes import Attribute, Operator

logger = logging.getLogger(__name__)


class AttributeRegistry:
    """Name-keyed collection of attributes.

    The registry is built once, then frozen. No removal or replacement is
    exposed, so a frozen registry can be shared across concurrent evaluations.
    """

    def __init__(self, attributes: Iterable[Attribute] = ()) -> None:
        self._attributes: dict[str, Attribute] = {}
        self._frozen = False
        for attribute in attributes:
            self.register(attribute)

    def register(self, attribute: Attribute) -> None:
        """Declare *attribute*. Raises DuplicateAttributeError if the name is taken."""
        if self._frozen:
            raise RegistryFrozenError(f"cannot register '{attribute.name}': registry is frozen")
        if attribute.name in self._attributes:
            raise DuplicateAttributeError(f"attribute '{attribute.name}' is already registered")
        self._attributes[attribute.name] = attribute
        logger.debug("Registered attribute: %s (%s)", attribute.name, attribute.kind)

    def freeze(self) -> AttributeRegistry:
        """Reject further registration and return ``self``."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def legal_operators(self, name: str) -> frozenset[Operator]:
        """Return the operators legal for attribute *name*."""
        return self.require(name).legal_operators

    def require(self, name: str) -> Attribute:
        """Return attribute *name* or raise UnknownAttributeError."""
        attribute = self._attributes.get(name)
        if attribute is None:
            raise UnknownAttributeError(f"attribute '{name}' is not registered")
        return attribute

    def get(self, name: str) -> Attribute | None:
        return self._attributes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self._attributes.values())

    def __len__(self) -> int:
        return len(self._attributes)

    @property
    def names(self) -> tuple[str, ...]:
        """Attribute names in registration order."""
        return tuple(self._attributes)


def build_default_registry(extra: Iterable[Attribute] = ()) -> AttributeRegistry:
    """Return a frozen registry holding the built-in catalog plus *extra*."""
    registry = AttributeRegistry(DEFAULT_ATTRIBUTES)
    for attribute in extra:
        registry.register(attribute)
    return registry.freeze()
