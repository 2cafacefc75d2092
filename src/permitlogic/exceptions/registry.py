"""Attribute registry exceptions."""

from __future__ import annotations

from permitlogic.exceptions.base import PermitLogicError


class RegistryError(PermitLogicError, ValueError):
    """Raised when the attribute registry is built or queried incorrectly."""


class DuplicateAttributeError(RegistryError):
    """Raised when an attribute name is registered twice."""


class UnknownAttributeError(RegistryError):
    """Raised when a registry lookup names an undeclared attribute."""


class RegistryFrozenError(RegistryError):
    """Raised when registering into a registry that has been frozen."""
