"""Policy document exceptions."""

from __future__ import annotations

from permitlogic.exceptions.base import PermitLogicError


class PolicyError(PermitLogicError, ValueError):
    """Base class for policy document errors."""


class PolicySchemaError(PolicyError):
    """Raised when a policy document violates the document schema."""


class PolicyCompileError(PolicyError):
    """Raised when a schema-valid policy document cannot be compiled."""


class PolicyLoadError(PolicyError):
    """Raised when policy files cannot be located or read."""
