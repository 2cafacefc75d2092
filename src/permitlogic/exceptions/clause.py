"""Construction-time exceptions for clauses, conditions and facts."""

from __future__ import annotations

from permitlogic.exceptions.base import PermitLogicError


class ClauseError(PermitLogicError, ValueError):
    """Raised when a clause cannot be constructed against the registry."""


class IllegalOperatorError(ClauseError):
    """Raised when an operator is not legal for the attribute's value kind."""


class MalformedValueError(ClauseError):
    """Raised when a clause value does not have the shape its operator needs."""


class FactError(PermitLogicError, ValueError):
    """Raised when a fact value does not match its attribute's declared kind."""
