"""Evaluation-time and merge-time exceptions."""

from __future__ import annotations

from permitlogic.exceptions.base import PermitLogicError


class EvaluationError(PermitLogicError):
    """Raised when a condition cannot be evaluated against the registry."""


class UnregisteredAttributeError(EvaluationError):
    """Raised when a clause references an attribute the registry does not declare."""


class MergeError(PermitLogicError):
    """Raised when matched policy outputs cannot be merged."""


class MergeTypeMismatchError(MergeError):
    """Raised when a merge strategy is applied to an incompatible field kind."""
