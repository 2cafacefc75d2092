"""Shared exception hierarchy for Permitlogic."""

from __future__ import annotations

from .base import PermitLogicError
from .clause import ClauseError, FactError, IllegalOperatorError, MalformedValueError
from .config import ConfigError
from .evaluation import EvaluationError, MergeError, MergeTypeMismatchError, UnregisteredAttributeError
from .policy import PolicyCompileError, PolicyError, PolicyLoadError, PolicySchemaError
from .registry import DuplicateAttributeError, RegistryError, RegistryFrozenError, UnknownAttributeError

__all__ = [
    "ClauseError",
    "ConfigError",
    "DuplicateAttributeError",
    "EvaluationError",
    "FactError",
    "IllegalOperatorError",
    "MalformedValueError",
    "MergeError",
    "MergeTypeMismatchError",
    "PermitLogicError",
    "PolicyCompileError",
    "PolicyError",
    "PolicyLoadError",
    "PolicySchemaError",
    "RegistryError",
    "RegistryFrozenError",
    "UnknownAttributeError",
    "UnregisteredAttributeError",
]
