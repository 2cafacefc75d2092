"""Shared type aliases for Permitlogic."""

from .common import FactScalar, OutputRecord, OutputValue

__all__ = ["FactScalar", "OutputRecord", "OutputValue"]
