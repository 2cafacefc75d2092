"""Root exception for Permitlogic."""

from __future__ import annotations


class PermitLogicError(Exception):
    """Base class for every error raised by Permitlogic."""
