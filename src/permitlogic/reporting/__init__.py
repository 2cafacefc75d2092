"""Reporting package for Permitlogic outputs."""

from __future__ import annotations

from .stdout import StdoutReporter
from .writer import build_report, write_report

__all__ = ["StdoutReporter", "build_report", "write_report"]
