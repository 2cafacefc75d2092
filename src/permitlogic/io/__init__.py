"""Shared file I/O helpers."""

from .facts import load_fact_file, parse_assignments
from .json_io import load_json_file, write_json_atomic

__all__ = ["load_fact_file", "load_json_file", "parse_assignments", "write_json_atomic"]
