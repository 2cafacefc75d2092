"""Fact input: fact files and ``name=value`` assignments."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from permitlogic.constants.reporting import FACT_FILE_SUFFIXES
from permitlogic.exceptions.clause import FactError
from permitlogic.io.json_io import load_json_file
from permitlogic.model.attributes import ValueKind

if TYPE_CHECKING:
    from permitlogic.engine.registry import AttributeRegistry


def load_fact_file(path: Path) -> dict[str, Any]:
    """Read a JSON or YAML mapping of attribute values."""
    suffix = path.suffix.lower()
    if suffix not in FACT_FILE_SUFFIXES:
        raise FactError(f"Fact file must use one of {sorted(FACT_FILE_SUFFIXES)}: {path}")

    try:
        if suffix == ".json":
            raw = load_json_file(path)
        else:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise FactError(f"Failed to read fact file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise FactError(f"Invalid fact file {path}: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise FactError(f"Fact file {path} must contain a mapping")
    return raw


def parse_assignments(
    assignments: Iterable[str],
    registry: AttributeRegistry | None = None,
) -> dict[str, Any]:
    """Parse ``name=value`` pairs. Later assignments win.

    ``true``/``false`` become booleans, numeric text becomes a number and
    anything else stays a string (an enum tag). When *registry* declares the
    name as an enum attribute the text is kept verbatim, so numeric-looking
    tags such as ``"1"`` survive.
    """
    values: dict[str, Any] = {}
    for assignment in assignments:
        name, sep, text = assignment.partition("=")
        name = name.strip()
        if not sep or not name:
            raise FactError(f"Expected name=value, got {assignment!r}")
        attribute = registry.get(name) if registry is not None else None
        if attribute is not None and attribute.kind is ValueKind.ENUM:
            values[name] = text.strip()
        else:
            values[name] = parse_scalar(text.strip())
    return values


def parse_scalar(text: str) -> bool | float | str:
    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        number = float(text)
    except ValueError:
        return text
    if not math.isfinite(number):
        raise FactError(f"Assigned number must be finite, got {text!r}")
    return number
