"""Config loading and normalization for Permitlogic."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from permitlogic.config.model import PermitLogicConfig
from permitlogic.constants.attributes import DEFAULT_ATTRIBUTES
from permitlogic.constants.categories import OUTPUT_FIELD_KINDS, STRATEGY_FIELD_KINDS
from permitlogic.constants.config import CONFIG_FILENAME, DEFAULT_STRICT_FACTS
from permitlogic.constants.policy_schema import MERGE_STRATEGY_ALIASES
from permitlogic.constants.validation import ALLOWED_ATTRIBUTE_KEYS, ALLOWED_CONFIG_KEYS, REQUIRED_ATTRIBUTE_KEYS
from permitlogic.engine.merge import infer_field_kind
from permitlogic.exceptions import ConfigError, RegistryError
from permitlogic.model.attributes import Attribute, ValueKind
from permitlogic.model.policy import Category, MergeStrategy

VALID_CATEGORIES: frozenset[str] = frozenset(category.value for category in Category)
VALID_KINDS: frozenset[str] = frozenset(kind.value for kind in ValueKind)


def load_config(root: Path, config_path: Path | None = None) -> PermitLogicConfig:
    """Load and validate config from ``permitlogic.yaml`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return PermitLogicConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    unknown = sorted(set(raw) - ALLOWED_CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    strict_facts = raw.get("strict_facts", DEFAULT_STRICT_FACTS)
    if not isinstance(strict_facts, bool):
        raise ConfigError("strict_facts must be a boolean")

    return PermitLogicConfig(
        attributes=_build_attributes(raw.get("attributes")),
        merge_strategies=_build_merge_strategies(raw.get("merge_strategies")),
        base_outputs=_build_base_outputs(raw.get("base_outputs")),
        strict_facts=strict_facts,
    )


def _ensure_mapping(value: Any, key_name: str) -> dict[Any, Any]:
    """Coerce a value to a mapping, raising ConfigError on type mismatch."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key_name} must be a mapping")
    return value


def _ensure_category(name: Any, key_name: str) -> Category:
    if name not in VALID_CATEGORIES:
        raise ConfigError(f"{key_name} keys must be one of {sorted(VALID_CATEGORIES)}, got {name!r}")
    return Category(name)


def _build_attributes(raw: Any) -> tuple[Attribute, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError("attributes must be a list of mappings")

    builtin = {attribute.name for attribute in DEFAULT_ATTRIBUTES}
    seen: set[str] = set()
    attributes: list[Attribute] = []
    for index, entry in enumerate(raw):
        where = f"attributes[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where} must be a mapping")
        unknown = sorted(set(entry) - ALLOWED_ATTRIBUTE_KEYS)
        if unknown:
            raise ConfigError(f"{where} has unknown keys: {unknown}")
        missing = sorted(REQUIRED_ATTRIBUTE_KEYS - set(entry))
        if missing:
            raise ConfigError(f"{where} missing required keys: {missing}")

        name = entry["name"]
        if not isinstance(name, str):
            raise ConfigError(f"{where}.name must be a string")
        if name in builtin or name in seen:
            raise ConfigError(f"{where}: attribute '{name}' is already declared")
        if entry["kind"] not in VALID_KINDS:
            raise ConfigError(f"{where}.kind must be one of {sorted(VALID_KINDS)}, got {entry['kind']!r}")
        unit = entry.get("unit")
        if unit is not None and not isinstance(unit, str):
            raise ConfigError(f"{where}.unit must be a string")
        label = entry.get("label", "")
        if not isinstance(label, str):
            raise ConfigError(f"{where}.label must be a string")
        values = entry.get("values") or []
        if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
            raise ConfigError(f"{where}.values must be a list of strings")

        try:
            attribute = Attribute(name=name, kind=ValueKind(entry["kind"]), unit=unit, values=tuple(values), label=label)
        except RegistryError as exc:
            raise ConfigError(f"{where}: {exc}") from exc
        seen.add(name)
        attributes.append(attribute)
    return tuple(attributes)


def _build_merge_strategies(raw: Any) -> dict[Category, dict[str, MergeStrategy]]:
    strategies: dict[Category, dict[str, MergeStrategy]] = {}
    for category_name, fields in _ensure_mapping(raw, "merge_strategies").items():
        category = _ensure_category(category_name, "merge_strategies")
        declared = OUTPUT_FIELD_KINDS.get(category, {})
        resolved: dict[str, MergeStrategy] = {}
        for field, name in _ensure_mapping(fields, f"merge_strategies.{category}").items():
            if not isinstance(name, str) or name.lower() not in MERGE_STRATEGY_ALIASES:
                raise ConfigError(
                    f"merge_strategies.{category}.{field} must be one of {sorted(MERGE_STRATEGY_ALIASES)}, got {name!r}"
                )
            strategy = MERGE_STRATEGY_ALIASES[name.lower()]
            kind = declared.get(field)
            if kind is not None and kind not in STRATEGY_FIELD_KINDS[strategy]:
                raise ConfigError(f"merge_strategies.{category}.{field}: '{strategy}' cannot merge {kind} values")
            resolved[str(field)] = strategy
        strategies[category] = resolved
    return strategies


def _build_base_outputs(raw: Any) -> dict[Category, dict[str, Any]]:
    outputs: dict[Category, dict[str, Any]] = {}
    for category_name, fields in _ensure_mapping(raw, "base_outputs").items():
        category = _ensure_category(category_name, "base_outputs")
        declared = OUTPUT_FIELD_KINDS.get(category, {})
        resolved: dict[str, Any] = {}
        for field, value in _ensure_mapping(fields, f"base_outputs.{category}").items():
            kind = infer_field_kind(value)
            if kind is None:
                raise ConfigError(f"base_outputs.{category}.{field} must be a number, boolean, string or list")
            expected = declared.get(field)
            if expected is not None and kind is not expected:
                raise ConfigError(f"base_outputs.{category}.{field} must be a {expected} value")
            resolved[str(field)] = value
        outputs[category] = resolved
    return outputs
