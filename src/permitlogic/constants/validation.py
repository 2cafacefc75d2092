"""Stable validation error codes and allowed-key sets for config and policy validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # config file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # invalid enum value / attribute declaration

POL001: str = "POL001"  # policy file or directory not found / unreadable
POL002: str = "POL002"  # invalid file extension
POL003: str = "POL003"  # invalid YAML parse
POL004: str = "POL004"  # top-level value is not a mapping
POL005: str = "POL005"  # unknown top-level key
POL006: str = "POL006"  # missing required field
POL007: str = "POL007"  # invalid value / condition
POL008: str = "POL008"  # duplicate policy_id
POL009: str = "POL009"  # source conflict (--policies-dir + --policy-file)

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "attributes",
        "merge_strategies",
        "base_outputs",
        "strict_facts",
    }
)

ALLOWED_ATTRIBUTE_KEYS: frozenset[str] = frozenset({"name", "kind", "unit", "values", "label"})
REQUIRED_ATTRIBUTE_KEYS: frozenset[str] = frozenset({"name", "kind"})
