"""Config file validation for Permitlogic."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import yaml

from permitlogic.constants.attributes import DEFAULT_ATTRIBUTES
from permitlogic.constants.categories import OUTPUT_FIELD_KINDS, STRATEGY_FIELD_KINDS
from permitlogic.constants.config import CONFIG_FILENAME
from permitlogic.constants.policy_schema import MERGE_STRATEGY_ALIASES
from permitlogic.constants.validation import (
    ALLOWED_ATTRIBUTE_KEYS,
    ALLOWED_CONFIG_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    REQUIRED_ATTRIBUTE_KEYS,
)
from permitlogic.engine.merge import infer_field_kind
from permitlogic.exceptions.validation import ValidationError
from permitlogic.model.attributes import ValueKind
from permitlogic.model.policy import Category

VALID_CATEGORIES: frozenset[str] = frozenset(category.value for category in Category)
VALID_KINDS: frozenset[str] = frozenset(kind.value for kind in ValueKind)


def validate_config_file(
    root: Path,
    config_path: Path | None = None,
    *,
    config_explicit: bool = False,
) -> list[ValidationError]:
    """Validate a permitlogic.yaml file and return all validation errors.

    This is the collect-all counterpart of :func:`load_config`, used by
    ``permitlogic validate``. It never raises.
    """
    errors: list[ValidationError] = []
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    path_str = str(path)

    if not path.exists():
        if config_explicit:
            errors.append(
                ValidationError(
                    code=CFG001,
                    path=path_str,
                    field="",
                    message=f"config file not found: {path}",
                )
            )
        return errors

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        errors.append(
            ValidationError(
                code=CFG002,
                path=path_str,
                field="",
                message=f"invalid YAML: {exc}",
            )
        )
        return errors

    if raw is None:
        return errors

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a YAML mapping, got {type(raw).__name__}",
            )
        )
        return errors

    for key in sorted(raw.keys(), key=str):
        if key not in ALLOWED_CONFIG_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=str(key),
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(str(key), ALLOWED_CONFIG_KEYS),
                )
            )

    if "strict_facts" in raw and not isinstance(raw["strict_facts"], bool):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field="strict_facts",
                message="`strict_facts` must be a boolean",
            )
        )

    if raw.get("attributes") is not None:
        _validate_attributes(raw["attributes"], path_str, errors)
    if raw.get("merge_strategies") is not None:
        _validate_merge_strategies(raw["merge_strategies"], path_str, errors)
    if raw.get("base_outputs") is not None:
        _validate_base_outputs(raw["base_outputs"], path_str, errors)

    return errors


def _validate_attributes(
    attributes: Any,
    path_str: str,
    errors: list[ValidationError],
) -> None:
    if not isinstance(attributes, list):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field="attributes",
                message="`attributes` must be a list of mappings",
            )
        )
        return

    taken = {attribute.name for attribute in DEFAULT_ATTRIBUTES}
    for index, entry in enumerate(attributes):
        where = f"attributes[{index}]"
        if not isinstance(entry, dict):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=where,
                    message=f"`{where}` must be a mapping",
                )
            )
            continue

        for key in sorted(set(entry) - ALLOWED_ATTRIBUTE_KEYS, key=str):
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=f"{where}.{key}",
                    message=f"unknown attribute key `{key}`",
                    hint=_suggest_key(str(key), ALLOWED_ATTRIBUTE_KEYS),
                )
            )
        for key in sorted(REQUIRED_ATTRIBUTE_KEYS - set(entry)):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=f"{where}.{key}",
                    message=f"attribute missing required key `{key}`",
                )
            )

        name = entry.get("name")
        if "name" in entry:
            if not isinstance(name, str) or not name.strip():
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=f"{where}.name",
                        message="attribute `name` must be a non-empty string",
                    )
                )
            elif name in taken:
                errors.append(
                    ValidationError(
                        code=CFG006,
                        path=path_str,
                        field=f"{where}.name",
                        message=f"attribute `{name}` is already declared",
                    )
                )
            else:
                taken.add(name)

        kind = entry.get("kind")
        if "kind" in entry and kind not in VALID_KINDS:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field=f"{where}.kind",
                    message="invalid attribute kind",
                    hint=f"expected one of: {', '.join(sorted(VALID_KINDS))}; got: {kind!r}",
                )
            )

        values = entry.get("values")
        if values is not None and (not isinstance(values, list) or not all(isinstance(v, str) for v in values)):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=f"{where}.values",
                    message="attribute `values` must be a list of strings",
                )
            )
        elif kind == ValueKind.ENUM.value and not values:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field=f"{where}.values",
                    message="enum attribute must declare at least one allowed value",
                )
            )
        elif kind in VALID_KINDS and kind != ValueKind.ENUM.value and values:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field=f"{where}.values",
                    message=f"{kind} attribute cannot declare allowed values",
                )
            )

        for key in ("unit", "label"):
            if entry.get(key) is not None and not isinstance(entry[key], str):
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=f"{where}.{key}",
                        message=f"attribute `{key}` must be a string",
                    )
                )


def _category_sections(
    section: str,
    raw: Any,
    path_str: str,
    errors: list[ValidationError],
) -> list[tuple[Category, dict[Any, Any]]]:
    """Yield the valid ``category -> mapping`` pairs of a per-category section."""
    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field=section,
                message=f"`{section}` must be a mapping",
            )
        )
        return []

    sections: list[tuple[Category, dict[Any, Any]]] = []
    for name, fields in raw.items():
        if name not in VALID_CATEGORIES:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field=f"{section}.{name}",
                    message="invalid category",
                    hint=f"expected one of: {', '.join(sorted(VALID_CATEGORIES))}; got: {name!r}",
                )
            )
            continue
        if fields is None:
            continue
        if not isinstance(fields, dict):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=f"{section}.{name}",
                    message=f"`{section}.{name}` must be a mapping",
                )
            )
            continue
        sections.append((Category(name), fields))
    return sections


def _validate_merge_strategies(
    raw: Any,
    path_str: str,
    errors: list[ValidationError],
) -> None:
    for category, fields in _category_sections("merge_strategies", raw, path_str, errors):
        declared = OUTPUT_FIELD_KINDS.get(category, {})
        for field, name in fields.items():
            where = f"merge_strategies.{category}.{field}"
            if not isinstance(name, str) or name.lower() not in MERGE_STRATEGY_ALIASES:
                errors.append(
                    ValidationError(
                        code=CFG006,
                        path=path_str,
                        field=where,
                        message="invalid merge strategy",
                        hint=f"expected one of: {', '.join(sorted(MERGE_STRATEGY_ALIASES))}; got: {name!r}",
                    )
                )
                continue
            strategy = MERGE_STRATEGY_ALIASES[name.lower()]
            kind = declared.get(field)
            if kind is not None and kind not in STRATEGY_FIELD_KINDS[strategy]:
                errors.append(
                    ValidationError(
                        code=CFG006,
                        path=path_str,
                        field=where,
                        message=f"strategy `{strategy}` cannot merge {kind} values",
                    )
                )


def _validate_base_outputs(
    raw: Any,
    path_str: str,
    errors: list[ValidationError],
) -> None:
    for category, fields in _category_sections("base_outputs", raw, path_str, errors):
        declared = OUTPUT_FIELD_KINDS.get(category, {})
        for field, value in fields.items():
            where = f"base_outputs.{category}.{field}"
            kind = infer_field_kind(value)
            expected = declared.get(field)
            if kind is None or (expected is not None and kind is not expected):
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=where,
                        message=f"invalid value for `{where}`",
                        hint=f"expected a {expected or 'number, boolean, string or list'} value; got: {value!r}",
                    )
                )


def _suggest_key(unknown: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean ...' hint for a close key match, or empty string."""
    matches = difflib.get_close_matches(unknown, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
