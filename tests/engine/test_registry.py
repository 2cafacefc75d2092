"""Tests for the attribute registry and attribute declarations."""

from __future__ import annotations

import pytest

from permitlogic.constants.attributes import DEFAULT_ATTRIBUTES
from permitlogic.engine.registry import AttributeRegistry, build_default_registry
from permitlogic.exceptions import (
    DuplicateAttributeError,
    PermitLogicError,
    RegistryError,
    RegistryFrozenError,
    UnknownAttributeError,
)
from permitlogic.model.attributes import Attribute, Operator, ValueKind


def test_default_registry_holds_builtin_catalog() -> None:
    """Default registry declares every built-in attribute in catalog order."""
    registry = build_default_registry()
    assert len(registry) == len(DEFAULT_ATTRIBUTES) == 24
    assert registry.names == tuple(attribute.name for attribute in DEFAULT_ATTRIBUTES)
    assert "width_ft" in registry
    assert "colour" not in registry


def test_default_registry_is_frozen() -> None:
    """build_default_registry returns a registry that rejects registration."""
    registry = build_default_registry()
    assert registry.frozen
    with pytest.raises(RegistryFrozenError, match="registry is frozen"):
        registry.register(Attribute("trailer_count", ValueKind.NUMBER))


def test_register_rejects_duplicate_name() -> None:
    """Registering the same name twice fails."""
    registry = AttributeRegistry([Attribute("width_ft", ValueKind.NUMBER)])
    with pytest.raises(DuplicateAttributeError, match="already registered"):
        registry.register(Attribute("width_ft", ValueKind.BOOLEAN))


def test_extra_attributes_follow_builtin_catalog() -> None:
    """Extra attributes are appended after the built-in ones."""
    extra = Attribute("trailer_type", ValueKind.ENUM, values=("flatbed", "lowboy"))
    registry = build_default_registry(extra=(extra,))
    assert registry.names[-1] == "trailer_type"
    assert registry.require("trailer_type") is extra


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        pytest.param(
            "width_ft",
            {
                Operator.EQ,
                Operator.NOT_EQ,
                Operator.GT,
                Operator.GTE,
                Operator.LT,
                Operator.LTE,
                Operator.BETWEEN,
                Operator.IN,
                Operator.NOT_IN,
            },
            id="number",
        ),
        pytest.param("road_type", {Operator.EQ, Operator.NOT_EQ, Operator.IN, Operator.NOT_IN}, id="enum"),
        pytest.param("on_bridge", {Operator.EQ, Operator.NOT_EQ}, id="boolean"),
    ],
)
def test_legal_operators_by_kind(name: str, expected: set[Operator]) -> None:
    """Legal operator sets depend only on the attribute kind."""
    assert build_default_registry().legal_operators(name) == expected


def test_legal_operators_unknown_attribute() -> None:
    """Asking about an undeclared attribute fails with UnknownAttributeError."""
    with pytest.raises(UnknownAttributeError, match="is not registered"):
        build_default_registry().legal_operators("colour")


def test_registry_errors_are_value_errors() -> None:
    """Registry errors belong to both the package hierarchy and ValueError."""
    assert issubclass(UnknownAttributeError, PermitLogicError)
    assert issubclass(DuplicateAttributeError, ValueError)


@pytest.mark.parametrize(
    "kwargs",
    [
        pytest.param({"name": "", "kind": ValueKind.NUMBER}, id="empty-name"),
        pytest.param({"name": "trailer_type", "kind": ValueKind.ENUM}, id="enum-without-values"),
        pytest.param({"name": "width", "kind": ValueKind.NUMBER, "values": ("wide",)}, id="number-with-values"),
    ],
)
def test_attribute_rejects_bad_declarations(kwargs: dict[str, object]) -> None:
    """Malformed attribute declarations fail at construction."""
    with pytest.raises(RegistryError):
        Attribute(**kwargs)  # type: ignore[arg-type]


def test_attribute_display_name() -> None:
    """Display name falls back to a title-cased name without the unit suffix."""
    assert Attribute("gross_weight_lbs", ValueKind.NUMBER).display_name == "Gross Weight"
    assert Attribute("width_ft", ValueKind.NUMBER, label="Load Width").display_name == "Load Width"
