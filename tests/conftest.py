"""Shared pytest fixtures for Permitlogic tests."""

from __future__ import annotations

import pytest

from permitlogic.engine.registry import AttributeRegistry, build_default_registry
from permitlogic.engine.runtime import PolicyEngine


@pytest.fixture()
def registry() -> AttributeRegistry:
    """Return the frozen built-in attribute registry."""
    return build_default_registry()


@pytest.fixture(scope="session")
def bundled_engine() -> PolicyEngine:
    """Return an engine loaded with the bundled Pennsylvania escort pack."""
    return PolicyEngine.from_sources()
