"""Tests for policy file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from permitlogic.engine.loader import BUNDLED_POLICIES_DIR, collect_policy_paths, load_policies
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.exceptions import PolicyCompileError, PolicyLoadError, PolicySchemaError
from permitlogic.model.policy import Category, PolicyStatus

from .conftest import _write_policy_file

PA_ESCORT_IDS: set[str] = {
    "pa_escort_height_front",
    "pa_escort_bridge_solo_two_way_front",
    "pa_escort_width_single_lane_front",
    "pa_escort_length_rear",
    "pa_escort_overhang_rear",
    "pa_escort_bridge_reduced_speed_rear",
    "pa_escort_bridge_solo_two_way_rear",
    "pa_escort_bridge_solo_one_way_rear",
    "pa_escort_width_multi_lane_rear",
    "pa_escort_width_police_rear",
    "pa_escort_height_equipment",
}


def test_bundled_pack_loads(registry: AttributeRegistry) -> None:
    """The bundled pack holds the eleven published Pennsylvania escort policies."""
    policies = load_policies(registry)
    assert {policy.policy_id for policy in policies} == PA_ESCORT_IDS
    assert all(policy.category is Category.ESCORT for policy in policies)
    assert all(policy.status is PolicyStatus.PUBLISHED for policy in policies)
    assert sorted(policy.priority for policy in policies) == list(range(1, 12))


def test_bundled_pack_directory() -> None:
    """The bundled pack ships inside the package."""
    assert BUNDLED_POLICIES_DIR.is_dir()
    assert len(collect_policy_paths()) == 11


def test_load_from_directory_in_sorted_order(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Directory sources load every .yaml file in sorted path order."""
    _write_policy_file(tmp_path / "b.yaml", policy_id="second")
    _write_policy_file(tmp_path / "a.yaml", policy_id="first")
    (tmp_path / "ignored.yml").write_text("policy_id: ignored\n", encoding="utf-8")

    policies = load_policies(registry, policies_dir=tmp_path)
    assert [policy.policy_id for policy in policies] == ["first", "second"]


def test_load_explicit_files(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Explicit files load only the files named."""
    chosen = _write_policy_file(tmp_path / "chosen.yaml", policy_id="chosen")
    _write_policy_file(tmp_path / "other.yaml", policy_id="other")

    policies = load_policies(registry, policy_files=(chosen,))
    assert [policy.policy_id for policy in policies] == ["chosen"]


def test_explicit_files_load_in_sorted_order(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Explicit files are sorted by path, so the order they are given in never breaks ties."""
    later = _write_policy_file(tmp_path / "b.yaml", policy_id="later")
    earlier = _write_policy_file(tmp_path / "a.yaml", policy_id="earlier")

    policies = load_policies(registry, policy_files=(later, earlier))
    assert [policy.policy_id for policy in policies] == ["earlier", "later"]


def test_duplicate_policy_id_is_rejected(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Two files defining the same policy_id fail the load."""
    _write_policy_file(tmp_path / "a.yaml", policy_id="dup")
    _write_policy_file(tmp_path / "b.yaml", policy_id="dup")
    with pytest.raises(PolicyLoadError, match="Duplicate policy_id 'dup'"):
        load_policies(registry, policies_dir=tmp_path)


def test_source_conflict(tmp_path: Path, registry: AttributeRegistry) -> None:
    """A directory and explicit files cannot be combined."""
    policy_file = _write_policy_file(tmp_path / "a.yaml")
    with pytest.raises(PolicyLoadError, match="Policy source conflict"):
        load_policies(registry, policies_dir=tmp_path, policy_files=(policy_file,))


def test_missing_directory(tmp_path: Path, registry: AttributeRegistry) -> None:
    """A missing policies directory is a load error."""
    with pytest.raises(PolicyLoadError, match="does not exist"):
        load_policies(registry, policies_dir=tmp_path / "missing")


def test_directory_path_that_is_a_file(tmp_path: Path, registry: AttributeRegistry) -> None:
    """A file given as the policies directory is a load error."""
    policy_file = _write_policy_file(tmp_path / "a.yaml")
    with pytest.raises(PolicyLoadError, match="is not a directory"):
        load_policies(registry, policies_dir=policy_file)


def test_explicit_file_requires_yaml_suffix(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Explicit policy files must use the .yaml extension."""
    policy_file = _write_policy_file(tmp_path / "a.yml")
    with pytest.raises(PolicyLoadError, match="extension"):
        load_policies(registry, policy_files=(policy_file,))


def test_explicit_file_missing(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Missing explicit files are reported."""
    with pytest.raises(PolicyLoadError, match="does not exist"):
        load_policies(registry, policy_files=(tmp_path / "missing.yaml",))


def test_explicit_file_duplicate_path(tmp_path: Path, registry: AttributeRegistry) -> None:
    """The same explicit file twice is rejected."""
    policy_file = _write_policy_file(tmp_path / "a.yaml")
    with pytest.raises(PolicyLoadError, match="Duplicate policy file path"):
        load_policies(registry, policy_files=(policy_file, policy_file))


def test_invalid_yaml(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Unparseable YAML is a load error."""
    (tmp_path / "bad.yaml").write_text("policy_id: [unclosed\n", encoding="utf-8")
    with pytest.raises(PolicyLoadError, match="Invalid YAML"):
        load_policies(registry, policies_dir=tmp_path)


def test_non_mapping_document(tmp_path: Path, registry: AttributeRegistry) -> None:
    """A YAML list is not a policy document."""
    (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(PolicyLoadError, match="must contain a mapping"):
        load_policies(registry, policies_dir=tmp_path)


def test_schema_errors_propagate(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Schema violations surface unchanged from the loader."""
    _write_policy_file(tmp_path / "a.yaml", category="parking")
    with pytest.raises(PolicySchemaError, match="category must be one of"):
        load_policies(registry, policies_dir=tmp_path)


def test_compile_errors_propagate(tmp_path: Path, registry: AttributeRegistry) -> None:
    """Compile errors name the offending file."""
    path = _write_policy_file(tmp_path / "a.yaml", condition={"attribute": "wingspan_ft", "operator": ">", "value": 1})
    with pytest.raises(PolicyCompileError) as excinfo:
        load_policies(registry, policies_dir=tmp_path)
    assert str(path.resolve()) in str(excinfo.value)
