"""Compiler: transform validated policy documents into typed Policy values."""

from __future__ import annotations

import logging
from typing import Any

from permitlogic.constants.categories import OUTPUT_FIELD_KINDS, STRATEGY_FIELD_KINDS
from permitlogic.constants.policy_schema import CLAUSE_KEYS, GROUP_KEYS, MERGE_STRATEGY_ALIASES
from permitlogic.engine.clause import build_clause
from permitlogic.engine.merge import infer_field_kind
from permitlogic.engine.registry import AttributeRegistry
from permitlogic.engine.schema import validate_policy
from permitlogic.exceptions.clause import ClauseError
from permitlogic.exceptions.policy import PolicyCompileError, PolicySchemaError
from permitlogic.model.conditions import Clause, Condition, Group, Logic, always
from permitlogic.model.policy import Category, MergeStrategy, Policy, PolicyStatus

logger = logging.getLogger(__name__)


def compile_policy(data: dict[str, Any], source_path: str, registry: AttributeRegistry) -> Policy:
    """Validate and compile a policy document into a Policy.

    Raises PolicySchemaError on schema violations and PolicyCompileError when
    a clause or output does not fit the registry or category catalog.
    """
    validate_policy(data, source_path)

    category = Category(data["category"])
    strategies = {
        field: MERGE_STRATEGY_ALIASES[name.lower()] for field, name in (data.get("merge_strategies") or {}).items()
    }
    output = dict(data["output"])
    _check_output_kinds(category, output, strategies, source_path)

    policy = Policy(
        policy_id=data["policy_id"],
        category=category,
        condition=compile_condition(data.get("condition"), registry, source_path),
        output=output,
        merge_strategies=strategies,
        priority=data.get("priority"),
        status=PolicyStatus(data.get("status", PolicyStatus.PUBLISHED.value)),
        title=data.get("title") or "",
        jurisdiction=data.get("jurisdiction"),
        source_regulation=data.get("source_regulation"),
        notes=data.get("notes"),
    )
    logger.debug("Compiled policy %s (%s, %s)", policy.policy_id, policy.category, policy.status)
    return policy


def compile_policies(
    documents: list[tuple[str, dict[str, Any]]],
    registry: AttributeRegistry,
) -> list[Policy]:
    """Compile multiple policy documents. Fail-fast on any error."""
    return [compile_policy(data, source_path, registry) for source_path, data in documents]


def compile_condition(raw: Any, registry: AttributeRegistry, source_path: str = "<input>") -> Condition:
    """Compile a condition document without recursion.

    Accepted shapes: a clause mapping ``{attribute, operator, value}``,
    ``{all: [...]}``, ``{any: [...]}`` or a bare list (AND). ``None`` is the
    empty AND group.
    """
    if raw is None:
        return always()

    work: list[tuple[bool, Any, str]] = [(False, raw, "condition")]
    built: list[Condition] = []
    while work:
        finished, node, where = work.pop()
        if finished:
            logic, count = node
            children = tuple(built[len(built) - count :])
            del built[len(built) - count :]
            built.append(Group(logic, children))
            continue

        group = _group_parts(node, where, source_path)
        if group is None:
            built.append(_compile_clause(node, registry, where, source_path))
            continue

        logic, key, children = group
        work.append((True, (logic, len(children)), where))
        for index in reversed(range(len(children))):
            work.append((False, children[index], f"{where}.{key}[{index}]"))

    assert len(built) == 1
    return built[0]


def _group_parts(node: Any, where: str, source_path: str) -> tuple[Logic, str, list[Any]] | None:
    if isinstance(node, list):
        return Logic.AND, "all", node
    if not isinstance(node, dict):
        raise PolicySchemaError(f"{source_path}: {where} must be a mapping or list, got {type(node).__name__}")

    group_keys = [key for key in node if key in GROUP_KEYS]
    if not group_keys:
        return None
    if len(node) != 1:
        raise PolicySchemaError(f"{source_path}: {where} group must have exactly one of 'all' or 'any'")
    key = group_keys[0]
    children = node[key]
    if not isinstance(children, list):
        raise PolicySchemaError(f"{source_path}: {where}.{key} must be a list")
    return Logic(GROUP_KEYS[key]), key, children


def _compile_clause(node: dict[str, Any], registry: AttributeRegistry, where: str, source_path: str) -> Clause:
    unknown = set(node) - CLAUSE_KEYS
    if unknown:
        raise PolicySchemaError(f"{source_path}: {where} has unknown keys: {sorted(unknown)}")
    for key in ("attribute", "operator", "value"):
        if key not in node:
            raise PolicySchemaError(f"{source_path}: {where} missing required key '{key}'")
    if not isinstance(node["attribute"], str):
        raise PolicySchemaError(f"{source_path}: {where}.attribute must be a string")

    try:
        return build_clause(node["attribute"], node["operator"], node["value"], registry)
    except ClauseError as exc:
        raise PolicyCompileError(f"{source_path}: {where}: {exc}") from exc


def _check_output_kinds(
    category: Category,
    output: dict[str, Any],
    strategies: dict[str, MergeStrategy],
    source_path: str,
) -> None:
    declared = OUTPUT_FIELD_KINDS.get(category, {})
    for field, value in output.items():
        expected = declared.get(field)
        actual = infer_field_kind(value)
        if expected is not None and actual is not expected:
            raise PolicyCompileError(f"{source_path}: output.{field} must be a {expected} value for {category}")
    for field, strategy in strategies.items():
        kind = declared.get(field) or infer_field_kind(output.get(field))
        if kind is not None and kind not in STRATEGY_FIELD_KINDS[strategy]:
            raise PolicyCompileError(f"{source_path}: merge strategy '{strategy}' cannot merge {kind} field '{field}'")
