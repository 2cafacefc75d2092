"""CLI subcommand handlers."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from permitlogic.config import config_fingerprint, load_config
from permitlogic.engine.runtime import PolicyEngine
from permitlogic.exceptions import (
    ConfigError,
    EvaluationError,
    FactError,
    MergeError,
    PermitLogicError,
    PolicyError,
)
from permitlogic.exceptions.validation import format_errors
from permitlogic.io import load_fact_file, parse_assignments
from permitlogic.model.attributes import Operator
from permitlogic.reporting import StdoutReporter, build_report, write_report
from permitlogic.validation import preflight_validate


def handle_evaluate(args: argparse.Namespace) -> int:
    """Evaluate one fact and report the merged outputs.

    Exit codes: 0 on success, 2 for configuration, policy or fact input
    errors, 1 when evaluation or merging fails.
    """
    policy_files = tuple(args.policy_file) if args.policy_file else None
    try:
        config = load_config(args.root, args.config)
        engine = PolicyEngine.from_sources(policies_dir=args.policies_dir, policy_files=policy_files, config=config)
    except (ConfigError, PolicyError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        raw: dict[str, Any] = load_fact_file(args.fact) if args.fact is not None else {}
        raw.update(parse_assignments(args.assignments, engine.registry))
        fact = engine.make_fact(raw)
    except FactError as exc:
        print(f"Fact error: {exc}", file=sys.stderr)
        return 2

    try:
        results = engine.evaluate_all(fact, args.category)
        conflicts = {category: engine.analyze(fact, category) for category in results} if args.analyze else None
    except (EvaluationError, MergeError) as exc:
        print(f"Evaluation error: {exc}", file=sys.stderr)
        return 1

    policy_fingerprint = engine.fingerprint()
    report = build_report(
        fact,
        results,
        policy_fingerprint=policy_fingerprint,
        config_fingerprint=config_fingerprint(config),
        conflicts=conflicts,
    )
    if args.output is not None:
        try:
            write_report(args.output, report)
        except OSError as exc:
            print(f"Output error: {exc}", file=sys.stderr)
            return 1

    if args.output_format == "json":
        print(json.dumps(report, indent=2, sort_keys=True))
    else:
        use_color = not args.no_color and sys.stdout.isatty()
        reporter = StdoutReporter(
            results,
            color=use_color,
            verbose=args.verbose,
            fingerprint=policy_fingerprint,
            conflicts=conflicts,
        )
        print(reporter.render())
    return 0


def handle_validate(args: argparse.Namespace) -> int:
    """Run config + policy validation and report results."""
    errors = preflight_validate(
        root=args.root,
        config_path=args.config,
        policies_dir=args.policies_dir,
        policy_files=(tuple(args.policy_file) if args.policy_file else None),
    )
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration and policies are valid.")
    return 0


def handle_attributes(args: argparse.Namespace) -> int:
    """List registered attributes with their kinds and legal operators."""
    try:
        registry = load_config(args.root, args.config).build_registry()
    except PermitLogicError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    rows = [
        {
            "name": attribute.name,
            "kind": attribute.kind.value,
            "unit": attribute.unit,
            "values": list(attribute.values),
            "operators": [op.value for op in Operator if op in attribute.legal_operators],
        }
        for attribute in registry
    ]
    if args.output_format == "json":
        print(json.dumps(rows, indent=2))
        return 0

    width = max(len(row["name"]) for row in rows)
    for row in rows:
        unit = f" ({row['unit']})" if row["unit"] else ""
        line = f"{row['name']:<{width}}  {row['kind']:<7}  {', '.join(row['operators'])}{unit}"
        if row["values"]:
            line += f"  [{' | '.join(row['values'])}]"
        print(line)
    return 0
