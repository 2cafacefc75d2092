"""CLI entrypoint for Permitlogic."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from permitlogic import __version__
from permitlogic.cli.handlers import handle_attributes, handle_evaluate, handle_validate
from permitlogic.constants.branding import CLI_DESCRIPTION
from permitlogic.constants.reporting import DEFAULT_OUTPUT_FORMAT, VALID_OUTPUT_FORMATS
from permitlogic.model.policy import Category


def _add_policy_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-p",
        "--policies-dir",
        type=Path,
        default=None,
        help="Policy directory (loads only *.yaml files; default: bundled policies)",
    )
    source.add_argument(
        "-f",
        "--policy-file",
        type=Path,
        action="append",
        default=None,
        help="Policy file path (repeat for multiple files; files load in sorted path order, not command-line order)",
    )


def _add_config(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-r", "--root", type=Path, default=Path("."), help="Directory holding permitlogic.yaml")
    parser.add_argument("-c", "--config", type=Path, help="Explicit config file")


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="permitlogic",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate = subparsers.add_parser("evaluate", help="Evaluate a load description against the policies")
    _add_policy_source(evaluate)
    _add_config(evaluate)
    evaluate.add_argument("--fact", type=Path, default=None, help="JSON or YAML file of attribute values")
    evaluate.add_argument(
        "-s",
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Attribute value (repeat flag for multiple values; overrides --fact)",
    )
    evaluate.add_argument(
        "--category",
        action="append",
        choices=[category.value for category in Category],
        default=None,
        help="Category to evaluate (repeat flag; default: every category with policies)",
    )
    evaluate.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(VALID_OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help="Stdout format (default: text)",
    )
    evaluate.add_argument("-o", "--output", type=Path, default=None, help="Write the JSON report to this path")
    evaluate.add_argument("--analyze", action="store_true", help="Include advisory conflict analysis")
    evaluate.add_argument("--no-color", action="store_true", help="Disable colored output")
    evaluate.add_argument("-v", "--verbose", action="store_true", help="Show debug logging and fingerprints")

    validate = subparsers.add_parser("validate", help="Validate configuration and policies without evaluating")
    _add_policy_source(validate)
    _add_config(validate)

    attributes = subparsers.add_parser("attributes", help="List the attributes policies may test")
    _add_config(attributes)
    attributes.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(VALID_OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help="Stdout format (default: text)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.command == "validate":
        return handle_validate(args)
    if args.command == "attributes":
        return handle_attributes(args)
    if args.command != "evaluate":
        parser.error(f"Unsupported command: {args.command}")
    return handle_evaluate(args)


if __name__ == "__main__":
    raise SystemExit(main())
