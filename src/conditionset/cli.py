"""CLI entry point for condition-set files.

Usage:
    conditionset check conditions.txt                       # Report malformed lines
    conditionset test conditions.txt --set gold=5           # Evaluate the first set
    conditionset test conditions.txt --key "to offer"       # Evaluate a named set
    conditionset apply conditions.txt --set gold=5          # Apply and print the result
    conditionset format conditions.txt                      # Print the canonical form

Each top-level line of the file names a condition set; the lines nested
under it are its conditions. A top-level line starting with ``or``
makes that set an OR set.
"""

from __future__ import annotations

import argparse
import logging
import sys

from conditionset.condition_set import ConditionSet
from conditionset.config import EngineConfig, configure, load_config
from conditionset.datafile import DataFile, DataNode, DataWriter, quote_token
from conditionset.errors import ConditionSetError
from conditionset.randomness import StdRandom

# Exit code for `test` when the conditions are not satisfied
EXIT_FALSE = 2


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="conditionset",
        description="Check, test and apply condition-set data files",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a TOML config file")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Overrides the config file.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- check command ---
    check_parser = subparsers.add_parser("check", help="Report unrecognized condition lines")
    check_parser.add_argument("file", type=str, help="Path to the condition file")

    # --- test command ---
    test_parser = subparsers.add_parser("test", help="Evaluate a condition set")
    test_parser.add_argument("file", type=str, help="Path to the condition file")
    _add_mapping_arguments(test_parser)
    test_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the 'random' condition. Overrides the config file.",
    )

    # --- apply command ---
    apply_parser = subparsers.add_parser("apply", help="Apply a condition set to values")
    apply_parser.add_argument("file", type=str, help="Path to the condition file")
    _add_mapping_arguments(apply_parser)

    # --- format command ---
    format_parser = subparsers.add_parser("format", help="Print the canonical form")
    format_parser.add_argument("file", type=str, help="Path to the condition file")
    format_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write to this path instead of stdout",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        overrides = {"log_level": args.log_level} if args.log_level else None
        config = load_config(args.config, overrides)
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
        configure(config)

        if args.command == "check":
            _cmd_check(args.file, config)
        elif args.command == "test":
            conditions = _parse_assignments(parser, args.set)
            _cmd_test(args.file, args.key, conditions, args.seed)
        elif args.command == "apply":
            conditions = _parse_assignments(parser, args.set)
            _cmd_apply(args.file, args.key, conditions)
        elif args.command == "format":
            _cmd_format(args.file, args.output)
    except ConditionSetError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _add_mapping_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Initial condition value (repeatable)",
    )
    sub.add_argument(
        "--key",
        type=str,
        default=None,
        help=(
            "Header line (tokens joined by spaces) of the top-level set to use. "
            "Default: the first set in the file."
        ),
    )


def _parse_assignments(parser: argparse.ArgumentParser, items: list[str]) -> dict[str, int]:
    """Parse repeated NAME=VALUE arguments into a condition mapping."""
    conditions: dict[str, int] = {}
    for item in items:
        name, sep, raw = item.rpartition("=")
        if not sep or not name:
            parser.error(f"--set expects NAME=VALUE, got {item!r}")
        try:
            conditions[name] = int(raw)
        except ValueError:
            parser.error(f"--set value for {name!r} must be an integer, got {raw!r}")
    return conditions


def _select(data: DataFile, key: str | None) -> DataNode:
    """Pick the top-level node to load as a condition set."""
    if key is None:
        for node in data:
            return node
        print(f"Error: No condition sets in {data.source}")
        sys.exit(1)
    node = data.find(key)
    if node is None:
        print(f"Error: No condition set named {key!r} in {data.source}")
        sys.exit(1)
    return node


def _cmd_check(path: str, config: EngineConfig) -> None:
    """Load every set in a file and print diagnostics."""
    data = DataFile.load(path)
    sets = [ConditionSet.from_node(node) for node in data]

    warnings: list[str] = []
    for node, conditions in zip(data, sets):
        operators = {e.operator for e in conditions.all_expressions()}
        comparisons = {op for op in operators if op.is_comparison}
        if comparisons and comparisons != operators:
            warnings.append(
                f"L{node.line_number}: {node.text}: mixes comparison and assignment operators"
            )

    print(f"Parsed: {len(sets)} condition set(s)")

    for d in data.diagnostics:
        print(f"  [E] L{d.line_number}: {d.message} {d.text}")
    for w in warnings:
        print(f"  [W] {w}")

    errors = len(data.diagnostics)
    print(f"\nCheck: {errors} error(s), {len(warnings)} warning(s)")

    if errors > 0 or (config.strict and warnings):
        print("FAIL: Fix errors before using this file.")
        sys.exit(1)


def _cmd_test(path: str, key: str | None, conditions: dict[str, int], seed: int | None) -> None:
    """Evaluate one set and print true/false."""
    data = DataFile.load(path)
    condition_set = ConditionSet.from_node(_select(data, key))
    rng = StdRandom(seed) if seed is not None else None

    if condition_set.test(conditions, rng):
        print("true")
    else:
        print("false")
        sys.exit(EXIT_FALSE)


def _cmd_apply(path: str, key: str | None, conditions: dict[str, int]) -> None:
    """Apply one set and print the resulting values, sorted by name."""
    data = DataFile.load(path)
    condition_set = ConditionSet.from_node(_select(data, key))
    condition_set.apply(conditions)

    for name in sorted(conditions):
        print(f"{quote_token(name)} {conditions[name]}")


def _cmd_format(path: str, output: str | None) -> None:
    """Re-emit every set in canonical three-token form."""
    data = DataFile.load(path)
    out = DataWriter(output)
    for node in data:
        out.write(*node.tokens)
        out.begin_child()
        ConditionSet.from_node(node).save(out)
        out.end_child()

    if output is None:
        print(out.getvalue(), end="")
    else:
        out.save()
        print(f"Wrote {output}")


if __name__ == "__main__":
    main()
