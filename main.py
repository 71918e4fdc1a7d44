"""CLI entrypoint for the knight-move keypad sequence counter."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from knightpad.core.constants import DEFAULT_SPLIT_DEPTH, DEFAULT_VOWEL_BUDGET
from knightpad.core.exceptions import (InvalidArgumentError, InvalidLengthError, KnightPadError,
                                       MissingLengthError)
from knightpad.engine.counter import CounterConfig, SequenceCounter
from knightpad.engine.keypad import default_keypad
from knightpad.engine.solver import count_with_solver
from knightpad.utils.logger import configure_logging
from knightpad.utils.pretty import pretty_print_keypad, print_count_stats


def parse_length(raw: Optional[str]) -> int:
    """Turn the raw LENGTH argument into an integer.

    A missing argument and a malformed one raise different errors.
    """
    if raw is None:
        raise MissingLengthError("missing required argument LENGTH, e.g. `knightpad 10`")
    try:
        return int(raw.strip())
    except ValueError:
        raise InvalidLengthError(f"LENGTH must be an integer, got {raw!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Count knight-move key sequences on the 18-key keypad",
    )
    parser.add_argument("length", nargs="?", metavar="LENGTH", help="Number of key presses per sequence")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread pool size (default: CPU count, 1 runs sequentially)",
    )
    parser.add_argument(
        "--split-depth",
        type=int,
        default=DEFAULT_SPLIT_DEPTH,
        help="Recursion levels fanned out to the pool before falling back to sequential counting",
    )
    parser.add_argument(
        "--vowel-budget",
        type=int,
        default=DEFAULT_VOWEL_BUDGET,
        help="Maximum vowel keys per sequence",
    )
    parser.add_argument(
        "--u64",
        action="store_true",
        help="Fail when the count exceeds the unsigned 64-bit range",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Cross-check the count by CP-SAT enumeration (short lengths only)",
    )
    parser.add_argument("--show-keypad", action="store_true", help="Print the keypad and its knight moves")
    parser.add_argument("--stats", action="store_true", help="Print timing and cache statistics")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    try:
        length = parse_length(args.length)
    except InvalidArgumentError as exc:
        parser.error(str(exc))
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.split_depth < 0:
        parser.error("--split-depth cannot be negative")

    config = CounterConfig(
        vowel_budget=args.vowel_budget,
        workers=args.workers,
        split_depth=args.split_depth,
        enforce_u64=args.u64,
    )
    keypad = default_keypad()
    if args.show_keypad:
        pretty_print_keypad(keypad, label="Keypad (vowels in parentheses):")
        print()

    counter = SequenceCounter(config, keypad=keypad)
    try:
        result = counter.count(length)
    except KnightPadError as exc:
        parser.exit(1, f"error: {exc}\n")
    print(f"#sequences = {result}")

    verified = None
    if args.verify:
        try:
            verified = count_with_solver(length, keypad=keypad, vowel_budget=args.vowel_budget)
        except KnightPadError as exc:
            parser.exit(1, f"error: {exc}\n")
    if args.stats and counter.last_report is not None:
        print_count_stats(counter.last_report, verified)
    elif verified is not None:
        print(f"CP-SAT count = {verified} ({'match' if verified == result else 'MISMATCH'})")
    if verified is not None and verified != result:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
