"""Evaluate a fraction expression from the command line."""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from .fraction import Fraction

logger = logging.getLogger(__name__)

OPERATIONS: Dict[str, Callable[[Fraction, Fraction], Fraction]] = {
    "+": Fraction.added,
    "-": Fraction.subtracted,
    "*": Fraction.multiplied,
    "/": Fraction.divided,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fractionary",
        description="Reduce a fraction or evaluate one exact arithmetic operation.",
        epilog="Place negative values after `--`, e.g. `fractionary -- -1/3 + 0.(3)`.",
    )
    parser.add_argument("left", help="Fraction or decimal, e.g. 3/5, 1e2/7 or 1.2(3)")
    parser.add_argument("operator", nargs="?", choices=sorted(OPERATIONS), help="Operation to apply")
    parser.add_argument("right", nargs="?", help="Right-hand operand")
    parser.add_argument("--decimal", action="store_true", help="Print the result as a float")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def evaluate(left: str, operator: Optional[str] = None, right: Optional[str] = None) -> Fraction:
    """Parse the operands and apply ``operator``; the result is reduced."""
    value = Fraction.from_string(left)
    if operator is not None:
        value = OPERATIONS[operator](value, Fraction.from_string(right))
    return value.reduced()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.operator is None) != (args.right is None):
        parser.error("an operator requires a right-hand operand")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    result = evaluate(args.left, args.operator, args.right)
    if Fraction.is_nan(result):
        logger.debug("Invalid result for %s", " ".join(filter(None, [args.left, args.operator, args.right])))
        print("nan")
        return 1

    print(result.to_number() if args.decimal else result)
    return 0


def run() -> None:
    try:
        sys.exit(main())
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
