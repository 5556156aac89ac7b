"""
Read a stack of pancakes from standard input, sort it, and print how many flips it took.

The input is the number of pancakes on the first line, followed by that many whitespace-separated integers:

    $ printf '3\\n3 1 2\\n' | pancake-flips
    3
"""
import argparse
import sys
from typing import Optional, Sequence, TextIO

import numpy as np

from .stack import PancakeStack

INT_MIN = int(np.iinfo(np.int64).min)
INT_MAX = int(np.iinfo(np.int64).max)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser('pancake-flips', description='Count the flips needed to sort a stack of pancakes')
    parser.add_argument('--trace', action='store_true', help='Print a table of every flip after the count')
    parser.add_argument('--show', action='store_true', help='Print the sorted stack after the count')
    return parser


def read_pancakes(parser: argparse.ArgumentParser, stdin: TextIO) -> list[int]:
    """Parse the input, exiting through the parser with status 1 on anything malformed."""
    try:
        count = int(stdin.readline())
    except ValueError:
        parser.exit(1, "Input must be a positive integer\n")

    if count < 0:
        parser.exit(1, "Input must be a positive integer\n")
    if count > INT_MAX:
        parser.exit(1, "Too many pancakes\n")

    tokens = stdin.read().split()
    if len(tokens) < count:
        parser.exit(1, "Each pancake must be an integer\n")

    pancakes = []
    for token in tokens[:count]:
        try:
            pancake = int(token)
        except ValueError:
            parser.exit(1, "Each pancake must be an integer\n")

        if pancake > INT_MAX:
            parser.exit(1, f"Pancakes larger than {INT_MAX} are not supported\n")
        if pancake < INT_MIN:
            parser.exit(1, f"Pancakes smaller than {INT_MIN} are not supported\n")

        pancakes.append(pancake)

    return pancakes


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None):
    parser = make_parser()
    args = parser.parse_args(argv)

    pancakes = read_pancakes(parser, sys.stdin if stdin is None else stdin)
    stack = PancakeStack(pancakes)
    stack.sort()

    print(stack.flips)
    if args.show:
        print(stack)
    if args.trace:
        print(stack.history().to_string(index=False))


if __name__ == '__main__':
    main()
