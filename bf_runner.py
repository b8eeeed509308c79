#!/usr/bin/env python3
import sys
import argparse

from bf_interpreter import Interpreter, BracketError, check_brackets, TAPE_SIZE

USAGE = "Usage: brainfrick <path to program to run>"


class StepLimitExceeded(RuntimeError):
    def __init__(self, steps):
        super().__init__(f"program did not halt within {steps} steps")
        self.steps = steps


def run_bf(code, max_steps=None, **kwargs):
    """Load `code` into a fresh Interpreter and step it until it halts."""
    bf = Interpreter(**kwargs)
    bf.load(code)

    while not bf.exit:
        if max_steps is not None and bf.steps >= max_steps:
            raise StepLimitExceeded(bf.steps)
        bf.eval()
    return bf


class ArgumentParser(argparse.ArgumentParser):
    """Reports bad invocations with exit status 1 instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = ArgumentParser(prog="brainfrick", description="Run a brainfuck program.")
    parser.add_argument("program", nargs="?", help="path to the program file")
    parser.add_argument("-v", "--verbose", action="store_true", help="report load size and step count on stderr")
    parser.add_argument("--check", action="store_true", help="check bracket balance before running")
    parser.add_argument("--max-steps", type=int, default=None, help="give up after this many steps")
    parser.add_argument("--tape-size", type=int, default=TAPE_SIZE, help="number of tape cells")
    return parser


def main(argv=None):
    # trailing arguments after the program path are ignored
    args, _ = build_parser().parse_known_args(argv)
    if args.program is None:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    try:
        f = open(args.program, 'rb')
    except OSError as e:
        print(f"Could not open file for reading: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)
    with f:
        try:
            code = f.read()
        except OSError as e:
            print(f"Could not read file: {e.strerror or e}", file=sys.stderr)
            sys.exit(1)

    if args.check:
        try:
            check_brackets(code)
        except BracketError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    if args.verbose:
        print(f"Loaded {len(code)} bytes", file=sys.stderr)

    try:
        bf = run_bf(code, max_steps=args.max_steps, tape_size=args.tape_size)
    except StepLimitExceeded as e:
        sys.stdout.flush()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.stdout.flush()

    if args.verbose:
        print(f"Halted after {bf.steps} steps", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
