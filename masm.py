#!/usr/bin/env python3
"""
masm — miniasm virtual machine CLI

Usage:
    python masm.py [source.asm|-] [--input FILE|-] [--friendly]
                   [--time-limit N] [--tokens] [--listing] [--trace]
                   [--verbose] [--log-file FILE]

Source defaults to ``test.asm`` in the current directory; ``-`` reads it
from stdin. Integers for IN come from --input (whitespace separated), or
from stdin when the source is a file.

Each OUT value is printed on its own line as it is produced. Any fatal
condition prints ``(ERROR) <message>`` to stderr and exits with status 1.

Examples:
    python masm.py fib.asm
    python masm.py sum.asm --input numbers.txt --friendly
    python masm.py fib.asm --listing
    printf "MEM 1\nSET 5 0\nOUT *0\n" | python masm.py - --friendly
"""

import argparse
import logging
import sys
import os

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from miniasm import __version__
from miniasm.config import FRIENDLY_ENV, TIME_LIMIT, MachineConfig
from miniasm.errors import MachineError
from miniasm.lexer import Tokenizer
from miniasm.log import setup_logging
from miniasm.program import Program


DEFAULT_SOURCE = "test.asm"


def iter_words(stream):
    """Lazily yield whitespace-separated words from a text stream."""
    for line in stream:
        yield from line.split()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="masm",
        description="miniasm line-oriented assembly virtual machine",
        epilog=f"Set {FRIENDLY_ENV}=1 to zero-fill memory by default.",
    )
    parser.add_argument("source", nargs="?", default=DEFAULT_SOURCE,
                        help=f"Assembly source file, or - for stdin (default: {DEFAULT_SOURCE})")
    parser.add_argument("--input", "-i", default=None,
                        help="File of integers consumed by IN (- for stdin)")
    parser.add_argument("--friendly", action="store_true", default=None,
                        help="Zero-fill memory instead of random garbage")
    parser.add_argument("--time-limit", type=int, default=TIME_LIMIT,
                        help=f"Maximum total instruction cost (default: {TIME_LIMIT})")
    parser.add_argument("--tokens", action="store_true",
                        help="Dump the token stream of each line and exit (debug)")
    parser.add_argument("--listing", action="store_true",
                        help="Print the parsed program with command indices and exit")
    parser.add_argument("--trace", action="store_true",
                        help="Print each executed command to stderr after the run")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log loading and run details to stderr")
    parser.add_argument("--log-file", default=None,
                        help="Write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"masm {__version__}")

    args = parser.parse_args(argv)

    setup_logging(console_level=logging.INFO if args.verbose else logging.WARNING,
                  log_file=args.log_file)

    # Read source
    try:
        if args.source == "-":
            lines = sys.stdin.read().splitlines()
        else:
            with open(args.source, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
    except FileNotFoundError:
        print(f"Error: File not found: {args.source}", file=sys.stderr)
        return 1
    except IOError as e:
        print(f"Error reading {args.source}: {e}", file=sys.stderr)
        return 1

    overrides = {"time_limit": args.time_limit}
    if args.friendly:
        overrides["friendly"] = True
    config = MachineConfig.from_env(**overrides)

    # Integer input for IN
    input_file = None
    if args.input == "-" or (args.input is None and args.source != "-"):
        inputs = iter_words(sys.stdin)
    elif args.input is None:
        inputs = ()
    else:
        try:
            input_file = open(args.input, "r", encoding="utf-8")
        except IOError as e:
            print(f"Error reading {args.input}: {e}", file=sys.stderr)
            return 1
        inputs = iter_words(input_file)

    def emit(value):
        print(value, flush=True)

    program = Program(config=config, inputs=inputs, on_output=emit)
    program.enable_trace(args.trace)

    try:
        # Token dump mode
        if args.tokens:
            tokenizer = Tokenizer(config.max_lexeme_length)
            for line_num, line in enumerate(lines, start=1):
                tokens = tokenizer.tokenize_all(line, line_num)
                print(f"{line_num:4d}: " + " ".join(repr(t) for t in tokens))
            return 0

        program.load(lines)

        if args.listing:
            print(program.listing())
            return 0

        program.run()

    except MachineError as e:
        print(f"(ERROR) {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2
    finally:
        if args.trace and program.trace_output:
            print("\n".join(program.trace_output), file=sys.stderr)
        if input_file is not None:
            input_file.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
