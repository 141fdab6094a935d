"""Command-line driver: JSON source AST in, batch script out."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from .api import compile_with_stats, dump_target_ast
from .compile_types import CompileConfig
from .errors import LoweringError


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="batchlower",
        description="Compile a JSON source AST into a Windows batch script")
    parser.add_argument("file",
                        help="JSON source AST file ('-' for stdin)")
    parser.add_argument("--output", "-o", default=None,
                        help="Write the result here instead of stdout")
    parser.add_argument("--no-split", action="store_true",
                        help="Skip the expression split pass")
    parser.add_argument("--no-prologue", action="store_true",
                        help="Omit the @echo off / setlocal header")
    parser.add_argument("--crlf", action="store_true",
                        help="Terminate lines with CRLF")
    parser.add_argument("--ast", action="store_true",
                        help="Print the target AST as JSON instead of a script")
    parser.add_argument("--stats", action="store_true",
                        help="Print per-stage statistics to stderr")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log pipeline progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    config = CompileConfig(
        split=not args.no_split,
        prologue=not args.no_prologue,
        line_ending="\r\n" if args.crlf else "\n",
    )

    try:
        text = _read_input(args.file)
        if args.ast:
            result = dump_target_ast(text, config) + "\n"
        else:
            result, stats = compile_with_stats(text, config)
            if args.stats:
                print(stats.report(), file=sys.stderr)
    except (LoweringError, ValidationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(result)
    else:
        sys.stdout.write(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
