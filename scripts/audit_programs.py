"""Compile a set of sample programs and report what each one lowers to.

Every sample goes through the full pipeline (symbol table, split, lowering,
rendering). For each one the audit prints the statement-kind counts of the
target AST, or the error that aborted compilation. Pass ``--show`` to also
print the rendered scripts, or JSON files to audit them instead of the
built-in samples.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pydantic import ValidationError

from batchlower import source_ast as src
from batchlower.api import compile_program, load_program
from batchlower.errors import LoweringError
from batchlower.render import render
from batchlower.target_stats import count_statement_kinds

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def _stmt(stmt) -> src.StatementItem:
    return src.StatementItem(statement=stmt)


def _assign(name: str, expr) -> src.Assignment:
    return src.Assignment(lvalue=src.Identifier(name=name), expression=expr)


def _binop(op: str, left, right) -> src.ArithBinary:
    return src.ArithBinary(operator=op, left=left, right=right)


def _echo(*args) -> src.ExpressionStatement:
    return src.ExpressionStatement(expression=src.Call(name="echo", args=list(args)))


# ---------------------------------------------------------------------------
# Built-in samples
# ---------------------------------------------------------------------------

SAMPLES: dict[str, src.Program] = {}

SAMPLES["countdown"] = src.Program(
    items=[
        _stmt(_assign("i", src.Int(value=10))),
        _stmt(
            src.While(
                condition=_binop(">", src.var("i"), src.Int(value=0)),
                body=src.Block(
                    statements=[
                        _echo(src.Concat(left=src.String(value="i="), right=src.var("i"))),
                        _assign("i", _binop("-", src.var("i"), src.Int(value=1))),
                    ]
                ),
            )
        ),
    ]
)

SAMPLES["lists"] = src.Program(
    items=[
        _stmt(
            _assign(
                "grid",
                src.List(
                    items=[
                        src.List(items=[src.Int(value=1), src.Int(value=2)]),
                        src.List(items=[src.String(value="a"), src.Bool(value=True)]),
                    ]
                ),
            )
        ),
        _stmt(_echo(src.Leftvalue(lvalue=src.index(src.index(src.Identifier(name="grid"), 1), 0)))),
    ]
)

SAMPLES["functions"] = src.Program(
    items=[
        src.Function(
            name="greet",
            params=["who", "times"],
            body=[
                _assign("n", src.Int(value=0)),
                src.While(
                    condition=_binop("<", src.var("n"), src.var("times")),
                    body=src.Block(
                        statements=[
                            _echo(src.String(value="hello"), src.var("who")),
                            _assign("n", _binop("+", src.var("n"), src.Int(value=1))),
                        ]
                    ),
                ),
                src.Return(value=src.var("n")),
            ],
        ),
        _stmt(
            src.ExpressionStatement(
                expression=src.Call(
                    name="greet", args=[src.String(value="world"), src.Int(value=3)]
                )
            )
        ),
    ]
)

SAMPLES["conditions"] = src.Program(
    items=[
        _stmt(_assign("same", src.StrCompare(operator="==", left=src.var("a"), right=src.var("b")))),
        _stmt(
            src.IfElse(
                condition=src.ArithUnary(operator="!", operand=src.var("same")),
                then=_echo(src.String(value="different")),
                otherwise=_echo(src.String(value="same")),
            )
        ),
    ]
)

SAMPLES["unsupported_capture"] = src.Program(
    items=[_stmt(_assign("today", src.Call(name="date", args=[])))]
)


def audit(name: str, program: src.Program, show: bool) -> bool:
    try:
        stmts = compile_program(program)
    except LoweringError as exc:
        logger.info("%-22s FAILED  %s: %s", name, type(exc).__name__, exc)
        return False
    counts = count_statement_kinds(stmts)
    summary = ", ".join(f"{kind}={n}" for kind, n in sorted(counts.items()))
    logger.info("%-22s ok      %s", name, summary)
    if show:
        logger.info("%s", render(stmts))
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("files", nargs="*", help="JSON source AST files")
    parser.add_argument("--show", action="store_true", help="Print rendered scripts")
    args = parser.parse_args()

    programs: dict[str, src.Program] = {}
    if args.files:
        for path in map(Path, args.files):
            try:
                programs[path.name] = load_program(path.read_text(encoding="utf-8"))
            except ValidationError as exc:
                logger.info("%-22s INVALID %d errors", path.name, exc.error_count())
    else:
        programs = SAMPLES

    results = [audit(name, program, args.show) for name, program in programs.items()]
    logger.info("")
    logger.info("%d/%d programs compiled", sum(results), len(results))


if __name__ == "__main__":
    main()
