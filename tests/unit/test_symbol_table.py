"""Tests for building and querying the symbol table."""

from __future__ import annotations

import pytest

from batchlower import source_ast as src
from batchlower.errors import DuplicateFunctionError, UnknownFunctionError
from batchlower.symbol_table import build_symbol_table


def _assign(name: str, value: int = 0) -> src.Assignment:
    return src.Assignment(lvalue=src.Identifier(name=name), expression=src.Int(value=value))


PROGRAM = src.Program(
    items=[
        src.StatementItem(statement=_assign("top")),
        src.Function(
            name="f",
            params=["a", "b"],
            body=[
                src.Global(name="top"),
                _assign("local"),
                src.While(
                    condition=src.var("a"),
                    body=src.Block(
                        statements=[
                            src.Assignment(
                                lvalue=src.index(src.Identifier(name="arr"), 0),
                                expression=src.Int(value=1),
                            )
                        ]
                    ),
                ),
            ],
        ),
    ]
)


class TestSymbolTable:
    def test_is_function(self):
        table = build_symbol_table(PROGRAM)
        assert table.is_function("f")
        assert not table.is_function("top")
        assert not table.is_function("echo")

    def test_function_scope_records_names(self):
        scope = build_symbol_table(PROGRAM).scope("f")
        assert scope.owner == "f"
        assert scope.params == ["a", "b"]
        assert scope.variables == {"local", "arr"}
        assert scope.globals == {"top"}
        assert scope.references == {"a"}

    def test_global_scope(self):
        scope = build_symbol_table(PROGRAM).global_scope()
        assert scope.owner is None
        assert scope.variables == {"top"}

    def test_unknown_function_scope(self):
        with pytest.raises(UnknownFunctionError, match="nope"):
            build_symbol_table(PROGRAM).scope("nope")

    def test_duplicate_function(self):
        program = src.Program(items=[src.Function(name="f"), src.Function(name="f")])
        with pytest.raises(DuplicateFunctionError):
            build_symbol_table(program)

    def test_reads_are_recorded_by_root_name(self):
        program = src.Program(
            items=[
                src.StatementItem(
                    statement=src.IfElse(
                        condition=src.StrCompare(
                            operator="==", left=src.var("PATH"), right=src.String(value="")
                        ),
                        then=src.ExpressionStatement(
                            expression=src.Call(
                                name="echo",
                                args=[
                                    src.Concat(
                                        left=src.Leftvalue(
                                            lvalue=src.ListAccess(
                                                lvalue=src.Identifier(name="grid"),
                                                index=src.var("row"),
                                            )
                                        ),
                                        right=src.String(value="!"),
                                    )
                                ],
                            )
                        ),
                        otherwise=src.Assignment(
                            lvalue=src.ListAccess(
                                lvalue=src.Identifier(name="out"), index=src.var("col")
                            ),
                            expression=src.ArithUnary(operator="-", operand=src.var("x")),
                        ),
                    )
                ),
            ]
        )
        scope = build_symbol_table(program).global_scope()
        assert scope.references == {"PATH", "grid", "row", "col", "x"}
        assert scope.variables == {"out"}
