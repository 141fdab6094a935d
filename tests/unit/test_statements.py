"""Tests for StatementLowerer: source statements to flat target statements."""

from __future__ import annotations

import pytest

from batchlower import source_ast as src
from batchlower import target_ast as tgt
from batchlower.errors import (
    UnimplementedFeatureError,
    UnreachableShapeError,
    UnsupportedContextError,
)
from batchlower.statements import StatementLowerer
from batchlower.symbol_table import Scope, SymbolTable


def _lowerer(*functions: str) -> StatementLowerer:
    table = SymbolTable(functions={name: Scope(owner=name) for name in functions})
    return StatementLowerer(table)


def _lower(stmt, *functions: str) -> list:
    return _lowerer(*functions).lower_statement(stmt)


def _assign(name: str, expr) -> src.Assignment:
    return src.Assignment(lvalue=src.Identifier(name=name), expression=expr)


def _kinds(stmts) -> list[str]:
    return [s.kind for s in stmts]


class TestSimpleStatements:
    def test_comment(self):
        assert _lower(src.Comment(text="hi")) == [tgt.Comment(text="hi")]

    def test_global_and_empty_emit_nothing(self):
        assert _lower(src.Global(name="x")) == []
        assert _lower(src.Empty()) == []

    def test_block_flattens_in_order(self):
        block = src.Block(
            statements=[
                src.Comment(text="one"),
                src.Block(statements=[src.Comment(text="two"), src.Empty()]),
                src.Comment(text="three"),
            ]
        )
        assert [s.text for s in _lower(block)] == ["one", "two", "three"]

    def test_non_call_expression_statement_is_unreachable(self):
        with pytest.raises(UnreachableShapeError):
            _lower(src.ExpressionStatement(expression=src.Int(value=1)))


class TestCalls:
    def test_external_command(self):
        stmt = src.ExpressionStatement(
            expression=src.Call(
                name="print",
                args=[src.Concat(left=src.String(value="a"), right=src.String(value="b"))],
            )
        )
        assert _lower(stmt) == [
            tgt.Call(callee=tgt.Str(value="print"), args=tgt.strs("a", "b"))
        ]

    def test_declared_function_uses_calling_convention(self):
        stmt = src.ExpressionStatement(
            expression=src.Call(name="f", args=[src.var("x"), src.Int(value=2)])
        )
        (call,) = _lower(stmt, "f")
        assert call.callee == tgt.Str(value="call")
        assert call.args == [
            tgt.Str(value=":f"),
            tgt.Str(value="_"),
            tgt.Str(value="0"),
            tgt.var("x"),
            tgt.Str(value="2"),
        ]


class TestAssignment:
    def test_arithmetic_assignment(self):
        stmt = _assign(
            "x", src.ArithBinary(operator="+", left=src.Int(value=1), right=src.Int(value=2))
        )
        assert _lower(stmt) == [
            tgt.ArithAssign(
                lvalue=tgt.Identifier(name="x"),
                value=tgt.ArithBinary(
                    operator="+",
                    left=tgt.IntLiteral(value=1),
                    right=tgt.IntLiteral(value=2),
                ),
            )
        ]

    @pytest.mark.parametrize(
        "expr", [src.Bool(value=True), src.Int(value=5), src.ArithUnary(operator="-", operand=src.var("y"))]
    )
    def test_numeric_shapes_use_set_a(self, expr):
        assert _kinds(_lower(_assign("x", expr))) == ["arith_assign"]

    @pytest.mark.parametrize(
        "expr",
        [
            src.String(value="s"),
            src.var("y"),
            src.Concat(left=src.var("a"), right=src.String(value="b")),
        ],
    )
    def test_string_shapes_use_set(self, expr):
        assert _kinds(_lower(_assign("x", expr))) == ["assign"]

    def test_variable_copy_is_string_assignment(self):
        assert _lower(_assign("x", src.var("y"))) == [
            tgt.Assign(lvalue=tgt.Identifier(name="x"), value=[tgt.var("y")])
        ]

    def test_float_fails_in_arithmetic_position(self):
        with pytest.raises(UnsupportedContextError):
            _lower(_assign("x", src.Float(value=1.5)))

    def test_call_value_is_unimplemented(self):
        with pytest.raises(UnimplementedFeatureError):
            _lower(_assign("x", src.Call(name="f", args=[])))

    def test_list_decomposes_per_element(self):
        stmt = _assign(
            "a", src.List(items=[src.Int(value=1), src.String(value="two"), src.var("z")])
        )
        lowered = _lower(stmt)
        assert _kinds(lowered) == ["arith_assign", "assign", "assign"]
        for position, assignment in enumerate(lowered):
            assert assignment.lvalue == tgt.ListAccess(
                lvalue=tgt.Identifier(name="a"), index=tgt.IntLiteral(value=position)
            )
        assert lowered[1].value == tgt.strs("two")
        assert lowered[2].value == [tgt.var("z")]

    def test_nested_list_addresses_both_levels(self):
        stmt = _assign(
            "m",
            src.List(
                items=[
                    src.List(items=[src.Int(value=1), src.Int(value=2)]),
                    src.List(items=[src.Int(value=3)]),
                ]
            ),
        )
        lowered = _lower(stmt)
        assert len(lowered) == 3
        assert lowered[2].lvalue == tgt.ListAccess(
            lvalue=tgt.ListAccess(
                lvalue=tgt.Identifier(name="m"), index=tgt.IntLiteral(value=1)
            ),
            index=tgt.IntLiteral(value=0),
        )

    def test_empty_list_emits_nothing(self):
        assert _lower(_assign("a", src.List(items=[]))) == []


class TestConditionals:
    def test_if_wraps_lowered_body(self):
        stmt = src.If(condition=src.var("ok"), then=src.Comment(text="yes"))
        assert _lower(stmt) == [
            tgt.If(
                condition=tgt.StrCompare(
                    operator="==", left=[tgt.var("ok")], right=tgt.strs("1")
                ),
                body=[tgt.Comment(text="yes")],
            )
        ]

    def test_if_else(self):
        stmt = src.IfElse(
            condition=src.Bool(value=False),
            then=src.Comment(text="a"),
            otherwise=src.Block(statements=[src.Comment(text="b"), src.Comment(text="c")]),
        )
        (lowered,) = _lower(stmt)
        assert isinstance(lowered, tgt.IfElse)
        assert lowered.then == [tgt.Comment(text="a")]
        assert [s.text for s in lowered.otherwise] == ["b", "c"]


class TestWhile:
    def test_loop_shape(self):
        body = _assign(
            "x", src.ArithBinary(operator="+", left=src.var("x"), right=src.Int(value=1))
        )
        lowered = _lower(src.While(condition=src.var("i"), body=body))
        assert len(lowered) == 2
        label, loop = lowered
        assert isinstance(label, tgt.Label)
        assert isinstance(loop, tgt.If)
        assert loop.condition == tgt.StrCompare(
            operator="==", left=[tgt.var("i")], right=tgt.strs("1")
        )
        assert _kinds(loop.body) == ["arith_assign", "goto"]
        assert loop.body[-1] == tgt.Goto(target=label.name)

    def test_labels_are_unique_within_a_lowerer(self):
        lowerer = _lowerer()
        loop = src.While(condition=src.var("c"), body=src.Empty())
        first = lowerer.lower_statement(loop)[0].name
        second = lowerer.lower_statement(loop)[0].name
        assert first != second

    def test_nested_loops_jump_to_their_own_labels(self):
        inner = src.While(condition=src.var("b"), body=src.Empty())
        outer = src.While(condition=src.var("a"), body=inner)
        outer_label, outer_if = _lower(outer)
        inner_label, inner_if = outer_if.body[0], outer_if.body[1]
        assert outer_label.name != inner_label.name
        assert outer_if.body[-1] == tgt.Goto(target=outer_label.name)
        assert inner_if.body == [tgt.Goto(target=inner_label.name)]

    def test_new_lowerer_restarts_numbering(self):
        loop = src.While(condition=src.var("c"), body=src.Empty())
        assert _lower(loop)[0] == _lower(loop)[0]


class TestReturn:
    def test_return_value(self):
        assert _lower(src.Return(value=src.var("a"))) == [
            tgt.Assign(lvalue=tgt.Identifier(name="%~1"), value=[tgt.var("a")]),
            tgt.Goto(target=":EOF"),
        ]

    def test_bare_return(self):
        assert _lower(src.Return()) == [tgt.Goto(target=":EOF")]
