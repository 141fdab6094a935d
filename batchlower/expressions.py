"""Expression lowering: source expressions into the four target value forms.

Which form an expression becomes is decided by the caller's syntactic
context, never by the expression itself:

    index position          → ``lower_to_varint``
    ``set /a`` right side   → ``lower_to_arithmetic``
    string / argument       → ``lower_to_varstrings``
    condition               → ``lower_to_comparison``

An expression whose shape does not fit the requested form raises a
``LoweringError`` instead of being coerced.
"""

from __future__ import annotations

from . import source_ast as src
from . import target_ast as tgt
from .errors import (
    UnimplementedFeatureError,
    UnreachableShapeError,
    UnsupportedContextError,
)


def _describe(expr) -> str:
    return getattr(expr, "kind", type(expr).__name__)


def lower_leftvalue(lvalue: src.Identifier | src.ListAccess) -> tgt.Identifier | tgt.ListAccess:
    if isinstance(lvalue, src.Identifier):
        return tgt.Identifier(name=lvalue.name)
    if isinstance(lvalue, src.ListAccess):
        return tgt.ListAccess(
            lvalue=lower_leftvalue(lvalue.lvalue),
            index=lower_to_varint(lvalue.index),
        )
    raise UnreachableShapeError(f"not a leftvalue: {_describe(lvalue)}")


def lower_to_varint(expr) -> tgt.IntLiteral | tgt.Var:
    if isinstance(expr, src.Leftvalue):
        return tgt.Var(lvalue=lower_leftvalue(expr.lvalue))
    if isinstance(expr, src.Int):
        return tgt.IntLiteral(value=expr.value)
    raise UnsupportedContextError(
        f"index must be a variable or integer literal, got {_describe(expr)}"
    )


def lower_to_arithmetic(expr):
    """Lower *expr* to a ``set /a`` expression tree."""
    if isinstance(expr, src.Bool):
        return tgt.IntLiteral(value=1 if expr.value else 0)
    if isinstance(expr, src.Int):
        return tgt.IntLiteral(value=expr.value)
    if isinstance(expr, src.Leftvalue):
        return tgt.Var(lvalue=lower_leftvalue(expr.lvalue))
    if isinstance(expr, src.ArithUnary):
        return tgt.ArithUnary(
            operator=expr.operator,
            operand=lower_to_arithmetic(expr.operand),
        )
    if isinstance(expr, src.ArithBinary):
        return tgt.ArithBinary(
            operator=expr.operator,
            left=lower_to_arithmetic(expr.left),
            right=lower_to_arithmetic(expr.right),
        )
    raise UnsupportedContextError(f"not an arithmetic value: {_describe(expr)}")


def lower_to_varstrings(expr) -> list[tgt.Str | tgt.Var]:
    """Lower *expr* to an ordered list of string fragments."""
    if isinstance(expr, src.Bool):
        return [tgt.Str(value="1" if expr.value else "0")]
    if isinstance(expr, src.Int):
        return [tgt.Str(value=str(expr.value))]
    if isinstance(expr, src.String):
        return [tgt.Str(value=expr.value)]
    if isinstance(expr, src.Leftvalue):
        return [tgt.Var(lvalue=lower_leftvalue(expr.lvalue))]
    if isinstance(expr, src.Concat):
        return lower_to_varstrings(expr.left) + lower_to_varstrings(expr.right)
    if isinstance(expr, src.Call):
        raise UnimplementedFeatureError(
            f"capturing the output of '{expr.name}' is not supported"
        )
    raise UnreachableShapeError(
        f"{_describe(expr)} cannot appear in a string context"
    )


def lower_arguments(exprs) -> list[tgt.Str | tgt.Var]:
    fragments: list[tgt.Str | tgt.Var] = []
    for expr in exprs:
        fragments.extend(lower_to_varstrings(expr))
    return fragments


_ALWAYS_TRUE = tgt.StrCompare(
    operator="==", left=tgt.strs("1"), right=tgt.strs("1")
)
_ALWAYS_FALSE = tgt.StrCompare(
    operator="==", left=tgt.strs("0"), right=tgt.strs("1")
)


def lower_to_comparison(expr) -> tgt.StrCompare:
    """Lower a condition.

    Arithmetic comparisons share the single string-comparison primitive:
    their operands are compared through their string renderings.
    """
    if isinstance(expr, (src.StrCompare, src.ArithBinary)):
        return tgt.StrCompare(
            operator=expr.operator,
            left=lower_to_varstrings(expr.left),
            right=lower_to_varstrings(expr.right),
        )
    if isinstance(expr, src.Leftvalue):
        return tgt.StrCompare(
            operator="==",
            left=[tgt.Var(lvalue=lower_leftvalue(expr.lvalue))],
            right=tgt.strs("1"),
        )
    if isinstance(expr, src.Bool):
        return _ALWAYS_TRUE if expr.value else _ALWAYS_FALSE
    if isinstance(expr, src.Int):
        return _ALWAYS_TRUE if expr.value == 1 else _ALWAYS_FALSE
    raise UnsupportedContextError(
        f"{_describe(expr)} cannot be used as a condition"
    )
