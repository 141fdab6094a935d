"""Call frames: give each function call its own variable namespace.

Batch variables are all global, so inside a function body every variable
``x`` is turned into the element ``x[%~2]`` of a global array indexed by the
frame identifier the caller passed as the second positional argument.

Compiling a function is two separate stages composed by ``compile_function``:
statement lowering, then exactly one frame rewrite of the result.
"""

from __future__ import annotations

import logging

from . import constants
from . import source_ast as src
from . import target_ast as tgt
from .statements import StatementLowerer
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)

_FRAME_INDEX = tgt.Var(lvalue=tgt.Identifier(name=constants.FRAME_SLOT))
_UNTOUCHED = (tgt.Raw, tgt.Comment, tgt.Label, tgt.Goto, tgt.Empty)


def frame_leftvalue(lvalue):
    """Rewrite the base identifier of *lvalue*; index expressions are kept."""
    if isinstance(lvalue, tgt.Identifier):
        return tgt.ListAccess(lvalue=lvalue, index=_FRAME_INDEX)
    return tgt.ListAccess(lvalue=frame_leftvalue(lvalue.lvalue), index=lvalue.index)


def frame_varstring(fragment):
    if isinstance(fragment, tgt.Var):
        return tgt.Var(lvalue=frame_leftvalue(fragment.lvalue))
    return fragment


def frame_varstrings(fragments) -> list:
    return [frame_varstring(f) for f in fragments]


def frame_arithmetic(arith):
    if isinstance(arith, tgt.Var):
        return tgt.Var(lvalue=frame_leftvalue(arith.lvalue))
    if isinstance(arith, tgt.ArithUnary):
        return tgt.ArithUnary(
            operator=arith.operator, operand=frame_arithmetic(arith.operand)
        )
    if isinstance(arith, tgt.ArithBinary):
        return tgt.ArithBinary(
            operator=arith.operator,
            left=frame_arithmetic(arith.left),
            right=frame_arithmetic(arith.right),
        )
    return arith


def frame_comparison(cond: tgt.StrCompare) -> tgt.StrCompare:
    return tgt.StrCompare(
        operator=cond.operator,
        left=frame_varstrings(cond.left),
        right=frame_varstrings(cond.right),
    )


def frame_statement(stmt):
    if isinstance(stmt, _UNTOUCHED):
        return stmt
    if isinstance(stmt, tgt.Assign):
        return tgt.Assign(
            lvalue=frame_leftvalue(stmt.lvalue),
            value=frame_varstrings(stmt.value),
        )
    if isinstance(stmt, tgt.ArithAssign):
        return tgt.ArithAssign(
            lvalue=frame_leftvalue(stmt.lvalue),
            value=frame_arithmetic(stmt.value),
        )
    if isinstance(stmt, tgt.Call):
        return tgt.Call(
            callee=frame_varstring(stmt.callee),
            args=frame_varstrings(stmt.args),
        )
    if isinstance(stmt, tgt.If):
        return tgt.If(
            condition=frame_comparison(stmt.condition),
            body=frame_statements(stmt.body),
        )
    if isinstance(stmt, tgt.IfElse):
        return tgt.IfElse(
            condition=frame_comparison(stmt.condition),
            then=frame_statements(stmt.then),
            otherwise=frame_statements(stmt.otherwise),
        )
    raise TypeError(f"Unexpected target statement: {type(stmt).__name__}")


def frame_statements(stmts) -> list:
    """Frame-rewrite a lowered function body. Must run once per body."""
    return [frame_statement(s) for s in stmts]


def bind_parameters(params: list[str]) -> list[tgt.Assign]:
    """``set p[%~2]=%~<3+i>`` for each declared parameter, in order."""
    return [
        tgt.Assign(
            lvalue=tgt.ListAccess(lvalue=tgt.Identifier(name=param), index=_FRAME_INDEX),
            value=[
                tgt.var(
                    constants.ARGUMENT_SLOT_TEMPLATE.format(
                        index=i + constants.FIRST_ARGUMENT_SLOT
                    )
                )
            ],
        )
        for i, param in enumerate(params)
    ]


def compile_function(
    func: src.Function, lowerer: StatementLowerer, symtable: SymbolTable
) -> list:
    """Lower *func* into a guarded, callable label."""
    scope = symtable.scope(func.name)
    logger.debug(
        "Assembling function %s (%d params, %d assigned variables)",
        func.name,
        len(scope.params),
        len(scope.variables),
    )
    body = lowerer.lower_statements(func.body)
    framed_body = frame_statements(body)
    return [
        tgt.Goto(target=constants.END_OF_FILE_LABEL),
        tgt.Label(name=func.name),
        *bind_parameters(func.params),
        *framed_body,
    ]
