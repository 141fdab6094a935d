"""Statement lowering: source statements into flat target statement lists."""

from __future__ import annotations

import logging

from . import constants
from . import source_ast as src
from . import target_ast as tgt
from .errors import UnreachableShapeError
from .expressions import (
    lower_arguments,
    lower_leftvalue,
    lower_to_arithmetic,
    lower_to_comparison,
    lower_to_varstrings,
)
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)

_STRING_VALUED = (src.String, src.StrCompare, src.Concat, src.Call, src.Leftvalue)
_NUMBER_VALUED = (src.Bool, src.Int, src.Float, src.ArithUnary, src.ArithBinary)


class StatementLowerer:
    """Lowers statements for one compilation unit.

    Owns the loop-label counter, so every ``while`` compiled through the
    same instance gets a distinct label. Create one instance per program.
    """

    def __init__(self, symtable: SymbolTable):
        self._symtable = symtable
        self._label_counter: int = 0

    def _fresh_label(self, prefix: str = constants.WHILE_LABEL_PREFIX) -> str:
        lbl = f"{prefix}_{self._label_counter}"
        self._label_counter += 1
        return lbl

    # ── entry points ─────────────────────────────────────────────

    def lower_statements(self, stmts) -> list:
        lowered: list = []
        for stmt in stmts:
            lowered.extend(self.lower_statement(stmt))
        return lowered

    def lower_statement(self, stmt) -> list:
        if isinstance(stmt, src.Comment):
            return [tgt.Comment(text=stmt.text)]
        if isinstance(stmt, src.Block):
            return self.lower_statements(stmt.statements)
        if isinstance(stmt, src.ExpressionStatement):
            return [self._lower_expression_statement(stmt.expression)]
        if isinstance(stmt, src.Assignment):
            return self.lower_assignment(stmt.lvalue, stmt.expression)
        if isinstance(stmt, src.If):
            return [
                tgt.If(
                    condition=lower_to_comparison(stmt.condition),
                    body=self.lower_statement(stmt.then),
                )
            ]
        if isinstance(stmt, src.IfElse):
            return [
                tgt.IfElse(
                    condition=lower_to_comparison(stmt.condition),
                    then=self.lower_statement(stmt.then),
                    otherwise=self.lower_statement(stmt.otherwise),
                )
            ]
        if isinstance(stmt, src.While):
            return self._lower_while(stmt)
        if isinstance(stmt, src.Return):
            return self._lower_return(stmt)
        if isinstance(stmt, (src.Global, src.Empty)):
            return []
        raise UnreachableShapeError(f"unknown statement: {type(stmt).__name__}")

    # ── statement kinds ──────────────────────────────────────────

    def _lower_expression_statement(self, expr) -> tgt.Call:
        if not isinstance(expr, src.Call):
            raise UnreachableShapeError(
                f"only calls can be used as statements, got {expr.kind}"
            )
        args = lower_arguments(expr.args)
        if self._symtable.is_function(expr.name):
            return tgt.Call(
                callee=tgt.Str(value=constants.CALL_COMMAND),
                args=[
                    tgt.Str(value=constants.CALL_LABEL_PREFIX + expr.name),
                    tgt.Str(value=constants.RETURN_MARKER),
                    tgt.Str(value=constants.FRAME_PLACEHOLDER),
                ]
                + args,
            )
        # external command
        return tgt.Call(callee=tgt.Str(value=expr.name), args=args)

    def lower_assignment(self, lvalue, expr) -> list:
        """Lower ``lvalue = expr``, choosing ``set`` or ``set /a`` by shape."""
        if isinstance(expr, _STRING_VALUED):
            return [
                tgt.Assign(
                    lvalue=lower_leftvalue(lvalue),
                    value=lower_to_varstrings(expr),
                )
            ]
        if isinstance(expr, _NUMBER_VALUED):
            return [
                tgt.ArithAssign(
                    lvalue=lower_leftvalue(lvalue),
                    value=lower_to_arithmetic(expr),
                )
            ]
        if isinstance(expr, src.List):
            lowered: list = []
            for position, item in enumerate(expr.items):
                lowered.extend(
                    self.lower_assignment(src.index(lvalue, position), item)
                )
            return lowered
        raise UnreachableShapeError(f"cannot assign {type(expr).__name__}")

    def _lower_while(self, stmt: src.While) -> list:
        condition = lower_to_comparison(stmt.condition)
        body = self.lower_statement(stmt.body)
        label = self._fresh_label()
        logger.debug("Allocated loop label %s", label)
        return [
            tgt.Label(name=label),
            tgt.If(condition=condition, body=body + [tgt.Goto(target=label)]),
        ]

    def _lower_return(self, stmt: src.Return) -> list:
        leave = tgt.Goto(target=constants.END_OF_FILE_LABEL)
        if stmt.value is None:
            return [leave]
        return [
            tgt.Assign(
                lvalue=tgt.Identifier(name=constants.RETURN_SLOT),
                value=lower_to_varstrings(stmt.value),
            ),
            leave,
        ]
