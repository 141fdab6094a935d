"""Split pass: normalise nested expressions before lowering.

Batch can only compute arithmetic in ``set /a`` and only compare inside
``if``. This pass returns a new program in which:

- arithmetic used as a string (concatenation side, call argument, return
  value, comparison operand, non-literal list index) is first computed into a
  temporary with its own assignment;
- a comparison used as a value is computed into a temporary through an
  if/else that stores ``1`` or ``0``;
- a ``!x`` condition is computed into a temporary and tested for truth.

Hoisted statements for a ``while`` condition are repeated at the end of the
loop body so the condition is recomputed before every test.
"""

from __future__ import annotations

import logging

from . import constants
from . import source_ast as src
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)


def _is_comparison(expr) -> bool:
    if isinstance(expr, src.StrCompare):
        return True
    return (
        isinstance(expr, src.ArithBinary)
        and expr.operator in constants.COMPARISON_OPERATORS
    )


def _is_arithmetic(expr) -> bool:
    return isinstance(expr, (src.ArithUnary, src.ArithBinary)) and not _is_comparison(expr)


def _as_statement(stmts: list):
    if len(stmts) == 1:
        return stmts[0]
    return src.Block(statements=stmts)


class Splitter:
    """Splits one program; owns the temporary-name counter."""

    def __init__(self, symtable: SymbolTable):
        self._temp_counter: int = 0
        self._taken: set[str] = set()
        for scope in [symtable.global_scope(), *symtable.functions.values()]:
            self._taken.update(scope.variables)
            self._taken.update(scope.references)
            self._taken.update(scope.params)

    def _fresh_temp(self) -> str:
        while True:
            name = f"{constants.TEMP_VAR_PREFIX}_{self._temp_counter}"
            self._temp_counter += 1
            if name not in self._taken:
                return name

    # ── program / statements ─────────────────────────────────────

    def split_program(self, program: src.Program) -> src.Program:
        items = []
        for item in program.items:
            if isinstance(item, src.Function):
                items.append(
                    src.Function(
                        name=item.name,
                        params=list(item.params),
                        body=self.split_statements(item.body),
                    )
                )
            else:
                items.append(
                    src.StatementItem(
                        statement=_as_statement(self.split_statement(item.statement))
                    )
                )
        logger.debug("Split pass introduced %d temporaries", self._temp_counter)
        return src.Program(items=items)

    def split_statements(self, stmts) -> list:
        out: list = []
        for stmt in stmts:
            out.extend(self.split_statement(stmt))
        return out

    def split_statement(self, stmt) -> list:
        if isinstance(stmt, src.Block):
            return [src.Block(statements=self.split_statements(stmt.statements))]
        if isinstance(stmt, src.ExpressionStatement):
            if not isinstance(stmt.expression, src.Call):
                return [stmt]
            pre, call = self._split_call(stmt.expression)
            return pre + [src.ExpressionStatement(expression=call)]
        if isinstance(stmt, src.Assignment):
            return self._split_assignment(stmt)
        if isinstance(stmt, src.If):
            pre, cond = self._split_condition(stmt.condition)
            then = _as_statement(self.split_statement(stmt.then))
            return pre + [src.If(condition=cond, then=then)]
        if isinstance(stmt, src.IfElse):
            pre, cond = self._split_condition(stmt.condition)
            return pre + [
                src.IfElse(
                    condition=cond,
                    then=_as_statement(self.split_statement(stmt.then)),
                    otherwise=_as_statement(self.split_statement(stmt.otherwise)),
                )
            ]
        if isinstance(stmt, src.While):
            pre, cond = self._split_condition(stmt.condition)
            body = self.split_statement(stmt.body) + pre
            return pre + [src.While(condition=cond, body=_as_statement(body))]
        if isinstance(stmt, src.Return) and stmt.value is not None:
            pre, value = self._split_string_operand(stmt.value)
            return pre + [src.Return(value=value)]
        return [stmt]

    def _split_assignment(self, stmt: src.Assignment) -> list:
        pre, lvalue = self._split_lvalue(stmt.lvalue)
        expr = stmt.expression
        if _is_comparison(expr):
            cond_pre, cond = self._split_condition(expr)
            return pre + cond_pre + [self._store_truth(lvalue, cond)]
        if _is_arithmetic(expr):
            value_pre, value = self._split_arithmetic_operand(expr)
        elif isinstance(expr, src.List):
            value_pre, items = [], []
            for item in expr.items:
                item_pre, item = self._split_list_item(item)
                value_pre.extend(item_pre)
                items.append(item)
            value = src.List(items=items)
        else:
            value_pre, value = self._split_string_operand(expr)
        return pre + value_pre + [src.Assignment(lvalue=lvalue, expression=value)]

    # ── expressions ──────────────────────────────────────────────

    def _store_truth(self, lvalue, cond) -> src.IfElse:
        return src.IfElse(
            condition=cond,
            then=src.Assignment(lvalue=lvalue, expression=src.Int(value=1)),
            otherwise=src.Assignment(lvalue=lvalue, expression=src.Int(value=0)),
        )

    def _hoist_arithmetic(self, expr) -> tuple[list, src.Leftvalue]:
        pre, expr = self._split_arithmetic_operand(expr)
        tmp = self._fresh_temp()
        pre.append(src.Assignment(lvalue=src.Identifier(name=tmp), expression=expr))
        return pre, src.var(tmp)

    def _hoist_comparison(self, expr) -> tuple[list, src.Leftvalue]:
        pre, cond = self._split_condition(expr)
        tmp = self._fresh_temp()
        pre.append(self._store_truth(src.Identifier(name=tmp), cond))
        return pre, src.var(tmp)

    def _split_lvalue(self, lvalue) -> tuple[list, object]:
        if isinstance(lvalue, src.Identifier):
            return [], lvalue
        pre, base = self._split_lvalue(lvalue.lvalue)
        index = lvalue.index
        if _is_arithmetic(index):
            index_pre, index = self._hoist_arithmetic(index)
            pre.extend(index_pre)
        elif isinstance(index, src.Leftvalue):
            index_pre, inner = self._split_lvalue(index.lvalue)
            pre.extend(index_pre)
            index = src.Leftvalue(lvalue=inner)
        return pre, src.ListAccess(lvalue=base, index=index)

    def _split_leftvalue_expr(self, expr: src.Leftvalue) -> tuple[list, src.Leftvalue]:
        pre, lvalue = self._split_lvalue(expr.lvalue)
        return pre, src.Leftvalue(lvalue=lvalue)

    def _split_call(self, call: src.Call) -> tuple[list, src.Call]:
        pre: list = []
        args = []
        for arg in call.args:
            arg_pre, arg = self._split_string_operand(arg)
            pre.extend(arg_pre)
            args.append(arg)
        return pre, src.Call(name=call.name, args=args)

    def _split_string_operand(self, expr) -> tuple[list, object]:
        if isinstance(expr, src.Concat):
            left_pre, left = self._split_string_operand(expr.left)
            right_pre, right = self._split_string_operand(expr.right)
            return left_pre + right_pre, src.Concat(left=left, right=right)
        if _is_comparison(expr):
            return self._hoist_comparison(expr)
        if _is_arithmetic(expr):
            return self._hoist_arithmetic(expr)
        if isinstance(expr, src.Leftvalue):
            return self._split_leftvalue_expr(expr)
        if isinstance(expr, src.Call):
            return self._split_call(expr)
        return [], expr

    def _split_arithmetic_operand(self, expr) -> tuple[list, object]:
        if isinstance(expr, src.ArithUnary):
            pre, operand = self._split_arithmetic_operand(expr.operand)
            return pre, src.ArithUnary(operator=expr.operator, operand=operand)
        if _is_comparison(expr):
            return self._hoist_comparison(expr)
        if isinstance(expr, src.ArithBinary):
            left_pre, left = self._split_arithmetic_operand(expr.left)
            right_pre, right = self._split_arithmetic_operand(expr.right)
            return left_pre + right_pre, src.ArithBinary(
                operator=expr.operator, left=left, right=right
            )
        if isinstance(expr, src.Leftvalue):
            return self._split_leftvalue_expr(expr)
        return [], expr

    def _split_list_item(self, expr) -> tuple[list, object]:
        if _is_comparison(expr):
            return self._hoist_comparison(expr)
        if _is_arithmetic(expr):
            return self._split_arithmetic_operand(expr)
        if isinstance(expr, src.List):
            pre: list = []
            items = []
            for item in expr.items:
                item_pre, item = self._split_list_item(item)
                pre.extend(item_pre)
                items.append(item)
            return pre, src.List(items=items)
        return self._split_string_operand(expr)

    def _split_condition(self, expr) -> tuple[list, object]:
        if _is_comparison(expr):
            left_pre, left = self._split_string_operand(expr.left)
            right_pre, right = self._split_string_operand(expr.right)
            return left_pre + right_pre, type(expr)(
                operator=expr.operator, left=left, right=right
            )
        if isinstance(expr, src.ArithUnary):
            return self._hoist_arithmetic(expr)
        if isinstance(expr, src.Leftvalue):
            return self._split_leftvalue_expr(expr)
        return [], expr


def split(program: src.Program, symtable: SymbolTable) -> src.Program:
    """Return a normalised copy of *program*; the input is left untouched."""
    return Splitter(symtable).split_program(program)
