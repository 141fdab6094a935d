"""Symbol table: which names are functions, and the scope of each.

The lowering pass only asks three questions of it (``is_function``,
``scope`` and ``global_scope``) and never looks inside a ``Scope``; the
split pass and diagnostics use the recorded variable names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import source_ast as src
from .errors import DuplicateFunctionError, UnknownFunctionError

logger = logging.getLogger(__name__)


@dataclass
class Scope:
    """Names visible in one function body (``owner=None`` for top level)."""

    owner: str | None = None
    params: list[str] = field(default_factory=list)
    variables: set[str] = field(default_factory=set)
    globals: set[str] = field(default_factory=set)
    references: set[str] = field(default_factory=set)


@dataclass
class SymbolTable:
    functions: dict[str, Scope] = field(default_factory=dict)
    toplevel: Scope = field(default_factory=Scope)

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def scope(self, name: str) -> Scope:
        if name not in self.functions:
            raise UnknownFunctionError(f"'{name}' is not a declared function")
        return self.functions[name]

    def global_scope(self) -> Scope:
        return self.toplevel


def _root_identifier(lvalue: src.Identifier | src.ListAccess) -> str:
    while isinstance(lvalue, src.ListAccess):
        lvalue = lvalue.lvalue
    return lvalue.name


def _collect_lvalue_reads(lvalue, scope: Scope) -> None:
    while isinstance(lvalue, src.ListAccess):
        _collect_reads(lvalue.index, scope)
        lvalue = lvalue.lvalue


def _collect_reads(expr, scope: Scope) -> None:
    """Record the root name of every variable *expr* reads."""
    if isinstance(expr, src.Leftvalue):
        scope.references.add(_root_identifier(expr.lvalue))
        _collect_lvalue_reads(expr.lvalue, scope)
    elif isinstance(expr, src.ArithUnary):
        _collect_reads(expr.operand, scope)
    elif isinstance(expr, (src.ArithBinary, src.Concat, src.StrCompare)):
        _collect_reads(expr.left, scope)
        _collect_reads(expr.right, scope)
    elif isinstance(expr, src.List):
        for item in expr.items:
            _collect_reads(item, scope)
    elif isinstance(expr, src.Call):
        for arg in expr.args:
            _collect_reads(arg, scope)


def _collect(stmt, scope: Scope) -> None:
    """Record assigned variables, reads and ``global`` declarations of *stmt*."""
    if isinstance(stmt, src.Assignment):
        scope.variables.add(_root_identifier(stmt.lvalue))
        _collect_lvalue_reads(stmt.lvalue, scope)
        _collect_reads(stmt.expression, scope)
    elif isinstance(stmt, src.ExpressionStatement):
        _collect_reads(stmt.expression, scope)
    elif isinstance(stmt, src.Return) and stmt.value is not None:
        _collect_reads(stmt.value, scope)
    elif isinstance(stmt, src.Global):
        scope.globals.add(stmt.name)
    elif isinstance(stmt, src.Block):
        for child in stmt.statements:
            _collect(child, scope)
    elif isinstance(stmt, src.If):
        _collect_reads(stmt.condition, scope)
        _collect(stmt.then, scope)
    elif isinstance(stmt, src.IfElse):
        _collect_reads(stmt.condition, scope)
        _collect(stmt.then, scope)
        _collect(stmt.otherwise, scope)
    elif isinstance(stmt, src.While):
        _collect_reads(stmt.condition, scope)
        _collect(stmt.body, scope)


def build_symbol_table(program: src.Program) -> SymbolTable:
    """Walk *program* once and record every function and its variables."""
    table = SymbolTable()
    for item in program.items:
        if isinstance(item, src.Function):
            if item.name in table.functions:
                raise DuplicateFunctionError(
                    f"function '{item.name}' is defined more than once"
                )
            scope = Scope(owner=item.name, params=list(item.params))
            for stmt in item.body:
                _collect(stmt, scope)
            table.functions[item.name] = scope
        else:
            _collect(item.statement, table.toplevel)
    logger.debug(
        "Symbol table: %d functions, %d top-level variables",
        len(table.functions),
        len(table.toplevel.variables),
    )
    return table
