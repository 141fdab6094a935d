"""Program assembly: order, lower and concatenate the top-level items."""

from __future__ import annotations

import logging

from . import constants
from . import source_ast as src
from . import target_ast as tgt
from .frames import compile_function
from .statements import StatementLowerer
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)


def sort_functions(items) -> list:
    """Stable partition: bare statements first, then function definitions.

    Execution falls through the script top to bottom, so every function
    must come after the last top-level statement.
    """
    statements = [item for item in items if not isinstance(item, src.Function)]
    functions = [item for item in items if isinstance(item, src.Function)]
    return statements + functions


def prologue() -> list[tgt.Raw]:
    return [tgt.Raw(text=line) for line in constants.PROLOGUE]


def assemble_program(
    program: src.Program, symtable: SymbolTable, with_prologue: bool = True
) -> list:
    """Lower an already split *program* into one flat statement list."""
    lowerer = StatementLowerer(symtable)
    toplevel = symtable.global_scope()
    logger.debug(
        "Lowering %d items, %d top-level variables",
        len(program.items),
        len(toplevel.variables),
    )
    stmts: list = prologue() if with_prologue else []
    for item in sort_functions(program.items):
        if isinstance(item, src.Function):
            stmts.extend(compile_function(item, lowerer, symtable))
        else:
            stmts.extend(lowerer.lower_statement(item.statement))
    logger.debug("Assembled %d target statements", len(stmts))
    return stmts
