"""Composable API functions for the batch compilation pipeline.

Each function corresponds to a CLI workflow (script, ``--ast``, ``--stats``)
but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
import time

from . import source_ast as src
from . import target_ast as tgt
from .assembler import assemble_program
from .compile_types import CompileConfig, CompileStats
from .render import render
from .split import split
from .symbol_table import SymbolTable, build_symbol_table
from .target_stats import count_statement_kinds

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = CompileConfig()


def load_program(text: str) -> src.Program:
    """Validate a JSON-serialized source AST.

    Raises:
        pydantic.ValidationError: If *text* is not a well-formed program.
    """
    return src.Program.model_validate_json(text)


def compile_program(
    program: src.Program,
    symtable: SymbolTable | None = None,
    config: CompileConfig = DEFAULT_CONFIG,
) -> list:
    """Lower a source program to a flat list of target statements.

    Args:
        program: The source AST.
        symtable: A prebuilt symbol table; built from *program* when omitted.
        config: Compilation options.

    Returns:
        The target statements, prologue first.
    """
    logger.info(
        "Compiling %d top-level items (split=%s)", len(program.items), config.split
    )
    if symtable is None:
        symtable = build_symbol_table(program)
    if config.split:
        program = split(program, symtable)
    return assemble_program(program, symtable, with_prologue=config.prologue)


def compile_source_json(text: str, config: CompileConfig = DEFAULT_CONFIG) -> list:
    return compile_program(load_program(text), config=config)


def dump_batch(text: str, config: CompileConfig = DEFAULT_CONFIG) -> str:
    """Compile a JSON source AST and return the rendered batch script."""
    stmts = compile_source_json(text, config)
    return render(stmts, line_ending=config.line_ending)


def dump_target_ast(text: str, config: CompileConfig = DEFAULT_CONFIG) -> str:
    """Compile a JSON source AST and return the target AST as JSON."""
    stmts = compile_source_json(text, config)
    return tgt.Script(statements=stmts).model_dump_json(indent=2)


def target_stats(text: str, config: CompileConfig = DEFAULT_CONFIG) -> dict[str, int]:
    """Compile a JSON source AST and return statement-kind frequency counts."""
    return count_statement_kinds(compile_source_json(text, config))


def compile_with_stats(
    text: str, config: CompileConfig = DEFAULT_CONFIG
) -> tuple[str, CompileStats]:
    """Run every stage separately, timing each one.

    Returns:
        The rendered script and the collected statistics.
    """
    stats = CompileStats(source_bytes=len(text.encode("utf-8")))
    t_start = time.perf_counter()

    t0 = time.perf_counter()
    program = load_program(text)
    stats.load_time = time.perf_counter() - t0
    stats.function_count = sum(isinstance(i, src.Function) for i in program.items)
    stats.statement_count = len(program.items) - stats.function_count

    t0 = time.perf_counter()
    symtable = build_symbol_table(program)
    stats.symtable_time = time.perf_counter() - t0

    if config.split:
        t0 = time.perf_counter()
        program = split(program, symtable)
        stats.split_time = time.perf_counter() - t0

    t0 = time.perf_counter()
    stmts = assemble_program(program, symtable, with_prologue=config.prologue)
    stats.lower_time = time.perf_counter() - t0
    stats.target_statement_count = len(stmts)

    t0 = time.perf_counter()
    script = render(stmts, line_ending=config.line_ending)
    stats.render_time = time.perf_counter() - t0
    stats.script_lines = script.count(config.line_ending)

    stats.total_time = time.perf_counter() - t_start
    logger.info("Compiled %d bytes in %.1fms", stats.source_bytes, stats.total_time * 1000)
    return script, stats
