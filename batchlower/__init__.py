"""Lowering of a small imperative language to Windows batch scripts."""

from .api import (  # noqa: F401
    load_program,
    compile_program,
    compile_source_json,
    dump_batch,
    dump_target_ast,
    target_stats,
    compile_with_stats,
)
from .render import render  # noqa: F401
