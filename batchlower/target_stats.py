"""Pure functions for computing statistics over target statement lists."""

from __future__ import annotations

from collections import Counter

from . import target_ast as tgt


def _walk(stmts):
    for stmt in stmts:
        yield stmt
        if isinstance(stmt, tgt.If):
            yield from _walk(stmt.body)
        elif isinstance(stmt, tgt.IfElse):
            yield from _walk(stmt.then)
            yield from _walk(stmt.otherwise)


def count_statement_kinds(stmts: list) -> dict[str, int]:
    """Return a frequency map of statement kinds, nested bodies included.

    Args:
        stmts: A list of target statements.

    Returns:
        A dict mapping ``kind`` strings to their occurrence counts.
        Empty dict for an empty input list.
    """
    return dict(Counter(stmt.kind for stmt in _walk(stmts)))
