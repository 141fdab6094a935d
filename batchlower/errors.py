"""Lowering failures.

Every error is fatal: a program that raises any of these cannot be compiled
and no partial output is produced.
"""

from __future__ import annotations


class LoweringError(ValueError):
    """Base class for all compilation failures."""


class UnsupportedContextError(LoweringError):
    """An expression's shape cannot be represented where it appears."""


class UnimplementedFeatureError(LoweringError):
    """A recognised construct the batch backend does not support yet."""


class UnreachableShapeError(LoweringError):
    """A shape the split pass should have removed reached the lowering."""


class UnknownFunctionError(LoweringError):
    """A scope was requested for a name that is not a declared function."""


class DuplicateFunctionError(LoweringError):
    """Two top-level functions share a name."""
