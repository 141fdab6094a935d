"""Named constants for the batch calling convention and program layout."""

from __future__ import annotations

# Positional call arguments as seen from inside a called label.
RETURN_SLOT = "%~1"
FRAME_SLOT = "%~2"
FIRST_ARGUMENT_SLOT = 3
ARGUMENT_SLOT_TEMPLATE = "%~{index}"

# Caller side of the convention: `call :<label> _ 0 args...`
CALL_COMMAND = "call"
CALL_LABEL_PREFIX = ":"
RETURN_MARKER = "_"
FRAME_PLACEHOLDER = "0"

END_OF_FILE_LABEL = ":EOF"
WHILE_LABEL_PREFIX = "WHILE"
TEMP_VAR_PREFIX = "_tmp"

PROLOGUE: tuple[str, ...] = (
    "@echo off",
    "setlocal EnableDelayedExpansion",
    "setlocal EnableExtensions",
)

# Operators that make an ArithBinary a comparison rather than a computation.
COMPARISON_OPERATORS: frozenset[str] = frozenset(
    {"==", "!=", "===", "!==", "<", "<=", ">", ">="}
)
