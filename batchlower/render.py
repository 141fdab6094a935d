"""Batch renderer: target AST to ``cmd.exe`` script text.

A mechanical serializer: every decision about *what* to emit has already
been made by the lowering pass.

Scripts run under ``EnableDelayedExpansion``, which decides two things here:

- ``!`` in literal text must be escaped, ``^^!`` bare and ``^!`` in quotes.
- ``!a_!i!!`` cannot be expanded in one pass. Reading an element through a
  variable index binds the index to a FOR variable first, so ``a[i]`` is
  read as ``for %%i in (!i!) do ... !a_%%i!``.
"""

from __future__ import annotations

from . import target_ast as tgt
from .errors import UnsupportedContextError

INDENT = "  "

_NUMERIC_COMPARATORS: dict[str, str] = {
    "<": "LSS",
    "<=": "LEQ",
    ">": "GTR",
    ">=": "GEQ",
}
_EQUALITY = frozenset({"==", "==="})
_INEQUALITY = frozenset({"!=", "!=="})
_CARET_ESCAPED = "^&|<>"
_FOR_VARIABLES = "ijklmnopqrstuvwxyz"


def _escape(text: str, quoted: bool = False) -> str:
    text = text.replace("%", "%%")
    if quoted:
        return text.replace("!", "^!")
    for ch in _CARET_ESCAPED:
        text = text.replace(ch, "^" + ch)
    return text.replace("!", "^^!")


class IndexBindings:
    """FOR variables bound to the variable list indices read on one line.

    *first* skips the variables already bound by enclosing ``if`` lines, so
    a nested line never rebinds a name its block is still using.
    """

    def __init__(self, first: int = 0):
        self._first = first
        self._bound: dict[str, str] = {}

    @property
    def used(self) -> int:
        return self._first + len(self._bound)

    def bind(self, ref: str) -> str:
        if ref.startswith("%"):
            return ref
        if ref not in self._bound:
            if self.used >= len(_FOR_VARIABLES):
                raise UnsupportedContextError(
                    "too many variable list indices read in one statement"
                )
            self._bound[ref] = f"%%{_FOR_VARIABLES[self.used]}"
        return self._bound[ref]

    def wrap(self, line: str) -> str:
        """Prefix *line* with one ``for`` per binding, innermost index first."""
        loops = "".join(f"for {var} in ({ref}) do " for ref, var in self._bound.items())
        return loops + line


def lvalue_name(lvalue, bindings: IndexBindings | None = None) -> str:
    """Name written as an assignment target: ``a[0][i]`` becomes ``a_0_!i!``."""
    if bindings is None:
        bindings = IndexBindings()
    if isinstance(lvalue, tgt.Identifier):
        return lvalue.name
    index = lvalue.index
    if isinstance(index, tgt.IntLiteral):
        suffix = str(index.value)
    else:
        suffix = reference(index.lvalue, bindings)
    return f"{lvalue_name(lvalue.lvalue, bindings)}_{suffix}"


def _read_name(lvalue, bindings: IndexBindings) -> str:
    if isinstance(lvalue, tgt.Identifier):
        return lvalue.name
    index = lvalue.index
    if isinstance(index, tgt.IntLiteral):
        suffix = str(index.value)
    else:
        suffix = bindings.bind(reference(index.lvalue, bindings))
    return f"{_read_name(lvalue.lvalue, bindings)}_{suffix}"


def reference(lvalue, bindings: IndexBindings | None = None) -> str:
    """Read a variable: ``!name!``, or positional arguments verbatim."""
    if bindings is None:
        bindings = IndexBindings()
    name = _read_name(lvalue, bindings)
    if name.startswith("%"):
        return name
    return f"!{name}!"


def render_varstring(fragment, quoted: bool = False, bindings: IndexBindings | None = None) -> str:
    if isinstance(fragment, tgt.Str):
        return _escape(fragment.value, quoted)
    return reference(fragment.lvalue, bindings)


def render_varstrings(fragments, quoted: bool = False, bindings: IndexBindings | None = None) -> str:
    return "".join(render_varstring(f, quoted, bindings) for f in fragments)


def render_arithmetic(arith, nested: bool = False, bindings: IndexBindings | None = None) -> str:
    if isinstance(arith, tgt.IntLiteral):
        return str(arith.value)
    if isinstance(arith, tgt.Var):
        return lvalue_name(arith.lvalue, bindings)
    if isinstance(arith, tgt.ArithUnary):
        return f"{_escape(arith.operator)}{render_arithmetic(arith.operand, True, bindings)}"
    text = (
        f"{render_arithmetic(arith.left, True, bindings)} {_escape(arith.operator)} "
        f"{render_arithmetic(arith.right, True, bindings)}"
    )
    return f"({text})" if nested else text


def render_comparison(cond: tgt.StrCompare, bindings: IndexBindings | None = None) -> str:
    if cond.operator in _NUMERIC_COMPARATORS:
        left = render_varstrings(cond.left, bindings=bindings)
        right = render_varstrings(cond.right, bindings=bindings)
        return f"{left} {_NUMERIC_COMPARATORS[cond.operator]} {right}"
    left = render_varstrings(cond.left, quoted=True, bindings=bindings)
    right = render_varstrings(cond.right, quoted=True, bindings=bindings)
    if cond.operator in _EQUALITY:
        return f'"{left}"=="{right}"'
    if cond.operator in _INEQUALITY:
        return f'not "{left}"=="{right}"'
    raise UnsupportedContextError(f"no batch comparison for operator '{cond.operator}'")


def render_lines(stmts, depth: int = 0, bound: int = 0) -> list[str]:
    """Render *stmts* at *depth*; *bound* FOR variables are held by enclosing lines."""
    pad = INDENT * depth
    lines: list[str] = []
    for stmt in stmts:
        bindings = IndexBindings(bound)
        if isinstance(stmt, tgt.Raw):
            lines.append(pad + stmt.text)
        elif isinstance(stmt, tgt.Comment):
            lines.append(f"{pad}rem {stmt.text}")
        elif isinstance(stmt, tgt.Label):
            lines.append(f"{pad}:{stmt.name}")
        elif isinstance(stmt, tgt.Goto):
            lines.append(f"{pad}goto {stmt.target}")
        elif isinstance(stmt, tgt.Assign):
            target = lvalue_name(stmt.lvalue, bindings)
            value = render_varstrings(stmt.value, bindings=bindings)
            lines.append(pad + bindings.wrap(f"set {target}={value}"))
        elif isinstance(stmt, tgt.ArithAssign):
            target = lvalue_name(stmt.lvalue, bindings)
            value = render_arithmetic(stmt.value, bindings=bindings)
            lines.append(pad + bindings.wrap(f"set /a {target}={value}"))
        elif isinstance(stmt, tgt.Call):
            parts = [render_varstring(stmt.callee, bindings=bindings)]
            parts.extend(render_varstring(arg, bindings=bindings) for arg in stmt.args)
            lines.append(pad + bindings.wrap(" ".join(parts)))
        elif isinstance(stmt, tgt.If):
            head = f"if {render_comparison(stmt.condition, bindings)} ("
            lines.append(pad + bindings.wrap(head))
            lines.extend(render_lines(stmt.body, depth + 1, bindings.used))
            lines.append(f"{pad})")
        elif isinstance(stmt, tgt.IfElse):
            head = f"if {render_comparison(stmt.condition, bindings)} ("
            lines.append(pad + bindings.wrap(head))
            lines.extend(render_lines(stmt.then, depth + 1, bindings.used))
            lines.append(f"{pad}) else (")
            lines.extend(render_lines(stmt.otherwise, depth + 1, bindings.used))
            lines.append(f"{pad})")
        elif isinstance(stmt, tgt.Empty):
            lines.append("")
        else:
            raise TypeError(f"Unexpected target statement: {type(stmt).__name__}")
    return lines


def render(stmts, line_ending: str = "\n") -> str:
    """Render a whole script, terminated by *line_ending*."""
    lines = render_lines(stmts)
    if not lines:
        return ""
    return line_ending.join(lines) + line_ending
