"""Target AST: the batch-script tree produced by the lowering pass.

Each sub-grammar is a closed union of frozen pydantic models:

- ``Lvalue``      identifiers and indexed elements (assignable locations)
- ``Varint``      list indices: integer literal or variable
- ``Arithmetic``  right-hand sides of ``set /a``
- ``Varstring``   fragments of a concatenated string; a ``list`` of them is
                  a ``Varstrings`` value
- ``Comparison``  the single string comparison the target understands
- ``Statement``   everything that becomes a line (or block) of script

Rewrites never mutate a node; they construct replacements.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── leftvalues & values ──────────────────────────────────────────


class Identifier(_Node):
    kind: Literal["identifier"] = "identifier"
    name: str


class ListAccess(_Node):
    kind: Literal["list_access"] = "list_access"
    lvalue: Lvalue
    index: Varint


Lvalue = Annotated[Union[Identifier, ListAccess], Field(discriminator="kind")]


class IntLiteral(_Node):
    kind: Literal["int"] = "int"
    value: int


class Var(_Node):
    kind: Literal["var"] = "var"
    lvalue: Lvalue


class Str(_Node):
    kind: Literal["str"] = "str"
    value: str


class ArithUnary(_Node):
    kind: Literal["arith_unary"] = "arith_unary"
    operator: str
    operand: Arithmetic


class ArithBinary(_Node):
    kind: Literal["arith_binary"] = "arith_binary"
    operator: str
    left: Arithmetic
    right: Arithmetic


Varint = Annotated[Union[IntLiteral, Var], Field(discriminator="kind")]
Arithmetic = Annotated[
    Union[IntLiteral, Var, ArithUnary, ArithBinary], Field(discriminator="kind")
]
Varstring = Annotated[Union[Str, Var], Field(discriminator="kind")]


class StrCompare(_Node):
    kind: Literal["str_compare"] = "str_compare"
    operator: str
    left: list[Varstring]
    right: list[Varstring]


Comparison = StrCompare


# ── statements ───────────────────────────────────────────────────


class Raw(_Node):
    kind: Literal["raw"] = "raw"
    text: str


class Comment(_Node):
    kind: Literal["comment"] = "comment"
    text: str


class Label(_Node):
    kind: Literal["label"] = "label"
    name: str


class Goto(_Node):
    kind: Literal["goto"] = "goto"
    target: str


class Assign(_Node):
    """String assignment: ``set lvalue=fragments``."""

    kind: Literal["assign"] = "assign"
    lvalue: Lvalue
    value: list[Varstring]


class ArithAssign(_Node):
    """Numeric assignment: ``set /a lvalue=expression``."""

    kind: Literal["arith_assign"] = "arith_assign"
    lvalue: Lvalue
    value: Arithmetic


class Call(_Node):
    kind: Literal["call"] = "call"
    callee: Varstring
    args: list[Varstring] = []


class If(_Node):
    kind: Literal["if"] = "if"
    condition: Comparison
    body: list[Statement] = []


class IfElse(_Node):
    kind: Literal["if_else"] = "if_else"
    condition: Comparison
    then: list[Statement] = []
    otherwise: list[Statement] = []


class Empty(_Node):
    kind: Literal["empty"] = "empty"


Statement = Annotated[
    Union[
        Raw,
        Comment,
        Label,
        Goto,
        Assign,
        ArithAssign,
        Call,
        If,
        IfElse,
        Empty,
    ],
    Field(discriminator="kind"),
]


class Script(_Node):
    """A whole lowered program; used to dump the target AST as JSON."""

    statements: list[Statement] = []


for _model in (
    ListAccess,
    Var,
    ArithUnary,
    ArithBinary,
    StrCompare,
    Assign,
    ArithAssign,
    Call,
    If,
    IfElse,
    Script,
):
    _model.model_rebuild()


# ── builders ─────────────────────────────────────────────────────


def var(name: str) -> Var:
    return Var(lvalue=Identifier(name=name))


def strs(*values: str) -> list[Str]:
    return [Str(value=v) for v in values]
