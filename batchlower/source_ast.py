"""Source AST: the structured input tree handed to the lowering pass.

Every node is a frozen pydantic model tagged with a ``kind`` literal, so a
whole ``Program`` can be loaded from (and dumped to) JSON.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── leftvalues ───────────────────────────────────────────────────


class Identifier(_Node):
    kind: Literal["identifier"] = "identifier"
    name: str


class ListAccess(_Node):
    kind: Literal["list_access"] = "list_access"
    lvalue: Lvalue
    index: Expression


Lvalue = Annotated[Union[Identifier, ListAccess], Field(discriminator="kind")]


# ── expressions ──────────────────────────────────────────────────


class Bool(_Node):
    kind: Literal["bool"] = "bool"
    value: bool


class Int(_Node):
    kind: Literal["int"] = "int"
    value: int


class Float(_Node):
    kind: Literal["float"] = "float"
    value: float


class String(_Node):
    kind: Literal["string"] = "string"
    value: str


class List(_Node):
    kind: Literal["list"] = "list"
    items: list[Expression] = []


class Leftvalue(_Node):
    """A variable (or indexed element) read as a value."""

    kind: Literal["leftvalue"] = "leftvalue"
    lvalue: Lvalue


class ArithUnary(_Node):
    kind: Literal["arith_unary"] = "arith_unary"
    operator: str
    operand: Expression


class ArithBinary(_Node):
    kind: Literal["arith_binary"] = "arith_binary"
    operator: str
    left: Expression
    right: Expression


class Concat(_Node):
    kind: Literal["concat"] = "concat"
    left: Expression
    right: Expression


class StrCompare(_Node):
    kind: Literal["str_compare"] = "str_compare"
    operator: str
    left: Expression
    right: Expression


class Call(_Node):
    kind: Literal["call"] = "call"
    name: str
    args: list[Expression] = []


Expression = Annotated[
    Union[
        Bool,
        Int,
        Float,
        String,
        List,
        Leftvalue,
        ArithUnary,
        ArithBinary,
        Concat,
        StrCompare,
        Call,
    ],
    Field(discriminator="kind"),
]


# ── statements ───────────────────────────────────────────────────


class Comment(_Node):
    kind: Literal["comment"] = "comment"
    text: str


class Block(_Node):
    kind: Literal["block"] = "block"
    statements: list[Statement] = []


class ExpressionStatement(_Node):
    kind: Literal["expression"] = "expression"
    expression: Expression


class Assignment(_Node):
    kind: Literal["assignment"] = "assignment"
    lvalue: Lvalue
    expression: Expression


class If(_Node):
    kind: Literal["if"] = "if"
    condition: Expression
    then: Statement


class IfElse(_Node):
    kind: Literal["if_else"] = "if_else"
    condition: Expression
    then: Statement
    otherwise: Statement


class While(_Node):
    kind: Literal["while"] = "while"
    condition: Expression
    body: Statement


class Return(_Node):
    kind: Literal["return"] = "return"
    value: Expression | None = None


class Global(_Node):
    kind: Literal["global"] = "global"
    name: str


class Empty(_Node):
    kind: Literal["empty"] = "empty"


Statement = Annotated[
    Union[
        Comment,
        Block,
        ExpressionStatement,
        Assignment,
        If,
        IfElse,
        While,
        Return,
        Global,
        Empty,
    ],
    Field(discriminator="kind"),
]


# ── top level ────────────────────────────────────────────────────


class StatementItem(_Node):
    kind: Literal["statement"] = "statement"
    statement: Statement


class Function(_Node):
    kind: Literal["function"] = "function"
    name: str
    params: list[str] = []
    body: list[Statement] = []


Toplevel = Annotated[Union[StatementItem, Function], Field(discriminator="kind")]


class Program(_Node):
    items: list[Toplevel] = []


for _model in (
    ListAccess,
    List,
    Leftvalue,
    ArithUnary,
    ArithBinary,
    Concat,
    StrCompare,
    Call,
    Block,
    ExpressionStatement,
    Assignment,
    If,
    IfElse,
    While,
    Return,
    StatementItem,
    Function,
    Program,
):
    _model.model_rebuild()


# ── builders ─────────────────────────────────────────────────────


def var(name: str) -> Leftvalue:
    """Shorthand for reading the plain variable *name*."""
    return Leftvalue(lvalue=Identifier(name=name))


def index(lvalue: Identifier | ListAccess, position: int) -> ListAccess:
    return ListAccess(lvalue=lvalue, index=Int(value=position))
