"""Abstract Syntax Tree (AST) definitions for the playlang language.

The AST classes defined in this module represent the syntactic structure
of parsed playlang programs. They are consumed by the validator and the
interpreter. Each node owns the ``[start, end)`` source offsets it was
parsed from so errors can point at the offending code.

Nodes are frozen once built. The state of a declared variable lives in a
`playlang.environment.Declaration`, never in the node itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .types import TypeSpec, Value


ARITHMETIC_OPS = ('+', '-', '*', '/', '%')
RELATIONAL_OPS = ('>', '>=', '<', '<=')
LOGICAL_OPS = ('&&', '||')
EQUALITY_OPS = ('==', '!=')
CONDITION_OPS = RELATIONAL_OPS + LOGICAL_OPS + EQUALITY_OPS
ASSIGNMENT_OPS = ('=', '+=', '-=', '*=', '/=', '%=')
UNARY_OPS = ('-', '++', '--', '!')


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    span: Tuple[int, int] = field(default=(0, 0), kw_only=True, compare=False)


@dataclass(frozen=True)
class Program(Node):
    statements: List['Statement']


@dataclass(frozen=True)
class VariableDecl(Node):
    type_spec: TypeSpec
    name: str
    init: Optional['Expression']  # None keeps the type's default value


@dataclass(frozen=True)
class ParamDecl(Node):
    type_spec: TypeSpec
    name: str


@dataclass(frozen=True)
class AssignmentStmt(Node):
    name: str
    op: str
    value: 'Expression'


@dataclass(frozen=True)
class FunctionCall(Node):
    """A call; used both as a statement and as an expression."""
    name: str
    args: List['Expression']

    @property
    def arity(self) -> int:
        return len(self.args)


@dataclass(frozen=True)
class FunctionDef(Node):
    return_type: TypeSpec
    name: str
    params: List[ParamDecl]
    body: List['Statement']
    return_expr: 'Expression'

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(frozen=True)
class PrintStmt(Node):
    expr: Optional['Expression']


@dataclass(frozen=True)
class IfStmt(Node):
    condition: 'Expression'
    then_block: List['Statement']
    else_block: Optional[List['Statement']]


@dataclass(frozen=True)
class WhileStmt(Node):
    condition: 'Expression'
    body: List['Statement']


@dataclass(frozen=True)
class BreakStmt(Node):
    pass


@dataclass(frozen=True)
class BinaryExpr(Node):
    op: str
    left: 'Expression'
    right: 'Expression'


@dataclass(frozen=True)
class UnaryExpr(Node):
    op: str
    operand: 'Expression'


@dataclass(frozen=True)
class BinaryCond(Node):
    op: str
    left: 'Expression'
    right: 'Expression'


@dataclass(frozen=True)
class UnaryCond(Node):
    op: str
    operand: 'Expression'


@dataclass(frozen=True)
class Literal(Node):
    value: Value


@dataclass(frozen=True)
class Identifier(Node):
    name: str


Statement = Union[
    VariableDecl, AssignmentStmt, FunctionCall, FunctionDef,
    PrintStmt, IfStmt, WhileStmt, BreakStmt,
]
Expression = Union[
    BinaryExpr, UnaryExpr, BinaryCond, UnaryCond,
    FunctionCall, Literal, Identifier,
]
