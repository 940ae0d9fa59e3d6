"""Abstract Syntax Tree (AST) definitions for the Sprig language.

The parser builds these nodes and the interpreter walks them; neither
mutates a tree once it is built. Expression nodes record the byte offset
where they start in `position`, which is used for runtime error reports
and left out of equality so that trees parsed from differently formatted
sources still compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .types import DataType, VarVal


class Opcode(Enum):
    MUL = '*'
    DIV = '/'
    MOD = '%'
    ADD = '+'
    SUB = '-'
    EQ = '=='
    NE = '!='
    LT = '<'
    LE = '<='
    GT = '>'
    GE = '>='
    AND = '&&'
    OR = '||'

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]


_PRECEDENCE = {
    Opcode.OR: 1,
    Opcode.AND: 2,
    Opcode.EQ: 3, Opcode.NE: 3,
    Opcode.LT: 4, Opcode.LE: 4, Opcode.GT: 4, Opcode.GE: 4,
    Opcode.ADD: 5, Opcode.SUB: 5,
    Opcode.MUL: 6, Opcode.DIV: 6, Opcode.MOD: 6,
}


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Var(Node):
    name: str
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Value(Node):
    value: VarVal
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class BinaryOp(Node):
    left: 'Expr'
    op: Opcode
    right: 'Expr'
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple['Expr', ...]
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class If(Node):
    """`if` expression.

    `else_branch` is None when there is no else, a `Block` for a plain
    else, or another `If` for an `else if` chain.
    """
    condition: 'Expr'
    if_block: 'Block'
    else_branch: Optional[Union['Block', 'If']] = None
    position: int = field(default=0, compare=False)


Expr = Union[Var, Value, BinaryOp, Call, If]


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Expr


@dataclass(frozen=True)
class Assign(Node):
    ident: str
    expr: Expr


Stmt = Union[ExprStmt, Assign]


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Stmt, ...]
    expr: Expr


@dataclass(frozen=True)
class Variable(Node):
    """A declared parameter: its name and an absent value of its type."""
    ident: str
    value: VarVal


@dataclass(frozen=True)
class Function(Node):
    name: str
    arguments: Tuple[Variable, ...]
    block: Block
    return_type: Optional[DataType] = None
    position: int = field(default=0, compare=False)


@dataclass
class Program:
    functions: Dict[str, Function] = field(default_factory=dict)
