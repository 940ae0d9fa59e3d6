"""Render a Sprig AST back to source text.

The output re-parses to a structurally equal tree. Binary operands are
parenthesised only where precedence or left associativity requires it,
and `if` expressions used as operands are always parenthesised for
readability. Values the grammar cannot spell (negative integers, unit,
absent values) raise `ValueError`.
"""

from __future__ import annotations

from typing import List

from .ast import Assign, BinaryOp, Block, Call, ExprStmt, Function, If, Node, Program, Value, Var
from .types import DataType, VarVal

INDENT = '    '


def format_value(value: VarVal) -> str:
    if value.is_absent or value.data_type is DataType.UNIT:
        raise ValueError(f'{value!r} has no source form')
    if value.data_type is DataType.BOOL:
        return 'true' if value.value else 'false'
    if value.data_type is DataType.STRING:
        if '"' in value.value:
            raise ValueError('string literals cannot contain a double quote')
        return f'"{value.value}"'
    if value.value < 0:
        raise ValueError('negative integer literals have no source form')
    return str(value.value)


def _operand(node: Node, parent: BinaryOp, right: bool, depth: int) -> str:
    text = format_expr(node, depth)
    if isinstance(node, If):
        return f'({text})'
    if isinstance(node, BinaryOp):
        if node.op.precedence < parent.op.precedence or (right and node.op.precedence == parent.op.precedence):
            return f'({text})'
    return text


def format_expr(node: Node, depth: int = 0) -> str:
    if isinstance(node, Value):
        return format_value(node.value)
    if isinstance(node, Var):
        return node.name
    if isinstance(node, BinaryOp):
        left = _operand(node.left, node, False, depth)
        right = _operand(node.right, node, True, depth)
        return f'{left} {node.op.value} {right}'
    if isinstance(node, Call):
        return f"{node.name}({', '.join(format_expr(arg, depth) for arg in node.args)})"
    if isinstance(node, If):
        text = f'if {format_expr(node.condition, depth)} {format_block(node.if_block, depth)}'
        if isinstance(node.else_branch, If):
            text += f' else {format_expr(node.else_branch, depth)}'
        elif node.else_branch is not None:
            text += f' else {format_block(node.else_branch, depth)}'
        return text
    raise TypeError(f'cannot format {type(node).__name__}')


def format_block(block: Block, depth: int = 0) -> str:
    """Format a block including its braces; `depth` is the enclosing indent level."""
    inner = INDENT * (depth + 1)
    lines: List[str] = ['{']
    for stmt in block.statements:
        if isinstance(stmt, Assign):
            lines.append(f'{inner}{stmt.ident} = {format_expr(stmt.expr, depth + 1)};')
        elif isinstance(stmt, ExprStmt):
            lines.append(f'{inner}{format_expr(stmt.expr, depth + 1)};')
        else:
            raise TypeError(f'cannot format {type(stmt).__name__}')
    lines.append(f'{inner}{format_expr(block.expr, depth + 1)}')
    lines.append(INDENT * depth + '}')
    return '\n'.join(lines)


def format_function(function: Function) -> str:
    params = ', '.join(f'{p.ident}: {p.value.data_type.value}' for p in function.arguments)
    header = f'fn {function.name}({params})'
    if function.return_type is not None:
        header += f' => {function.return_type.value}'
    return f'{header} {format_block(function.block)}'


def format_program(program: Program) -> str:
    return '\n\n'.join(format_function(f) for f in program.functions.values()) + '\n'
