"""JSON serialization/deserialization for the Sprig AST.

This module converts between Sprig AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types and values, including expression positions.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Assign,
    BinaryOp,
    Block,
    Call,
    ExprStmt,
    Function,
    If,
    Opcode,
    Program,
    Value,
    Var,
    Variable,
)
from .types import DataType, VarVal


def varval_to_obj(v: VarVal) -> Dict[str, Any]:
    return {"data_type": v.data_type.value, "value": v.value}


def varval_from_obj(o: Dict[str, Any]) -> VarVal:
    return VarVal(DataType(o["data_type"]), o.get("value"))


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Program):
        return {"type": "Program", "functions": [ast_to_obj(f) for f in node.functions.values()]}
    if isinstance(node, Function):
        return {
            "type": "Function",
            "name": node.name,
            "arguments": [ast_to_obj(a) for a in node.arguments],
            "return_type": node.return_type.value if node.return_type is not None else None,
            "block": ast_to_obj(node.block),
            "position": node.position,
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "ident": node.ident, "value": varval_to_obj(node.value)}
    if isinstance(node, Block):
        return {
            "type": "Block",
            "statements": [ast_to_obj(s) for s in node.statements],
            "expr": ast_to_obj(node.expr),
        }
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Assign):
        return {"type": "Assign", "ident": node.ident, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Var):
        return {"type": "Var", "name": node.name, "position": node.position}
    if isinstance(node, Value):
        return {"type": "Value", "value": varval_to_obj(node.value), "position": node.position}
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "left": ast_to_obj(node.left),
            "op": node.op.value,
            "right": ast_to_obj(node.right),
            "position": node.position,
        }
    if isinstance(node, Call):
        return {
            "type": "Call",
            "name": node.name,
            "args": [ast_to_obj(a) for a in node.args],
            "position": node.position,
        }
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "if_block": ast_to_obj(node.if_block),
            "else_branch": ast_to_obj(node.else_branch),
            "position": node.position,
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        program = Program()
        for f in obj["functions"]:
            function = ast_from_obj(f)
            if function.name in program.functions:
                raise ValueError(f"Duplicate function: {function.name}")
            program.functions[function.name] = function
        return program
    if t == "Function":
        return_type = obj.get("return_type")
        return Function(
            name=obj["name"],
            arguments=tuple(ast_from_obj(a) for a in obj["arguments"]),
            block=ast_from_obj(obj["block"]),
            return_type=DataType(return_type) if return_type is not None else None,
            position=obj.get("position", 0),
        )
    if t == "Variable":
        return Variable(ident=obj["ident"], value=varval_from_obj(obj["value"]))
    if t == "Block":
        return Block(
            statements=tuple(ast_from_obj(s) for s in obj["statements"]),
            expr=ast_from_obj(obj["expr"]),
        )
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "Assign":
        return Assign(ident=obj["ident"], expr=ast_from_obj(obj["expr"]))
    if t == "Var":
        return Var(name=obj["name"], position=obj.get("position", 0))
    if t == "Value":
        return Value(value=varval_from_obj(obj["value"]), position=obj.get("position", 0))
    if t == "BinaryOp":
        return BinaryOp(
            left=ast_from_obj(obj["left"]),
            op=Opcode(obj["op"]),
            right=ast_from_obj(obj["right"]),
            position=obj.get("position", 0),
        )
    if t == "Call":
        return Call(
            name=obj["name"],
            args=tuple(ast_from_obj(a) for a in obj["args"]),
            position=obj.get("position", 0),
        )
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            if_block=ast_from_obj(obj["if_block"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
            position=obj.get("position", 0),
        )

    raise ValueError(f"Unknown AST node type: {t}")
