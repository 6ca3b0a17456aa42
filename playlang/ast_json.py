"""JSON serialization/deserialization for the playlang syntax tree.

This module converts between playlang AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, `TypeSpec` and the source spans of nodes.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    VariableDecl,
    ParamDecl,
    AssignmentStmt,
    FunctionCall,
    FunctionDef,
    PrintStmt,
    IfStmt,
    WhileStmt,
    BreakStmt,
    BinaryExpr,
    UnaryExpr,
    BinaryCond,
    UnaryCond,
    Literal,
    Identifier,
)
from .types import TypeSpec


def typespec_to_obj(t: TypeSpec) -> Dict[str, Any]:
    return {"kind": t.kind}


def typespec_from_obj(o: Dict[str, Any]) -> TypeSpec:
    return TypeSpec(o["kind"])


def _node(type_name: str, node: Any, **fields: Any) -> Dict[str, Any]:
    return {"type": type_name, "span": list(node.span), **fields}


def _span(obj: Dict[str, Any]):
    start, end = obj.get("span", (0, 0))
    return (start, end)


def _block(block):
    if block is None:
        return None
    return [ast_to_obj(s) for s in block]


def _block_from(items):
    if items is None:
        return None
    return [ast_from_obj(s) for s in items]


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (float, str, bool)):
        return node

    # TypeSpec
    if isinstance(node, TypeSpec):
        return {"__type__": "TypeSpec", "value": typespec_to_obj(node)}

    # Node types
    if isinstance(node, Program):
        return _node("Program", node, statements=_block(node.statements))
    if isinstance(node, VariableDecl):
        return _node(
            "VariableDecl", node,
            type_spec=ast_to_obj(node.type_spec),
            name=node.name,
            init=ast_to_obj(node.init),
        )
    if isinstance(node, ParamDecl):
        return _node("ParamDecl", node, type_spec=ast_to_obj(node.type_spec), name=node.name)
    if isinstance(node, AssignmentStmt):
        return _node("AssignmentStmt", node, name=node.name, op=node.op, value=ast_to_obj(node.value))
    if isinstance(node, FunctionCall):
        return _node("FunctionCall", node, name=node.name, args=[ast_to_obj(a) for a in node.args])
    if isinstance(node, FunctionDef):
        return _node(
            "FunctionDef", node,
            return_type=ast_to_obj(node.return_type),
            name=node.name,
            params=[ast_to_obj(p) for p in node.params],
            body=_block(node.body),
            return_expr=ast_to_obj(node.return_expr),
        )
    if isinstance(node, PrintStmt):
        return _node("PrintStmt", node, expr=ast_to_obj(node.expr))
    if isinstance(node, IfStmt):
        return _node(
            "IfStmt", node,
            condition=ast_to_obj(node.condition),
            then_block=_block(node.then_block),
            else_block=_block(node.else_block),
        )
    if isinstance(node, WhileStmt):
        return _node("WhileStmt", node, condition=ast_to_obj(node.condition), body=_block(node.body))
    if isinstance(node, BreakStmt):
        return _node("BreakStmt", node)
    if isinstance(node, BinaryExpr):
        return _node("BinaryExpr", node, op=node.op, left=ast_to_obj(node.left), right=ast_to_obj(node.right))
    if isinstance(node, UnaryExpr):
        return _node("UnaryExpr", node, op=node.op, operand=ast_to_obj(node.operand))
    if isinstance(node, BinaryCond):
        return _node("BinaryCond", node, op=node.op, left=ast_to_obj(node.left), right=ast_to_obj(node.right))
    if isinstance(node, UnaryCond):
        return _node("UnaryCond", node, op=node.op, operand=ast_to_obj(node.operand))
    if isinstance(node, Literal):
        return _node("Literal", node, value=ast_to_obj(node.value))
    if isinstance(node, Identifier):
        return _node("Identifier", node, name=node.name)

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (str, bool, float)):
        return obj
    if isinstance(obj, int):
        # JSON writers may drop the fraction of integral numbers
        return float(obj)
    if isinstance(obj, dict) and obj.get("__type__") == "TypeSpec":
        return typespec_from_obj(obj["value"])
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    span = _span(obj)
    if t == "Program":
        return Program(_block_from(obj["statements"]), span=span)
    if t == "VariableDecl":
        return VariableDecl(
            type_spec=ast_from_obj(obj["type_spec"]),
            name=obj["name"],
            init=ast_from_obj(obj.get("init")),
            span=span,
        )
    if t == "ParamDecl":
        return ParamDecl(type_spec=ast_from_obj(obj["type_spec"]), name=obj["name"], span=span)
    if t == "AssignmentStmt":
        return AssignmentStmt(name=obj["name"], op=obj["op"], value=ast_from_obj(obj["value"]), span=span)
    if t == "FunctionCall":
        return FunctionCall(name=obj["name"], args=[ast_from_obj(a) for a in obj["args"]], span=span)
    if t == "FunctionDef":
        return FunctionDef(
            return_type=ast_from_obj(obj["return_type"]),
            name=obj["name"],
            params=[ast_from_obj(p) for p in obj["params"]],
            body=_block_from(obj["body"]),
            return_expr=ast_from_obj(obj["return_expr"]),
            span=span,
        )
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj.get("expr")), span=span)
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_block=_block_from(obj["then_block"]),
            else_block=_block_from(obj.get("else_block")),
            span=span,
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=_block_from(obj["body"]), span=span)
    if t == "BreakStmt":
        return BreakStmt(span=span)
    if t == "BinaryExpr":
        return BinaryExpr(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), span=span)
    if t == "UnaryExpr":
        return UnaryExpr(op=obj["op"], operand=ast_from_obj(obj["operand"]), span=span)
    if t == "BinaryCond":
        return BinaryCond(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), span=span)
    if t == "UnaryCond":
        return UnaryCond(op=obj["op"], operand=ast_from_obj(obj["operand"]), span=span)
    if t == "Literal":
        return Literal(value=ast_from_obj(obj["value"]), span=span)
    if t == "Identifier":
        return Identifier(name=obj["name"], span=span)

    raise ValueError(f"Unknown AST node type: {t}")
