"""Semantic rules for playlang.

The `Validator` holds every static rule of the language: type inference,
declaration and assignment rules, function definition and call rules, and
the legality of break statements. It does not walk the tree itself; the
interpreter calls into it for each node before (and whether or not) that
node is executed, so no unchecked code can ever run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ast import (
    AssignmentStmt, BinaryCond, BinaryExpr, BreakStmt, FunctionCall, FunctionDef,
    Identifier, Literal, LOGICAL_OPS, Node, PrintStmt, RELATIONAL_OPS,
    UnaryCond, UnaryExpr, VariableDecl,
)
from .environment import Declaration, FunctionSignature, ScopeManager
from .errors import GrammarError, OperatorMismatchError, TypeMismatchError
from .types import BOOLEAN, NUMERIC, STRING, TypeSpec, type_of


@dataclass
class LoopState:
    """Bookkeeping for the innermost enclosing while loop.

    `budget` is the number of breaks the current pass over the loop body
    may still contain; it is reset to one for every pass. `pending_breaks`
    counts executed breaks not yet consumed by the loop.
    """
    budget: int = 1
    pending_breaks: int = 0


class Validator:
    """Static rules of the language, evaluated against a scope manager."""
    def __init__(self, scopes: ScopeManager):
        self.scopes = scopes

    # Type inference

    def infer_type(self, node: Node) -> TypeSpec:
        if node is None:
            raise GrammarError('operand must never be null')
        if isinstance(node, Literal):
            return type_of(node.value)
        if isinstance(node, Identifier):
            return self.scopes.lookup(node.name, node.span).declared_type
        if isinstance(node, BinaryExpr):
            return self._infer_binary_expr(node)
        if isinstance(node, BinaryCond):
            return self._infer_binary_cond(node)
        if isinstance(node, UnaryExpr):
            operand = self.infer_type(node.operand)
            if node.op == '!':
                expected = BOOLEAN
            else:
                expected = NUMERIC
            if operand != expected:
                raise OperatorMismatchError(
                    f"unary operator <{node.op}> may not be used with <{operand!r}> operand", node.span)
            return operand
        if isinstance(node, UnaryCond):
            operand = self.infer_type(node.operand)
            if operand != BOOLEAN:
                raise TypeMismatchError(
                    f"operand of <{node.op}> must be <boolean>, got <{operand!r}>", node.span)
            return BOOLEAN
        if isinstance(node, FunctionCall):
            return self.check_call(node).return_type
        raise GrammarError(f"node <{type(node).__name__}> has no type", node.span)

    def _infer_binary_expr(self, node: BinaryExpr) -> TypeSpec:
        left = self.infer_type(node.left)
        right = self.infer_type(node.right)
        if left == STRING or right == STRING:
            if node.op != '+':
                raise OperatorMismatchError(
                    f"operator <{node.op}> may not be used with <string> operands", node.span)
            return STRING
        if left != right:
            raise TypeMismatchError(
                f"types <{left!r}> and <{right!r}> of expression do not match", node.span)
        if left == BOOLEAN:
            raise TypeMismatchError(
                f"operator <{node.op}> may not be used with <boolean> operands", node.span)
        return left

    def _infer_binary_cond(self, node: BinaryCond) -> TypeSpec:
        left = self.infer_type(node.left)
        right = self.infer_type(node.right)
        if left != right:
            raise TypeMismatchError(
                f"types <{left!r}> and <{right!r}> of condition do not match", node.span)
        if node.op in RELATIONAL_OPS and left != NUMERIC:
            raise OperatorMismatchError(
                f"operator <{node.op}> must not be used for non-numeric operands", node.span)
        if node.op in LOGICAL_OPS and left != BOOLEAN:
            raise OperatorMismatchError(
                f"operator <{node.op}> must not be used for non-boolean operands", node.span)
        return BOOLEAN

    # Statement rules

    def check_condition(self, node: Node):
        kind = self.infer_type(node)
        if kind != BOOLEAN:
            raise TypeMismatchError(f"condition of type <{kind!r}> is not valid", node.span)

    def check_declaration(self, node: VariableDecl):
        if node.init is None:
            return
        effective = self.infer_type(node.init)
        if effective != node.type_spec:
            raise TypeMismatchError(
                f"type of variable <{node.name}> is <{node.type_spec!r}> and cannot hold a <{effective!r}> value",
                node.span)

    def check_assignment(self, node: AssignmentStmt) -> Declaration:
        decl = self.scopes.lookup(node.name, node.span)
        expected = decl.declared_type
        effective = self.infer_type(node.value)
        if node.op == '=':
            if effective != expected:
                raise TypeMismatchError(
                    f"type of variable <{node.name}> is <{expected!r}> and cannot be assigned a <{effective!r}> value",
                    node.span)
        elif node.op == '+=' and expected == STRING:
            pass  # concatenation accepts any operand type
        elif expected != NUMERIC or effective != NUMERIC:
            raise TypeMismatchError(
                f"type of variable <{node.name}> does not allow operator <{node.op}> with a <{effective!r}> value",
                node.span)
        return decl

    def check_call(self, node: FunctionCall) -> FunctionSignature:
        sig = self.scopes.resolve_function(node.name, node.arity, node.span)
        for arg, expected in zip(node.args, sig.param_types):
            effective = self.infer_type(arg)
            if effective != expected:
                raise TypeMismatchError(
                    f"function parameters do not match with function <{sig!r}>", node.span)
        return sig

    def register_function(self, node: FunctionDef) -> FunctionSignature:
        sig = FunctionSignature(
            node.name, node.return_type, tuple(p.type_spec for p in node.params), node)
        return self.scopes.declare_function(sig, node.span)

    def check_return(self, node: FunctionDef):
        effective = self.infer_type(node.return_expr)
        if effective != node.return_type:
            raise TypeMismatchError(
                f"return type <{effective!r}> of function <{node.name}> does not match defined type <{node.return_type!r}>",
                node.span)

    def check_print(self, node: PrintStmt):
        if node.expr is not None:
            self.infer_type(node.expr)

    # Break legality

    def check_break(self, node: BreakStmt, loop: Optional[LoopState], is_last: bool):
        """A break needs an enclosing loop with budget left and must end its statement list."""
        if loop is None:
            raise GrammarError('misplaced break statement, no enclosing loop may be terminated here', node.span)
        if loop.budget <= 0:
            # an if/else above already left the loop on both branches
            raise GrammarError('unreachable code, the loop was already terminated by a preceding break', node.span)
        if not is_last:
            raise GrammarError('unreachable code, break statement must be the last statement of its block', node.span)

    @staticmethod
    def consume_break(loop: Optional[LoopState]):
        if loop is not None and loop.budget > 0:
            loop.budget -= 1
