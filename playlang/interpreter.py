"""Tree-walking interpreter for the playlang language.

The interpreter walks the syntax tree depth-first. Every node is validated
first (see `playlang.validator`) and only executed when the `execute` flag
of the current `Context` is on. The flag is switched off for code that must
be checked but not run: the branch of an if statement that is not taken,
function bodies at definition time, and whole programs in validate-only
mode.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import List, Optional, TextIO, Union

from .ast import (
    AssignmentStmt, BinaryCond, BinaryExpr, BreakStmt, FunctionCall, FunctionDef,
    Identifier, IfStmt, Literal, Node, ParamDecl, PrintStmt, Program,
    UnaryCond, UnaryExpr, VariableDecl, WhileStmt,
)
from .environment import Declaration, ScopeManager
from .errors import GrammarError, PlaylangError, ResourceExhaustionFault
from .parser import parse_program
from .types import Value, apply_assignment, apply_binary, apply_unary, format_value
from .validator import LoopState, Validator


MAX_ITERATIONS = 10000
MAX_CALL_DEPTH = 128
HOST_FRAMES_PER_CALL = 40


@dataclass(frozen=True)
class Context:
    """Walk state threaded through the recursive calls.

    execute  -- run the code after validating it
    loop     -- innermost enclosing while loop, if any
    printing -- print statements may append to the output (script mode)
    """
    execute: bool = True
    loop: Optional[LoopState] = None
    printing: bool = True


class Interpreter:
    """Validates and executes playlang syntax trees."""
    def __init__(self, script_mode: bool = False, max_iterations: int = MAX_ITERATIONS,
                 max_call_depth: int = MAX_CALL_DEPTH, debug_level: int = 0,
                 debug_file: Union[str, TextIO, None] = None):
        self.scopes = ScopeManager()
        self.validator = Validator(self.scopes)
        self.output: List[str] = []
        self.script_mode = script_mode
        self.max_iterations = max_iterations
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.debug_level = debug_level
        self.debug_fp = None
        self.owns_debug_fp = False
        if debug_file and debug_level > 0:
            if isinstance(debug_file, str):
                self.debug_fp = open(debug_file, 'w', encoding='utf-8')
                self.owns_debug_fp = True
            else:
                # an open stream stays open for its owner
                self.debug_fp = debug_file

    def debug(self, level: int, msg: str):
        if self.debug_level >= level:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    # Public API
    def run(self, program: Program) -> List[str]:
        """Validate and execute a program, returning the printed lines."""
        self.walk_program(program, execute=True)
        return self.output

    def validate(self, program: Program):
        """Validate a program without executing any of it."""
        self.walk_program(program, execute=False)

    def walk_program(self, program: Program, execute: bool):
        self.output = []
        self.call_depth = 0
        self.scopes.functions.clear()
        last = len(program.statements) - 1
        # every playlang call takes several host frames
        host_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(host_limit, self.max_call_depth * HOST_FRAMES_PER_CALL))
        try:
            with self.scopes.scope():
                for i, stmt in enumerate(program.statements):
                    # in script mode only the last statement may print
                    ctx = Context(execute=execute, printing=not self.script_mode or i == last)
                    self.debug(1, f"statement {type(stmt).__name__} at {list(stmt.span)}")
                    self.execute(stmt, ctx, is_last=i == last)
        except RecursionError:
            raise ResourceExhaustionFault('call stack of the host exhausted', program.span) from None
        finally:
            sys.setrecursionlimit(host_limit)
            if self.debug_fp and self.owns_debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, statements: List[Node], ctx: Context):
        last = len(statements) - 1
        for i, stmt in enumerate(statements):
            self.execute(stmt, ctx, is_last=i == last)

    @staticmethod
    def ends_in_break(statements: Optional[List[Node]]) -> bool:
        return bool(statements) and isinstance(statements[-1], BreakStmt)

    def execute(self, node: Node, ctx: Context, is_last: bool = True):
        if isinstance(node, VariableDecl):
            self.validator.check_declaration(node)
            self.scopes.ensure_undeclared(node.name, node.span)
            value = None
            if ctx.execute and node.init is not None:
                value = self.evaluate(node.init, ctx)
            decl = self.scopes.declare(Declaration(node.name, node.type_spec, value), node.span)
            if ctx.execute:
                self.debug(2, f"declare {node.name}: {node.type_spec!r} = {format_value(decl.current_value)}")
            return
        if isinstance(node, ParamDecl):
            self.scopes.declare(Declaration(node.name, node.type_spec), node.span)
            return
        if isinstance(node, AssignmentStmt):
            decl = self.validator.check_assignment(node)
            if ctx.execute:
                value = self.evaluate(node.value, ctx)
                decl.current_value = self._located(node, apply_assignment, node.op, decl.current_value, value)
                self.debug(2, f"assign {node.name} {node.op} {format_value(decl.current_value)}")
            return
        if isinstance(node, FunctionCall):
            self.validator.check_call(node)
            if ctx.execute:
                self.call_function(node, ctx)
            return
        if isinstance(node, FunctionDef):
            self.define_function(node, ctx)
            return
        if isinstance(node, PrintStmt):
            self.validator.check_print(node)
            if ctx.execute and ctx.printing:
                text = format_value(self.evaluate(node.expr, ctx)) if node.expr is not None else ''
                self.output.append(text)
            return
        if isinstance(node, IfStmt):
            self.execute_if(node, ctx)
            return
        if isinstance(node, WhileStmt):
            self.execute_while(node, ctx)
            return
        if isinstance(node, BreakStmt):
            self.validator.check_break(node, ctx.loop, is_last)
            if ctx.execute:
                ctx.loop.pending_breaks += 1
            return
        raise GrammarError(f"unexpected statement <{type(node).__name__}>", node.span)

    def define_function(self, node: FunctionDef, ctx: Context):
        self.validator.register_function(node)
        with self.scopes.call_frame():
            for param in node.params:
                self.execute(param, ctx)
            # bodies only run when called
            self.execute_block(node.body, Context(execute=False, printing=ctx.printing))
            self.validator.check_return(node)
        self.debug(2, f"define function {node.name}/{node.arity}")

    def execute_if(self, node: IfStmt, ctx: Context):
        self.validator.check_condition(node.condition)
        live = None
        if ctx.execute:
            taken = self.evaluate(node.condition, ctx)
            self.debug(3, f"if condition -> {format_value(taken)}")
            live = node.then_block if taken else node.else_block
        for block in (node.then_block, node.else_block):
            if block is not None and block is not live:
                self._execute_branch(block, replace(ctx, execute=False))
        if live is not None:
            self._execute_branch(live, ctx)
        # a break in one branch is held; only an if/else breaking on both sides ends the pass
        if self.ends_in_break(node.then_block) and self.ends_in_break(node.else_block):
            self.validator.consume_break(ctx.loop)

    def _execute_branch(self, block: List[Node], ctx: Context):
        with self.scopes.scope():
            self.execute_block(block, ctx)

    def execute_while(self, node: WhileStmt, ctx: Context):
        self.validator.check_condition(node.condition)
        loop = LoopState()
        body_ctx = replace(ctx, loop=loop)
        with self.scopes.scope():
            self.execute_block(node.body, replace(body_ctx, execute=False))
        if not ctx.execute:
            return
        iterations = 0
        while self.evaluate(node.condition, ctx):
            if loop.pending_breaks > 0:
                loop.pending_breaks -= 1
                self.debug(3, 'while loop left by break')
                break
            iterations += 1
            if iterations > self.max_iterations:
                raise ResourceExhaustionFault(
                    f"while loop exceeded {self.max_iterations} iterations", node.span)
            self.debug(3, f"while iteration {iterations}")
            loop.budget = 1
            with self.scopes.scope():
                self.execute_block(node.body, body_ctx)

    def call_function(self, node: FunctionCall, ctx: Context) -> Value:
        sig = self.scopes.resolve_function(node.name, node.arity, node.span)
        args = [self.evaluate(arg, ctx) for arg in node.args]
        if self.call_depth >= self.max_call_depth:
            raise ResourceExhaustionFault(
                f"call depth of {self.max_call_depth} exceeded calling <{node.name}>", node.span)
        func = sig.node
        self.debug(3, f"call {node.name}({', '.join(format_value(a) for a in args)})")
        self.call_depth += 1
        try:
            with self.scopes.call_frame():
                for param, value in zip(func.params, args):
                    self.scopes.declare(Declaration(param.name, param.type_spec, value), param.span)
                body_ctx = Context(execute=True, printing=ctx.printing)
                self.execute_block(func.body, body_ctx)
                self.validator.check_return(func)
                return self.evaluate(func.return_expr, body_ctx)
        finally:
            self.call_depth -= 1

    def evaluate(self, node: Node, ctx: Context) -> Value:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Identifier):
            return self.scopes.lookup(node.name, node.span).current_value
        if isinstance(node, (BinaryExpr, BinaryCond)):
            left = self.evaluate(node.left, ctx)
            right = self.evaluate(node.right, ctx)
            return self._located(node, apply_binary, node.op, left, right)
        if isinstance(node, (UnaryExpr, UnaryCond)):
            operand = self.evaluate(node.operand, ctx)
            return self._located(node, apply_unary, node.op, operand)
        if isinstance(node, FunctionCall):
            return self.call_function(node, ctx)
        raise GrammarError(f"node <{type(node).__name__}> has no value", node.span)

    @staticmethod
    def _located(node: Node, fn, *args) -> Value:
        try:
            return fn(*args)
        except PlaylangError as err:
            if err.location != (0, 0):
                raise
            raise type(err)(err.message, node.span) from None


def run_program(source: str, **options) -> List[str]:
    """Convenience function to parse and run a playlang program from source."""
    program = parse_program(source)
    interpreter = Interpreter(**options)
    return interpreter.run(program)


def validate_program(program: Program):
    """Check a program's semantics without executing it."""
    Interpreter().validate(program)
