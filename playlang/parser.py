"""Parser for the playlang language.

The source is scanned and parsed in one go by a Lark LALR parser built
from `PLAYLANG_GRAMMAR`. The parse tree is then transformed into the
syntax tree of `playlang.ast` by `ASTBuilder`, which also records the
``[start, end)`` source offsets of every node.

A few quirks of the surface language are handled here rather than in the
validator:

* binary conditions in value position must be parenthesised, and
  parentheses never group arithmetic;
* ``x++;`` and ``x--;`` are rewritten to ``x = x++`` so they behave like
  any other assignment;
* a minus sign directly before a number literal is folded into a negative
  literal.

Lark errors are translated into `LexicalError` and `ParseError` so callers
only ever see playlang errors.
"""

from __future__ import annotations

from typing import List, Tuple

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken, VisitError

from .ast import (
    AssignmentStmt, BinaryCond, BinaryExpr, BreakStmt, FunctionCall, FunctionDef,
    Identifier, IfStmt, Literal, Node, ParamDecl, PrintStmt, Program,
    UnaryCond, UnaryExpr, VariableDecl, WhileStmt,
)
from .errors import LexicalError, ParseError, PlaylangError
from .types import parse_literal, type_from_name


PLAYLANG_GRAMMAR = r"""
    start: statement*

    // Statements
    ?statement: inner_statement
              | func_def

    ?inner_statement: var_decl
                    | assignment
                    | incdec
                    | call_stmt
                    | print_stmt
                    | if_stmt
                    | while_stmt
                    | break_stmt

    var_decl: type_name NAME ["=" value] ";"
    assignment: NAME assign_op value ";"
    incdec: NAME incdec_op ";"
    call_stmt: call ";"
    !print_stmt: "print" "(" [value] ")" ";"
    if_stmt: "if" "(" header ")" block ["else" block]
    while_stmt: "while" "(" header ")" block
    !break_stmt: "break" ";"

    func_def: "def" type_name NAME "(" [params] ")" "{" inner_statement* "return" value ";" "}"
    params: param ("," param)*
    param: type_name NAME

    block: "{" inner_statement* "}"
    header: side [cond_op side]

    // Values: a binary condition needs parentheses unless it is an if/while header
    ?value: expr | cond
    ?side: expr | cond
    cond: "(" side cond_op side ")"
        | "!" not_operand                -> not_cond
    ?not_operand: atom | cond

    ?expr: term
         | expr add_op term              -> binary_expr
    ?term: factor
         | term mul_op factor            -> binary_expr
    ?factor: atom
           | "-" factor                  -> negate
    ?atom: NUMBER_LIT                    -> number
         | STRING_LIT                    -> string
         | bool_lit
         | call
         | NAME                          -> var
    call: NAME "(" [args] ")"
    args: value ("," value)*

    !type_name: "number" | "string" | "boolean"
    !bool_lit: "true" | "false"
    !add_op: "+" | "-"
    !mul_op: "*" | "/" | "%"
    !cond_op: "==" | "!=" | ">" | ">=" | "<" | "<=" | "&&" | "||"
    !assign_op: "=" | "+=" | "-=" | "*=" | "/=" | "%="
    !incdec_op: "++" | "--"

    // Tokens
    NAME: /[a-z_]+[0-9]*/
    NUMBER_LIT: /\d+(\.\d+)?/
    STRING_LIT: /'[A-Za-z0-9 _,.();:\/+\-*!?=%\t\r\n\f]*'/

    %import common.WS
    %ignore WS

    // Comments
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""


PLAYLANG_PARSER = Lark(
    PLAYLANG_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=True,
    lexer='basic',
)


def _span(meta) -> Tuple[int, int]:
    if meta.empty:
        return (0, 0)
    return (meta.start_pos, meta.end_pos)


def _token_span(token: Token) -> Tuple[int, int]:
    return (token.start_pos, token.end_pos)


@v_args(meta=True)
class ASTBuilder(Transformer):
    """Transforms the raw parse tree into a playlang syntax tree."""

    def start(self, meta, items):
        return Program(list(items), span=_span(meta))

    def var_decl(self, meta, items):
        type_spec, name, init = items
        return VariableDecl(type_spec, str(name), init, span=_span(meta))

    def assignment(self, meta, items):
        name, op, value = items
        return AssignmentStmt(str(name), op, value, span=_span(meta))

    def incdec(self, meta, items):
        # x++ is shorthand for x = x++
        name, op = items
        target = Identifier(str(name), span=_token_span(name))
        value = UnaryExpr(op, target, span=_span(meta))
        return AssignmentStmt(str(name), '=', value, span=_span(meta))

    def call_stmt(self, meta, items):
        return items[0]

    def print_stmt(self, meta, items):
        expr = next((item for item in items if isinstance(item, Node)), None)
        return PrintStmt(expr, span=_span(meta))

    def if_stmt(self, meta, items):
        condition, then_block, else_block = items
        return IfStmt(condition, then_block, else_block, span=_span(meta))

    def while_stmt(self, meta, items):
        condition, body = items
        return WhileStmt(condition, body, span=_span(meta))

    def break_stmt(self, meta, items):
        return BreakStmt(span=_span(meta))

    def func_def(self, meta, items):
        return_type, name, params = items[0], items[1], items[2]
        body = list(items[3:-1])
        return FunctionDef(return_type, str(name), params or [], body, items[-1], span=_span(meta))

    def params(self, meta, items):
        return list(items)

    def param(self, meta, items):
        type_spec, name = items
        return ParamDecl(type_spec, str(name), span=_span(meta))

    def block(self, meta, items):
        return list(items)

    def header(self, meta, items):
        left, op, right = items
        if op is None:
            return left
        return BinaryCond(op, left, right, span=_span(meta))

    # Values
    def cond(self, meta, items):
        left, op, right = items
        return BinaryCond(op, left, right, span=_span(meta))

    def not_cond(self, meta, items):
        return UnaryCond('!', items[0], span=_span(meta))

    def binary_expr(self, meta, items):
        left, op, right = items
        return BinaryExpr(op, left, right, span=_span(meta))

    def negate(self, meta, items):
        operand = items[0]
        if isinstance(operand, Literal) and isinstance(operand.value, float):
            return Literal(-operand.value, span=_span(meta))
        return UnaryExpr('-', operand, span=_span(meta))

    def number(self, meta, items):
        return Literal(parse_literal(str(items[0])), span=_span(meta))

    def string(self, meta, items):
        return Literal(parse_literal(str(items[0])), span=_span(meta))

    def bool_lit(self, meta, items):
        return Literal(items[0] == 'true', span=_span(meta))

    def var(self, meta, items):
        return Identifier(str(items[0]), span=_span(meta))

    def call(self, meta, items):
        name, args = items
        return FunctionCall(str(name), args or [], span=_span(meta))

    def args(self, meta, items):
        return list(items)

    def type_name(self, meta, items):
        return type_from_name(str(items[0]))

    def _operator(self, meta, items):
        return str(items[0])

    add_op = mul_op = cond_op = assign_op = incdec_op = _operator


def tokenize(source: str) -> List[Token]:
    """Scan source code into its token stream, skipping whitespace and comments."""
    try:
        return list(PLAYLANG_PARSER.lex(source))
    except UnexpectedCharacters as err:
        raise _lexical_error(source, err) from None


def parse_program(source: str) -> Program:
    """Parse playlang source code into a `Program` syntax tree.

    Raises `LexicalError` for text no token matches and `ParseError` for a
    token stream the grammar rejects.
    """
    try:
        tree = PLAYLANG_PARSER.parse(source)
    except UnexpectedCharacters as err:
        raise _lexical_error(source, err) from None
    except UnexpectedToken as err:
        token = err.token
        start = token.start_pos if token.start_pos is not None else len(source)
        end = token.end_pos if token.end_pos is not None else start
        found = 'end of input' if token.type == '$END' else f"<{token}>"
        raise ParseError(f"unexpected {found}, expected one of {sorted(err.expected)}", (start, end)) from None
    except UnexpectedEOF:
        raise ParseError('unexpected end of input', (len(source), len(source))) from None
    try:
        return ASTBuilder().transform(tree)
    except VisitError as err:
        if isinstance(err.orig_exc, PlaylangError):
            raise err.orig_exc from None
        raise


def _lexical_error(source: str, err: UnexpectedCharacters) -> LexicalError:
    pos = err.pos_in_stream
    return LexicalError(f"no token matches {source[pos]!r}", (pos, pos + 1))
