"""Type definitions and helpers for playlang.

This module defines the static type lattice used by the validator and the
runtime value helpers used by the interpreter. Runtime values are plain
Python objects: numbers are ``float``, booleans are ``bool`` and strings are
``str`` (stored without their delimiting quotes). Literal text is parsed
exactly once, when the syntax tree is built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
import math
import re

from .errors import ArithmeticFault, OperatorMismatchError, TypeMismatchError


Value = Union[float, bool, str]


@dataclass(frozen=True)
class TypeSpec:
    """Represents a playlang type.

    The `kind` is the source keyword of the type (``number``, ``boolean`` or
    ``string``). The extra kind ``var`` marks an identifier whose type is
    not known until it has been looked up in scope.
    """
    kind: str

    def __repr__(self) -> str:
        return self.kind

    @staticmethod
    def numeric() -> 'TypeSpec':
        return TypeSpec('number')

    @staticmethod
    def boolean() -> 'TypeSpec':
        return TypeSpec('boolean')

    @staticmethod
    def string() -> 'TypeSpec':
        return TypeSpec('string')

    @staticmethod
    def unresolved() -> 'TypeSpec':
        return TypeSpec('var')


NUMERIC = TypeSpec.numeric()
BOOLEAN = TypeSpec.boolean()
STRING = TypeSpec.string()
UNRESOLVED = TypeSpec.unresolved()

DECLARABLE_TYPES = {t.kind: t for t in (NUMERIC, BOOLEAN, STRING)}

STRING_PATTERN = re.compile(r"'[A-Za-z0-9 _,.();:/+\-*!?=%\t\r\n\f]*'")
NUMBER_PATTERN = re.compile(r"-?[0-9]\d*(\.\d+)?")
BOOLEAN_PATTERN = re.compile(r"true|false")
IDENTIFIER_PATTERN = re.compile(r"[a-z_]+[0-9]*")


def type_from_name(name: str) -> TypeSpec:
    """Return the type named by a source type keyword."""
    try:
        return DECLARABLE_TYPES[name]
    except KeyError:
        raise TypeMismatchError(f"unknown type <{name}>") from None


def classify(text: str) -> TypeSpec:
    """Classify the text of a literal or identifier token.

    Quoted text restricted to the safe character class is STRING, signed
    decimal text is NUMERIC, ``true``/``false`` is BOOLEAN, and any other
    identifier-shaped text is UNRESOLVED and has to be looked up in scope.
    """
    if STRING_PATTERN.fullmatch(text):
        return STRING
    if NUMBER_PATTERN.fullmatch(text):
        return NUMERIC
    if BOOLEAN_PATTERN.fullmatch(text):
        return BOOLEAN
    if IDENTIFIER_PATTERN.fullmatch(text):
        return UNRESOLVED
    raise TypeMismatchError(f"unknown type for <{text}>")


def parse_literal(text: str) -> Value:
    """Convert literal text into its runtime value."""
    kind = classify(text)
    if kind == STRING:
        return text[1:-1]
    if kind == NUMERIC:
        return float(text)
    if kind == BOOLEAN:
        return text == 'true'
    raise TypeMismatchError(f"<{text}> is not a literal")


def type_of(value: Value) -> TypeSpec:
    """Return the playlang type of a runtime value."""
    # bool is checked first as it is a subclass of int
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, float):
        return NUMERIC
    if isinstance(value, str):
        return STRING
    raise TypeMismatchError(f"no playlang type for {type(value).__name__}")


def default_value(type_spec: TypeSpec) -> Value:
    """Value held by a declaration that was never assigned."""
    if type_spec == NUMERIC:
        return 0.0
    if type_spec == BOOLEAN:
        return False
    if type_spec == STRING:
        return ''
    raise TypeMismatchError(f"type <{type_spec}> has no default value")


def format_value(value: Value) -> str:
    """Convert a value to the text shown by print.

    Integral numbers are shown without a decimal point, booleans as
    ``true``/``false`` and strings without quotes.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return value


def _number(value: Value, op: str) -> float:
    if isinstance(value, bool) or not isinstance(value, float):
        raise OperatorMismatchError(f"operator <{op}> expects number operands, got <{format_value(value)}>")
    return value


def _checked(result: float, op: str) -> float:
    if not math.isfinite(result):
        raise ArithmeticFault(f"operation <{op}> resulted in an invalid numeric value")
    return result


def apply_binary(op: str, a: Value, b: Value) -> Value:
    """Apply an arithmetic, relational or logical operator to two values."""
    if op == '+':
        if isinstance(a, str) or isinstance(b, str):
            return format_value(a) + format_value(b)
        return _checked(_number(a, op) + _number(b, op), op)
    if op == '-':
        return _checked(_number(a, op) - _number(b, op), op)
    if op == '*':
        return _checked(_number(a, op) * _number(b, op), op)
    if op == '/':
        divisor = _number(b, op)
        if divisor == 0.0:
            raise ArithmeticFault('division by zero')
        return _checked(_number(a, op) / divisor, op)
    if op == '%':
        divisor = _number(b, op)
        if divisor == 0.0:
            raise ArithmeticFault('modulo by zero')
        return _checked(math.fmod(_number(a, op), divisor), op)
    if op == '==':
        return type_of(a) == type_of(b) and a == b
    if op == '!=':
        return not (type_of(a) == type_of(b) and a == b)
    if op == '&&':
        return _boolean(a, op) and _boolean(b, op)
    if op == '||':
        return _boolean(a, op) or _boolean(b, op)
    if op == '>':
        return _number(a, op) > _number(b, op)
    if op == '>=':
        return _number(a, op) >= _number(b, op)
    if op == '<':
        return _number(a, op) < _number(b, op)
    if op == '<=':
        return _number(a, op) <= _number(b, op)
    raise OperatorMismatchError(f"unknown operator <{op}>")


def _boolean(value: Value, op: str) -> bool:
    if not isinstance(value, bool):
        raise OperatorMismatchError(f"operator <{op}> expects boolean operands, got <{format_value(value)}>")
    return value


def apply_unary(op: str, value: Value) -> Value:
    """Apply a unary operator to a value."""
    if op == '!':
        return not _boolean(value, op)
    if op == '-':
        return -_number(value, op)
    if op == '++':
        return _checked(_number(value, op) + 1.0, op)
    if op == '--':
        return _checked(_number(value, op) - 1.0, op)
    raise OperatorMismatchError(f"unknown unary operator <{op}>")


def apply_assignment(op: str, current: Value, value: Value) -> Value:
    """Combine the current value of a variable with an assigned value."""
    if op == '=':
        return value
    if op == '+=' and isinstance(current, str):
        return current + format_value(value)
    if op in ('+=', '-=', '*=', '/=', '%='):
        return apply_binary(op[0], current, value)
    raise OperatorMismatchError(f"unknown assignment operator <{op}>")
