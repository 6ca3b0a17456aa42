import pytest

from playlang.errors import ArithmeticFault, OperatorMismatchError, TypeMismatchError
from playlang.types import (
    BOOLEAN, NUMERIC, STRING, UNRESOLVED,
    apply_assignment, apply_binary, apply_unary, classify, default_value,
    format_value, parse_literal, type_from_name,
)


def test_classify_literals():
    assert classify("'a1'") == STRING
    assert classify("''") == STRING
    assert classify('500') == NUMERIC
    assert classify('-5.5') == NUMERIC
    assert classify('true') == BOOLEAN
    assert classify('false') == BOOLEAN
    assert classify('count1') == UNRESOLVED


def test_classify_rejects_unknown_text():
    with pytest.raises(TypeMismatchError):
        classify('Count')
    with pytest.raises(TypeMismatchError):
        classify("'ä'")


def test_parse_literal_strips_quotes():
    assert parse_literal("'hi'") == 'hi'
    assert parse_literal('-12') == -12.0
    assert parse_literal('true') is True


def test_type_from_name():
    assert type_from_name('number') == NUMERIC
    with pytest.raises(TypeMismatchError):
        type_from_name('var')


def test_defaults_and_formatting():
    assert default_value(NUMERIC) == 0.0
    assert default_value(STRING) == ''
    assert default_value(BOOLEAN) is False
    assert format_value(3.0) == '3'
    assert format_value(-500.0) == '-500'
    assert format_value(3.5) == '3.5'
    assert format_value(True) == 'true'
    assert format_value('text') == 'text'


def test_concatenation_formats_the_other_operand():
    assert apply_binary('+', 'a', 1.0) == 'a1'
    assert apply_binary('+', 2.5, 'b') == '2.5b'
    assert apply_assignment('+=', 'x', True) == 'xtrue'


def test_boolean_equality_compares_both_operands():
    assert apply_binary('==', True, True) is True
    assert apply_binary('==', True, False) is False
    assert apply_binary('!=', False, True) is True
    assert apply_binary('==', 1.0, '1') is False


def test_arithmetic():
    assert apply_binary('%', 7.0, 3.0) == 1.0
    assert apply_binary('%', -7.0, 3.0) == -1.0
    assert apply_binary('/', 7.0, 2.0) == 3.5
    assert apply_unary('++', 1.0) == 2.0
    assert apply_unary('-', 4.0) == -4.0
    assert apply_unary('!', False) is True
    assert apply_assignment('*=', 3.0, 4.0) == 12.0


def test_arithmetic_faults():
    with pytest.raises(ArithmeticFault):
        apply_binary('/', 1.0, 0.0)
    with pytest.raises(ArithmeticFault):
        apply_binary('%', 1.0, 0.0)
    with pytest.raises(ArithmeticFault):
        apply_binary('*', 1e308, 10.0)


def test_operator_needs_matching_operands():
    with pytest.raises(OperatorMismatchError):
        apply_binary('-', 'a', 1.0)
    with pytest.raises(OperatorMismatchError):
        apply_binary('&&', True, 1.0)
