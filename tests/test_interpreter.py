import sys

import pytest

from playlang.errors import ArithmeticFault, GrammarError, ResourceExhaustionFault, TypeMismatchError
from playlang.interpreter import MAX_CALL_DEPTH, Interpreter, run_program
from playlang.parser import parse_program


def test_print_number():
    assert run_program('number x = 1; print(x);') == ['1']


def test_string_concatenation():
    assert run_program("string a = 'hi'; string b = a + '!'; print(b);") == ['hi!']


def test_function_call():
    assert run_program('def number fib(number n) { return n; } number y = fib(3); print(y);') == ['3']


def test_recursive_function():
    source = """
    def number fact(number n) {
        number result = 1;
        if (n > 1) {
            result = n * fact(n - 1);
        }
        return result;
    }
    print(fact(5));
    """
    assert run_program(source) == ['120']


def test_defaults():
    assert run_program('number x; string s; boolean b; print(x); print(s); print(b);') == ['0', '', 'false']


def test_empty_print():
    assert run_program('print();') == ['']


def test_numbers():
    assert run_program('print(7 / 2); print(7 % 3); print(-7 % 3); print(2 * 80 % 12);') == ['3.5', '1', '-1', '4']


def test_boolean_equality():
    source = 'boolean a = true; boolean b = false; print((a == b)); print((a != b)); print((a == !b));'
    assert run_program(source) == ['false', 'true', 'true']


def test_compound_assignment():
    source = "number x = 10; x -= 4; x *= 2; x /= 3; x %= 3; string s = 'n'; s += x; print(s);"
    assert run_program(source) == ['n1']


def test_increment_and_decrement():
    assert run_program('number x = 1; x++; x++; x--; print(x);') == ['2']


def test_if_else():
    source = "number x = 3; if (x > 2) { print('big'); } else { print('small'); }"
    assert run_program(source) == ['big']


def test_if_branch_scope_is_closed():
    source = "number x = 1; if (true) { number x = 2; print(x); } print(x);"
    assert run_program(source) == ['2', '1']


def test_while_loop():
    source = 'number i = 0; while (i < 3) { print(i); i++; }'
    assert run_program(source) == ['0', '1', '2']


def test_break_leaves_innermost_loop_only():
    source = """
    number i = 0;
    number total = 0;
    while (i < 3) {
        i++;
        number j = 0;
        while (true) {
            j++;
            if (j >= 2) {
                break;
            }
        }
        total += j;
    }
    print(total);
    """
    assert run_program(source) == ['6']


def test_break_from_if_else():
    source = 'number n = 0; while (true) { n++; if ((n > 2)) { break; } else { print(n); } }'
    assert run_program(source) == ['1', '2']


def test_one_sided_if_else_break_keeps_the_loop_open():
    source = 'number n = 0; while (true) { n++; if ((n > 5)) { break; } else { print(n); } break; }'
    assert run_program(source) == ['1']


def test_statements_after_held_break_finish_the_pass():
    source = 'number n = 0; while (true) { n++; if (n >= 2) { break; } print(n); }'
    assert run_program(source) == ['1', '2']


def test_function_sees_globals_not_caller_locals():
    source = """
    number g = 0;
    def number peek() { return g; }
    if (true) {
        number g = 7;
        print(peek());
    }
    g = 5;
    print(peek());
    """
    assert run_program(source) == ['0', '5']


def test_function_parameters_are_copies():
    source = 'number x = 1; def number bump(number x) { x++; return x; } print(bump(x)); print(x);'
    assert run_program(source) == ['2', '1']


def test_function_body_not_run_at_definition():
    assert run_program("def number fun() { print('inside'); return 1; }") == []


def test_call_statement_discards_result():
    source = "def number fun() { print('called'); return 1; } fun();"
    assert run_program(source) == ['called']


def test_misplaced_break():
    with pytest.raises(GrammarError):
        run_program('if (false) { break; }')


def test_unreachable_break():
    with pytest.raises(GrammarError):
        run_program('while (true) { if (false) { break; } else { break; } break; }')


@pytest.mark.parametrize('source', [
    'number x; x = 1/0;',
    'number x = 1/0;',
    'print(1/0);',
    'while(1/0 > 0) { }',
    'if(1/0 > 0) { }',
    'if(1/0 > 0) { } else {}',
    'def number fun() { return 1/0; } fun();',
    'number x = 5 % 0;',
])
def test_arithmetic_faults(source):
    with pytest.raises(ArithmeticFault):
        run_program(source)


def test_fault_location():
    with pytest.raises(ArithmeticFault) as info:
        run_program('number x; x = 1/0;')
    assert info.value.location[0] == 14


def test_dead_branch_is_validated():
    with pytest.raises(TypeMismatchError):
        run_program("number x = 1; if (true) { } else { x = 'a'; }")


def test_endless_loop():
    with pytest.raises(ResourceExhaustionFault):
        run_program('while (true) { }')


def test_iteration_ceiling_is_inclusive():
    assert run_program('number i = 0; while (i < 10000) { i++; } print(i);') == ['10000']


def test_iteration_ceiling_is_configurable():
    with pytest.raises(ResourceExhaustionFault):
        run_program('number i = 0; while (i < 10) { i++; }', max_iterations=5)


def test_endless_recursion():
    with pytest.raises(ResourceExhaustionFault):
        run_program('def number fun() { return fun(); } fun();')


COUNTDOWN = 'def number down(number n) { number r = 0; if (n > 0) { r = down(n - 1); } return r; }'


def test_recursion_up_to_the_call_depth():
    assert run_program(COUNTDOWN + f' print(down({MAX_CALL_DEPTH - 1}));') == ['0']


def test_recursion_past_the_call_depth_faults_at_the_call():
    source = COUNTDOWN + f' print(down({MAX_CALL_DEPTH}));'
    with pytest.raises(ResourceExhaustionFault) as info:
        run_program(source)
    assert 'call depth' in info.value.message
    assert info.value.location[0] == source.index('down(n - 1)')


def test_call_depth_is_configurable():
    limit = sys.getrecursionlimit()
    assert run_program(COUNTDOWN + ' print(down(299));', max_call_depth=300) == ['0']
    assert sys.getrecursionlimit() == limit


def test_output_kept_until_fault():
    interpreter = Interpreter()
    with pytest.raises(ArithmeticFault):
        interpreter.run(parse_program('print(1); print(2 / 0); print(3);'))
    assert interpreter.output == ['1']


def test_script_mode_prints_last_statement_only():
    program = parse_program("print(1); def number show(number n) { print(n); return n; } show(4);")
    assert Interpreter(script_mode=True).run(program) == ['4']
    assert Interpreter(script_mode=True).run(parse_program('print(1); number x = 2;')) == []


def test_interpreter_can_run_twice():
    interpreter = Interpreter()
    program = parse_program('def number one() { return 1; } print(one());')
    assert interpreter.run(program) == ['1']
    assert interpreter.run(program) == ['1']


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interpreter = Interpreter(debug_level=3, debug_file=str(debug_file))
    interpreter.run(parse_program('number i = 0; while (i < 2) { i++; }'))
    trace = debug_file.read_text(encoding='utf-8')
    assert 'statement VariableDecl' in trace
    assert 'while iteration 2' in trace
