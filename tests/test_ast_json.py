import json

from playlang.ast_json import ast_from_obj, ast_to_obj
from playlang.interpreter import Interpreter
from playlang.parser import parse_program


SOURCE = """
def string describe(number n) {
    string s = 'n is ';
    if (n >= 0) {
        s += n;
    } else {
        s += 'negative';
    }
    return s;
}
number i = -1;
while (true) {
    print(describe(i));
    i++;
    if (!(i < 2)) {
        break;
    }
}
"""


def test_json_round_trip_keeps_tree_and_spans():
    program = parse_program(SOURCE)
    data = json.loads(json.dumps(ast_to_obj(program)))
    restored = ast_from_obj(data)
    assert restored == program
    assert restored.statements[1].span == program.statements[1].span
    assert restored.statements[1].init.value == -1.0


def test_restored_tree_runs():
    data = json.loads(json.dumps(ast_to_obj(parse_program(SOURCE))))
    output = Interpreter().run(ast_from_obj(data))
    assert output == ['n is negative', 'n is 0', 'n is 1']


def test_node_layout():
    obj = ast_to_obj(parse_program('number x = 1;'))
    decl = obj['statements'][0]
    assert decl['type'] == 'VariableDecl'
    assert decl['type_spec'] == {'__type__': 'TypeSpec', 'value': {'kind': 'number'}}
    assert decl['init']['value'] == 1.0
    assert decl['span'][0] == 0
