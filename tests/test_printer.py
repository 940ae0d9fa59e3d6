import pytest

from sprig.ast import BinaryOp, Opcode, Value
from sprig.parser import parse
from sprig.printer import format_expr, format_program, format_value
from sprig.types import VarVal


@pytest.mark.parametrize('number', range(1, 10))
def test_examples_reparse_to_same_tree(example_source, number):
    program = parse(example_source(f'program_{number}.sprig'))
    assert parse(format_program(program)) == program


def test_redundant_parentheses_are_dropped():
    expr = parse('fn main() { ((1 + 2)) * (3 * 4) - (5 - 6) }').functions['main'].block.expr
    assert format_expr(expr) == '(1 + 2) * (3 * 4) - (5 - 6)'


def test_right_nested_operator_keeps_parentheses():
    expr = BinaryOp(Value(VarVal.i32(10)), Opcode.SUB,
                    BinaryOp(Value(VarVal.i32(4)), Opcode.SUB, Value(VarVal.i32(3))))
    assert format_expr(expr) == '10 - (4 - 3)'


def test_function_layout():
    program = parse('fn f(a: i32, b: bool) => i32 { x = a; if b { x } else { 0 } }')
    assert format_program(program) == (
        'fn f(a: i32, b: bool) => i32 {\n'
        '    x = a;\n'
        '    if b {\n'
        '        x\n'
        '    } else {\n'
        '        0\n'
        '    }\n'
        '}\n'
    )


@pytest.mark.parametrize('value', [VarVal.unit(), VarVal.i32(-1), VarVal.string('say "hi"')])
def test_values_without_source_form(value):
    with pytest.raises(ValueError):
        format_value(value)
