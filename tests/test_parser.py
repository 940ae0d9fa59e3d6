import pytest

from sprig.ast import Assign, BinaryOp, Block, Call, ExprStmt, Function, If, Opcode, Value, Var, Variable
from sprig.errors import LexError, ParsingError
from sprig.parser import parse
from sprig.types import DataType, VarVal


def main_expr(body):
    return parse(f'fn main() {{ {body} }}').functions['main'].block.expr


def i32(n):
    return Value(VarVal.i32(n))


def test_minimal_program():
    program = parse('fn main() { 1 + 2 }')
    assert list(program.functions) == ['main']
    assert program.functions['main'] == Function(
        'main', (), Block((), BinaryOp(i32(1), Opcode.ADD, i32(2))),
    )


def test_empty_source_has_no_functions():
    assert parse('').functions == {}


def test_precedence():
    assert main_expr('1 + 2 * 3') == BinaryOp(i32(1), Opcode.ADD, BinaryOp(i32(2), Opcode.MUL, i32(3)))
    assert main_expr('a || b && c') == BinaryOp(
        Var('a'), Opcode.OR, BinaryOp(Var('b'), Opcode.AND, Var('c')))
    assert main_expr('1 < 2 == true') == BinaryOp(
        BinaryOp(i32(1), Opcode.LT, i32(2)), Opcode.EQ, Value(VarVal.boolean(True)))


def test_left_associativity():
    assert main_expr('10 - 4 - 3') == BinaryOp(BinaryOp(i32(10), Opcode.SUB, i32(4)), Opcode.SUB, i32(3))


def test_parentheses_group():
    assert main_expr('(1 + 2) * 3') == BinaryOp(BinaryOp(i32(1), Opcode.ADD, i32(2)), Opcode.MUL, i32(3))


def test_parameters_and_return_type():
    function = parse('fn f(a: i32, b: bool, c: String) => String { "x" }').functions['f']
    assert function.arguments == (
        Variable('a', VarVal.absent(DataType.I32)),
        Variable('b', VarVal.absent(DataType.BOOL)),
        Variable('c', VarVal.absent(DataType.STRING)),
    )
    assert function.return_type is DataType.STRING
    assert parse('fn g() { 1 }').functions['g'].return_type is None


def test_statements():
    block = parse('fn main() { x = 5; print(x); x }').functions['main'].block
    assert block.statements == (
        Assign('x', i32(5)),
        ExprStmt(Call('print', (Var('x'),))),
    )
    assert block.expr == Var('x')


def test_else_if_chain():
    expr = main_expr('if a { 1 } else if b { 2 } else { 3 }')
    assert expr == If(
        Var('a'), Block((), i32(1)),
        If(Var('b'), Block((), i32(2)), Block((), i32(3))),
    )
    assert main_expr('if a { 1 }').else_branch is None


def test_positions_are_byte_offsets():
    program = parse('fn main() { foo() }\nfn other() { 1 + x }')
    assert program.functions['main'].position == 0
    assert program.functions['main'].block.expr.position == 12
    add = program.functions['other'].block.expr
    assert add.position == 33
    assert add.right.position == 37


def test_unexpected_token():
    with pytest.raises(ParsingError) as excinfo:
        parse('fn main() { 1 + }')
    error = excinfo.value
    assert (error.from_, error.to) == (16, 17)
    assert error.description.startswith('unexpected token "}", expected ')
    assert 'identifier' in error.description


def test_unexpected_end_of_file():
    source = 'fn main() { 1'
    with pytest.raises(ParsingError) as excinfo:
        parse(source)
    assert excinfo.value.from_ == excinfo.value.to == len(source)
    assert excinfo.value.description.startswith('unexpected end of file, expecting ')


def test_block_must_end_with_expression():
    with pytest.raises(ParsingError) as excinfo:
        parse('fn main() { print(1); }')
    assert excinfo.value.description.startswith('unexpected token "}"')


def test_lex_errors_become_parsing_errors():
    with pytest.raises(ParsingError) as excinfo:
        parse('fn main() { 1 @ 2 }')
    assert (excinfo.value.from_, excinfo.value.to) == (14, 15)
    assert excinfo.value.description == 'Unexpected character @'
    assert isinstance(excinfo.value.__cause__, LexError)


def test_duplicate_function():
    with pytest.raises(ParsingError) as excinfo:
        parse('fn f() { 1 }\nfn f() { 2 }')
    assert (excinfo.value.from_, excinfo.value.to) == (16, 17)
    assert 'duplicate' in excinfo.value.description


def test_keyword_is_not_an_identifier():
    with pytest.raises(ParsingError):
        parse('fn if() { 1 }')
