import pytest

from sprig.errors import ErrorType, ExecutionError
from sprig.interpreter import Interpreter, execute, run_file, run_program
from sprig.parser import parse
from sprig.types import DataType, VarVal


def run(source, **kwargs):
    return run_program(source, **kwargs)


def expect_error(source, error_type, **kwargs):
    with pytest.raises(ExecutionError) as excinfo:
        run(source, **kwargs)
    assert excinfo.value.error_type is error_type
    return excinfo.value


def test_main_value():
    assert run('fn main() { 1 + 2 }') == VarVal.i32(3)


def test_assignment_sequence():
    assert run('fn main() { x = 5; x = x + 1; x }') == VarVal.i32(6)


def test_if_expressions():
    assert run('fn main() { if true { 1 } else { 2 } }') == VarVal.i32(1)
    assert run('fn main() { if false { 1 } else if true { 2 } else { 3 } }') == VarVal.i32(2)
    assert run('fn main() { if false { 1 } }') == VarVal.unit()


def test_logical_operators():
    assert run('fn main() { true && false }') == VarVal.boolean(False)
    assert run('fn main() { false || true }') == VarVal.boolean(True)


def test_integer_division():
    assert run('fn main() { 7 / 2 }') == VarVal.i32(3)
    assert run('fn main() { 7 % 2 }') == VarVal.i32(1)


def test_recursion():
    source = '''
    fn sum(n: i32) => i32 { if n == 0 { 0 } else { n + sum(n - 1) } }
    fn main() { sum(100) }
    '''
    assert run(source) == VarVal.i32(5050)


def test_undefined_function():
    program = parse('fn main() { foo() }')
    with pytest.raises(ExecutionError) as excinfo:
        execute(program)
    assert excinfo.value.error_type is ErrorType.UNDEFINED_FUNCTION
    assert excinfo.value.name == 'foo'
    assert excinfo.value.position == 12


def test_undefined_variable():
    error = expect_error('fn main() { y }', ErrorType.UNDEFINED_VARIABLE)
    assert error.name == 'y'
    assert error.message == 'Undefined variable y'


def test_wrong_number_of_arguments():
    error = expect_error('fn f(a: i32, b: i32) { a }\nfn main() { f(1) }',
                         ErrorType.WRONG_NUMBER_OF_ARGUMENTS)
    assert error.name == 'f'


def test_invalid_operands_at_runtime():
    error = expect_error('fn main() { 1 == "1" }', ErrorType.INVALID_OPERANDS)
    assert error.position == 12


def test_overflow_at_runtime():
    error = expect_error('fn main() { 2147483647 + 1 }', ErrorType.INTEGER_OVERFLOW)
    assert error.position == 12
    expect_error('fn main() { 1 / 0 }', ErrorType.DIVISION_BY_ZERO)


def test_condition_must_be_boolean():
    error = expect_error('fn main() { x = 1; if x { 2 } }', ErrorType.BOOLEAN_EXPECTED)
    assert error.position == 19


def test_no_main():
    error = expect_error('fn helper() { 1 }', ErrorType.NO_MAIN)
    assert error.position == 0
    assert error.message == "Function main wasn't found"


def test_global_shadows_local():
    source = 'fn main() { x = 1; x }'
    assert run(source) == VarVal.i32(1)
    assert run(source, globals_={'x': 10}) == VarVal.i32(10)


def test_globals_visible_in_every_function():
    source = 'fn greet() { name }\nfn main() { greet() }'
    assert run(source, globals_={'name': 'sprig'}) == VarVal.string('sprig')


def test_locals_are_per_call():
    source = 'fn g() { x = 2; x }\nfn main() { x = 1; g(); x }'
    assert run(source) == VarVal.i32(1)


def test_natives_skip_arity_checks():
    natives = {'count': lambda args: len(args)}
    assert run('fn main() { count(1, true, "x") }', natives=natives) == VarVal.i32(3)
    assert run('fn main() { count() }', natives=natives) == VarVal.i32(0)


def test_natives_take_precedence_over_user_functions():
    natives = {'twice': lambda args: VarVal.i32(0)}
    source = 'fn twice(a: i32) { a * 2 }\nfn main() { twice(4) }'
    assert run(source, natives=natives) == VarVal.i32(0)
    assert run(source) == VarVal.i32(8)


def test_arguments_evaluated_left_to_right():
    seen = []

    def trace(args):
        value = args.args[0]
        seen.append(value.value)
        return value

    run('fn main() { trace(trace(1) + trace(2), trace(3)) }', natives={'trace': trace})
    assert seen == [1, 2, 3, 3]


def test_logical_operators_do_not_short_circuit():
    calls = []

    def boom(args):
        calls.append(args)
        return True

    assert run('fn main() { false && boom() }', natives={'boom': boom}) == VarVal.boolean(False)
    assert len(calls) == 1


def test_module_execute_has_no_natives_by_default():
    program = parse('fn main() { print(1) }')
    with pytest.raises(ExecutionError) as excinfo:
        execute(program)
    assert excinfo.value.name == 'print'


def test_print_native(capsys):
    result = run('fn main() { print("a", 1, true, " ", 2 < 1) }')
    assert result == VarVal.unit()
    assert capsys.readouterr().out == 'a1true false\n'


def test_max_call_depth():
    program = parse('fn down(n: i32) { down(n + 1) }\nfn main() { down(0) }')
    with pytest.raises(ExecutionError) as excinfo:
        Interpreter(natives={}, max_call_depth=50).execute(program)
    assert excinfo.value.error_type is ErrorType.CALL_DEPTH_EXCEEDED
    assert excinfo.value.name == 'down'


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    program = parse('fn id(v: i32) { v }\nfn main() { x = id(5); x < 6 }')
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    assert interp.execute(program) == VarVal.boolean(True)
    trace = debug_file.read_text(encoding='utf-8')
    assert 'call main()' in trace
    assert 'call id(v=VarVal(i32, 5))' in trace
    assert 'assign x = VarVal(i32, 5)' in trace
    assert 'VarVal(i32, 5) < VarVal(i32, 6) -> VarVal(bool, True)' in trace
    assert 'return main -> VarVal(bool, True)' in trace


def test_no_debug_file_without_debug_level(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    Interpreter(debug_file=str(debug_file)).execute(parse('fn main() { 1 }'))
    assert not debug_file.exists()


def test_run_file(tmp_path):
    path = tmp_path / 'answer.sprig'
    path.write_text('fn main() { 6 * 7 }', encoding='utf-8')
    assert run_file(str(path)) == VarVal.i32(42)


def test_absent_global_is_rejected():
    program = parse('fn main() { x }')
    with pytest.raises(ValueError):
        execute(program, {'x': VarVal.absent(DataType.I32)}, {})
