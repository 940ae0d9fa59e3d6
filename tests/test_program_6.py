from sprig.interpreter import Interpreter
from sprig.parser import parse


def test_program_6_fibonacci(capsys, example_source):
    ast = parse(example_source('program_6.sprig'))
    Interpreter().execute(ast)
    out = capsys.readouterr().out.strip()
    assert out == '610'
