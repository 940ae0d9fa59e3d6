# Sprig language package
# This package provides a lexer, parser and interpreter for the Sprig language.
from .errors import ErrorType, ExecutionError, LexError, ParsingError
from .interpreter import Interpreter, execute, run_file, run_program
from .lexer import Lexer, tokenize
from .parser import parse
from .types import ArgList, DataType, VarVal

__all__ = [
    'parse',
    'execute',
    'run_program',
    'run_file',
    'tokenize',
    'Lexer',
    'Interpreter',
    'VarVal',
    'DataType',
    'ArgList',
    'ErrorType',
    'ExecutionError',
    'LexError',
    'ParsingError',
]
