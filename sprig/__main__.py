"""CLI entry point for the Sprig interpreter.

Usage:
    python -m sprig [-v|-vv|-vvv] <program_file>
    python -m sprig [-v...] --emit-ast <program_file>
    python -m sprig [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .sprig file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Programs run with the standard natives
(`print`); the value returned by `main` is printed unless it is unit.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_from_obj, ast_to_obj
from .errors import ExecutionError, ParsingError, line_col
from .interpreter import Interpreter
from .parser import parse
from .types import DataType, to_string


def _read(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _parse_or_exit(path: Path, source: str):
    try:
        return parse(source)
    except ParsingError as e:
        line, col = line_col(source, e.from_)
        print(f"{path}:{line}:{col}: Parse error: {e.description}", file=sys.stderr)
        sys.exit(1)


def _run(program, debug_level: int, source: Optional[str] = None) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        result = interpreter.execute(program)
    except ExecutionError as e:
        where = f" at {':'.join(map(str, line_col(source, e.position)))}" if source is not None else ''
        print(f"Runtime error: {e.message}{where}", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("Runtime error: maximum recursion depth exceeded", file=sys.stderr)
        sys.exit(1)
    if result.data_type is not DataType.UNIT:
        print(to_string(result))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='sprig', description="Sprig language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SPRIG_FILE', help='emit AST JSON for the given .sprig file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Sprig program file (.sprig) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = _parse_or_exit(program_file, _read(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            ast_program = ast_from_obj(json.loads(_read(ast_path)))
        except (ValueError, TypeError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        _run(ast_program, args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    program_file = Path(args.program)
    source = _read(program_file)
    _run(_parse_or_exit(program_file, source), args.v, source)


if __name__ == '__main__':
    main()
