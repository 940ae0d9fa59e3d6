"""Tree-walking evaluator for Sprig programs.

Execution starts at the user function `main`, called with no arguments.
The evaluator threads an `Environment` through the tree: the globals
supplied by the host are shared by every invocation and never written,
while each user function call gets fresh locals that only its own
assignment statements can change. There are no closures; a callee never
sees its caller's locals.

Calls resolve natives first, then user functions. Arguments are always
evaluated left to right before the call is dispatched, and both operands
of a binary operator are always evaluated (`&&` and `||` do not short
circuit).

Recursion is bounded only by the Python stack unless `max_call_depth` is
given; deep recursion in a Sprig program surfaces as `RecursionError`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .ast import Assign, BinaryOp, Block, Call, ExprStmt, Function, If, Node, Program, Value, Var
from .environment import Environment
from .errors import ErrorType, ExecutionError
from .natives import Native, standard_natives
from .operators import apply_binary_op
from .parser import parse
from .types import ArgList, DataType, VarVal


class Interpreter:
    """Core interpreter that executes a Sprig AST.

    `natives` defaults to the standard table (`print`); pass an empty
    mapping to run without any. When `debug_level` is above zero, trace
    lines are written to `debug_file`: level 1 traces calls, level 2 adds
    assignments and level 3 adds conditions and operator results.
    """
    def __init__(self, natives: Optional[Mapping[str, Native]] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', max_call_depth: Optional[int] = None):
        self.natives = dict(standard_natives() if natives is None else natives)
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.max_call_depth = max_call_depth
        self.depth = 0
        self.program: Optional[Program] = None

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write('  ' * self.depth + msg + '\n')
            self.debug_fp.flush()

    # Public API
    def execute(self, program: Program, globals_: Optional[Mapping[str, Any]] = None) -> VarVal:
        """Run `main` and return its value."""
        self.program = program
        self.depth = 0
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            main = program.functions.get('main')
            if main is None:
                raise ExecutionError(ErrorType.NO_MAIN, 0)
            env = Environment(self.convert_globals(globals_ or {}))
            return self.call_function(main, ArgList(), env)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    @staticmethod
    def convert_globals(globals_: Mapping[str, Any]) -> Dict[str, VarVal]:
        """Wrap host globals as values; absent placeholders are rejected."""
        converted = {}
        for name, value in globals_.items():
            value = VarVal.from_python(value)
            if value.is_absent:
                raise ValueError(f"global {name} has no value")
            converted[name] = value
        return converted

    def call_function(self, function: Function, args: ArgList, env: Environment) -> VarVal:
        if len(args) != len(function.arguments):
            raise ExecutionError(ErrorType.WRONG_NUMBER_OF_ARGUMENTS, function.position, function.name)
        if self.max_call_depth is not None and self.depth >= self.max_call_depth:
            raise ExecutionError(ErrorType.CALL_DEPTH_EXCEEDED, function.position, function.name)
        bindings = {param.ident: arg for param, arg in zip(function.arguments, args)}
        if self.debug_level >= 1:
            self.debug(f"call {function.name}({', '.join(f'{k}={v!r}' for k, v in bindings.items())})")
        self.depth += 1
        try:
            result = self.eval_block(function.block, env.for_call(bindings))
        finally:
            self.depth -= 1
        if self.debug_level >= 1:
            self.debug(f"return {function.name} -> {result!r}")
        return result

    def eval_block(self, block: Block, env: Environment) -> VarVal:
        for stmt in block.statements:
            if isinstance(stmt, Assign):
                value = self.evaluate(stmt.expr, env)
                env.assign(stmt.ident, value)
                if self.debug_level >= 2:
                    self.debug(f"assign {stmt.ident} = {value!r}")
            elif isinstance(stmt, ExprStmt):
                self.evaluate(stmt.expr, env)
            else:
                raise NotImplementedError(f"eval_block: unexpected statement {type(stmt).__name__}")
        return self.evaluate(block.expr, env)

    def evaluate(self, node: Node, env: Environment) -> VarVal:
        if isinstance(node, Value):
            return node.value
        if isinstance(node, Var):
            return env.get(node.name, node.position)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            result = apply_binary_op(node.op, left, right, node.position)
            if self.debug_level >= 3:
                self.debug(f"{left!r} {node.op.value} {right!r} -> {result!r}")
            return result
        if isinstance(node, Call):
            return self.eval_call(node, env)
        if isinstance(node, If):
            return self.eval_if(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def eval_call(self, node: Call, env: Environment) -> VarVal:
        args = ArgList([self.evaluate(arg, env) for arg in node.args])
        native = self.natives.get(node.name)
        if native is not None:
            if self.debug_level >= 1:
                self.debug(f"native {node.name}{tuple(args.args)!r}")
            return VarVal.from_python(native(args))
        function = self.program.functions.get(node.name)
        if function is None:
            raise ExecutionError(ErrorType.UNDEFINED_FUNCTION, node.position, node.name)
        return self.call_function(function, args, env)

    def eval_if(self, node: If, env: Environment) -> VarVal:
        condition = self.evaluate(node.condition, env)
        if condition.data_type is not DataType.BOOL or condition.is_absent:
            raise ExecutionError(ErrorType.BOOLEAN_EXPECTED, node.position)
        if self.debug_level >= 3:
            self.debug(f"if condition -> {condition.value}")
        if condition.value:
            return self.eval_block(node.if_block, env)
        if node.else_branch is None:
            return VarVal.unit()
        if isinstance(node.else_branch, If):
            return self.eval_if(node.else_branch, env)
        return self.eval_block(node.else_branch, env)


def execute(program: Program, globals_: Optional[Mapping[str, Any]] = None,
            natives: Optional[Mapping[str, Native]] = None) -> VarVal:
    """Run `program` against host globals and a host native table."""
    return Interpreter(natives={} if natives is None else natives).execute(program, globals_)


def run_program(source: str, natives: Optional[Mapping[str, Native]] = None,
                globals_: Optional[Mapping[str, Any]] = None, debug_level: int = 0) -> VarVal:
    """Convenience function to parse and run a Sprig program from source."""
    program = parse(source)
    interpreter = Interpreter(natives=natives, debug_level=debug_level)
    return interpreter.execute(program, globals_)


def run_file(file_path: str, natives: Optional[Mapping[str, Native]] = None, debug_level: int = 0) -> VarVal:
    """Parse and run a Sprig source file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, natives=natives, debug_level=debug_level)
