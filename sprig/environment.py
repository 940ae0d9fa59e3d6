from types import MappingProxyType
from typing import Dict, Mapping, Optional

from sprig.errors import ErrorType, ExecutionError
from sprig.types import VarVal


class Environment:
    """Variable bindings visible to one function invocation.

    Globals belong to the whole execution and are only ever read; locals
    belong to a single invocation and are the only names assignment can
    bind. Lookup checks globals first, so a global shadows a local of the
    same name.
    """
    def __init__(self, globals_: Mapping[str, VarVal], locals_: Optional[Dict[str, VarVal]] = None):
        self.globals = globals_ if isinstance(globals_, MappingProxyType) else MappingProxyType(globals_)
        self.locals: Dict[str, VarVal] = locals_ if locals_ is not None else {}

    def get(self, name: str, position: int = 0) -> VarVal:
        if name in self.globals:
            return self.globals[name]
        if name in self.locals:
            return self.locals[name]
        raise ExecutionError(ErrorType.UNDEFINED_VARIABLE, position, name)

    def assign(self, name: str, value: VarVal):
        self.locals[name] = value

    def for_call(self, bindings: Dict[str, VarVal]) -> 'Environment':
        """Environment for a callee: same globals, fresh locals."""
        return Environment(self.globals, bindings)
