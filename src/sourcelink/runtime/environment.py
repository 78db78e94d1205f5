"""
Execution Environment

Lexical environments for the Source evaluator. Each function call and each
block gets a frame whose parent is the frame the code was written in, so
closures see the bindings of their defining scope.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..shared.errors import SourceLinkSourceError
from ..shared.source_location import SourceLocation

if TYPE_CHECKING:
    from ..shared.nodes import BlockStatement, Expression, Identifier


class SourceRuntimeError(SourceLinkSourceError):
    """Error raised while evaluating a Source program"""
    error_code = "E0600"
    category = "runtime"


class _Undefined:
    """JavaScript `undefined`"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(eq=False)
class FunctionValue:
    """First-class Source function (declaration or arrow) with its closure environment"""
    name: str
    params: List['Identifier']
    body: Any  # BlockStatement, or Expression for arrow functions with expression bodies
    closure_env: 'Environment'

    def __repr__(self) -> str:
        return f"<function {self.name}>"


@dataclass
class _Binding:
    value: Any
    constant: bool


@dataclass(eq=False)
class Environment:
    """
    One lexical frame.
    - define(name, value, constant): new binding in this frame
    - lookup(name): walk frames outward
    - assign(name, value): update the nearest binding; const bindings are immutable
    """
    parent: Optional['Environment'] = None
    name: str = "block"
    _bindings: Dict[str, _Binding] = field(default_factory=dict)

    def child(self, name: str = "block") -> 'Environment':
        return Environment(parent=self, name=name)

    def define(self, name: str, value: Any, constant: bool = True,
               location: Optional[SourceLocation] = None) -> None:
        if name in self._bindings:
            raise SourceRuntimeError(f"Name {name} declared twice in the same scope", location)
        self._bindings[name] = _Binding(value=value, constant=constant)

    def lookup(self, name: str, location: Optional[SourceLocation] = None) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            binding = env._bindings.get(name)
            if binding is not None:
                return binding.value
            env = env.parent
        raise SourceRuntimeError(f"Name {name} not declared.", location)

    def assign(self, name: str, value: Any, location: Optional[SourceLocation] = None) -> None:
        env: Optional[Environment] = self
        while env is not None:
            binding = env._bindings.get(name)
            if binding is not None:
                if binding.constant:
                    raise SourceRuntimeError(f"Cannot assign new value to constant {name}.", location)
                binding.value = value
                return
            env = env.parent
        raise SourceRuntimeError(f"Name {name} not declared.", location)

    def has_local(self, name: str) -> bool:
        return name in self._bindings

    def local_values(self) -> Dict[str, Any]:
        """Values bound directly in this frame, in declaration order"""
        return {name: binding.value for name, binding in self._bindings.items()}
