from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any
from typing import Final
from typing import Optional
from typing import Protocol
from typing import final
from typing_extensions import override
from typing import runtime_checkable

from statechart.scripting_engine.binding_errors import DuplicateBindingError

BUILTINS_KEY: Final = "__builtins__"


@runtime_checkable
class Accessor(Protocol):
    def read(self) -> Any: ...

    def write(self, value: Any) -> None: ...

    def delete(self) -> None: ...


@final
class ScriptScope(dict[str, Any]):
    """Storage for the plain variables of a namespace.

    Compiled script code uses this dictionary as its globals, so that functions, lambdas and
    comprehensions defined by a script resolve the namespace's accessors before any stored value.
    """

    def __init__(self, accessors: Mapping[str, Accessor]) -> None:
        super().__init__()
        self._accessors: Final = accessors

    @override
    def __getitem__(self, key: str) -> Any:
        accessor: Final = self._accessors.get(key)
        if accessor is not None:
            return accessor.read()
        return super().__getitem__(key)


@final
class ScriptNamespace(MutableMapping[str, Any]):
    """The variables visible to script code.

    Plain variables behave like dictionary entries. Names defined through `define_accessor`
    are routed through their accessor on every read, write and delete, and cannot be
    redefined afterwards.
    """

    def __init__(self, variables: Optional[dict[str, Any]] = None) -> None:
        self._accessors: Final[dict[str, Accessor]] = {}
        self._variables: Final = ScriptScope(self._accessors)
        if variables is not None:
            self._variables.update(variables)

    @property
    def scope(self) -> ScriptScope:
        return self._variables

    def define_accessor(self, name: str, accessor: Accessor) -> None:
        if name in self._accessors or name in self._variables:
            raise DuplicateBindingError(name)
        self._accessors[name] = accessor

    def is_accessor(self, name: str) -> bool:
        return name in self._accessors

    @override
    def __getitem__(self, key: str) -> Any:
        accessor: Final = self._accessors.get(key)
        if accessor is not None:
            return accessor.read()
        return self._variables[key]

    @override
    def __setitem__(self, key: str, value: Any) -> None:
        accessor: Final = self._accessors.get(key)
        if accessor is not None:
            accessor.write(value)
            return
        self._variables[key] = value

    @override
    def __delitem__(self, key: str) -> None:
        accessor: Final = self._accessors.get(key)
        if accessor is not None:
            accessor.delete()
            return
        del self._variables[key]

    @override
    def __iter__(self) -> Iterator[str]:
        yield from self._accessors
        yield from (name for name in self._variables if self._is_plain_variable(name))

    @override
    def __len__(self) -> int:
        return len(self._accessors) + sum(1 for name in self._variables if self._is_plain_variable(name))

    @override
    def __contains__(self, key: object) -> bool:
        return key in self._accessors or key in self._variables

    def _is_plain_variable(self, name: str) -> bool:
        # The builtins entry is added by the evaluator. Entries written straight into the scope
        # under an accessor name are never visible.
        return name != BUILTINS_KEY and name not in self._accessors

    @override
    def clear(self) -> None:
        # Accessors are permanent, only plain variables are removed.
        self._variables.clear()
