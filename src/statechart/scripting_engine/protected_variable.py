import logging
from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Mapping
from typing import Any
from typing import Final
from typing import NoReturn
from typing import final
from typing_extensions import override

from statechart.scripting_engine.binding_errors import ProtectedVariableViolation

logger: Final = logging.getLogger(__name__)


def reject_write(name: str) -> NoReturn:
    """Shared guard for every attempt to modify a protected system variable."""
    logger.warning(f"Rejected attempt to modify protected system variable '{name}'")
    raise ProtectedVariableViolation(name)


@final
class ProtectedVariable:
    """Read-only namespace slot that resolves its value on every read."""

    __slots__ = ("_getter", "_name")

    def __init__(self, name: str, getter: Callable[[], Any]) -> None:
        self._name: Final = str(name)
        self._getter: Final = getter

    @property
    def name(self) -> str:
        return self._name

    def read(self) -> Any:
        return self._getter()

    def write(self, value: Any) -> NoReturn:
        reject_write(self._name)

    def delete(self) -> NoReturn:
        reject_write(self._name)

    def __repr__(self) -> str:
        return f"ProtectedVariable({self._name!r})"


@final
class ReadOnlyMapping(Mapping[str, Any]):
    """Live, read-only view of an interpreter-owned mapping exposed as a system variable.

    Nested mappings are wrapped as well, so item assignment at any depth is rejected with
    the full path of the item, e.g. `_x['status']`.
    """

    __slots__ = ("_mapping", "_name")

    def __init__(self, name: str, mapping: Mapping[str, Any]) -> None:
        self._name: Final = str(name)
        self._mapping: Final = mapping

    @override
    def __getitem__(self, key: str) -> Any:
        value: Final = self._mapping[key]
        if isinstance(value, Mapping):
            return ReadOnlyMapping(self._item_path(key), value)  # pyright: ignore[reportUnknownArgumentType]
        return value

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    @override
    def __len__(self) -> int:
        return len(self._mapping)

    def __setitem__(self, key: str, value: Any) -> NoReturn:
        reject_write(self._item_path(key))

    def __delitem__(self, key: str) -> NoReturn:
        reject_write(self._item_path(key))

    def _item_path(self, key: object) -> str:
        return f"{self._name}[{key!r}]"

    def __repr__(self) -> str:
        return f"ReadOnlyMapping({self._name!r}, {dict(self._mapping)!r})"
