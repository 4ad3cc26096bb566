from collections.abc import Mapping
from collections.abc import Set
from types import MappingProxyType
from typing import Any
from typing import Optional
from typing import Self
from typing import final
from typing_extensions import override

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator

from statechart.scripting_engine.binding_errors import ProtectedVariableViolation
from statechart.scripting_engine.system_variables import SystemVariable
from statechart.scripting_engine.types.event import EventRecord


def _freeze(value: Any) -> Any:
    """Recursively replace mutable containers with read-only equivalents."""
    match value:
        case Mapping():
            return MappingProxyType({key: _freeze(item) for key, item in value.items()})
        case list() | tuple():
            return tuple(_freeze(item) for item in value)
        case Set():
            return frozenset(value)
        case bytearray():
            return bytes(value)
        case _:
            return value


def _absent_if_empty(value: Optional[str]) -> Optional[str]:
    return value if value else None


@final
class EventSnapshot(BaseModel):
    """Read-only view of the current event as seen by scripts via `_event`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Optional[str] = None
    type: Optional[str] = None
    sendid: Optional[str] = None
    origin: Optional[str] = None
    origintype: Optional[str] = None
    invokeid: Optional[str] = None
    data: Any = None

    @field_validator("data", mode="after")
    @classmethod
    def freeze_data(cls, value: Any) -> Any:
        return _freeze(value)

    @classmethod
    def from_event(cls, event: EventRecord) -> Self:
        return cls(
            name=_absent_if_empty(event.name),
            type=None if event.type is None else str(event.type),
            sendid=_absent_if_empty(event.send_id),
            origin=_absent_if_empty(event.origin),
            origintype=_absent_if_empty(event.origin_type),
            invokeid=_absent_if_empty(event.invoke_id),
            data=event.data,
        )

    @override
    def __setattr__(self, name: str, value: Any) -> None:
        raise ProtectedVariableViolation(f"{SystemVariable.EVENT}.{name}")

    @override
    def __delattr__(self, name: str) -> None:
        raise ProtectedVariableViolation(f"{SystemVariable.EVENT}.{name}")
