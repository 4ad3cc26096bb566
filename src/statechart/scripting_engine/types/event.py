from enum import StrEnum
from typing import Any
from typing import Optional
from typing import final

from pydantic import BaseModel
from pydantic import ConfigDict


@final
class EventType(StrEnum):
    PLATFORM = "platform"
    INTERNAL = "internal"
    EXTERNAL = "external"


@final
class EventRecord(BaseModel):
    """An event as dispatched by the interpreter. A new record is created for every dispatch."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    type: Optional[EventType] = None
    send_id: Optional[str] = None
    origin: Optional[str] = None
    origin_type: Optional[str] = None
    invoke_id: Optional[str] = None
    data: Any = None
