from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from typing import Any
from typing import Optional

from statechart.scripting_engine.types.event import EventRecord


class ContextProvider(ABC):
    """The interpreter-owned source of truth behind the system variables visible to scripts."""

    @property
    @abstractmethod
    def name(self) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def session_id(self) -> str:
        pass

    @property
    @abstractmethod
    def io_processors(self) -> Mapping[str, Any]:
        pass

    @property
    @abstractmethod
    def event(self) -> Optional[EventRecord]:
        pass

    @property
    @abstractmethod
    def extended_state(self) -> Mapping[str, Any]:
        pass

    @abstractmethod
    def is_in_state(self, state_id: str) -> bool:
        pass
