import logging
from collections.abc import Mapping
from typing import Any
from typing import Final
from typing import Optional
from typing import final
from typing_extensions import override
from uuid import uuid4

from statechart.config import Config
from statechart.scripting_engine.state_configuration import StateConfiguration
from statechart.scripting_engine.types.context_provider import ContextProvider
from statechart.scripting_engine.types.event import EventRecord

logger: Final = logging.getLogger(__name__)


def new_session_id(config: Optional[Config] = None) -> str:
    session_id: Final = str(uuid4())
    if config is None or config.session_id_prefix is None:
        return session_id
    return f"{config.session_id_prefix}-{session_id}"


@final
class SystemContext(ContextProvider):
    """Context provider owned by a single interpreter session.

    The interpreter mutates this object between script evaluations (dispatching events,
    registering I/O processors, entering and exiting states). Scripts never see it directly.
    """

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        session_id: Optional[str] = None,
        state_configuration: Optional[StateConfiguration] = None,
        config: Optional[Config] = None,
    ) -> None:
        self._name: Final = name
        self._session_id: Final = session_id if session_id is not None else new_session_id(config)
        self._state_configuration: Final = (
            state_configuration if state_configuration is not None else StateConfiguration()
        )
        self._io_processors: Final[dict[str, Any]] = {}
        self._platform_variables: Final[dict[str, Any]] = {}
        self._event: Optional[EventRecord] = None
        self._next_session_sequence_id = 0

    @property
    @override
    def name(self) -> Optional[str]:
        return self._name

    @property
    @override
    def session_id(self) -> str:
        return self._session_id

    @property
    @override
    def io_processors(self) -> Mapping[str, Any]:
        return self._io_processors

    @property
    @override
    def event(self) -> Optional[EventRecord]:
        return self._event

    @property
    @override
    def extended_state(self) -> dict[str, Any]:
        # Platform variables are owned and updated by the interpreter.
        return self._platform_variables

    @property
    def state_configuration(self) -> StateConfiguration:
        return self._state_configuration

    @override
    def is_in_state(self, state_id: str) -> bool:
        return self._state_configuration.is_in_state(state_id)

    def dispatch_event(self, event: EventRecord) -> None:
        logger.debug(f"Session {self._session_id}: current event is now '{event.name}'")
        self._event = event

    def clear_event(self) -> None:
        self._event = None

    def register_io_processor(self, name: str, descriptor: Any) -> None:
        self._io_processors[name] = descriptor

    def unregister_io_processor(self, name: str) -> None:
        self._io_processors.pop(name, None)

    def generate_session_id(self) -> str:
        """Return a new id for a child session, derived from this session's id."""
        session_id: Final = f"{self._session_id}-{self._next_session_sequence_id}"
        self._next_session_sequence_id += 1
        return session_id
