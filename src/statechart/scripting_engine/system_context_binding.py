"""Installs the SCXML system variables into a script namespace.

Scripts get read-only access to `_name`, `_sessionid`, `_ioprocessors`, `_event`, `_x` and the
`In()` predicate. Every read is resolved against the context provider at the time of the read,
so scripts always observe the interpreter's current state.
"""

import logging
from collections.abc import Callable
from typing import Any
from typing import Final
from typing import Optional
from typing import final

from statechart.scripting_engine.binding_errors import DuplicateBindingError
from statechart.scripting_engine.binding_errors import InvalidPredicateArgument
from statechart.scripting_engine.protected_variable import ProtectedVariable
from statechart.scripting_engine.protected_variable import ReadOnlyMapping
from statechart.scripting_engine.script_namespace import ScriptNamespace
from statechart.scripting_engine.system_variables import SystemVariable
from statechart.scripting_engine.types.context_provider import ContextProvider
from statechart.scripting_engine.types.event import EventRecord
from statechart.scripting_engine.types.event_snapshot import EventSnapshot

logger: Final = logging.getLogger(__name__)


@final
class SystemContextBinding:
    def __init__(self, context_provider: ContextProvider) -> None:
        self._context_provider: Final = context_provider
        self._snapshot_source: Optional[EventRecord] = None
        self._snapshot: Optional[EventSnapshot] = None

    @property
    def context_provider(self) -> ContextProvider:
        return self._context_provider

    def install(self, namespace: ScriptNamespace) -> None:
        getters: Final[dict[SystemVariable, Callable[[], Any]]] = {
            SystemVariable.NAME: lambda: self._context_provider.name,
            SystemVariable.SESSION_ID: lambda: self._context_provider.session_id,
            SystemVariable.IO_PROCESSORS: lambda: ReadOnlyMapping(
                SystemVariable.IO_PROCESSORS, self._context_provider.io_processors
            ),
            SystemVariable.EVENT: self.current_event,
            SystemVariable.EXTENDED_STATE: lambda: ReadOnlyMapping(
                SystemVariable.EXTENDED_STATE, self._context_provider.extended_state
            ),
            SystemVariable.IN: lambda: self.in_state,
        }
        for variable in getters:
            if variable in namespace:
                raise DuplicateBindingError(variable)
        for variable, getter in getters.items():
            namespace.define_accessor(variable, ProtectedVariable(variable, getter))
        logger.debug(f"Installed system variables for session {self._context_provider.session_id}")

    def current_event(self) -> Optional[EventSnapshot]:
        event: Final = self._context_provider.event
        if event is None:
            self._snapshot_source = None
            self._snapshot = None
            return None
        if self._snapshot is not None and self._snapshot_source is event:
            return self._snapshot
        self._snapshot = EventSnapshot.from_event(event)
        self._snapshot_source = event
        logger.debug(f"Materialized snapshot for event '{event.name}'")
        return self._snapshot

    def in_state(self, state_id: Any) -> bool:
        """The `In()` predicate: whether `state_id` is part of the active configuration."""
        if not isinstance(state_id, str):
            raise InvalidPredicateArgument(SystemVariable.IN, state_id)
        return bool(self._context_provider.is_in_state(state_id))


def install(namespace: ScriptNamespace, context_provider: ContextProvider) -> SystemContextBinding:
    binding: Final = SystemContextBinding(context_provider)
    binding.install(namespace)
    return binding
