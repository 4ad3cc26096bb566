from typing import Final
from typing import final


class StateConfigurationError(RuntimeError): ...


@final
class StateAlreadyActiveError(StateConfigurationError):
    def __init__(self, state_id: str) -> None:
        super().__init__(f"State '{state_id}' is already active.")


@final
class StateNotActiveError(StateConfigurationError):
    def __init__(self, state_id: str) -> None:
        super().__init__(f"State '{state_id}' is not active.")


@final
class StateConfiguration:
    """The set of states currently entered by the running state machine."""

    def __init__(self) -> None:
        self._active_states: Final[set[str]] = set()

    @property
    def active_states(self) -> frozenset[str]:
        return frozenset(self._active_states)

    def enter_state(self, state_id: str) -> None:
        if state_id in self._active_states:
            raise StateAlreadyActiveError(state_id)
        self._active_states.add(state_id)

    def exit_state(self, state_id: str) -> None:
        if state_id not in self._active_states:
            raise StateNotActiveError(state_id)
        self._active_states.remove(state_id)

    def clear(self) -> None:
        self._active_states.clear()

    def is_in_state(self, state_id: str) -> bool:
        return state_id in self._active_states
