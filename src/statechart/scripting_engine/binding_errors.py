from typing import Final
from typing import final


class BindingError(RuntimeError): ...


@final
class ProtectedVariableViolation(BindingError):
    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' is a protected system variable.")
        self.name: Final = name


@final
class InvalidPredicateArgument(BindingError):
    def __init__(self, predicate_name: str, argument: object) -> None:
        super().__init__(
            f"'{predicate_name}' expects a state id of type 'str', got '{type(argument).__name__}'."
        )
        self.argument: Final = argument


@final
class DuplicateBindingError(BindingError):
    def __init__(self, name: str) -> None:
        super().__init__(f"System variable '{name}' is already bound in this namespace.")
        self.name: Final = name
