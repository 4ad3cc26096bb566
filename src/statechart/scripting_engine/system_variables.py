from enum import StrEnum
from typing import Final
from typing import final


@final
class SystemVariable(StrEnum):
    NAME = "_name"
    SESSION_ID = "_sessionid"
    IO_PROCESSORS = "_ioprocessors"
    EVENT = "_event"
    EXTENDED_STATE = "_x"
    IN = "In"


PROTECTED_NAMES: Final = frozenset(SystemVariable)
