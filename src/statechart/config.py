import logging
import os
from typing import Final
from typing import Optional
from typing import final

from dotenv import load_dotenv

LOG_LEVEL_ENV_VARIABLE = "LOG_LEVEL"
SESSION_ID_PREFIX_ENV_VARIABLE = "SESSION_ID_PREFIX"

_DEFAULT_LOG_LEVEL: Final = "INFO"


def get_environment_variable_or_default(
    key: str,
    default: str | None,
) -> str | None:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


@final
class Config:
    def __init__(self) -> None:
        self._log_level: Optional[int] = None
        self._session_id_prefix: Optional[str] = None
        self.reload()

    def reload(self) -> None:
        load_dotenv()
        log_level_name: Final = get_environment_variable_or_default(LOG_LEVEL_ENV_VARIABLE, _DEFAULT_LOG_LEVEL)
        assert log_level_name is not None
        log_level: Final = logging.getLevelNamesMapping().get(log_level_name.upper())
        if log_level is None:
            raise ValueError(f"Environment variable '{LOG_LEVEL_ENV_VARIABLE}' has invalid value '{log_level_name}'.")
        self._log_level = log_level
        self._session_id_prefix = get_environment_variable_or_default(SESSION_ID_PREFIX_ENV_VARIABLE, None)

    @property
    def log_level(self) -> int:
        if self._log_level is None:
            raise AssertionError("Log level is not set. This should not happen.")
        return self._log_level

    @property
    def session_id_prefix(self) -> Optional[str]:
        return self._session_id_prefix


def configure_logging(config: Config) -> None:
    logging.basicConfig(level=config.log_level)
