"""Runtime settings for the calculator adapters."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    log_level: str = "WARNING"
    max_sessions: int = 1000

    def validate(self) -> None:
        if not (0 < self.port < 65536):
            raise ValueError("port must be 1..65535")
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level: {self.log_level}")


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    A `.env` file in the working directory is loaded first when reading the
    process environment; variables already set take precedence over it.

    Args:
        environ: Mapping to read instead of os.environ (used by tests)

    Returns:
        Validated Settings

    Raises:
        ValueError: If a variable holds an invalid value
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    defaults = Settings()
    settings = Settings(
        host=environ.get("KEYPAD_CALC_HOST", defaults.host),
        port=_parse_int("KEYPAD_CALC_PORT", environ.get("KEYPAD_CALC_PORT", str(defaults.port))),
        debug=_parse_bool("KEYPAD_CALC_DEBUG", environ.get("KEYPAD_CALC_DEBUG", "false")),
        log_level=environ.get("KEYPAD_CALC_LOG_LEVEL", defaults.log_level).upper(),
        max_sessions=_parse_int(
            "KEYPAD_CALC_MAX_SESSIONS",
            environ.get("KEYPAD_CALC_MAX_SESSIONS", str(defaults.max_sessions)),
        ),
    )
    settings.validate()
    return settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
