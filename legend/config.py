"""
Settings
========
Runtime configuration read from the environment.

The entry point calls `load_dotenv()` first, so values may also come from a
local `.env` file.
"""

import os
from dataclasses import dataclass

from legend.errors import ConfigError

LOG_LEVEL_VAR = "LEGEND_LOG_LEVEL"
PERCENT_DIGITS_VAR = "LEGEND_PERCENT_DIGITS"
EMOJI_LOGS_VAR = "LEGEND_EMOJI_LOGS"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    percent_digits: int = 2
    emoji_logs: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = os.environ.get(LOG_LEVEL_VAR, "INFO").strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"{LOG_LEVEL_VAR} must be one of {sorted(VALID_LOG_LEVELS)}, got {log_level!r}"
            )

        raw_digits = os.environ.get(PERCENT_DIGITS_VAR, "2").strip()
        try:
            percent_digits = int(raw_digits)
        except ValueError:
            raise ConfigError(
                f"{PERCENT_DIGITS_VAR} must be an integer, got {raw_digits!r}"
            ) from None
        if percent_digits < 0:
            raise ConfigError(f"{PERCENT_DIGITS_VAR} must not be negative")

        raw_emoji = os.environ.get(EMOJI_LOGS_VAR, "true").strip().lower()
        if raw_emoji in _TRUE_VALUES:
            emoji_logs = True
        elif raw_emoji in _FALSE_VALUES:
            emoji_logs = False
        else:
            raise ConfigError(
                f"{EMOJI_LOGS_VAR} must be a boolean flag, got {raw_emoji!r}"
            )

        return cls(
            log_level=log_level,
            percent_digits=percent_digits,
            emoji_logs=emoji_logs,
        )
