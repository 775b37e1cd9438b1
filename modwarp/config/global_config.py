# modwarp/config/global_config.py
from __future__ import annotations
import logging
from enum import IntEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .persistence import loadOrCreateConfig

__all__ = ["LogLevel", "GlobalConfig", "loadGlobalConfig"]



class LogLevel(IntEnum):
    """Verbosity stored in the global config file as a plain int."""
    NONE = 0
    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    ALL = 6

    def toLoggingLevel(self) -> int:
        return _LOGGING_LEVELS[self]

    @classmethod
    def coerce(cls, value: int) -> "LogLevel":
        """Unknown numbers fall back to INFO instead of failing the whole config."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.INFO



_LOGGING_LEVELS: dict[LogLevel, int] = {
    LogLevel.NONE: logging.CRITICAL + 10,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.ALL: 1,
}



class GlobalConfig(BaseModel):
    """Process-wide settings, persisted next to the mod folders."""
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    LogLevel: int = int(LogLevel.INFO)

    @property
    def loggingLevel(self) -> int:
        return LogLevel.coerce(self.LogLevel).toLoggingLevel()



def loadGlobalConfig(path: Path) -> GlobalConfig:
    """Load-or-default, then persist. Same self-healing contract as per-mod configs."""
    # The mods root is not created here; a missing root is reported by the scan
    return loadOrCreateConfig(GlobalConfig, path, label="global", createParents=False)
