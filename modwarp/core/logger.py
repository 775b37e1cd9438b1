# modwarp/core/logger.py
from __future__ import annotations
from .logging import (
    configureLogging,
    setRootLevel,
    getLogger,
    getModLogger,
    ModLogger,
    setLogContext,
    clearLogContext,
    getLogContext,
)

__all__ = [
    "configureLogging",
    "setRootLevel",
    "getLogger",
    "getModLogger",
    "ModLogger",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
]
