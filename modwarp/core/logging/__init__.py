# modwarp/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext
from .setup import configureLogging, setRootLevel
from .util import ModLogger, getLogger, getModLogger

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
