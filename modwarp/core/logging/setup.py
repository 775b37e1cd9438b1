# modwarp/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path

from .formatters import DevFormatter, JsonFormatter

__all__ = ["configureLogging", "setRootLevel"]



def configureLogging(
    level: int = logging.INFO,
    *,
    logFile: str | Path | None = None,
    jsonFile: bool = True,
) -> None:
    """
    Initiate the global logging configuration.

      - Console human-readable logs at `level`
      - Optional rotating file log (JSON lines by default) at `level`
    
    Safe to call again; previous root handlers are replaced.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(level)
    consoleHandler.setFormatter(DevFormatter())
    root.addHandler(consoleHandler)

    if logFile is not None:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(level)
        fileHandler.setFormatter(JsonFormatter() if jsonFile else DevFormatter())
        root.addHandler(fileHandler)



def setRootLevel(level: int) -> None:
    """Apply a new verbosity to the root logger and every handler attached to it."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)
