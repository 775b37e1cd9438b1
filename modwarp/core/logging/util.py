# modwarp/core/logging/util.py
from __future__ import annotations

import logging



class ModLogger:
    """Tiny sugar over a stdlib logger, handed to every mod by Mod.setup()."""
    def __init__(self, logger: logging.Logger) -> None:
        self._log = logger
    
    @property
    def name(self) -> str:
        return self._log.name

    def debug(self, msg: str, *args, **kwargs): self._log.debug(msg, *args, **kwargs)
    def info(self, msg: str, *args, **kwargs): self._log.info(msg, *args, **kwargs)
    def warn(self, msg: str, *args, **kwargs): self._log.warning(msg, *args, **kwargs)
    def warning(self, msg: str, *args, **kwargs): self._log.warning(msg, *args, **kwargs)
    def error(self, msg: str, *args, **kwargs): self._log.error(msg, *args, **kwargs)
    def critical(self, msg: str, *args, **kwargs): self._log.critical(msg, *args, **kwargs)
    def exception(self, msg: str, *args, **kwargs): self._log.exception(msg, *args, **kwargs)

def getLogger(name: str, side: str = "") -> logging.Logger:
    return logging.getLogger(f"{side}.{name}" if side else name)

def getModLogger(modId: str) -> ModLogger:
    return ModLogger(logging.getLogger(f"mods.{str(modId).strip()}"))
