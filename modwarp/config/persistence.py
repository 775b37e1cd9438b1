# modwarp/config/persistence.py
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, TypeVar

import json5
from pydantic import TypeAdapter

from modwarp.core.errors import ConfigError

logger = logging.getLogger(__name__)

__all__ = ["defaultConfig", "readConfig", "persistConfig", "loadOrCreateConfig"]

T = TypeVar("T")



def _adapter(configType: type[T]) -> TypeAdapter[T]:
    return TypeAdapter(configType)



def defaultConfig(configType: type[T]) -> T:
    """
    Build a fresh instance from the type's own defaults.

    Field-level defaults (pydantic `Field(default=...)`, dataclass defaults and
    default factories) are applied by the constructor itself.

    Raises:
        ConfigError: if the type cannot be constructed without arguments
    """
    try:
        return configType()
    except Exception as err:
        raise ConfigError(
            f"Config type '{configType.__qualname__}' cannot be built from defaults: {err}"
        ) from err



def readConfig(configType: type[T], path: Path) -> T:
    """Read `path` (JSON, JSON5 tolerated) and validate it into `configType`."""
    raw = json5.loads(path.read_text(encoding="utf-8-sig"))
    if not isinstance(raw, dict):
        raise TypeError(f"Config file '{path}' must contain a JSON object, not '{type(raw).__name__}'")
    return _adapter(configType).validate_python(raw)



def persistConfig(configType: type[T], instance: T, path: Path, *, createParents: bool = True) -> None:
    """Serialize `instance` as indented JSON and atomically replace `path`."""
    payload: Any = _adapter(configType).dump_python(instance, mode="json")
    out = json5.dumps(payload, indent=2, quote_keys=True, trailing_commas=False)

    if createParents:
        path.parent.mkdir(parents=True, exist_ok=True)
    tmpPath = path.with_suffix(path.suffix + ".tmp")
    with open(tmpPath, "w", encoding="utf-8") as fl:
        fl.write(out)
        if not out.endswith("\n"):
            fl.write("\n")

    os.replace(tmpPath, path)
    logger.debug("Saved config '%s' to '%s'", configType.__qualname__, path)



def loadOrCreateConfig(configType: type[T], path: Path, *, label: str, createParents: bool = True) -> T:
    """
    Load `configType` from `path`, falling back to defaults, then write it back.

      - missing file          -> defaults
      - unreadable / invalid  -> error logged, file deleted, defaults
      - either way the result is persisted so the file on disk is always current;
        a failed write is logged and the in-memory instance is still returned

    Raises:
        ConfigError: only if defaults cannot be constructed
    """
    if not path.exists():
        instance = defaultConfig(configType)
    else:
        try:
            instance = readConfig(configType, path)
        except Exception as err:
            logger.error("Loading %s config from '%s' failed: %s", label, path, err, exc_info=True)
            try:
                path.unlink()
            except OSError as unlinkErr:
                logger.error("Could not delete corrupt %s config '%s': %s", label, path, unlinkErr)
            instance = defaultConfig(configType)

    try:
        persistConfig(configType, instance, path, createParents=createParents)
    except Exception as err:
        logger.error("Saving %s config to '%s' failed: %s", label, path, err, exc_info=True)

    return instance
