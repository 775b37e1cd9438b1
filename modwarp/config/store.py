# modwarp/config/store.py
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from modwarp.app.settings import ModLoaderSettings
from .persistence import loadOrCreateConfig, persistConfig

logger = logging.getLogger(__name__)

__all__ = ["ModConfigEntry", "ConfigStore"]



@dataclass(frozen=True)
class ModConfigEntry:
    configType: type
    instance: Any
    path: Path



class ConfigStore:
    """
    Per-mod configuration registry, keyed by mod directory name.

    Filled while mods are loaded, read-only for everybody else afterwards
    (a settings UI looks entries up here and calls save() after edits).
    """

    def __init__(self, settings: ModLoaderSettings) -> None:
        self._settings = settings
        self._entries: dict[str, ModConfigEntry] = {}

    def configPathFor(self, dirName: str) -> Path:
        return self._settings.modConfigPath(dirName)

    def loadModConfig(self, configType: type, dirName: str) -> Any:
        """
        Load (or create) the config of one mod and register it.

        Raises:
            ConfigError: if the type cannot be default-constructed
        """
        path = self.configPathFor(dirName)
        instance = loadOrCreateConfig(configType, path, label=f"mod '{dirName}'")
        self._entries[dirName] = ModConfigEntry(configType=configType, instance=instance, path=path)
        logger.info("Registered config '%s' for mod '%s'", configType.__qualname__, dirName)
        return instance

    def get(self, dirName: str) -> ModConfigEntry | None:
        return self._entries.get(dirName)

    def save(self, dirName: str) -> None:
        """Write the current in-memory instance of one mod back to disk."""
        entry = self._entries.get(dirName)
        if entry is None:
            raise KeyError(f"No config registered for mod '{dirName}'")
        persistConfig(entry.configType, entry.instance, entry.path)

    @property
    def entries(self) -> Mapping[str, ModConfigEntry]:
        return MappingProxyType(self._entries)

    def __contains__(self, dirName: object) -> bool:
        return dirName in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
