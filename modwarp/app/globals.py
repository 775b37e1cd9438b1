# modwarp/app/globals.py
from __future__ import annotations
from typing import TYPE_CHECKING, cast

from modwarp.app.context import PROCESS_REGISTRY

if TYPE_CHECKING:
    from modwarp.config.global_config import GlobalConfig
    from modwarp.config.store import ConfigStore
    from modwarp.mods.manager import ModManager

__all__ = [
    "MOD_MANAGER_KEY", "MOD_CONFIG_STORE_KEY", "GLOBAL_CONFIG_KEY",
    "getModManager", "getModConfigStore", "getGlobalConfig",
]

MOD_MANAGER_KEY = "mods.manager"
MOD_CONFIG_STORE_KEY = "config.mods"
GLOBAL_CONFIG_KEY = "config.global"



def getModManager() -> ModManager | None:
    return cast("ModManager | None", PROCESS_REGISTRY.get(MOD_MANAGER_KEY))



def getModConfigStore() -> ConfigStore | None:
    """The per-mod config registry of the last run, for settings UIs and such."""
    return cast("ConfigStore | None", PROCESS_REGISTRY.get(MOD_CONFIG_STORE_KEY))



def getGlobalConfig() -> GlobalConfig | None:
    return cast("GlobalConfig | None", PROCESS_REGISTRY.get(GLOBAL_CONFIG_KEY))
