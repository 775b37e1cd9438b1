# modwarp/mods/api.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from modwarp.core.logger import ModLogger, getModLogger
from modwarp.mods.manifest import ModManifest

__all__ = ["ModProtocol", "Mod", "ModExports", "isModType", "EXPORTS_HOOK_NAME"]

# Name of the module-level function a code unit defines to expose its mod.
EXPORTS_HOOK_NAME = "modExports"



@runtime_checkable
class ModProtocol(Protocol):
    """The lifecycle a mod entry type has to implement."""

    def setup(self, hostContext: Any, manifest: ModManifest) -> None: ...

    def initialize(self) -> None: ...

    def onInitialized(self) -> None: ...



class Mod:
    """
    Convenience base class for mod entry types.

    Lifecycle, driven by ModManager:
        setup(hostContext, manifest)  wiring only, right after construction
        initialize()                  per mod, in load order
        onInitialized()               once every mod went through initialize()

    Subclasses normally override initialize() and/or onInitialized().
    """
    hostContext: Any = None
    manifest: ModManifest | None = None
    logger: ModLogger | None = None
    # Set by the loader before setup() when the mod exposes a config type
    config: Any = None

    def setup(self, hostContext: Any, manifest: ModManifest) -> None:
        self.hostContext = hostContext
        self.manifest = manifest
        self.logger = getModLogger(manifest.mod_id)

    def initialize(self) -> None:
        return

    def onInitialized(self) -> None:
        return

    @property
    def name(self) -> str:
        if self.manifest is not None:
            return self.manifest.name
        return type(self).__name__



@dataclass(frozen=True)
class ModExports:
    """
    What a code unit hands back from its `modExports()` function.

        def modExports():
            return ModExports(entry=MyMod, config=MyModConfig)

    A unit that only carries helpers does not need the function at all.
    """
    entry: type | None = None
    config: type | None = None



def isModType(obj: Any) -> bool:
    """True if `obj` is a class that can be constructed and driven through the mod lifecycle."""
    if not isinstance(obj, type):
        return False
    if issubclass(obj, Mod):
        return True
    return all(callable(getattr(obj, attr, None)) for attr in ("setup", "initialize", "onInitialized"))
