# modwarp/mods/reporting.py
from __future__ import annotations
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from modwarp.config.store import ConfigStore
from modwarp.mods.manifest import ModManifest

logger = logging.getLogger(__name__)

__all__ = ["ModListEntry", "buildModList", "logModList"]



@dataclass(frozen=True)
class ModListEntry:
    """One row of the mod list shown to the player."""
    dirName: str
    modId: str
    name: str
    version: str
    author: str
    description: str
    source: str
    hasConfig: bool



def buildModList(
    loadedMods: Sequence[tuple[str, ModManifest]],
    configStore: ConfigStore | None = None,
) -> tuple[ModListEntry, ...]:
    return tuple(
        ModListEntry(
            dirName=dirName,
            modId=manifest.mod_id,
            name=manifest.name,
            version=manifest.version,
            author=manifest.author,
            description=manifest.description,
            source=manifest.source,
            hasConfig=configStore is not None and dirName in configStore,
        )
        for dirName, manifest in loadedMods
    )



def logModList(entries: Sequence[ModListEntry]) -> None:
    """Default mod list "UI": one info line per loaded mod."""
    if not entries:
        logger.info("Mod list: no mods loaded")
        return
    logger.info("Mod list: %d mod(s) loaded", len(entries))
    for entry in entries:
        logger.info(
            "  %s %s by %s [%s]%s",
            entry.name, entry.version, entry.author, entry.modId,
            " (configurable)" if entry.hasConfig else "",
        )
