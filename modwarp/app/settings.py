# modwarp/app/settings.py
from __future__ import annotations
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from modwarp.app.paths import (
    MODS_FOLDER_NAME,
    MANIFEST_FILE_NAME,
    IGNORE_MARKER_NAME,
    CODE_FOLDER_NAME,
    CONFIG_FOLDER_NAME,
    CONFIG_FILE_NAME,
    GLOBAL_CONFIG_FILE_NAME,
)

__all__ = ["ModLoaderSettings"]



class ModLoaderSettings(BaseModel):
    """
    Knobs for one mod loading run. Only `modsRoot` is required; the rest
    describe the on-disk layout and the two fault-handling switches.

    strictSetup:
        True  - an exception from Mod.setup() propagates out of ModManager.run()
        False - it is logged and the mod ends up excluded like an initialize() failure
    enforceHostVersion:
        When True (and hostVersion is set) mods whose ksp2_version range does not
        contain hostVersion are dropped at scan time. Off by default: the range is advisory.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    modsRoot: Path
    manifestFileName: str = MANIFEST_FILE_NAME
    ignoreMarker: str = IGNORE_MARKER_NAME
    codeFolder: str = CODE_FOLDER_NAME
    codeExtensions: tuple[str, ...] = (".py",)
    configFolder: str = CONFIG_FOLDER_NAME
    configFileName: str = CONFIG_FILE_NAME
    globalConfigFileName: str = GLOBAL_CONFIG_FILE_NAME
    strictSetup: bool = True
    enforceHostVersion: bool = False
    hostVersion: str | None = None
    logFile: Path | None = Field(default=None, description="Optional rotating log file (JSON lines)")

    @classmethod
    def fromDataPath(cls, dataPath: str | Path, **overrides) -> "ModLoaderSettings":
        return cls(modsRoot=Path(dataPath) / MODS_FOLDER_NAME, **overrides)

    def modDir(self, dirName: str) -> Path:
        return self.modsRoot / dirName

    def codeDir(self, dirName: str) -> Path:
        return self.modDir(dirName) / self.codeFolder

    def modConfigPath(self, dirName: str) -> Path:
        return self.modDir(dirName) / self.configFolder / self.configFileName

    @property
    def globalConfigPath(self) -> Path:
        return self.modsRoot / self.globalConfigFileName
