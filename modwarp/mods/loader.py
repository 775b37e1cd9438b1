# modwarp/mods/loader.py
from __future__ import annotations

import hashlib
import importlib.util
import logging
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from modwarp.app.settings import ModLoaderSettings
from modwarp.config.store import ConfigStore
from modwarp.core.errors import ModLoadError
from modwarp.mods.api import EXPORTS_HOOK_NAME, ModExports, isModType
from modwarp.mods.discover import Candidate

logger = logging.getLogger(__name__)

__all__ = [
    "CodeUnitLoader",
    "ImportlibCodeUnitLoader",
    "LoadedModuleSet",
    "ModuleLoader",
]

_UNSAFE_NAME_RE = re.compile(r"[^0-9A-Za-z_]")



def _moduleSafeName(raw: str) -> str:
    """Identifier-safe form of `raw`; a suffix from the raw text keeps "my-mod" and "my_mod" apart."""
    safe = _UNSAFE_NAME_RE.sub("_", raw)
    if safe == raw:
        return safe
    digest = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:8]
    return f"{safe}_{digest}"



class CodeUnitLoader(Protocol):
    """
    What the host provides to turn one file into an executable unit.

    loadUnit() raises on failure; unloadUnit() must tolerate units it never loaded.
    """

    def loadUnit(self, path: Path, *, modDirName: str) -> ModuleType: ...

    def unloadUnit(self, unit: ModuleType) -> None: ...



class ImportlibCodeUnitLoader:
    """Loads `.py` files as standalone modules under a per-mod namespace."""

    prefix = "modwarp_mods"

    def moduleNameFor(self, path: Path, modDirName: str) -> str:
        return f"{self.prefix}.{_moduleSafeName(modDirName)}.{_moduleSafeName(path.stem)}"

    def loadUnit(self, path: Path, *, modDirName: str) -> ModuleType:
        moduleName = self.moduleNameFor(path, modDirName)
        spec = importlib.util.spec_from_file_location(moduleName, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Could not create module spec for '{path}'")

        module = importlib.util.module_from_spec(spec)
        # Registered before exec so dataclasses/pydantic can resolve the module
        sys.modules[moduleName] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(moduleName, None)
            raise
        return module

    def unloadUnit(self, unit: ModuleType) -> None:
        if sys.modules.get(unit.__name__) is unit:
            del sys.modules[unit.__name__]



@dataclass
class LoadedModuleSet:
    """Code units of one mod plus what they exposed. Dropped if the mod fails to load."""
    dirName: str
    units: list[ModuleType] = field(default_factory=list)
    entryType: type | None = None
    configType: type | None = None



def _queryExports(unit: ModuleType) -> ModExports:
    hook = getattr(unit, EXPORTS_HOOK_NAME, None)
    if hook is None:
        return ModExports()
    if not callable(hook):
        raise TypeError(f"'{EXPORTS_HOOK_NAME}' in '{unit.__name__}' is not callable")

    exported = hook()
    if exported is None:
        return ModExports()
    if isinstance(exported, ModExports):
        return exported
    if isinstance(exported, Mapping):
        return ModExports(entry=exported.get("entry"), config=exported.get("config"))
    raise TypeError(
        f"'{EXPORTS_HOOK_NAME}()' in '{unit.__name__}' returned {type(exported).__name__}, "
        "expected ModExports or a mapping"
    )



class ModuleLoader:
    """
    Loads the code units of one ordered candidate and finds its entry and config types.

    Failures are reported as ModLoadError; the caller decides what to do with the mod.
    """

    def __init__(
        self,
        settings: ModLoaderSettings,
        configStore: ConfigStore,
        *,
        unitLoader: CodeUnitLoader | None = None,
    ) -> None:
        self._settings = settings
        self._configStore = configStore
        self._unitLoader: CodeUnitLoader = unitLoader or ImportlibCodeUnitLoader()

    def _discard(self, moduleSet: LoadedModuleSet) -> None:
        for unit in moduleSet.units:
            try:
                self._unitLoader.unloadUnit(unit)
            except Exception:
                logger.exception("Failed to unload code unit '%s'", getattr(unit, "__name__", unit))
        moduleSet.units.clear()

    def _listCodeFiles(self, codeDir: Path, dirName: str) -> list[Path]:
        try:
            files = sorted((entry for entry in codeDir.iterdir() if entry.is_file()), key=lambda entry: entry.name)
        except OSError as err:
            raise ModLoadError(
                f"Could not load mod: '{dirName}', unable to read directory '{codeDir}': {err}",
                modId=dirName,
            ) from err

        extensions = {ext.lower() for ext in self._settings.codeExtensions}
        codeFiles: list[Path] = []
        for path in files:
            if path.suffix.lower() not in extensions:
                logger.warning("Non-code file found in '%s': '%s', ignoring", codeDir, path.name)
                continue
            codeFiles.append(path)
        return codeFiles

    def _loadUnits(self, moduleSet: LoadedModuleSet, codeFiles: list[Path]) -> None:
        for path in codeFiles:
            try:
                unit = self._unitLoader.loadUnit(path, modDirName=moduleSet.dirName)
            except Exception as err:
                raise ModLoadError(
                    f"Could not load mod: '{moduleSet.dirName}', failed to load code unit '{path.name}': {err}",
                    modId=moduleSet.dirName,
                    fileName=path.name,
                ) from err
            moduleSet.units.append(unit)

    def _collectExports(self, moduleSet: LoadedModuleSet) -> tuple[list[type], list[type]]:
        entries: list[type] = []
        configs: list[type] = []
        for unit in moduleSet.units:
            try:
                exported = _queryExports(unit)
            except Exception as err:
                raise ModLoadError(
                    f"Could not load mod: '{moduleSet.dirName}', querying exports of '{unit.__name__}' failed: {err}",
                    modId=moduleSet.dirName,
                ) from err
            if exported.entry is not None and exported.entry not in entries:
                entries.append(exported.entry)
            if exported.config is not None and exported.config not in configs:
                configs.append(exported.config)
        return entries, configs

    def _pickEntry(self, moduleSet: LoadedModuleSet, entries: list[type]) -> type:
        dirName = moduleSet.dirName
        if not entries:
            raise ModLoadError(
                f"Could not load mod: '{dirName}', no code unit exports an entry type via {EXPORTS_HOOK_NAME}()",
                modId=dirName,
            )
        if len(entries) > 1:
            names = ", ".join(_typeName(entry) for entry in entries)
            raise ModLoadError(f"Could not load mod: '{dirName}', more than one entry type exported ({names})", modId=dirName)

        entry = entries[0]
        if not isModType(entry):
            raise ModLoadError(
                f"Could not load mod: '{dirName}', the exported entry ({_typeName(entry)}) "
                "does not implement setup/initialize/onInitialized",
                modId=dirName,
            )
        return entry

    def load(self, candidate: Candidate) -> LoadedModuleSet:
        """
        Load one mod's code units and resolve its entry type (and config type, if any).

        Raises:
            ModLoadError: missing code dir, failing unit, missing/ambiguous/invalid entry type
        """
        dirName = candidate.dirName
        codeDir = self._settings.codeDir(dirName)
        if not codeDir.is_dir():
            raise ModLoadError(f"Directory not found: '{codeDir}'", modId=dirName)

        moduleSet = LoadedModuleSet(dirName=dirName)
        try:
            self._loadUnits(moduleSet, self._listCodeFiles(codeDir, dirName))
            entries, configs = self._collectExports(moduleSet)
            moduleSet.entryType = self._pickEntry(moduleSet, entries)
        except ModLoadError:
            self._discard(moduleSet)
            raise

        if configs:
            if len(configs) > 1:
                logger.warning(
                    "Mod '%s' exports %d config types, using '%s'",
                    dirName, len(configs), _typeName(configs[0]),
                )
            moduleSet.configType = configs[0]

        logger.debug(
            "Loaded %d code unit(s) for '%s', entry '%s'",
            len(moduleSet.units), dirName, _typeName(moduleSet.entryType),
        )
        return moduleSet

    def loadConfig(self, moduleSet: LoadedModuleSet) -> Any:
        """
        Hand the mod's config type (if any) to the ConfigStore and return the instance.
        Config problems never fail the mod; they are logged and None is returned.
        """
        if moduleSet.configType is None:
            return None
        try:
            return self._configStore.loadModConfig(moduleSet.configType, moduleSet.dirName)
        except Exception as err:
            logger.error("Config for mod '%s' could not be created: %s", moduleSet.dirName, err, exc_info=True)
            return None



def _typeName(obj: Any) -> str:
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or repr(obj)
    return f"{module}.{qualname}" if module else qualname
