# modwarp/mods/manager.py
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from modwarp.app.context import PROCESS_REGISTRY
from modwarp.app.globals import GLOBAL_CONFIG_KEY, MOD_CONFIG_STORE_KEY, MOD_MANAGER_KEY
from modwarp.app.settings import ModLoaderSettings
from modwarp.config.global_config import GlobalConfig, loadGlobalConfig
from modwarp.config.store import ConfigStore
from modwarp.core.errors import LifecycleError, ModLoadError, ModScanError
from modwarp.core.jsonutils import serializeError
from modwarp.core.logger import clearLogContext, configureLogging, setLogContext, setRootLevel
from modwarp.mods.api import ModProtocol
from modwarp.mods.discover import Candidate, scanMods
from modwarp.mods.loader import CodeUnitLoader, ModuleLoader
from modwarp.mods.manifest import ModManifest
from modwarp.mods.reporting import ModListEntry, buildModList, logModList
from modwarp.mods.resolver import DependencyResolver
from modwarp.mods.runtime_state import LoadReport, ModRecord, ModState, PhaseResult

logger = logging.getLogger(__name__)

__all__ = ["PHASE_SETUP", "PHASE_INITIALIZE", "PHASE_ON_INITIALIZED", "ModManager", "loadMods"]

PHASE_SETUP = "setup"
PHASE_INITIALIZE = "initialize"
PHASE_ON_INITIALIZED = "onInitialized"

# Loggers whose verbosity follows GlobalConfig.LogLevel
_SUBSYSTEM_LOGGERS = ("modwarp", "mods")

ModsReadyCallback = Callable[[Sequence[ModListEntry]], None]



class ModManager:
    """
    Drives one mod loading run, start to finish, on the calling thread:

        initializeGlobalConfig()  load/create <modsRoot>/space_warp_config.json
        readMods()                scan manifests, resolve the load order
        initializeMods()          per mod in load order: load code, config, construct,
                                  setup(), initialize()
        invokePostInitialize()    onInitialized() on every constructed mod, then the
                                  mod list is handed to `onModsReady` exactly once

    Per-mod failures are logged and recorded on the mod's ModRecord; they never stop
    the run. The only fatal condition is an unreadable mods root (no mods are loaded).
    With `settings.strictSetup` (the default), an exception raised while constructing
    a mod or inside its setup() propagates to the caller.
    """

    def __init__(
        self,
        settings: ModLoaderSettings,
        *,
        hostContext: Any = None,
        unitLoader: CodeUnitLoader | None = None,
        onModsReady: ModsReadyCallback | None = None,
    ) -> None:
        self.settings = settings
        self.hostContext = hostContext
        self.globalConfig: GlobalConfig | None = None
        self.configStore = ConfigStore(settings)
        self._moduleLoader = ModuleLoader(settings, self.configStore, unitLoader=unitLoader)
        self._onModsReady: ModsReadyCallback = onModsReady or logModList

        self._report = LoadReport()
        self._loadOrder: list[Candidate] = []
        # "all instantiated": every constructed mod, whatever happened afterwards
        self._allModScripts: list[tuple[ModRecord, ModProtocol]] = []
        # "fully loaded": mods that passed setup() and initialize()
        self._loadedMods: list[tuple[str, ModManifest]] = []
        self._modsReadyFired = False

    # ----- Read-only views -----

    @property
    def report(self) -> LoadReport:
        return self._report

    @property
    def loadOrder(self) -> tuple[str, ...]:
        return tuple(candidate.dirName for candidate in self._loadOrder)

    @property
    def loadedMods(self) -> tuple[tuple[str, ModManifest], ...]:
        return tuple(self._loadedMods)

    @property
    def allInstances(self) -> tuple[ModProtocol, ...]:
        return tuple(instance for _record, instance in self._allModScripts)

    def getMod(self, dirName: str) -> ModProtocol | None:
        for record, instance in self._allModScripts:
            if record.dirName == dirName:
                return instance
        return None

    # ----- Global config -----

    def initializeGlobalConfig(self) -> GlobalConfig:
        self.globalConfig = loadGlobalConfig(self.settings.globalConfigPath)
        level = self.globalConfig.loggingLevel
        # Handlers installed by configureLogging() filter too, not just the loggers
        setRootLevel(level)
        for name in _SUBSYSTEM_LOGGERS:
            logging.getLogger(name).setLevel(level)
        return self.globalConfig

    # ----- Scan + resolve -----

    def readMods(self) -> bool:
        """
        Scan the mods root and compute the load order.
        Returns False if the root could not be enumerated (nothing will be loaded).
        """
        try:
            scan = scanMods(self.settings)
        except ModScanError as err:
            self._report.scanError = serializeError(err)
            return False

        self._report.skipped = list(scan.skipped)
        for candidate in scan.candidates:
            self._report.records[candidate.dirName] = ModRecord(candidate=candidate)

        result = DependencyResolver(scan.candidates).resolve()
        self._loadOrder = list(result.loadOrder)
        self._report.loadOrder = [candidate.dirName for candidate in result.loadOrder]

        for candidate in result.loadOrder:
            self._report.records[candidate.dirName].moveTo(ModState.ORDERED)
        for candidate in result.excluded:
            self._report.records[candidate.dirName].moveTo(
                ModState.EXCLUDED_BY_DEPENDENCY,
                error={"message": "not all dependencies could be met"},
            )
        return True

    # ----- Per-mod lifecycle -----

    def _runPhase(self, record: ModRecord, phase: str, fn: Callable[[], Any], *, strict: bool = False) -> PhaseResult:
        setLogContext(modId=record.dirName, phase=phase)
        try:
            fn()
        except Exception as err:
            failure = LifecycleError(
                f"{phase}() of mod '{record.dirName}' failed: {err}", modId=record.dirName, phase=phase,
            ).with_traceback(err.__traceback__)
            failure.__cause__ = err
            result = PhaseResult.failure(phase, serializeError(failure))
            record.phases.append(result)
            if strict:
                raise
            logger.critical("Exception in '%s' %s(): %s", record.dirName, phase, err, exc_info=True)
            return result
        result = PhaseResult.success(phase)
        record.phases.append(result)
        return result

    def _wireModObject(self, record: ModRecord, entryType: type, config: Any) -> ModProtocol:
        instance = entryType()
        if config is not None:
            instance.config = config
        self._allModScripts.append((record, instance))
        instance.setup(self.hostContext, record.manifest)
        return instance

    def _initializeModObject(self, record: ModRecord, entryType: type, config: Any) -> None:
        wired: list[ModProtocol] = []
        result = self._runPhase(
            record,
            PHASE_SETUP,
            lambda: wired.append(self._wireModObject(record, entryType, config)),
            strict=self.settings.strictSetup,
        )
        if not result.ok:
            # Lenient wiring: a half-built mod never reaches the post-init sweep
            self._allModScripts = [pair for pair in self._allModScripts if pair[0] is not record]
            record.moveTo(ModState.EXCLUDED_BY_INIT_FAILURE, error=result.error)
            return

        instance = wired[0]
        record.instance = instance
        record.moveTo(ModState.INSTANTIATED)
        logger.info("Loaded: '%s'", record.dirName)

        result = self._runPhase(record, PHASE_INITIALIZE, instance.initialize)
        if not result.ok:
            record.moveTo(ModState.EXCLUDED_BY_INIT_FAILURE, error=result.error)
            return

        record.moveTo(ModState.FULLY_LOADED)
        self._loadedMods.append((record.dirName, record.manifest))

    def initializeMods(self) -> None:
        logger.info("Initializing mods")
        for candidate in self._loadOrder:
            record = self._report.records[candidate.dirName]
            logger.info("Found mod: '%s', attempting to load mod", candidate.dirName)
            setLogContext(modId=candidate.dirName, phase="load")
            try:
                try:
                    moduleSet = self._moduleLoader.load(candidate)
                except ModLoadError as err:
                    logger.error("%s", err, exc_info=err.__cause__ is not None)
                    record.moveTo(ModState.EXCLUDED_BY_LOAD_FAILURE, error=serializeError(err))
                    continue

                config = self._moduleLoader.loadConfig(moduleSet)
                self._initializeModObject(record, moduleSet.entryType, config)
            finally:
                clearLogContext()

    def invokePostInitialize(self) -> None:
        """onInitialized() for every constructed mod, each isolated, then the mod list."""
        for record, instance in list(self._allModScripts):
            try:
                self._runPhase(record, PHASE_ON_INITIALIZED, instance.onInitialized)
            finally:
                clearLogContext()
        self._initModList()

    def _initModList(self) -> None:
        if self._modsReadyFired:
            return
        self._modsReadyFired = True
        entries = buildModList(self.loadedMods, self.configStore)
        try:
            self._onModsReady(entries)
        except Exception:
            logger.exception("Building the mod list failed")

    # ----- Whole run -----

    def run(self) -> LoadReport:
        logger.info("Warping spacetime")
        self.initializeGlobalConfig()
        PROCESS_REGISTRY.register(GLOBAL_CONFIG_KEY, self.globalConfig, overwrite=True)
        PROCESS_REGISTRY.register(MOD_CONFIG_STORE_KEY, self.configStore, overwrite=True)
        PROCESS_REGISTRY.register(MOD_MANAGER_KEY, self, overwrite=True)

        if self.readMods():
            self.initializeMods()
        else:
            logger.critical("No mods loaded: the mods root '%s' could not be read", self.settings.modsRoot)
        self.invokePostInitialize()

        logger.info(
            "Mod loading finished: %d loaded, %d ordered, %d skipped at scan",
            len(self._loadedMods), len(self._loadOrder), len(self._report.skipped),
        )
        return self._report



def loadMods(
    settings: ModLoaderSettings,
    *,
    hostContext: Any = None,
    onModsReady: ModsReadyCallback | None = None,
    unitLoader: CodeUnitLoader | None = None,
    setupLogging: bool = True,
) -> ModManager:
    """
    Host startup entry point: configure logging, then run a ModManager to completion.
    Blocks until every mod went through its lifecycle.
    """
    if setupLogging:
        configureLogging(logging.INFO, logFile=settings.logFile)
    manager = ModManager(
        settings,
        hostContext=hostContext,
        unitLoader=unitLoader,
        onModsReady=onModsReady,
    )
    manager.run()
    return manager
