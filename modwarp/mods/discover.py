# modwarp/mods/discover.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path

from modwarp.app.settings import ModLoaderSettings
from modwarp.core.errors import ModScanError
from modwarp.core.jsonutils import serializeError
from modwarp.mods.manifest import ModManifest, loadManifest

logger = logging.getLogger(__name__)

__all__ = ["Candidate", "ScanSkip", "ScanResult", "scanMods"]



@dataclass(frozen=True)
class Candidate:
    """A discovered mod whose dependencies have not been checked yet."""
    dirName: str
    manifest: ModManifest
    modDir: Path

    @property
    def modId(self) -> str:
        return self.manifest.mod_id



@dataclass(frozen=True)
class ScanSkip:
    dirName: str
    reason: str   # "missingManifest" | "ignored" | "invalidManifest" | "duplicateId" | "unsupportedHostVersion"
    detail: dict = field(default_factory=dict)



@dataclass
class ScanResult:
    candidates: list[Candidate] = field(default_factory=list)
    skipped: list[ScanSkip] = field(default_factory=list)



def _listModDirs(root: Path) -> list[Path]:
    try:
        entries = [entry for entry in root.iterdir() if entry.is_dir()]
    except OSError as err:
        logger.critical("Unable to open mod path: '%s': %s", root, err, exc_info=True)
        raise ModScanError(f"Unable to open mod path: '{root}'", root=root) from err
    # Directory listing order is filesystem dependent
    entries.sort(key=lambda entry: (entry.name.lower(), entry.name))
    return entries



def scanMods(settings: ModLoaderSettings) -> ScanResult:
    """
    Enumerate <modsRoot>/<modDir> folders and turn each valid manifest into a Candidate.

    Per directory, in this order:
      1) no manifest file         -> warning, skipped
      2) ignore marker present    -> skipped quietly (info)
      3) manifest fails to parse  -> error, skipped
      4) mod_id already taken     -> error, skipped (first in scan order wins)
      5) host version unsupported -> warning, skipped (only with enforceHostVersion)

    Raises:
        ModScanError: if the mods root itself cannot be enumerated
    """
    root = settings.modsRoot
    logger.info("Reading mods from '%s'", root)

    result = ScanResult()
    modDirs = _listModDirs(root)
    if not modDirs:
        logger.warning("No mods were found! No panic though.")
        return result

    byModId: dict[str, Candidate] = {}

    for modDir in modDirs:
        dirName = modDir.name
        manifestPath = modDir / settings.manifestFileName

        if not manifestPath.is_file():
            logger.warning("Found mod '%s' without %s", dirName, settings.manifestFileName)
            result.skipped.append(ScanSkip(dirName, "missingManifest"))
            continue

        if (modDir / settings.ignoreMarker).exists():
            logger.info("Skipping mod '%s' due to %s file", dirName, settings.ignoreMarker)
            result.skipped.append(ScanSkip(dirName, "ignored"))
            continue

        try:
            manifest = loadManifest(manifestPath)
        except Exception as err:
            logger.error("Skipping mod '%s': %s", dirName, err)
            result.skipped.append(ScanSkip(dirName, "invalidManifest", serializeError(err)))
            continue

        existing = byModId.get(manifest.mod_id)
        if existing is not None:
            logger.error(
                "Skipping mod '%s': mod_id '%s' is already provided by '%s'",
                dirName, manifest.mod_id, existing.dirName,
            )
            result.skipped.append(ScanSkip(dirName, "duplicateId", {"modId": manifest.mod_id, "existing": existing.dirName}))
            continue

        if settings.enforceHostVersion and not manifest.supportsHostVersion(settings.hostVersion):
            logger.warning(
                "Skipping mod '%s': supports host versions %s, running %s",
                dirName, manifest.ksp2_version, settings.hostVersion,
            )
            result.skipped.append(ScanSkip(dirName, "unsupportedHostVersion", {"supported": str(manifest.ksp2_version)}))
            continue

        candidate = Candidate(dirName=dirName, manifest=manifest, modDir=modDir)
        byModId[manifest.mod_id] = candidate
        result.candidates.append(candidate)
        logger.info("Found mod: '%s', adding to enabled mods", dirName)

    logger.info("Mods discovered: %d (skipped %d)", len(result.candidates), len(result.skipped))
    return result
