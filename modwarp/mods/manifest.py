# modwarp/mods/manifest.py
from __future__ import annotations
from pathlib import Path
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from modwarp.core.errors import ManifestError
from modwarp.semver.version import versionInRange

__all__ = ["VersionRange", "DependencyConstraint", "ModManifest", "parseManifest", "loadManifest"]



class VersionRange(BaseModel):
    """Inclusive {min, max} bounds. "*" on either side leaves that side open."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    min: str
    max: str

    @field_validator("min", "max", mode="before")
    @classmethod
    def _coerceNumbers(cls, value: Any) -> Any:
        # Hand-written manifests sometimes carry `"max": 2` or `"min": 0.1`
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def contains(self, version: str | None) -> bool:
        return versionInRange(version, self.min, self.max)

    def __str__(self) -> str:
        return f"{self.min}-{self.max}"



class DependencyConstraint(BaseModel):
    """One entry of the manifest `dependencies` array: {id, version: {min, max}}."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    version: VersionRange

    def isSatisfiedBy(self, manifest: ModManifest) -> bool:
        return manifest.mod_id == self.id and self.version.contains(manifest.version)



class ModManifest(BaseModel):
    """Represents a validated modinfo.json. Never mutated after parse."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    mod_id: str = Field(min_length=1)
    name: str
    author: str
    description: str
    source: str
    version: str
    dependencies: tuple[DependencyConstraint, ...] = ()
    # Advisory only unless the loader settings ask for enforcement.
    ksp2_version: VersionRange

    @field_validator("version", mode="before")
    @classmethod
    def _coerceVersion(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _nullDependencies(cls, value: Any) -> Any:
        # `"dependencies": null` shows up in the wild and means "none"
        return () if value is None else value

    def supportsHostVersion(self, hostVersion: str | None) -> bool:
        if hostVersion is None:
            return True
        return self.ksp2_version.contains(hostVersion)



def parseManifest(raw: Any, *, path: Path | None = None) -> ModManifest:
    try:
        return ModManifest.model_validate(raw)
    except ValidationError as err:
        raise ManifestError(f"Invalid mod manifest '{path}': {err}", path=path) from err



def loadManifest(manifestPath: Path) -> ModManifest:
    """
    Read and validate a manifest file (JSON, JSON5 tolerated).

    Raises:
        ManifestError: if the file cannot be read, parsed, or fails validation
    """
    try:
        text = manifestPath.read_text(encoding="utf-8-sig")
    except OSError as err:
        raise ManifestError(f"Cannot read mod manifest '{manifestPath}': {err}", path=manifestPath) from err

    try:
        raw = json5.loads(text)
    except ValueError as err:
        raise ManifestError(f"Malformed mod manifest '{manifestPath}': {err}", path=manifestPath) from err

    if not isinstance(raw, dict):
        raise ManifestError(
            f"Mod manifest '{manifestPath}' must be a JSON object, not '{type(raw).__name__}'",
            path=manifestPath,
        )
    return parseManifest(raw, path=manifestPath)
