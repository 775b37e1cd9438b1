# modwarp/core/errors.py
from __future__ import annotations
from pathlib import Path

__all__ = [
    "ModWarpError", "ModScanError", "ManifestError",
    "ModLoadError", "ConfigError", "LifecycleError",
]



class ModWarpError(Exception):
    """Base class for every error raised by the mod loading subsystem."""



class ModScanError(ModWarpError):
    """Raised when the mods root itself cannot be enumerated. Nothing gets loaded."""
    def __init__(self, message: str, *, root: Path | None = None) -> None:
        super().__init__(message)
        self.root = root



class ManifestError(ModWarpError):
    """Raised when a single manifest is missing, unreadable or fails validation."""
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path



class ModLoadError(ModWarpError):
    def __init__(self, message: str, *, modId: str, fileName: str | None = None) -> None:
        super().__init__(message)
        self.modId = modId
        self.fileName = fileName



class ConfigError(ModWarpError):
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path



class LifecycleError(ModWarpError):
    """Describes a failed lifecycle phase (setup, initialize, onInitialized) of one mod."""
    def __init__(self, message: str, *, modId: str, phase: str) -> None:
        super().__init__(message)
        self.modId = modId
        self.phase = phase
