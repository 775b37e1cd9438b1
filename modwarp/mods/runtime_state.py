# modwarp/mods/runtime_state.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from modwarp.mods.discover import Candidate, ScanSkip
from modwarp.mods.manifest import ModManifest

__all__ = ["ModState", "PhaseResult", "ModRecord", "LoadReport"]



class ModState(str, Enum):
    """
    Where a candidate ended up. States only ever move forward:
    PENDING -> (EXCLUDED_BY_DEPENDENCY | ORDERED)
    ORDERED -> (EXCLUDED_BY_LOAD_FAILURE | INSTANTIATED)
    INSTANTIATED -> (EXCLUDED_BY_INIT_FAILURE | FULLY_LOADED)
    """
    PENDING = "pending"
    ORDERED = "ordered"
    INSTANTIATED = "instantiated"
    FULLY_LOADED = "fullyLoaded"
    EXCLUDED_BY_DEPENDENCY = "excludedByDependency"
    EXCLUDED_BY_LOAD_FAILURE = "excludedByLoadFailure"
    EXCLUDED_BY_INIT_FAILURE = "excludedByInitFailure"

    @property
    def isTerminal(self) -> bool:
        return self in _TERMINAL_STATES



_TERMINAL_STATES = frozenset({
    ModState.FULLY_LOADED,
    ModState.EXCLUDED_BY_DEPENDENCY,
    ModState.EXCLUDED_BY_LOAD_FAILURE,
    ModState.EXCLUDED_BY_INIT_FAILURE,
})



@dataclass(frozen=True)
class PhaseResult:
    """Outcome of one lifecycle call on one mod."""
    phase: str
    ok: bool
    error: dict[str, Any] | None = None

    @classmethod
    def success(cls, phase: str) -> "PhaseResult":
        return cls(phase=phase, ok=True)

    @classmethod
    def failure(cls, phase: str, error: dict[str, Any]) -> "PhaseResult":
        return cls(phase=phase, ok=False, error=error)



@dataclass
class ModRecord:
    """Per-candidate bookkeeping kept by ModManager for the whole run."""
    candidate: Candidate
    state: ModState = ModState.PENDING
    instance: Any = None
    phases: list[PhaseResult] = field(default_factory=list)
    error: dict[str, Any] | None = None

    @property
    def dirName(self) -> str:
        return self.candidate.dirName

    @property
    def manifest(self) -> ModManifest:
        return self.candidate.manifest

    def moveTo(self, state: ModState, *, error: dict[str, Any] | None = None) -> None:
        if self.state.isTerminal and state != self.state:
            raise RuntimeError(
                f"Mod '{self.dirName}' is already {self.state.value}; cannot move to {state.value}"
            )
        self.state = state
        if error is not None:
            self.error = error



@dataclass
class LoadReport:
    """Everything one ModManager.run() produced, for hosts, tests and UIs."""
    records: dict[str, ModRecord] = field(default_factory=dict)
    skipped: list[ScanSkip] = field(default_factory=list)
    loadOrder: list[str] = field(default_factory=list)
    scanError: dict[str, Any] | None = None

    def inState(self, state: ModState) -> list[str]:
        return [dirName for dirName, record in self.records.items() if record.state == state]

    @property
    def fullyLoaded(self) -> list[str]:
        return [dirName for dirName in self.loadOrder if self.records[dirName].state == ModState.FULLY_LOADED]
