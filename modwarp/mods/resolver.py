# modwarp/mods/resolver.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from modwarp.mods.discover import Candidate
from modwarp.mods.manifest import DependencyConstraint

logger = logging.getLogger(__name__)

__all__ = ["ResolutionResult", "DependencyResolver", "resolveLoadOrder"]



@dataclass(frozen=True)
class ResolutionResult:
    """
    - loadOrder: candidates in the order they must be loaded
    - excluded: candidates whose dependencies could never be met (cycles included)
    - passes: number of passes run, the last one being the pass that promoted nothing
    """
    loadOrder: tuple[Candidate, ...]
    excluded: tuple[Candidate, ...]
    passes: int



class DependencyResolver:
    """
    Computes a load order by iterating to a fixed point.

    Each pass checks every pending candidate against the candidates resolved
    by *earlier* passes only. Everything satisfied in a pass is promoted together
    at the end of that pass, in scan order, so the outcome does not depend on
    where in the pass a candidate was looked at. The loop stops on the first pass
    that promotes nothing; whatever is still pending is excluded.

    One resolver instance holds the state of one resolution; construct a new one
    per run.
    """

    def __init__(self, candidates: Iterable[Candidate]) -> None:
        self._pending: list[Candidate] = list(candidates)
        self._resolved: list[Candidate] = []
        self._resolvedById: dict[str, Candidate] = {}
        self._passes = 0
        self._done = False

    @property
    def resolved(self) -> tuple[Candidate, ...]:
        return tuple(self._resolved)

    @property
    def pending(self) -> tuple[Candidate, ...]:
        return tuple(self._pending)

    def _isConstraintSatisfied(self, constraint: DependencyConstraint) -> bool:
        provider = self._resolvedById.get(constraint.id)
        if provider is None:
            return False
        return constraint.isSatisfiedBy(provider.manifest)

    def areDependenciesResolved(self, candidate: Candidate) -> bool:
        """True if every constraint of `candidate` is met by an already resolved candidate."""
        for constraint in candidate.manifest.dependencies:
            logger.debug(
                "%s dependency - %s %s",
                candidate.manifest.name, constraint.id, constraint.version,
            )
            if not self._isConstraintSatisfied(constraint):
                return False
        return True

    def runPass(self) -> list[Candidate]:
        """Run one pass and return the candidates it promoted (possibly none)."""
        self._passes += 1
        promoted: list[Candidate] = []
        for candidate in self._pending:
            logger.debug("Attempting to resolve dependencies for '%s'", candidate.dirName)
            if self.areDependenciesResolved(candidate):
                promoted.append(candidate)

        # Promote after the pass so same-pass promotions cannot satisfy each other
        if promoted:
            promotedIds = {id(candidate) for candidate in promoted}
            self._pending = [candidate for candidate in self._pending if id(candidate) not in promotedIds]
            for candidate in promoted:
                self._resolved.append(candidate)
                self._resolvedById[candidate.modId] = candidate
        return promoted

    def resolve(self) -> ResolutionResult:
        if not self._done:
            logger.info("Resolving load order for %d mod(s)", len(self._pending))
            while self._pending and self.runPass():
                pass
            self._done = True

            for candidate in self._pending:
                logger.warning(
                    "Skipping loading of '%s' as not all dependencies could be met",
                    candidate.dirName,
                )
            logger.info(
                "Load order resolved in %d pass(es): %d mod(s) ordered, %d excluded",
                self._passes, len(self._resolved), len(self._pending),
            )

        return ResolutionResult(
            loadOrder=tuple(self._resolved),
            excluded=tuple(self._pending),
            passes=self._passes,
        )



def resolveLoadOrder(candidates: Iterable[Candidate]) -> ResolutionResult:
    return DependencyResolver(candidates).resolve()
