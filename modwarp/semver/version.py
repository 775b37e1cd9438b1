# modwarp/semver/version.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

__all__ = [
    "WILDCARD",
    "ModVersion",
    "parseLenientVersion",
    "compareVersions",
    "isVersionAtOrAbove",
    "isVersionAtOrBelow",
    "versionInRange",
]



# A bound written as "*" (or left empty) never constrains anything.
WILDCARD = "*"

_DIGITS_RE = re.compile(r"[0-9]+")



@total_ordering
@dataclass(frozen=True)
class ModVersion:
    """
    Dotted numeric version with trailing zeroes stripped, so that "1.2" and
    "1.2.0.0" compare (and hash) equal.
    """
    components: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        parts = list(self.components)
        while parts and parts[-1] == 0:
            parts.pop()
        object.__setattr__(self, "components", tuple(parts))

    def __str__(self) -> str:
        if not self.components:
            return "0"
        return ".".join(str(part) for part in self.components)

    def _padded(self, length: int) -> tuple[int, ...]:
        return self.components + (0,) * (length - len(self.components))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModVersion):
            return NotImplemented
        length = max(len(self.components), len(other.components))
        return self._padded(length) < other._padded(length)



def parseLenientVersion(raw: str | None) -> ModVersion:
    """
    Parse a dotted version identifier without ever raising.

    Rules (identical for every comparison helper in this module):
        - surrounding whitespace is stripped, a single leading "v" is dropped
        - the string is split on "."
        - a component that is a run of ASCII digits is read as an int
        - any other component (empty, "beta", "1a", "-3", ...) counts as 0
        - missing trailing components count as 0

    Examples:
        "1.2.3"   -> 1.2.3
        "1.2"     -> 1.2      (== 1.2.0)
        "1..3"    -> 1.0.3
        "1.x.3"   -> 1.0.3
        "garbage" -> 0
        None, ""  -> 0
    """
    if raw is None:
        return ModVersion()

    text = str(raw).strip()
    if text.startswith("v") and len(text) > 1 and "0" <= text[1] <= "9":
        text = text[1:]
    if not text:
        return ModVersion()

    parts: list[int] = []
    for part in text.split("."):
        part = part.strip()
        parts.append(int(part) if _DIGITS_RE.fullmatch(part) else 0)
    return ModVersion(tuple(parts))



def _isUnbounded(bound: str | None) -> bool:
    return bound is None or not str(bound).strip() or str(bound).strip() == WILDCARD



def compareVersions(left: str | None, right: str | None) -> int:
    """Returns -1, 0 or 1 as `left` sorts before, equal to, or after `right`."""
    lhs = parseLenientVersion(left)
    rhs = parseLenientVersion(right)
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return 0



def isVersionAtOrAbove(version: str | None, minimum: str | None) -> bool:
    """True if `version` >= `minimum`. An empty or "*" minimum accepts anything."""
    if _isUnbounded(minimum):
        return True
    return compareVersions(version, minimum) >= 0



def isVersionAtOrBelow(version: str | None, maximum: str | None) -> bool:
    """True if `version` <= `maximum`. An empty or "*" maximum accepts anything."""
    if _isUnbounded(maximum):
        return True
    return compareVersions(version, maximum) <= 0



def versionInRange(version: str | None, minimum: str | None, maximum: str | None) -> bool:
    """Inclusive on both ends."""
    return isVersionAtOrAbove(version, minimum) and isVersionAtOrBelow(version, maximum)
