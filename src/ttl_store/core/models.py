from __future__ import annotations

import math
import typing as t
from dataclasses import dataclass

from . import codec

# ttl sentinel for entries that never expire; stored as exp == 0
NEVER = "NEVER"
NO_EXPIRY = 0

JSONValue = t.Any


def is_expired(exp: int, now: float) -> bool:
    """Return True when an entry with absolute expiry `exp` is dead at `now`."""
    if exp == NO_EXPIRY:
        return False
    return exp <= now


def expiry_from_ttl(ttl: t.Any, now: float) -> int:
    """Turn a relative ttl into an absolute epoch-seconds expiry.

    Numeric ttls (int, float, numeric str) are added to `now`. A positive ttl
    rounds up to the next whole second, so the entry lives at least `ttl`
    seconds; zero or negative ttls round down and are expired on write.
    NEVER, None and anything non-numeric mean no expiry.
    """
    seconds = _numeric_ttl(ttl)
    if seconds is None:
        return NO_EXPIRY
    if seconds > 0:
        return math.ceil(now + seconds)
    # exp == 0 would read as "never expires"
    return math.floor(now + seconds) or -1


def _numeric_ttl(ttl: t.Any) -> t.Optional[float]:
    if ttl is None or isinstance(ttl, bool):
        return None
    if isinstance(ttl, int):
        return ttl
    if isinstance(ttl, str):
        if ttl == NEVER:
            return None
        try:
            ttl = float(ttl.strip())
        except ValueError:
            return None
    if isinstance(ttl, float) and math.isfinite(ttl):
        return ttl
    return None


@dataclass(frozen=True)
class Entry:
    """One stored row: key, serialized value and absolute expiry."""

    key: str
    value: str
    exp: int = NO_EXPIRY

    def is_expired(self, now: float) -> bool:
        return is_expired(self.exp, now)

    def is_valid(self, now: float) -> bool:
        return not self.is_expired(now)

    def load(self) -> JSONValue:
        return codec.decode(self.value, key=self.key)
