# alman/core/command_entry.py
"""
CommandEntry - one tracked shell command and its frecency score.

Entries are immutable: the store replaces an entry instead of mutating it,
because the entry's position in the ordered index depends on its score.

Score table (seconds since last access -> multiplier):
    <= 1 hour   4.0
    <= 1 day    2.0
    <= 1 week   0.5
    older       0.25
score = floor(mult * length ** 0.6 * frequency)
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

HOUR = 3600
DAY = 86400
WEEK = 604800

# (max age in seconds, multiplier), checked in order
RECENCY_TABLE: Tuple[Tuple[float, float], ...] = (
    (HOUR, 4.0),
    (DAY, 2.0),
    (WEEK, 0.5),
)
STALE_MULTIPLIER = 0.25
LENGTH_EXPONENT = 3.0 / 5.0

# persisted counters are 32-bit in the on-disk record
INT32_MAX = 2 ** 31 - 1


def saturate(value: float, upper: int = INT32_MAX, lower: int = 0) -> int:
    """Clamp a numeric value into [lower, upper] and return it as int."""
    if value != value:  # NaN
        return lower
    if value >= upper:
        return upper
    if value <= lower:
        return lower
    return int(value)


def now_seconds() -> int:
    return int(time.time())


def recency_multiplier(age: float) -> float:
    for limit, mult in RECENCY_TABLE:
        if age <= limit:
            return mult
    return STALE_MULTIPLIER


def score(entry: "CommandEntry", now: Optional[int] = None) -> int:
    """Frecency score of `entry` at unix time `now`."""
    if now is None:
        now = now_seconds()
    mult = recency_multiplier(now - entry.last_access_time)
    raw = mult * (float(entry.length) ** LENGTH_EXPONENT) * float(entry.frequency)
    return saturate(math.floor(raw))


@dataclass(frozen=True)
class CommandEntry:
    """A scored command. `score` is derived; use the helpers below to change an entry."""

    text: str
    length: int
    number_of_words: int
    frequency: int
    last_access_time: int
    score: int = 0

    @classmethod
    def new(cls, text: str, now: Optional[int] = None) -> "CommandEntry":
        """Fresh entry for `text`, first seen at `now`."""
        if now is None:
            now = now_seconds()
        words = text.split()
        base = cls(
            text=text,
            length=saturate(sum(len(w) for w in words)),
            number_of_words=saturate(len(words)),
            frequency=1,
            last_access_time=int(now),
        )
        return base.rescored(now)

    # derived copies --------------------------------------------------
    def rescored(self, now: Optional[int] = None) -> "CommandEntry":
        return replace(self, score=score(self, now))

    def touched(self, now: Optional[int] = None) -> "CommandEntry":
        """Repeat use: frequency + 1, access time refreshed, score recomputed."""
        if now is None:
            now = now_seconds()
        bumped = replace(
            self,
            frequency=saturate(self.frequency + 1),
            last_access_time=int(now),
        )
        return bumped.rescored(now)

    def decayed(self, factor: float, now: Optional[int] = None) -> "CommandEntry":
        """Frequency scaled by `factor` and rounded half-up; may reach 0."""
        freq = saturate(math.floor(self.frequency * factor + 0.5))
        return replace(self, frequency=freq).rescored(now)

    # ordering key for the ranked index: score desc, text asc
    @property
    def sort_key(self) -> Tuple[int, str]:
        return (-self.score, self.text)

    # serialization ----------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "length": self.length,
            "number_of_words": self.number_of_words,
            "frequency": self.frequency,
            "last_access_time": self.last_access_time,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommandEntry":
        text = data.get("text", data.get("command_text"))
        if not isinstance(text, str):
            raise ValueError("entry has no command text")
        return cls(
            text=text,
            length=saturate(int(data["length"])),
            number_of_words=saturate(int(data["number_of_words"])),
            frequency=saturate(int(data["frequency"])),
            last_access_time=int(data["last_access_time"]),
            score=saturate(int(data["score"])),
        )
