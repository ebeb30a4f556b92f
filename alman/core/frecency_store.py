# alman/core/frecency_store.py
"""
FrecencyStore - dual-indexed store of scored shell commands.

Two views over the same entries:
 - _by_text: text -> CommandEntry, O(1) existence lookup
 - _ranked: sorted list of (-score, text) keys, kept ordered with bisect

Only _insert()/_discard() touch the indexes and the aggregate counters, so
the two views and totals cannot drift apart. Entries are immutable; an update
is always discard(old) + insert(new).

TombstoneSet holds command texts the user removed explicitly. A tombstoned
text is ignored by add() until it leaves the set (e.g. its alias is deleted).
"""

from __future__ import annotations

import logging
import time
from bisect import bisect_left, insort
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from alman.core.command_entry import CommandEntry

logger = logging.getLogger(__name__)

DEFAULT_RESCALE_THRESHOLD = 250
DEFAULT_RESCALE_FACTOR = 0.1
DEFAULT_MIN_LENGTH = 5
DEFAULT_TOP_N = 5


class TombstoneSet:
    """Set of command texts excluded from tracking."""

    def __init__(self, texts: Optional[Iterable[str]] = None):
        self._texts = set(texts or ())

    def __contains__(self, text: str) -> bool:
        return text in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._texts))

    def add(self, text: str) -> bool:
        """Returns False if `text` was already tombstoned."""
        if text in self._texts:
            return False
        self._texts.add(text)
        return True

    def discard(self, text: str) -> bool:
        """Make `text` trackable again. Returns False if it was not tombstoned."""
        if text not in self._texts:
            return False
        self._texts.remove(text)
        return True

    def to_dict(self) -> Dict[str, List[str]]:
        return {"deleted_commands": sorted(self._texts)}


class FrecencyStore:
    """
    Ranked command store.
    Public API:
        add(text)
        remove(text)
        get_top(n)
        refresh_all()
        rescale()
    Invariants after every public call:
        same entries in both indexes, total_score == sum of scores,
        total_entry_count == number of entries.
    """

    def __init__(
        self,
        tombstones: Optional[TombstoneSet] = None,
        *,
        rescale_threshold: int = DEFAULT_RESCALE_THRESHOLD,
        rescale_factor: float = DEFAULT_RESCALE_FACTOR,
        min_length: int = DEFAULT_MIN_LENGTH,
        clock: Callable[[], float] = time.time,
    ):
        self.tombstones = tombstones if tombstones is not None else TombstoneSet()
        self.rescale_threshold = int(rescale_threshold)
        self.rescale_factor = float(rescale_factor)
        self.min_length = int(min_length)
        self._clock = clock

        self._by_text: Dict[str, CommandEntry] = {}
        self._ranked: List[Tuple[int, str]] = []
        self.total_entry_count = 0
        self.total_score = 0

    # index maintenance ---------------------------------------------------
    def _insert(self, entry: CommandEntry) -> None:
        self._by_text[entry.text] = entry
        insort(self._ranked, entry.sort_key)
        self.total_entry_count += 1
        self.total_score += entry.score

    def _discard(self, entry: CommandEntry) -> None:
        key = entry.sort_key
        i = bisect_left(self._ranked, key)
        if i < len(self._ranked) and self._ranked[i] == key:
            del self._ranked[i]
        del self._by_text[entry.text]
        self.total_entry_count -= 1
        self.total_score -= entry.score

    def _now(self) -> int:
        return int(self._clock())

    def _is_noise(self, entry: CommandEntry) -> bool:
        # short single-word commands are not worth an alias
        return entry.length <= self.min_length and entry.number_of_words == 1

    # public API ------------------------------------------------------------
    def add(self, text: str) -> Optional[CommandEntry]:
        """
        Record one use of `text`.
        Returns the stored entry, or None when the text is tombstoned or filtered.
        """
        if text in self.tombstones:
            return None

        now = self._now()
        existing = self._by_text.get(text)
        if existing is not None:
            self._discard(existing)
            entry = existing.touched(now)
        else:
            entry = CommandEntry.new(text, now)
            if self._is_noise(entry):
                return None
        self._insert(entry)

        if self.total_score > self.rescale_threshold:
            self.rescale()
        return self._by_text.get(text)

    def remove(self, text: str) -> bool:
        """
        Tombstone `text` and drop its entry.
        Idempotent: a text that is already tombstoned is left alone.
        """
        if not self.tombstones.add(text):
            return False
        entry = self._by_text.get(text)
        if entry is not None:
            self._discard(entry)
        return True

    def get_top(self, n: int = DEFAULT_TOP_N) -> List[CommandEntry]:
        if n <= 0:
            return []
        return [self._by_text[text] for _, text in self._ranked[:n]]

    def refresh_all(self) -> None:
        """Recompute every score against the current time."""
        now = self._now()
        for entry in list(self._by_text.values()):
            self._discard(entry)
            self._insert(entry.rescored(now))
        if self.total_score > self.rescale_threshold:
            self.rescale()

    def rescale(self) -> None:
        """Decay all frequencies by rescale_factor; entries decayed to 0 are dropped."""
        now = self._now()
        before = (self.total_entry_count, self.total_score)
        survivors = []
        for entry in self._by_text.values():
            decayed = entry.decayed(self.rescale_factor, now)
            if decayed.frequency > 0:
                survivors.append(decayed)

        self._by_text = {}
        self._ranked = []
        self.total_entry_count = 0
        self.total_score = 0
        for entry in survivors:
            self._insert(entry)

        logger.info(
            "rescaled store: %d entries / score %d -> %d entries / score %d",
            before[0], before[1], self.total_entry_count, self.total_score,
        )

    # read helpers ----------------------------------------------------------
    def get(self, text: str) -> Optional[CommandEntry]:
        return self._by_text.get(text)

    def __contains__(self, text: str) -> bool:
        return text in self._by_text

    def __len__(self) -> int:
        return len(self._by_text)

    def entries(self) -> List[CommandEntry]:
        """All entries in ranked order."""
        return [self._by_text[text] for _, text in self._ranked]

    def ranked_texts(self) -> List[str]:
        return [text for _, text in self._ranked]

    # persistence -------------------------------------------------------------
    def load_entries(self, entries: Iterable[CommandEntry]) -> None:
        """Replace the contents with `entries` (last one wins per text); totals recomputed."""
        self._by_text = {}
        self._ranked = []
        self.total_entry_count = 0
        self.total_score = 0
        for entry in entries:
            old = self._by_text.get(entry.text)
            if old is not None:
                self._discard(old)
            self._insert(entry)

    def to_dict(self) -> Dict[str, object]:
        ranked = self.entries()
        return {
            "command_list": [e.to_dict() for e in ranked],
            "reverse_command_map": {e.text: e.to_dict() for e in ranked},
            "total_num_commands": self.total_entry_count,
            "total_score": self.total_score,
        }
