# alman/core/alias_suggester.py
"""
AliasSuggester - proposes alias names for a command.

Pipeline per call:
 1. run every generator (generators.GENERATORS), each on its own
 2. drop candidates that clash with an existing alias or a system command,
    or that are shorter than 2 characters
 3. dedupe by alias name, first occurrence wins
 4. stable sort by category weight + (10 - len(alias)), highest first

The conflict sets are snapshots taken at construction; later changes to
alias files or PATH are not seen by an existing instance.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List, Optional, Sequence

from alman.core.generators import GENERATORS, AliasSuggestion, Generator, weight_of
from alman.core.system_commands import load_system_commands

logger = logging.getLogger(__name__)

MIN_ALIAS_LENGTH = 2


class AliasSuggester:
    """Read-only after construction; safe to share between threads."""

    def __init__(
        self,
        existing_aliases: Iterable[str] = (),
        system_commands: Iterable[str] = (),
        generators: Optional[Sequence[Generator]] = None,
    ):
        self.existing_aliases: FrozenSet[str] = frozenset(existing_aliases)
        self.system_commands: FrozenSet[str] = frozenset(system_commands)
        self.generators = tuple(generators if generators is not None else GENERATORS)

    @classmethod
    def from_environment(cls, existing_aliases: Iterable[str] = (), timeout: float = 2.0):
        """Snapshot PATH and the shell alias table now."""
        return cls(existing_aliases, load_system_commands(timeout=timeout))

    # conflicts --------------------------------------------------------------
    def has_conflict(self, alias: str) -> bool:
        return (
            len(alias) < MIN_ALIAS_LENGTH
            or alias in self.existing_aliases
            or alias in self.system_commands
        )

    # pipeline ------------------------------------------------------------------
    def candidates(self, command: str) -> List[AliasSuggestion]:
        """Raw generator output, unfiltered and unranked."""
        out: List[AliasSuggestion] = []
        if not command or not command.strip():
            return out
        for gen in self.generators:
            try:
                out.extend(gen(command))
            except Exception as e:
                logger.warning("generator %s failed on %r: %s",
                               getattr(gen, "__name__", gen), command, e)
        return out

    def suggest(self, command: str) -> List[AliasSuggestion]:
        """Ranked, conflict-free alias candidates for `command`."""
        seen = set()
        kept: List[AliasSuggestion] = []
        for cand in self.candidates(command):
            if self.has_conflict(cand.alias) or cand.alias in seen:
                continue
            seen.add(cand.alias)
            kept.append(cand)
        # sorted() is stable, equal weights keep generator order
        return sorted(kept, key=weight_of, reverse=True)
