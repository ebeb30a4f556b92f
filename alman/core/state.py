# alman/core/state.py
"""
AppState - everything the CLI, TUI and history watcher share.

Owns the config, the frecency store with its tombstones, and the alias file
list. Loads state at start, saves after mutations. All store access goes
through one RLock, because the history watcher calls insert() from its own
thread while the TUI reads.

Corrupted state files are not fatal: they are replaced by empty state, and
a warning (kept in `warnings`) tells the user that the old data was dropped.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Callable, List, Optional

from alman.core import alias_ops
from alman.core.alias_suggester import AliasSuggester
from alman.core.command_entry import CommandEntry
from alman.core.frecency_store import FrecencyStore, TombstoneSet
from alman.core.generators import AliasSuggestion
from alman.core.ingestion import insert_command
from alman.errors import StateLoadError
from alman.utils import model_store
from alman.utils.alias_file import Alias
from alman.utils.config_manager import Config, data_dir

logger = logging.getLogger(__name__)

SuggesterFactory = Callable[[List[str]], AliasSuggester]


class AppState:
    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        directory: Optional[str] = None,
        alias_file: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        suggester_factory: Optional[SuggesterFactory] = None,
        own_name: Optional[str] = None,
    ):
        self.directory = directory or data_dir()
        self.config = config or Config(os.path.join(self.directory, "config.json"))
        self.alias_paths = self.config.alias_file_paths(alias_file, default_dir=self.directory)
        self.db_path = os.path.join(self.directory, model_store.DB_FILE)
        self.tombstone_path = os.path.join(self.directory, model_store.DELETED_COMMANDS_FILE)
        self.own_name = own_name
        self.warnings: List[str] = []

        self._clock = clock
        self._suggester_factory = suggester_factory
        self._lock = threading.RLock()
        self.store = self._new_store(TombstoneSet())

    def _new_store(self, tombstones: TombstoneSet) -> FrecencyStore:
        cfg = self.config
        return FrecencyStore(
            tombstones,
            rescale_threshold=int(cfg.get("rescale_threshold")),
            rescale_factor=float(cfg.get("rescale_factor")),
            min_length=int(cfg.get("min_command_length")),
            clock=self._clock,
        )

    def _discard_corrupt(self, err: StateLoadError) -> None:
        msg = (f"could not load {err.path} ({err.reason}); "
               f"starting with empty state, previous data in that file is discarded")
        logger.warning(msg)
        self.warnings.append(msg)

    # persistence ---------------------------------------------------------------
    def load(self) -> "AppState":
        with self._lock:
            try:
                tombstones = model_store.load_tombstones(self.tombstone_path)
            except StateLoadError as e:
                self._discard_corrupt(e)
                tombstones = TombstoneSet()
            store = self._new_store(tombstones)
            try:
                model_store.load_store_into(store, self.db_path)
            except StateLoadError as e:
                self._discard_corrupt(e)
                store = self._new_store(tombstones)
            self.store = store
        return self

    def save(self) -> None:
        with self._lock:
            model_store.save_store(self.store, self.db_path)
            model_store.save_tombstones(self.store.tombstones, self.tombstone_path)

    # core interface ---------------------------------------------------------------
    def insert(self, raw_command: str) -> List[str]:
        """Ingest a shell command line (all of its prefixes)."""
        with self._lock:
            return insert_command(raw_command, self.store, own_name=self.own_name)

    def add(self, text: str) -> Optional[CommandEntry]:
        with self._lock:
            return self.store.add(text)

    def remove(self, text: str) -> bool:
        with self._lock:
            return self.store.remove(text)

    def get_top(self, n: Optional[int] = None) -> List[CommandEntry]:
        """Top `n` commands with scores brought up to date first."""
        if n is None:
            n = int(self.config.get("top_commands"))
        with self._lock:
            self.store.refresh_all()
            return self.store.get_top(n)

    def suggester(self) -> AliasSuggester:
        """Fresh engine with a snapshot of the current aliases and system commands."""
        existing = [a for a, _ in self.aliases()]
        if self._suggester_factory is not None:
            return self._suggester_factory(existing)
        return AliasSuggester.from_environment(
            existing, timeout=float(self.config.get("shell_alias_timeout")),
        )

    def suggest(self, text: str, suggester: Optional[AliasSuggester] = None) -> List[AliasSuggestion]:
        return (suggester or self.suggester()).suggest(text)

    # alias lifecycle -----------------------------------------------------------
    def aliases(self) -> List[Alias]:
        return alias_ops.list_aliases(self.alias_paths)

    def add_alias(self, alias: str, command: str) -> bool:
        with self._lock:
            return alias_ops.add_alias(self.store, self.alias_paths, alias, command)

    def remove_alias(self, alias: str) -> str:
        with self._lock:
            return alias_ops.remove_alias(self.store, self.alias_paths, alias)

    def change_alias(self, old_alias: str, new_alias: str, command: Optional[str] = None) -> str:
        with self._lock:
            return alias_ops.change_alias(self.store, self.alias_paths, old_alias, new_alias, command)

    def delete_suggestion(self, command: str) -> bool:
        with self._lock:
            return alias_ops.delete_suggestion(self.store, command)
