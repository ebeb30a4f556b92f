# alman/core/alias_ops.py
"""
Alias lifecycle on top of the store and the alias files.

 - add_alias: write the alias and tombstone its command (no more suggestions for it)
 - remove_alias: delete the alias and make its command trackable again,
   unless another alias still stands for it
 - change_alias: remove + add
 - delete_suggestion: tombstone a command without creating an alias

Commands are whitespace-normalized the same way ingestion does it, so they
match the tracked texts.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from alman.core.frecency_store import FrecencyStore
from alman.core.ingestion import normalize_command
from alman.errors import AliasExists, AliasNotFound
from alman.utils import alias_file
from alman.utils.alias_file import Alias

logger = logging.getLogger(__name__)


def list_aliases(paths: Sequence[str]) -> List[Alias]:
    return alias_file.get_aliases_from_files(paths)


def add_alias(store: FrecencyStore, paths: Sequence[str], alias: str, command: str) -> bool:
    """False when `alias` is already defined in one of `paths`."""
    command = normalize_command(command)
    if not alias_file.add_alias_to_files(paths, alias, command):
        return False
    store.remove(command)
    return True


def remove_alias(store: FrecencyStore, paths: Sequence[str], alias: str) -> str:
    """Returns the command the alias stood for. Raises AliasNotFound."""
    command = alias_file.remove_alias_from_files(paths, alias)
    if command is None:
        raise AliasNotFound(alias)
    command = normalize_command(command)
    if any(normalize_command(other) == command for _, other in list_aliases(paths)):
        logger.debug("'%s' still has an alias, kept out of tracking", command)
    else:
        store.tombstones.discard(command)
    return command


def change_alias(
    store: FrecencyStore,
    paths: Sequence[str],
    old_alias: str,
    new_alias: str,
    command: Optional[str] = None,
) -> str:
    """Rename `old_alias` (and optionally re-point it). Returns the new command."""
    old_command = remove_alias(store, paths, old_alias)
    command = normalize_command(command or old_command)
    if not add_alias(store, paths, new_alias, command):
        # new name taken: put the old alias back
        add_alias(store, paths, old_alias, old_command)
        raise AliasExists(new_alias)
    logger.info("alias %s -> %s ('%s')", old_alias, new_alias, command)
    return command


def delete_suggestion(store: FrecencyStore, command: str) -> bool:
    return store.remove(normalize_command(command))
