# alman/core/ingestion.py
# turns a raw shell command line into the prefixes fed to the store

import os
import sys
from typing import List, Optional

from alman.core.frecency_store import FrecencyStore


def normalize_command(raw: str) -> str:
    """Collapse whitespace runs and trim."""
    if not raw:
        return ""
    return " ".join(raw.split())


def command_prefixes(command: str) -> List[str]:
    """
    Left-to-right word prefixes of a normalized command.
    "git add ." -> ["git", "git add", "git add ."]
    """
    words = command.split()
    return [" ".join(words[:i]) for i in range(1, len(words) + 1)]


def program_name() -> str:
    """Base name the running program was invoked as (the package under `python -m`)."""
    if not sys.argv or not sys.argv[0]:
        return ""
    name = os.path.basename(sys.argv[0])
    if name == "__main__.py":
        return os.path.basename(os.path.dirname(os.path.abspath(sys.argv[0])))
    return name


def is_self_invocation(first_word: str, own_name: str) -> bool:
    if not own_name:
        return False
    return first_word == own_name or os.path.basename(first_word) == own_name


def insert_command(
    raw: str,
    store: FrecencyStore,
    own_name: Optional[str] = None,
) -> List[str]:
    """
    Ingest one shell command line.
    Every prefix is added once; the last prefix is the full command.
    Returns the prefixes that were offered to the store.
    """
    command = normalize_command(raw)
    if not command:
        return []

    if own_name is None:
        own_name = program_name()
    if is_self_invocation(command.split()[0], own_name):
        return []

    prefixes = command_prefixes(command)
    for prefix in prefixes:
        store.add(prefix)
    return prefixes
