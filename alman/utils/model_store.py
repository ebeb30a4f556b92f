# model_store.py - persistence for the command store and the tombstone set

# Files (JSON, under the data directory):
# - command_database.json: {command_list, reverse_command_map, total_num_commands, total_score}
# - deleted_commands.json: {deleted_commands: [...]}
# Writes go through a temp file + rename so a crash never leaves half a file.

import json
import logging
import os
import tempfile
from typing import Any, Dict, List

from alman.core.command_entry import CommandEntry
from alman.core.frecency_store import FrecencyStore, TombstoneSet
from alman.errors import StateLoadError

logger = logging.getLogger(__name__)

DB_FILE = "command_database.json"
DELETED_COMMANDS_FILE = "deleted_commands.json"


# Helper Functions ---------------
def atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    """Write JSON to `path` via temp file, fsync and rename."""
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    stem = os.path.splitext(os.path.basename(path))[0]
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=f".{stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tf:
            json.dump(data, tf, indent=2)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(temp_path, path)
        temp_path = None
    finally:
        if temp_path and os.path.exists(temp_path):
            try:
                os.unlink(temp_path)
            except OSError:
                pass


def _read_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except ValueError as e:
        raise StateLoadError(path, f"invalid JSON ({e})") from e
    except OSError as e:
        raise StateLoadError(path, f"unreadable ({e})") from e


def _parse_entries(path: str, items, what: str) -> List[CommandEntry]:
    out = []
    for item in items:
        try:
            out.append(CommandEntry.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StateLoadError(path, f"bad entry in {what}: {e}") from e
    return out


def reconcile(listed: List[CommandEntry], mapped: Dict[str, CommandEntry]) -> List[CommandEntry]:
    """
    Merge the two persisted views into one entry set.
    The map wins on conflicts; entries only present in the list are kept.
    """
    merged = dict(mapped)
    extra = 0
    for entry in listed:
        if entry.text not in merged:
            merged[entry.text] = entry
            extra += 1
    if extra or len(listed) != len(mapped):
        logger.warning(
            "command list (%d) and map (%d) disagree, rebuilt %d entries",
            len(listed), len(mapped), len(merged),
        )
    return list(merged.values())


# Command store ------------------------------------------
def save_store(store: FrecencyStore, path: str) -> None:
    atomic_write_json(path, store.to_dict())
    logger.debug("saved %d commands to %s", len(store), path)


def load_store_into(store: FrecencyStore, path: str) -> FrecencyStore:
    """
    Fill `store` from `path`. A missing file leaves it empty.
    Raises StateLoadError when the file cannot be parsed.
    """
    if not os.path.exists(path):
        store.load_entries([])
        return store

    data = _read_json(path)
    if not isinstance(data, dict):
        raise StateLoadError(path, "top level is not an object")

    listed_raw = data.get("command_list") or []
    mapped_raw = data.get("reverse_command_map") or {}
    if not isinstance(listed_raw, list) or not isinstance(mapped_raw, dict):
        raise StateLoadError(path, "command_list/reverse_command_map have the wrong shape")

    listed = _parse_entries(path, listed_raw, "command_list")
    mapped = {}
    for key, entry in zip(mapped_raw.keys(), _parse_entries(path, mapped_raw.values(), "reverse_command_map")):
        mapped[key] = entry if entry.text == key else CommandEntry(**{**entry.to_dict(), "text": key})

    store.load_entries(reconcile(listed, mapped))
    if (data.get("total_num_commands"), data.get("total_score")) != (store.total_entry_count, store.total_score):
        logger.info("stored totals out of date, recomputed for %s", path)
    logger.debug("loaded %d commands from %s", len(store), path)
    return store


# Tombstones ------------------
def save_tombstones(tombstones: TombstoneSet, path: str) -> None:
    atomic_write_json(path, tombstones.to_dict())


def load_tombstones(path: str) -> TombstoneSet:
    if not os.path.exists(path):
        return TombstoneSet()
    data = _read_json(path)
    texts = data.get("deleted_commands") if isinstance(data, dict) else None
    if not isinstance(texts, list) or not all(isinstance(t, str) for t in texts):
        raise StateLoadError(path, "deleted_commands is not a list of strings")
    return TombstoneSet(texts)
