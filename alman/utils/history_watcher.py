# history_watcher.py - feed shell history files into the command store
#
# - parse_history_line(): bash lines are plain commands, zsh extended history
#   lines look like ": 1700000000:0;git status"
# - import_history(): bulk ingest of whole files
# - HistoryWatcher: watchdog observer that ingests every line the shell
#   appends to a history file, keeping a byte offset per file

import logging
import os
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILES = (".zsh_history", ".bash_history")

Ingest = Callable[[str], object]


def default_history_files(home: Optional[str] = None) -> List[str]:
    home = home or os.path.expanduser("~")
    return [os.path.join(home, name) for name in DEFAULT_HISTORY_FILES]


def parse_history_line(line: str) -> Optional[str]:
    line = line.rstrip("\n")
    if line.startswith(": ") and ";" in line:
        # zsh extended history
        line = line.split(";", 1)[1]
    elif line.startswith("#") and line[1:].strip().isdigit():
        # bash HISTTIMEFORMAT timestamp line
        return None
    line = line.strip()
    return line or None


def read_history(path: str) -> List[str]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return [cmd for cmd in (parse_history_line(l) for l in f) if cmd]


def file_size(path: str) -> int:
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


def read_appended(path: str, offset: int) -> Tuple[List[str], int]:
    """
    Commands on the complete lines written after byte `offset`.
    Returns them with the offset to resume from. A file shorter than
    `offset` was truncated or replaced and is read from the start.
    A trailing line without its newline is left for the next call.
    """
    if file_size(path) < offset:
        offset = 0
    try:
        with open(path, "rb") as f:
            f.seek(offset)
            chunk = f.read()
    except OSError:
        return [], offset
    end = chunk.rfind(b"\n")
    if end < 0:
        return [], offset
    text = chunk[:end + 1].decode("utf-8", errors="replace")
    commands = [cmd for cmd in (parse_history_line(l) for l in text.splitlines()) if cmd]
    return commands, offset + end + 1


def import_history(paths: Iterable[str], ingest: Ingest) -> int:
    """Ingest every command of every file; returns the count."""
    count = 0
    for path in paths:
        for cmd in read_history(path):
            ingest(cmd)
            count += 1
        logger.info("imported history from %s", path)
    return count


class HistoryFileHandler(FileSystemEventHandler):
    """
    Ingests every command appended to a watched file.
    Content present when the handler is built is not ingested.
    zsh with HIST_SAVE_BY_COPY replaces the file by rename, so created and
    moved-to events are read the same way as modifications.
    """

    def __init__(self, paths: Iterable[str], ingest: Ingest):
        self.paths = {os.path.abspath(p) for p in paths}
        self.ingest = ingest
        self._offsets: Dict[str, int] = {p: file_size(p) for p in self.paths}

    def on_modified(self, event):
        if not event.is_directory:
            self.consume(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self.consume(event.src_path)

    def on_moved(self, event):
        if not event.is_directory:
            self.consume(event.dest_path)

    def consume(self, path: str) -> int:
        """Ingest the new lines of `path` if it is watched; returns how many."""
        path = os.path.abspath(path)
        if path not in self.paths:
            return 0
        commands, self._offsets[path] = read_appended(path, self._offsets.get(path, 0))
        for cmd in commands:
            logger.debug("history %s: %s", path, cmd)
            self.ingest(cmd)
        return len(commands)


class HistoryWatcher:
    """
    Watches history files via their parent directories.
    Usage:
        watcher = HistoryWatcher(paths, state.insert)
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(self, paths: Iterable[str], ingest: Ingest):
        self.paths = [os.path.abspath(p) for p in paths if os.path.exists(p)]
        self.handler = HistoryFileHandler(self.paths, ingest)
        self.observer = Observer()

    def start(self) -> List[str]:
        for directory in sorted({os.path.dirname(p) for p in self.paths}):
            self.observer.schedule(self.handler, directory, recursive=False)
        self.observer.start()
        logger.info("watching %s", ", ".join(self.paths) or "(nothing)")
        return self.paths

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()
