# alias_file.py - read/write shell alias files made of `alias name='command'` lines

import logging
import os
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Alias = Tuple[str, str]  # (alias, command)


def parse_alias_line(line: str) -> Optional[Alias]:
    """
    "alias gs='git status'" -> ("gs", "git status").
    Returns None for anything that is not an alias definition.
    """
    line = line.strip()
    if not line.startswith("alias "):
        return None
    body = line[len("alias "):].strip()
    if "=" not in body:
        return None
    name, command = body.split("=", 1)
    name = name.strip()
    command = command.strip()
    if len(command) >= 2 and command[0] == command[-1] and command[0] in "'\"":
        quote = command[0]
        command = command[1:-1]
        if quote == "'":
            command = command.replace("'\\''", "'")
    if not name:
        return None
    return name, command


def format_alias_line(alias: str, command: str) -> str:
    escaped = command.replace("'", "'\\''")
    return f"alias {alias}='{escaped}'"


def _read_lines(path: str) -> List[str]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read().splitlines()


def _write_lines(path: str, lines: Sequence[str]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + ("\n" if lines else ""))


def get_aliases(path: str) -> List[Alias]:
    """All aliases defined in `path`, in file order. Missing file -> []."""
    out = []
    for line in _read_lines(path):
        parsed = parse_alias_line(line)
        if parsed:
            out.append(parsed)
    return out


def add_alias_to_file(path: str, alias: str, command: str) -> bool:
    """Append an alias unless the name is already defined. Returns True if written."""
    if any(a == alias for a, _ in get_aliases(path)):
        return False
    lines = _read_lines(path)
    lines.append(format_alias_line(alias, command))
    _write_lines(path, lines)
    logger.info("added alias %s='%s' to %s", alias, command, path)
    return True


def remove_alias_from_file(path: str, alias: str) -> Optional[str]:
    """Drop the definition of `alias`; other lines are kept. Returns its command, or None."""
    lines = _read_lines(path)
    removed = None
    kept = []
    for line in lines:
        parsed = parse_alias_line(line)
        if removed is None and parsed and parsed[0] == alias:
            removed = parsed[1]
            continue
        kept.append(line)
    if removed is None:
        return None
    _write_lines(path, kept)
    logger.info("removed alias %s from %s", alias, path)
    return removed


# several tracked files, the first is primary ----------------------------
def get_aliases_from_files(paths: Sequence[str]) -> List[Alias]:
    out = []
    for p in paths:
        out.extend(get_aliases(p))
    return out


def find_alias(paths: Sequence[str], alias: str) -> Optional[Tuple[str, str]]:
    """(path, command) of the first definition of `alias`."""
    for p in paths:
        for a, command in get_aliases(p):
            if a == alias:
                return p, command
    return None


def add_alias_to_files(paths: Sequence[str], alias: str, command: str) -> bool:
    if not paths or find_alias(paths, alias) is not None:
        return False
    return add_alias_to_file(paths[0], alias, command)


def remove_alias_from_files(paths: Sequence[str], alias: str) -> Optional[str]:
    hit = find_alias(paths, alias)
    if hit is None:
        return None
    return remove_alias_from_file(hit[0], alias)
