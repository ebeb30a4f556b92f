# alman/core/system_commands.py
# names an alias must not shadow: executables on PATH + the shell's own aliases

import logging
import os
import subprocess
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)


def path_executables(path: Optional[str] = None) -> Set[str]:
    """Names of executable files in every directory of `path` (default $PATH)."""
    if path is None:
        path = os.environ.get("PATH", "")
    names: Set[str] = set()
    for directory in path.split(os.pathsep):
        if not directory or not os.path.isdir(directory):
            continue
        try:
            entries = list(os.scandir(directory))
        except OSError as e:
            logger.debug("cannot list %s: %s", directory, e)
            continue
        for entry in entries:
            try:
                if entry.is_file() and os.access(entry.path, os.X_OK):
                    names.add(entry.name)
            except OSError:
                continue
    return names


def parse_alias_output(lines: Iterable[str]) -> Set[str]:
    """
    Alias names from `alias` builtin output.
    bash prints "alias ll='ls -l'", zsh prints "ll='ls -l'".
    """
    names: Set[str] = set()
    for line in lines:
        line = line.strip()
        if line.startswith("alias "):
            line = line[len("alias "):]
        name = line.split("=", 1)[0].strip().strip("'\"").strip()
        if name:
            names.add(name)
    return names


def shell_aliases(shell: Optional[str] = None, timeout: float = 2.0) -> Set[str]:
    """Ask the user's interactive shell for its alias table. Empty on any failure."""
    shell = shell or os.environ.get("SHELL")
    if not shell:
        return set()
    try:
        proc = subprocess.run(
            [shell, "-i", "-c", "alias"],
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("shell alias lookup via %s failed: %s", shell, e)
        return set()
    return parse_alias_output(proc.stdout.splitlines())


def load_system_commands(timeout: float = 2.0) -> Set[str]:
    names = path_executables()
    names |= shell_aliases(timeout=timeout)
    logger.debug("discovered %d system command names", len(names))
    return names
