# config_manager.py - JSON config manager

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "ALMAN_DATA_DIR"
ALIAS_FILE_ENV = "ALMAN_ALIAS_FILE"
CONFIG_FILE = "config.json"
DEFAULT_ALIAS_FILE = "aliases"

DEFAULTS: Dict[str, Any] = {
    "alias_file_paths": [],      # first entry is the primary file
    "rescale_threshold": 250,    # total score that triggers a rescale
    "rescale_factor": 0.1,       # frequency multiplier on rescale
    "min_command_length": 5,     # single words this short are not tracked
    "top_commands": 5,           # default n for get-suggestions
    "tui_commands": 20,          # commands listed by the TUI
    "shell_alias_timeout": 2.0,  # seconds to wait for `$SHELL -i -c alias`
}


def data_dir() -> str:
    """~/.alman unless ALMAN_DATA_DIR is set."""
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return os.path.expanduser(env)
    return os.path.join(os.path.expanduser("~"), ".alman")


class Config:
    def __init__(self, path: Optional[str] = None):
        self.path = path or os.path.join(data_dir(), CONFIG_FILE)
        self.data: Dict[str, Any] = {k: (list(v) if isinstance(v, list) else v)
                                     for k, v in DEFAULTS.items()}
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("config %s unreadable, using defaults: %s", self.path, e)
            return
        if not isinstance(loaded, dict):
            logger.warning("config %s is not an object, using defaults", self.path)
            return
        self.data.update(loaded)

    def save(self):
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def show(self) -> List[Tuple[str, Any]]:
        return sorted(self.data.items())

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, DEFAULTS.get(key, default))

    def set(self, key: str, val: Any):
        """Coerce `val` to the default's type and save. Unknown keys raise KeyError."""
        if key not in DEFAULTS:
            raise KeyError(key)
        kind = type(DEFAULTS[key])
        if kind is list:
            val = [p for p in str(val).split(os.pathsep) if p] if isinstance(val, str) else list(val)
        else:
            val = kind(val)
        self.data[key] = val
        self.save()

    # derived values ---------------------------------------------------
    def alias_file_paths(self, override: Optional[str] = None, default_dir: Optional[str] = None) -> List[str]:
        """
        Tracked alias files, primary first.
        Precedence for the primary: override, $ALMAN_ALIAS_FILE, config, <data_dir>/aliases.
        """
        paths = [os.path.expanduser(p) for p in self.data.get("alias_file_paths") or []]
        primary = override or os.environ.get(ALIAS_FILE_ENV)
        if primary:
            primary = os.path.expanduser(primary)
            paths = [primary] + [p for p in paths if p != primary]
        if not paths:
            paths = [os.path.join(default_dir or data_dir(), DEFAULT_ALIAS_FILE)]
        return paths

    def add_alias_file(self, path: str):
        path = os.path.expanduser(path)
        paths = list(self.data.get("alias_file_paths") or [])
        if path not in paths:
            paths.append(path)
            self.data["alias_file_paths"] = paths
            self.save()
