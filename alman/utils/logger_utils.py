# logger_utils.py - logging setup, plus small helpers for messages and timings

import logging
import os
import sys
import time
from typing import Optional

ROOT_LOGGER = "alman"


class _ColorFormatter(logging.Formatter):
    """Console formatter that colors the level name."""
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = True):
        super().__init__("%(levelname)-7s | %(message)s")
        self.use_color = use_color

    def format(self, record):
        line = super().format(record)
        color = self.COLORS.get(record.levelname)
        if self.use_color and color:
            return f"{color}{line}{self.COLORS['RESET']}"
        return line


def configure_logging(log_path: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """
    Set up the `alman` logger once per process:
     - file handler (DEBUG) at log_path, when given
     - stderr handler, WARNING (DEBUG with verbose)
    Calling it again replaces the handlers.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(_ColorFormatter(use_color=sys.stderr.isatty()))
    root.addHandler(console)

    if log_path:
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            fh = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            root.warning("cannot open log file %s: %s", log_path, e)
        else:
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(
                "[%(asctime)s] %(levelname)-7s %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            ))
            root.addHandler(fh)

    root.propagate = False
    return root


class Log:
    """Shortcuts used by the CLI/TUI layers."""

    _logger = logging.getLogger(ROOT_LOGGER)

    @staticmethod
    def write(msg: str, level: str = "INFO"):
        Log._logger.log(getattr(logging, level.upper(), logging.INFO), msg)

    @staticmethod
    def metric(tag, value, unit=""):
        """Record a metric line, e.g. `suggest: 0.012s`."""
        Log._logger.debug("%s: %s%s", tag, value, unit)

    @staticmethod
    def time_block(label):
        """
        Measure a block:
            with Log.time_block("load_state"):
                state.load()
        """
        return _Timer(label)


class _Timer:
    """Context manager used by Log.time_block."""
    def __init__(self, label):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        Log.metric(f"{self.label} done", round(self.elapsed, 3), "s")
        return False
