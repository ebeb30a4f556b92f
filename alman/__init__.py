"""alman - learns the shell commands you use most and suggests aliases for them."""

__version__ = "0.1.0"
