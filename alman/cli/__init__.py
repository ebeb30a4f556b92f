from alman.cli.cli import CLI, build_parser, main

__all__ = ["CLI", "build_parser", "main"]
