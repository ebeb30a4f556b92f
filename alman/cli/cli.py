"""
cli.py - command line front end for alman
Features:
- alias management (add / remove / change / list) against the tracked alias files
- ranked alias suggestions for the most frecent commands
- shell integration: `alman init <shell>` prints the hook, the hook calls `alman custom`
- history import and a live history watcher
- Uses Rich for tables and formatting
"""

import argparse
import os
import sys
import time
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from alman import __version__
from alman.core.state import AppState
from alman.errors import AliasExists, AlmanError
from alman.shell_init import ShellOpts, render_shell_init
from alman.utils.config_manager import data_dir
from alman.utils.history_watcher import HistoryWatcher, default_history_files, import_history
from alman.utils.logger_utils import Log, configure_logging

console = Console()
err_console = Console(stderr=True)

LOG_FILE = "alman.log"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alman",
        description="Suggests shell aliases for the commands you type most.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-a", "--alias-file-path", help="alias file to read and write (primary)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")

    # init/custom are called from shell hooks and stay out of the help listing
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("add", help="add an alias")
    p.add_argument("alias")
    p.add_argument("-c", "--command", dest="alias_command", required=True, help="command the alias expands to")

    p = sub.add_parser("remove", help="remove an alias")
    p.add_argument("alias")

    sub.add_parser("list", help="list aliases from the tracked alias files")

    p = sub.add_parser("change", help="rename an alias (optionally with a new command)")
    p.add_argument("old_alias")
    p.add_argument("new_alias")
    p.add_argument("alias_command", nargs="?", metavar="COMMAND")

    p = sub.add_parser("get-suggestions", help="show alias suggestions for the top commands")
    p.add_argument("-n", "--number", type=int, default=None, help="how many commands to show")

    p = sub.add_parser("delete-suggestion", help="stop suggesting aliases for a command")
    p.add_argument("text", nargs="+", metavar="COMMAND")

    sub.add_parser("tui", help="interactive terminal UI")

    p = sub.add_parser("config", help="show or change settings")
    p.add_argument("key", nargs="?")
    p.add_argument("value", nargs="?")

    p = sub.add_parser("import-history", help="ingest shell history files")
    p.add_argument("paths", nargs="*", metavar="PATH")

    p = sub.add_parser("watch", help="ingest commands as they are appended to history files")
    p.add_argument("paths", nargs="*", metavar="PATH")

    p = sub.add_parser("init")
    p.add_argument("shell")

    p = sub.add_parser("custom")
    p.add_argument("text", nargs=argparse.REMAINDER, metavar="COMMAND")

    return parser


class CLI:
    """Runs one subcommand against a loaded AppState."""

    def __init__(self, state: AppState):
        self.state = state

    def run(self, args: argparse.Namespace) -> int:
        handler = getattr(self, "cmd_" + args.command.replace("-", "_"))
        return handler(args) or 0

    # alias management ----------------------------------------------------------
    def cmd_add(self, args) -> int:
        if not self.state.add_alias(args.alias, args.alias_command):
            raise AliasExists(args.alias)
        self.state.save()
        console.print(f"[green]Added:[/green] {escape(args.alias)} -> {escape(args.alias_command)}")
        return 0

    def cmd_remove(self, args) -> int:
        command = self.state.remove_alias(args.alias)
        self.state.save()
        console.print(f"[yellow]Removed:[/yellow] {escape(args.alias)} [dim]({escape(command)})[/dim]")
        return 0

    def cmd_change(self, args) -> int:
        command = self.state.change_alias(args.old_alias, args.new_alias, args.alias_command)
        self.state.save()
        console.print(f"[green]Changed:[/green] {escape(args.old_alias)} -> {escape(args.new_alias)} [dim]({escape(command)})[/dim]")
        return 0

    def cmd_list(self, args) -> int:
        aliases = self.state.aliases()
        if not aliases:
            console.print("[dim](no aliases)[/dim]")
            return 0
        table = Table(title="Aliases", box=box.SIMPLE, show_edge=False)
        table.add_column("Alias", style="bold cyan")
        table.add_column("Command")
        for alias, command in aliases:
            table.add_row(escape(alias), escape(command))
        console.print(table)
        return 0

    # suggestions -------------------------------------------------------------
    def cmd_get_suggestions(self, args) -> int:
        top = self.state.get_top(args.number)
        if not top:
            console.print("[dim](no commands tracked yet)[/dim]")
            self.state.save()
            return 0

        suggester = self.state.suggester()
        for entry in top:
            suggestions = self.state.suggest(entry.text, suggester)
            table = Table(
                title=f"{escape(entry.text)}  [dim]score {entry.score}, used {entry.frequency}x[/dim]",
                box=box.SIMPLE,
                show_edge=False,
            )
            table.add_column("#", justify="right", style="cyan")
            table.add_column("Alias", style="bold")
            table.add_column("Reason", style="dim")
            for i, s in enumerate(suggestions, 1):
                table.add_row(str(i), escape(s.alias), escape(s.reason))
            if not suggestions:
                table.add_row("", "(none)", "")
            console.print(table)

        # refresh_all may have rescaled the store
        self.state.save()
        return 0

    def cmd_delete_suggestion(self, args) -> int:
        text = " ".join(args.text)
        if self.state.delete_suggestion(text):
            console.print(f"[yellow]No longer suggesting:[/yellow] {escape(text)}")
        else:
            console.print(f"[dim]Already deleted:[/dim] {escape(text)}")
        self.state.save()
        return 0

    # settings ----------------------------------------------------------------
    def cmd_config(self, args) -> int:
        cfg = self.state.config
        if args.key is None:
            table = Table(title=f"Config ({cfg.path})", box=box.MINIMAL)
            table.add_column("Key", style="cyan")
            table.add_column("Value")
            for key, val in cfg.show():
                table.add_row(key, escape(repr(val)))
            console.print(table)
            return 0
        if args.value is None:
            console.print(f"{args.key} = {escape(repr(cfg.get(args.key)))}")
            return 0
        try:
            cfg.set(args.key, args.value)
        except KeyError:
            err_console.print(f"[red]Unknown config key:[/red] {args.key}")
            return 1
        except ValueError as e:
            err_console.print(f"[red]Bad value for {args.key}:[/red] {e}")
            return 1
        console.print(f"[green]Set[/green] {args.key} = {escape(repr(cfg.get(args.key)))}")
        return 0

    # history -----------------------------------------------------------------
    def cmd_import_history(self, args) -> int:
        paths = args.paths or [p for p in default_history_files() if os.path.exists(p)]
        if not paths:
            console.print("[dim](no history files found)[/dim]")
            return 0
        with Log.time_block("import_history"):
            count = import_history(paths, self.state.insert)
        self.state.save()
        console.print(f"[green]Imported[/green] {count} commands from {', '.join(paths)}")
        return 0

    def cmd_watch(self, args) -> int:
        def ingest(cmd: str):
            self.state.insert(cmd)
            self.state.save()

        watcher = HistoryWatcher(args.paths or default_history_files(), ingest)
        watched = watcher.start()
        if not watched:
            watcher.stop()
            err_console.print("[red]No history files to watch[/red]")
            return 1
        console.print(f"[cyan]Watching[/cyan] {', '.join(watched)} [dim](Ctrl+C to stop)[/dim]")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            watcher.stop()
        return 0

    # shell hooks ----------------------------------------------------------------
    def cmd_init(self, args) -> int:
        opts = ShellOpts.detect(self.state.directory, self.state.alias_paths[0])
        try:
            script = render_shell_init(args.shell, opts)
        except ValueError as e:
            err_console.print(f"[red]{e}[/red]")
            return 1
        # plain stdout: the script is eval'd by the shell
        sys.stdout.write(script)
        return 0

    def cmd_custom(self, args) -> int:
        self.state.insert(" ".join(args.text))
        self.state.save()
        return 0

    def cmd_tui(self, args) -> int:
        from alman.tui_app import run_tui
        run_tui(self.state)
        self.state.save()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    directory = data_dir()
    configure_logging(os.path.join(directory, LOG_FILE), verbose=args.verbose)

    state = AppState(directory=directory, alias_file=args.alias_file_path)
    with Log.time_block("load_state"):
        state.load()
    for warning in state.warnings:
        err_console.print(f"[yellow]warning:[/yellow] {warning}")

    try:
        return CLI(state).run(args)
    except AlmanError as e:
        err_console.print(f"[red]error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
