# tui_app.py - alman TUI Application
# -------------------------------------------------------
# Terminal UI over the command store and the alias files.
# Features:
#  - Top commands table, refreshed against the current time
#  - Live filter as you type
#  - Ranked alias suggestions for the highlighted command
#  - Add the highlighted suggestion (or a typed alias), delete a suggestion
#  - Alias list view with removal
#  - Status line for every action
# -------------------------------------------------------

from __future__ import annotations

from typing import List, Optional, Sequence

from rich.markup import escape
from rich.text import Text

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Input, Static
from textual.widgets.data_table import CellDoesNotExist

from alman.core.alias_suggester import AliasSuggester
from alman.core.command_entry import CommandEntry
from alman.core.state import AppState
from alman.errors import AlmanError
from alman.utils.logger_utils import Log


def filter_entries(entries: Sequence[CommandEntry], text: str, limit: int) -> List[CommandEntry]:
    """Entries whose command contains `text` (case-insensitive), ranked order kept."""
    needle = text.strip().lower()
    if needle:
        entries = [e for e in entries if needle in e.text.lower()]
    return list(entries[:limit])


def selected_key(table: DataTable) -> Optional[str]:
    """Row key under the cursor, or None for an empty table."""
    if table.row_count == 0:
        return None
    try:
        return table.coordinate_to_cell_key(table.cursor_coordinate).row_key.value
    except CellDoesNotExist:
        return None


class StatusLine(Static):
    """Bottom line showing the result of the last action."""
    def ok(self, msg: str):
        self.update(f"[green]{escape(msg)}[/green]")

    def warn(self, msg: str):
        self.update(f"[yellow]{escape(msg)}[/yellow]")

    def fail(self, msg: str):
        self.update(f"[red]{escape(msg)}[/red]")


# Main Application -----------------------------------------------------------------
class AlmanApp(App):
    """
    Manages:
     - the commands / aliases tables
     - suggestions for the highlighted command
     - alias lifecycle actions, saved to disk right away
    """
    CSS_PATH = "tui_style.css"
    TITLE = "alman"

    # keyboard shortcuts (ctrl+ so they work while an Input has focus)
    BINDINGS = [
        ("ctrl+n", "add_alias", "Add alias"),
        ("ctrl+t", "delete", "Delete"),
        ("ctrl+o", "toggle_aliases", "Aliases"),
        ("ctrl+r", "refresh", "Refresh"),
        ("ctrl+q", "quit", "Quit"),
    ]

    filter_text = reactive("", init=False)
    show_aliases = reactive(False, init=False)

    def __init__(self, state: AppState):
        super().__init__()
        self.state = state
        self.limit = int(state.config.get("tui_commands"))
        self._suggester: Optional[AliasSuggester] = None

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Filter commands…", id="filter")
        with Horizontal(id="main"):
            with Container(id="left"):
                yield DataTable(id="commands")
                yield DataTable(id="aliases")
            with Container(id="right"):
                yield DataTable(id="suggestions")
                yield Input(placeholder="Alias name (Enter to add)", id="alias_input")
        yield StatusLine(id="status")
        yield Footer()

    def on_mount(self):
        commands = self.query_one("#commands", DataTable)
        commands.cursor_type = "row"
        commands.add_columns("Command", "Score", "Uses")

        suggestions = self.query_one("#suggestions", DataTable)
        suggestions.cursor_type = "row"
        suggestions.add_columns("Alias", "Reason")

        aliases = self.query_one("#aliases", DataTable)
        aliases.cursor_type = "row"
        aliases.add_columns("Alias", "Command")
        aliases.display = False

        for warning in self.state.warnings:
            self.status.warn(warning)
        self.reload_commands()
        commands.focus()

    @property
    def status(self) -> StatusLine:
        return self.query_one(StatusLine)

    @property
    def suggester(self) -> AliasSuggester:
        # rebuilt lazily after alias changes; the PATH scan is slow
        if self._suggester is None:
            with Log.time_block("tui_suggester"):
                self._suggester = self.state.suggester()
        return self._suggester

    # Tables ------------------------------------------------------------------
    def reload_commands(self):
        table = self.query_one("#commands", DataTable)
        previous = selected_key(table)
        everything = self.state.get_top(len(self.state.store))
        rows = filter_entries(everything, self.filter_text, self.limit)

        table.clear()
        for entry in rows:
            table.add_row(Text(entry.text), str(entry.score), str(entry.frequency), key=entry.text)
        if previous is not None:
            for i, entry in enumerate(rows):
                if entry.text == previous:
                    table.move_cursor(row=i)
                    break
        self.show_suggestions(selected_key(table))

    def show_suggestions(self, command: Optional[str]):
        table = self.query_one("#suggestions", DataTable)
        table.clear()
        if command is None:
            return
        for s in self.state.suggest(command, self.suggester):
            table.add_row(Text(s.alias), Text(s.reason), key=s.alias)

    def reload_aliases(self):
        table = self.query_one("#aliases", DataTable)
        table.clear()
        for alias, command in self.state.aliases():
            table.add_row(Text(alias), Text(command), key=alias)

    # Events ---------------------------------------------------------------------
    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter":
            self.filter_text = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "alias_input":
            self.action_add_alias()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.data_table.id == "commands":
            self.show_suggestions(event.row_key.value if event.row_key else None)

    # Reactive state (watcher functions) ---------------------------------------
    def watch_filter_text(self, text: str):
        self.reload_commands()

    def watch_show_aliases(self, show: bool):
        self.query_one("#commands", DataTable).display = not show
        aliases = self.query_one("#aliases", DataTable)
        aliases.display = show
        if show:
            self.reload_aliases()
            aliases.focus()
        else:
            self.query_one("#commands", DataTable).focus()

    # Actions ----------------------------------------------------------------------
    def action_add_alias(self):
        """Typed alias if any, else the highlighted suggestion, for the highlighted command."""
        command = selected_key(self.query_one("#commands", DataTable))
        if command is None:
            self.status.warn("No command selected")
            return
        alias_input = self.query_one("#alias_input", Input)
        alias = alias_input.value.strip() or selected_key(self.query_one("#suggestions", DataTable))
        if not alias:
            self.status.warn("Type an alias or pick a suggestion")
            return

        if not self.state.add_alias(alias, command):
            self.status.fail(f"Alias '{alias}' already exists")
            return
        self.state.save()
        Log.write(f"tui added alias {alias}='{command}'")
        alias_input.value = ""
        self._suggester = None
        self.status.ok(f"Added alias {alias} -> {command}")
        self.reload_commands()
        if self.show_aliases:
            self.reload_aliases()

    def action_delete(self):
        """Delete suggestion in the commands view, remove alias in the aliases view."""
        if self.show_aliases:
            self._remove_selected_alias()
            return
        command = selected_key(self.query_one("#commands", DataTable))
        if command is None:
            self.status.warn("No command selected")
            return
        self.state.delete_suggestion(command)
        self.state.save()
        self.status.ok(f"No longer suggesting '{command}'")
        self.reload_commands()

    def _remove_selected_alias(self):
        alias = selected_key(self.query_one("#aliases", DataTable))
        if alias is None:
            self.status.warn("No alias selected")
            return
        try:
            command = self.state.remove_alias(alias)
        except AlmanError as e:
            self.status.fail(str(e))
            return
        self.state.save()
        self._suggester = None
        self.status.ok(f"Removed alias {alias} ({command})")
        self.reload_aliases()
        self.reload_commands()

    def action_toggle_aliases(self):
        self.show_aliases = not self.show_aliases

    def action_refresh(self):
        self._suggester = None
        self.reload_commands()
        if self.show_aliases:
            self.reload_aliases()
        self.status.ok("Refreshed")


def run_tui(state: AppState) -> None:
    AlmanApp(state).run()


if __name__ == "__main__":
    run_tui(AppState().load())
