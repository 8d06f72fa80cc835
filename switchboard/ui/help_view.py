"""
Help overlay listing every command by category.

``/`` starts a search that narrows the list with the registry's ranked
search; Enter on a command closes help and runs it.
"""

import logging
from collections.abc import Callable
from typing import List, Optional, Union

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from switchboard.commands import CategoryGroup, Command, CommandCategory, CommandRegistry
from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult

logger = logging.getLogger(__name__)

# A row is either a category heading or a command
Row = Union[CommandCategory, Command]


def group_commands(registry: CommandRegistry, query: str = "") -> List[CategoryGroup]:
    """Commands grouped by category; filtered by ranked search if query is set."""
    if not query:
        return registry.get_by_category()
    matched = registry.search(query)
    groups = []
    for category in CommandCategory.display_order():
        commands = tuple(cmd for cmd in matched if cmd.category is category)
        if commands:
            groups.append(CategoryGroup(category, commands))
    return groups


def describe_command(cmd: Command) -> Text:
    text = Text("  ")
    text.append(f":{cmd.name}", style="bold cyan")
    if cmd.aliases:
        text.append(", " + ", ".join(f":{a}" for a in cmd.aliases), style="dim")
    text.append(f"  {cmd.description}")
    if cmd.shortcut:
        text.append(f"  <{cmd.shortcut}>", style="dim")
    return text


class HelpOverlay(Vertical):
    """Categorised command list with search."""

    DEFAULT_CSS = """
    HelpOverlay {
        height: 1fr;
        border: round $primary;
        background: $surface;
    }

    #help-search {
        height: 1;
        padding: 0 1;
    }

    #help-commands {
        height: 1fr;
    }

    #help-footer {
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        registry: CommandRegistry,
        on_execute: Callable[[str], None],
        on_close: Callable[[], None],
    ):
        super().__init__(id="help")
        self.registry = registry
        self.on_execute = on_execute
        self.on_close = on_close
        self.query_text = ""
        self.searching = False
        self.rows: List[Row] = []
        self.selected = 0  # Index into rows, always a command row when any exist
        self._build()

    def compose(self) -> ComposeResult:
        yield Static(self._search_line(), id="help-search")
        yield OptionList(id="help-commands")
        yield Static("j/k navigate  / search  Enter execute  Esc close", id="help-footer")

    def on_mount(self) -> None:
        self.border_title = "Help"
        self.query_one(OptionList).can_focus = False
        self._sync()

    # -- state ---------------------------------------------------------------------

    def _build(self) -> None:
        self.rows = []
        for group in group_commands(self.registry, self.query_text):
            self.rows.append(group.category)
            self.rows.extend(group.commands)
        commands = self.command_indexes()
        self.selected = commands[0] if commands else 0

    def command_indexes(self) -> List[int]:
        return [i for i, row in enumerate(self.rows) if isinstance(row, Command)]

    def selected_command(self) -> Optional[Command]:
        if 0 <= self.selected < len(self.rows):
            row = self.rows[self.selected]
            if isinstance(row, Command):
                return row
        return None

    def move(self, delta: int) -> None:
        """Move between command rows, skipping headings. Stops at the ends."""
        commands = self.command_indexes()
        if not commands:
            return
        position = commands.index(self.selected) if self.selected in commands else 0
        position = max(0, min(position + delta, len(commands) - 1))
        self.selected = commands[position]
        self._sync_highlight()

    def set_query(self, text: str) -> None:
        self.query_text = text
        self._build()
        self._sync()

    # -- rendering -----------------------------------------------------------------

    def _search_line(self) -> Text:
        if self.searching or self.query_text:
            line = Text(" / ", style="bold yellow")
            line.append(self.query_text)
            if self.searching:
                line.append("█")
            return line
        return Text(" / Filter commands...", style="dim")

    def _sync(self) -> None:
        if not self.is_mounted:
            return
        self.query_one("#help-search", Static).update(self._search_line())
        options = self.query_one(OptionList)
        options.clear_options()
        for row in self.rows:
            if isinstance(row, Command):
                options.add_option(Option(describe_command(row)))
            else:
                options.add_option(Option(Text(row.value, style="bold"), disabled=True))
        self._sync_highlight()

    def _sync_highlight(self) -> None:
        if self.is_mounted and self.selected_command() is not None:
            self.query_one(OptionList).highlighted = self.selected

    # -- keys ----------------------------------------------------------------------

    def _handle_search_key(self, event: KeyEvent) -> KeyResult:
        if event.code is KeyCode.ENTER:
            self.searching = False
            self._sync()
        elif event.code is KeyCode.BACKSPACE:
            self.set_query(self.query_text[:-1])
        elif event.is_ctrl("u"):
            self.set_query("")
        elif event.is_printable:
            self.set_query(self.query_text + event.char)
        return KeyResult.CONSUMED

    def handle_key(self, event: KeyEvent) -> KeyResult:
        if self.searching:
            return self._handle_search_key(event)

        if event.is_rune("j") or event.code is KeyCode.DOWN:
            self.move(1)
        elif event.is_rune("k") or event.code is KeyCode.UP:
            self.move(-1)
        elif event.is_rune("/"):
            self.searching = True
            self._sync()
        elif event.is_rune("q") or event.is_rune("?"):
            self.on_close()
        elif event.code is KeyCode.ENTER:
            cmd = self.selected_command()
            if cmd is not None:
                logger.info(f"help execute: {cmd.full_name}")
                self.on_close()
                self.on_execute(cmd.full_name)
        else:
            return KeyResult.PASSTHROUGH
        return KeyResult.CONSUMED
