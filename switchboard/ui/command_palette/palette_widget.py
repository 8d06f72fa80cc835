"""
Prompt bar shown at the bottom of the dashboard.

Renders either the command palette (``:`` prompt plus suggestion list) or
the filter prompt (``/``). It owns no text: the presenters hold the buffers
and the dispatcher feeds them keys, so nothing here takes focus.
"""

import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from switchboard.ui.command_palette.palette_presenter import PaletteState

logger = logging.getLogger(__name__)

CURSOR = "█"


def suggestion_text(state: PaletteState, index: int) -> Text:
    cmd = state.suggestions[index]
    text = Text()
    text.append(f"{cmd.name:<16}", style="bold")
    aliases = cmd.display_aliases
    text.append(f"{aliases:<14}", style="dim")
    text.append(cmd.description)
    return text


class PromptBar(Vertical):
    """Command/filter prompt with an optional suggestion dropdown."""

    DEFAULT_CSS = """
    PromptBar {
        height: auto;
        dock: bottom;
        display: none;
    }

    PromptBar.-visible {
        display: block;
    }

    #prompt-suggestions {
        height: auto;
        max-height: 12;
        border-top: solid $primary;
    }

    #prompt-line {
        height: 1;
        padding: 0 1;
        background: $surface-darken-1;
    }
    """

    def compose(self) -> ComposeResult:
        suggestions = OptionList(id="prompt-suggestions")
        suggestions.can_focus = False
        yield suggestions
        yield Static("", id="prompt-line")

    def open(self) -> None:
        self.add_class("-visible")

    def close(self) -> None:
        self.remove_class("-visible")
        self.query_one("#prompt-line", Static).update("")
        self.query_one("#prompt-suggestions", OptionList).clear_options()

    def show_palette_state(self, state: PaletteState) -> None:
        """Redraw from the palette presenter's state."""
        if not self.is_mounted or not state.visible:
            return
        line = Text(":", style="bold cyan")
        line.append(state.text)
        line.append(CURSOR)
        if state.parent:
            line.append(f"   {state.parent} sub-commands", style="dim")
        self.query_one("#prompt-line", Static).update(line)

        options = self.query_one("#prompt-suggestions", OptionList)
        options.clear_options()
        for i in range(len(state.suggestions)):
            options.add_option(Option(suggestion_text(state, i)))
        options.display = bool(state.suggestions)
        if state.suggestions:
            options.highlighted = state.selected

    def show_filter_text(self, text: str) -> None:
        if not self.is_mounted:
            return
        line = Text("/", style="bold yellow")
        line.append(text)
        line.append(CURSOR)
        self.query_one("#prompt-line", Static).update(line)
        self.query_one("#prompt-suggestions", OptionList).display = False
