"""
Presenter for the command palette.

Owns the typed text, the ranked suggestion list, the selection cursor and
the sub-command parent. The widget only renders PaletteState; every key in
command mode comes through handle_key.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import List, Optional

from switchboard.commands import Command, CommandRegistry
from switchboard.config.constants import COMMAND_SEPARATOR, MAX_SUGGESTIONS
from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult

logger = logging.getLogger(__name__)


@dataclass
class PaletteState:
    """Current state of the palette."""

    text: str = ""
    suggestions: List[Command] = field(default_factory=list)
    selected: int = 0
    parent: str = ""  # Set while completing sub-commands, e.g. "folder"
    visible: bool = False

    @property
    def in_sub_command_mode(self) -> bool:
        return bool(self.parent)


class CommandPalette:
    """
    Autocomplete front-end over the command registry.

    Suggestion rules, recomputed on every text change:
    - "<cmd> <rest>" where <cmd> has sub-commands -> search its children
      with <rest> (an empty <rest> lists them all)
    - anything else -> ranked top-level search

    Keys: Up/ctrl+p and Down/ctrl+n move with wraparound, Tab completes,
    Enter executes, Escape or Backspace on empty input cancels.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        on_execute: Optional[Callable[[str], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        on_state_update: Optional[Callable[[PaletteState], None]] = None,
        max_suggestions: int = MAX_SUGGESTIONS,
    ):
        self.registry = registry
        self.on_execute = on_execute
        self.on_cancel = on_cancel
        self.on_state_update = on_state_update
        self.max_suggestions = max_suggestions
        self._state = PaletteState()

    @property
    def state(self) -> PaletteState:
        return self._state

    @property
    def visible(self) -> bool:
        return self._state.visible

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def suggestions(self) -> List[Command]:
        return list(self._state.suggestions)

    @property
    def selected(self) -> int:
        return self._state.selected

    @property
    def parent(self) -> str:
        return self._state.parent

    def _notify_update(self) -> None:
        if self.on_state_update:
            self.on_state_update(self._state)

    def show(self) -> None:
        """Open the palette with empty input and the full command list."""
        self._state = PaletteState(visible=True)
        self._update_suggestions("")
        self._notify_update()

    def hide(self) -> None:
        """Close the palette and drop its suggestion state."""
        self._state = PaletteState(visible=False)
        self._notify_update()

    def set_text(self, text: str) -> None:
        """Replace the input text and recompute suggestions."""
        self._state.text = text
        self._update_suggestions(text)
        self._notify_update()

    def _update_suggestions(self, text: str) -> None:
        head, sep, rest = text.lstrip().partition(COMMAND_SEPARATOR)
        if sep and self.registry.has_sub_commands(head):
            self._state.parent = head.lower()
            suggestions = self.registry.search_sub_commands(head, rest.strip())
        else:
            self._state.parent = ""
            suggestions = self.registry.search(text)

        suggestions = suggestions[: self.max_suggestions]
        if suggestions != self._state.suggestions:
            self._state.selected = 0
        self._state.suggestions = suggestions

    def full_name(self, cmd: Command) -> str:
        """Name to put on the command line for a suggestion."""
        if self._state.parent:
            return f"{self._state.parent}{COMMAND_SEPARATOR}{cmd.name}"
        return cmd.name

    def selected_suggestion(self) -> Optional[Command]:
        suggestions = self._state.suggestions
        if 0 <= self._state.selected < len(suggestions):
            return suggestions[self._state.selected]
        return None

    def move_selection(self, delta: int) -> None:
        """Move the cursor, wrapping at both ends."""
        count = len(self._state.suggestions)
        if count == 0:
            return
        self._state.selected = (self._state.selected + delta) % count
        self._notify_update()

    def autocomplete(self) -> None:
        """Complete the input to the selected suggestion.

        A completion that has sub-commands gets a trailing separator so the
        children are listed straight away.
        """
        cmd = self.selected_suggestion()
        if cmd is None:
            return
        completed = self.full_name(cmd)
        if self.registry.has_sub_commands(completed):
            completed += COMMAND_SEPARATOR
        self.set_text(completed)

    def execute_selected(self) -> None:
        """Execute the typed text, or the highlighted suggestion if empty."""
        command = self._state.text.strip()
        if not command:
            cmd = self.selected_suggestion()
            if cmd is not None:
                command = self.full_name(cmd)
        if not command:
            return
        logger.debug(f"palette execute: {command!r}")
        if self.on_execute:
            self.on_execute(command)

    def cancel(self) -> None:
        logger.debug("palette cancelled")
        if self.on_cancel:
            self.on_cancel()

    def handle_key(self, event: KeyEvent) -> KeyResult:
        """Handle a key while the palette is open. Always consumes."""
        code = event.code

        if code is KeyCode.ESCAPE:
            self.cancel()
        elif code is KeyCode.ENTER:
            self.execute_selected()
        elif code is KeyCode.TAB and not event.modifiers:
            self.autocomplete()
        elif code is KeyCode.DOWN or event.is_ctrl("n"):
            self.move_selection(1)
        elif code is KeyCode.UP or event.is_ctrl("p"):
            self.move_selection(-1)
        elif event.is_ctrl("u"):
            self.set_text("")
        elif code is KeyCode.BACKSPACE:
            if not self._state.text:
                self.cancel()
            else:
                self.set_text(self._state.text[:-1])
        elif event.is_printable:
            self.set_text(self._state.text + event.char)

        return KeyResult.CONSUMED
