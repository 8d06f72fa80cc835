"""
Top-level key dispatcher.

A small state machine that decides where each key goes. Checked in order
on every key:

1. COMMAND mode  -> command palette
2. FILTER mode   -> filter prompt
3. Overlay on top of the stack (a pushed context that is not a registered
   view) -> only ctrl+c and Escape are intercepted, everything else is
   forwarded to the overlay untouched
4. NORMAL mode   -> global keys (quit, back, paging, ``:``, ``/``, ``?``,
   refresh), then the ``gg``/``dd`` chords, then the active view

Chord timing is evaluated lazily on the next key press; there is no timer.
All state lives on the instance so sessions stay independent.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from switchboard.commands import CommandRegistry
from switchboard.config.constants import CHORD_WINDOW_MS
from switchboard.ui.command_palette.palette_presenter import CommandPalette
from switchboard.ui.filter_prompt import FilterPrompt
from switchboard.ui.keys import KeyCode, KeyEvent
from switchboard.ui.navigation import NavigationStack
from switchboard.ui.views.protocol import KeyHandler, ResourceView
from switchboard.ui.views.registry import ViewRegistry

logger = logging.getLogger(__name__)
key_logger = logging.getLogger("key_events")

# Second press of the key within the window runs the command
CHORD_COMMANDS: Dict[str, str] = {
    "g": "top",
    "d": "delete",
}

HALF_PAGE = 0.5
FULL_PAGE = 1.0


class InputMode(Enum):
    NORMAL = "normal"
    FILTER = "filter"
    COMMAND = "command"


class DispatcherHost(Protocol):
    """Application side effects the dispatcher asks for."""

    def quit(self) -> None:
        ...

    def show_prompt(self, mode: InputMode) -> None:
        ...

    def hide_prompt(self) -> None:
        ...

    def apply_filter(self, text: str) -> None:
        ...


def _page_amount(event: KeyEvent) -> Optional[float]:
    if event.code is KeyCode.PAGE_DOWN or event.is_ctrl("f"):
        return FULL_PAGE
    if event.code is KeyCode.PAGE_UP or event.is_ctrl("b"):
        return -FULL_PAGE
    if event.is_ctrl("d"):
        return HALF_PAGE
    if event.is_ctrl("u"):
        return -HALF_PAGE
    return None


class KeyDispatcher:
    """Routes key events by input mode and navigation state."""

    def __init__(
        self,
        stack: NavigationStack[Any],
        views: ViewRegistry,
        registry: CommandRegistry,
        execute: Callable[[str], None],
        host: DispatcherHost,
        chord_window_ms: int = CHORD_WINDOW_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stack = stack
        self.views = views
        self.registry = registry
        self.host = host
        self._execute = execute
        self._clock = clock
        self.chord_window_ms = chord_window_ms

        self.mode = InputMode.NORMAL
        self.pending_chord_key = ""
        self.pending_chord_timestamp = 0.0

        self.palette = CommandPalette(
            registry,
            on_execute=self._on_palette_execute,
            on_cancel=self._on_prompt_cancel,
        )
        self.filter_prompt = FilterPrompt(
            on_submit=self._on_filter_submit,
            on_cancel=self._on_prompt_cancel,
        )

    # -- state -----------------------------------------------------------------

    @property
    def overlay_active(self) -> bool:
        """True when the top of the stack is not a registered view."""
        top = self.stack.top_entry()
        return top is not None and not self.views.has(top.name)

    def active_view(self) -> Optional[ResourceView]:
        """The registered view on top of the stack, if any."""
        top = self.stack.top_entry()
        if top is None or not self.views.has(top.name):
            return None
        return self.views.get(top.name)

    # -- entry point -------------------------------------------------------------

    def dispatch(self, event: KeyEvent) -> bool:
        """Route one key. Returns True if the key was consumed."""
        key_logger.debug(f"key={event.describe()} mode={self.mode.value} top={self.stack.top()!r}")

        if self.mode is InputMode.COMMAND:
            return bool(self.palette.handle_key(event))

        if self.mode is InputMode.FILTER:
            return bool(self.filter_prompt.handle_key(event))

        if self.overlay_active:
            return self._dispatch_overlay(event)

        return self._dispatch_normal(event)

    def _dispatch_overlay(self, event: KeyEvent) -> bool:
        if event.is_ctrl("c"):
            self.host.quit()
            return True
        if event.code is KeyCode.ESCAPE:
            self.go_back()
            return True

        top = self.stack.top_entry()
        region = top.region if top is not None else None
        if isinstance(region, KeyHandler):
            return bool(region.handle_key(event))
        return False

    def _dispatch_normal(self, event: KeyEvent) -> bool:
        view = self.active_view()

        chord_key = next((k for k in CHORD_COMMANDS if event.is_rune(k)), None)
        if chord_key is None:
            self.clear_chord()

        if event.is_ctrl("c"):
            self.host.quit()
            return True

        if event.code is KeyCode.ESCAPE:
            if view is not None and view.handle_key(event):
                return True
            self.go_back()
            return True

        pages = _page_amount(event)
        if pages is not None:
            if view is not None:
                view.scroll_page(pages)
            return True

        if event.is_rune(":"):
            self.enter_command_mode()
            return True
        if event.is_rune("/"):
            self.enter_filter_mode()
            return True
        if event.is_rune("?"):
            self.execute("help")
            return True
        if event.is_rune("q"):
            if len(self.stack) <= 1:
                self.host.quit()
            else:
                self.go_back()
            return True
        if event.is_rune("r"):
            self.execute("refresh")
            return True

        if chord_key is not None:
            self._handle_chord(chord_key)
            return True

        if view is not None:
            return bool(view.handle_key(event))
        return False

    # -- chords ------------------------------------------------------------------

    def _handle_chord(self, key: str) -> None:
        now = self._clock()
        elapsed_ms = (now - self.pending_chord_timestamp) * 1000
        if self.pending_chord_key == key and elapsed_ms < self.chord_window_ms:
            self.clear_chord()
            logger.debug(f"chord {key}{key} fired")
            self.execute(CHORD_COMMANDS[key])
            return
        self.pending_chord_key = key
        self.pending_chord_timestamp = now

    def clear_chord(self) -> None:
        self.pending_chord_key = ""
        self.pending_chord_timestamp = 0.0

    # -- navigation ----------------------------------------------------------------

    def go_back(self) -> bool:
        """Pop one stack entry unless it is the last one."""
        if len(self.stack) <= 1:
            return False
        removed = self.stack.pop()
        logger.debug(f"back from {removed!r} to {self.stack.top()!r}")
        return True

    # -- modes ---------------------------------------------------------------------

    def enter_command_mode(self) -> None:
        self.clear_chord()
        self.mode = InputMode.COMMAND
        self.palette.show()
        self.host.show_prompt(InputMode.COMMAND)

    def enter_filter_mode(self) -> None:
        self.clear_chord()
        self.mode = InputMode.FILTER
        self.filter_prompt.activate()
        self.host.show_prompt(InputMode.FILTER)

    def _leave_prompt(self) -> None:
        self.mode = InputMode.NORMAL
        self.palette.hide()
        self.filter_prompt.deactivate()
        self.host.hide_prompt()

    def _on_palette_execute(self, command: str) -> None:
        self._leave_prompt()
        self.execute(command)

    def _on_filter_submit(self, text: str) -> None:
        self._leave_prompt()
        self.host.apply_filter(text)

    def _on_prompt_cancel(self) -> None:
        self._leave_prompt()

    def execute(self, command: str) -> None:
        """Hand a resolved command to the executor (trimmed, lowercased)."""
        resolved = command.strip().lower()
        if resolved:
            self._execute(resolved)


__all__ = ["CHORD_COMMANDS", "DispatcherHost", "InputMode", "KeyDispatcher"]
