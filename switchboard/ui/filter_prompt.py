"""
Text prompt used by filter mode (``/``).

Collects a filter string and reports it on Enter; Escape abandons the edit
and leaves whatever filter the view already had.
"""

import logging
from collections.abc import Callable
from typing import Optional

from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult

logger = logging.getLogger(__name__)


class FilterPrompt:
    """Single-line input buffer for filter mode."""

    def __init__(
        self,
        on_submit: Optional[Callable[[str], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        self.on_submit = on_submit
        self.on_cancel = on_cancel
        self.on_change = on_change
        self.text = ""
        self.active = False

    def activate(self, initial: str = "") -> None:
        self.active = True
        self._set(initial)

    def deactivate(self) -> None:
        self.active = False
        self._set("")

    def _set(self, text: str) -> None:
        self.text = text
        if self.on_change:
            self.on_change(text)

    def handle_key(self, event: KeyEvent) -> KeyResult:
        """Edit the buffer; Enter submits and Escape cancels."""
        if event.code is KeyCode.ENTER:
            text = self.text.strip()
            logger.debug(f"filter submitted: {text!r}")
            if self.on_submit:
                self.on_submit(text)
        elif event.code is KeyCode.ESCAPE:
            if self.on_cancel:
                self.on_cancel()
        elif event.code is KeyCode.BACKSPACE:
            self._set(self.text[:-1])
        elif event.is_ctrl("u"):
            self._set("")
        elif event.is_printable:
            self._set(self.text + event.char)
        return KeyResult.CONSUMED
