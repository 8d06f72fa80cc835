"""
Overlays for the dashboard: confirmation, detail pane, forms and pickers.

Overlays are pushed onto the navigation stack under a name that is not a
registered view, so the dispatcher treats them as overlays: Escape pops them
and every other key is forwarded to their ``handle_key``. Form inputs are
focusable and receive typed characters natively.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Input, Label, OptionList, Static

from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult

logger = logging.getLogger(__name__)
key_logger = logging.getLogger("key_events")


class ConfirmDialog(Vertical):
    """Yes/no question. y or Enter confirms, n cancels, Escape closes."""

    DEFAULT_CSS = """
    ConfirmDialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $error 80%;
        background: $surface;
    }

    #confirm-question {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(
        self,
        title: str,
        message: str,
        on_confirm: Callable[[], None],
        on_close: Callable[[], None],
    ):
        super().__init__()
        self.heading = title
        self.message = message
        self.on_confirm = on_confirm
        self.on_close = on_close

    def compose(self) -> ComposeResult:
        yield Label(self.message, id="confirm-question")
        yield Label("[dim]Press [bold]y[/bold] to confirm, [bold]n[/bold] to cancel[/dim]")

    def on_mount(self) -> None:
        self.border_title = self.heading

    def handle_key(self, event: KeyEvent) -> KeyResult:
        key_logger.debug(f"ConfirmDialog key={event.describe()}")
        if event.is_rune("y") or event.code is KeyCode.ENTER:
            logger.info(f"Confirmed: {self.heading}")
            self.on_close()
            self.on_confirm()
            return KeyResult.CONSUMED
        if event.is_rune("n"):
            self.on_close()
            return KeyResult.CONSUMED
        return KeyResult.CONSUMED


class DetailPane(VerticalScroll):
    """Read-only record detail. j/k scroll."""

    DEFAULT_CSS = """
    DetailPane {
        height: 1fr;
        padding: 1 2;
        border: round $primary;
    }
    """

    can_focus = False

    def __init__(self, title: str, fields: Sequence[Tuple[str, Any]], body: str = ""):
        super().__init__()
        self.heading = title
        self.fields = list(fields)
        self.body = body

    def render_text(self) -> Text:
        text = Text()
        width = max((len(label) for label, _ in self.fields), default=0)
        for label, value in self.fields:
            text.append(f"{label:<{width}}  ", style="bold")
            text.append(f"{value}\n")
        if self.body:
            text.append("\n")
            text.append(self.body)
        return text

    def compose(self) -> ComposeResult:
        yield Static(self.render_text())

    def on_mount(self) -> None:
        self.border_title = self.heading

    def handle_key(self, event: KeyEvent) -> KeyResult:
        if event.is_rune("j") or event.code is KeyCode.DOWN:
            self.scroll_down(animate=False)
        elif event.is_rune("k") or event.code is KeyCode.UP:
            self.scroll_up(animate=False)
        else:
            return KeyResult.PASSTHROUGH
        return KeyResult.CONSUMED


@dataclass(frozen=True)
class FormField:
    """One input row of a FormOverlay."""

    key: str
    label: str
    value: str = ""
    placeholder: str = ""
    required: bool = False


class FormOverlay(Vertical):
    """
    Stack of labelled inputs.

    Enter moves to the next field and submits from the last one; ctrl+s
    submits from anywhere. Missing required fields are reported and focused
    instead of submitting.
    """

    DEFAULT_CSS = """
    FormOverlay {
        height: auto;
        padding: 1 2;
        border: round $accent;
        background: $surface;
    }

    FormOverlay Label {
        margin-top: 1;
    }

    #form-error {
        color: $error;
        height: auto;
    }
    """

    def __init__(
        self,
        title: str,
        fields: Sequence[FormField],
        on_submit: Callable[[Dict[str, str]], None],
    ):
        super().__init__()
        self.heading = title
        self.fields = list(fields)
        self.on_submit = on_submit
        self.values: Dict[str, str] = {f.key: f.value for f in self.fields}
        self.error = ""

    def compose(self) -> ComposeResult:
        for f in self.fields:
            yield Label(f.label + (" *" if f.required else ""))
            yield Input(value=f.value, placeholder=f.placeholder, id=f"field-{f.key}")
        yield Static("", id="form-error")
        yield Label("[dim]Enter next/submit  ctrl+s save  Esc cancel[/dim]")

    def on_mount(self) -> None:
        self.border_title = self.heading
        if self.fields:
            self.query_one(f"#field-{self.fields[0].key}", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id and event.input.id.startswith("field-"):
            self.values[event.input.id[len("field-"):]] = event.value

    def _focused_index(self) -> int:
        focused = self.app.focused if self.is_mounted else None
        for i, f in enumerate(self.fields):
            if focused is not None and focused.id == f"field-{f.key}":
                return i
        return len(self.fields) - 1

    def missing(self) -> List[str]:
        return [f.key for f in self.fields if f.required and not self.values.get(f.key, "").strip()]

    def submit(self) -> bool:
        """Validate and hand the values to on_submit. Returns True if submitted."""
        missing = self.missing()
        if missing:
            labels = [f.label for f in self.fields if f.key in missing]
            self.error = f"Required: {', '.join(labels)}"
            if self.is_mounted:
                self.query_one("#form-error", Static).update(self.error)
                self.query_one(f"#field-{missing[0]}", Input).focus()
            return False
        self.error = ""
        values = {k: v.strip() for k, v in self.values.items()}
        logger.info(f"Form submitted: {self.heading}")
        self.on_submit(values)
        return True

    def handle_key(self, event: KeyEvent) -> KeyResult:
        if event.is_ctrl("s"):
            self.submit()
            return KeyResult.CONSUMED
        if event.code is KeyCode.ENTER:
            index = self._focused_index()
            if index >= len(self.fields) - 1:
                self.submit()
            else:
                self.query_one(f"#field-{self.fields[index + 1].key}", Input).focus()
            return KeyResult.CONSUMED
        return KeyResult.PASSTHROUGH


class PickerOverlay(Vertical):
    """List of choices. j/k or arrows move, Enter picks."""

    DEFAULT_CSS = """
    PickerOverlay {
        height: auto;
        max-height: 20;
        padding: 0 1;
        border: round $accent;
        background: $surface;
    }

    PickerOverlay OptionList {
        height: auto;
        max-height: 16;
    }
    """

    def __init__(
        self,
        title: str,
        choices: Sequence[str],
        on_pick: Callable[[str], None],
        on_close: Callable[[], None],
    ):
        super().__init__()
        self.heading = title
        self.choices = list(choices)
        self.on_pick = on_pick
        self.on_close = on_close
        self.selected = 0

    def compose(self) -> ComposeResult:
        yield OptionList(*self.choices)

    def on_mount(self) -> None:
        self.border_title = self.heading
        options = self.query_one(OptionList)
        options.can_focus = False
        self._sync()

    def _sync(self) -> None:
        if self.is_mounted and self.choices:
            self.query_one(OptionList).highlighted = self.selected

    def current(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[self.selected]

    def move(self, delta: int) -> None:
        if not self.choices:
            return
        self.selected = (self.selected + delta) % len(self.choices)
        self._sync()

    def handle_key(self, event: KeyEvent) -> KeyResult:
        if event.is_rune("j") or event.code is KeyCode.DOWN:
            self.move(1)
        elif event.is_rune("k") or event.code is KeyCode.UP:
            self.move(-1)
        elif event.code is KeyCode.ENTER:
            choice = self.current()
            self.on_close()
            if choice is not None:
                self.on_pick(choice)
        else:
            return KeyResult.PASSTHROUGH
        return KeyResult.CONSUMED
