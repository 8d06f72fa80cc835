"""
Base classes for resource views.

A view keeps its loaded records, the active filter and the cursor itself;
the DataTable only mirrors that state once it is mounted. This keeps the
view logic usable without a running app.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Dict, Generic, List, Optional, Protocol, Sequence, Tuple, TypeVar

from rich.text import Text
from textual.widgets import DataTable

from switchboard.services import DashboardClient
from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult

from .protocol import Hint

logger = logging.getLogger(__name__)

T = TypeVar("T")

Column = Tuple[str, Optional[int]]  # (title, width or None for auto)


class ViewHost(Protocol):
    """What a view may ask of the application."""

    def run_in_background(
        self,
        work: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        description: str = "",
    ) -> None:
        ...

    def notify(self, message: str, *, severity: str = "information", **kwargs: Any) -> None:
        ...

    def open_overlay(self, name: str, overlay: Any) -> None:
        ...

    def close_overlay(self) -> None:
        ...

    def confirm(self, title: str, message: str, on_confirm: Callable[[], None]) -> None:
        ...


class ResourceTable(DataTable):
    """Non-focusable table; keys reach it through the owning view."""

    can_focus = False

    DEFAULT_CSS = """
    ResourceTable {
        height: 1fr;
    }
    """

    def __init__(self, columns: Sequence[Column], **kwargs: Any) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._columns_spec = list(columns)
        self._rows: List[Sequence[Any]] = []
        self._cursor = 0

    def on_mount(self) -> None:
        for title, width in self._columns_spec:
            self.add_column(title, width=width)
        self._redraw()

    def show(self, rows: List[Sequence[Any]], cursor: int) -> None:
        """Replace the rows and cursor; drawn now if mounted, else on mount."""
        self._rows = rows
        self._cursor = cursor
        if self.is_mounted:
            self._redraw()

    def place_cursor(self, cursor: int) -> None:
        self._cursor = cursor
        if self.is_mounted and self.row_count:
            self.move_cursor(row=cursor)

    def _redraw(self) -> None:
        self.clear()
        for row in self._rows:
            self.add_row(*row)
        if self._rows:
            self.move_cursor(row=self._cursor)


class BaseView:
    """Defaults shared by every view."""

    name = ""
    title = ""
    HINTS: Tuple[Hint, ...] = ()

    def __init__(self, client: DashboardClient, host: ViewHost):
        self.client = client
        self.host = host
        self.filter_text = ""

    def hints(self) -> List[Hint]:
        return list(self.HINTS)

    def refresh(self) -> None:
        self.load()

    def reload(self) -> None:
        """Refresh on a worker and redraw when it completes."""
        self.host.run_in_background(
            self.refresh, lambda _: self.render(), description=f"refresh {self.name}"
        )

    def actions(self) -> Dict[str, Callable[[], None]]:
        """Command full name -> handler for commands this view answers."""
        return {}

    def perform(self, command: str) -> bool:
        """Run a command against this view. False if it does not apply."""
        action = self.actions().get(command)
        if action is None:
            return False
        action()
        return True

    def after_change(self, message: str) -> Callable[[Any], None]:
        """Success callback for mutations: notify, then reload."""

        def done(_result: Any) -> None:
            self.host.notify(message)
            self.reload()

        return done


class ResourceTableView(BaseView, Generic[T]):
    """
    A list of records shown in a table.

    Subclasses set COLUMNS and implement fetch() and row(). Records are
    filtered with matches(), which by default looks for the filter text in
    any cell. The filter is kept when records are re-fetched.
    """

    COLUMNS: Tuple[Column, ...] = ()
    # Plain character -> command full name, handled in handle_key
    KEYS: Dict[str, str] = {}

    def __init__(self, client: DashboardClient, host: ViewHost):
        super().__init__(client, host)
        self.items: List[T] = []
        self.visible: List[T] = []
        self.cursor = 0
        self.page_size = 20
        self._table: Optional[ResourceTable] = None

    # -- data ----------------------------------------------------------------------

    def fetch(self) -> List[T]:
        raise NotImplementedError

    def row(self, item: T) -> Sequence[Any]:
        raise NotImplementedError

    def matches(self, item: T, text: str) -> bool:
        needle = text.lower()
        return any(needle in str(cell).lower() for cell in self.row(item))

    def load(self) -> None:
        self.items = self.fetch()
        logger.debug(f"{self.name}: loaded {len(self.items)} records")

    # -- rendering -----------------------------------------------------------------

    def widget(self) -> ResourceTable:
        if self._table is None:
            self._table = ResourceTable(self.COLUMNS, id=f"view-{self.name}")
        return self._table

    def render(self) -> None:
        if self.filter_text:
            self.visible = [item for item in self.items if self.matches(item, self.filter_text)]
        else:
            self.visible = list(self.items)
        self.cursor = self._clamp(self.cursor)
        if self._table is not None:
            if self._table.is_mounted and self._table.size.height > 1:
                self.page_size = self._table.size.height - 1
            self._table.show([self.row(item) for item in self.visible], self.cursor)

    def filter(self, text: str) -> None:
        self.filter_text = text
        self.cursor = 0
        self.render()

    # -- cursor --------------------------------------------------------------------

    def _clamp(self, row: int) -> int:
        if not self.visible:
            return 0
        return max(0, min(row, len(self.visible) - 1))

    def move_cursor(self, row: int) -> None:
        self.cursor = self._clamp(row)
        if self._table is not None:
            self._table.place_cursor(self.cursor)

    def scroll_page(self, pages: float) -> None:
        step = int(self.page_size * pages)
        if step == 0:
            step = 1 if pages > 0 else -1
        self.move_cursor(self.cursor + step)

    def jump_to_row(self, row: int) -> None:
        """Select 1-based row; out of range rows are clamped."""
        self.move_cursor(row - 1)

    def jump_to_top(self) -> None:
        self.move_cursor(0)

    def jump_to_bottom(self) -> None:
        self.move_cursor(len(self.visible) - 1)

    def selected_item(self) -> Optional[T]:
        if not self.visible:
            return None
        return self.visible[self.cursor]

    def require_selection(self) -> Optional[T]:
        item = self.selected_item()
        if item is None:
            self.host.notify("Nothing selected", severity="warning")
        return item

    # -- keys ----------------------------------------------------------------------

    def show_detail(self, item: T) -> None:
        """Open the detail overlay for item. Views without one ignore Enter."""

    def handle_key(self, event: KeyEvent) -> KeyResult:
        if event.is_rune("j") or event.code is KeyCode.DOWN:
            self.move_cursor(self.cursor + 1)
        elif event.is_rune("k") or event.code is KeyCode.UP:
            self.move_cursor(self.cursor - 1)
        elif event.is_rune("G") or event.code is KeyCode.END:
            self.jump_to_bottom()
        elif event.code is KeyCode.HOME:
            self.jump_to_top()
        elif event.code is KeyCode.ENTER:
            item = self.selected_item()
            if item is not None:
                self.show_detail(item)
        elif event.is_printable and event.char in self.KEYS:
            self.perform(self.KEYS[event.char])
        else:
            return KeyResult.PASSTHROUGH
        return KeyResult.CONSUMED


def status_marker(*flags: Tuple[bool, str]) -> Text:
    """Compact status column, e.g. status_marker((unread, "●"), (starred, "★"))."""
    text = Text()
    for on, symbol in flags:
        text.append(symbol if on else " ", style="bold yellow" if on else "")
    return text
