"""
Capability contract for resource views.

The dispatcher, executor and navigation stack only ever talk to views
through this protocol, never to a concrete view class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from switchboard.ui.keys import KeyEvent, KeyResult


@dataclass(frozen=True)
class Hint:
    """A key/description pair shown in the footer."""

    key: str
    description: str


@runtime_checkable
class ResourceView(Protocol):
    """Interface implemented once per resource type."""

    name: str
    title: str

    def widget(self) -> Any:
        """The region handle placed on the navigation stack."""
        ...

    def hints(self) -> List[Hint]:
        ...

    def load(self) -> None:
        """Fetch remote state. Blocking; runs on a background worker."""
        ...

    def refresh(self) -> None:
        """Re-fetch remote state. Blocking; runs on a background worker."""
        ...

    def render(self) -> None:
        """Redraw from already loaded state. UI thread only."""
        ...

    def filter(self, text: str) -> None:
        """Restrict visible rows to text ("" clears)."""
        ...

    def handle_key(self, event: KeyEvent) -> KeyResult:
        ...

    def scroll_page(self, pages: float) -> None:
        """Move the cursor by a number of pages (negative is up)."""
        ...

    def jump_to_row(self, row: int) -> None:
        """Select row N (1-based)."""
        ...

    def jump_to_top(self) -> None:
        ...

    def jump_to_bottom(self) -> None:
        ...

    def selected_item(self) -> Optional[Any]:
        ...


@runtime_checkable
class KeyHandler(Protocol):
    """Anything that accepts forwarded keys, such as overlays."""

    def handle_key(self, event: KeyEvent) -> KeyResult:
        ...
