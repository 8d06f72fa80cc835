"""
Navigation stack of UI contexts.

The top entry is the visible one. The same stack holds two kinds of entry:
named resource views (reached with switch_to) and transient overlays such as
detail panes, forms and dialogs (opened with push, closed with pop).

The stack never touches widgets itself. The UI shell passes ``on_show`` and
``on_remove`` callbacks to mount, hide or discard regions.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")

EMPTY = ""  # Name returned by pop()/top() on an empty stack


@dataclass(frozen=True)
class StackEntry(Generic[R]):
    """A named UI context and its region handle."""

    name: str
    region: R


class NavigationStack(Generic[R]):
    """LIFO stack of named UI contexts with at most one entry per name."""

    def __init__(
        self,
        on_show: Optional[Callable[[StackEntry[R]], Any]] = None,
        on_remove: Optional[Callable[[StackEntry[R]], Any]] = None,
    ):
        self._entries: List[StackEntry[R]] = []
        self._on_show = on_show
        self._on_remove = on_remove

    def push(self, name: str, region: R) -> None:
        """Push a context; it becomes the visible one.

        An existing entry with the same name is discarded first.
        """
        index = self._index_of(name)
        if index is not None:
            old = self._entries.pop(index)
            if old.region is not region:
                self._notify_remove(old)
        entry = StackEntry(name, region)
        self._entries.append(entry)
        logger.debug(f"push {name!r} (depth={len(self._entries)})")
        self._notify_show(entry)

    def pop(self) -> str:
        """Remove the top context and show the next one.

        Returns:
            The removed name, or EMPTY if the stack was empty.
        """
        if not self._entries:
            return EMPTY
        removed = self._entries.pop()
        logger.debug(f"pop {removed.name!r} (depth={len(self._entries)})")
        self._notify_remove(removed)
        if self._entries:
            self._notify_show(self._entries[-1])
        return removed.name

    def switch_to(self, name: str, region: R) -> None:
        """Bring name to the top, pushing it if it is not on the stack.

        Relocating keeps the relative order of every other entry and does
        not change the stack length.
        """
        index = self._index_of(name)
        if index is None:
            self.push(name, region)
            return
        entry = self._entries.pop(index)
        if entry.region is not region:
            self._notify_remove(entry)
            entry = StackEntry(name, region)
        self._entries.append(entry)
        logger.debug(f"switch_to {name!r} (depth={len(self._entries)})")
        self._notify_show(entry)

    def top(self) -> str:
        """Name of the visible context, or EMPTY."""
        return self._entries[-1].name if self._entries else EMPTY

    def top_entry(self) -> Optional[StackEntry[R]]:
        return self._entries[-1] if self._entries else None

    def names(self) -> List[str]:
        """Names from bottom to top."""
        return [entry.name for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return self._index_of(name) is not None

    def _index_of(self, name: object) -> Optional[int]:
        for i, entry in enumerate(self._entries):
            if entry.name == name:
                return i
        return None

    def _notify_show(self, entry: StackEntry[R]) -> None:
        if self._on_show is not None:
            self._on_show(entry)

    def _notify_remove(self, entry: StackEntry[R]) -> None:
        if self._on_remove is not None:
            self._on_remove(entry)
