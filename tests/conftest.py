"""Shared pytest fixtures for switchboard tests."""

from typing import Any, Callable, List, Optional, Tuple

import pytest

from switchboard.commands import build_default_registry
from switchboard.services import DemoClient


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


class FakeHost:
    """
    Stands in for the app behind views and the dispatcher.

    Background work runs inline; failures are recorded in ``errors`` the way
    the app would report them.
    """

    def __init__(self):
        self.notifications: List[Tuple[str, str]] = []
        self.overlays: List[Tuple[str, Any]] = []
        self.confirmations: List[Tuple[str, str, Callable[[], None]]] = []
        self.errors: List[Exception] = []
        self.background: List[str] = []
        self.prompts: List[Any] = []
        self.filters: List[str] = []
        self.quit_calls = 0

    # ViewHost

    def run_in_background(
        self,
        work: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        description: str = "",
    ) -> None:
        self.background.append(description)
        try:
            result = work()
        except Exception as e:
            self.errors.append(e)
            return
        if on_success is not None:
            on_success(result)

    def notify(self, message: str, *, severity: str = "information", **kwargs: Any) -> None:
        self.notifications.append((message, severity))

    def open_overlay(self, name: str, overlay: Any) -> None:
        self.overlays.append((name, overlay))

    def close_overlay(self) -> None:
        if self.overlays:
            self.overlays.pop()

    def confirm(self, title: str, message: str, on_confirm: Callable[[], None]) -> None:
        self.confirmations.append((title, message, on_confirm))

    # DispatcherHost

    def quit(self) -> None:
        self.quit_calls += 1

    def show_prompt(self, mode: Any) -> None:
        self.prompts.append(mode)

    def hide_prompt(self) -> None:
        self.prompts.append(None)

    def apply_filter(self, text: str) -> None:
        self.filters.append(text)

    # helpers

    @property
    def messages(self) -> List[str]:
        return [message for message, _ in self.notifications]

    @property
    def top_overlay(self) -> Any:
        return self.overlays[-1][1] if self.overlays else None


@pytest.fixture
def registry():
    """Registry loaded with the default command table."""
    return build_default_registry()


@pytest.fixture
def client():
    """Demo client with no simulated latency."""
    return DemoClient(latency=0)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def clock():
    return FakeClock()
