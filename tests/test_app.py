"""
End-to-end tests for DashboardApp driven through Textual's pilot.

Uses the demo client without latency. Loads run on worker threads and are
posted back to the app, so tests poll for the state they expect.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Callable, List, Tuple

import pytest
from textual.widgets import DataTable

from switchboard.config import Settings
from switchboard.services import DemoClient
from switchboard.ui.app import DashboardApp
from switchboard.ui.command_palette.palette_widget import PromptBar
from switchboard.ui.dispatcher import InputMode
from switchboard.ui.help_view import HelpOverlay
from switchboard.ui.modals import DetailPane


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class RecordingApp(DashboardApp):
    """DashboardApp that remembers its notifications."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.notes: List[Tuple[str, str]] = []

    def notify(self, message, *, severity="information", **kwargs):
        self.notes.append((str(message), severity))
        super().notify(message, severity=severity, **kwargs)


def make_app(default_view: str = "messages", latency: float = 0, timeout: float = 30.0) -> RecordingApp:
    client = DemoClient(latency=latency, request_timeout=timeout)
    settings = Settings(default_view=default_view, demo_latency=latency, request_timeout=timeout)
    return RecordingApp(client, settings)


async def wait_for(pilot, predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Pause the pilot until predicate holds or timeout expires."""
    for _ in range(int(timeout / 0.05)):
        if predicate():
            return True
        await pilot.pause(0.05)
    return predicate()


@asynccontextmanager
async def running(app: DashboardApp):
    """run_test() that lets background work finish before the app exits."""
    async with app.run_test() as pilot:
        yield pilot
        await wait_for(pilot, lambda: app.runner is None or app.runner.idle)


async def type_keys(pilot, text: str) -> None:
    await pilot.press(*("space" if char == " " else char for char in text))


def loaded(app: DashboardApp, name: str, count: int) -> Callable[[], bool]:
    def check() -> bool:
        view = app.views.get(name)
        return view is not None and len(getattr(view, "items", [])) == count

    return check


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class TestStartup:
    """The default view is shown and loaded on mount."""

    @pytest.mark.asyncio
    async def test_default_view_loads(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            assert app.navigation.names() == ["messages"]

            table = app.query_one("#view-messages", DataTable)
            assert await wait_for(pilot, lambda: table.row_count == 5)

    @pytest.mark.asyncio
    async def test_dashboard_counts(self):
        app = make_app(default_view="dashboard")
        async with running(app) as pilot:
            view = app.views.get("dashboard")
            assert await wait_for(pilot, lambda: bool(view.counts))
            assert view.counts["unread"] == 2

    @pytest.mark.asyncio
    async def test_unknown_default_view_falls_back(self):
        app = make_app(default_view="spreadsheets")
        async with running(app) as pilot:
            await pilot.pause()
            assert app.navigation.top() == "dashboard"

    @pytest.mark.asyncio
    async def test_nothing_has_focus(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.pause()
            assert app.focused is None


# ---------------------------------------------------------------------------
# Command prompt
# ---------------------------------------------------------------------------


class TestCommandPrompt:
    """``:`` commands typed through the prompt bar."""

    @pytest.mark.asyncio
    async def test_prompt_opens_and_closes(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            prompt = app.query_one(PromptBar)
            assert app.dispatcher.mode is InputMode.COMMAND
            assert prompt.has_class("-visible")

            await type_keys(pilot, "ev")
            assert app.dispatcher.palette.text == "ev"

            await pilot.press("escape")
            assert app.dispatcher.mode is InputMode.NORMAL
            assert not prompt.has_class("-visible")
            assert app.navigation.top() == "messages"

    @pytest.mark.asyncio
    async def test_navigate_by_alias(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "cal")
            await pilot.press("enter")

            assert app.navigation.top() == "events"
            assert await wait_for(pilot, loaded(app, "events", 4))
            assert app.query_one("#view-messages").display is False

    @pytest.mark.asyncio
    async def test_escape_returns_to_previous_view(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "contacts")
            await pilot.press("enter")
            assert app.navigation.names() == ["messages", "contacts"]

            await pilot.press("escape")
            assert app.navigation.top() == "messages"

    @pytest.mark.asyncio
    async def test_revisiting_view_reuses_it(self):
        app = make_app()
        async with running(app) as pilot:
            messages = app.views.get("messages")
            for command in ("events", "messages"):
                await pilot.press("colon")
                await type_keys(pilot, command)
                await pilot.press("enter")
            assert app.navigation.names() == ["events", "messages"]
            assert app.views.get("messages") is messages

    @pytest.mark.asyncio
    async def test_folder_command(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            await pilot.press("colon")
            await type_keys(pilot, "sent")
            await pilot.press("enter")

            view = app.views.get("messages")
            assert view.folder == "sent"
            assert view.title == "Sent"
            assert await wait_for(pilot, loaded(app, "messages", 1))

    @pytest.mark.asyncio
    async def test_row_number_jumps(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            await pilot.press("colon")
            await type_keys(pilot, "3")
            await pilot.press("enter")
            assert app.views.get("messages").cursor == 2

    @pytest.mark.asyncio
    async def test_unavailable_view(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "ws")
            await pilot.press("enter")
            assert ("webhook-server is not available", "warning") in app.notes
            assert app.navigation.top() == "messages"

    @pytest.mark.asyncio
    async def test_command_not_available_in_view(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "avail")
            await pilot.press("enter")
            assert any("not available" in message for message, _ in app.notes)

    @pytest.mark.asyncio
    async def test_item_command_switches_to_its_view(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "rsvp yes")
            await pilot.press("enter")
            assert app.navigation.top() == "events"

    @pytest.mark.asyncio
    async def test_parent_command_shows_usage(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("colon")
            await type_keys(pilot, "folder")
            await pilot.press("enter")
            assert ("Usage: :folder <list | create | delete>", "information") in app.notes


# ---------------------------------------------------------------------------
# Keys in normal mode
# ---------------------------------------------------------------------------


class TestNormalMode:
    """Direct keys on a loaded view."""

    @pytest.mark.asyncio
    async def test_cursor_keys_and_chords(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            view = app.views.get("messages")

            await pilot.press("j", "j")
            assert view.cursor == 2
            await pilot.press("G")
            assert view.cursor == 4
            await pilot.press("g", "g")
            assert view.cursor == 0

    @pytest.mark.asyncio
    async def test_filter(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            await pilot.press("slash")
            assert app.dispatcher.mode is InputMode.FILTER
            await type_keys(pilot, "sarah")
            await pilot.press("enter")

            view = app.views.get("messages")
            assert view.filter_text == "sarah"
            assert [m["id"] for m in view.visible] == ["msg-001"]

    @pytest.mark.asyncio
    async def test_filter_refreshes_view(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            view = app.views.get("messages")
            refreshed = []
            original = view.refresh

            def counting_refresh():
                refreshed.append(view.filter_text)
                original()

            view.refresh = counting_refresh
            await pilot.press("slash")
            await type_keys(pilot, "sarah")
            await pilot.press("enter")

            assert await wait_for(pilot, lambda: refreshed == ["sarah"])
            assert await wait_for(pilot, lambda: app.runner.idle)
            await pilot.pause()
            assert [m["id"] for m in view.visible] == ["msg-001"]

    @pytest.mark.asyncio
    async def test_enter_opens_detail_and_escape_closes(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            await pilot.press("enter")
            assert app.navigation.top() == "message-detail"
            assert app.dispatcher.overlay_active
            assert await wait_for(pilot, lambda: len(app.query(DetailPane)) == 1)

            await pilot.press("escape")
            assert app.navigation.top() == "messages"
            assert await wait_for(pilot, lambda: len(app.query(DetailPane)) == 0)

    @pytest.mark.asyncio
    async def test_help_overlay(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("question_mark")
            assert app.navigation.top() == "help"
            assert await wait_for(pilot, lambda: len(app.query(HelpOverlay)) == 1)

            # Keys go to help, not to the view underneath
            await pilot.press("colon")
            assert app.dispatcher.mode is InputMode.NORMAL

            await pilot.press("escape")
            assert app.navigation.top() == "messages"

    @pytest.mark.asyncio
    async def test_help_executes_selected_command(self):
        app = make_app()
        async with running(app) as pilot:
            await pilot.press("question_mark")
            await pilot.press("j", "enter")
            # Second command in the list is "events"
            assert app.navigation.names() == ["messages", "events"]

    @pytest.mark.asyncio
    async def test_delete_chord_asks_for_confirmation(self):
        app = make_app()
        async with running(app) as pilot:
            assert await wait_for(pilot, loaded(app, "messages", 5))
            await pilot.press("d", "d")
            assert app.navigation.top() == "confirm"

            await pilot.press("y")
            assert app.navigation.top() == "messages"
            assert await wait_for(pilot, loaded(app, "messages", 4))


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_timeout_is_reported_with_retry_hint(self):
        app = make_app(latency=0.2, timeout=0.05)
        async with running(app) as pilot:
            assert await wait_for(pilot, lambda: any(s == "error" for _, s in app.notes))
            message = next(m for m, s in app.notes if s == "error")
            assert "timed out" in message
            assert message.endswith("(press r to retry)")
