"""
Dashboard application.

Owns the navigation stack, the key dispatcher, the command executor and the
view registry, and is the only place where they meet Textual:

- every key goes through ``on_key`` -> ``KeyDispatcher.dispatch``
- stack callbacks mount, hide and remove regions in ``#content``
- blocking client calls run on a BackgroundRunner whose callbacks are
  posted back with ``call_from_thread``
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Static

from switchboard.commands import CommandCategory, CommandRegistry, build_default_registry
from switchboard.config import Settings
from switchboard.exceptions import SwitchboardError
from switchboard.services import DashboardClient
from switchboard.ui.command_palette.palette_widget import PromptBar
from switchboard.ui.dispatcher import InputMode, KeyDispatcher
from switchboard.ui.executor import CommandExecutor
from switchboard.ui.help_view import HelpOverlay
from switchboard.ui.keys import from_textual
from switchboard.ui.modals import ConfirmDialog
from switchboard.ui.navigation import NavigationStack, StackEntry
from switchboard.ui.views import ResourceView, ViewRegistry
from switchboard.ui.views.resources import MessagesView, build_view_factories
from switchboard.ui.workers import BackgroundRunner

logger = logging.getLogger(__name__)
key_logger = logging.getLogger("key_events")

FOLDER_COMMANDS = ("inbox", "sent", "trash", "drafts")
QUIT_COMMANDS = ("quit", "quit!", "wq")


class DashboardApp(App):
    """Keyboard-driven dashboard for mail, calendar, contacts and webhooks."""

    TITLE = "switchboard"
    AUTO_FOCUS = None

    CSS = """
    Screen {
        layout: vertical;
    }

    #crumbs {
        height: 1;
        padding: 0 1;
        background: $primary-darken-2;
    }

    #content {
        height: 1fr;
    }

    #hints {
        height: 1;
        padding: 0 1;
        background: $surface-darken-1;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        client: DashboardClient,
        settings: Optional[Settings] = None,
        registry: Optional[CommandRegistry] = None,
    ):
        super().__init__()
        self.client = client
        self.settings = settings or Settings()
        self.registry = registry or build_default_registry()
        self.runner: Optional[BackgroundRunner] = None

        self.navigation: NavigationStack[Any] = NavigationStack(
            on_show=self._on_stack_show, on_remove=self._on_stack_remove
        )
        self.views = ViewRegistry(build_view_factories(client, self))
        self.executor = CommandExecutor(self.registry, self._build_actions(), jump_to_row=self.jump_to_row)
        self.dispatcher = KeyDispatcher(
            self.navigation,
            self.views,
            self.registry,
            execute=self.executor,
            host=self,
            chord_window_ms=self.settings.chord_window_ms,
        )

    # -- layout --------------------------------------------------------------------

    def compose(self) -> ComposeResult:
        yield Static("", id="crumbs")
        yield Container(id="content")
        yield PromptBar(id="prompt")
        yield Static("", id="hints")

    def on_mount(self) -> None:
        self.runner = BackgroundRunner(self._post_to_ui)
        prompt = self.query_one(PromptBar)
        self.dispatcher.palette.on_state_update = prompt.show_palette_state
        self.dispatcher.filter_prompt.on_change = prompt.show_filter_text

        default_view = self.settings.default_view
        if not self.views.has(default_view):
            logger.warning(f"Unknown default view {default_view!r}, using dashboard")
            default_view = "dashboard"
        self.navigate_to(default_view)
        logger.info("DashboardApp mounted")

    def on_unmount(self) -> None:
        if self.runner is not None:
            self.runner.shutdown()

    # -- keys ----------------------------------------------------------------------

    async def on_key(self, event: events.Key) -> None:
        key_logger.debug(f"DashboardApp.on_key: key={event.key} character={event.character!r}")
        if self.dispatcher.dispatch(from_textual(event)):
            event.stop()
            event.prevent_default()

    # -- stack callbacks -----------------------------------------------------------

    def _on_stack_show(self, entry: StackEntry) -> None:
        content = self.query_one("#content", Container)
        region = entry.region
        for child in content.children:
            child.display = child is region
        if region.parent is None:
            content.mount(region)
        region.display = True

        view = self.views.get(entry.name)
        if view is not None:
            self.set_focus(None)
        self._update_chrome(entry.name, view)

    def _on_stack_remove(self, entry: StackEntry) -> None:
        if self.views.has(entry.name):
            entry.region.display = False
        else:
            entry.region.remove()

    def _update_chrome(self, name: str, view: Optional[ResourceView]) -> None:
        crumbs = Text(" > ".join(self._titles()), style="bold")
        if view is not None and getattr(view, "filter_text", ""):
            crumbs.append(f"  /{view.filter_text}", style="yellow")
        self.query_one("#crumbs", Static).update(crumbs)

        hints = Text()
        if view is not None:
            for hint in view.hints():
                hints.append(f"<{hint.key}>", style="bold cyan")
                hints.append(f" {hint.description}  ")
        else:
            hints.append("<esc>", style="bold cyan")
            hints.append(" close")
        self.query_one("#hints", Static).update(hints)

    def _titles(self):
        for name in self.navigation.names():
            view = self.views.get(name)
            yield view.title if view is not None else name

    # -- DispatcherHost ----------------------------------------------------------

    def quit(self) -> None:
        logger.info("Quit requested")
        self.exit()

    def show_prompt(self, mode: InputMode) -> None:
        self.query_one(PromptBar).open()

    def hide_prompt(self) -> None:
        self.query_one(PromptBar).close()

    def apply_filter(self, text: str) -> None:
        view = self.dispatcher.active_view()
        if view is None:
            return
        view.filter(text)
        self._update_chrome(view.name, view)
        self.refresh_view()

    # -- ViewHost ------------------------------------------------------------------

    def run_in_background(
        self,
        work: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        description: str = "",
    ) -> None:
        if self.runner is None:
            logger.warning(f"Runner not started, dropping: {description}")
            return
        self.runner.submit(work, on_success, self._report_error, description)

    def _post_to_ui(self, callback: Callable[[], Any]) -> None:
        """Run a worker's callback on the UI thread; dropped once shutting down."""
        if self.runner is None or self.runner.closed:
            logger.debug("Runner closed, dropping callback")
            return
        try:
            self.call_from_thread(callback)
        except RuntimeError as e:
            logger.error(f"call_from_thread failed: {e}")

    def _report_error(self, error: Exception) -> None:
        if isinstance(error, SwitchboardError):
            message = error.message
            if error.retryable:
                message += " (press r to retry)"
        else:
            message = str(error) or error.__class__.__name__
        self.notify(message, title="Error", severity="error")

    def open_overlay(self, name: str, overlay: Any) -> None:
        self.navigation.push(name, overlay)

    def close_overlay(self) -> None:
        self.dispatcher.go_back()

    def confirm(self, title: str, message: str, on_confirm: Callable[[], None]) -> None:
        self.open_overlay("confirm", ConfirmDialog(title, message, on_confirm, self.close_overlay))

    # -- actions -------------------------------------------------------------------

    def _build_actions(self) -> Dict[str, Callable[[], None]]:
        """Command full name -> handler for every command in the registry."""
        actions: Dict[str, Callable[[], None]] = {}
        for group in self.registry.get_by_category():
            if group.category is CommandCategory.NAVIGATION:
                for cmd in group.commands:
                    actions[cmd.name] = partial(self.navigate_to, cmd.name)

        for name in FOLDER_COMMANDS:
            actions[name] = partial(self.show_folder, name)
        for name in QUIT_COMMANDS:
            actions[name] = self.quit
        actions["help"] = self.show_help
        actions["refresh"] = self.refresh_view
        actions["top"] = self.jump_to_top
        actions["bottom"] = self.jump_to_bottom

        for cmd in self.registry.get_all():
            if cmd.sub_commands:
                actions.setdefault(cmd.name, partial(self.show_usage, cmd.name))
                for sub in self.registry.get_sub_commands(cmd.name):
                    actions.setdefault(sub.full_name, partial(self.perform_item_action, sub.full_name))
            else:
                actions.setdefault(cmd.name, partial(self.perform_item_action, cmd.name))
        return actions

    def navigate_to(self, name: str) -> None:
        """Show a view, creating it on first use, and load its data."""
        view = self.views.get_or_create(name)
        if view is None:
            self.notify(f"{name} is not available", severity="warning")
            return
        self.navigation.switch_to(name, view.widget())
        self._load(view)

    def _load(self, view: ResourceView) -> None:
        def done(_result: Any) -> None:
            view.render()
            if self.navigation.top() == view.name:
                self._update_chrome(view.name, view)

        self.run_in_background(view.load, done, description=f"load {view.name}")

    def refresh_view(self) -> None:
        view = self.dispatcher.active_view()
        if view is not None:
            self.run_in_background(view.refresh, lambda _: view.render(), description=f"refresh {view.name}")

    def show_folder(self, folder: str) -> None:
        view = self.views.get_or_create("messages")
        if isinstance(view, MessagesView):
            view.set_folder(folder)
        self.navigate_to("messages")

    def show_help(self) -> None:
        self.open_overlay("help", HelpOverlay(self.registry, self.executor, self.close_overlay))

    def show_usage(self, parent: str) -> None:
        subs = " | ".join(cmd.name for cmd in self.registry.get_sub_commands(parent))
        self.notify(f"Usage: :{parent} <{subs}>")

    def perform_item_action(self, command: str) -> None:
        """Run a command that acts on a view's records.

        Commands tied to a view switch to it first; the rest apply to the
        active view.
        """
        cmd = self.registry.get(command)
        target = ""
        if cmd is not None:
            parent = self.registry.get(cmd.parent) if cmd.parent else None
            target = cmd.context_view or (parent.context_view if parent is not None else "")
        if command == "compose":
            target = "messages"
        if target and self.navigation.top() != target and self.views.has(target):
            self.navigate_to(target)

        view = self.dispatcher.active_view()
        perform = getattr(view, "perform", None)
        if perform is None or not perform(command):
            where = view.title if view is not None else "this context"
            self.notify(f":{command} is not available in {where}", severity="warning")

    def jump_to_row(self, row: int) -> None:
        view = self.dispatcher.active_view()
        if view is not None:
            view.jump_to_row(row)

    def jump_to_top(self) -> None:
        view = self.dispatcher.active_view()
        if view is not None:
            view.jump_to_top()

    def jump_to_bottom(self) -> None:
        view = self.dispatcher.active_view()
        if view is not None:
            view.jump_to_bottom()
