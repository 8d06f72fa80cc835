"""
Concrete resource views and the view registration table.

Adding a view means adding a class here and listing it in VIEW_CLASSES;
the dispatcher and executor pick it up through the ViewRegistry.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from rich.text import Text
from textual.widgets import Static

from switchboard.services import DashboardClient
from switchboard.services.types import Contact, Event, Grant, InboundInbox, Message, Webhook
from switchboard.ui.keys import KeyEvent, KeyResult
from switchboard.ui.modals import DetailPane, FormField, FormOverlay, PickerOverlay

from .base import BaseView, ResourceTableView, ViewHost, status_marker
from .protocol import Hint
from .registry import ViewFactory

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M"


# =============================================================================
# Dashboard
# =============================================================================


class DashboardView(BaseView):
    """Landing page: quick navigation and a few live counts."""

    name = "dashboard"
    title = "Dashboard"
    HINTS = (Hint(":", "command"), Hint("?", "help"), Hint("q", "quit"))

    QUICK_NAVIGATION = (
        (":m", "Messages", "Email messages"),
        (":e", "Events", "Calendar events"),
        (":c", "Contacts", "Contacts"),
        (":i", "Inbound", "Inbound inboxes"),
        (":w", "Webhooks", "Webhooks"),
        (":g", "Grants", "Connected accounts"),
    )

    def __init__(self, client: DashboardClient, host: ViewHost):
        super().__init__(client, host)
        self.counts: Dict[str, int] = {}
        self._static: Optional[Static] = None

    def widget(self) -> Static:
        if self._static is None:
            self._static = Static(self.summary(), id="view-dashboard")
        return self._static

    def load(self) -> None:
        messages = self.client.list_messages("inbox")
        self.counts = {
            "unread": sum(1 for m in messages if m["unread"]),
            "events": len(self.client.list_events()),
            "failing webhooks": sum(1 for w in self.client.list_webhooks() if w["status"] != "active"),
        }

    def summary(self) -> Text:
        text = Text()
        text.append("Quick Navigation\n\n", style="bold")
        for cmd, name, desc in self.QUICK_NAVIGATION:
            text.append(f"  {cmd:<6}", style="bold cyan")
            text.append(f"  {name:<12}")
            text.append(f"  {desc}\n", style="dim")
        if self.counts:
            text.append("\nAt a glance\n\n", style="bold")
            for label, count in self.counts.items():
                text.append(f"  {count:>4}  {label}\n")
        text.append("\nPress : to enter command mode", style="dim")
        return text

    def render(self) -> None:
        if self._static is not None:
            self._static.update(self.summary())

    def filter(self, text: str) -> None:
        pass

    def handle_key(self, event: KeyEvent) -> KeyResult:
        return KeyResult.PASSTHROUGH

    def scroll_page(self, pages: float) -> None:
        pass

    def jump_to_row(self, row: int) -> None:
        pass

    def jump_to_top(self) -> None:
        pass

    def jump_to_bottom(self) -> None:
        pass

    def selected_item(self) -> None:
        return None


# =============================================================================
# Messages
# =============================================================================


class MessagesView(ResourceTableView[Message]):
    """Mail threads of one folder."""

    name = "messages"
    title = "Inbox"
    COLUMNS = (("", 3), ("FROM", 24), ("SUBJECT", None), ("MSGS", 5), ("DATE", 17))
    KEYS = {
        "n": "compose",
        "R": "reply",
        "A": "replyall",
        "s": "star",
        "u": "unread",
        "F": "folder list",
    }
    HINTS = (
        Hint("enter", "view"),
        Hint("n", "compose"),
        Hint("R", "reply"),
        Hint("s", "star"),
        Hint("u", "unread"),
        Hint("dd", "delete"),
        Hint("F", "folders"),
    )

    def __init__(self, client: DashboardClient, host: ViewHost):
        super().__init__(client, host)
        self.folder = "inbox"

    def set_folder(self, folder: str) -> None:
        """Show another folder. Takes effect on the next load."""
        self.folder = folder.lower()
        self.title = self.folder.capitalize()
        self.cursor = 0

    def fetch(self) -> List[Message]:
        return self.client.list_messages(self.folder)

    def row(self, item: Message) -> Sequence[Any]:
        return (
            status_marker((item["unread"], "●"), (item["starred"], "★")),
            item["sender"],
            item["subject"],
            str(item["message_count"]),
            item["date"],
        )

    def actions(self) -> Dict[str, Callable[[], None]]:
        return {
            "compose": self.compose,
            "reply": partial(self.reply, everyone=False),
            "replyall": partial(self.reply, everyone=True),
            "forward": self.forward,
            "star": self.toggle_star,
            "unstar": partial(self.update_selected, "Star removed", starred=False),
            "read": partial(self.update_selected, "Marked as read", unread=False),
            "unread": partial(self.update_selected, "Marked as unread", unread=True),
            "archive": partial(self.update_selected, "Archived", folder="archive"),
            "delete": self.delete_selected,
            "folder list": self.pick_folder,
            "folder create": self.create_folder,
            "folder delete": self.delete_folder,
        }

    def show_detail(self, item: Message) -> None:
        fields = [
            ("From", item["sender"]),
            ("To", item["to"]),
            ("Subject", item["subject"]),
            ("Date", item["date"]),
            ("Folder", item["folder"]),
            ("Messages", item["message_count"]),
        ]
        self.host.open_overlay("message-detail", DetailPane(item["subject"], fields, item["snippet"]))

    # -- compose -------------------------------------------------------------------

    def _open_compose(self, title: str, to: str = "", subject: str = "", body: str = "") -> None:
        fields = [
            FormField("to", "To", to, "name@example.com", required=True),
            FormField("subject", "Subject", subject),
            FormField("body", "Body", body),
        ]
        self.host.open_overlay("compose", FormOverlay(title, fields, self._send))

    def _send(self, values: Dict[str, str]) -> None:
        self.host.close_overlay()
        self.host.run_in_background(
            lambda: self.client.send_message(values["to"], values["subject"], values["body"]),
            self.after_change(f"Message sent to {values['to']}"),
            description="send message",
        )

    def compose(self) -> None:
        self._open_compose("New Message")

    def reply(self, everyone: bool = False) -> None:
        item = self.require_selection()
        if item is None:
            return
        recipients = [item["sender"]]
        if everyone and item["to"]:
            recipients.append(item["to"])
        subject = item["subject"]
        if not subject.lower().startswith("re:"):
            subject = f"Re: {subject}"
        self._open_compose("Reply All" if everyone else "Reply", ", ".join(recipients), subject)

    def forward(self) -> None:
        item = self.require_selection()
        if item is None:
            return
        body = f"---------- Forwarded message ----------\nFrom: {item['sender']}\n\n{item['snippet']}"
        self._open_compose("Forward", subject=f"Fwd: {item['subject']}", body=body)

    # -- flags ---------------------------------------------------------------------

    def update_selected(self, done_message: str, **changes: Any) -> None:
        item = self.require_selection()
        if item is None:
            return
        self.host.run_in_background(
            lambda: self.client.update_message(item["id"], **changes),
            self.after_change(done_message),
            description=f"update message {item['id']}",
        )

    def toggle_star(self) -> None:
        item = self.selected_item()
        if item is None:
            self.require_selection()
            return
        starred = not item["starred"]
        self.update_selected("Thread starred" if starred else "Star removed", starred=starred)

    def delete_selected(self) -> None:
        item = self.require_selection()
        if item is None:
            return

        def confirmed() -> None:
            self.host.run_in_background(
                lambda: self.client.delete_message(item["id"]),
                self.after_change("Message deleted"),
                description=f"delete message {item['id']}",
            )

        self.host.confirm("Delete Message", f"Delete '{item['subject']}'?", confirmed)

    # -- folders -------------------------------------------------------------------

    def _with_folders(self, title: str, pick: Callable[[str], None], user_only: bool = False) -> None:
        def show(folders: List[Dict[str, Any]]) -> None:
            names = [f["name"] for f in folders if not (user_only and f["system"])]
            if not names:
                self.host.notify("No folders to choose from", severity="warning")
                return
            self.host.open_overlay(
                "folder-picker", PickerOverlay(title, names, pick, self.host.close_overlay)
            )

        self.host.run_in_background(self.client.list_folders, show, description="list folders")

    def pick_folder(self) -> None:
        def switch(name: str) -> None:
            self.set_folder(name)
            self.reload()

        self._with_folders("Folders", switch)

    def create_folder(self) -> None:
        def submit(values: Dict[str, str]) -> None:
            self.host.close_overlay()
            self.host.run_in_background(
                lambda: self.client.create_folder(values["name"]),
                lambda _: self.host.notify(f"Folder created: {values['name']}"),
                description="create folder",
            )

        form = FormOverlay("New Folder", [FormField("name", "Name", required=True)], submit)
        self.host.open_overlay("folder-form", form)

    def delete_folder(self) -> None:
        def pick(name: str) -> None:
            def confirmed() -> None:
                self.host.run_in_background(
                    lambda: self.client.delete_folder(name),
                    lambda _: self.host.notify(f"Folder deleted: {name}"),
                    description="delete folder",
                )

            self.host.confirm("Delete Folder", f"Delete folder '{name}'?", confirmed)

        self._with_folders("Delete Folder", pick, user_only=True)


# =============================================================================
# Events
# =============================================================================


def _check_time(value: str, label: str) -> Optional[str]:
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return f"{label} must look like 2024-01-31 09:30"
    return None


class EventsView(ResourceTableView[Event]):
    """Upcoming calendar events."""

    name = "events"
    title = "Events"
    COLUMNS = (("RSVP", 6), ("TITLE", None), ("START", 17), ("END", 17), ("LOCATION", 20))
    KEYS = {"n": "event new", "e": "event edit"}
    HINTS = (
        Hint("enter", "view"),
        Hint("n", "new"),
        Hint("e", "edit"),
        Hint("dd", "delete"),
        Hint(":rsvp", "respond"),
    )

    def fetch(self) -> List[Event]:
        return self.client.list_events()

    def row(self, item: Event) -> Sequence[Any]:
        return (item["rsvp"] or "-", item["title"], item["start"], item["end"], item["location"])

    def actions(self) -> Dict[str, Callable[[], None]]:
        return {
            "event new": partial(self.edit, None),
            "event edit": self.edit_selected,
            "event delete": self.delete_selected,
            "delete": self.delete_selected,
            "rsvp yes": partial(self.rsvp, "yes"),
            "rsvp no": partial(self.rsvp, "no"),
            "rsvp maybe": partial(self.rsvp, "maybe"),
        }

    def show_detail(self, item: Event) -> None:
        fields = [
            ("Title", item["title"]),
            ("Start", item["start"]),
            ("End", item["end"]),
            ("Location", item["location"] or "-"),
            ("RSVP", item["rsvp"] or "not answered"),
        ]
        self.host.open_overlay("event-detail", DetailPane(item["title"], fields))

    def edit(self, event: Optional[Event]) -> None:
        event = event or Event(id="", title="", start="", end="", location="", rsvp="")
        fields = [
            FormField("title", "Title", event["title"], required=True),
            FormField("start", "Start", event["start"], DATE_FORMAT.replace("%", ""), required=True),
            FormField("end", "End", event["end"], DATE_FORMAT.replace("%", "")),
            FormField("location", "Location", event["location"]),
        ]

        def submit(values: Dict[str, str]) -> None:
            values["end"] = values["end"] or values["start"]
            for key in ("start", "end"):
                problem = _check_time(values[key], key.capitalize())
                if problem:
                    self.host.notify(problem, severity="error")
                    return
            self.host.close_overlay()
            saved = Event(**{**event, **values})
            self.host.run_in_background(
                lambda: self.client.save_event(saved),
                self.after_change(f"Event saved: {saved['title']}"),
                description="save event",
            )

        title = "Edit Event" if event["id"] else "New Event"
        self.host.open_overlay("event-form", FormOverlay(title, fields, submit))

    def edit_selected(self) -> None:
        item = self.require_selection()
        if item is not None:
            self.edit(item)

    def delete_selected(self) -> None:
        item = self.require_selection()
        if item is None:
            return

        def confirmed() -> None:
            self.host.run_in_background(
                lambda: self.client.delete_event(item["id"]),
                self.after_change(f"Event deleted: {item['title']}"),
                description="delete event",
            )

        self.host.confirm("Delete Event", f"Delete event '{item['title']}'?", confirmed)

    def rsvp(self, status: str) -> None:
        item = self.require_selection()
        if item is None:
            return
        self.host.run_in_background(
            lambda: self.client.rsvp_event(item["id"], status),
            self.after_change(f"RSVP {status}: {item['title']}"),
            description="rsvp",
        )


# =============================================================================
# Contacts
# =============================================================================


class ContactsView(ResourceTableView[Contact]):
    name = "contacts"
    title = "Contacts"
    COLUMNS = (("NAME", 30), ("EMAIL", None), ("COMPANY", 25))
    KEYS = {"n": "contact new", "e": "contact edit"}
    HINTS = (Hint("enter", "view"), Hint("n", "new"), Hint("e", "edit"), Hint("dd", "delete"))

    def fetch(self) -> List[Contact]:
        return self.client.list_contacts()

    def row(self, item: Contact) -> Sequence[Any]:
        return (item["name"], item["email"], item["company"])

    def actions(self) -> Dict[str, Callable[[], None]]:
        return {
            "contact new": partial(self.edit, None),
            "contact edit": self.edit_selected,
            "contact delete": self.delete_selected,
            "delete": self.delete_selected,
        }

    def show_detail(self, item: Contact) -> None:
        fields = [("Name", item["name"]), ("Email", item["email"]), ("Company", item["company"] or "-")]
        self.host.open_overlay("contact-detail", DetailPane(item["name"], fields))

    def edit(self, contact: Optional[Contact]) -> None:
        contact = contact or Contact(id="", name="", email="", company="")
        fields = [
            FormField("name", "Name", contact["name"], required=True),
            FormField("email", "Email", contact["email"], "name@example.com", required=True),
            FormField("company", "Company", contact["company"]),
        ]

        def submit(values: Dict[str, str]) -> None:
            if "@" not in values["email"]:
                self.host.notify("Email address looks invalid", severity="error")
                return
            self.host.close_overlay()
            saved = Contact(**{**contact, **values})
            self.host.run_in_background(
                lambda: self.client.save_contact(saved),
                self.after_change(f"Contact saved: {saved['name']}"),
                description="save contact",
            )

        title = "Edit Contact" if contact["id"] else "New Contact"
        self.host.open_overlay("contact-form", FormOverlay(title, fields, submit))

    def edit_selected(self) -> None:
        item = self.require_selection()
        if item is not None:
            self.edit(item)

    def delete_selected(self) -> None:
        item = self.require_selection()
        if item is None:
            return

        def confirmed() -> None:
            self.host.run_in_background(
                lambda: self.client.delete_contact(item["id"]),
                self.after_change(f"Contact deleted: {item['name']}"),
                description="delete contact",
            )

        self.host.confirm("Delete Contact", f"Delete contact '{item['name']}'?", confirmed)


# =============================================================================
# Webhooks
# =============================================================================


class WebhooksView(ResourceTableView[Webhook]):
    name = "webhooks"
    title = "Webhooks"
    COLUMNS = (("TRIGGERS", 30), ("URL", None), ("STATUS", 12))
    KEYS = {"n": "webhook new", "e": "webhook edit", "t": "webhook test"}
    HINTS = (
        Hint("enter", "view"),
        Hint("n", "new"),
        Hint("e", "edit"),
        Hint("t", "test"),
        Hint("dd", "delete"),
    )

    def fetch(self) -> List[Webhook]:
        return self.client.list_webhooks()

    def row(self, item: Webhook) -> Sequence[Any]:
        status = Text(item["status"], style="green" if item["status"] == "active" else "red")
        return (", ".join(item["triggers"]), item["url"], status)

    def actions(self) -> Dict[str, Callable[[], None]]:
        return {
            "webhook new": partial(self.edit, None),
            "webhook edit": self.edit_selected,
            "webhook delete": self.delete_selected,
            "webhook test": self.test_selected,
            "delete": self.delete_selected,
        }

    def show_detail(self, item: Webhook) -> None:
        fields = [
            ("ID", item["id"]),
            ("URL", item["url"]),
            ("Status", item["status"]),
            ("Triggers", ", ".join(item["triggers"])),
        ]
        self.host.open_overlay("webhook-detail", DetailPane(item["url"], fields))

    def edit(self, webhook: Optional[Webhook]) -> None:
        webhook = webhook or Webhook(id="", url="", triggers=[], status="active")
        fields = [
            FormField("url", "URL", webhook["url"], "https://", required=True),
            FormField("triggers", "Triggers", ", ".join(webhook["triggers"]), "message.created, event.created"),
        ]

        def submit(values: Dict[str, str]) -> None:
            self.host.close_overlay()
            triggers = [t.strip() for t in values["triggers"].split(",") if t.strip()]
            saved = Webhook(**{**webhook, "url": values["url"], "triggers": triggers})
            self.host.run_in_background(
                lambda: self.client.save_webhook(saved),
                self.after_change(f"Webhook saved: {saved['url']}"),
                description="save webhook",
            )

        title = "Edit Webhook" if webhook["id"] else "New Webhook"
        self.host.open_overlay("webhook-form", FormOverlay(title, fields, submit))

    def edit_selected(self) -> None:
        item = self.require_selection()
        if item is not None:
            self.edit(item)

    def delete_selected(self) -> None:
        item = self.require_selection()
        if item is None:
            return

        def confirmed() -> None:
            self.host.run_in_background(
                lambda: self.client.delete_webhook(item["id"]),
                self.after_change("Webhook deleted"),
                description="delete webhook",
            )

        self.host.confirm("Delete Webhook", f"Delete webhook for {item['url']}?", confirmed)

    def test_selected(self) -> None:
        item = self.require_selection()
        if item is None:
            return
        self.host.run_in_background(
            lambda: self.client.test_webhook(item["id"]),
            lambda result: self.host.notify(result),
            description="test webhook",
        )


# =============================================================================
# Grants / Inbound
# =============================================================================


class GrantsView(ResourceTableView[Grant]):
    name = "grants"
    title = "Grants"
    COLUMNS = (("EMAIL", 35), ("PROVIDER", 15), ("STATUS", 10), ("GRANT ID", None))
    HINTS = (Hint("enter", "view"), Hint("r", "refresh"))

    def fetch(self) -> List[Grant]:
        return self.client.list_grants()

    def row(self, item: Grant) -> Sequence[Any]:
        return (item["email"], item["provider"], item["status"], item["id"])

    def show_detail(self, item: Grant) -> None:
        fields = [("Email", item["email"]), ("Provider", item["provider"]), ("Status", item["status"]), ("ID", item["id"])]
        self.host.open_overlay("grant-detail", DetailPane(item["email"], fields))


class InboundView(ResourceTableView[InboundInbox]):
    name = "inbound"
    title = "Inbound"
    COLUMNS = (("EMAIL", None), ("MESSAGES", 10), ("ID", 20))
    HINTS = (Hint("enter", "view"), Hint("r", "refresh"))

    def fetch(self) -> List[InboundInbox]:
        return self.client.list_inbound()

    def row(self, item: InboundInbox) -> Sequence[Any]:
        return (item["email"], str(item["message_count"]), item["id"])

    def show_detail(self, item: InboundInbox) -> None:
        fields = [("Email", item["email"]), ("Messages", item["message_count"]), ("ID", item["id"])]
        self.host.open_overlay("inbound-detail", DetailPane(item["email"], fields))


# =============================================================================
# Registration
# =============================================================================

VIEW_CLASSES: Tuple[type, ...] = (
    DashboardView,
    MessagesView,
    EventsView,
    ContactsView,
    WebhooksView,
    GrantsView,
    InboundView,
)


def build_view_factories(client: DashboardClient, host: ViewHost) -> Dict[str, ViewFactory]:
    """Name -> factory for every view, bound to client and host."""
    return {cls.name: partial(cls, client, host) for cls in VIEW_CLASSES}
