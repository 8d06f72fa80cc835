"""
In-memory client with realistic demo data.

Lets the dashboard run without credentials. Every call sleeps for the
configured latency; when the latency exceeds the request timeout the call
gives up after the timeout and raises ApiTimeoutError, exactly like a
remote call would.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
import time
from datetime import datetime, timedelta

from switchboard.config.constants import (
    DEFAULT_DEMO_LATENCY_SECONDS,
    DEFAULT_LIST_LIMIT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from switchboard.exceptions import ApiError, ApiNotFoundError, ApiTimeoutError

from .types import Contact, Event, Folder, Grant, InboundInbox, Message, Webhook

logger = logging.getLogger(__name__)

SYSTEM_FOLDERS = ("inbox", "sent", "drafts", "trash", "archive")
RSVP_STATUSES = frozenset({"yes", "no", "maybe"})


def _stamp(delta: timedelta) -> str:
    return (datetime.now() + delta).strftime("%Y-%m-%d %H:%M")


def _seed_messages() -> list[Message]:
    rows = [
        ("inbox", "Sarah Chen", "Q4 roadmap review", "Can we move the review to Thursday?", 3, True, True),
        ("inbox", "GitHub", "[switchboard] PR #42 merged", "Your pull request was merged.", 1, True, False),
        ("inbox", "Alex Kim", "Lunch?", "Tacos at noon?", 2, False, False),
        ("inbox", "Billing", "Invoice for October", "Your invoice is attached.", 1, False, True),
        ("inbox", "Priya Patel", "Design feedback", "Left comments on the mockups.", 4, False, False),
        ("sent", "me", "Re: Q4 roadmap review", "Thursday works for me.", 1, False, False),
        ("drafts", "me", "Offsite agenda", "Draft agenda for the offsite.", 1, False, False),
    ]
    messages = []
    for i, (folder, sender, subject, snippet, count, unread, starred) in enumerate(rows, start=1):
        messages.append(
            Message(
                id=f"msg-{i:03d}",
                folder=folder,
                sender=sender,
                to="demo@example.com",
                subject=subject,
                snippet=snippet,
                date=_stamp(-timedelta(hours=i * 5)),
                message_count=count,
                unread=unread,
                starred=starred,
            )
        )
    return messages


def _seed_events() -> list[Event]:
    rows = [
        ("Team standup", 1, 0.25, "Zoom", "yes"),
        ("Design review", 26, 1, "Room 4B", ""),
        ("1:1 with Sarah", 50, 0.5, "Cafe", "maybe"),
        ("Quarterly planning", 74, 3, "Board room", ""),
    ]
    return [
        Event(
            id=f"evt-{i:03d}",
            title=title,
            start=_stamp(timedelta(hours=offset)),
            end=_stamp(timedelta(hours=offset + length)),
            location=location,
            rsvp=rsvp,
        )
        for i, (title, offset, length, location, rsvp) in enumerate(rows, start=1)
    ]


def _seed_contacts() -> list[Contact]:
    rows = [
        ("Sarah Chen", "sarah@company.com", "Company Inc"),
        ("Alex Kim", "alex@startup.io", "Startup"),
        ("Priya Patel", "priya@design.co", "Design Co"),
        ("Jordan Lee", "jordan@example.org", ""),
    ]
    return [
        Contact(id=f"ct-{i:03d}", name=name, email=email, company=company)
        for i, (name, email, company) in enumerate(rows, start=1)
    ]


def _seed_webhooks() -> list[Webhook]:
    return [
        Webhook(
            id="wh-001",
            url="https://hooks.example.com/messages",
            triggers=["message.created", "message.updated"],
            status="active",
        ),
        Webhook(
            id="wh-002",
            url="https://hooks.example.com/calendar",
            triggers=["event.created"],
            status="failing",
        ),
    ]


class DemoClient:
    """DashboardClient backed by seeded in-memory data."""

    def __init__(
        self,
        latency: float = DEFAULT_DEMO_LATENCY_SECONDS,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        self.latency = latency
        self.request_timeout = request_timeout
        self._lock = threading.Lock()
        self._ids = itertools.count(100)

        self._messages = _seed_messages()
        self._folders = [Folder(id=f"fld-{name}", name=name, system=True) for name in SYSTEM_FOLDERS]
        self._events = _seed_events()
        self._contacts = _seed_contacts()
        self._webhooks = _seed_webhooks()
        self._grants = [
            Grant(id="demo-grant-001", email="demo@example.com", provider="google", status="valid"),
            Grant(id="demo-grant-002", email="work@company.com", provider="microsoft", status="valid"),
        ]
        self._inbound = [
            InboundInbox(id="inb-001", email="support@inbound.example.com", message_count=12),
            InboundInbox(id="inb-002", email="sales@inbound.example.com", message_count=3),
        ]

    # -- plumbing ---------------------------------------------------------------

    def _wait(self, operation: str) -> None:
        """Simulate a round trip, raising ApiTimeoutError past the timeout."""
        if self.latency > self.request_timeout:
            time.sleep(self.request_timeout)
            raise ApiTimeoutError(
                f"{operation} timed out", timeout_seconds=self.request_timeout
            )
        if self.latency > 0:
            time.sleep(self.latency)
        logger.debug(f"demo call: {operation}")

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids):03d}"

    @staticmethod
    def _find(items: list, item_id: str, resource: str) -> dict:
        for item in items:
            if item["id"] == item_id:
                return item
        raise ApiNotFoundError(f"{resource} not found", resource=resource, resource_id=item_id)

    # -- mail -------------------------------------------------------------------

    def list_messages(self, folder: str = "inbox", limit: int = DEFAULT_LIST_LIMIT) -> list[Message]:
        self._wait("list messages")
        with self._lock:
            rows = [m for m in self._messages if m["folder"] == folder.lower()]
            return copy.deepcopy(rows[:limit])

    def update_message(
        self,
        message_id: str,
        *,
        unread: bool | None = None,
        starred: bool | None = None,
        folder: str | None = None,
    ) -> Message:
        self._wait("update message")
        with self._lock:
            message = self._find(self._messages, message_id, "message")
            if unread is not None:
                message["unread"] = unread
            if starred is not None:
                message["starred"] = starred
            if folder is not None:
                if not any(f["name"] == folder for f in self._folders):
                    raise ApiNotFoundError("Folder not found", resource="folder", resource_id=folder)
                message["folder"] = folder
            return copy.deepcopy(message)

    def delete_message(self, message_id: str) -> None:
        self._wait("delete message")
        with self._lock:
            message = self._find(self._messages, message_id, "message")
            if message["folder"] == "trash":
                self._messages.remove(message)
            else:
                message["folder"] = "trash"

    def send_message(self, to: str, subject: str, body: str) -> Message:
        self._wait("send message")
        if not to.strip():
            raise ApiError("Message has no recipient")
        message = Message(
            id=self._next_id("msg"),
            folder="sent",
            sender="me",
            to=to.strip(),
            subject=subject,
            snippet=body[:80],
            date=_stamp(timedelta()),
            message_count=1,
            unread=False,
            starred=False,
        )
        with self._lock:
            self._messages.insert(0, message)
        return copy.deepcopy(message)

    def list_folders(self) -> list[Folder]:
        self._wait("list folders")
        with self._lock:
            return copy.deepcopy(self._folders)

    def create_folder(self, name: str) -> Folder:
        self._wait("create folder")
        name = name.strip().lower()
        if not name:
            raise ApiError("Folder name is required")
        with self._lock:
            if any(f["name"] == name for f in self._folders):
                raise ApiError("Folder already exists", folder=name)
            folder = Folder(id=f"fld-{name}", name=name, system=False)
            self._folders.append(folder)
            return copy.deepcopy(folder)

    def delete_folder(self, name: str) -> None:
        self._wait("delete folder")
        with self._lock:
            folder = next((f for f in self._folders if f["name"] == name), None)
            if folder is None:
                raise ApiNotFoundError("Folder not found", resource="folder", resource_id=name)
            if folder["system"]:
                raise ApiError("System folders cannot be deleted", folder=name)
            self._folders.remove(folder)

    # -- calendar -----------------------------------------------------------------

    def list_events(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Event]:
        self._wait("list events")
        with self._lock:
            return copy.deepcopy(sorted(self._events, key=lambda e: e["start"])[:limit])

    def save_event(self, event: Event) -> Event:
        self._wait("save event")
        with self._lock:
            if event.get("id"):
                stored = self._find(self._events, event["id"], "event")
                stored.update(event)
                return copy.deepcopy(stored)
            created = Event(**{**event, "id": self._next_id("evt")})
            self._events.append(created)
            return copy.deepcopy(created)

    def delete_event(self, event_id: str) -> None:
        self._wait("delete event")
        with self._lock:
            self._events.remove(self._find(self._events, event_id, "event"))

    def rsvp_event(self, event_id: str, status: str) -> Event:
        self._wait("rsvp event")
        if status not in RSVP_STATUSES:
            raise ApiError("Invalid RSVP status", status=status)
        with self._lock:
            event = self._find(self._events, event_id, "event")
            event["rsvp"] = status
            return copy.deepcopy(event)

    # -- contacts -------------------------------------------------------------------

    def list_contacts(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Contact]:
        self._wait("list contacts")
        with self._lock:
            return copy.deepcopy(self._contacts[:limit])

    def save_contact(self, contact: Contact) -> Contact:
        self._wait("save contact")
        with self._lock:
            if contact.get("id"):
                stored = self._find(self._contacts, contact["id"], "contact")
                stored.update(contact)
                return copy.deepcopy(stored)
            created = Contact(**{**contact, "id": self._next_id("ct")})
            self._contacts.append(created)
            return copy.deepcopy(created)

    def delete_contact(self, contact_id: str) -> None:
        self._wait("delete contact")
        with self._lock:
            self._contacts.remove(self._find(self._contacts, contact_id, "contact"))

    # -- webhooks -------------------------------------------------------------------

    def list_webhooks(self) -> list[Webhook]:
        self._wait("list webhooks")
        with self._lock:
            return copy.deepcopy(self._webhooks)

    def save_webhook(self, webhook: Webhook) -> Webhook:
        self._wait("save webhook")
        if not webhook.get("url", "").startswith(("http://", "https://")):
            raise ApiError("Webhook URL must be http(s)", url=webhook.get("url"))
        with self._lock:
            if webhook.get("id"):
                stored = self._find(self._webhooks, webhook["id"], "webhook")
                stored.update(webhook)
                return copy.deepcopy(stored)
            created = Webhook(**{"status": "active", **webhook, "id": self._next_id("wh")})
            self._webhooks.append(created)
            return copy.deepcopy(created)

    def delete_webhook(self, webhook_id: str) -> None:
        self._wait("delete webhook")
        with self._lock:
            self._webhooks.remove(self._find(self._webhooks, webhook_id, "webhook"))

    def test_webhook(self, webhook_id: str) -> str:
        self._wait("test webhook")
        with self._lock:
            webhook = self._find(self._webhooks, webhook_id, "webhook")
            return f"Test event sent to {webhook['url']}"

    # -- accounts -------------------------------------------------------------------

    def list_grants(self) -> list[Grant]:
        self._wait("list grants")
        with self._lock:
            return copy.deepcopy(self._grants)

    def list_inbound(self) -> list[InboundInbox]:
        self._wait("list inbound")
        with self._lock:
            return copy.deepcopy(self._inbound)
