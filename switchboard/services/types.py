"""TypedDict definitions for records returned by dashboard clients."""

from __future__ import annotations

from typing import TypedDict

# ── Mail ───────────────────────────────────────────────────────────────


class Message(TypedDict):
    """A mail thread as listed in the messages view."""

    id: str
    folder: str
    sender: str
    to: str
    subject: str
    snippet: str
    date: str
    message_count: int
    unread: bool
    starred: bool


class Folder(TypedDict):
    id: str
    name: str
    system: bool


# ── Calendar ───────────────────────────────────────────────────────────


class Event(TypedDict):
    """Calendar event."""

    id: str
    title: str
    start: str
    end: str
    location: str
    rsvp: str  # "yes", "no", "maybe" or "" when not answered


# ── Contacts ───────────────────────────────────────────────────────────


class Contact(TypedDict):
    id: str
    name: str
    email: str
    company: str


# ── Webhooks / accounts ────────────────────────────────────────────────


class Webhook(TypedDict):
    id: str
    url: str
    triggers: list[str]
    status: str


class Grant(TypedDict):
    """A connected account."""

    id: str
    email: str
    provider: str
    status: str


class InboundInbox(TypedDict):
    id: str
    email: str
    message_count: int
