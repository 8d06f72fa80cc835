"""
Port for the remote API used by views and actions.

Every method blocks and is called from a background worker, never from the
UI thread. Implementations raise ApiError subclasses; a call that runs
longer than the client's request timeout raises ApiTimeoutError.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import Contact, Event, Folder, Grant, InboundInbox, Message, Webhook


@runtime_checkable
class DashboardClient(Protocol):
    """Operations the dashboard needs from the remote service."""

    request_timeout: float

    # Mail
    def list_messages(self, folder: str = "inbox", limit: int = 50) -> list[Message]: ...

    def update_message(
        self,
        message_id: str,
        *,
        unread: bool | None = None,
        starred: bool | None = None,
        folder: str | None = None,
    ) -> Message: ...

    def delete_message(self, message_id: str) -> None: ...

    def send_message(self, to: str, subject: str, body: str) -> Message: ...

    def list_folders(self) -> list[Folder]: ...

    def create_folder(self, name: str) -> Folder: ...

    def delete_folder(self, name: str) -> None: ...

    # Calendar
    def list_events(self, limit: int = 50) -> list[Event]: ...

    def save_event(self, event: Event) -> Event: ...

    def delete_event(self, event_id: str) -> None: ...

    def rsvp_event(self, event_id: str, status: str) -> Event: ...

    # Contacts
    def list_contacts(self, limit: int = 50) -> list[Contact]: ...

    def save_contact(self, contact: Contact) -> Contact: ...

    def delete_contact(self, contact_id: str) -> None: ...

    # Webhooks
    def list_webhooks(self) -> list[Webhook]: ...

    def save_webhook(self, webhook: Webhook) -> Webhook: ...

    def delete_webhook(self, webhook_id: str) -> None: ...

    def test_webhook(self, webhook_id: str) -> str: ...

    # Accounts
    def list_grants(self) -> list[Grant]: ...

    def list_inbound(self) -> list[InboundInbox]: ...
