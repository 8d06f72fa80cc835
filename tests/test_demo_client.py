"""Tests for the in-memory demo client."""

import pytest

from switchboard.exceptions import ApiError, ApiNotFoundError, ApiTimeoutError
from switchboard.services import DashboardClient, DemoClient
from switchboard.services.demo_client import SYSTEM_FOLDERS


def test_satisfies_client_protocol(client):
    assert isinstance(client, DashboardClient)


class TestMessages:
    def test_list_inbox(self, client):
        messages = client.list_messages()
        assert len(messages) == 5
        assert all(m["folder"] == "inbox" for m in messages)
        assert messages[0]["subject"] == "Q4 roadmap review"

    def test_list_other_folder(self, client):
        assert [m["folder"] for m in client.list_messages("SENT")] == ["sent"]

    def test_limit(self, client):
        assert len(client.list_messages(limit=2)) == 2

    def test_returns_copies(self, client):
        client.list_messages()[0]["subject"] = "changed"
        assert client.list_messages()[0]["subject"] == "Q4 roadmap review"

    def test_update_flags(self, client):
        updated = client.update_message("msg-001", unread=False, starred=False)
        assert updated["unread"] is False
        assert updated["starred"] is False
        assert client.list_messages()[0]["unread"] is False

    def test_archive_moves_folder(self, client):
        client.update_message("msg-002", folder="archive")
        assert [m["id"] for m in client.list_messages("archive")] == ["msg-002"]

    def test_update_to_unknown_folder(self, client):
        with pytest.raises(ApiNotFoundError):
            client.update_message("msg-002", folder="nowhere")

    def test_update_unknown_message(self, client):
        with pytest.raises(ApiNotFoundError) as exc_info:
            client.update_message("msg-999", unread=True)
        assert exc_info.value.context["resource_id"] == "msg-999"

    def test_delete_moves_to_trash_then_removes(self, client):
        client.delete_message("msg-003")
        assert [m["id"] for m in client.list_messages("trash")] == ["msg-003"]
        client.delete_message("msg-003")
        assert client.list_messages("trash") == []

    def test_send(self, client):
        sent = client.send_message("alex@startup.io", "Hi", "Hello there")
        assert sent["folder"] == "sent"
        assert sent["id"].startswith("msg-")
        assert client.list_messages("sent")[0]["id"] == sent["id"]

    def test_send_requires_recipient(self, client):
        with pytest.raises(ApiError):
            client.send_message("  ", "Hi", "")


class TestFolders:
    def test_system_folders(self, client):
        folders = client.list_folders()
        assert [f["name"] for f in folders] == list(SYSTEM_FOLDERS)
        assert all(f["system"] for f in folders)

    def test_create_and_delete(self, client):
        created = client.create_folder(" Receipts ")
        assert created["name"] == "receipts"
        assert created["system"] is False
        client.delete_folder("receipts")
        assert "receipts" not in [f["name"] for f in client.list_folders()]

    def test_create_duplicate(self, client):
        with pytest.raises(ApiError):
            client.create_folder("inbox")

    def test_create_empty(self, client):
        with pytest.raises(ApiError):
            client.create_folder("   ")

    def test_system_folder_cannot_be_deleted(self, client):
        with pytest.raises(ApiError):
            client.delete_folder("inbox")

    def test_delete_unknown_folder(self, client):
        with pytest.raises(ApiNotFoundError):
            client.delete_folder("missing")


class TestEvents:
    def test_sorted_by_start(self, client):
        starts = [e["start"] for e in client.list_events()]
        assert starts == sorted(starts)

    def test_create_update_delete(self, client):
        created = client.save_event(
            {"id": "", "title": "Retro", "start": "2030-01-01 10:00", "end": "2030-01-01 11:00", "location": "", "rsvp": ""}
        )
        assert created["id"].startswith("evt-")

        updated = client.save_event({**created, "title": "Sprint retro"})
        assert updated["id"] == created["id"]
        assert updated["title"] == "Sprint retro"

        client.delete_event(created["id"])
        assert created["id"] not in [e["id"] for e in client.list_events()]

    def test_rsvp(self, client):
        assert client.rsvp_event("evt-002", "yes")["rsvp"] == "yes"

    def test_rsvp_invalid_status(self, client):
        with pytest.raises(ApiError):
            client.rsvp_event("evt-002", "perhaps")


class TestContactsAndWebhooks:
    def test_contacts(self, client):
        created = client.save_contact({"id": "", "name": "Sam", "email": "sam@example.com", "company": ""})
        assert any(c["id"] == created["id"] for c in client.list_contacts())
        client.delete_contact(created["id"])
        assert len(client.list_contacts()) == 4

    def test_webhook_requires_http_url(self, client):
        with pytest.raises(ApiError):
            client.save_webhook({"id": "", "url": "ftp://x", "triggers": [], "status": "active"})

    def test_new_webhook_defaults_active(self, client):
        created = client.save_webhook({"id": "", "url": "https://example.com/hook", "triggers": ["message.created"]})
        assert created["status"] == "active"

    def test_test_webhook(self, client):
        assert "hooks.example.com/messages" in client.test_webhook("wh-001")

    def test_delete_webhook(self, client):
        client.delete_webhook("wh-002")
        assert [w["id"] for w in client.list_webhooks()] == ["wh-001"]

    def test_accounts(self, client):
        assert len(client.list_grants()) == 2
        assert len(client.list_inbound()) == 2


class TestLatency:
    def test_timeout_raises_retryable_error(self):
        slow = DemoClient(latency=0.05, request_timeout=0.01)
        with pytest.raises(ApiTimeoutError) as exc_info:
            slow.list_messages()
        assert exc_info.value.retryable
        assert exc_info.value.context["timeout_seconds"] == 0.01
