"""
Tests for the resource views.

Views keep their records, filter and cursor themselves, so they are driven
here through a fake host without mounting any widgets.
"""

from __future__ import annotations

import pytest

from switchboard.ui.keys import KeyCode, KeyEvent, KeyResult
from switchboard.ui.modals import ConfirmDialog, DetailPane, FormOverlay, PickerOverlay
from switchboard.ui.views import ResourceView, ViewRegistry
from switchboard.ui.views.resources import (
    VIEW_CLASSES,
    ContactsView,
    DashboardView,
    EventsView,
    InboundView,
    MessagesView,
    WebhooksView,
    build_view_factories,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def loaded(view_class, client, host):
    view = view_class(client, host)
    view.load()
    view.render()
    return view


def submit_form(host, **values) -> None:
    """Fill the top overlay form and submit it."""
    form = host.top_overlay
    assert isinstance(form, FormOverlay)
    form.values.update(values)
    assert form.submit()


def confirm_last(host) -> None:
    _, _, on_confirm = host.confirmations[-1]
    on_confirm()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegistration:
    """Every view is reachable by name through the view registry."""

    def test_factories_cover_every_view(self, client, host):
        registry = ViewRegistry(build_view_factories(client, host))
        assert set(registry.names()) == {cls.name for cls in VIEW_CLASSES}

    def test_views_created_lazily_and_cached(self, client, host):
        registry = ViewRegistry(build_view_factories(client, host))
        assert registry.get("messages") is None
        first = registry.get_or_create("messages")
        assert registry.get_or_create("messages") is first
        assert registry.created() == [first]

    def test_unknown_view(self, client, host):
        registry = ViewRegistry(build_view_factories(client, host))
        assert registry.get_or_create("spreadsheets") is None
        assert not registry.has("spreadsheets")

    @pytest.mark.parametrize("view_class", VIEW_CLASSES)
    def test_views_satisfy_protocol(self, view_class, client, host):
        assert isinstance(view_class(client, host), ResourceView)


# ---------------------------------------------------------------------------
# Cursor and filtering
# ---------------------------------------------------------------------------


class TestCursor:
    """Cursor movement is clamped to the visible rows."""

    def test_j_and_k(self, client, host):
        view = loaded(MessagesView, client, host)
        assert view.handle_key(KeyEvent.rune("j")) is KeyResult.CONSUMED
        assert view.cursor == 1
        view.handle_key(KeyEvent.key(KeyCode.UP))
        view.handle_key(KeyEvent.rune("k"))
        assert view.cursor == 0

    def test_bottom_and_top(self, client, host):
        view = loaded(MessagesView, client, host)
        view.handle_key(KeyEvent.rune("G"))
        assert view.cursor == 4
        view.handle_key(KeyEvent.rune("j"))
        assert view.cursor == 4
        view.handle_key(KeyEvent.key(KeyCode.HOME))
        assert view.cursor == 0

    def test_jump_to_row_is_one_based_and_clamped(self, client, host):
        view = loaded(MessagesView, client, host)
        view.jump_to_row(3)
        assert view.selected_item()["id"] == "msg-003"
        view.jump_to_row(99)
        assert view.cursor == 4
        view.jump_to_row(0)
        assert view.cursor == 0

    def test_scroll_page(self, client, host):
        view = loaded(MessagesView, client, host)
        view.page_size = 2
        view.scroll_page(1.0)
        assert view.cursor == 2
        view.scroll_page(0.5)
        assert view.cursor == 3
        view.scroll_page(-0.1)
        assert view.cursor == 2

    def test_unhandled_key_passes_through(self, client, host):
        view = loaded(MessagesView, client, host)
        assert view.handle_key(KeyEvent.rune("z")) is KeyResult.PASSTHROUGH

    def test_empty_view(self, client, host):
        view = MessagesView(client, host)
        view.jump_to_bottom()
        assert view.cursor == 0
        assert view.selected_item() is None
        assert view.require_selection() is None
        assert host.notifications == [("Nothing selected", "warning")]


class TestFilter:
    """Filtering narrows the visible rows and survives reloads."""

    def test_filter_matches_any_column(self, client, host):
        view = loaded(ContactsView, client, host)
        view.filter("startup")
        assert [c["name"] for c in view.visible] == ["Alex Kim"]

    def test_filter_is_case_insensitive_and_resets_cursor(self, client, host):
        view = loaded(ContactsView, client, host)
        view.jump_to_bottom()
        view.filter("SARAH")
        assert view.cursor == 0
        assert [c["name"] for c in view.visible] == ["Sarah Chen"]

    def test_clear_filter(self, client, host):
        view = loaded(ContactsView, client, host)
        view.filter("sarah")
        view.filter("")
        assert len(view.visible) == 4

    def test_filter_kept_after_refresh(self, client, host):
        view = loaded(ContactsView, client, host)
        view.filter("sarah")
        client.save_contact({"id": "", "name": "Sarah Jones", "email": "sj@example.com", "company": ""})
        view.refresh()
        view.render()
        assert [c["name"] for c in view.visible] == ["Sarah Chen", "Sarah Jones"]

    def test_no_match_leaves_empty_list(self, client, host):
        view = loaded(ContactsView, client, host)
        view.filter("nobody")
        assert view.visible == []
        assert view.selected_item() is None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestMessagesView:
    """Mail actions through perform() and direct keys."""

    def test_enter_opens_detail(self, client, host):
        view = loaded(MessagesView, client, host)
        view.handle_key(KeyEvent.key(KeyCode.ENTER))
        name, overlay = host.overlays[-1]
        assert name == "message-detail"
        assert isinstance(overlay, DetailPane)
        assert "Sarah Chen" in overlay.render_text().plain

    def test_star_toggles(self, client, host):
        view = loaded(MessagesView, client, host)
        # msg-001 starts starred
        assert view.handle_key(KeyEvent.rune("s")) is KeyResult.CONSUMED
        assert client.list_messages()[0]["starred"] is False
        assert "Star removed" in host.messages
        assert view.selected_item()["starred"] is False

    def test_mark_unread_and_read(self, client, host):
        view = loaded(MessagesView, client, host)
        view.jump_to_row(3)
        assert view.perform("unread")
        assert view.selected_item()["unread"] is True
        assert view.perform("read")
        assert view.selected_item()["unread"] is False

    def test_archive(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("archive")
        assert len(view.items) == 4
        assert [m["id"] for m in client.list_messages("archive")] == ["msg-001"]

    def test_delete_asks_first(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("delete")
        assert len(view.items) == 5
        title, message, _ = host.confirmations[-1]
        assert title == "Delete Message"
        assert "Q4 roadmap review" in message

        confirm_last(host)
        assert len(view.items) == 4
        assert "Message deleted" in host.messages

    def test_compose_and_send(self, client, host):
        view = loaded(MessagesView, client, host)
        view.handle_key(KeyEvent.rune("n"))
        name, form = host.overlays[-1]
        assert name == "compose"

        submit_form(host, to="alex@startup.io", subject="Hi", body="Hello")
        assert host.overlays == []
        assert client.list_messages("sent")[0]["to"] == "alex@startup.io"
        assert "Message sent to alex@startup.io" in host.messages

    def test_compose_requires_recipient(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("compose")
        form = host.top_overlay
        assert form.submit() is False
        assert form.missing() == ["to"]
        assert "To" in form.error

    def test_reply_prefills(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("reply")
        form = host.top_overlay
        assert form.values["to"] == "Sarah Chen"
        assert form.values["subject"] == "Re: Q4 roadmap review"

    def test_reply_all_adds_recipients(self, client, host):
        view = loaded(MessagesView, client, host)
        view.handle_key(KeyEvent.rune("A"))
        assert host.top_overlay.values["to"] == "Sarah Chen, demo@example.com"

    def test_forward(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("forward")
        form = host.top_overlay
        assert form.values["to"] == ""
        assert form.values["subject"] == "Fwd: Q4 roadmap review"
        assert "Forwarded message" in form.values["body"]

    def test_reply_with_nothing_selected(self, client, host):
        view = MessagesView(client, host)
        view.perform("reply")
        assert host.overlays == []
        assert ("Nothing selected", "warning") in host.notifications

    def test_unknown_command(self, client, host):
        view = loaded(MessagesView, client, host)
        assert view.perform("rsvp yes") is False

    def test_set_folder(self, client, host):
        view = loaded(MessagesView, client, host)
        view.jump_to_bottom()
        view.set_folder("Sent")
        view.load()
        view.render()
        assert view.title == "Sent"
        assert view.cursor == 0
        assert [m["folder"] for m in view.visible] == ["sent"]

    def test_folder_picker_switches_folder(self, client, host):
        view = loaded(MessagesView, client, host)
        view.handle_key(KeyEvent.rune("F"))
        name, picker = host.overlays[-1]
        assert name == "folder-picker"
        assert isinstance(picker, PickerOverlay)
        assert picker.choices[0] == "inbox"

        picker.handle_key(KeyEvent.rune("j"))
        picker.handle_key(KeyEvent.key(KeyCode.ENTER))
        assert host.overlays == []
        assert view.folder == "sent"
        assert [m["folder"] for m in view.visible] == ["sent"]

    def test_folder_create_and_delete(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("folder create")
        submit_form(host, name="Receipts")
        assert "Folder created: Receipts" in host.messages
        assert "receipts" in [f["name"] for f in client.list_folders()]

        view.perform("folder delete")
        picker = host.top_overlay
        assert picker.choices == ["receipts"]
        picker.handle_key(KeyEvent.key(KeyCode.ENTER))
        confirm_last(host)
        assert "receipts" not in [f["name"] for f in client.list_folders()]

    def test_folder_delete_without_user_folders(self, client, host):
        view = loaded(MessagesView, client, host)
        view.perform("folder delete")
        assert host.overlays == []
        assert ("No folders to choose from", "warning") in host.notifications


# ---------------------------------------------------------------------------
# Events / Contacts / Webhooks
# ---------------------------------------------------------------------------


class TestEventsView:
    def test_rsvp(self, client, host):
        view = loaded(EventsView, client, host)
        view.jump_to_row(2)
        assert view.perform("rsvp yes")
        assert view.selected_item()["rsvp"] == "yes"

    def test_new_event(self, client, host):
        view = loaded(EventsView, client, host)
        view.handle_key(KeyEvent.rune("n"))
        submit_form(host, title="Retro", start="2030-01-01 10:00", end="")
        titles = [e["title"] for e in view.items]
        assert "Retro" in titles
        saved = next(e for e in view.items if e["title"] == "Retro")
        assert saved["end"] == "2030-01-01 10:00"

    def test_bad_time_keeps_form_open(self, client, host):
        view = loaded(EventsView, client, host)
        view.perform("event new")
        submit_form(host, title="Retro", start="tomorrow")
        assert isinstance(host.top_overlay, FormOverlay)
        assert host.notifications[-1][1] == "error"

    def test_edit_keeps_id(self, client, host):
        view = loaded(EventsView, client, host)
        original = view.selected_item()
        view.handle_key(KeyEvent.rune("e"))
        submit_form(host, title="Renamed")
        assert any(e["id"] == original["id"] and e["title"] == "Renamed" for e in view.items)

    def test_delete(self, client, host):
        view = loaded(EventsView, client, host)
        view.perform("event delete")
        confirm_last(host)
        assert len(view.items) == 3


class TestContactsView:
    def test_new_contact_validates_email(self, client, host):
        view = loaded(ContactsView, client, host)
        view.perform("contact new")
        submit_form(host, name="Sam", email="not-an-email")
        assert ("Email address looks invalid", "error") in host.notifications
        assert len(view.items) == 4

    def test_new_contact(self, client, host):
        view = loaded(ContactsView, client, host)
        view.perform("contact new")
        submit_form(host, name="Sam", email="sam@example.com")
        assert len(view.items) == 5

    def test_delete(self, client, host):
        view = loaded(ContactsView, client, host)
        view.perform("delete")
        confirm_last(host)
        assert "Sarah Chen" not in [c["name"] for c in view.items]


class TestWebhooksView:
    def test_test_webhook(self, client, host):
        view = loaded(WebhooksView, client, host)
        view.handle_key(KeyEvent.rune("t"))
        assert host.messages[-1].startswith("Test event sent to")

    def test_edit_triggers(self, client, host):
        view = loaded(WebhooksView, client, host)
        view.perform("webhook edit")
        submit_form(host, triggers="message.created, , contact.created")
        assert view.items[0]["triggers"] == ["message.created", "contact.created"]

    def test_invalid_url_reported(self, client, host):
        view = loaded(WebhooksView, client, host)
        view.perform("webhook new")
        submit_form(host, url="ftp://example.com")
        assert len(host.errors) == 1
        assert len(view.items) == 2


# ---------------------------------------------------------------------------
# Dashboard / read-only views
# ---------------------------------------------------------------------------


class TestDashboardView:
    def test_counts(self, client, host):
        view = DashboardView(client, host)
        view.load()
        assert view.counts == {"unread": 2, "events": 4, "failing webhooks": 1}
        assert "Quick Navigation" in view.summary().plain

    def test_keys_pass_through(self, client, host):
        view = DashboardView(client, host)
        assert view.handle_key(KeyEvent.rune("j")) is KeyResult.PASSTHROUGH
        assert view.selected_item() is None


class TestInboundView:
    def test_rows(self, client, host):
        view = loaded(InboundView, client, host)
        assert view.row(view.items[0]) == ("support@inbound.example.com", "12", "inb-001")


class TestConfirmDialog:
    def test_yes_closes_then_confirms(self):
        order = []
        dialog = ConfirmDialog("Delete", "Sure?", lambda: order.append("confirm"), lambda: order.append("close"))
        dialog.handle_key(KeyEvent.rune("y"))
        assert order == ["close", "confirm"]

    def test_no_only_closes(self):
        order = []
        dialog = ConfirmDialog("Delete", "Sure?", lambda: order.append("confirm"), lambda: order.append("close"))
        assert dialog.handle_key(KeyEvent.rune("n")) is KeyResult.CONSUMED
        assert order == ["close"]

    def test_other_keys_swallowed(self):
        dialog = ConfirmDialog("Delete", "Sure?", lambda: None, lambda: None)
        assert dialog.handle_key(KeyEvent.rune("x")) is KeyResult.CONSUMED
