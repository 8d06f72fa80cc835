"""Tests for NavigationStack."""

from __future__ import annotations

from switchboard.ui.navigation import EMPTY, NavigationStack, StackEntry


class Recorder:
    """Collects show/remove callbacks as (event, name) pairs."""

    def __init__(self):
        self.events = []

    def show(self, entry: StackEntry) -> None:
        self.events.append(("show", entry.name))

    def remove(self, entry: StackEntry) -> None:
        self.events.append(("remove", entry.name))


def make_stack():
    recorder = Recorder()
    return NavigationStack(on_show=recorder.show, on_remove=recorder.remove), recorder


class TestPushPop:
    """LIFO behaviour and callbacks."""

    def test_empty_stack(self):
        stack, _ = make_stack()
        assert len(stack) == 0
        assert stack.top() == EMPTY
        assert stack.top_entry() is None
        assert stack.pop() == EMPTY

    def test_push_shows_new_top(self):
        stack, recorder = make_stack()
        stack.push("messages", "region-m")
        stack.push("detail", "region-d")

        assert stack.top() == "detail"
        assert stack.names() == ["messages", "detail"]
        assert recorder.events == [("show", "messages"), ("show", "detail")]

    def test_pop_removes_and_shows_previous(self):
        stack, recorder = make_stack()
        stack.push("messages", "region-m")
        stack.push("detail", "region-d")
        recorder.events.clear()

        assert stack.pop() == "detail"
        assert stack.top() == "messages"
        assert recorder.events == [("remove", "detail"), ("show", "messages")]

    def test_pop_last_entry_shows_nothing(self):
        stack, recorder = make_stack()
        stack.push("messages", "region-m")
        recorder.events.clear()

        assert stack.pop() == "messages"
        assert stack.top() == EMPTY
        assert recorder.events == [("remove", "messages")]

    def test_pops_in_reverse_push_order(self):
        stack, _ = make_stack()
        for name in ("a", "b", "c"):
            stack.push(name, f"region-{name}")

        assert [stack.pop() for _ in range(3)] == ["c", "b", "a"]
        assert stack.pop() == EMPTY
        assert len(stack) == 0

    def test_push_existing_name_replaces_entry(self):
        stack, recorder = make_stack()
        stack.push("messages", "region-m")
        stack.push("detail", "old")
        stack.push("events", "region-e")
        recorder.events.clear()

        stack.push("detail", "new")

        assert stack.names() == ["messages", "events", "detail"]
        assert stack.top_entry().region == "new"
        assert recorder.events == [("remove", "detail"), ("show", "detail")]

    def test_contains(self):
        stack, _ = make_stack()
        stack.push("messages", "region-m")
        assert "messages" in stack
        assert "events" not in stack


class TestSwitchTo:
    """switch_to relocates an existing entry or pushes a new one."""

    def test_switch_to_new_name_pushes(self):
        stack, _ = make_stack()
        stack.switch_to("messages", "region-m")
        assert stack.names() == ["messages"]

    def test_switch_to_existing_moves_to_top(self):
        stack, recorder = make_stack()
        region = "region-m"
        stack.push("messages", region)
        stack.push("events", "region-e")
        stack.push("contacts", "region-c")
        recorder.events.clear()

        stack.switch_to("messages", region)

        assert stack.names() == ["events", "contacts", "messages"]
        assert len(stack) == 3
        # Same region: shown again, never removed
        assert recorder.events == [("show", "messages")]

    def test_switch_to_with_new_region_discards_old(self):
        stack, recorder = make_stack()
        stack.push("messages", "old")
        stack.push("events", "region-e")
        recorder.events.clear()

        stack.switch_to("messages", "new")

        assert stack.top_entry().region == "new"
        assert recorder.events == [("remove", "messages"), ("show", "messages")]

    def test_switch_to_top_is_idempotent(self):
        stack, _ = make_stack()
        stack.push("messages", "region-m")
        stack.switch_to("messages", "region-m")
        stack.switch_to("messages", "region-m")
        assert stack.names() == ["messages"]

    def test_works_without_callbacks(self):
        stack = NavigationStack()
        stack.push("a", 1)
        stack.switch_to("b", 2)
        stack.switch_to("a", 1)
        assert stack.pop() == "a"
        assert stack.top() == "b"
