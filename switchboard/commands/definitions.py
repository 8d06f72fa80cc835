"""
Default command table.

Every command the prompt and palette know about. The table is loaded once
at startup into a CommandRegistry and never changes afterwards.
"""

from typing import List

from .registry import Command, CommandCategory, CommandRegistry

NAV = CommandCategory.NAVIGATION
MSG = CommandCategory.MESSAGES
CAL = CommandCategory.CALENDAR
CON = CommandCategory.CONTACTS
WH = CommandCategory.WEBHOOKS
FOL = CommandCategory.FOLDERS
VIM = CommandCategory.VIM
SYS = CommandCategory.SYSTEM


def _crud(noun: str) -> List[Command]:
    return [
        Command("new", aliases=("create",), description=f"Create new {noun}"),
        Command("edit", aliases=("update",), description=f"Edit current {noun}"),
        Command("delete", aliases=("del",), description=f"Delete current {noun}"),
    ]


DEFAULT_COMMANDS: List[Command] = [
    # Navigation
    Command("messages", ("m", "msg"), "Go to messages view", NAV),
    Command("events", ("e", "ev", "cal", "calendar"), "Go to calendar events view", NAV),
    Command("contacts", ("c", "ct"), "Go to contacts view", NAV),
    Command("webhooks", ("w", "wh"), "Go to webhooks view", NAV),
    Command("webhook-server", ("ws", "whs", "server"), "Go to webhook server view", NAV),
    Command("grants", ("g", "gr"), "Go to grants/accounts view", NAV),
    Command("inbound", ("i", "in"), "Go to inbound inboxes view", NAV),
    Command("dashboard", ("d", "dash", "home"), "Go to dashboard", NAV),
    # Messages
    Command("compose", ("n", "new"), "Compose new email", MSG, shortcut="n"),
    Command("reply", ("r",), "Reply to current message", MSG, shortcut="R", context_view="messages"),
    Command(
        "replyall", ("ra", "reply-all"), "Reply all to message", MSG,
        shortcut="A", context_view="messages",
    ),
    Command("forward", ("f", "fwd"), "Forward message", MSG, context_view="messages"),
    Command("star", ("s",), "Toggle star on message", MSG, shortcut="s", context_view="messages"),
    Command("unstar", (), "Remove star from message", MSG, context_view="messages"),
    Command("read", ("mr",), "Mark as read", MSG, context_view="messages"),
    Command("unread", ("mu",), "Mark as unread", MSG, shortcut="u", context_view="messages"),
    Command("delete", ("del", "rm"), "Delete current item", MSG, shortcut="dd"),
    Command("archive", (), "Archive message", MSG, context_view="messages"),
    # Calendar
    Command(
        "event", (), "Event management", CAL,
        context_view="events", sub_commands=tuple(_crud("event")),
    ),
    Command(
        "rsvp", (), "RSVP to event", CAL,
        context_view="events",
        sub_commands=(
            Command("yes", description="RSVP yes to event"),
            Command("no", description="RSVP no to event"),
            Command("maybe", description="RSVP maybe to event"),
        ),
    ),
    Command("availability", ("avail",), "Check availability", CAL),
    Command("find-time", ("findtime",), "Find meeting time", CAL),
    # Contacts
    Command(
        "contact", (), "Contact management", CON,
        context_view="contacts", sub_commands=tuple(_crud("contact")),
    ),
    # Webhooks
    Command(
        "webhook", (), "Webhook management", WH,
        context_view="webhooks",
        sub_commands=(*_crud("webhook"), Command("test", description="Test current webhook")),
    ),
    # Folders
    Command(
        "folder", (), "Folder management", FOL,
        context_view="messages",
        sub_commands=(
            Command("list", ("ls",), "List all folders"),
            Command("create", ("new",), "Create new folder"),
            Command("delete", ("del",), "Delete folder"),
        ),
    ),
    Command("inbox", (), "Go to inbox folder", FOL),
    Command("sent", (), "Go to sent folder", FOL),
    Command("trash", (), "Go to trash folder", FOL),
    Command("drafts", ("dr",), "Go to drafts", FOL),
    # Vim
    Command("quit", ("q", "exit"), "Quit application", VIM),
    Command("quit!", ("q!",), "Force quit", VIM),
    Command("wq", ("x",), "Save and quit", VIM),
    Command("help", ("h",), "Show help", VIM, shortcut="?"),
    Command("top", ("first", "gg"), "Go to first row", VIM, shortcut="gg"),
    Command("bottom", ("last",), "Go to last row", VIM, shortcut="G"),
    # System
    Command("refresh", ("reload",), "Refresh current view", SYS, shortcut="r"),
]


def register_default_commands(registry: CommandRegistry) -> CommandRegistry:
    """Register the default command table into registry."""
    registry.register_many(DEFAULT_COMMANDS)
    return registry


def build_default_registry() -> CommandRegistry:
    """Create a registry holding the default command table."""
    return register_default_commands(CommandRegistry())
