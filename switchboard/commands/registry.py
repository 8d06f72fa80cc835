"""
Command registry for the command prompt and palette.

Holds the static command catalog and answers three kinds of question:
exact lookup by name or alias, ranked fuzzy search over top-level commands,
and listing/searching the sub-commands of a parent.

Sub-commands are kept as an explicit two-level tree (parent -> ordered
children). Each child is additionally indexed under its flattened
"<parent> <child>" form so a typed command line such as ``folder ls``
resolves with a single lookup.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from switchboard.config.constants import COMMAND_SEPARATOR
from switchboard.exceptions import DuplicateCommandError, InvalidCommandError

logger = logging.getLogger(__name__)

NO_MATCH = -1


class CommandCategory(Enum):
    """Command groups, declared in display order."""

    NAVIGATION = "Navigation"
    MESSAGES = "Messages"
    CALENDAR = "Calendar"
    CONTACTS = "Contacts"
    WEBHOOKS = "Webhooks"
    FOLDERS = "Folders"
    VIM = "Vim Commands"
    SYSTEM = "System"

    @classmethod
    def display_order(cls) -> List["CommandCategory"]:
        return list(cls)


@dataclass(frozen=True)
class Command:
    """A prompt command with its metadata."""

    name: str  # Primary token, e.g. "messages"
    aliases: Tuple[str, ...] = ()  # Alternate tokens, e.g. ("m", "msg")
    description: str = ""
    category: CommandCategory = CommandCategory.SYSTEM
    shortcut: str = ""  # Direct key binding, documentation only
    sub_commands: Tuple["Command", ...] = ()
    context_view: str = ""  # View the command is meant for ("" = all)
    parent: str = ""  # Set on registered sub-commands

    def __post_init__(self) -> None:
        # Allow lists in command tables
        object.__setattr__(self, "aliases", tuple(self.aliases))
        object.__setattr__(self, "sub_commands", tuple(self.sub_commands))

    @property
    def is_sub_command(self) -> bool:
        return bool(self.parent)

    @property
    def full_name(self) -> str:
        """Name as typed at the prompt, including the parent for sub-commands."""
        if self.parent:
            return f"{self.parent}{COMMAND_SEPARATOR}{self.name}"
        return self.name

    @property
    def all_names(self) -> List[str]:
        """Primary name followed by aliases."""
        return [self.name, *self.aliases]

    @property
    def full_aliases(self) -> List[str]:
        """Aliases as typed at the prompt."""
        if self.parent:
            return [f"{self.parent}{COMMAND_SEPARATOR}{alias}" for alias in self.aliases]
        return list(self.aliases)

    @property
    def display_aliases(self) -> str:
        """Comma separated aliases for display."""
        return ", ".join(self.aliases)


@dataclass(frozen=True)
class CategoryGroup:
    """A category and its top-level commands in registration order."""

    category: CommandCategory
    commands: Tuple[Command, ...]


def _normalize(token: str) -> str:
    return token.strip().lower()


def fuzzy_match(target: str, query: str) -> bool:
    """
    Check whether every character of query appears in target, in order.

    Single forward scan over target; characters need not be contiguous.
    """
    ti = 0
    for qc in query:
        while ti < len(target) and target[ti] != qc:
            ti += 1
        if ti == len(target):
            return False
        ti += 1
    return True


def match_score(target: str, query: str) -> int:
    """
    Score how well target matches query. Lower is better.

    Returns:
        0 exact, 1 prefix, 2 substring, 3 in-order subsequence,
        NO_MATCH (-1) otherwise. Comparison is case-insensitive.
    """
    target = target.lower()
    query = query.lower()
    if target == query:
        return 0
    if target.startswith(query):
        return 1
    if query in target:
        return 2
    if fuzzy_match(target, query):
        return 3
    return NO_MATCH


def best_score(names: Iterable[str], query: str) -> int:
    """Best (lowest) tier over several names, or NO_MATCH."""
    best = NO_MATCH
    for name in names:
        score = match_score(name, query)
        if score >= 0 and (best < 0 or score < best):
            best = score
    return best


@dataclass
class CommandRegistry:
    """
    Catalog of commands with alias, category and sub-command indices.

    Usage:
        registry = CommandRegistry()
        registry.register(Command(name="messages", aliases=("m", "msg")))

        registry.get("msg")          # -> the messages command
        registry.search("mes")       # -> ranked top-level matches
        registry.get_sub_commands("folder")

    Registration fails fast: a name or alias that is already indexed raises
    DuplicateCommandError and leaves the registry unchanged.
    """

    # Top-level commands in registration order
    commands: List[Command] = field(default_factory=list)

    # Normalized name/alias (flattened for sub-commands) -> command
    by_name: Dict[str, Command] = field(default_factory=dict)

    # Category -> top-level commands in registration order
    by_category: Dict[CommandCategory, List[Command]] = field(default_factory=dict)

    # Normalized parent name -> ordered children
    children: Dict[str, List[Command]] = field(default_factory=dict)

    def register(self, cmd: Command) -> None:
        """
        Register a command and its sub-commands.

        Raises:
            InvalidCommandError: empty names or nested sub-commands
            DuplicateCommandError: a name or alias is already taken
        """
        self._validate(cmd)

        subs = [
            replace(sub, parent=cmd.name, category=cmd.category)
            for sub in cmd.sub_commands
        ]

        # Collect every token first so a collision leaves no partial state
        tokens: List[Tuple[str, Command]] = [(t, cmd) for t in cmd.all_names]
        for sub in subs:
            tokens.extend((t, sub) for t in [sub.full_name, *sub.full_aliases])

        seen: Dict[str, Command] = {}
        for token, owner in tokens:
            key = _normalize(token)
            existing = self.by_name.get(key) or seen.get(key)
            if existing is not None:
                raise DuplicateCommandError(
                    f"'{token}' is already registered",
                    name=owner.full_name,
                    existing=existing.full_name,
                )
            seen[key] = owner

        self.commands.append(cmd)
        self.by_name.update(seen)
        self.by_category.setdefault(cmd.category, []).append(cmd)
        if subs:
            self.children[_normalize(cmd.name)] = subs

        logger.debug(f"Registered command: {cmd.name} ({len(subs)} sub-commands)")

    def register_many(self, commands: Iterable[Command]) -> None:
        """Register multiple commands at once."""
        for cmd in commands:
            self.register(cmd)

    def _validate(self, cmd: Command) -> None:
        if not cmd.name.strip():
            raise InvalidCommandError("Command name must not be empty")
        for token in cmd.all_names:
            if COMMAND_SEPARATOR in token.strip():
                raise InvalidCommandError(
                    "Command names and aliases must be a single token", name=token
                )
        for sub in cmd.sub_commands:
            if not sub.name.strip():
                raise InvalidCommandError("Sub-command name must not be empty", name=cmd.name)
            if sub.sub_commands:
                raise InvalidCommandError(
                    "Sub-commands cannot have sub-commands",
                    name=f"{cmd.name}{COMMAND_SEPARATOR}{sub.name}",
                )

    def get(self, query: str) -> Optional[Command]:
        """Get a command by name or alias, or None if not found."""
        return self.by_name.get(_normalize(query))

    def get_all(self) -> List[Command]:
        """Get all top-level commands sorted by name."""
        return sorted(self.commands, key=lambda c: c.name)

    def get_by_category(self) -> List[CategoryGroup]:
        """Get top-level commands grouped by category in display order."""
        return [
            CategoryGroup(category=category, commands=tuple(self.by_category[category]))
            for category in CommandCategory.display_order()
            if self.by_category.get(category)
        ]

    def search(self, query: str) -> List[Command]:
        """
        Rank top-level commands against query.

        Each command scores the best tier over its name and aliases.
        Results are sorted by (score, name); non-matches are dropped.
        An empty query returns get_all().
        """
        query = _normalize(query)
        if not query:
            return self.get_all()

        scored: List[Tuple[int, Command]] = []
        for cmd in self.commands:
            score = best_score(cmd.all_names, query)
            if score >= 0:
                scored.append((score, cmd))

        scored.sort(key=lambda item: (item[0], item[1].name))
        return [cmd for _, cmd in scored]

    def get_sub_commands(self, parent: str) -> List[Command]:
        """Get the direct children of parent in registration order."""
        return list(self.children.get(_normalize(parent), []))

    def search_sub_commands(self, parent: str, query: str) -> List[Command]:
        """
        Rank the children of parent against query.

        Uses the same tiers as search() on the short child names and aliases.
        Ties keep registration order. An empty query returns every child.
        """
        subs = self.get_sub_commands(parent)
        query = _normalize(query)
        if not query:
            return subs

        scored = [(best_score(sub.all_names, query), sub) for sub in subs]
        matches = [(score, sub) for score, sub in scored if score >= 0]
        matches.sort(key=lambda item: item[0])
        return [sub for _, sub in matches]

    def has_sub_commands(self, name: str) -> bool:
        """True if name is a command with at least one sub-command."""
        return bool(self.children.get(_normalize(name)))

    def __len__(self) -> int:
        return len(self.commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalize(name) in self.by_name
