"""
Command executor.

Turns a resolved command string from the prompt, palette, chords or help
into an effect. Aliases are resolved through the command registry to the
command's full name, which is then looked up in an action table supplied by
the application. Unknown strings are dropped without error.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Dict, Optional

from switchboard.commands import CommandRegistry

logger = logging.getLogger(__name__)

Action = Callable[[], None]


class CommandExecutor:
    """Maps resolved command strings to actions."""

    def __init__(
        self,
        registry: CommandRegistry,
        actions: Mapping[str, Action],
        jump_to_row: Optional[Callable[[int], None]] = None,
    ):
        self.registry = registry
        self.actions: Dict[str, Action] = dict(actions)
        self.jump_to_row = jump_to_row

    def resolve(self, command: str) -> str:
        """Canonical full name for command, or the normalized input if unknown."""
        command = command.strip().lower()
        cmd = self.registry.get(command)
        return cmd.full_name if cmd is not None else command

    def execute(self, command: str) -> bool:
        """
        Run command. Returns True if an action ran.

        All-digit input jumps to that row and never reaches the action table.
        """
        command = command.strip().lower()
        if not command:
            return False

        if command.isdecimal():
            if self.jump_to_row is None:
                return False
            logger.debug(f"jump to row {command}")
            self.jump_to_row(int(command))
            return True

        name = self.resolve(command)
        action = self.actions.get(name)
        if action is None:
            logger.debug(f"ignoring command {command!r} (resolved {name!r})")
            return False

        logger.info(f"execute {name!r}")
        action()
        return True

    def __call__(self, command: str) -> None:
        self.execute(command)
