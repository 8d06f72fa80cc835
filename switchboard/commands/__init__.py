"""
Command catalog for the prompt and palette.

Provides:
- CommandRegistry: lookup, ranked search and sub-command indexing
- Command / CommandCategory / CategoryGroup: catalog types
- build_default_registry: registry loaded with the default table
"""

from .definitions import DEFAULT_COMMANDS, build_default_registry, register_default_commands
from .registry import (
    NO_MATCH,
    CategoryGroup,
    Command,
    CommandCategory,
    CommandRegistry,
    fuzzy_match,
    match_score,
)

__all__ = [
    "DEFAULT_COMMANDS",
    "NO_MATCH",
    "CategoryGroup",
    "Command",
    "CommandCategory",
    "CommandRegistry",
    "build_default_registry",
    "fuzzy_match",
    "match_score",
    "register_default_commands",
]
