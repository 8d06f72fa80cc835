"""
Toolkit-independent key events.

The dispatcher, palette and views only see KeyEvent values. The Textual
shell converts its own events with ``from_textual``; tests build them with
the ``rune``/``ctrl``/``key`` helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional


class KeyCode(Enum):
    """Key codes the dispatcher distinguishes."""

    RUNE = "rune"  # Printable character, see KeyEvent.char
    ESCAPE = "escape"
    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    UNKNOWN = "unknown"


class Modifier(Enum):
    CTRL = "ctrl"
    ALT = "alt"
    SHIFT = "shift"


class KeyResult(Enum):
    """What a key handler did with an event."""

    CONSUMED = "consumed"
    PASSTHROUGH = "passthrough"

    def __bool__(self) -> bool:
        return self is KeyResult.CONSUMED


@dataclass(frozen=True)
class KeyEvent:
    """A key press: code, optional character and modifier set."""

    code: KeyCode
    char: Optional[str] = None
    modifiers: FrozenSet[Modifier] = field(default_factory=frozenset)

    @classmethod
    def rune(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.RUNE, char)

    @classmethod
    def ctrl(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.RUNE, char.lower(), frozenset({Modifier.CTRL}))

    @classmethod
    def key(cls, code: KeyCode, *modifiers: Modifier) -> "KeyEvent":
        return cls(code, None, frozenset(modifiers))

    @property
    def has_ctrl(self) -> bool:
        return Modifier.CTRL in self.modifiers

    @property
    def is_printable(self) -> bool:
        """A plain character that belongs in a text buffer."""
        return (
            self.code is KeyCode.RUNE
            and bool(self.char)
            and Modifier.CTRL not in self.modifiers
            and Modifier.ALT not in self.modifiers
        )

    def is_rune(self, char: str) -> bool:
        """True for the plain (unmodified by ctrl/alt) character char."""
        return self.is_printable and self.char == char

    def is_ctrl(self, char: str) -> bool:
        return self.code is KeyCode.RUNE and self.has_ctrl and self.char == char

    def describe(self) -> str:
        """Textual-style key name, e.g. "ctrl+d", "escape", "g"."""
        if self.code is KeyCode.RUNE:
            base = self.char or ""
        else:
            base = self.code.value
        prefix = "".join(
            f"{m.value}+" for m in (Modifier.CTRL, Modifier.ALT, Modifier.SHIFT) if m in self.modifiers
        )
        return prefix + base


_NAMED_KEYS = {code.value: code for code in KeyCode if code not in (KeyCode.RUNE, KeyCode.UNKNOWN)}
_NAMED_KEYS.update(
    {
        "return": KeyCode.ENTER,
        "page_up": KeyCode.PAGE_UP,
        "page_down": KeyCode.PAGE_DOWN,
        "ctrl+h": KeyCode.BACKSPACE,
        "ctrl+i": KeyCode.TAB,
        "ctrl+j": KeyCode.ENTER,
        "ctrl+m": KeyCode.ENTER,
        "ctrl+left_square_bracket": KeyCode.ESCAPE,
    }
)


# Symbol key names, used when the event carries no character
_SYMBOL_KEYS = {
    "colon": ":",
    "slash": "/",
    "question_mark": "?",
    "exclamation_mark": "!",
    "space": " ",
    "minus": "-",
}


def parse_key(key: str, character: Optional[str] = None) -> KeyEvent:
    """
    Build a KeyEvent from a Textual-style key name.

    Examples: "escape", "ctrl+d", "shift+tab", "g" (with character "g").
    """
    if key in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[key])
    if key in _SYMBOL_KEYS and not character:
        return KeyEvent(KeyCode.RUNE, _SYMBOL_KEYS[key])

    *mods, base = key.split("+") if key != "+" else ["+"]
    modifiers = frozenset(Modifier(m) for m in mods if m in {mod.value for mod in Modifier})

    if base in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[base], None, modifiers)

    if Modifier.CTRL in modifiers or Modifier.ALT in modifiers:
        if len(base) == 1:
            return KeyEvent(KeyCode.RUNE, base.lower(), modifiers)
        return KeyEvent(KeyCode.UNKNOWN, None, modifiers)

    if character and character.isprintable():
        return KeyEvent(KeyCode.RUNE, character)
    if len(base) == 1:
        return KeyEvent(KeyCode.RUNE, base)
    return KeyEvent(KeyCode.UNKNOWN, None, modifiers)


def from_textual(event: Any) -> KeyEvent:
    """Convert a ``textual.events.Key`` into a KeyEvent."""
    return parse_key(event.key, getattr(event, "character", None))
