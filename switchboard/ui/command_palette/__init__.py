"""
Command palette for the ``:`` prompt.

The presenter holds all state and key handling; the widget in
``palette_widget`` only renders it.
"""

from .palette_presenter import CommandPalette, PaletteState

__all__ = ["CommandPalette", "PaletteState"]
