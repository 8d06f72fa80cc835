"""
Resource views.

Only the contract and the registration table are exported here so the key
dispatcher can depend on them without importing any widgets. Concrete views
live in ``switchboard.ui.views.resources``.
"""

from .protocol import Hint, KeyHandler, ResourceView
from .registry import ViewFactory, ViewRegistry

__all__ = ["Hint", "KeyHandler", "ResourceView", "ViewFactory", "ViewRegistry"]
