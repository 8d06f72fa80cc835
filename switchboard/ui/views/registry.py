"""
Registration table for named views.

Maps a view name to a factory. The table is built once at startup; adding a
view means adding one class and one entry, with no change to the dispatcher.
Instances are created lazily on first navigation and cached.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Dict, List, Optional

from .protocol import ResourceView

logger = logging.getLogger(__name__)

ViewFactory = Callable[[], ResourceView]


class ViewRegistry:
    """Name -> factory table with a cache of created views."""

    def __init__(self, factories: Mapping[str, ViewFactory]):
        self._factories: Dict[str, ViewFactory] = dict(factories)
        self._views: Dict[str, ResourceView] = {}

    def has(self, name: str) -> bool:
        """True if name is a registered view (created or not)."""
        return name in self._factories

    def names(self) -> List[str]:
        return list(self._factories)

    def get(self, name: str) -> Optional[ResourceView]:
        """The created view for name, or None."""
        return self._views.get(name)

    def get_or_create(self, name: str) -> Optional[ResourceView]:
        """The view for name, creating it on first use. None if unregistered."""
        view = self._views.get(name)
        if view is not None:
            return view
        factory = self._factories.get(name)
        if factory is None:
            return None
        view = factory()
        self._views[name] = view
        logger.info(f"Created view: {name}")
        return view

    def created(self) -> List[ResourceView]:
        return list(self._views.values())
