"""Remote API access for the dashboard."""

from .client import DashboardClient
from .demo_client import DemoClient

__all__ = ["DashboardClient", "DemoClient"]
