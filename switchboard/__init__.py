"""
switchboard - keyboard-driven terminal dashboard for mail, calendar,
contacts and webhooks
"""

__version__ = "0.1.0"
