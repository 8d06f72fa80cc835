"""
Centralized constants for switchboard.

Magic numbers and configuration defaults live here so that behaviour shared
by the dispatcher, palette and background workers is tuned in one place.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

SWITCHBOARD_CONFIG_DIR = Path.home() / ".config" / "switchboard"  # Overridden by the env var

# =============================================================================
# COMMAND PALETTE
# =============================================================================

MAX_SUGGESTIONS = 10  # Rows shown in the autocomplete dropdown
COMMAND_SEPARATOR = " "  # Between a parent command and its sub-command

# =============================================================================
# KEY DISPATCH
# =============================================================================

CHORD_WINDOW_MS = 500  # Max gap between the two presses of gg / dd

# =============================================================================
# VIEWS
# =============================================================================

DEFAULT_VIEW = "dashboard"
DEFAULT_LIST_LIMIT = 50  # Rows fetched per resource list

# =============================================================================
# BACKGROUND WORK
# =============================================================================

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0  # Per outbound API call
DEFAULT_WORKER_THREADS = 4
DEFAULT_DEMO_LATENCY_SECONDS = 0.2  # Simulated round trip of the demo client

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

# "choices" are compared case-insensitively; "type" values must be >= "minimum"
ENV_VAR_DEFINITIONS = {
    "SWITCHBOARD_DEFAULT_VIEW": {
        "description": "View shown at startup",
        "default": DEFAULT_VIEW,
        "choices": ["dashboard", "messages", "events", "contacts", "webhooks", "grants", "inbound"],
    },
    "SWITCHBOARD_CHORD_WINDOW_MS": {
        "description": "Milliseconds allowed between the keys of a two-key chord",
        "default": str(CHORD_WINDOW_MS),
        "type": int,
        "minimum": 1,
    },
    "SWITCHBOARD_REQUEST_TIMEOUT": {
        "description": "Timeout in seconds for each API request",
        "default": str(DEFAULT_REQUEST_TIMEOUT_SECONDS),
        "type": float,
        "minimum": 0.1,
    },
    "SWITCHBOARD_DEMO_LATENCY": {
        "description": "Simulated latency in seconds for the demo client",
        "default": str(DEFAULT_DEMO_LATENCY_SECONDS),
        "type": float,
        "minimum": 0.0,
    },
    "SWITCHBOARD_LOG_LEVEL": {
        "description": "Log level for the TUI log file",
        "default": "INFO",
        "choices": ["debug", "info", "warning", "error"],
    },
    "SWITCHBOARD_CONFIG_DIR": {
        "description": "Directory for tui.log and key_events.log",
        "default": str(SWITCHBOARD_CONFIG_DIR),
    },
}
