"""Logging utilities for switchboard.

Standard Logger Initialization Pattern
--------------------------------------
Modules use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

Handlers are attached once at application level by ``setup_tui_logging``.
A terminal UI owns stdout/stderr, so every handler writes to a rotating file
under the config directory instead of the console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from switchboard.config.constants import SWITCHBOARD_CONFIG_DIR

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_dir(base: Optional[Path] = None) -> Path:
    log_dir = base or SWITCHBOARD_CONFIG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def setup_tui_logging(
    level: str = "INFO", log_dir: Optional[Path] = None
) -> tuple[logging.Logger, logging.Logger]:
    """
    Set up logging for a TUI session.

    The root logger is set to WARNING to keep third-party libraries quiet.
    switchboard.* loggers use ``level``. Raw key events go to a separate
    file through the ``key_events`` logger, which only records at DEBUG.

    Returns:
        tuple: (switchboard_logger, key_events_logger)
    """
    try:
        directory = _log_dir(log_dir)

        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                directory / "tui.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        app_logger = logging.getLogger("switchboard")
        app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        key_logger = logging.getLogger("key_events")
        if not key_logger.handlers:
            key_handler = RotatingFileHandler(
                directory / "key_events.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            key_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            key_logger.addHandler(key_handler)
            key_logger.propagate = False
        key_logger.setLevel(logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING)

        return app_logger, key_logger

    except OSError as e:
        # Logging is what failed, so report on stderr before the TUI starts
        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)
        return logging.getLogger("switchboard"), logging.getLogger("key_events")
