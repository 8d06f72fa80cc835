"""
Settings resolved from SWITCHBOARD_* environment variables.

Every variable is described in ENV_VAR_DEFINITIONS. The same check backs
``load_settings`` (which raises on the first bad value) and the ``env``
command (which lists every problem).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from switchboard.exceptions import ConfigurationError

from .constants import (
    CHORD_WINDOW_MS,
    DEFAULT_DEMO_LATENCY_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_VIEW,
    ENV_VAR_DEFINITIONS,
    SWITCHBOARD_CONFIG_DIR,
)


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""

    default_view: str = DEFAULT_VIEW
    chord_window_ms: int = CHORD_WINDOW_MS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    demo_latency: float = DEFAULT_DEMO_LATENCY_SECONDS
    log_level: str = "INFO"
    config_dir: Path = SWITCHBOARD_CONFIG_DIR


def check_env_value(name: str, value: Optional[str]) -> Optional[str]:
    """Return an error message if value is not acceptable for name, else None."""
    definition = ENV_VAR_DEFINITIONS.get(name)
    if definition is None or value is None:
        return None

    choices = definition.get("choices")
    if choices and value.lower() not in choices:
        return f"Invalid value '{value}' for {name}. Valid values: {', '.join(choices)}"

    cast = definition.get("type")
    if cast is not None:
        try:
            number = cast(value)
        except ValueError:
            return f"{name} must be a number, got '{value}'"
        if number < definition["minimum"]:
            return f"{name} must be >= {definition['minimum']}, got '{value}'"

    return None


def validate_all_env_vars() -> List[str]:
    """Error messages for every set variable with a bad value."""
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        error = check_env_value(name, os.environ.get(name))
        if error:
            errors.append(error)
    return errors


def get_env_var(name: str) -> Optional[str]:
    """
    Value of a known variable, falling back to its default.

    Raises:
        ConfigurationError: If the variable is set to an invalid value.
    """
    value = os.environ.get(name)
    if value is None:
        return ENV_VAR_DEFINITIONS.get(name, {}).get("default")

    error = check_env_value(name, value)
    if error:
        raise ConfigurationError(error, setting=name, value=value)
    return value


def get_env_info() -> Dict[str, Dict[str, Any]]:
    """Per-variable description, current value, default and validity."""
    info = {}
    for name, definition in ENV_VAR_DEFINITIONS.items():
        value = os.environ.get(name)
        info[name] = {
            "description": definition["description"],
            "value": value,
            "is_set": value is not None,
            "valid": check_env_value(name, value) is None,
            "default": definition.get("default"),
        }
    return info


def load_settings() -> Settings:
    """Resolve settings from the environment.

    Raises:
        ConfigurationError: If any variable holds an invalid value.
    """
    return Settings(
        default_view=get_env_var("SWITCHBOARD_DEFAULT_VIEW").lower(),
        chord_window_ms=int(get_env_var("SWITCHBOARD_CHORD_WINDOW_MS")),
        request_timeout=float(get_env_var("SWITCHBOARD_REQUEST_TIMEOUT")),
        demo_latency=float(get_env_var("SWITCHBOARD_DEMO_LATENCY")),
        log_level=get_env_var("SWITCHBOARD_LOG_LEVEL").upper(),
        config_dir=Path(get_env_var("SWITCHBOARD_CONFIG_DIR")).expanduser(),
    )
