"""Configuration for switchboard."""

from .settings import Settings, get_env_var, load_settings

__all__ = ["Settings", "get_env_var", "load_settings"]
