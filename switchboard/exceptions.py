"""Custom exception hierarchy for switchboard.

Exception Hierarchy:
    SwitchboardError (base)
    ├── RegistryError - command table problems found at startup
    │   ├── DuplicateCommandError
    │   └── InvalidCommandError
    ├── ConfigurationError - settings/environment issues
    └── ApiError - remote API calls made by views and actions
        ├── ApiTimeoutError (retryable)
        └── ApiNotFoundError

Lookups (registry, navigation stack, view registry) never raise; they return
None or an empty value. These exceptions are for startup validation and for
work that runs on background workers.

Usage:
    from switchboard.exceptions import ApiTimeoutError

    raise ApiTimeoutError("Listing messages timed out", timeout_seconds=30)
"""

from typing import Any, Optional


class SwitchboardError(Exception):
    """Base exception for all switchboard errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., names, IDs)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(SwitchboardError):
    """Base exception for command registry problems."""

    pass


class DuplicateCommandError(RegistryError):
    """A command name or alias is already taken by another command."""

    def __init__(
        self,
        message: str = "Command name already registered",
        *,
        name: Optional[str] = None,
        existing: Optional[str] = None,
        **context: Any,
    ) -> None:
        if name is not None:
            context["name"] = name
        if existing is not None:
            context["existing"] = existing
        super().__init__(message, **context)


class InvalidCommandError(RegistryError):
    """A command definition is malformed (empty name, nested sub-commands)."""

    def __init__(
        self,
        message: str = "Invalid command definition",
        *,
        name: Optional[str] = None,
        **context: Any,
    ) -> None:
        if name is not None:
            context["name"] = name
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SwitchboardError):
    """Invalid configuration or environment setting."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


# =============================================================================
# API Errors
# =============================================================================


class ApiError(SwitchboardError):
    """Base exception for remote API calls."""

    pass


class ApiTimeoutError(ApiError):
    """An API call exceeded its timeout - retryable."""

    def __init__(
        self,
        message: str = "API request timed out",
        *,
        timeout_seconds: Optional[float] = None,
        **context: Any,
    ) -> None:
        if timeout_seconds is not None:
            context["timeout_seconds"] = timeout_seconds
        super().__init__(message, retryable=True, **context)


class ApiNotFoundError(ApiError):
    """The requested resource does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        *,
        resource: Optional[str] = None,
        resource_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if resource:
            context["resource"] = resource
        if resource_id:
            context["resource_id"] = resource_id
        super().__init__(message, **context)
