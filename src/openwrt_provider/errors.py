"""Exception hierarchy for device client failures.

Clients raise these; the provider and data sources catch them at the stage
boundary and turn them into diagnostics.
"""
from typing import Any


class DeviceClientError(Exception):
    """Base exception for all device client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class AuthenticationError(DeviceClientError):
    """Session could not be established or was rejected."""


class NotFoundError(DeviceClientError):
    """The requested object does not exist on the device."""


class ProtocolError(DeviceClientError):
    """The device answered with something that is not a valid response."""


class DeviceTimeoutError(DeviceClientError):
    """The device did not answer within the configured timeout."""
