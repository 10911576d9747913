"""
Error types raised by wadm_nats.

Every failure is surfaced to the caller with enough context (file, auth
combination or resource name) to act on. Nothing here is retried locally.
"""

from typing import Optional


class WadmNatsError(Exception):
    """Base class for all wadm_nats errors."""


class CredentialError(WadmNatsError):
    """Raised when seed, JWT or credentials input cannot be turned into auth material."""


class NatsConnectionError(WadmNatsError, ConnectionError):
    """Raised when connecting to or authenticating with the broker fails."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ProvisioningError(WadmNatsError):
    """Raised when a stream or key-value bucket cannot be created."""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource
