"""braintree-async exception hierarchy.

Errors reported by the Braintree SDK itself (``braintree.exceptions``) are not
wrapped: they reach the caller unchanged. The classes below cover the failures
this library detects on its own before any remote call is made.
"""

from __future__ import annotations

from braintree.exceptions import NotFoundError


class BraintreeAsyncError(Exception):
    """Base exception for all braintree-async errors."""

    pass


class ConfigurationError(BraintreeAsyncError):
    """Raised when the gateway cannot be constructed.

    Examples:
        - Missing merchant id, public key or private key
        - Missing or unknown environment name
    """

    pass


class ValidationError(BraintreeAsyncError):
    """Raised when a required argument is missing or empty.

    Raised before the SDK is invoked, so an operation failing with this error
    has made no remote call.

    Attributes:
        field: Name of the offending argument
    """

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")


def is_not_found(error: BaseException) -> bool:
    """Return True if ``error`` is the SDK's not-found classification."""
    return isinstance(error, NotFoundError)
