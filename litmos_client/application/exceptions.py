"""
Core exceptions for the Litmos client.

This module defines a hierarchy of custom exceptions so callers can branch on
configuration mistakes, invalid payloads and failures of the remote API.
"""

from typing import Optional


class LitmosError(Exception):
    """Base exception for all client-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(LitmosError):
    """Raised for invalid client options or malformed endpoint declarations."""
    pass


# --- Input Errors ---

class ValidationError(LitmosError):
    """Raised when a request or write payload is rejected before sending."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(LitmosError):
    """Base class for errors related to external systems (network, API, etc.)."""
    pass


class TransportError(InfrastructureError):
    """Raised for network failures other than timeouts. Never retried."""
    pass


class CodecError(InfrastructureError):
    """Raised when a body cannot be converted to or from XML."""
    pass


class APIError(InfrastructureError):
    """
    Raised when the Litmos API answers with a non-2xx status after all retries.

    Attributes:
        status_code: The final HTTP status code.
        body: The raw response body, kept for caller-side inspection.
    """

    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RequestTimeoutError(APIError):
    """Raised when the final attempt of a request timed out (synthetic 408)."""
    pass
