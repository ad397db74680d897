"""Async client for the Litmos learning-management REST API."""

from .application.exceptions import (
    APIError,
    CodecError,
    ConfigurationError,
    LitmosError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)
from .application.generators import (
    generate_module_result_object,
    generate_user_object,
)
from .client import Litmos
from .infrastructure.options import ClientOptions

__all__ = [
    "APIError",
    "ClientOptions",
    "CodecError",
    "ConfigurationError",
    "Litmos",
    "LitmosError",
    "RequestTimeoutError",
    "TransportError",
    "ValidationError",
    "generate_module_result_object",
    "generate_user_object",
]
