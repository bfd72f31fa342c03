"""
Backend API Package

The async REST gateway and the errors it raises.
"""

from arthik.services.api.errors import (
    ApiError,
    AuthenticationFailedError,
    RateLimitedError,
    RequestFailedError,
    ResponseFormatError,
    SessionError,
    SessionEndedError,
    TransportFailedError,
    ValidationFailedError,
)
from arthik.services.api.gateway import ApiGateway

__all__ = [
    "ApiGateway",
    # Exceptions
    "ApiError",
    "AuthenticationFailedError",
    "RateLimitedError",
    "RequestFailedError",
    "ResponseFormatError",
    "SessionError",
    "SessionEndedError",
    "TransportFailedError",
    "ValidationFailedError",
]
