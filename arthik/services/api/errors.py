"""
API Errors

Every failure of a backend round trip surfaces as one of these. The
hierarchy follows how the client reacts, not how the failure happened:

    ApiError
    ├── SessionError               missing CSRF token; nothing was sent
    ├── AuthenticationFailedError  401; the session is already torn down
    ├── SessionEndedError          the session ended before the answer arrived
    ├── RateLimitedError           429
    ├── ValidationFailedError      400 with a backend message
    ├── RequestFailedError         any other non-2xx status
    ├── TransportFailedError       the request never got an answer
    └── ResponseFormatError        the answer could not be decoded
"""

from typing import Optional


AUTHENTICATION_FAILED = "Authentication failed"
RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."
LOGIN_RATE_LIMITED_MESSAGE = "Too many failed login attempts. Please try again later."
SESSION_ERROR_MESSAGE = "Session error. Please refresh the page and try again."
SESSION_ENDED = "Session ended"


class ApiError(Exception):
    """Base exception for backend API operations."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionError(ApiError):
    """A state-changing request was attempted without a CSRF token."""

    def __init__(self, message: str = SESSION_ERROR_MESSAGE):
        super().__init__(message)


class AuthenticationFailedError(ApiError):
    """
    The backend rejected the session (401).

    By the time this is raised the session has been cleared and the login
    screen shown; callers suppress their own notice.
    """

    def __init__(self):
        super().__init__(AUTHENTICATION_FAILED, status_code=401)


class SessionEndedError(ApiError):
    """
    The request belongs to a session that has since ended.

    Raised when no session is held, or when the bearer token changed while
    the request was in flight. The answer is dropped unread; callers stay
    silent.
    """

    def __init__(self):
        super().__init__(SESSION_ENDED)


class RateLimitedError(ApiError):
    """The backend refused the request for being too frequent (429)."""

    def __init__(self, message: str = RATE_LIMITED_MESSAGE):
        super().__init__(message, status_code=429)


class ValidationFailedError(ApiError):
    """The backend rejected the input (400). `message` is the backend's text."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class RequestFailedError(ApiError):
    """Any other non-2xx answer."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(
            message or f"Request failed with status {status_code}",
            status_code=status_code,
        )


class TransportFailedError(ApiError):
    """Connection, DNS or timeout failure."""
    pass


class ResponseFormatError(ApiError):
    """A 2xx answer whose body is not the JSON the client expects."""
    pass
