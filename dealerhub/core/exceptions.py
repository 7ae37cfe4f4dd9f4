"""
DealerHub Exceptions

Defines the exception hierarchy raised by the API layers. Each exception
carries the HTTP status the global error handler answers with.
"""

from typing import Optional


class DealerHubError(Exception):
    """Base exception for all DealerHub API errors."""

    status_code = 500
    default_message = 'Internal Server Error'

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class AuthError(DealerHubError):
    """Missing, malformed or rejected bearer token."""

    status_code = 401
    default_message = 'Unauthorized'


class ValidationError(DealerHubError):
    """Request body or query parameters failed validation."""

    status_code = 400
    default_message = 'Bad Request'


class NotFoundError(DealerHubError):
    """Point lookup for an unknown id."""

    status_code = 404
    default_message = 'Not Found'


class MethodNotSupported(DealerHubError):
    status_code = 405
    default_message = 'Method Not Allowed'


class ConfigurationError(DealerHubError):
    """Missing or malformed environment configuration.

    Surfaces to the caller as a 500 carrying the descriptive message, so a
    misconfigured deployment is diagnosable from the response alone.
    """

    status_code = 500
