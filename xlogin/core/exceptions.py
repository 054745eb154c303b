"""
Domain exceptions for the X OAuth login flow.

Routed errors are handed to the caller's error hook when one is set.
Everything left unhandled is caught by the exception handlers registered
in xlogin.oauth.errors.
"""

from typing import Any, Optional


class OAuthLoginError(Exception):
    """
    Base class for login errors that map onto an HTTP status.

    Attributes:
        status_code: HTTP status the error is rendered with
        message: Human readable description
        data: Structured detail (query map, token response, ...)
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        data: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.data = data
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        """Serialize for an HTTP error body."""
        return {
            "status": "error",
            "status_code": self.status_code,
            "message": self.message,
            "data": self.data,
        }


class ProviderDeniedError(OAuthLoginError):
    """Raised when the provider redirects back with an ``error`` parameter."""

    status_code = 401


class ConfigurationError(OAuthLoginError):
    """Raised when the client credentials are not configured."""

    status_code = 500


class TokenExchangeError(OAuthLoginError):
    """Raised when the token endpoint answers with an ``error`` field."""

    status_code = 401


class TransientNetworkError(OAuthLoginError):
    """
    Raised on timeouts or connection failures talking to the provider.

    Never handed to the error hook.
    """

    status_code = 503


class ProviderResponseError(OAuthLoginError):
    """
    Raised when the provider rejects a request without an error field, answers
    with an unreadable body, or returns no access token.

    Never handed to the error hook.
    """

    status_code = 502


class ProfileFetchFailure(Exception):
    """
    Raised when the profile endpoint returns no usable user.

    Treated as an infrastructure failure: it always propagates and is never
    handed to the error hook.
    """

    pass
