"""Exception hierarchy for linkedin_auth.

All exceptions inherit from :class:`LinkedInAuthError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`linkedin_auth.exit_codes`. The CLI catches ``LinkedInAuthError``,
prints a single-line diagnostic and exits with the matching code. Every
error is terminal for the current flow run; nothing is retried.

Subclass hierarchy::

    LinkedInAuthError (exit 1)
    +-- EntropySourceError        (exit 1)
    +-- ConfigError               (exit 1)
    +-- InvalidUsageError         (exit 2)
    |   +-- InvalidRedirectUrlError (exit 2)
    +-- MissingAccessTokenError   (exit 3)
    +-- MalformedResponseError    (exit 5)
    +-- TransportError            (exit 6)
    +-- FlowCancelledError        (exit 130)
"""

from __future__ import annotations

from typing import Optional

from linkedin_auth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CANCELLED,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PROVIDER_ERROR,
)


class LinkedInAuthError(Exception):
    """Base exception for all linkedin_auth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class EntropySourceError(LinkedInAuthError):
    """Raised when the operating system's random source is unavailable."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(LinkedInAuthError):
    """Raised for configuration problems (unset env vars, unreadable credential files)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(LinkedInAuthError):
    """Raised for invalid arguments or when the flow is driven out of order."""

    exit_code = EXIT_INVALID_USAGE


class InvalidRedirectUrlError(InvalidUsageError):
    """Raised when the redirect URL is not an absolute http(s) URL."""


class MissingAccessTokenError(LinkedInAuthError):
    """Raised when the token response is a JSON object without a string ``access_token``.

    This is the shape of every OAuth2 error payload, so the provider's own
    ``error`` and ``error_description`` fields are kept when present.

    Args:
        message: Human-readable error description.
        error: The provider's ``error`` code, if it sent one.
        error_description: The provider's ``error_description``, if any.
    """

    exit_code = EXIT_AUTH_FAILURE

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        error_description: Optional[str] = None,
    ):
        super().__init__(message)
        self.error = error
        self.error_description = error_description


class MalformedResponseError(LinkedInAuthError):
    """Raised when the token response body is not valid JSON or not a JSON object.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the offending response.
    """

    exit_code = EXIT_PROVIDER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(LinkedInAuthError):
    """Raised on network-level failures (DNS, TLS, timeout, connection reset or refused).

    The underlying exception is available both as :attr:`cause` and, when
    raised with ``raise ... from``, as ``__cause__``.

    Args:
        message: Human-readable error description.
        cause: The transport exception that aborted the request.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class FlowCancelledError(LinkedInAuthError):
    """Raised when the user aborts while the authorization code is awaited.

    No request has reached the token endpoint at that point.
    """

    exit_code = EXIT_CANCELLED
