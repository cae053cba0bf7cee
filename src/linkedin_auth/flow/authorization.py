"""Authorization URL construction.

Builds the URL the user opens in a browser to grant the application
access. Nothing here touches the network; the provider only sees the
parameters when the user visits the URL.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote, urlencode

import httpx

from linkedin_auth.config import AUTHORIZATION_URL
from linkedin_auth.exceptions import InvalidRedirectUrlError, InvalidUsageError


def validate_redirect_url(redirect_url: str) -> str:
    """Check that *redirect_url* is an absolute http(s) URL and return it unchanged.

    Raises:
        InvalidRedirectUrlError: If the URL cannot be parsed, has another
            scheme, or has no host.
    """
    try:
        url = httpx.URL(redirect_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidRedirectUrlError(
            f"Invalid redirect URL '{redirect_url}': {exc}"
        ) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidRedirectUrlError(
            f"Invalid redirect URL '{redirect_url}': expected an absolute "
            "http(s) URL such as https://localhost:8000"
        )
    return redirect_url


def build_authorization_url(
    client_id: str,
    redirect_url: str,
    scopes: Sequence[str],
    state: str,
    *,
    authorization_url: str = AUTHORIZATION_URL,
) -> str:
    """Build the provider authorization URL for the code grant.

    Query parameters are emitted in a fixed order (``response_type``,
    ``client_id``, ``redirect_uri``, ``state``, ``scope``) so identical
    inputs always yield an identical URL. Scopes are joined with a single
    space and percent-encoded as one value.

    Args:
        client_id: Application client ID. Not checked against the provider.
        redirect_url: Absolute URL registered for the application.
        scopes: Requested permissions, at least one.
        state: Opaque CSRF value from
            :func:`~linkedin_auth.flow.state.generate_state`.
        authorization_url: Authorization endpoint, LinkedIn's by default.

    Returns:
        The fully qualified URL, suitable for display.

    Raises:
        InvalidRedirectUrlError: If *redirect_url* is malformed.
        InvalidUsageError: If no scope (or an empty scope) is given.
    """
    validate_redirect_url(redirect_url)
    if not scopes or any(not scope for scope in scopes):
        raise InvalidUsageError("At least one non-empty scope is required")

    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_url,
        "state": state,
        "scope": " ".join(scopes),
    }
    return f"{authorization_url}?{urlencode(params, quote_via=quote)}"
