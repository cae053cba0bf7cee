"""Authorization code to access token exchange.

This module provides :class:`TokenExchanger` and its non-blocking
counterpart :class:`AsyncTokenExchanger`. Both send exactly one request to
the token endpoint and share the request parameters
(:func:`build_token_params`) and response validation
(:func:`parse_token_response`):

- body is not JSON, or not a JSON object -> :class:`MalformedResponseError`
- ``access_token`` missing or not a string -> :class:`MissingAccessTokenError`
- transport failure -> :class:`TransportError` wrapping the httpx exception

The HTTP status is not checked up front: LinkedIn reports rejected grants
as JSON error objects, which end up as :class:`MissingAccessTokenError`
with the provider's ``error`` fields attached.

The HTTP client is passed in and owned by the caller, usually
:class:`~linkedin_auth.flow.controller.OAuth2FlowController`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from linkedin_auth.exceptions import (
    MalformedResponseError,
    MissingAccessTokenError,
    TransportError,
)
from linkedin_auth.models import ClientCredentials, FlowSettings, TokenMethod

logger = logging.getLogger(__name__)


def build_token_params(
    credentials: ClientCredentials,
    code: str,
    redirect_url: str,
    state: str,
) -> dict[str, str]:
    """Return the token endpoint parameters for an authorization code.

    The code is stripped of surrounding whitespace, which a terminal paste
    usually leaves behind. ``redirect_url`` and ``state`` must be the values
    the authorization URL was built with.
    """
    return {
        "response_type": "code",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "code": code.strip(),
        "redirect_uri": redirect_url,
        "state": state,
        "grant_type": "authorization_code",
    }


def parse_token_response(response: httpx.Response) -> str:
    """Extract the access token from a token endpoint response.

    Args:
        response: The provider's response, whatever its status code.

    Returns:
        The ``access_token`` value exactly as received.

    Raises:
        MalformedResponseError: If the body is not a JSON object.
        MissingAccessTokenError: If the object has no string
            ``access_token``.
    """
    try:
        data: Any = response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Token endpoint returned a non-JSON response (HTTP {response.status_code})",
            status_code=response.status_code,
        ) from exc

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Token endpoint returned JSON {type(data).__name__}, expected an object "
            f"(HTTP {response.status_code})",
            status_code=response.status_code,
        )

    token = data.get("access_token")
    if isinstance(token, str):
        return token

    error = data.get("error")
    description = data.get("error_description")
    error = error if isinstance(error, str) else None
    description = description if isinstance(description, str) else None

    message = "Cannot retrieve the access token from the response"
    if error:
        message += f": {error}"
        if description:
            message += f" - {description}"
    elif "access_token" in data:
        message += f": 'access_token' is {type(token).__name__}, expected a string"
    raise MissingAccessTokenError(message, error=error, error_description=description)


def _request_kwargs(settings: FlowSettings, params: dict[str, str]) -> dict[str, Any]:
    """Place *params* in the query string (GET) or a form body (POST)."""
    if settings.token_method == TokenMethod.POST:
        return {"data": params}
    return {"params": params}


class TokenExchanger:
    """Exchange an authorization code for an access token over a blocking client.

    Args:
        client: The HTTP client to send the request with. Not closed here.
        settings: Provider settings (token endpoint and method).

    Example::

        with httpx.Client() as client:
            token = TokenExchanger(client).exchange(creds, code, redirect, state)
    """

    def __init__(self, client: httpx.Client, settings: FlowSettings | None = None) -> None:
        self._client = client
        self._settings = settings or FlowSettings()

    def exchange(
        self,
        credentials: ClientCredentials,
        code: str,
        redirect_url: str,
        state: str,
    ) -> str:
        """Send one token request and return the access token.

        No retries; a failure ends the flow.

        Raises:
            TransportError: On DNS, TLS, timeout, or connection failures.
            MalformedResponseError: If the body is not a JSON object.
            MissingAccessTokenError: If no string ``access_token`` came back.
        """
        params = build_token_params(credentials, code, redirect_url, state)
        method = self._settings.token_method.value
        logger.debug("Requesting access token: %s %s", method, self._settings.token_url)
        try:
            response = self._client.request(
                method,
                self._settings.token_url,
                headers={"Accept": "application/json"},
                **_request_kwargs(self._settings, params),
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc

        logger.debug("Token endpoint answered HTTP %s", response.status_code)
        return parse_token_response(response)


class AsyncTokenExchanger:
    """Asynchronous counterpart of :class:`TokenExchanger` over :class:`httpx.AsyncClient`."""

    def __init__(
        self, client: httpx.AsyncClient, settings: FlowSettings | None = None
    ) -> None:
        self._client = client
        self._settings = settings or FlowSettings()

    async def exchange(
        self,
        credentials: ClientCredentials,
        code: str,
        redirect_url: str,
        state: str,
    ) -> str:
        """Send one token request and return the access token.

        Raises the same errors as :meth:`TokenExchanger.exchange`.
        """
        params = build_token_params(credentials, code, redirect_url, state)
        method = self._settings.token_method.value
        logger.debug("Requesting access token: %s %s", method, self._settings.token_url)
        try:
            response = await self._client.request(
                method,
                self._settings.token_url,
                headers={"Accept": "application/json"},
                **_request_kwargs(self._settings, params),
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Token request failed: {exc}", cause=exc) from exc

        logger.debug("Token endpoint answered HTTP %s", response.status_code)
        return parse_token_response(response)
