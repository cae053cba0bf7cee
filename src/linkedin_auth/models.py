"""Canonical Pydantic models shared across linkedin_auth.

The models fall into two groups:

**Flow models** -- the values one authorization run carries from start to
finish: :class:`ClientCredentials`, :class:`FlowRequest`, and
:class:`AuthorizationRequest`. They are frozen so that the ``state`` and
``redirect_url`` used for the authorization URL cannot drift before the
token exchange.

**Settings** -- :class:`FlowSettings`, the provider endpoint configuration
resolved by :func:`linkedin_auth.config.load_settings`.

Authorization codes and access tokens are opaque strings and are passed
around as plain ``str``.
"""

from __future__ import annotations

import enum

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from linkedin_auth.config import (
    AUTHORIZATION_URL,
    DEFAULT_STATE_BYTES,
    TOKEN_URL,
)


class ClientCredentials(BaseModel):
    """Application credentials from the LinkedIn developer portal.

    Supplied by the caller at flow start and never persisted. The secret is
    hidden from ``repr`` so it does not leak into debug output.

    Example::

        ClientCredentials(client_id="86abc", client_secret="s3cr3t")
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)


class FlowRequest(BaseModel):
    """Per-run values that must reach the provider twice unchanged.

    ``state`` is generated once per flow by
    :func:`~linkedin_auth.flow.state.generate_state`; ``scopes`` keeps the
    order the user gave it in.
    """

    model_config = ConfigDict(frozen=True)

    redirect_url: str
    scopes: tuple[str, ...]
    state: str = Field(min_length=1, repr=False)


class AuthorizationRequest(BaseModel):
    """The authorization URL to show the user plus the flow it belongs to."""

    model_config = ConfigDict(frozen=True)

    url: str
    flow: FlowRequest


class TokenMethod(str, enum.Enum):
    """HTTP method used against the token endpoint."""

    GET = "GET"
    POST = "POST"


class FlowSettings(BaseModel):
    """Provider endpoint configuration.

    Defaults point at LinkedIn's fixed OAuth2 endpoints; overrides must be
    absolute https URLs since the token request carries the client secret.
    ``token_method`` is ``GET`` with query parameters, which is what
    LinkedIn accepts; ``POST`` sends the same parameters form-encoded.
    """

    authorization_url: str = AUTHORIZATION_URL
    token_url: str = TOKEN_URL
    token_method: TokenMethod = TokenMethod.GET
    state_bytes: int = Field(default=DEFAULT_STATE_BYTES, ge=DEFAULT_STATE_BYTES)

    @field_validator("authorization_url", "token_url")
    @classmethod
    def require_https_endpoint(cls, value: str) -> str:
        """Reject endpoint overrides that are not absolute https URLs."""
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"'{value}' is not a valid URL: {exc}") from exc
        if url.scheme != "https" or not url.host:
            raise ValueError(f"'{value}' must be an absolute https URL")
        return value
