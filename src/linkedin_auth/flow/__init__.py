"""The OAuth2 authorization code flow.

Exports:
    :func:`generate_state` -- CSRF state generation.
    :func:`build_authorization_url` -- authorization URL construction.
    :class:`TokenExchanger` / :class:`AsyncTokenExchanger` -- code for token exchange.
    :class:`OAuth2FlowController` / :class:`AsyncOAuth2FlowController` --
    orchestration of one authorization run.
"""

from linkedin_auth.flow.authorization import build_authorization_url, validate_redirect_url
from linkedin_auth.flow.controller import AsyncOAuth2FlowController, OAuth2FlowController
from linkedin_auth.flow.exchange import (
    AsyncTokenExchanger,
    TokenExchanger,
    build_token_params,
    parse_token_response,
)
from linkedin_auth.flow.state import generate_state

__all__ = [
    "AsyncOAuth2FlowController",
    "AsyncTokenExchanger",
    "OAuth2FlowController",
    "TokenExchanger",
    "build_authorization_url",
    "build_token_params",
    "generate_state",
    "parse_token_response",
    "validate_redirect_url",
]
