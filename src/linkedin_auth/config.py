"""Configuration: provider constants, environment overrides, credential sources.

linkedin_auth keeps no configuration files and writes nothing to disk. The
effective configuration of a run is resolved from, in order of precedence:

    1. CLI flags
    2. Environment variables
    3. The defaults defined in this module

Credentials may be given directly or through a *source descriptor*
(``env:VAR``, ``file:/path``, ``prompt``) resolved by
:func:`resolve_credential`, so that secrets need not appear in shell
history.
"""

from __future__ import annotations

import getpass
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from linkedin_auth.exceptions import ConfigError

if TYPE_CHECKING:
    from linkedin_auth.models import FlowSettings

AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"

DEFAULT_SCOPES: tuple[str, ...] = ("r_ads",)
DEFAULT_REDIRECT_URL = "https://localhost:8000"

# 32 bytes -> 256 bits of entropy, 43 base64url characters
DEFAULT_STATE_BYTES = 32

ENV_CLIENT_ID = "LINKEDIN_CLIENT_ID"
ENV_CLIENT_SECRET = "LINKEDIN_CLIENT_SECRET"
ENV_AUTHORIZATION_URL = "LINKEDIN_AUTH_AUTHORIZATION_URL"
ENV_TOKEN_URL = "LINKEDIN_AUTH_TOKEN_URL"
ENV_TOKEN_METHOD = "LINKEDIN_AUTH_TOKEN_METHOD"


def load_settings(
    authorization_url: Optional[str] = None,
    token_url: Optional[str] = None,
    token_method: Optional[str] = None,
) -> FlowSettings:
    """Resolve provider endpoint settings with CLI > env > default precedence.

    Args:
        authorization_url: Override for the authorization endpoint.
        token_url: Override for the token endpoint.
        token_method: ``"GET"`` or ``"POST"`` (case-insensitive).

    Returns:
        A validated :class:`~linkedin_auth.models.FlowSettings`.

    Raises:
        ConfigError: If a value fails validation (e.g. an unknown method).
    """
    from linkedin_auth.models import FlowSettings

    values: dict[str, str] = {}

    resolved_auth_url = authorization_url or os.environ.get(ENV_AUTHORIZATION_URL)
    if resolved_auth_url:
        values["authorization_url"] = resolved_auth_url

    resolved_token_url = token_url or os.environ.get(ENV_TOKEN_URL)
    if resolved_token_url:
        values["token_url"] = resolved_token_url

    resolved_method = token_method or os.environ.get(ENV_TOKEN_METHOD)
    if resolved_method:
        values["token_method"] = resolved_method.upper()

    try:
        return FlowSettings.model_validate(values)
    except ValueError as exc:
        raise ConfigError(f"Invalid provider settings: {exc}") from exc


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        file_path = source[5:]
        path = Path(file_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Client secret: ")

    raise ConfigError(f"Unknown credential source format: {source}")
