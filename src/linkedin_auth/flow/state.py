"""CSRF ``state`` generation for the authorization request."""

from __future__ import annotations

import secrets

from linkedin_auth.config import DEFAULT_STATE_BYTES
from linkedin_auth.exceptions import EntropySourceError


def generate_state(nbytes: int = DEFAULT_STATE_BYTES) -> str:
    """Return an unguessable, URL-safe ``state`` value.

    The value is *nbytes* from the CSPRNG encoded as unpadded base64url, so
    it only contains ``A-Z a-z 0-9 - _`` and can go into a query string
    without escaping.

    Args:
        nbytes: Number of random bytes; at least 32 (256 bits).

    Returns:
        The encoded state string.

    Raises:
        ValueError: If *nbytes* is below 32.
        EntropySourceError: If the OS random source is unavailable.
    """
    if nbytes < DEFAULT_STATE_BYTES:
        raise ValueError(
            f"state needs at least {DEFAULT_STATE_BYTES} random bytes, got {nbytes}"
        )
    try:
        return secrets.token_urlsafe(nbytes)
    except (NotImplementedError, OSError) as exc:
        raise EntropySourceError(f"Random source unavailable: {exc}") from exc
