"""Shared test fixtures for linkedin_auth.

Provides credentials, a simulated provider built on
:class:`httpx.MockTransport`, environment isolation, output state
management, and a CLI runner. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from linkedin_auth.models import ClientCredentials
from linkedin_auth.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stderr at creation time.
    When Typer's CliRunner redirects those streams during a test and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Drop handlers that ``--verbose`` CLI runs attach to the package logger."""
    yield
    logger = logging.getLogger("linkedin_auth")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear every LINKEDIN_* variable so the developer's shell never leaks in."""
    for var in [
        "LINKEDIN_CLIENT_ID",
        "LINKEDIN_CLIENT_SECRET",
        "LINKEDIN_AUTH_AUTHORIZATION_URL",
        "LINKEDIN_AUTH_TOKEN_URL",
        "LINKEDIN_AUTH_TOKEN_METHOD",
    ]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Flow fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials() -> ClientCredentials:
    """Client credentials used across flow tests."""
    return ClientCredentials(client_id="id1", client_secret="secret1")


class FakeProvider:
    """Simulated token endpoint that records every request it receives.

    Answers ``{"access_token": "abc123"}`` until told otherwise through
    :meth:`respond_json`, :meth:`respond_text`, or :meth:`fail_with`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._status_code = 200
        self._body: dict[str, Any] = {
            "json": {"access_token": "abc123", "expires_in": 5184000}
        }
        self._error: Exception | None = None

    def respond_json(self, data: Any, status_code: int = 200) -> None:
        self._status_code = status_code
        self._body = {"json": data}

    def respond_text(self, text: str, status_code: int = 200) -> None:
        self._status_code = status_code
        self._body = {"text": text}

    def fail_with(self, exc: Exception) -> None:
        self._error = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return httpx.Response(self._status_code, **self._body)

    @property
    def last_params(self) -> dict[str, str]:
        """Parameters of the last request, from the query string or form body."""
        request = self.requests[-1]
        if request.method == "GET":
            return dict(request.url.params)
        return dict(httpx.QueryParams(request.content.decode("utf-8")))

    def transport(self) -> httpx.MockTransport:
        """A transport usable by both ``httpx.Client`` and ``httpx.AsyncClient``."""
        return httpx.MockTransport(self.handler)


@pytest.fixture
def provider() -> FakeProvider:
    """A fresh simulated provider answering ``{"access_token": "abc123"}``."""
    return FakeProvider()


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
