"""OAuth2 flow controller: state -> authorization URL -> code -> token.

:class:`OAuth2FlowController` sequences one authorization run and owns the
HTTP client for its duration. Between building the URL and exchanging the
code, the flow waits on an external collaborator (the terminal prompt in
:mod:`linkedin_auth.app`) for the code the user copies from the redirect.

The ``client_id``, ``redirect_url`` and ``state`` of a run are fixed when
:meth:`~OAuth2FlowController.start` is called and reused verbatim by
:meth:`~OAuth2FlowController.complete`. A run ends with the token or with
one of the :mod:`linkedin_auth.exceptions` errors; trying again means
calling ``start()`` again, which generates a fresh state.

:class:`AsyncOAuth2FlowController` is the same flow for event-loop callers,
where waiting for the code is an ``await`` on an externally delivered
value.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Optional

import httpx

from linkedin_auth.exceptions import FlowCancelledError, InvalidUsageError
from linkedin_auth.flow.authorization import build_authorization_url
from linkedin_auth.flow.exchange import AsyncTokenExchanger, TokenExchanger
from linkedin_auth.flow.state import generate_state
from linkedin_auth.models import (
    AuthorizationRequest,
    ClientCredentials,
    FlowRequest,
    FlowSettings,
)

logger = logging.getLogger(__name__)

CodeProvider = Callable[[AuthorizationRequest], str]
AsyncCodeProvider = Callable[[AuthorizationRequest], Awaitable[str]]


class _FlowBase:
    """State handling shared by the sync and async controllers."""

    def __init__(
        self,
        credentials: ClientCredentials,
        redirect_url: str,
        scopes: Sequence[str],
        settings: Optional[FlowSettings] = None,
    ) -> None:
        self._credentials = credentials
        self._redirect_url = redirect_url
        self._scopes = tuple(scopes)
        self._settings = settings or FlowSettings()
        self._pending: Optional[AuthorizationRequest] = None

    @property
    def pending(self) -> Optional[AuthorizationRequest]:
        """The started, not yet completed authorization request, if any."""
        return self._pending

    def start(self) -> AuthorizationRequest:
        """Generate a fresh state and build the authorization URL.

        Any previously started run is discarded.

        Returns:
            The URL to show the user and the flow values it was built from.

        Raises:
            EntropySourceError: If no random source is available.
            InvalidRedirectUrlError: If the redirect URL is malformed.
            InvalidUsageError: If no scopes were given.
        """
        self._pending = None
        state = generate_state(self._settings.state_bytes)
        url = build_authorization_url(
            self._credentials.client_id,
            self._redirect_url,
            self._scopes,
            state,
            authorization_url=self._settings.authorization_url,
        )
        flow = FlowRequest(redirect_url=self._redirect_url, scopes=self._scopes, state=state)
        self._pending = AuthorizationRequest(url=url, flow=flow)
        logger.debug("Authorization flow started for scopes: %s", " ".join(self._scopes))
        return self._pending

    def _take_pending(self) -> FlowRequest:
        """Consume the started run; each run allows a single exchange."""
        if self._pending is None:
            raise InvalidUsageError(
                "Authorization flow has not been started; call start() first"
            )
        flow = self._pending.flow
        self._pending = None
        return flow


class OAuth2FlowController(_FlowBase):
    """Run the authorization code grant with a blocking HTTP client.

    Must be used as a context manager so that the HTTP client is opened
    for the run and closed afterwards.

    Args:
        credentials: Application client ID and secret.
        redirect_url: Redirect URL registered for the application.
        scopes: Requested permissions, in display order.
        settings: Provider endpoints; LinkedIn's by default.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            to simulate the provider.

    Example::

        with OAuth2FlowController(creds, "https://localhost:8000", ["r_ads"]) as flow:
            token = flow.run(lambda request: input(request.url + "\\n"))
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        redirect_url: str,
        scopes: Sequence[str],
        *,
        settings: Optional[FlowSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(credentials, redirect_url, scopes, settings)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> OAuth2FlowController:
        self._client = httpx.Client(transport=self._transport)
        return self

    def __exit__(self, *args: object) -> None:
        self._pending = None
        if self._client:
            self._client.close()
            self._client = None

    def complete(self, code: str) -> str:
        """Exchange the pasted authorization code for an access token.

        Uses the ``redirect_url`` and ``state`` of the run started by
        :meth:`start`. The run is consumed whether or not the exchange
        succeeds.

        Args:
            code: The raw code as pasted; surrounding whitespace is removed.

        Returns:
            The access token.

        Raises:
            InvalidUsageError: If no run is started or the controller is not
                entered.
            TransportError: On network failures.
            MalformedResponseError: If the body is not a JSON object.
            MissingAccessTokenError: If the provider issued no token.
        """
        if self._client is None:
            raise InvalidUsageError("OAuth2FlowController must be used as a context manager")
        flow = self._take_pending()
        exchanger = TokenExchanger(self._client, self._settings)
        return exchanger.exchange(self._credentials, code, flow.redirect_url, flow.state)

    def run(self, code_provider: CodeProvider) -> str:
        """Run the whole flow: start, wait for the code, exchange it.

        Args:
            code_provider: Called with the authorization request; blocks
                until the user supplies the code and returns it.

        Returns:
            The access token.

        Raises:
            FlowCancelledError: If *code_provider* hits end of input. No
                token request is sent.
        """
        request = self.start()
        try:
            code = code_provider(request)
        except EOFError as exc:
            self._pending = None
            raise FlowCancelledError("No authorization code was entered") from exc
        except BaseException:
            self._pending = None
            raise
        return self.complete(code)


class AsyncOAuth2FlowController(_FlowBase):
    """Run the authorization code grant with :class:`httpx.AsyncClient`.

    Mirrors :class:`OAuth2FlowController`; must be used as an async
    context manager. Cancelling the task while the code is awaited ends
    the run without contacting the token endpoint.

    Example::

        async with AsyncOAuth2FlowController(creds, redirect, ["r_ads"]) as flow:
            request = flow.start()
            token = await flow.complete(await code_future)
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        redirect_url: str,
        scopes: Sequence[str],
        *,
        settings: Optional[FlowSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(credentials, redirect_url, scopes, settings)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncOAuth2FlowController:
        self._client = httpx.AsyncClient(transport=self._transport)
        return self

    async def __aexit__(self, *args: object) -> None:
        self._pending = None
        if self._client:
            await self._client.aclose()
            self._client = None

    async def complete(self, code: str) -> str:
        """Exchange the authorization code; see :meth:`OAuth2FlowController.complete`."""
        if self._client is None:
            raise InvalidUsageError(
                "AsyncOAuth2FlowController must be used as an async context manager"
            )
        flow = self._take_pending()
        exchanger = AsyncTokenExchanger(self._client, self._settings)
        return await exchanger.exchange(
            self._credentials, code, flow.redirect_url, flow.state
        )

    async def run(self, code_provider: AsyncCodeProvider) -> str:
        """Start the flow, await the code from *code_provider*, and exchange it."""
        request = self.start()
        try:
            code = await code_provider(request)
        except EOFError as exc:
            self._pending = None
            raise FlowCancelledError("No authorization code was entered") from exc
        except BaseException:
            self._pending = None
            raise
        return await self.complete(code)
