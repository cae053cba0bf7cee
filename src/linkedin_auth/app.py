"""Typer application and CLI entry point for linkedin_auth.

The CLI is glue around :class:`~linkedin_auth.flow.controller.OAuth2FlowController`:
it turns flags and environment variables into credentials and settings,
prints the authorization URL with instructions on stderr, reads the pasted
authorization code, and prints the resulting access token on stdout.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Known failures are reported as a single ``Error:`` line
and mapped to the exit codes in :mod:`linkedin_auth.exit_codes`.

See Also:
    :mod:`linkedin_auth.config`: Environment variables and credential sources.
    :mod:`linkedin_auth.output`: Output formatting initialised per invocation.
"""

from __future__ import annotations

import logging
import re
import signal
import sys
import threading
import webbrowser
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from linkedin_auth import __version__
from linkedin_auth.config import (
    DEFAULT_REDIRECT_URL,
    DEFAULT_SCOPES,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    load_settings,
    resolve_credential,
)
from linkedin_auth.exceptions import InvalidUsageError, LinkedInAuthError
from linkedin_auth.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from linkedin_auth.flow import OAuth2FlowController
from linkedin_auth.flow.controller import CodeProvider
from linkedin_auth.models import AuthorizationRequest, ClientCredentials
from linkedin_auth.output import (
    OutputFormat,
    OutputManager,
    error,
    highlight,
    info,
    print_token,
    set_output,
    success,
    suggest,
)


app = typer.Typer(
    name="linkedin-auth",
    help="Automate the LinkedIn OAuth2 authorization code flow.",
    add_completion=False,
    rich_markup_mode="rich",
)

logger = logging.getLogger(__name__)

_SCOPE_SEPARATOR = re.compile(r"[\s,]+")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"linkedin-auth {__version__}")
        raise typer.Exit()


def _configure_logging(output: OutputManager) -> None:
    """Route ``linkedin_auth`` debug logs to stderr through Rich.

    Only the package logger is configured; the ``httpx`` logger would echo
    the token request URL, which carries the client secret.
    """
    package_logger = logging.getLogger("linkedin_auth")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.addHandler(
        RichHandler(console=output.stderr_console, show_path=False, markup=False)
    )
    package_logger.setLevel(logging.DEBUG)


def _split_scopes(permissions: Optional[list[str]]) -> list[str]:
    """Flatten repeated ``-p`` values, each of which may hold several scopes."""
    if not permissions:
        return list(DEFAULT_SCOPES)
    scopes: list[str] = []
    for value in permissions:
        scopes.extend(part for part in _SCOPE_SEPARATOR.split(value) if part)
    return scopes


def _resolve_client_secret(
    client_secret: Optional[str], client_secret_source: Optional[str]
) -> str:
    """Pick the client secret from the flag/env value or a source descriptor."""
    if client_secret and client_secret_source:
        raise InvalidUsageError(
            "Use either --client-secret or --client-secret-source, not both"
        )
    if client_secret_source:
        return resolve_credential(client_secret_source)
    if not client_secret:
        raise InvalidUsageError(
            f"A client secret is required: pass --client-secret, "
            f"--client-secret-source, or set {ENV_CLIENT_SECRET}"
        )
    return client_secret


def _open_browser(url: str) -> None:
    """Open *url* in the default browser without blocking the prompt."""
    browser_thread = threading.Thread(target=webbrowser.open, args=(url,), daemon=True)
    browser_thread.start()


def _make_code_prompt(open_browser: bool) -> CodeProvider:
    """Return the code provider handed to :meth:`OAuth2FlowController.run`."""

    def prompt_for_code(request: AuthorizationRequest) -> str:
        info("\nGenerated URL to request the LinkedIn authorization code for your application:\n")
        highlight(request.url)
        info(
            "\nOpen it and sign in with your account. After authorization you will "
            "be redirected to the redirect URL.\n"
            "Copy the 'code' value from the request parameters and paste it here.\n"
        )
        if open_browser:
            _open_browser(request.url)
        try:
            return typer.prompt("Authorization code", err=True)
        except typer.Abort as exc:
            raise EOFError("authorization code prompt aborted") from exc

    return prompt_for_code


@app.command()
def authorize(
    client_id: str = typer.Option(
        ...,
        "--client-id",
        "-c",
        envvar=ENV_CLIENT_ID,
        help="Client ID of the application, from the apps list in the LinkedIn developer portal.",
    ),
    client_secret: Optional[str] = typer.Option(
        None,
        "--client-secret",
        "-s",
        envvar=ENV_CLIENT_SECRET,
        help="Client secret of the application, from the apps list in the LinkedIn developer portal.",
    ),
    client_secret_source: Optional[str] = typer.Option(
        None,
        "--client-secret-source",
        help="Read the client secret from env:VAR, file:/path, or 'prompt'.",
    ),
    permissions: Optional[list[str]] = typer.Option(
        None,
        "--permissions",
        "-p",
        help="Permission (scope) to request; repeat the flag for several. Default: r_ads.",
    ),
    redirect_url: str = typer.Option(
        DEFAULT_REDIRECT_URL,
        "--redirect-url",
        "-r",
        help="Redirect URL in 'https://{url}' format registered for the application; "
        "the code is delivered to it as a query parameter.",
    ),
    open_browser: bool = typer.Option(
        False, "--open-browser", help="Open the authorization URL in the default browser."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the token as a JSON object."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Obtain a LinkedIn access token through the OAuth2 authorization code flow.

    Prints an authorization URL, waits for the ``code`` from the redirect to
    be pasted, exchanges it for an access token, and prints the token on
    stdout.

    Raises:
        typer.Exit: With the exit code of the failure on any flow error.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet)
    set_output(output)
    if verbose:
        _configure_logging(output)

    try:
        secret = _resolve_client_secret(client_secret, client_secret_source)
        try:
            credentials = ClientCredentials(client_id=client_id, client_secret=secret)
        except ValidationError as exc:
            raise InvalidUsageError("Client ID and client secret must not be empty") from exc
        scopes = _split_scopes(permissions)
        settings = load_settings()
        logger.debug("Token endpoint: %s %s", settings.token_method.value, settings.token_url)

        with OAuth2FlowController(
            credentials,
            redirect_url,
            scopes,
            settings=settings,
        ) as flow:
            token = flow.run(_make_code_prompt(open_browser))
    except LinkedInAuthError as exc:
        error(str(exc))
        if exc.exit_code != EXIT_CANCELLED:
            suggest("Run the command again to start a new authorization flow.")
        raise typer.Exit(code=exc.exit_code) from None

    success("\nAccess token retrieved successfully. You can now use it:\n")
    print_token(token)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``linkedin-auth`` console script.

    Flow errors are handled inside :func:`authorize`. Anything else is
    reported as a one-line unexpected error with a generic failure exit;
    nothing is written to disk.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
