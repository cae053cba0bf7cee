"""linkedin_auth -- obtain a LinkedIn OAuth2 access token from the terminal.

This package automates the three-legged OAuth2 *authorization code* grant
against LinkedIn: it generates a CSRF ``state``, builds the authorization
URL, waits for the user to paste back the ``code`` from the redirect, and
exchanges that code for an access token.

Typical workflow::

    linkedin-auth --client-id ID --client-secret SECRET -p r_ads

Modules:
    app: Typer application and CLI entry point.
    flow: The OAuth2 flow controller (state, URL, token exchange).
    models: Pydantic models shared across the package.
    config: Provider constants, environment overrides, credential sources.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
