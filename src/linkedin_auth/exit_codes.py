"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a failure category of the authorization flow and is
referenced by the corresponding :class:`~linkedin_auth.exceptions.LinkedInAuthError`
subclass. Shell wrappers can inspect the exit code to tell a rejected
grant from a network outage without parsing stderr.

Example::

    $ linkedin-auth -c ID -s SECRET
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the provider did not issue a token
"""

EXIT_SUCCESS = 0
"""The access token was obtained."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments (e.g. a malformed redirect URL or an empty scope list)."""

EXIT_AUTH_FAILURE = 3
"""The provider answered without a usable access token."""

EXIT_PROVIDER_ERROR = 5
"""The provider answered with a body that is not a JSON object."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CANCELLED = 130
"""The user aborted the flow while the authorization code was awaited."""
