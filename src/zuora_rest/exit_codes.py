"""Numeric process exit codes used by the ``zuora-rest`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~zuora_rest.exceptions.ZuoraError` subclass.
Shell scripts wrapping the CLI can inspect the exit code to tell a bad
password from a missing record without parsing stderr.

Example::

    $ zuora-rest get /accounts/A0001
    $ echo $?
    4   # EXIT_NOT_FOUND -- no such account
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_CONFIG_ERROR = 2
"""Credentials or client options are missing or malformed."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the basic-auth credentials (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API answered with an error status (5xx or an unmapped 4xx)."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The API answered with a body that is not valid JSON."""
