"""Exception hierarchy for zuora-rest.

All exceptions inherit from :class:`ZuoraError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`zuora_rest.exit_codes`.
Library callers catch :class:`TransportError` around requests; the CLI entry
point in :func:`zuora_rest.app.main` catches ``ZuoraError`` and exits with
the matching code.

Subclass hierarchy::

    ZuoraError (exit 1)
    +-- ConfigError          (exit 2)
    +-- TransportError       (exit 5)
        +-- AuthError        (exit 3)
        +-- NotFoundError    (exit 4)
        +-- ServerError      (exit 5)
        +-- ConnectionError_ (exit 6)
        +-- DecodeError      (exit 7)
"""

from zuora_rest.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONFIG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class ZuoraError(Exception):
    """Base exception for all zuora-rest errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`zuora_rest.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(ZuoraError):
    """Raised at construction time when credentials or options are missing or malformed."""

    exit_code = EXIT_CONFIG_ERROR


class TransportError(ZuoraError):
    """Raised for any failure of the underlying HTTP call.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, when there was one.
        body: Decoded response body, when there was one.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: object = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthError(TransportError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TransportError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(TransportError):
    """Raised when the API returns a 5xx status, or a 4xx without a more specific class."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(TransportError):
    """Raised when a successful response body cannot be decoded as JSON."""

    exit_code = EXIT_DECODE_ERROR
