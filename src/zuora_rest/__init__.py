"""zuora-rest -- cached, paginating async client for the Zuora REST API.

The package wraps the ``/rest/v1`` API behind four coroutines (``get``,
``put``, ``post``, ``delete``) on :class:`ZuoraClient`. GET responses are
cached per client for an hour and list endpoints are transparently followed
across ``nextPage`` links; mutating calls invalidate the cached entry for
their path.

Typical use::

    from zuora_rest import ZuoraClient

    async with ZuoraClient({"user": "me", "password": "secret"}) as zuora:
        account = await zuora.get("/accounts/A0001")

Modules:
    app: Typer command line (``zuora-rest get /accounts/A0001``).
    client: The API client, pagination and HTTP transport.
    cache: Per-client in-memory read cache.
    models: Pydantic options and request models.
    config: Option validation and environment loading.
    exceptions: Exception hierarchy with exit-code mapping.
    logs: Logger adapters and log redaction.
    output: stdout/stderr formatting for the command line.
"""

__version__ = "1.0.0"

from zuora_rest.client import ZuoraClient  # noqa: E402
from zuora_rest.exceptions import ConfigError, TransportError, ZuoraError  # noqa: E402
from zuora_rest.models import ClientOptions  # noqa: E402

__all__ = [
    "ClientOptions",
    "ConfigError",
    "TransportError",
    "ZuoraClient",
    "ZuoraError",
    "__version__",
]
