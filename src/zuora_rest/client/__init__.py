"""HTTP client module for zuora-rest.

Provides the caching, paginating API client and the transport it sends
requests through.

Classes:
    :class:`ZuoraClient` -- public async client: path building, read cache,
        cache invalidation on mutation, and page aggregation.
    :class:`Transport` -- :class:`httpx.AsyncClient` wrapper with basic auth
        and status-to-exception mapping.

Example::

    from zuora_rest.client import ZuoraClient

    async with ZuoraClient({"user": "me", "password": "secret"}) as zuora:
        invoices = await zuora.get("/transactions/invoices/accounts/A0001")
"""

from zuora_rest.client.async_client import ZuoraClient
from zuora_rest.client.transport import Transport

__all__ = ["ZuoraClient", "Transport"]
