"""Asynchronous API client with read caching and page aggregation.

This module provides :class:`ZuoraClient`, the public entry point of the
package. It layers three behaviours over a
:class:`~zuora_rest.client.transport.Transport`:

- **Path building** -- every resource path is prefixed with ``/rest/v1``
  and query parameters are URL-encoded onto it.
- **Read cache** -- successful GET responses are kept in a per-client
  :class:`~zuora_rest.cache.CacheStore` for one hour, keyed by the full
  request path. A PUT, POST or DELETE drops the entry for its own path
  before the request is sent.
- **Pagination** -- :meth:`ZuoraClient.get` follows ``nextPage`` locators
  and merges list fields across pages (see
  :mod:`zuora_rest.client.pagination`).

Example::

    async with ZuoraClient({"user": "me@example.com", "password": "..."}) as zuora:
        accounts = await zuora.get("/accounts", query={"pageSize": 40})
        await zuora.put("/accounts/A0001", {"notes": "updated"})
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Optional

from zuora_rest.cache import CacheStore
from zuora_rest.client import pagination
from zuora_rest.client.transport import RequestSender, Transport
from zuora_rest.config import load_options
from zuora_rest.logs import clean_log_object, component_logger, request_logger
from zuora_rest.models import ClientOptions, HTTPMethod, RequestSpec

_MISSING = object()


class ZuoraClient:
    """Caching, paginating client for the REST API.

    Construction validates the options synchronously and binds the
    basic-auth credentials to the transport; no network traffic happens
    until the first request. The client may be used as an async context
    manager or closed explicitly with :meth:`aclose`.

    Args:
        opts: A :class:`~zuora_rest.models.ClientOptions` or a mapping with
            at least ``user`` and ``password``.
        transport: Optional request sender replacing the default
            :class:`~zuora_rest.client.transport.Transport`.
        cache: Optional cache store; defaults to a fresh
            :class:`~zuora_rest.cache.CacheStore` using ``opts.cache_ttl``.

    Raises:
        ConfigError: If *opts* is not a mapping or lacks credentials.
    """

    def __init__(
        self,
        opts: ClientOptions | dict[str, Any],
        transport: Optional[RequestSender] = None,
        cache: Optional[CacheStore] = None,
    ) -> None:
        self._options = load_options(opts)
        self._log = component_logger(self._options.logger)
        self._transport = transport if transport is not None else Transport(self._options)
        self._cache = cache if cache is not None else CacheStore(ttl=self._options.cache_ttl)

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def cache(self) -> CacheStore:
        return self._cache

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ZuoraClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport and drop every cached entry."""
        self._cache.close()
        await self._transport.aclose()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def get(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """GET *path*, following and merging continuation pages.

        Args:
            path: Resource path without the API prefix (e.g. ``/accounts``).
            query: Query parameters, reused for every continuation page.

        Returns:
            The decoded first page with list fields extended by later pages.

        Raises:
            TransportError: If the first page cannot be fetched. Failures on
                later pages are logged and the pages fetched so far returned.
        """
        log = request_logger(self._log, HTTPMethod.GET.value, path)
        return await pagination.aggregate(self.get_page, path, query, log=log)

    async def get_page(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """GET a single page through the read cache.

        A cache hit still yields to the event loop once before returning, so
        callers always resume from a scheduled continuation. The cache holds
        its own copy of each page and hands out copies, so callers may modify
        what they get back. Errors are never cached.
        """
        spec = RequestSpec(method=HTTPMethod.GET, path=path, query=query)
        key = spec.full_path
        log = request_logger(self._log, spec.method.value, key)

        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            await asyncio.sleep(0)
            log.debug("Got result from cache")
            return copy.deepcopy(cached)

        log.debug("Calling Zuora")
        result = await self._transport.request(spec.method.value, key)
        self._cache.set(key, copy.deepcopy(result))
        return result

    async def put(
        self,
        path: str,
        body: Any = None,
        query: Optional[dict[str, Any]] = None,
    ) -> Any:
        """PUT *body* to *path*, invalidating the cached entry for *path* first."""
        return await self.request(HTTPMethod.PUT, path, query=query, body=body)

    async def post(
        self,
        path: str,
        body: Any = None,
        query: Optional[dict[str, Any]] = None,
    ) -> Any:
        """POST *body* to *path*, invalidating the cached entry for *path* first."""
        return await self.request(HTTPMethod.POST, path, query=query, body=body)

    async def delete(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """DELETE *path*, invalidating the cached entry for *path* first."""
        return await self.request(HTTPMethod.DELETE, path, query=query)

    del_ = delete

    async def request(
        self,
        method: HTTPMethod | str,
        path: str,
        query: Optional[dict[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        """Dispatch any supported method.

        GET goes through :meth:`get` (cache and pagination). Mutating
        methods drop the cache entry for their request path before the
        call is sent, whether or not the call then succeeds.

        Raises:
            TransportError: Propagated unchanged from the transport.
            ValueError: If *method* is not GET, PUT, POST or DELETE.
        """
        method = HTTPMethod(method.upper() if isinstance(method, str) else method)
        if not method.is_mutation:
            return await self.get(path, query)

        spec = RequestSpec(method=method, path=path, query=query, body=body)
        key = spec.full_path
        log = request_logger(self._log, method.value, key)

        self._cache.invalidate(key)
        if body is not None:
            log.debug("Calling Zuora with %s", clean_log_object(body))
        else:
            log.debug("Calling Zuora")
        return await self._transport.request(method.value, key, body)

    def invalidate(self, path: str, query: Optional[dict[str, Any]] = None) -> None:
        """Drop the cached GET response for *path* (and *query*) if present."""
        spec = RequestSpec(method=HTTPMethod.GET, path=path, query=query)
        self._cache.invalidate(spec.full_path)
