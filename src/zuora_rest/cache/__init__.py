"""In-memory response caching for zuora-rest.

This package provides :class:`CacheStore`, the per-client read cache that
holds successful GET responses for a fixed TTL (one hour by default), keyed
by the full request path including its query string. Mutating calls
(PUT/POST/DELETE) invalidate the entry for their path.

The store is owned and driven by :class:`~zuora_rest.client.ZuoraClient`.
"""

from zuora_rest.cache.cache import CacheEntry, CacheStore

__all__ = ["CacheEntry", "CacheStore"]
