"""In-memory response caching for GET requests.

:class:`CacheStore` maps a full request path (API prefix, resource path and
query string) to the decoded response of a successful GET. Each entry lives
for a fixed TTL: when an event loop is running an expiry timer is scheduled
with :meth:`asyncio.AbstractEventLoop.call_later`, and :meth:`CacheStore.get`
also checks the entry's deadline so an overdue entry is never served.

There is at most one live entry per key. Writing a key again replaces the
entry and cancels the previous entry's timer; :meth:`CacheStore.invalidate`
removes an entry and cancels its timer.

The store belongs to a single :class:`~zuora_rest.client.ZuoraClient`
instance. It is only touched from the event loop thread, so no locking is
done.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from zuora_rest.models import DEFAULT_CACHE_TTL

_MISSING = object()


@dataclass
class CacheEntry:
    """A cached response and the bookkeeping for its expiry.

    Attributes:
        key: Full request path including the encoded query string.
        value: The decoded response body.
        expires_at: Deadline on the store's clock after which the entry is dead.
        timer: Pending expiry callback, or ``None`` when no loop was running
            at write time.
    """

    key: str
    value: Any
    expires_at: float
    timer: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class CacheStore:
    """Per-client in-memory cache with TTL expiry.

    Args:
        ttl: Default lifetime of an entry, in seconds.
        clock: Monotonic time source used for deadlines. Tests substitute a
            fake clock to simulate expiry.

    Example::

        store = CacheStore(ttl=60)
        store.set("/rest/v1/accounts/A1", {"basicInfo": {...}})
        store.get("/rest/v1/accounts/A1")
        store.invalidate("/rest/v1/accounts/A1")
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for *key*, or *default* on a miss.

        An entry whose deadline has passed counts as a miss and is dropped.
        """
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.expires_at <= self._clock():
            self._evict(key, entry)
            return default
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store *value* under *key* for *ttl* seconds (default: the store TTL).

        A previous entry for *key* is replaced and its expiry timer cancelled.
        """
        ttl = self._ttl if ttl is None else ttl
        previous = self._entries.pop(key, None)
        if previous is not None:
            previous.cancel()

        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            entry.timer = loop.call_later(ttl, self._evict, key, entry)
        self._entries[key] = entry

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key* if present. Missing keys are ignored."""
        entry = self._entries.pop(key, None)
        if entry is not None:
            entry.cancel()

    def clear(self) -> None:
        """Remove all entries and cancel their timers."""
        for entry in self._entries.values():
            entry.cancel()
        self._entries.clear()

    def close(self) -> None:
        """Release every pending timer. The store is empty afterwards."""
        self.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (live entries), ``ttl_seconds`` and
            ``keys`` (sorted list of cached request paths).
        """
        now = self._clock()
        live = sorted(k for k, e in self._entries.items() if e.expires_at > now)
        return {"size": len(live), "ttl_seconds": self._ttl, "keys": live}

    def __len__(self) -> int:
        return self.stats()["size"]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key, _MISSING) is not _MISSING

    def _evict(self, key: str, entry: CacheEntry) -> None:
        # Only drop the exact entry that expired; a newer write may own the key.
        if self._entries.get(key) is entry:
            del self._entries[key]
        entry.timer = None
