"""Multi-page aggregation for list endpoints.

List endpoints answer with one page of results plus a ``nextPage`` locator,
an absolute URL such as ``https://host/rest/v1/accounts?page=2``. The
aggregator follows these locators and merges the pages into a single
result:

1. Fetch the first page. Errors here propagate to the caller.
2. While the latest page carries a locator containing the API prefix, fetch
   the path after the prefix, passing the *original* query parameters again.
3. Merge right to left: a page's list-valued field is extended with the
   merged later pages' list for the same field when both sides are lists.
   Every other field keeps the earlier page's value, ``nextPage`` included.

If fetching a later page fails, the chain stops: the pages fetched so far
are merged and returned, and the failure is logged instead of raised. A
page-2 failure therefore returns page 1 on its own.

Pages handed in by the fetch function are never modified, since they may be
the very objects held in the response cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from zuora_rest.exceptions import TransportError
from zuora_rest.models import API_PREFIX

NEXT_PAGE_FIELD = "nextPage"

PageFetcher = Callable[[str, Optional[dict[str, Any]]], Awaitable[Any]]


@dataclass
class PageHop:
    """Outcome of fetching one continuation page.

    Exactly one of ``result`` / ``error`` is meaningful: ``error`` is set
    when the fetch raised. ``next_path`` is the continuation of this page,
    or ``None`` at the end of the chain.
    """

    path: str
    result: Any = None
    next_path: Optional[str] = None
    error: Optional[TransportError] = None


def next_page_path(result: Any, prefix: str = API_PREFIX) -> Optional[str]:
    """Return the resource path of the page after *result*, if any.

    The locator must be a string containing *prefix*; the part after the
    first occurrence of *prefix* is returned (query string included).
    """
    if not isinstance(result, dict):
        return None
    locator = result.get(NEXT_PAGE_FIELD)
    if not isinstance(locator, str) or prefix not in locator:
        return None
    return locator[locator.index(prefix) + len(prefix):]


def merge_pages(page: dict[str, Any], later: Any) -> dict[str, Any]:
    """Merge *later* into a copy of *page*.

    Only fields present in both where both values are lists are combined,
    as ``page[field] + later[field]``.
    """
    merged = dict(page)
    if not isinstance(later, dict):
        return merged
    for name, value in page.items():
        other = later.get(name)
        if isinstance(value, list) and isinstance(other, list):
            merged[name] = value + other
    return merged


async def fetch_hop(fetch: PageFetcher, path: str, query: Optional[dict[str, Any]]) -> PageHop:
    """Fetch one continuation page, capturing transport failures in the hop."""
    try:
        result = await fetch(path, query)
    except TransportError as exc:
        return PageHop(path=path, error=exc)
    return PageHop(path=path, result=result, next_path=next_page_path(result))


async def aggregate(
    fetch: PageFetcher,
    path: str,
    query: Optional[dict[str, Any]] = None,
    log: Optional[logging.LoggerAdapter] = None,
) -> Any:
    """Fetch *path* and every continuation page, returning the merged result.

    Args:
        fetch: Coroutine function ``fetch(path, query)`` returning one decoded
            page (the cache-aware single-page GET).
        path: Resource path of the first page.
        query: Query parameters, reused for every page.
        log: Adapter for diagnostics; defaults to the module logger.

    Returns:
        The first page merged with all later pages that could be fetched.

    Raises:
        TransportError: Only when the *first* page cannot be fetched.
    """
    if log is None:
        log = logging.LoggerAdapter(logging.getLogger(__name__), {})

    first = await fetch(path, query)
    pages = [first]
    visited = {path}
    next_path = next_page_path(first)

    while next_path is not None:
        if next_path in visited:
            log.warning("Page %s already fetched in this chain, stopping", next_path)
            break
        visited.add(next_path)

        log.debug("Getting additional page %s", next_path)
        hop = await fetch_hop(fetch, next_path, query)
        if hop.error is not None:
            log.warning(
                "Additional page %s failed, returning %d page(s): %s",
                hop.path,
                len(pages),
                hop.error,
            )
            break
        pages.append(hop.result)
        next_path = hop.next_path

    if len(pages) == 1:
        return first

    merged = pages[-1]
    for page in reversed(pages[:-1]):
        merged = merge_pages(page, merged)
    return merged
