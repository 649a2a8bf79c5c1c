"""Shared test fixtures for zuora-rest.

Provides a recording fake transport, a controllable clock for cache expiry,
and a ready-made client wired to both. These fixtures are discovered by
pytest automatically.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any

import pytest

from zuora_rest.cache import CacheStore
from zuora_rest.client import ZuoraClient
from zuora_rest.exceptions import NotFoundError
from zuora_rest.output import reset_output

OPTIONS = {"user": "api@example.com", "password": "s3cret"}

_UNSET = object()


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager holds Rich consoles bound to the sys.stdout/sys.stderr of
    the moment it was created; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeTransport:
    """Records every call and answers from a route table.

    Routes are keyed by full request path, or by ``(method, path)`` for a
    method-specific answer. A route value that is an exception is raised.
    Unrouted GETs raise :class:`NotFoundError`; unrouted mutations answer
    ``{"success": True}``. Answers are deep-copied, like a fresh JSON decode.
    """

    def __init__(self, routes: dict[Any, Any] | None = None) -> None:
        self.routes: dict[Any, Any] = dict(routes or {})
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        self.calls.append((method, path, body))
        await asyncio.sleep(0)
        outcome = self.routes.get((method, path), self.routes.get(path, _UNSET))
        if outcome is _UNSET:
            if method == "GET":
                raise NotFoundError("HTTP 404", status_code=404)
            return {"success": True}
        if isinstance(outcome, Exception):
            raise outcome
        return copy.deepcopy(outcome)

    async def aclose(self) -> None:
        self.closed = True

    def paths(self, method: str | None = None) -> list[str]:
        return [p for m, p, _ in self.calls if method is None or m == method]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(fake_transport: FakeTransport, clock: FakeClock) -> ZuoraClient:
    """Client using the fake transport and a one-hour cache on the fake clock."""
    c = ZuoraClient(OPTIONS, transport=fake_transport, cache=CacheStore(ttl=3600, clock=clock))
    yield c
    c.cache.close()
