"""HTTP transport -- authenticated JSON calls over :mod:`httpx`.

:class:`Transport` is the only component that touches the network. It wraps
an :class:`httpx.AsyncClient` configured with the API host, HTTP basic auth,
a timeout and SSL verification, and exposes a single coroutine::

    await transport.request("GET", "/rest/v1/accounts/A1")

which returns the decoded JSON body or raises a
:class:`~zuora_rest.exceptions.TransportError` subclass. No retries are
made. The dispatcher in :mod:`zuora_rest.client.async_client` depends only
on this ``request`` signature, so tests substitute any object providing it.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from zuora_rest.exceptions import (
    AuthError,
    ConnectionError_,
    DecodeError,
    NotFoundError,
    ServerError,
    TransportError,
)
from zuora_rest.models import ClientOptions


class RequestSender(Protocol):
    """Anything that can issue a request against a full API path."""

    async def request(self, method: str, path: str, body: Any = None) -> Any: ...

    async def aclose(self) -> None: ...


class Transport:
    """Authenticated JSON transport for the API.

    Args:
        options: Validated client options; supplies the base URL, basic-auth
            credentials, timeout and SSL settings.
        transport: Optional :class:`httpx.AsyncBaseTransport` (for example
            :class:`httpx.MockTransport` in tests).
    """

    def __init__(
        self,
        options: ClientOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=options.base_url,
            auth=httpx.BasicAuth(options.user, options.password),
            timeout=options.timeout,
            verify=options.verify_ssl,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE).
            path: Full request path including API prefix and query string.
            body: JSON-serialisable body. ``None`` sends no body.

        Returns:
            The decoded JSON body, or ``None`` for an empty response.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other 4xx or 5xx.
            ConnectionError_: On network / timeout errors.
            DecodeError: When a successful body is not valid JSON.
        """
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"{method} {path} failed: {exc}") from exc

        _map_response_error(response)
        return _decode(response)

    async def aclose(self) -> None:
        await self._client.aclose()


def _decode(response: httpx.Response) -> Any:
    """Decode a JSON body; empty bodies decode to ``None``."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(
            f"Invalid JSON in response to {response.request.method} "
            f"{response.request.url.path}: {exc}",
            status_code=response.status_code,
            body=response.text[:200],
        ) from exc


def _map_response_error(response: httpx.Response) -> None:
    """Raise a typed exception for error HTTP status codes."""
    status = response.status_code
    if status < 400:
        return

    # Try to extract an error message from the response body.
    try:
        detail: Any = response.json()
    except ValueError:
        detail = response.text[:200] if response.text else None

    msg = ""
    if isinstance(detail, dict):
        msg = detail.get("message") or detail.get("error") or ""
        reasons = detail.get("reasons")
        if not msg and isinstance(reasons, list) and reasons:
            first = reasons[0]
            msg = first.get("message", "") if isinstance(first, dict) else str(first)
    elif detail:
        msg = str(detail)

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    exc_type: type[TransportError]
    if status in (401, 403):
        exc_type = AuthError
    elif status == 404:
        exc_type = NotFoundError
    else:
        exc_type = ServerError
    raise exc_type(full_msg, status_code=status, body=detail)
