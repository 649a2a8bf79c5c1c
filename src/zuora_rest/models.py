"""Pydantic models shared across zuora-rest.

Two groups of models live here:

**Client configuration** -- :class:`ClientOptions` describes how a
:class:`~zuora_rest.client.ZuoraClient` reaches the API (credentials, target
environment, timeouts, cache lifetime). It is validated once at
construction time by :func:`~zuora_rest.config.load_options`.

**Per-call request description** -- :class:`HTTPMethod` and
:class:`RequestSpec` describe one dispatched call. A ``RequestSpec`` renders
the full request path (API prefix, resource path, encoded query string),
which doubles as the cache key for that call.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

API_PREFIX = "/rest/v1"
"""Version segment prepended to every resource path before dispatch."""

PRODUCTION_URL = "https://api.zuora.com"
SANDBOX_URL = "https://apisandbox-api.zuora.com"

DEFAULT_CACHE_TTL = 60 * 60
"""Lifetime of a cached GET response, in seconds (one hour)."""


# --- Client Config ---


class ClientOptions(BaseModel):
    """Construction options for :class:`~zuora_rest.client.ZuoraClient`.

    ``user`` and ``password`` are the basic-auth credentials bound to the
    transport. The target host is ``url`` when given, otherwise the
    production or sandbox host depending on ``production``.

    Example::

        ClientOptions(user="api@example.com", password="s3cret", production=True)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    user: str = Field(min_length=1, description="API account username")
    password: str = Field(min_length=1, repr=False, description="API account password")
    production: bool = Field(
        default=False, description="Use the production host instead of the sandbox"
    )
    url: Optional[str] = Field(default=None, description="Explicit base URL override")
    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    cache_ttl: float = Field(
        default=DEFAULT_CACHE_TTL, gt=0, description="Cache TTL in seconds"
    )
    logger: Optional[logging.Logger] = Field(
        default=None, exclude=True, description="Parent logger for request diagnostics"
    )

    @property
    def base_url(self) -> str:
        """The host every request is sent to."""
        if self.url:
            return self.url.rstrip("/")
        return PRODUCTION_URL if self.production else SANDBOX_URL


# --- Request Models ---


def _query_value(value: Any) -> Any:
    """Render booleans as ``true``/``false`` and ``None`` as an empty value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return value


class HTTPMethod(str, enum.Enum):
    """HTTP methods the dispatcher issues."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def is_mutation(self) -> bool:
        """Whether a call with this method invalidates the cached entry for its path."""
        return self is not HTTPMethod.GET


class RequestSpec(BaseModel):
    """One dispatched call: method, resource path, query parameters and body.

    ``path`` is the resource path *without* the API prefix (``/accounts/A1``).
    Query parameters are URL-encoded in insertion order; an empty or missing
    mapping adds no query string. Booleans are sent as ``true``/``false`` and
    ``None`` as an empty value, so ``{"flag": True}`` and ``{"flag": "true"}``
    share a cache key.
    """

    method: HTTPMethod
    path: str
    query: Optional[dict[str, Any]] = None
    body: Any = None

    @property
    def query_string(self) -> str:
        if not self.query:
            return ""
        params = {
            name: [_query_value(v) for v in value]
            if isinstance(value, (list, tuple))
            else _query_value(value)
            for name, value in self.query.items()
        }
        return urlencode(params, doseq=True)

    @property
    def full_path(self) -> str:
        """``<API_PREFIX><path>[?<query>]`` -- the request target and cache key."""
        path = API_PREFIX + self.path
        qs = self.query_string
        if not qs:
            return path
        # Continuation locators already carry their own query string.
        separator = "&" if "?" in path else "?"
        return f"{path}{separator}{qs}"
