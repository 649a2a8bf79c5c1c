"""Logging helpers for request diagnostics.

The client logs through the standard :mod:`logging` package. A caller may
hand in its own parent logger via ``ClientOptions.logger``; otherwise the
module logger ``zuora_rest.client`` is used. Every record carries a
``component`` field (``zuora-rest@<version>``) and, for request records,
``method`` and ``path`` fields, so structured handlers can route on them.

Request bodies are passed through :func:`clean_log_object` before they are
logged so that credentials and payment details never reach a log sink.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from zuora_rest import __version__

COMPONENT = f"zuora-rest@{__version__}"

MASK = "***"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "apisecretaccesskey",
        "accesstoken",
        "authorization",
        "creditcardnumber",
        "cardnumber",
        "securitycode",
        "cvv",
        "bankaccountnumber",
        "iban",
    }
)
"""Lower-cased field names whose values are masked in logged bodies."""


def component_logger(parent: Optional[logging.Logger] = None) -> logging.LoggerAdapter:
    """Return an adapter tagging records with the client component name."""
    base = parent if parent is not None else logging.getLogger("zuora_rest.client")
    return logging.LoggerAdapter(base, {"component": COMPONENT})


def request_logger(
    parent: logging.LoggerAdapter,
    method: str,
    path: str,
) -> logging.LoggerAdapter:
    """Derive a per-request adapter carrying ``method`` and ``path`` context."""
    extra = dict(parent.extra or {})
    extra.update(method=method, path=path)
    return logging.LoggerAdapter(parent.logger, extra)


def clean_log_object(value: Any, *, max_depth: int = 20) -> Any:
    """Return a copy of *value* with sensitive fields masked.

    Dicts and lists are walked recursively; any dict key listed in
    :data:`SENSITIVE_KEYS` (case-insensitive) has its value replaced by
    :data:`MASK`. The input is never modified.

    Args:
        value: A request body (usually a dict decoded from JSON).
        max_depth: Nesting depth past which values are replaced by the mask.

    Example::

        >>> clean_log_object({"name": "Acme", "password": "hunter2"})
        {'name': 'Acme', 'password': '***'}
    """
    if max_depth <= 0:
        return MASK

    if isinstance(value, dict):
        return {
            k: MASK
            if isinstance(k, str) and k.lower() in SENSITIVE_KEYS
            else clean_log_object(v, max_depth=max_depth - 1)
            for k, v in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [clean_log_object(item, max_depth=max_depth - 1) for item in value]

    return value
