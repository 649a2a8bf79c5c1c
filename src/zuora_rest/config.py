"""Client option loading, environment fallbacks and credential resolution.

This module turns the loose inputs a caller hands to
:class:`~zuora_rest.client.ZuoraClient` into a validated
:class:`~zuora_rest.models.ClientOptions`:

* :func:`load_options` -- accepts a ``ClientOptions`` instance or a mapping
  and validates it, raising :class:`~zuora_rest.exceptions.ConfigError`
  synchronously when credentials are missing or the input is not a mapping.
* :func:`options_from_env` -- builds options from ``ZUORA_*`` environment
  variables with explicit overrides taking precedence.
* :func:`resolve_credential` -- reads a secret from an ``env:`` or ``file:``
  source descriptor (used by the CLI's ``--password-source``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from zuora_rest.exceptions import ConfigError
from zuora_rest.models import ClientOptions

ENV_PREFIX = "ZUORA_"
_ENV_FIELDS = ("user", "password", "production", "url", "timeout", "cache_ttl")
_TRUTHY = {"1", "true", "yes", "on"}


def load_options(opts: Any) -> ClientOptions:
    """Validate client construction options.

    Args:
        opts: A :class:`~zuora_rest.models.ClientOptions` instance or a
            mapping of option names to values.

    Returns:
        The validated options.

    Raises:
        ConfigError: If *opts* is not a mapping, ``user`` or ``password``
            is missing or empty, or any option fails validation.
    """
    if isinstance(opts, ClientOptions):
        return opts
    if not isinstance(opts, Mapping):
        raise ConfigError("opts must be a mapping of client options")

    for required in ("user", "password"):
        if not opts.get(required):
            raise ConfigError(f"opts.{required} must be defined")

    try:
        return ClientOptions.model_validate(dict(opts))
    except ValidationError as exc:
        raise ConfigError(f"Invalid client options: {exc}") from exc


def options_from_env(
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ClientOptions:
    """Build options from ``ZUORA_*`` environment variables.

    Precedence (high to low):
        1. Keyword *overrides* whose value is not ``None``
        2. ``ZUORA_USER``, ``ZUORA_PASSWORD``, ``ZUORA_PRODUCTION``,
           ``ZUORA_URL``, ``ZUORA_TIMEOUT``, ``ZUORA_CACHE_TTL``
        3. Model defaults

    Args:
        environ: Environment mapping; defaults to :data:`os.environ`.
        **overrides: Explicit option values (e.g. from CLI flags).

    Returns:
        The validated options.

    Raises:
        ConfigError: If credentials are missing after merging or a value
            cannot be parsed.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    for name in _ENV_FIELDS:
        value = env.get(ENV_PREFIX + name.upper())
        if value:
            data[name] = value
    if "production" in data:
        data["production"] = str(data["production"]).strip().lower() in _TRUTHY

    data.update({k: v for k, v in overrides.items() if v is not None})
    return load_options(data)


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigError(f"Unknown credential source format: {source}")
