"""Typer application and CLI entry point for zuora-rest.

The command line is a thin shell over :class:`~zuora_rest.client.ZuoraClient`:
each sub-command issues one call and prints the decoded response::

    zuora-rest get /accounts/A0001
    zuora-rest get /subscriptions/accounts/A0001 -Q pageSize=20
    zuora-rest put /accounts/A0001 --body '{"notes": "vip"}'
    zuora-rest delete /subscriptions/S0001

Credentials come from ``--user`` / ``--password`` (or ``--password-source``)
and fall back to the ``ZUORA_*`` environment variables read by
:func:`~zuora_rest.config.options_from_env`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Library errors exit with the error's ``exit_code``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import signal
import sys
from typing import Any, Awaitable, Callable, Optional

import typer

from zuora_rest import __version__
from zuora_rest.client import ZuoraClient
from zuora_rest.exceptions import ZuoraError
from zuora_rest.exit_codes import EXIT_GENERIC_FAILURE
from zuora_rest.models import ClientOptions
from zuora_rest.output import (
    OutputFormat,
    OutputManager,
    debug,
    error,
    format_response,
    set_output,
)

app = typer.Typer(
    name="zuora-rest",
    help="Call the Zuora REST API with caching and automatic pagination.",
    no_args_is_help=True,
    add_completion=False,
)


def create_client(options: ClientOptions) -> ZuoraClient:
    """Build the client used by every command."""
    return ZuoraClient(options)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"zuora-rest {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="API username."),
    password: Optional[str] = typer.Option(None, "--password", help="API password."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", help="Read the password from 'env:VAR' or 'file:PATH'.",
    ),
    production: Optional[bool] = typer.Option(
        None, "--production/--sandbox", help="Target the production or sandbox host.",
    ),
    url: Optional[str] = typer.Option(None, "--url", help="Explicit base URL override."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds."),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Configure output and stash connection options for the sub-command."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        _enable_debug_logging()

    ctx.ensure_object(dict)
    ctx.obj["connection"] = {
        "user": user,
        "password": password,
        "password_source": password_source,
        "production": production,
        "url": url,
        "timeout": timeout,
    }


@app.command("get")
def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Resource path, e.g. /accounts/A0001."),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-Q", help="Query parameter as key=value (repeatable).",
    ),
    single_page: bool = typer.Option(
        False, "--single-page", help="Do not follow nextPage links.",
    ),
) -> None:
    """GET a resource, following and merging nextPage links."""
    params = _parse_query(query)

    async def call(client: ZuoraClient) -> Any:
        if single_page:
            return await client.get_page(path, params)
        return await client.get(path, params)

    _run(ctx, call)


@app.command("put")
def put_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Resource path."),
    body: Optional[str] = typer.Option(None, "--body", "-b", help="JSON request body."),
    query: Optional[list[str]] = typer.Option(None, "--query", "-Q", help="key=value (repeatable)."),
) -> None:
    """PUT a JSON body to a resource."""
    payload, params = _parse_body(body), _parse_query(query)
    _run(ctx, lambda client: client.put(path, payload, params))


@app.command("post")
def post_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Resource path."),
    body: Optional[str] = typer.Option(None, "--body", "-b", help="JSON request body."),
    query: Optional[list[str]] = typer.Option(None, "--query", "-Q", help="key=value (repeatable)."),
) -> None:
    """POST a JSON body to a resource."""
    payload, params = _parse_body(body), _parse_query(query)
    _run(ctx, lambda client: client.post(path, payload, params))


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Resource path."),
    query: Optional[list[str]] = typer.Option(None, "--query", "-Q", help="key=value (repeatable)."),
) -> None:
    """DELETE a resource."""
    params = _parse_query(query)
    _run(ctx, lambda client: client.delete(path, params))


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _run(ctx: typer.Context, call: Callable[[ZuoraClient], Awaitable[Any]]) -> None:
    """Build a client from the stashed options, run *call*, print the result.

    Library errors are reported on stderr and turned into the matching exit
    code.
    """
    from zuora_rest.config import options_from_env, resolve_credential

    connection = dict(ctx.obj["connection"])
    source = connection.pop("password_source")

    async def _execute() -> Any:
        async with create_client(options) as client:
            return await call(client)

    try:
        if source and not connection["password"]:
            connection["password"] = resolve_credential(source)
        options = options_from_env(**connection)
        debug(f"Using {options.base_url}")
        result = asyncio.run(_execute())
    except ZuoraError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    format_response(result)


def _parse_query(items: Optional[list[str]]) -> Optional[dict[str, Any]]:
    """Turn ``["a=1", "b=2", "b=3"]`` into ``{"a": "1", "b": ["2", "3"]}``."""
    if not items:
        return None
    params: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--query")
        if key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def _parse_body(body: Optional[str]) -> Any:
    if body is None:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Body is not valid JSON: {exc}", param_hint="--body")


def _enable_debug_logging() -> None:
    """Send the client's DEBUG records to stderr."""
    logger = logging.getLogger("zuora_rest")
    if not any(getattr(h, "_zuora_cli", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "[%(levelname)s] %(method)s %(path)s: %(message)s",
                defaults={"method": "-", "path": "-"},
            )
        )
        handler._zuora_cli = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``zuora-rest`` console script.

    Unexpected exceptions are reported on stderr and exit with
    :data:`~zuora_rest.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
