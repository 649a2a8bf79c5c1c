"""Tests for the zuora-rest command line."""

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from zuora_rest import __version__
from zuora_rest import app as app_module
from zuora_rest.app import app
from zuora_rest.client import ZuoraClient

CREDENTIALS = ["--user", "api@example.com", "--password", "s3cret"]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("USER", "PASSWORD", "PRODUCTION", "URL", "TIMEOUT", "CACHE_TTL"):
        monkeypatch.delenv(f"ZUORA_{name}", raising=False)


@pytest.fixture
def built(monkeypatch: pytest.MonkeyPatch, fake_transport) -> list:
    """Route every CLI-built client through the fake transport."""
    options_seen: list = []

    def create_client(options):
        options_seen.append(options)
        return ZuoraClient(options, transport=fake_transport)

    monkeypatch.setattr(app_module, "create_client", create_client)
    return options_seen


class TestGlobalOptions:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_credentials(self, runner: CliRunner, built) -> None:
        result = runner.invoke(app, ["get", "/accounts/A1"])
        assert result.exit_code == 2
        assert "opts.user must be defined" in result.output
        assert built == []

    def test_environment_credentials(
        self, runner: CliRunner, built, fake_transport, monkeypatch
    ) -> None:
        monkeypatch.setenv("ZUORA_USER", "env-user")
        monkeypatch.setenv("ZUORA_PASSWORD", "env-pass")
        fake_transport.routes["/rest/v1/accounts/A1"] = {"id": "A1"}

        result = runner.invoke(app, ["get", "/accounts/A1"])

        assert result.exit_code == 0
        assert built[0].user == "env-user"

    def test_production_flag(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/a"] = {}
        runner.invoke(app, [*CREDENTIALS, "--production", "get", "/a"])
        assert built[0].base_url == "https://api.zuora.com"

    def test_verbose_reports_target_host(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/a"] = {}
        logger = logging.getLogger("zuora_rest")
        try:
            result = runner.invoke(app, [*CREDENTIALS, "--production", "--verbose", "get", "/a"])
        finally:
            for handler in [h for h in logger.handlers if getattr(h, "_zuora_cli", False)]:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
        assert result.exit_code == 0
        assert "Using https://api.zuora.com" in result.output

    def test_password_source(
        self, runner: CliRunner, built, fake_transport, monkeypatch
    ) -> None:
        monkeypatch.setenv("MY_SECRET", "from-env")
        fake_transport.routes["/rest/v1/a"] = {}
        result = runner.invoke(
            app, ["--user", "u", "--password-source", "env:MY_SECRET", "get", "/a"]
        )
        assert result.exit_code == 0
        assert built[0].password == "from-env"


class TestGet:
    def test_json_output(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/accounts/A1"] = {"id": "A1", "name": "Acme"}

        result = runner.invoke(app, [*CREDENTIALS, "--json", "get", "/accounts/A1"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "A1", "name": "Acme"}

    def test_query_options(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/accounts?pageSize=5&id=1&id=2"] = {"accounts": []}

        result = runner.invoke(
            app,
            [*CREDENTIALS, "get", "/accounts", "-Q", "pageSize=5", "-Q", "id=1", "-Q", "id=2"],
        )

        assert result.exit_code == 0
        assert fake_transport.paths() == ["/rest/v1/accounts?pageSize=5&id=1&id=2"]

    def test_pages_are_merged(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/x"] = {"items": [1], "nextPage": "/rest/v1/x?page=2"}
        fake_transport.routes["/rest/v1/x?page=2"] = {"items": [2]}

        result = runner.invoke(app, [*CREDENTIALS, "--json", "get", "/x"])

        assert json.loads(result.output)["items"] == [1, 2]

    def test_single_page(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/x"] = {"items": [1], "nextPage": "/rest/v1/x?page=2"}

        result = runner.invoke(app, [*CREDENTIALS, "--json", "get", "/x", "--single-page"])

        assert json.loads(result.output)["items"] == [1]
        assert len(fake_transport.calls) == 1

    def test_plain_output(self, runner: CliRunner, built, fake_transport) -> None:
        fake_transport.routes["/rest/v1/a"] = {"id": "A1", "tags": ["x"]}
        result = runner.invoke(app, [*CREDENTIALS, "--plain", "get", "/a"])
        assert result.output.splitlines() == ["id\tA1", 'tags\t["x"]']

    def test_not_found_exit_code(self, runner: CliRunner, built) -> None:
        result = runner.invoke(app, [*CREDENTIALS, "get", "/accounts/nope"])
        assert result.exit_code == 4
        assert "HTTP 404" in result.output

    def test_bad_query(self, runner: CliRunner, built) -> None:
        result = runner.invoke(app, [*CREDENTIALS, "get", "/a", "-Q", "novalue"])
        assert result.exit_code == 2
        assert built == []


class TestMutations:
    def test_put_with_body(self, runner: CliRunner, built, fake_transport) -> None:
        result = runner.invoke(
            app, [*CREDENTIALS, "--json", "put", "/accounts/A1", "--body", '{"notes": "vip"}']
        )
        assert result.exit_code == 0
        assert fake_transport.calls == [("PUT", "/rest/v1/accounts/A1", {"notes": "vip"})]
        assert json.loads(result.output) == {"success": True}

    def test_post_without_body(self, runner: CliRunner, built, fake_transport) -> None:
        result = runner.invoke(app, [*CREDENTIALS, "post", "/accounts/A1/refresh"])
        assert result.exit_code == 0
        assert fake_transport.calls == [("POST", "/rest/v1/accounts/A1/refresh", None)]

    def test_delete(self, runner: CliRunner, built, fake_transport) -> None:
        result = runner.invoke(app, [*CREDENTIALS, "delete", "/subscriptions/S1"])
        assert result.exit_code == 0
        assert fake_transport.paths("DELETE") == ["/rest/v1/subscriptions/S1"]

    def test_invalid_json_body(self, runner: CliRunner, built) -> None:
        result = runner.invoke(app, [*CREDENTIALS, "put", "/a", "--body", "{nope"])
        assert result.exit_code == 2
        assert built == []

    def test_server_error_exit_code(self, runner: CliRunner, built, fake_transport) -> None:
        from zuora_rest.exceptions import ServerError

        fake_transport.routes[("POST", "/rest/v1/a")] = ServerError("HTTP 500: boom", status_code=500)
        result = runner.invoke(app, [*CREDENTIALS, "post", "/a"])
        assert result.exit_code == 5
        assert "boom" in result.output
