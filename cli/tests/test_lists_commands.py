from __future__ import annotations

import json

import httpx
from typer.testing import CliRunner

from ecomail_cli import main
from ecomail_cli.commands import lists_cmd
from ecomail_client import EcomailClient


def _patch_client(monkeypatch, module, responses: dict[str, tuple[int, str]]):
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        status, body = responses.get(request.url.path, (404, '{"message": "not found"}'))
        return httpx.Response(status, content=body.encode("utf-8"), headers={"Content-Type": "application/json"})

    monkeypatch.setattr(
        module,
        "make_client",
        lambda *args, **kwargs: EcomailClient.create("test-key", transport=httpx.MockTransport(_handler)),
    )
    monkeypatch.setattr(module, "load_config", lambda: object())
    return seen


def test_lists_list_renders_table(monkeypatch) -> None:
    _patch_client(monkeypatch, lists_cmd, {"/lists": (200, '[{"id": 1, "name": "Newsletter", "from_email": "x@y.cz"}]')})
    runner = CliRunner()

    result = runner.invoke(main.app, ["lists", "list"])

    assert result.exit_code == 0
    assert "Newsletter" in result.output


def test_lists_subscribers_passes_page(monkeypatch) -> None:
    seen = _patch_client(
        monkeypatch,
        lists_cmd,
        {"/lists/1/subscribers": (200, '{"total": 1, "data": [{"email": "a@b.com", "status": 1}]}')},
    )
    runner = CliRunner()

    result = runner.invoke(main.app, ["lists", "subscribers", "1", "--page", "2"])

    assert result.exit_code == 0
    assert "a@b.com" in result.output
    assert seen[0].url.params["page"] == "2"
    assert "status" not in seen[0].url.params


def test_lists_subscribe_builds_body(monkeypatch) -> None:
    seen = _patch_client(monkeypatch, lists_cmd, {"/lists/1/subscribe": (200, '{"id": 5}')})
    runner = CliRunner()

    result = runner.invoke(main.app, ["lists", "subscribe", "1", "a@b.com", "--name", "Ann", "--no-autoresponders"])

    assert result.exit_code == 0
    body = json.loads(seen[0].content)
    assert body["subscriber_data"] == {"email": "a@b.com", "name": "Ann"}
    assert body["trigger_autoresponders"] is False
    assert seen[0].headers["key"] == "test-key"


def test_lists_unsubscribe_sends_delete(monkeypatch) -> None:
    seen = _patch_client(monkeypatch, lists_cmd, {"/lists/1/unsubscribe": (200, '{"ok": true}')})
    runner = CliRunner()

    result = runner.invoke(main.app, ["lists", "unsubscribe", "1", "a@b.com"])

    assert result.exit_code == 0
    assert seen[0].method == "DELETE"
    assert json.loads(seen[0].content) == {"email": "a@b.com"}


def test_lists_show_reports_remote_error(monkeypatch) -> None:
    _patch_client(monkeypatch, lists_cmd, {})
    runner = CliRunner()

    result = runner.invoke(main.app, ["lists", "show", "9"])

    assert result.exit_code == 2
    assert "Failed to fetch list 9" in result.output
