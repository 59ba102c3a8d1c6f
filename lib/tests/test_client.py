from __future__ import annotations

import json
from types import MappingProxyType

import httpx
import pytest

from ecomail_client import (
    CatalogError,
    EcomailClient,
    ErrorResult,
    SerializationError,
    SuccessArray,
    SuccessObject,
    SuccessText,
    TransportError,
)
from ecomail_client.catalog import ENDPOINTS


def _recording_client(*, status: int = 200, body: str = "{}", content_type: str = "application/json", **kwargs):
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, content=body.encode("utf-8"), headers={"Content-Type": content_type})

    client = EcomailClient.create("abc", transport=httpx.MockTransport(_handler), **kwargs)
    return client, seen


def test_add_subscriber_request_shape() -> None:
    client, seen = _recording_client(body='{"id": 7}')

    result = client.add_subscriber("LIST1", {"email": "a@b.com"})

    assert result == SuccessArray({"id": 7})
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api2.ecomailapp.cz/lists/LIST1/subscribe"
    assert request.url.query == b""
    assert request.headers["key"] == "abc"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"email": "a@b.com"}


def test_get_requests_carry_no_body() -> None:
    client, seen = _recording_client(body="[]")

    client.list_lists()

    assert seen[0].method == "GET"
    assert seen[0].content == b""
    assert seen[0].url.path == "/lists"


def test_page_applies_only_to_derived_client() -> None:
    client, seen = _recording_client(body="[]")

    client.page(2).get_subscribers("LIST1")
    client.get_subscribers("LIST1")

    assert seen[0].url.params["page"] == "2"
    assert "page" not in seen[1].url.params
    assert "page" not in client.config.default_query


def test_call_site_query_wins_over_defaults() -> None:
    client, seen = _recording_client(body="[]", default_query={"page": 1, "per_page": 50})

    client.get_transactions({"page": 9})

    assert seen[0].url.params["page"] == "9"
    assert seen[0].url.params["per_page"] == "50"


def test_list_campaigns_sends_filters_only_when_given() -> None:
    client, seen = _recording_client(body="[]")

    client.list_campaigns()
    client.list_campaigns(filters="sent")

    assert "filters" not in seen[0].url.params
    assert seen[1].url.params["filters"] == "sent"


def test_optional_body_defaults_to_empty_object() -> None:
    client, seen = _recording_client()

    client.delete_webhook()

    assert seen[0].method == "DELETE"
    assert seen[0].content == b"{}"


def test_search_wraps_query_in_body() -> None:
    client, seen = _recording_client(body="[]")

    client.search("a@b.com")

    assert seen[0].url.path == "/search"
    assert json.loads(seen[0].content) == {"query": "a@b.com"}


def test_path_segments_are_percent_encoded() -> None:
    client, seen = _recording_client()

    client.get_subscriber("LIST 1", "a+b@example.com")
    client.get_subscriber_by_phone("1", "+420 777/1")

    assert seen[0].url.raw_path == b"/lists/LIST%201/subscriber/a+b@example.com"
    assert seen[1].url.raw_path == b"/lists/1/subscriber-by-phone/+420%20777%2F1"


def test_http_error_is_returned_not_raised() -> None:
    client, _ = _recording_client(status=404, body='{"error":"not found"}')

    result = client.show_list("missing")

    assert result == ErrorResult(404, {"error": "not found"})


def test_plain_text_client_returns_raw_body() -> None:
    client, _ = _recording_client(body="plain ok", content_type="text/plain", response_format="plaintext")

    assert client.get_webhook() == SuccessText("plain ok")


def test_with_format_switches_decoding_for_derived_client_only() -> None:
    client, _ = _recording_client(body='{"id": 1}')

    records = client.with_format("jsono").show_list("1")
    mapping = client.show_list("1")

    assert isinstance(records, SuccessObject)
    assert records.data.id == 1
    assert mapping == SuccessArray({"id": 1})


def test_transport_failure_raises_transport_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = EcomailClient.create("abc", transport=httpx.MockTransport(_handler))

    with pytest.raises(TransportError):
        client.list_lists()


def test_timeout_raises_transport_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = EcomailClient.create("abc", transport=httpx.MockTransport(_handler))

    with pytest.raises(TransportError):
        client.list_domains()


def test_serialization_error_happens_before_sending() -> None:
    client, seen = _recording_client()
    body: dict = {}
    body["loop"] = body

    with pytest.raises(SerializationError):
        client.add_list(body)

    assert seen == []


def test_call_rejects_catalog_misuse() -> None:
    client, seen = _recording_client()

    with pytest.raises(CatalogError):
        client.call("no_such_operation")
    with pytest.raises(CatalogError):
        client.call("add_subscriber", body={"email": "a@b.com"})
    with pytest.raises(CatalogError):
        client.call("add_subscriber", list_id="1")
    with pytest.raises(CatalogError):
        client.call("list_lists", body={"x": 1})
    with pytest.raises(CatalogError):
        client.call("list_lists", query={"page": 1})

    assert seen == []


def test_call_accepts_dashed_operation_names() -> None:
    client, seen = _recording_client()

    client.call("send-campaign", campaign_id=12)

    assert seen[0].method == "GET"
    assert seen[0].url.path == "/campaign/12/send"


def test_send_uses_base_url_and_method() -> None:
    client, seen = _recording_client(base_url="https://example.test/")

    client.send("custom/path", "put", {"a": 1}, {"b": "x y"})

    assert seen[0].method == "PUT"
    assert str(seen[0].url) == "https://example.test/custom/path?b=x+y"


def test_every_operation_has_a_client_method() -> None:
    for name in ENDPOINTS:
        assert callable(getattr(EcomailClient, name, None)), name


def test_context_manager_closes_client() -> None:
    client, seen = _recording_client()
    with client as c:
        c.list_lists()
    with pytest.raises(TransportError, match="closed"):
        client.list_lists()
    assert len(seen) == 1


def test_closing_derived_client_keeps_parent_usable() -> None:
    client, seen = _recording_client(body="[]")

    with client.page(2) as paged:
        paged.list_lists()
    result = client.list_lists()

    assert result.ok
    assert [r.url.params.get("page") for r in seen] == ["2", None]
    client.close()


def test_redirect_is_returned_as_error_and_not_followed() -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(302, headers={"Location": "https://elsewhere.example/x"})

    client = EcomailClient.create("abc", transport=httpx.MockTransport(_handler))

    result = client.add_subscriber("L1", {"email": "a@b.com"})

    assert isinstance(result, ErrorResult)
    assert result.http_status == 302
    assert len(seen) == 1
    assert seen[0].url.host == "api2.ecomailapp.cz"
    assert seen[0].method == "POST"


def test_read_only_mapping_bodies_are_encoded() -> None:
    client, seen = _recording_client()
    data = MappingProxyType({"subscriber_data": MappingProxyType({"email": "a@b.com"})})

    result = client.add_subscriber(1, data)

    assert result.ok
    assert json.loads(seen[0].content) == {"subscriber_data": {"email": "a@b.com"}}
