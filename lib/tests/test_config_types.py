from __future__ import annotations

import pytest

from ecomail_client import ClientConfig, ResponseFormat


def test_with_query_sets_value_and_leaves_original_untouched() -> None:
    cfg = ClientConfig(api_key="abc", default_query={"limit": 10})

    derived = cfg.with_query("page", 3)

    assert derived.default_query["page"] == 3
    assert derived.default_query["limit"] == 10
    assert dict(cfg.default_query) == {"limit": 10}


def test_with_query_none_removes_key() -> None:
    cfg = ClientConfig(api_key="abc", default_query={"page": 1, "limit": 10})

    assert "page" not in cfg.with_query("page", None).default_query
    assert "missing" not in cfg.with_query("missing", None).default_query


def test_with_query_overwrites_existing_key() -> None:
    cfg = ClientConfig(api_key="abc").with_query("page", 1).with_query("page", 2)
    assert cfg.default_query["page"] == 2


def test_page_is_with_query_page() -> None:
    cfg = ClientConfig(api_key="abc")
    assert cfg.page(4) == cfg.with_query("page", 4)


def test_default_query_is_a_private_copy() -> None:
    source = {"page": 1}
    cfg = ClientConfig(api_key="abc", default_query=source)
    source["page"] = 99

    assert cfg.default_query["page"] == 1
    with pytest.raises(TypeError):
        cfg.default_query["page"] = 5  # type: ignore[index]


def test_sibling_configs_do_not_share_state() -> None:
    base = ClientConfig(api_key="abc")
    first = base.with_query("page", 1)
    second = base.with_query("filters", "sent")

    assert dict(first.default_query) == {"page": 1}
    assert dict(second.default_query) == {"filters": "sent"}
    assert dict(base.default_query) == {}


def test_defaults() -> None:
    cfg = ClientConfig(api_key="abc")
    assert cfg.base_url == "https://api2.ecomailapp.cz"
    assert cfg.response_format is ResponseFormat.ARRAY
    assert "abc" not in repr(cfg)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("jsona", ResponseFormat.ARRAY),
        ("JSONO", ResponseFormat.OBJECT),
        ("plaintext", ResponseFormat.TEXT),
        ("text", ResponseFormat.TEXT),
        (ResponseFormat.OBJECT, ResponseFormat.OBJECT),
    ],
)
def test_response_format_parse(raw, expected) -> None:
    assert ResponseFormat.parse(raw) is expected


def test_response_format_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        ResponseFormat.parse("xml")


def test_with_format_accepts_string() -> None:
    cfg = ClientConfig(api_key="abc").with_format("jsono")
    assert cfg.response_format is ResponseFormat.OBJECT
