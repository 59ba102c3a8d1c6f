"""Request/response pipeline.

Pure functions shared by every endpoint: query merging, URL construction,
body encoding and classification of the HTTP outcome into an ``ApiResult``.
Nothing here touches the network, so each step can be tested on its own.
"""
from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Mapping
from urllib.parse import urlencode

from .config_types import ResponseFormat
from .errors import SerializationError
from .results import ApiResult, ErrorResult, SuccessArray, SuccessObject, SuccessText

JSON_MEDIA_TYPE = "application/json"


def merge_query(defaults: Mapping[str, Any], overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Right-biased union of the client defaults and the call-site query.

    A ``None`` value means "absent": the key is dropped from the result even
    when the defaults define it.
    """
    merged: dict[str, Any] = dict(defaults)
    if overrides:
        merged.update(overrides)
    return {key: _query_value(value) for key, value in merged.items() if value is not None}


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def build_url(base_url: str, path: str, query: Mapping[str, Any] | None = None) -> str:
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if query:
        url += f"?{urlencode(query)}"
    return url


def _mapping_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(body: Any) -> bytes:
    try:
        text = json.dumps(body, ensure_ascii=False, allow_nan=False, default=_mapping_default)
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        # UnicodeEncodeError (lone surrogates) is a ValueError too.
        raise SerializationError(f"request body is not JSON-encodable: {e}") from e


def is_json_content_type(content_type: str | None) -> bool:
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE


def _loads(text: str, response_format: ResponseFormat) -> Any:
    if response_format is ResponseFormat.OBJECT:
        return json.loads(text, object_hook=lambda obj: SimpleNamespace(**obj))
    return json.loads(text)


def decode_success(text: str, response_format: ResponseFormat) -> ApiResult:
    if response_format is ResponseFormat.TEXT:
        return SuccessText(text)
    try:
        data = _loads(text, response_format)
    except ValueError:
        return SuccessText(text)
    if response_format is ResponseFormat.OBJECT and isinstance(data, (list, SimpleNamespace)):
        return SuccessObject(data)
    if isinstance(data, (list, dict)):
        return SuccessArray(data)
    # Scalar JSON documents ("ok", 42, null) are returned as sent.
    return SuccessText(text)


def decode_error_message(text: str, content_type: str | None, response_format: ResponseFormat) -> Any:
    if not is_json_content_type(content_type):
        return text
    # Error bodies are decoded regardless of TEXT; only the object shape follows the format.
    shape = ResponseFormat.OBJECT if response_format is ResponseFormat.OBJECT else ResponseFormat.ARRAY
    try:
        return _loads(text, shape)
    except ValueError:
        return text


def classify(
        status: int,
        content_type: str | None,
        text: str,
        response_format: ResponseFormat = ResponseFormat.ARRAY,
) -> ApiResult:
    if status < 200 or status > 299:
        return ErrorResult(http_status=status, message=decode_error_message(text, content_type, response_format))
    return decode_success(text, response_format)
