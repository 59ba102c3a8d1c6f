from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_BASE_URL = "https://api2.ecomailapp.cz"


class ResponseFormat(str, Enum):
    """How successful responses are decoded."""

    ARRAY = "jsona"
    OBJECT = "jsono"
    TEXT = "plaintext"

    @classmethod
    def parse(cls, value: ResponseFormat | str) -> ResponseFormat:
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown response format: {value!r}")


@dataclass(frozen=True)
class ClientConfig:
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    response_format: ResponseFormat = ResponseFormat.ARRAY
    default_query: Mapping[str, Any] = field(default_factory=dict, hash=False)
    timeout_s: float = 15.0
    user_agent: str = "ecomail-client/0.1.0"

    def __post_init__(self) -> None:
        # Private copy behind a read-only view: derived configs never share a dict.
        object.__setattr__(self, "default_query", MappingProxyType(dict(self.default_query)))
        object.__setattr__(self, "response_format", ResponseFormat.parse(self.response_format))

    def with_query(self, key: str, value: Any) -> ClientConfig:
        params = dict(self.default_query)
        if value is None:
            params.pop(key, None)
        else:
            params[key] = value
        return replace(self, default_query=params)

    def page(self, page: int) -> ClientConfig:
        return self.with_query("page", page)

    def with_format(self, response_format: ResponseFormat | str) -> ClientConfig:
        return replace(self, response_format=ResponseFormat.parse(response_format))
