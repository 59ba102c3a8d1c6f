from __future__ import annotations

import json
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Union

from .errors import RemoteError


@dataclass(frozen=True)
class SuccessArray:
    """2xx JSON body; objects decoded as ordered dicts."""

    data: list[Any] | dict[str, Any]

    ok = True

    @property
    def value(self) -> Any:
        return self.data

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True)
class SuccessObject:
    """2xx JSON body; objects decoded as attribute records."""

    data: list[Any] | SimpleNamespace

    ok = True

    @property
    def value(self) -> Any:
        return self.data

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True)
class SuccessText:
    text: str

    ok = True

    @property
    def value(self) -> str:
        return self.text

    def unwrap(self) -> str:
        return self.text


@dataclass(frozen=True)
class ErrorResult:
    """Non-2xx response. Returned, not raised."""

    http_status: int
    message: Any

    ok = False

    @property
    def value(self) -> Any:
        return self.message

    def unwrap(self) -> Any:
        raise RemoteError(self.http_status, _summary(self.http_status, self.message), self.message)


ApiResult = Union[SuccessArray, SuccessObject, SuccessText, ErrorResult]


def _summary(status: int, message: Any) -> str:
    if isinstance(message, SimpleNamespace):
        message = vars(message)
    if isinstance(message, dict):
        for key in ("message", "error", "errors"):
            if message.get(key):
                detail = message[key]
                text = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False, default=vars)
                return f"HTTP {status}: {text}"
    if isinstance(message, str) and message.strip():
        return f"HTTP {status}: {message.strip()[:1000]}"
    return f"HTTP {status}"
