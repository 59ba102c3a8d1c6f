from __future__ import annotations

import httpx

from .config_types import ClientConfig
from .errors import TransportError


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {
            "User-Agent": cfg.user_agent,
            "key": cfg.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        # 3xx is classified like any other non-2xx status; redirects are never followed.
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers=headers,
            follow_redirects=False,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, url: str, *, content: bytes | None = None) -> httpx.Response:
        if self._client.is_closed:
            raise TransportError(f"{method} {url} failed: client has been closed")
        try:
            return self._client.request(method, url, content=content)
        except httpx.RequestError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
