from __future__ import annotations

from typing import Any


class EcomailClientError(Exception):
    """Base client error."""


class TransportError(EcomailClientError):
    """Transport/network layer error (DNS, refused connection, timeout)."""


class SerializationError(EcomailClientError):
    """Request body could not be encoded to JSON."""


class CatalogError(EcomailClientError, ValueError):
    """Operation called with arguments its catalog entry does not allow."""


class RemoteError(EcomailClientError):
    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
