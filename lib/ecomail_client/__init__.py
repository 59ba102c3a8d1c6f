from .client import EcomailClient
from .config_types import DEFAULT_BASE_URL, ClientConfig, ResponseFormat
from .errors import CatalogError, EcomailClientError, RemoteError, SerializationError, TransportError
from .results import ApiResult, ErrorResult, SuccessArray, SuccessObject, SuccessText

__all__ = [
    "EcomailClient",
    "ClientConfig",
    "ResponseFormat",
    "DEFAULT_BASE_URL",
    "ApiResult",
    "SuccessArray",
    "SuccessObject",
    "SuccessText",
    "ErrorResult",
    "EcomailClientError",
    "TransportError",
    "SerializationError",
    "CatalogError",
    "RemoteError",
]
