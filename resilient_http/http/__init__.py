from .client import RetryingClient
from .exceptions import (
    HTTPClientError,
    BodyReadError,
    RetryExhaustedError,
    RequestCancelledError,
)

__all__ = [
    "RetryingClient",
    "HTTPClientError",
    "BodyReadError",
    "RetryExhaustedError",
    "RequestCancelledError",
]
