"""
Resilient HTTP
==============
Retrying, body-preserving, structurally logged async HTTP client on httpx.
"""

__version__ = "0.1.0"

# Configuration
from resilient_http.config import ClientConfig, LoggingConfig

# Client
from resilient_http.http import (
    RetryingClient,
    HTTPClientError,
    BodyReadError,
    RetryExhaustedError,
    RequestCancelledError,
)

# Logging
from resilient_http.logging import LoggingTransport, configure_logging, get_logger

# Retry
from resilient_http.retry import (
    RETRYABLE_STATUS_CODES,
    backoff_delay,
    is_retryable_status,
    wait_or_cancel,
    OperationCancelled,
)

__all__ = [
    # Configuration
    "ClientConfig",
    "LoggingConfig",
    # Client
    "RetryingClient",
    "HTTPClientError",
    "BodyReadError",
    "RetryExhaustedError",
    "RequestCancelledError",
    # Logging
    "LoggingTransport",
    "configure_logging",
    "get_logger",
    # Retry
    "RETRYABLE_STATUS_CODES",
    "backoff_delay",
    "is_retryable_status",
    "wait_or_cancel",
    "OperationCancelled",
]
