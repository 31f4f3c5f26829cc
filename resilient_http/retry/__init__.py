"""
Retry Logic
===========
Retry eligibility and cancellable waits used by RetryingClient.
"""

from .exceptions import OperationCancelled
from .policy import (
    RETRYABLE_STATUS_CODES,
    backoff_delay,
    is_retryable_status,
    is_retryable_response,
    wait_backoff,
)
from .cancellation import wait_or_cancel

__all__ = [
    # Exceptions
    "OperationCancelled",
    # Policy
    "RETRYABLE_STATUS_CODES",
    "is_retryable_status",
    "is_retryable_response",
    "backoff_delay",
    "wait_backoff",
    # Waits
    "wait_or_cancel",
]
