"""
Retry Policy
============
Status-code based retry eligibility and the backoff schedule.
"""

import httpx
from tenacity import RetryCallState
from tenacity.wait import wait_base

RETRYABLE_STATUS_CODES = frozenset({
    408,  # Request Timeout
    429,  # Too Many Requests
})


def is_retryable_status(status_code: int) -> bool:
    """True for 408, 429 and any 5xx."""
    return status_code in RETRYABLE_STATUS_CODES or 500 <= status_code < 600


def is_retryable_response(response: httpx.Response) -> bool:
    return is_retryable_status(response.status_code)


def backoff_delay(attempt: int, initial: float, maximum: float) -> float:
    """
    Delay in seconds after attempt ``attempt`` (1-based) fails.

    ``min(initial * 2 ** (attempt - 1), maximum)``
    """
    try:
        return min(initial * 2 ** (attempt - 1), maximum)
    except OverflowError:
        return maximum


class wait_backoff(wait_base):
    """tenacity wait strategy following backoff_delay."""

    def __init__(self, initial: float, maximum: float):
        self.initial = initial
        self.maximum = maximum

    def __call__(self, retry_state: RetryCallState) -> float:
        return backoff_delay(retry_state.attempt_number, self.initial, self.maximum)
