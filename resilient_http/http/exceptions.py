from typing import Optional


class HTTPClientError(Exception):
    """Base exception for failures surfaced by RetryingClient."""
    def __init__(self, message: str, attempts: int = 0, last_exception: Optional[BaseException] = None):
        self.message = message
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(message)

class BodyReadError(HTTPClientError):
    """Raised when the request body could not be buffered. No attempt was made."""
    pass

class RetryExhaustedError(HTTPClientError):
    """Raised when the final attempt failed at the transport level."""
    def __init__(self, attempts: int, last_exception: BaseException):
        super().__init__(
            f"request failed after {attempts} attempts: {last_exception}",
            attempts=attempts,
            last_exception=last_exception,
        )

class RequestCancelledError(HTTPClientError):
    """Raised when the caller's cancel event stopped the retry loop."""
    def __init__(
        self,
        attempts: int,
        last_exception: Optional[BaseException] = None,
        last_status: Optional[int] = None,
    ):
        self.last_status = last_status
        super().__init__(
            f"request cancelled after {attempts} attempts",
            attempts=attempts,
            last_exception=last_exception,
        )
