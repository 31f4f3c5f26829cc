"""
Client Configuration
====================
Immutable configuration for the retrying client and the logging transport.
"""

import os

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_INITIAL_BACKOFF = 0.1   # seconds
DEFAULT_MAX_BACKOFF = 5.0       # seconds
DEFAULT_TIMEOUT = 10.0          # seconds, per attempt
DEFAULT_MAX_CAPTURED_BYTES = 5 * 1024 * 1024  # 5 MiB

_TRUTHY = {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Retry and timeout settings for RetryingClient."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    initial_backoff: float = Field(default=DEFAULT_INITIAL_BACKOFF, gt=0)
    max_backoff: float = Field(default=DEFAULT_MAX_BACKOFF, gt=0)
    overall_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @model_validator(mode="after")
    def _check_backoff_range(self) -> "ClientConfig":
        if self.max_backoff < self.initial_backoff:
            raise ValueError("max_backoff must be >= initial_backoff")
        return self

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from HTTP_CLIENT_* environment variables."""
        return cls(
            max_attempts=int(os.environ.get("HTTP_CLIENT_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)),
            initial_backoff=float(os.environ.get("HTTP_CLIENT_INITIAL_BACKOFF", DEFAULT_INITIAL_BACKOFF)),
            max_backoff=float(os.environ.get("HTTP_CLIENT_MAX_BACKOFF", DEFAULT_MAX_BACKOFF)),
            overall_timeout=float(os.environ.get("HTTP_CLIENT_TIMEOUT", DEFAULT_TIMEOUT)),
        )


class LoggingConfig(BaseModel):
    """Body capture settings for LoggingTransport."""

    model_config = ConfigDict(frozen=True)

    capture_bodies: bool = False
    max_captured_bytes: int = Field(default=DEFAULT_MAX_CAPTURED_BYTES, ge=0)

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Build a config from HTTP_CLIENT_* environment variables."""
        capture = os.environ.get("HTTP_CLIENT_CAPTURE_BODIES", "")
        return cls(
            capture_bodies=capture.strip().lower() in _TRUTHY,
            max_captured_bytes=int(
                os.environ.get("HTTP_CLIENT_MAX_CAPTURED_BYTES", DEFAULT_MAX_CAPTURED_BYTES)
            ),
        )
