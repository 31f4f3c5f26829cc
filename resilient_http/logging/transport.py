"""
Logging Transport
=================
httpx transport wrapper that emits one structured event per exchange.

With body capture enabled, request and response bodies are read once,
logged (truncated to ``max_captured_bytes``) and replaced with a fresh
in-memory stream holding the complete original bytes.
"""

import time
from typing import Optional

import httpx
import structlog

from ..body import read_stream, truncate_for_log
from ..config import LoggingConfig


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingTransport(httpx.AsyncBaseTransport):
    """
    Wraps another async transport and logs every round trip.

    Example:
        transport = LoggingTransport(
            httpx.AsyncHTTPTransport(),
            config=LoggingConfig(capture_bodies=True),
        )
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://example.com")
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        *,
        config: Optional[LoggingConfig] = None,
        logger=None,
    ):
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.config = config or LoggingConfig()
        self._logger = logger or structlog.get_logger(__name__)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self.config.capture_bodies:
            await self._capture_request_body(request)

        start = time.perf_counter()
        try:
            response = await self._transport.handle_async_request(request)
        except Exception as e:
            self._logger.error(
                "http_request_failed",
                method=request.method,
                url=str(request.url),
                duration_ms=_elapsed_ms(start),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        duration_ms = _elapsed_ms(start)

        if self.config.capture_bodies:
            await self._capture_response_body(response)

        self._logger.info(
            "http_request_completed",
            method=request.method,
            url=str(request.url),
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response

    async def _capture_request_body(self, request: httpx.Request) -> None:
        try:
            data = await read_stream(request.stream)
        except Exception as e:
            self._logger.warning("http_request_body_read_failed", error=str(e))
            request.stream = httpx.ByteStream(b"")
            return

        request.stream = httpx.ByteStream(data)
        if not data:
            return
        self._logger.debug(
            "http_request_body",
            body=truncate_for_log(data, self.config.max_captured_bytes),
        )

    async def _capture_response_body(self, response: httpx.Response) -> None:
        try:
            data = await read_stream(response.stream)
        except Exception as e:
            self._logger.warning("http_response_body_read_failed", error=str(e))
            response.stream = httpx.ByteStream(b"")
            return

        response.stream = httpx.ByteStream(data)
        self._logger.debug(
            "http_response_body",
            body=truncate_for_log(data, self.config.max_captured_bytes),
        )

    async def aclose(self) -> None:
        await self._transport.aclose()
