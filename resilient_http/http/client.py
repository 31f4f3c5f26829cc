import asyncio
from typing import Optional, Dict, Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
)

from ..body import read_stream
from ..config import ClientConfig, LoggingConfig
from ..logging import LoggingTransport
from ..retry import (
    OperationCancelled,
    is_retryable_response,
    is_retryable_status,
    wait_backoff,
    wait_or_cancel,
)
from .exceptions import BodyReadError, RequestCancelledError, RetryExhaustedError


class RetryingClient:
    """
    Resilient async HTTP client.

    Features:
    - Retries on transport errors and on 408, 429 and 5xx responses.
    - Exponential backoff capped at ``max_backoff``, interruptible by a cancel event.
    - Request bodies are buffered once and replayed on every attempt.
    - Every attempt is logged through LoggingTransport.

    Example:
        async with RetryingClient(ClientConfig(max_attempts=3)) as client:
            request = client.build_request("POST", "https://api.example.com/v1/items", json=item)
            response = await client.execute(request)
            try:
                data = await response.aread()
            finally:
                await response.aclose()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        logging_config: Optional[LoggingConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger=None,
        base_url: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        self.config = config or ClientConfig()
        self.logging_config = logging_config or LoggingConfig()
        self._logger = logger or structlog.get_logger(__name__)

        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=self.config.overall_timeout,
            transport=LoggingTransport(
                transport,
                config=self.logging_config,
                logger=self._logger,
            ),
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def build_request(self, method: str, url: str, **kwargs) -> httpx.Request:
        return self.client.build_request(method, url, **kwargs)

    async def execute(
        self,
        request: httpx.Request,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """
        Send ``request``, retrying transient failures.

        The returned response is unread; the caller must close it. A
        retry-eligible status on the final attempt is returned as-is.

        Raises:
            BodyReadError: the request body could not be read
            RetryExhaustedError: the final attempt failed at the transport level
            RequestCancelledError: ``cancel`` fired before the loop finished
        """
        body = await self._buffer_body(request)
        max_attempts = self.config.max_attempts

        attempts = 0
        last_exception: Optional[BaseException] = None
        last_status: Optional[int] = None

        async def backoff(delay: float) -> None:
            await wait_or_cancel(asyncio.sleep(delay), cancel)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_backoff(self.config.initial_backoff, self.config.max_backoff),
            retry=(
                retry_if_exception_type(httpx.RequestError)
                | retry_if_result(is_retryable_response)
            ),
            sleep=backoff,
            before_sleep=self._log_retry,
        )

        try:
            async for attempt in retrying:
                if cancel is not None and cancel.is_set():
                    raise OperationCancelled("cancelled before attempt")
                attempts = attempt.retry_state.attempt_number

                with attempt:
                    request.stream = httpx.ByteStream(body)
                    response = await self._send(request, cancel)

                outcome = attempt.retry_state.outcome
                if outcome.failed:
                    error = outcome.exception()
                    if isinstance(error, OperationCancelled):
                        raise error
                    last_exception, last_status = error, None
                    continue

                last_exception, last_status = None, response.status_code
                if is_retryable_status(response.status_code) and attempts < max_attempts:
                    # Not handed to the caller; release the connection now
                    await response.aclose()
                attempt.retry_state.set_result(response)

        except OperationCancelled as e:
            self._logger.warning(
                "http_request_cancelled",
                method=request.method,
                url=str(request.url),
                attempts=attempts,
            )
            raise RequestCancelledError(
                attempts,
                last_exception=last_exception,
                last_status=last_status,
            ) from e

        except RetryError as e:
            final = e.last_attempt
            if not final.failed:
                return final.result()

            error = final.exception()
            self._logger.error(
                "http_retry_exhausted",
                method=request.method,
                url=str(request.url),
                attempts=attempts,
                error=str(error),
            )
            raise RetryExhaustedError(attempts, error) from error

        return attempt.retry_state.outcome.result()

    async def _buffer_body(self, request: httpx.Request) -> bytes:
        try:
            return await read_stream(request.stream)
        except Exception as e:
            raise BodyReadError(f"failed to read request body: {e}", last_exception=e) from e

    async def _send(
        self,
        request: httpx.Request,
        cancel: Optional[asyncio.Event],
    ) -> httpx.Response:
        timeout = self.config.overall_timeout
        try:
            return await wait_or_cancel(
                self.client.send(request, stream=True),
                cancel,
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise httpx.TimeoutException(
                f"attempt exceeded {timeout}s", request=request
            ) from e

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome.failed:
            self._logger.warning(
                "http_attempt_failed",
                attempt=retry_state.attempt_number,
                max_attempts=self.config.max_attempts,
                error=str(outcome.exception()),
                error_type=type(outcome.exception()).__name__,
            )
        else:
            self._logger.warning(
                "http_retry_status",
                attempt=retry_state.attempt_number,
                max_attempts=self.config.max_attempts,
                status=outcome.result().status_code,
            )
        self._logger.debug(
            "http_retry_wait",
            attempt=retry_state.attempt_number,
            delay=retry_state.next_action.sleep,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        cancel: Optional[asyncio.Event] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Build, execute and fully read a request."""
        response = await self.execute(self.build_request(method, url, **kwargs), cancel=cancel)
        try:
            await response.aread()
        finally:
            await response.aclose()
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
