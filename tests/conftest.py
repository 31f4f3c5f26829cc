import asyncio
import time
from typing import List, Optional, Union

import httpx
import pytest


class TrackingStream(httpx.AsyncByteStream):
    """Response stream that records whether it was closed."""

    def __init__(self, data: bytes = b""):
        self.data = data
        self.closed = False

    async def __aiter__(self):
        yield self.data

    async def aclose(self) -> None:
        self.closed = True


class OneShotStream(httpx.AsyncByteStream):
    """Request stream that yields its bytes only on the first iteration."""

    def __init__(self, data: bytes):
        self.data = data
        self.iterations = 0

    async def __aiter__(self):
        self.iterations += 1
        if self.iterations == 1:
            yield self.data


class FailingStream(httpx.AsyncByteStream):
    """Stream that breaks part-way through."""

    async def __aiter__(self):
        yield b"partial"
        raise OSError("stream broken")


class RecordingTransport(httpx.AsyncBaseTransport):
    """
    Plays back a script of outcomes, one per call.

    Each step is a status code, an ``httpx.Response`` or an exception to
    raise. Once the script runs out every call returns 200.
    """

    def __init__(self, steps: Optional[List[Union[int, httpx.Response, BaseException]]] = None, delay: float = 0.0):
        self.steps = list(steps or [])
        self.delay = delay
        self.calls = 0
        self.bodies: List[bytes] = []
        self.timestamps: List[float] = []
        self.streams: List[TrackingStream] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.timestamps.append(time.monotonic())
        step = self.steps[self.calls] if self.calls < len(self.steps) else 200
        self.calls += 1

        self.bodies.append(b"".join([chunk async for chunk in request.stream]))

        if self.delay:
            await asyncio.sleep(self.delay)

        if isinstance(step, BaseException):
            raise step
        if isinstance(step, httpx.Response):
            return step

        stream = TrackingStream(f"attempt {self.calls}".encode())
        self.streams.append(stream)
        return httpx.Response(step, stream=stream)


@pytest.fixture
def url():
    return "https://api.example.test/v1/items"
