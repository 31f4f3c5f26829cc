"""
Body Buffering
==============
Helpers for single-use request/response streams.

A stream handed to any of these helpers is consumed; callers must attach
``httpx.ByteStream(data)`` in its place so the next reader sees the full
content. Headers are not trusted to announce a body: a stream passed as
``stream=`` may carry bytes without ``Content-Length`` or
``Transfer-Encoding``, so every stream is drained.
"""

import httpx


async def read_stream(stream: httpx.AsyncByteStream) -> bytes:
    """Drain a stream into memory, closing it afterwards."""
    try:
        return b"".join([chunk async for chunk in stream])
    finally:
        await stream.aclose()


def truncate_for_log(data: bytes, limit: int) -> str:
    """Decode at most ``limit`` bytes of ``data`` for a log field."""
    if len(data) > limit:
        data = data[:limit]
    return data.decode("utf-8", errors="replace")
