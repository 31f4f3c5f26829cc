"""
Cancellable Waits
=================
Run an awaitable that gives up early when a cancel event fires.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from .exceptions import OperationCancelled

T = TypeVar("T")


async def wait_or_cancel(
    aw: Awaitable[T],
    cancel: Optional[asyncio.Event] = None,
    timeout: Optional[float] = None,
) -> T:
    """
    Await ``aw`` unless ``cancel`` is set or ``timeout`` elapses first.

    The abandoned awaitable is cancelled and awaited before returning, so
    nothing it started keeps running afterwards.

    Raises:
        OperationCancelled: ``cancel`` fired first
        asyncio.TimeoutError: ``timeout`` elapsed first
    """
    if cancel is not None and cancel.is_set():
        if asyncio.iscoroutine(aw):
            aw.close()
        raise OperationCancelled("cancelled before start")

    task = asyncio.ensure_future(aw)
    waiters = {task}
    if cancel is not None:
        waiters.add(asyncio.ensure_future(cancel.wait()))

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        abandoned = [w for w in waiters if not w.done()]
        for w in abandoned:
            w.cancel()
        if abandoned:
            await asyncio.gather(*abandoned, return_exceptions=True)

    if task in done:
        return task.result()
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("cancelled while waiting")
    raise asyncio.TimeoutError(f"timed out after {timeout}s")
