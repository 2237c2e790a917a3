"""Bounded-concurrency helpers for per-file job processing.

Two patterns are exposed:

1. **throttled_gather** -- ``asyncio.gather`` with a semaphore around every
   awaitable.  Results come back in input order regardless of completion
   order.  When ``return_exceptions`` is ``False`` the first failure cancels
   every task that is still pending and is then re-raised.

2. **retry_async** -- call an async function a bounded number of times with
   linear backoff between attempts.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from codechunk.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute.
    semaphore:
        Semaphore bounding the number of awaitables in flight.
    return_exceptions:
        If ``True``, exceptions are returned in the result list.  If
        ``False``, the first exception cancels the remaining tasks and is
        raised.

    Returns
    -------
    list
        Results in the same order as ``coros``.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [asyncio.ensure_future(_wrapped(c)) for c in coros]
    if return_exceptions:
        return await asyncio.gather(*tasks, return_exceptions=True)

    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Let cancelled tasks unwind before the caller sees the failure.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def retry_async(
    fn: Callable[[], Awaitable[_T]],
    *,
    attempts: int,
    backoff_seconds: float,
    retry_on: tuple[type[BaseException], ...],
    operation: str,
    logger: structlog.BoundLogger | None = None,
) -> _T:
    """Await ``fn()`` up to ``attempts`` times, sleeping ``backoff * attempt``.

    Only exceptions in ``retry_on`` are retried; the last one is re-raised
    once attempts are exhausted.
    """
    if logger is None:
        logger = _logger

    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except retry_on as exc:
            if attempt >= attempts:
                logger.error(
                    "retry_exhausted",
                    operation=operation,
                    attempts=attempts,
                    error=str(exc),
                )
                raise
            backoff = backoff_seconds * attempt
            logger.warning(
                "retrying_operation",
                operation=operation,
                attempt=attempt,
                backoff_s=backoff,
                error=str(exc),
            )
            await asyncio.sleep(backoff)

    raise AssertionError("unreachable")  # pragma: no cover
