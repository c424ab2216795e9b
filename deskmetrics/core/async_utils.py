from __future__ import annotations

import asyncio
from contextvars import ContextVar
from typing import Any, Callable, Coroutine, TypeVar

import anyio
import anyio.from_thread
import anyio.to_thread

from deskmetrics.core.config import settings

T = TypeVar("T")

# Shared by every gather() nested under one top-level call, so a report's
# per-site and per-assignee fan-out stays within QUERY_CONCURRENCY threads.
_query_limiter: ContextVar[anyio.CapacityLimiter | None] = ContextVar(
    "deskmetrics_query_limiter", default=None
)


def run_async(coro: Coroutine[object, object, T], *, timeout: float | None = None) -> T:
    """
    Run an async coroutine from sync code.

    - In AnyIO worker threads, uses anyio.from_thread.run to execute on the owning loop.
    - Falls back to anyio.run when no AnyIO worker thread is available (e.g., CLI/tests).
    - Raises if called from an async context in the same thread (use await instead).
    """

    async def _runner() -> T:
        if timeout is not None:
            with anyio.fail_after(timeout):
                return await coro
        return await coro

    try:
        return anyio.from_thread.run(_runner)
    except RuntimeError:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return anyio.run(_runner)
        raise RuntimeError("run_async called from async context; use await instead")


def query_limiter() -> anyio.CapacityLimiter:
    limiter = _query_limiter.get()
    if limiter is None:
        limiter = anyio.CapacityLimiter(max(1, settings.QUERY_CONCURRENCY))
        _query_limiter.set(limiter)
    return limiter


def _first_error(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


async def gather(*calls: Callable[[], Any]) -> list[Any]:
    """
    Run blocking store calls concurrently on worker threads.

    Results come back in call order. The first failure cancels the calls still
    waiting for a thread and is re-raised as-is, so callers see one error for
    the whole batch rather than an exception group.

    On cancellation (a sibling failure or a ``run_async`` timeout) the caller
    returns at once. Queries already running on a thread finish in the
    background and their results are discarded; the database driver offers no
    way to interrupt them.
    """
    if not calls:
        return []

    results: list[Any] = [None] * len(calls)
    limiter = query_limiter()

    async def _run(index: int, call: Callable[[], Any]) -> None:
        results[index] = await anyio.to_thread.run_sync(
            call, limiter=limiter, abandon_on_cancel=True
        )

    try:
        async with anyio.create_task_group() as tg:
            for index, call in enumerate(calls):
                tg.start_soon(_run, index, call)
    except BaseExceptionGroup as group:
        raise _first_error(group)
    return results


async def gather_async(*coros: Coroutine[object, object, Any]) -> list[Any]:
    """Await coroutines concurrently, same ordering and failure rules as gather()."""
    if not coros:
        return []

    results: list[Any] = [None] * len(coros)
    query_limiter()

    async def _run(index: int, coro: Coroutine[object, object, Any]) -> None:
        results[index] = await coro

    try:
        async with anyio.create_task_group() as tg:
            for index, coro in enumerate(coros):
                tg.start_soon(_run, index, coro)
    except BaseExceptionGroup as group:
        raise _first_error(group)
    return results
