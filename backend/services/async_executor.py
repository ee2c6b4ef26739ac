"""
Async executor for blocking SDK calls.

The Firebase Admin and Midtrans SDKs are synchronous (``requests`` / gRPC
under the hood). Their calls run in a thread pool so they do not block the
asyncio event loop while waiting on the upstream service.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_MAX_WORKERS = 8


def get_executor() -> ThreadPoolExecutor:
    """Lazy-initialize thread pool executor."""
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=_MAX_WORKERS, thread_name_prefix="sdk_")
        logger.info(f"Thread pool executor initialized (max_workers={_MAX_WORKERS})")
    return _executor


T = TypeVar("T")


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> T:
    """
    Run a blocking (synchronous) function in the thread pool.

    With ``timeout`` set, raises ``asyncio.TimeoutError`` once it elapses.
    The worker thread itself cannot be interrupted and finishes in the background.
    """
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(
        get_executor(),
        functools.partial(func, *args, **kwargs),
    )
    if timeout is None:
        return await future
    return await asyncio.wait_for(future, timeout=timeout)


def shutdown_executor() -> None:
    """
    Shutdown the thread pool on app lifecycle end.

    Does not wait: a hung SDK call must not block process exit. Queued calls are cancelled.
    """
    global _executor
    if _executor:
        _executor.shutdown(wait=False, cancel_futures=True)
        _executor = None
        logger.info("Thread pool executor shutdown")
