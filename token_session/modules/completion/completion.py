"""
Dual-mode completion.

An operation decorated with ``dual_mode`` runs as a single asyncio Task.
Callers may await the task, pass ``callback=`` to receive
``callback(error, result)``, or both. Both channels observe the same
outcome and the callback fires exactly once.
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Any], Any]

# Strong references to callback-only tasks; the event loop only keeps weak ones
_pending: Set[asyncio.Future] = set()


def attach_callback(future: asyncio.Future, callback: Callback) -> asyncio.Future:
    """
    Forward the settled outcome of a future to an error-first callback.

    Args:
        future: Task or future to observe
        callback: Called once with (error, None) or (None, result).
            A coroutine returned by the callback is scheduled on the loop.

    Returns:
        The same future, for chaining
    """
    if not callable(callback):
        raise TypeError("callback must be callable")

    def _settled(fut: asyncio.Future) -> None:
        _pending.discard(fut)
        if fut.cancelled():
            error, result = asyncio.CancelledError(), None
        elif fut.exception() is not None:
            error, result = fut.exception(), None
        else:
            error, result = None, fut.result()

        try:
            outcome = callback(error, result)
            if asyncio.iscoroutine(outcome):
                fut.get_loop().create_task(outcome)
        except Exception:
            logger.exception("Session completion callback raised")

    _pending.add(future)
    future.add_done_callback(_settled)
    return future


def dual_mode(func: Callable[..., Awaitable[Any]]) -> Callable[..., asyncio.Task]:
    """
    Decorate a coroutine function so calling it schedules a Task.

    The wrapped function accepts an extra keyword-only ``callback`` argument.
    Must be called from inside a running event loop.
    """

    @functools.wraps(func)
    def wrapper(*args, callback: Optional[Callback] = None, **kwargs) -> asyncio.Task:
        if callback is not None and not callable(callback):
            raise TypeError("callback must be callable")
        coro = func(*args, **kwargs)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise
        task = loop.create_task(coro)
        if callback is not None:
            attach_callback(task, callback)
        return task

    return wrapper
