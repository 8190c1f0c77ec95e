# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Bridging between blocking and async execution.

Blocking calls are pushed onto a shared worker thread pool so that the event
loop is never blocked. Coroutines are driven to completion from blocking code
on a fresh event loop; the caller's own loop is never re-entered, so a
coroutine that needs that loop can never wait on a caller that is blocking it.
Work started on behalf of a worker never queues behind that worker.
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import inspect
import threading
from collections.abc import Awaitable, Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, ParamSpec, TypeVar

from datatap.config import get_settings
from datatap.logging import get_logger

T = TypeVar("T")
P = ParamSpec("P")

logger = get_logger("datatap.execution")

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()

# True while running on behalf of a worker of the shared executor.
_on_worker: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "datatap_on_worker", default=False
)


def is_async_callable(obj: Any) -> bool:
    """Determine if an object is an async callable.

    Args:
        obj: The object to check

    Returns:
        True if calling the object returns a coroutine
    """
    if inspect.iscoroutinefunction(obj):
        return True

    if inspect.ismethod(obj):
        return inspect.iscoroutinefunction(obj.__func__)

    if isinstance(obj, functools.partial):
        return is_async_callable(obj.func)

    if callable(obj) and not inspect.isfunction(obj) and not inspect.isclass(obj):
        return inspect.iscoroutinefunction(type(obj).__call__)

    return False


def get_executor() -> ThreadPoolExecutor:
    """Return the shared worker executor, creating it on first use."""
    global _executor
    with _executor_lock:
        if _executor is None:
            settings = get_settings()
            _executor = ThreadPoolExecutor(
                max_workers=settings.executor_max_workers,
                thread_name_prefix=settings.executor_thread_name_prefix,
            )
            logger.debug(
                "Created worker executor",
                extra={"max_workers": settings.executor_max_workers},
            )
        return _executor


def shutdown_executor(wait: bool = True) -> None:
    """Shut down the shared worker executor; a new one is created on next use."""
    global _executor
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait)


def submit(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> Future[T]:
    """
    Run a blocking callable in the background with the caller's context.

    The shared worker executor is used unless the caller is itself running on
    behalf of a worker (directly, or through a coroutine driven from one). In
    that case the worker it would wait for may be the one it occupies, so the
    call gets a dedicated thread instead.
    """
    if _on_worker.get():
        return spawn(func, *args, **kwargs)
    context = contextvars.copy_context()
    return get_executor().submit(context.run, _as_worker, func, *args, **kwargs)


def spawn(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> Future[T]:
    """Run a blocking callable on a new daemon thread with the caller's context."""
    outcome: Future[T] = Future()
    context = contextvars.copy_context()

    def runner() -> None:
        if not outcome.set_running_or_notify_cancel():
            return
        try:
            result = context.run(func, *args, **kwargs)
        except BaseException as exc:  # delivered to whoever waits on the future
            outcome.set_exception(exc)
        else:
            outcome.set_result(result)

    name = f"{get_settings().executor_thread_name_prefix}-bridge"
    threading.Thread(target=runner, name=name, daemon=True).start()
    return outcome


async def run_in_worker(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """
    Await a blocking callable without blocking the running event loop.

    The callable runs through ``submit`` with a copy of the caller's
    ``contextvars`` context. Its return value or exception is delivered
    unchanged.
    """
    return await asyncio.wrap_future(submit(func, *args, **kwargs))


def run_synchronously(
    func: Callable[P, Awaitable[T]], *args: P.args, **kwargs: P.kwargs
) -> T:
    """
    Drive an async callable to completion from blocking code.

    Without a running loop in the calling thread, the coroutine runs on a new
    event loop in that thread. With one (a blocking call made from inside
    async code), it runs on a new event loop in a dedicated thread while the
    caller waits. Either way the result is returned and any exception is
    re-raised as the same instance.

    Neither path needs a free worker: when the caller occupies one, blocking
    work started by the coroutine moves to dedicated threads (see ``submit``).

    Args:
        func: Async callable to invoke
        *args: Positional arguments for ``func``
        **kwargs: Keyword arguments for ``func``

    Returns:
        The value the coroutine returned
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_as_coroutine(func, *args, **kwargs))

    logger.debug(
        "Event loop running in calling thread; driving coroutine on a dedicated thread",
        extra={"target": getattr(func, "__qualname__", repr(func))},
    )
    return spawn(asyncio.run, _as_coroutine(func, *args, **kwargs)).result()


def _as_worker(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    # Runs inside the copied context, so the flag follows anything started here.
    _on_worker.set(True)
    return func(*args, **kwargs)


async def _as_coroutine(
    func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
) -> T:
    return await func(*args, **kwargs)
