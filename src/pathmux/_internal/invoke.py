"""Invoke helpers: call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``. Any code that calls a
user-provided handler goes through ``invoke`` so the sync/async check
lives in exactly one place. Plain functions run on a worker thread so a
blocking handler never stalls the event loop.

Usage::

    from pathmux._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

import anyio.to_thread

from pathmux.server.negotiation import negotiate


async def invoke(handler: Any, *args: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        # sync: runs on a worker thread
        def health(request):
            return "ok"

        # async: awaited on the event loop
        async def users(request):
            return await load_users()
    """
    if inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    ):
        result = handler(*args)
    else:
        result = await anyio.to_thread.run_sync(handler, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def as_async(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap *handler* so it is awaitable and always returns a ``Response``.

    Middleware can then rely on ``await next(request)`` producing a
    ``Response`` regardless of how the terminal handler was written.
    """
    if getattr(handler, "__pathmux_async__", False):
        return handler

    @functools.wraps(handler)
    async def call(request: Any) -> Any:
        return negotiate(await invoke(handler, request))

    call.__pathmux_async__ = True  # type: ignore[attr-defined]
    return call


def mark_async(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Flag a package-built handler as already async and negotiated."""
    handler.__pathmux_async__ = True  # type: ignore[attr-defined]
    return handler
