"""Handler and middleware shapes.

A handler is any callable taking a ``Request``::

    async def show(request: Request) -> Response: ...
    def health(request): return "ok"

A middleware is a decorator: it receives the next handler and returns a
new one. No base class required::

    def timing(next: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")
        return handler

The ``next`` handed to a middleware registered through ``Mux`` is always
async and always returns a ``Response``.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from pathmux._internal.invoke import mark_async
from pathmux.http.request import Request
from pathmux.http.response import Response

# Any handler a user may register; sync or async, negotiated return value
Handler: TypeAlias = Callable[[Request], Any]

# A normalized handler, as passed between middleware
Next: TypeAlias = Callable[[Request], Awaitable[Response]]

Middleware: TypeAlias = Callable[[Next], Next]


def middleware_from_next(
    func: Callable[[Request, Next], Awaitable[Response]],
) -> Middleware:
    """Adapt a ``func(request, next)`` callable into a decorator middleware.

    Lets request/next style middleware (functions or callable objects)
    sit in the same chain as decorator middleware::

        async def add_server(request, next):
            return (await next(request)).with_header("Server", "pathmux")

        mux = Mux(middleware_from_next(add_server))
    """

    def middleware(next: Next) -> Next:
        @functools.wraps(next)
        async def handler(request: Request) -> Response:
            return await func(request, next)

        return mark_async(handler)

    return middleware
