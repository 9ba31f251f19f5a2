"""Middleware composition.

Chains are built once, at registration time; serving a request walks a
pre-built graph of closures with no chain resolution.
"""

from collections.abc import Iterable

from pathmux.middleware.protocol import Middleware, Next


def wrap(middleware: Iterable[Middleware], handler: Next) -> Next:
    """Wrap *handler* so the first middleware runs first.

    ``wrap([a, b, c], h)`` calls ``a``, then ``b``, then ``c``, then
    ``h`` on each request, unwinding in reverse. An empty sequence
    returns *handler* itself.
    """
    for mw in reversed(tuple(middleware)):
        handler = mw(handler)
    return handler
