"""Middleware: decorators over handlers, no inheritance required.

A middleware is any callable matching:
    def mw(next: Next) -> Next

Built-in middleware:
    RequestLoggingMiddleware -- one access-log line per request
"""

from pathmux.middleware.chain import wrap
from pathmux.middleware.logging import RequestLoggingMiddleware
from pathmux.middleware.protocol import Handler, Middleware, Next, middleware_from_next

__all__ = [
    "Handler",
    "Middleware",
    "Next",
    "RequestLoggingMiddleware",
    "middleware_from_next",
    "wrap",
]
