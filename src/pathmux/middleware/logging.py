"""Built-in middleware: request logging.

One line per request on the ``pathmux.access`` logger. Configure it the
usual way::

    logging.getLogger("pathmux.access").setLevel(logging.INFO)
"""

import logging
import time

from pathmux._internal.invoke import mark_async
from pathmux.http.request import Request
from pathmux.http.response import Response
from pathmux.middleware.protocol import Next

access_logger = logging.getLogger("pathmux.access")


class RequestLoggingMiddleware:
    """Log method, full path, status and duration of each request.

    Responses with status >= 500 are logged at WARNING, the rest at
    INFO. Exceptions are left to propagate; the ASGI bridge logs them.
    """

    __slots__ = ("logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or access_logger

    def __call__(self, next: Next) -> Next:
        log = self.logger

        async def handler(request: Request) -> Response:
            start = time.perf_counter()
            response = await next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            level = logging.WARNING if response.status >= 500 else logging.INFO
            log.log(
                level,
                "%s %s %d %.2fms",
                request.method,
                request.root_path + request.path,
                response.status,
                elapsed_ms,
            )
            return response

        return mark_async(handler)
