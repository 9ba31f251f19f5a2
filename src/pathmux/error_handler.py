"""Adapter for handlers that fail by raising.

The client sees only the status and message the handler chose; the
full error, cause included, goes to the log::

    errors = ErrorHandler()

    @errors.err
    async def show_widget(request):
        try:
            widget = await store.get(request.path)
        except KeyError as exc:
            raise error(exc, 404, "widget not found") from exc
        return widget.to_dict()

Exceptions without ``status_msg()`` become a generic 500.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any

from pathmux._internal.invoke import as_async, mark_async
from pathmux.config import UNSET, ErrorHandlerConfig, RespondFunc, _Unset
from pathmux.errors import find_status_message
from pathmux.http.request import Request
from pathmux.http.response import Response, error_response
from pathmux.middleware.protocol import Next

errors_logger = logging.getLogger("pathmux.errors")


class ErrorHandler:
    """Turns exceptions raised by wrapped handlers into responses.

    Defaults are resolved here, once: the ``pathmux.errors`` logger and
    ``error_response``. Keyword arguments override the config::

        ErrorHandler(logger=None)                 # don't log
        ErrorHandler(respond=problem_json)
    """

    __slots__ = ("logger", "respond")

    def __init__(
        self,
        config: ErrorHandlerConfig | None = None,
        *,
        logger: logging.Logger | None | _Unset = UNSET,
        respond: RespondFunc | None = None,
    ) -> None:
        config = config or ErrorHandlerConfig()
        if isinstance(logger, _Unset):
            logger = config.logger
        self.logger: logging.Logger | None = errors_logger if isinstance(logger, _Unset) else logger
        self.respond: RespondFunc = respond or config.respond or error_response

    def err(self, handler: Callable[..., Any]) -> Next:
        """Wrap *handler*; usable as a decorator."""
        target = as_async(handler)

        @functools.wraps(handler)
        async def adapted(request: Request) -> Response:
            try:
                return await target(request)
            except Exception as exc:
                return self._handle(request, exc)

        return mark_async(adapted)

    def _handle(self, request: Request, exc: Exception) -> Response:
        capable = find_status_message(exc)
        if capable is not None:
            status, message = capable.status_msg()
        else:
            status, message = 500, "Internal Server Error"

        response = self.respond(message, status)

        if self.logger is not None:
            self.logger.error("%s %s: %s", request.method, request.path, exc)

        return response
