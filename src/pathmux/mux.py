"""The Mux: pattern registration with middleware composition.

Mutable during setup (registrations). Frozen when it serves its first
request; from then on the pattern table is read without locking.
"""

import threading
from collections.abc import Callable
from typing import Any

from pathmux._internal.asgi import Receive, Scope, Send
from pathmux._internal.invoke import as_async
from pathmux.config import MuxConfig
from pathmux.errors import ConfigurationError
from pathmux.http.request import Request
from pathmux.http.response import Response
from pathmux.middleware.chain import wrap
from pathmux.middleware.protocol import Handler, Middleware
from pathmux.routing.servemux import ServeMux, strip_prefix
from pathmux.server.handler import handle_request


class Mux:
    """An ASGI application routing requests to registered handlers.

    Middleware given to the constructor wraps every handler registered
    afterwards. Per request the order is: mux middleware (left to
    right), call-site middleware (left to right), handler::

        mux = Mux(RequestLoggingMiddleware())
        mux.handle("/health", health)
        mux.handle("/admin", admin, require_token)
        mux.group("/api/", api.serve)

        @mux.route("/")
        def index(request):
            return "hello"

    Thread safety:
        Registration happens during setup, single-threaded. The freeze
        on first request uses a Lock + double-check so exactly one
        thread flips it, even when several workers serve concurrently.
    """

    __slots__ = ("_freeze_lock", "_frozen", "_middleware", "_mux", "config")

    def __init__(self, *middleware: Middleware, config: MuxConfig | None = None) -> None:
        self.config: MuxConfig = config or MuxConfig()
        self._mux = ServeMux(self.config)
        self._middleware: tuple[Middleware, ...] = middleware
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    @property
    def patterns(self) -> tuple[str, ...]:
        """Registered patterns, in registration order."""
        return self._mux.patterns

    # -- Registration --

    def handle(self, pattern: str, handler: Handler, *middleware: Middleware) -> None:
        """Register *handler* under *pattern*, wrapped in *middleware*.

        Call-site middleware runs after the mux-level middleware and
        before the handler.
        """
        self._check_not_frozen()
        if handler is None:
            msg = f"Handler for pattern {pattern!r} must not be None."
            raise ConfigurationError(msg)

        composed = wrap(middleware, as_async(handler))
        composed = wrap(self._middleware, composed)
        self._mux.register(pattern, composed)

    def route(self, pattern: str, *middleware: Middleware) -> Callable[[Handler], Handler]:
        """Decorator form of ``handle``. Returns the function unchanged."""

        def decorator(func: Handler) -> Handler:
            self.handle(pattern, func, *middleware)
            return func

        return decorator

    def group(self, prefix: str, handler: Handler, *middleware: Middleware) -> None:
        """Register *handler* for everything under *prefix*, prefix stripped.

        *prefix* must end with ``/``: ``group("/api/", h)`` serves
        ``/api/widgets`` by calling ``h`` with path ``/widgets``.
        """
        if not prefix.endswith("/"):
            msg = f"Group prefix {prefix!r} must end with '/'."
            raise ConfigurationError(msg)
        if handler is None:
            msg = f"Handler for group {prefix!r} must not be None."
            raise ConfigurationError(msg)
        self.handle(prefix, strip_prefix(prefix.removesuffix("/"), handler), *middleware)

    # -- Dispatch --

    async def serve(self, request: Request) -> Response:
        """Dispatch *request*; lets one mux be registered inside another."""
        self._ensure_frozen()
        return await self._mux.serve(request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point. Non-HTTP scopes are ignored."""
        await handle_request(scope, receive, send, dispatch=self.serve)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._mux.freeze()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register handlers after the mux has started serving "
                "requests. Register everything during startup."
            )
            raise ConfigurationError(msg)
