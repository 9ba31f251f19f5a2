"""Per-method dispatch for a single path.

``methods()`` builds one handler that picks a sub-handler by the request
method. Every option is validated while the handler is built, so a bad
table fails at startup rather than on the first request::

    mux.handle(
        "/widgets",
        methods(
            with_get(list_widgets),
            with_post(create_widget),
        ),
    )

When no ``OPTIONS`` handler is given one is generated that lists the
registered methods in ``Allow`` and ``Access-Control-Allow-Methods``.
A method with no handler gets a 404, not a 405.
"""

from collections.abc import Callable
from typing import Any, TypeAlias

from pathmux._internal.invoke import as_async, mark_async
from pathmux.errors import ConfigurationError
from pathmux.http.request import Request
from pathmux.http.response import Response, not_found
from pathmux.middleware.protocol import Next

# Applies one (method, handler) pair to the table being built
MethodOption: TypeAlias = Callable[[dict[str, Next]], None]


def methods(*options: MethodOption) -> Next:
    """Return a handler that dispatches on ``request.method``."""
    table: dict[str, Next] = {}
    for option in options:
        option(table)

    if "OPTIONS" not in table:
        table["OPTIONS"] = _allow_handler(", ".join(table))

    async def dispatch(request: Request) -> Response:
        handler = table.get(request.method)
        if handler is None:
            return not_found()
        return await handler(request)

    return mark_async(dispatch)


def _allow_handler(allow: str) -> Next:
    async def options(request: Request) -> Response:
        return Response(
            body="",
            headers=(
                ("Allow", allow),
                ("Access-Control-Allow-Methods", allow),
            ),
        )

    return mark_async(options)


def with_method(method: str, handler: Callable[..., Any]) -> MethodOption:
    """Register *handler* for *method* (case-sensitive, e.g. ``"PURGE"``)."""
    if not method:
        msg = "method must not be empty"
        raise ConfigurationError(msg)
    if handler is None:
        msg = f"handler for method {method!r} must not be None"
        raise ConfigurationError(msg)

    target = as_async(handler)

    def apply(table: dict[str, Next]) -> None:
        if method in table:
            msg = f"method {method!r} already registered"
            raise ConfigurationError(msg)
        table[method] = target

    return apply


def with_get(handler: Callable[..., Any]) -> MethodOption:
    return with_method("GET", handler)


def with_head(handler: Callable[..., Any]) -> MethodOption:
    return with_method("HEAD", handler)


def with_post(handler: Callable[..., Any]) -> MethodOption:
    return with_method("POST", handler)


def with_put(handler: Callable[..., Any]) -> MethodOption:
    return with_method("PUT", handler)


def with_patch(handler: Callable[..., Any]) -> MethodOption:
    return with_method("PATCH", handler)


def with_delete(handler: Callable[..., Any]) -> MethodOption:
    return with_method("DELETE", handler)


def with_options(handler: Callable[..., Any]) -> MethodOption:
    """Register a custom ``OPTIONS`` handler, replacing the generated one."""
    return with_method("OPTIONS", handler)
