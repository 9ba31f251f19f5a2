"""pathmux: middleware, prefix groups, and per-method dispatch for ASGI.

A thin layer over a path multiplexer: handlers are registered once at
startup, wrapped in their middleware, and served from a frozen table.

Basic usage::

    from pathmux import (
        ErrorHandler, Mux, RequestLoggingMiddleware, error, methods, with_get, with_post,
    )

    errors = ErrorHandler()
    mux = Mux(RequestLoggingMiddleware())

    @errors.err
    async def show(request):
        raise error(None, 403, "forbidden")

    mux.handle("/widgets", methods(with_get(list_widgets), with_post(create)))
    mux.handle("/secret", show)
    mux.group("/api/", api.serve)

Run with any ASGI server, e.g. ``uvicorn app:mux``.
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ErrorHandler",
    "ErrorHandlerConfig",
    "HandlerError",
    "Handler",
    "Middleware",
    "Mux",
    "MuxConfig",
    "MuxError",
    "Next",
    "Redirect",
    "Request",
    "RequestLoggingMiddleware",
    "Response",
    "ServeMux",
    "StatusMessage",
    "error",
    "error_response",
    "methods",
    "middleware_from_next",
    "not_found",
    "strip_prefix",
    "with_delete",
    "with_get",
    "with_head",
    "with_method",
    "with_options",
    "with_patch",
    "with_post",
    "with_put",
    "wrap",
]

_MODULES = {
    "Mux": "pathmux.mux",
    "MuxConfig": "pathmux.config",
    "ErrorHandlerConfig": "pathmux.config",
    "ErrorHandler": "pathmux.error_handler",
    "Request": "pathmux.http.request",
    "Response": "pathmux.http.response",
    "Redirect": "pathmux.http.response",
    "error_response": "pathmux.http.response",
    "not_found": "pathmux.http.response",
    "MuxError": "pathmux.errors",
    "ConfigurationError": "pathmux.errors",
    "HandlerError": "pathmux.errors",
    "StatusMessage": "pathmux.errors",
    "error": "pathmux.errors",
    "ServeMux": "pathmux.routing.servemux",
    "strip_prefix": "pathmux.routing.servemux",
    "methods": "pathmux.routing.methods",
    "with_method": "pathmux.routing.methods",
    "with_get": "pathmux.routing.methods",
    "with_head": "pathmux.routing.methods",
    "with_post": "pathmux.routing.methods",
    "with_put": "pathmux.routing.methods",
    "with_patch": "pathmux.routing.methods",
    "with_delete": "pathmux.routing.methods",
    "with_options": "pathmux.routing.methods",
    "Handler": "pathmux.middleware.protocol",
    "Middleware": "pathmux.middleware.protocol",
    "Next": "pathmux.middleware.protocol",
    "middleware_from_next": "pathmux.middleware.protocol",
    "wrap": "pathmux.middleware.chain",
    "RequestLoggingMiddleware": "pathmux.middleware.logging",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pathmux`` fast while providing a clean top-level API.
    """
    module_name = _MODULES.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
