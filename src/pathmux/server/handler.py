"""ASGI bridge: translates ASGI scope/messages to pathmux types.

The only component that touches raw ASGI directly. Converts the scope
to a ``Request``, runs the composed handler, and sends the ``Response``
back through ASGI ``send()``.
"""

import logging
from collections.abc import Awaitable, Callable

from pathmux._internal.asgi import Receive, Scope, Send
from pathmux.http.request import Request
from pathmux.http.response import Response, error_response
from pathmux.server.sender import send_response

logger = logging.getLogger("pathmux.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatch: Callable[[Request], Awaitable[Response]],
) -> None:
    """Process a single HTTP request through *dispatch*.

    An exception escaping the handler chain is logged with its traceback
    and answered with a bare 500; it never reaches the server.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await dispatch(request)
    except Exception:
        logger.exception("500 %s %s", request.method, request.path)
        response = error_response("Internal Server Error", 500)

    await send_response(response, send)
