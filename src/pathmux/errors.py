"""pathmux exception hierarchy.

Shared across the mux, the method dispatcher, and the error adapter so
every module raises and catches the same types.
"""

from typing import Protocol, runtime_checkable


class MuxError(Exception):
    """Base for all pathmux-specific errors."""


class ConfigurationError(MuxError):
    """Raised when a registration is invalid.

    Always raised at registration time (duplicate method, empty method
    name, missing handler, malformed pattern or group prefix), never
    while serving a request.
    """


@runtime_checkable
class StatusMessage(Protocol):
    """Capability of an exception that knows what to tell the client.

    Any exception type with a ``status_msg()`` method qualifies; it does
    not need to subclass ``HandlerError``.
    """

    def status_msg(self) -> tuple[int, str]: ...


class HandlerError(MuxError):
    """A per-request failure with a client-facing status and message.

    The ``cause`` is for operators: it shows up in ``str(error)`` and
    therefore in logs, but is never written to the response.
    """

    def __init__(self, cause: BaseException | None, status: int, message: str) -> None:
        super().__init__(cause, status, message)
        self.cause = cause
        self.status = status
        self.message = message

    def status_msg(self) -> tuple[int, str]:
        """Return the HTTP status and the message to send to the client."""
        return self.status, self.message

    def __str__(self) -> str:
        return f"status={self.status} msg={self.message!r} err={str(self.cause)!r}"


def error(cause: BaseException | None, status: int, *message: str) -> HandlerError:
    """Build a ``HandlerError``; message parts are joined with a single space.

    Usage::

        raise error(exc, 404, "widget", name, "not found")
    """
    return HandlerError(cause, status, " ".join(message))


def find_status_message(exc: BaseException) -> StatusMessage | None:
    """Find the first exception in *exc*'s chain with ``status_msg()``.

    Walks ``__cause__`` (or ``__context__`` when the chain was not
    suppressed) so a ``HandlerError`` re-raised as another exception's
    cause is still honoured.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, StatusMessage):
            return current
        seen.add(id(current))
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return None
