"""Mux and error-handler configuration.

Frozen dataclasses: immutable after creation, no string-key dict
lookups. Defaults that depend on other modules are resolved by the
component that owns the config, at construction time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeAlias
from dataclasses import dataclass

from pathmux.http.response import Response

# respond(message, status) -> Response
RespondFunc: TypeAlias = Callable[[str, int], Response]


@dataclass(frozen=True, slots=True)
class MuxConfig:
    """Mux behaviour switches.

    ``redirect_trailing_slash``: answer ``/tree`` with a 301 to ``/tree/``
    when only the subtree pattern ``/tree/`` is registered.
    """

    redirect_trailing_slash: bool = True


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True, slots=True)
class ErrorHandlerConfig:
    """Configuration for ``ErrorHandler``.

    ``logger`` receives the full text of every error a wrapped handler
    raises; ``None`` disables logging. Left unset, it resolves to the
    ``pathmux.errors`` logger. ``respond`` builds the client response
    from ``(message, status)``; unset resolves to ``error_response``::

        ErrorHandlerConfig(logger=None)                     # silent
        ErrorHandlerConfig(respond=json_error)              # custom body
    """

    logger: logging.Logger | None | _Unset = UNSET
    respond: RespondFunc | None = None
