"""Request multiplexer: the pattern table the ``Mux`` facade sits on.

Two kinds of pattern:

- ``/static/`` (trailing slash) matches the whole subtree below it.
- ``/health`` (no trailing slash) matches that exact path only.

An exact pattern wins over any subtree; among subtrees the longest one
wins. Patterns are stored in a segment trie so a lookup costs one step
per path segment regardless of how many patterns are registered.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pathmux._internal.invoke import as_async, mark_async
from pathmux.config import MuxConfig
from pathmux.errors import ConfigurationError
from pathmux.http.request import Request
from pathmux.http.response import Response, not_found
from pathmux.middleware.protocol import Next


class _TrieNode:
    """A node in the pattern trie. Mutable until the mux freezes."""

    __slots__ = ("children", "exact", "subtree")

    def __init__(self) -> None:
        # Path segment -> node
        self.children: dict[str, _TrieNode] = {}
        # Pattern ending exactly here, e.g. "/api/health"
        self.exact: Match | None = None
        # Pattern covering everything below here, e.g. "/api/"
        self.subtree: Match | None = None


@dataclass(frozen=True, slots=True)
class Match:
    """A registered pattern and the handler it dispatches to."""

    pattern: str
    handler: Next


def _segments(path: str) -> list[str]:
    # "/a/b/" -> ["a", "b", ""]; the trailing "" marks a subtree pattern
    return path.split("/")[1:]


class ServeMux:
    """Pattern table with exact and subtree matching.

    Usage::

        mux = ServeMux()
        mux.register("/", index)
        mux.register("/static/", files)
        mux.register("/health", health)
        match = mux.match("/static/app.css")   # Match("/static/", files)
    """

    __slots__ = ("_config", "_frozen", "_patterns", "_root")

    def __init__(self, config: MuxConfig | None = None) -> None:
        self._config = config or MuxConfig()
        self._root = _TrieNode()
        self._patterns: list[str] = []
        self._frozen = False

    @property
    def patterns(self) -> tuple[str, ...]:
        """Registered patterns, in registration order."""
        return tuple(self._patterns)

    def register(self, pattern: str, handler: Callable[..., Any]) -> None:
        """Register *handler* under *pattern*.

        Raises ``ConfigurationError`` for an empty or relative pattern, a
        pattern registered twice, a missing handler, or a frozen mux.
        """
        if self._frozen:
            msg = f"Cannot register {pattern!r}: the mux is already serving requests."
            raise ConfigurationError(msg)
        if not pattern or not pattern.startswith("/"):
            msg = f"Invalid pattern {pattern!r}: patterns must start with '/'."
            raise ConfigurationError(msg)
        if handler is None:
            msg = f"Handler for pattern {pattern!r} must not be None."
            raise ConfigurationError(msg)

        segments = _segments(pattern)
        is_subtree = segments[-1] == ""
        if is_subtree:
            segments = segments[:-1]

        node = self._root
        for seg in segments:
            node = node.children.setdefault(seg, _TrieNode())

        existing = node.subtree if is_subtree else node.exact
        if existing is not None:
            msg = f"Pattern {pattern!r} is already registered."
            raise ConfigurationError(msg)

        match = Match(pattern=pattern, handler=as_async(handler))
        if is_subtree:
            node.subtree = match
        else:
            node.exact = match
        self._patterns.append(pattern)

    def freeze(self) -> None:
        """Stop accepting registrations. Lookups need no locking after this."""
        self._frozen = True

    def match(self, path: str) -> Match | None:
        """Return the pattern that serves *path*, or ``None``."""
        return self._lookup(path)[0]

    def _lookup(self, path: str) -> tuple[Match | None, bool]:
        """Find the match for *path* and whether ``path + "/"`` should be
        suggested instead (the path names a subtree but lacks its slash).
        """
        if not path.startswith("/"):
            path = "/" + path
        parts = _segments(path)
        node = self._root
        best: Match | None = None

        for index, part in enumerate(parts):
            if node.subtree is not None:
                best = node.subtree
            child = node.children.get(part)
            if child is None:
                return best, False
            node = child
            if index == len(parts) - 1:
                if node.exact is not None:
                    return node.exact, False
                return best, node.subtree is not None

        return best, False

    async def serve(self, request: Request) -> Response:
        """Dispatch *request* to the handler registered for its path."""
        match, wants_slash = self._lookup(request.path)

        if wants_slash and self._config.redirect_trailing_slash:
            location = request.root_path + request.path + "/"
            if request.query_string:
                location += "?" + request.query_string.decode("latin-1")
            return Response(body="").with_status(301).with_header("Location", location)

        if match is None:
            return not_found()
        return await match.handler(request)


def strip_prefix(prefix: str, handler: Callable[..., Any]) -> Next:
    """Serve requests under *prefix* with the prefix removed from the path.

    ``strip_prefix("/api", h)`` hands ``/api/widgets`` to ``h`` as
    ``/widgets``; the stripped part moves to ``request.root_path``.
    Paths outside the prefix get a 404, as does a request whose
    encoded path does not carry the prefix verbatim.
    """
    target = as_async(handler)
    raw_prefix = prefix.encode("utf-8")

    async def stripped(request: Request) -> Response:
        if not request.path.startswith(prefix):
            return not_found()
        if not request.raw_path.startswith(raw_prefix):
            return not_found()
        path = request.path[len(prefix):]
        raw_path = request.raw_path[len(raw_prefix):]
        forwarded = request.with_path(
            path,
            raw_path=raw_path,
            root_path=request.root_path + prefix,
        )
        return await target(forwarded)

    return mark_async(stripped)
