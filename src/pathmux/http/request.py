"""Immutable HTTP request.

Frozen metadata with async body access. Prefix stripping produces a new
request through ``with_path``; the original is never mutated.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from pathmux._internal.asgi import Receive, Scope


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive request headers.

    A repeated header reads as its first value. Keys are reported
    lower-cased.
    """

    __slots__ = ("_values",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        values: dict[str, str] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is what routing sees. After a prefix strip, ``root_path``
    holds the stripped part so the original path is
    ``root_path + path``.
    """

    method: str
    path: str
    raw_path: bytes
    root_path: str
    query_string: bytes
    headers: Headers
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: body cache, shared with copies made by with_path()
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def query(self) -> dict[str, list[str]]:
        """Parsed query string, field name -> list of values."""
        return parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as seen by this handler."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    def with_path(self, path: str, *, raw_path: bytes | None = None, root_path: str | None = None) -> Request:
        """Return a copy routed at *path*; body access is shared."""
        return replace(
            self,
            path=path,
            raw_path=path.encode("utf-8") if raw_path is None else raw_path,
            root_path=self.root_path if root_path is None else root_path,
        )

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive is consumed once; later calls (including from
        copies made by ``with_path``) return the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self._stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def _stream(self) -> AsyncGenerator[bytes]:
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        path = scope["path"]
        return cls(
            method=scope["method"],
            path=path,
            raw_path=scope.get("raw_path") or path.encode("utf-8"),
            root_path=scope.get("root_path", ""),
            query_string=scope.get("query_string", b""),
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
