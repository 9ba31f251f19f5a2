"""Routing: the pattern table and per-method dispatch.

Patterns are registered at startup and read without locking once the
mux starts serving.
"""

from pathmux.routing.methods import (
    MethodOption,
    methods,
    with_delete,
    with_get,
    with_head,
    with_method,
    with_options,
    with_patch,
    with_post,
    with_put,
)
from pathmux.routing.servemux import Match, ServeMux, strip_prefix

__all__ = [
    "Match",
    "MethodOption",
    "ServeMux",
    "methods",
    "strip_prefix",
    "with_delete",
    "with_get",
    "with_head",
    "with_method",
    "with_options",
    "with_patch",
    "with_post",
    "with_put",
]
