"""Shared type aliases for handlers and middlewares."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_request_shim.context import RequestContext

# A handler writes its response through the context and returns the error
# it produced, or None on success.
Handler = Callable[["RequestContext"], Awaitable[BaseException | None]]
Middleware = Callable[[Handler], Handler]
IdFactory = Callable[[], str]
