"""RequestContext — per-request state threaded through the handler chain."""

from __future__ import annotations

import secrets
from collections.abc import AsyncIterator
from typing import Any

from starlette.datastructures import URL
from starlette.requests import Request

from fastapi_request_shim._types import IdFactory
from fastapi_request_shim.diagnostics import Diagnostics, describe
from fastapi_request_shim.responses import ResponseHelpers
from fastapi_request_shim.writer import ResponseWriter

_STATE_KEY = "request_context"


def new_request_id() -> str:
    """Return ``req_`` followed by 16 random bytes in lowercase hex."""
    return "req_" + secrets.token_bytes(16).hex()


def url_param(request: Request, key: str) -> str:
    """Return the path parameter captured by the router, or an empty string."""
    value = request.path_params.get(key)
    return "" if value is None else str(value)


def current_context(request: Request) -> RequestContext | None:
    """Return the context bound to request, if one was created."""
    ctx = getattr(request.state, _STATE_KEY, None)
    if isinstance(ctx, RequestContext):
        return ctx
    return None


class RequestContext(ResponseHelpers):
    """Identity, transport objects, annotations and diagnostics of one request."""

    def __init__(
        self,
        request: Request,
        writer: ResponseWriter,
        request_id: str,
    ) -> None:
        self._id = request_id
        self._request = request
        self._writer = writer
        self._diagnostics: Diagnostics = describe("request_id", request_id)
        self._data: dict[str, Any] | None = None
        self._error: BaseException | None = None
        self._error_recorded = False

    @classmethod
    def new(
        cls,
        request: Request,
        *,
        writer: ResponseWriter | None = None,
        id_factory: IdFactory = new_request_id,
    ) -> RequestContext:
        """Create the context for request and bind it to the request state."""
        ctx = cls(request, writer or ResponseWriter(), id_factory())
        setattr(request.state, _STATE_KEY, ctx)
        return ctx

    # -- annotations --

    def get(self, name: str, default: Any = None) -> Any:
        if self._data is None:
            return default
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> RequestContext:
        if self._data is None:
            self._data = {}
        self._data[name] = value
        return self

    def describe(self, key: str, value: Any) -> RequestContext:
        self._diagnostics = self._diagnostics.describe(key, value)
        return self

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    # -- last error --

    @property
    def last_error(self) -> BaseException | None:
        return self._error

    @property
    def error_recorded(self) -> bool:
        return self._error_recorded

    def record_error(self, err: BaseException | None) -> None:
        """Remember the chain's outcome. Only the first call has effect."""
        if self._error_recorded:
            return
        self._error = err
        self._error_recorded = True

    # -- transport --

    def write(self, body: bytes | str) -> int:
        return self._writer.write(body)

    @property
    def id(self) -> str:
        return self._id

    @property
    def request(self) -> Request:
        return self._request

    @property
    def writer(self) -> ResponseWriter:
        return self._writer

    @property
    def url(self) -> URL:
        return self._request.url

    @property
    def request_uri(self) -> str:
        """Path and query string as sent by the client."""
        url = self._request.url
        if url.query:
            return f"{url.path}?{url.query}"
        return url.path

    @property
    def client_address(self) -> str:
        client = self._request.client
        if client is None:
            return ""
        return f"{client.host}:{client.port}"

    def url_param(self, key: str) -> str:
        return url_param(self._request, key)

    def query_param(self, key: str) -> str:
        return self._request.query_params.get(key, "")

    def body(self) -> AsyncIterator[bytes]:
        return self._request.stream()

    async def read_body(self) -> bytes:
        return await self._request.body()
