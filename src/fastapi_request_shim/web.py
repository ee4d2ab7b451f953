"""Web — router facade that registers error-returning handlers."""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi.middleware.gzip import GZipMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Router, request_response
from starlette.types import ASGIApp

from fastapi_request_shim._types import Handler, Middleware
from fastapi_request_shim.config import WebOptions
from fastapi_request_shim.context import RequestContext, current_context, url_param
from fastapi_request_shim.middleware import (
    access_log,
    compose,
    recorder,
    recoverer,
)

Endpoint = Callable[[Request], Awaitable[Response]]


class Web:
    """Facade over a Starlette router.

    Every handler registered through the facade runs inside the same chain:
    access log, recovery, the facade's scoped middlewares, then the handler.
    Branches created with ``route()`` and ``with_()`` share the underlying
    router but never modify the parent's middleware stack.
    """

    def __init__(
        self,
        router: Router | None = None,
        *,
        options: WebOptions | None = None,
        middlewares: tuple[Middleware, ...] = (),
    ) -> None:
        self.options = options or WebOptions()
        self.router = router if router is not None else Router()
        self._middlewares = tuple(middlewares)
        self._chain = compose(
            access_log(logging.getLogger(self.options.access_logger)),
            recoverer(self.options),
        )
        self._app: ASGIApp | None = None
        self.router.default = self._not_found_app()

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    # -- branching --

    def _branch(self, router: Router, middlewares: tuple[Middleware, ...]) -> Web:
        web = copy.copy(self)
        web.router = router
        web._middlewares = middlewares
        web._app = None
        return web

    def route(self, pattern: str, configure: Callable[[Web], Any]) -> Web:
        """Mount a sub-router at pattern and let configure register on it."""
        sub = self._branch(Router(default=self._not_found_app()), self._middlewares)
        configure(sub)
        self.router.mount(pattern, app=sub.router)
        return sub

    def with_(self, *middlewares: Middleware) -> Web:
        """Return a facade whose handlers are also wrapped by middlewares."""
        return self._branch(self.router, self._middlewares + middlewares)

    # -- registration --

    def handle(self, method: str, pattern: str, handler: Handler) -> Handler:
        self.router.add_route(
            pattern, self.serve_handler(handler), methods=[method.upper()]
        )
        return handler

    def get(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register("GET", pattern, handler)

    def post(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register("POST", pattern, handler)

    def put(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register("PUT", pattern, handler)

    def patch(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register("PATCH", pattern, handler)

    def delete(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register("DELETE", pattern, handler)

    def _register(self, method: str, pattern: str, handler: Handler | None) -> Any:
        if handler is not None:
            return self.handle(method, pattern, handler)

        def decorator(fn: Handler) -> Handler:
            return self.handle(method, pattern, fn)

        return decorator

    # -- adaptation --

    def serve_handler(self, handler: Handler) -> Endpoint:
        """Adapt handler to a Starlette endpoint."""
        return self._endpoint(
            self._chain(compose(*self._middlewares)(recorder(handler)))
        )

    def _endpoint(self, chain: Handler) -> Endpoint:
        id_factory = self.options.id_factory

        async def endpoint(request: Request) -> Response:
            ctx = current_context(request)
            if ctx is None:
                ctx = RequestContext.new(request, id_factory=id_factory)
            await chain(ctx)
            return ctx.writer.finalize()

        return endpoint

    def _not_found_app(self) -> ASGIApp:
        async def not_found(ctx: RequestContext) -> BaseException | None:
            return ctx.not_found()

        return request_response(self._endpoint(self._chain(recorder(not_found))))

    # -- serving --

    def asgi_app(self) -> ASGIApp:
        """Return the router behind gzip compression, wrapped only once."""
        if self._app is None:
            self._app = GZipMiddleware(
                self.router,
                minimum_size=self.options.compress_minimum_size,
                compresslevel=self.options.compress_level,
            )
        return self._app

    def mount(self, app: Any, path: str = "") -> None:
        """Mount the shim into a Starlette or FastAPI application."""
        app.mount(path, app=self.asgi_app())

    url_param = staticmethod(url_param)
