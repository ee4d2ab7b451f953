"""Handler-chain middlewares: composition, access logging and recovery."""

from __future__ import annotations

import functools
import logging
import os
import time
import traceback
from typing import Any

from starlette.requests import Request

from fastapi_request_shim._types import Handler, Middleware
from fastapi_request_shim.config import ACCESS_LOGGER, WebOptions
from fastapi_request_shim.context import RequestContext

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep
_REDACTED = "[REDACTED]"


def compose(*middlewares: Middleware) -> Middleware:
    """Combine middlewares into one; the first argument runs outermost."""

    def composed(handler: Handler) -> Handler:
        return functools.reduce(
            lambda inner, middleware: middleware(inner),
            reversed(middlewares),
            handler,
        )

    return composed


def recorder(handler: Handler) -> Handler:
    """Record the innermost handler's result on the context as it returns."""

    @functools.wraps(handler)
    async def wrapper(ctx: RequestContext) -> BaseException | None:
        err = await handler(ctx)
        ctx.record_error(err)
        return err

    return wrapper


def log_request(
    log: logging.Logger,
    code: int,
    err: BaseException | None,
    message: str,
    *args: Any,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log a served request with a severity derived from its outcome."""
    if code >= 500:
        if err is not None:
            log.error(message + "\n%s", *args, err, extra=extra)
        else:
            log.error(message, *args, extra=extra)
    elif err is not None:
        log.warning(message + "\n%s", *args, err, extra=extra)
    else:
        log.debug(message, *args, extra=extra)


def access_log(logger: logging.Logger | None = None) -> Middleware:
    """Log status, method, uri, duration, client and id of every request."""
    log = logger or logging.getLogger(ACCESS_LOGGER)

    def middleware(next_handler: Handler) -> Handler:
        async def handler(ctx: RequestContext) -> BaseException | None:
            started = time.perf_counter()
            err = await next_handler(ctx)
            duration = time.perf_counter() - started

            request = ctx.request
            status = ctx.writer.status
            log_request(
                log,
                status,
                err,
                "{http} %d %4s %s | %.6f %s | %s",
                status,
                request.method,
                ctx.request_uri,
                duration,
                ctx.client_address,
                ctx.id,
                extra={
                    "request_id": ctx.id,
                    "status": status,
                    "method": request.method,
                    "path": ctx.request_uri,
                    "duration": duration,
                    "client": ctx.client_address,
                },
            )
            return err

        return handler

    return middleware


def recoverer(options: WebOptions | None = None) -> Middleware:
    """Turn exceptions raised by the inner chain into 500 responses.

    The exception is returned as an error rather than logged here; the
    access log reports it.
    """
    opts = options or WebOptions()

    def middleware(next_handler: Handler) -> Handler:
        async def handler(ctx: RequestContext) -> BaseException | None:
            try:
                return await next_handler(ctx)
            except Exception as exc:
                ctx.writer.reset()
                ctx.describe("client", ctx.client_address)
                ctx.describe("request", dump_request(ctx.request, opts.redact_headers))
                ctx.describe("stack", stack_excerpt(exc, opts.stack_limit))
                err = ctx.internal_error(
                    exc, "panic while serving %s", ctx.request_uri
                )
                ctx.record_error(err)
                return err

        return handler

    return middleware


def dump_request(
    request: Request, redact: frozenset[str] = frozenset()
) -> str:
    """Render the request line and headers; the body is never included."""
    target = request.url.path
    if request.url.query:
        target += "?" + request.url.query
    version = request.scope.get("http_version", "1.1")

    lines = [f"{request.method} {target} HTTP/{version}"]
    for raw_key, raw_value in request.headers.raw:
        key = raw_key.decode("latin-1")
        value = raw_value.decode("latin-1")
        if key.lower() in redact:
            value = _REDACTED
        lines.append(f"{_canonical(key)}: {value}")
    return "\n".join(lines)


def stack_excerpt(exc: BaseException, limit: int) -> str:
    """Return the last ``limit`` frames of exc's traceback outside this package."""
    frames = [
        frame
        for frame in traceback.extract_tb(exc.__traceback__)
        if not os.path.abspath(frame.filename).startswith(_PACKAGE_DIR)
    ]
    return "".join(traceback.format_list(frames[-limit:])).rstrip()


def _canonical(header: str) -> str:
    return "-".join(part.capitalize() for part in header.split("-"))
