"""FastAPI Request Shim - error-returning handlers behind a Starlette router."""

from fastapi_request_shim._types import Handler, Middleware
from fastapi_request_shim.config import WebOptions
from fastapi_request_shim.context import (
    RequestContext,
    current_context,
    new_request_id,
    url_param,
)
from fastapi_request_shim.diagnostics import Diagnostics, describe
from fastapi_request_shim.exceptions import (
    ContextError,
    ResponseEncodingError,
    ResponseWriterClosed,
    ShimError,
)
from fastapi_request_shim.log import RequestIdFilter, setup_logging
from fastapi_request_shim.middleware import (
    access_log,
    compose,
    dump_request,
    log_request,
    recorder,
    recoverer,
    stack_excerpt,
)
from fastapi_request_shim.responses import ResponseHelpers
from fastapi_request_shim.web import Web
from fastapi_request_shim.writer import ResponseWriter

__all__ = [
    "ContextError",
    "Diagnostics",
    "Handler",
    "Middleware",
    "RequestContext",
    "RequestIdFilter",
    "ResponseEncodingError",
    "ResponseHelpers",
    "ResponseWriter",
    "ResponseWriterClosed",
    "ShimError",
    "Web",
    "WebOptions",
    "access_log",
    "compose",
    "current_context",
    "describe",
    "dump_request",
    "log_request",
    "new_request_id",
    "recorder",
    "recoverer",
    "setup_logging",
    "stack_excerpt",
    "url_param",
]
