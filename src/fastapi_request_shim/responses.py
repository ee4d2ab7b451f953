"""ResponseHelpers — standard success, redirect and error responses."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi_request_shim.diagnostics import Diagnostics, sprintf
from fastapi_request_shim.exceptions import (
    ContextError,
    ResponseEncodingError,
    ResponseWriterClosed,
)
from fastapi_request_shim.writer import ResponseWriter

logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    """Double-quote value with backslash escapes."""
    return json.dumps(value, ensure_ascii=False)


class ResponseHelpers:
    """Response methods mixed into RequestContext.

    Every error body sent to the client has the shape
    ``{"request_id": ..., "error": ...}``. The cause passed to the helpers is
    kept in the returned error for logging and never reaches the client.
    """

    _id: str
    _writer: ResponseWriter
    _diagnostics: Diagnostics

    @property
    def request_uri(self) -> str:
        raise NotImplementedError

    def ok(self) -> None:
        self._writer.write_header(200)
        return None

    def redirect(self, location: str, code: int = 302) -> None:
        """Point the client at location with a 3xx status."""
        self._writer.headers["location"] = location
        self._writer.write_header(code)
        return None

    def not_found(self) -> ContextError:
        return self.error(404, None, "not found: %s", quote(self.request_uri))

    def bad_request(
        self, cause: BaseException | None, message: str, *args: Any
    ) -> ContextError:
        return self.error(400, cause, message, *args)

    def internal_error(
        self, cause: BaseException | None, message: str, *args: Any
    ) -> ContextError:
        return self.error(500, cause, message, *args)

    def error(
        self,
        code: int,
        cause: BaseException | None,
        message: str,
        *args: Any,
    ) -> ContextError:
        """Send a structured error body and return the error for logging."""
        err = self.format(cause, message, *args)

        try:
            payload = json.dumps(
                {"request_id": self._id, "error": sprintf(message, *args)},
                separators=(",", ":"),
            )
            self._writer.headers["content-type"] = "application/json"
            self._writer.write_header(code)
            self._writer.write(payload + "\n")
        except (TypeError, ValueError, ResponseWriterClosed) as exc:
            logger.error("unable to send error response: %s", err)
            return ResponseEncodingError(
                "unable to marshal error",
                cause=exc,
                context=self._diagnostics.pairs(),
            )

        return err

    def format(
        self, cause: BaseException | None, message: str, *args: Any
    ) -> ContextError:
        """Wrap cause with message and the request's diagnostics."""
        return self._diagnostics.format(cause, message, *args)
