"""ResponseWriter — buffered response that records its status code."""

from __future__ import annotations

import logging

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

from fastapi_request_shim.exceptions import ResponseWriterClosed

logger = logging.getLogger(__name__)


class ResponseWriter:
    """Collects status, headers and body until the chain returns.

    The first status written wins; later ones are ignored, mirroring how an
    HTTP status line can only be sent once.
    """

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self._status: int | None = None
        self._body = bytearray()
        self._closed = False

    @property
    def status(self) -> int:
        """Status that will be (or was) sent; 200 if none was written."""
        return self._status if self._status is not None else 200

    @property
    def written(self) -> bool:
        return self._status is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def write_header(self, code: int) -> None:
        if self._closed:
            raise ResponseWriterClosed("response already finalized")
        if self._status is not None:
            logger.debug(
                "superfluous write_header(%d), status already %d", code, self._status
            )
            return
        self._status = code

    def write(self, data: bytes | str) -> int:
        if self._closed:
            raise ResponseWriterClosed("response already finalized")
        if isinstance(data, str):
            data = data.encode("utf-8")
        if self._status is None:
            self.write_header(200)
        self._body.extend(data)
        return len(data)

    def body(self) -> bytes:
        return bytes(self._body)

    def reset(self) -> None:
        """Drop everything buffered so far."""
        if self._closed:
            raise ResponseWriterClosed("response already finalized")
        self.headers = MutableHeaders()
        self._status = None
        self._body.clear()

    def finalize(self) -> Response:
        """Close the writer and build the Starlette response."""
        self._closed = True
        response = Response(content=bytes(self._body), status_code=self.status)
        for key, value in self.headers.raw:
            if key == b"content-length":
                continue
            response.raw_headers.append((key, value))
        return response
