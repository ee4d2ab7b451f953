"""Logging helpers for applications serving through the shim."""

from __future__ import annotations

import logging

_FORMAT = "[%(asctime)s - %(levelname)s - req=%(request_id)s - %(name)s - %(message)s]"


class RequestIdFilter(logging.Filter):
    """Give every record a ``request_id`` attribute so the format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_logging(level: int = logging.INFO, fmt: str = _FORMAT) -> None:
    """Install one stream handler on the root logger if it has none."""
    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    for handler in root.handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
