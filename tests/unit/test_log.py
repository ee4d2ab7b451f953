"""Tests for setup_logging and RequestIdFilter."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from fastapi_request_shim.log import RequestIdFilter, setup_logging


@pytest.fixture
def bare_root() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    def test_installs_single_handler(self, bare_root: logging.Logger) -> None:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        assert len(bare_root.handlers) == 1
        assert bare_root.level == logging.DEBUG

    def test_filter_added_once(self, bare_root: logging.Logger) -> None:
        setup_logging()
        setup_logging()
        filters = [
            f for f in bare_root.handlers[0].filters if isinstance(f, RequestIdFilter)
        ]
        assert len(filters) == 1


class TestRequestIdFilter:
    def _record(self, **extra: object) -> logging.LogRecord:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_fills_missing_request_id(self) -> None:
        record = self._record()
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "-"  # type: ignore[attr-defined]

    def test_keeps_existing_request_id(self) -> None:
        record = self._record(request_id="req_1")
        RequestIdFilter().filter(record)
        assert record.request_id == "req_1"  # type: ignore[attr-defined]
