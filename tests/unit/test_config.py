"""Tests for WebOptions."""

from __future__ import annotations

import dataclasses

import pytest

from fastapi_request_shim.config import ACCESS_LOGGER, WebOptions
from fastapi_request_shim.context import new_request_id


class TestWebOptions:
    def test_defaults(self) -> None:
        options = WebOptions()
        assert options.compress_level == 9
        assert options.compress_minimum_size == 500
        assert options.stack_limit == 8
        assert options.id_factory is new_request_id
        assert options.access_logger == ACCESS_LOGGER
        assert "authorization" in options.redact_headers

    def test_frozen(self) -> None:
        options = WebOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.stack_limit = 3  # type: ignore[misc]

    def test_invalid_compress_level(self) -> None:
        with pytest.raises(ValueError, match="compress_level"):
            WebOptions(compress_level=10)

    def test_invalid_stack_limit(self) -> None:
        with pytest.raises(ValueError, match="stack_limit"):
            WebOptions(stack_limit=0)
