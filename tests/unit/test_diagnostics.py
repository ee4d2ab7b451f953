"""Tests for the immutable diagnostic chain."""

from __future__ import annotations

import dataclasses

import pytest

from fastapi_request_shim.diagnostics import Diagnostics, describe, sprintf
from fastapi_request_shim.exceptions import ContextError


class TestDiagnostics:
    def test_describe_starts_chain(self) -> None:
        chain = describe("request_id", "req_1")
        assert chain.pairs() == (("request_id", "req_1"),)

    def test_describe_returns_new_node(self) -> None:
        root = describe("request_id", "req_1")
        child = root.describe("client", "127.0.0.1:1")
        assert child is not root
        assert root.pairs() == (("request_id", "req_1"),)
        assert child.pairs() == (
            ("request_id", "req_1"),
            ("client", "127.0.0.1:1"),
        )

    def test_branches_do_not_see_each_other(self) -> None:
        root = describe("request_id", "req_1")
        left = root.describe("side", "left")
        right = root.describe("side", "right")
        assert left.pairs()[-1] == ("side", "left")
        assert right.pairs()[-1] == ("side", "right")

    def test_values_are_stringified(self) -> None:
        chain = describe("count", 3)
        assert chain.pairs() == (("count", "3"),)

    def test_nodes_are_frozen(self) -> None:
        chain = describe("k", "v")
        with pytest.raises(dataclasses.FrozenInstanceError):
            chain.value = "other"  # type: ignore[misc]

    def test_iterates_oldest_first(self) -> None:
        chain = describe("a", "1").describe("b", "2").describe("c", "3")
        assert [key for key, _ in chain] == ["a", "b", "c"]

    def test_format_wraps_cause(self) -> None:
        cause = RuntimeError("disk full")
        chain = describe("request_id", "req_1")
        err = chain.format(cause, "unable to save %s", "note")
        assert isinstance(err, ContextError)
        assert err.message == "unable to save note"
        assert err.cause is cause
        assert err.context == (("request_id", "req_1"),)

    def test_format_without_cause(self) -> None:
        err = Diagnostics("k", "v").format(None, "plain")
        assert err.cause is None
        assert err.message == "plain"


class TestSprintf:
    def test_no_args_leaves_message_untouched(self) -> None:
        assert sprintf("100% done") == "100% done"

    def test_formats_args(self) -> None:
        assert sprintf("invalid %s: %d", "foo", 3) == "invalid foo: 3"
