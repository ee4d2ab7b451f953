"""Diagnostics — immutable chain of descriptive key/value pairs."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from fastapi_request_shim.exceptions import ContextError


@dataclass(frozen=True)
class Diagnostics:
    """One node of the chain; every describe() returns a new node."""

    key: str
    value: str
    parent: Diagnostics | None = None

    def describe(self, key: str, value: Any) -> Diagnostics:
        return Diagnostics(key=key, value=str(value), parent=self)

    def pairs(self) -> tuple[tuple[str, str], ...]:
        """Return all pairs, oldest first."""
        collected: list[tuple[str, str]] = []
        node: Diagnostics | None = self
        while node is not None:
            collected.append((node.key, node.value))
            node = node.parent
        collected.reverse()
        return tuple(collected)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs())

    def format(
        self, cause: BaseException | None, message: str, *args: Any
    ) -> ContextError:
        """Build an error that wraps cause with the formatted message."""
        return ContextError(
            sprintf(message, *args), cause=cause, context=self.pairs()
        )


def describe(key: str, value: Any) -> Diagnostics:
    """Start a new chain."""
    return Diagnostics(key=key, value=str(value))


def sprintf(message: str, *args: Any) -> str:
    if not args:
        return message
    return message % args
