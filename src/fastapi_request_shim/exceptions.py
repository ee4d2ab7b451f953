"""Exception hierarchy for errors produced while serving a request."""

from __future__ import annotations

from collections.abc import Iterable


class ShimError(Exception):
    """Base for all shim exceptions."""


class ContextError(ShimError):
    """Error carrying a message, an optional cause and descriptive context.

    The context is an ordered sequence of key/value pairs collected while the
    request was served (request id, client address, stack excerpt, ...).
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: Iterable[tuple[str, str]] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context: tuple[tuple[str, str], ...] = tuple(context)
        if cause is not None:
            self.__cause__ = cause

    def get(self, key: str) -> str | None:
        """Return the last value described under key, if any."""
        for name, value in reversed(self.context):
            if name == key:
                return value
        return None

    def __str__(self) -> str:
        branches: list[str] = [f"{key}: {value}" for key, value in self.context]
        if self.cause is not None:
            branches.append(str(self.cause) or type(self.cause).__name__)

        lines = [self.message]
        for index, branch in enumerate(branches):
            last = index == len(branches) - 1
            head, rest = ("└─ ", "   ") if last else ("├─ ", "│  ")
            first, *tail = branch.splitlines() or [""]
            lines.append(head + first)
            lines.extend(rest + line for line in tail)
        return "\n".join(lines)


class ResponseEncodingError(ContextError):
    """The structured error body could not be written to the client."""


class ResponseWriterClosed(ShimError):
    """Write attempted after the response was finalized."""
