"""WebOptions — tunables for the router facade and its middlewares."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi_request_shim._types import IdFactory
from fastapi_request_shim.context import new_request_id

ACCESS_LOGGER = "fastapi_request_shim.access"


@dataclass(frozen=True)
class WebOptions:
    """Immutable configuration shared by a facade and all of its branches."""

    compress_level: int = 9
    compress_minimum_size: int = 500
    stack_limit: int = 8
    id_factory: IdFactory = new_request_id
    access_logger: str = ACCESS_LOGGER
    redact_headers: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {"authorization", "proxy-authorization", "cookie", "x-api-key"}
        )
    )

    def __post_init__(self) -> None:
        if not 0 <= self.compress_level <= 9:
            raise ValueError(
                f"compress_level must be between 0 and 9, got {self.compress_level}"
            )
        if self.stack_limit < 1:
            raise ValueError(f"stack_limit must be positive, got {self.stack_limit}")
