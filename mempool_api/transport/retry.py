"""Retry policy shared by the concrete transports"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from ..errors import HttpResponseError

logger = logging.getLogger(__name__)

# Base backoff in milliseconds
BASE_BACKOFF_MS = 256
DEFAULT_MAX_RETRIES = 10

# 429 Too Many Requests, 500 Internal Server Error, 503 Service Unavailable
RETRYABLE_STATUSES = frozenset({429, 500, 503})


def is_status_retryable(status: int) -> bool:
    """Whether the response status indicates a transient failure worth retrying"""
    return status in RETRYABLE_STATUSES


def is_status_success(status: int) -> bool:
    return 200 <= status < 300


@dataclass(frozen=True)
class HttpResponse:
    """Status and fully read body of a single HTTP exchange"""

    status: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff on retryable statuses.

    The first retry waits ``base_backoff_ms``, every following one twice as
    long as the previous, with no jitter and no cap. Network errors raised by
    the exchange are never retried. ``max_retries=0`` disables retrying.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_backoff_ms: int = BASE_BACKOFF_MS
    sleep: Callable[[float], Awaitable[Any]] = field(
        default=asyncio.sleep, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_backoff_ms < 0:
            raise ValueError(f"base_backoff_ms must be >= 0, got {self.base_backoff_ms}")

    def backoff_ms(self, attempt: int) -> int:
        """Delay before retry number ``attempt`` (0-based)"""
        return self.base_backoff_ms * (2**attempt)

    async def execute(
        self,
        send_once: Callable[[], Awaitable[HttpResponse]],
        label: str = "",
    ) -> HttpResponse:
        """
        Run ``send_once`` until it returns a non-retryable status or the
        retries are used up, and return the last response as-is.
        """
        delay = self.base_backoff_ms
        attempts = 0

        while True:
            response = await send_once()
            if not is_status_retryable(response.status):
                return response
            if attempts >= self.max_retries:
                if self.max_retries:
                    logger.warning(
                        "Giving up on %s after %d retries (HTTP %d)",
                        label,
                        attempts,
                        response.status,
                    )
                return response

            logger.debug(
                "HTTP %d for %s, retrying in %dms (retry %d/%d)",
                response.status,
                label,
                delay,
                attempts + 1,
                self.max_retries,
            )
            await self.sleep(delay / 1000)
            delay *= 2
            attempts += 1

    async def fetch(
        self,
        send_once: Callable[[], Awaitable[HttpResponse]],
        label: str = "",
    ) -> bytes:
        """``execute`` and map the final response to its body or an ``HttpResponseError``."""
        response = await self.execute(send_once, label)
        if not is_status_success(response.status):
            raise HttpResponseError(response.status, response.text)
        return response.body
