"""Retrying ``HttpTransport`` backed by httpx"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

import httpx

from ..errors import TransportError
from ..http import HttpMethod
from .retry import HttpResponse, RetryPolicy

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "mempool-api/0.1.0"


class HttpxTransport:
    """
    ``HttpTransport`` over an ``httpx.AsyncClient``, with retries on
    transient statuses.

    Pass ``client`` to share an existing AsyncClient (its connection pool,
    timeout and headers are then used as-is and it is not closed by
    ``aclose``). Otherwise a client is created with ``timeout`` and
    ``headers``. Timeouts are entirely the AsyncClient's concern.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        retry: Optional[RetryPolicy] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.retry = retry or RetryPolicy()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=timeout,
                headers={"User-Agent": DEFAULT_USER_AGENT, **(headers or {})},
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: "Settings") -> "HttpxTransport":
        return cls(
            retry=RetryPolicy(
                max_retries=settings.max_retries,
                base_backoff_ms=settings.base_backoff_ms,
            ),
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.http_user_agent},
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, method: HttpMethod, url: str, body: bytes = b"") -> bytes:
        method = HttpMethod(method)

        async def send_once() -> HttpResponse:
            try:
                response = await self._client.request(method.value, url, content=body or None)
            except httpx.HTTPError as exc:
                logger.debug("%s %s failed: %s", method.value, url, exc)
                raise TransportError(exc) from exc
            return HttpResponse(response.status_code, response.content)

        return await self.retry.fetch(send_once, label=f"{method.value} {url}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"HttpxTransport(retry={self.retry!r})"
