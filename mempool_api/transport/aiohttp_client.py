"""Retrying ``HttpTransport`` backed by aiohttp"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Dict, Optional

import aiohttp

from ..errors import TransportError
from ..http import HttpMethod
from .httpx_client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .retry import HttpResponse, RetryPolicy

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class AiohttpTransport:
    """
    ``HttpTransport`` over an ``aiohttp.ClientSession``, with retries on
    transient statuses.

    A ClientSession must be created inside a running event loop, so unless
    one is passed in it is created lazily by the first request.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        retry: Optional[RetryPolicy] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.retry = retry or RetryPolicy()
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._headers = {"User-Agent": DEFAULT_USER_AGENT, **(headers or {})}
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AiohttpTransport":
        return cls(
            retry=RetryPolicy(
                max_retries=settings.max_retries,
                base_backoff_ms=settings.base_backoff_ms,
            ),
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.http_user_agent},
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._lock:
            if self._session is None:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self._timeout),
                    headers=self._headers,
                )
            return self._session

    async def send(self, method: HttpMethod, url: str, body: bytes = b"") -> bytes:
        method = HttpMethod(method)
        session = await self._get_session()

        async def send_once() -> HttpResponse:
            try:
                async with session.request(method.value, url, data=body or None) as resp:
                    return HttpResponse(resp.status, await resp.read())
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                logger.debug("%s %s failed: %s", method.value, url, exc)
                raise TransportError(exc) from exc

        return await self.retry.fetch(send_once, label=f"{method.value} {url}")

    async def aclose(self) -> None:
        if not self._owns_session:
            return
        async with self._lock:
            session, self._session = self._session, None
        if session is not None:
            await session.close()

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"AiohttpTransport(retry={self.retry!r})"
