"""
HTTP transport abstraction.

The endpoint client only needs one capability from an HTTP stack: send a
method, an absolute URL and a body, get back the response body bytes.
Anything with a matching ``send`` coroutine can be used, and the same
transport instance may be shared by several clients and tasks.
"""

from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable, Protocol, runtime_checkable


class HttpMethod(str, Enum):
    """HTTP methods used by the API"""

    GET = "GET"
    POST = "POST"


@runtime_checkable
class HttpTransport(Protocol):
    """
    Capability required by ``MempoolClient``.

    ``send`` resolves with the body only if the exchange succeeded. It raises
    ``TransportError`` when the network failed and ``HttpResponseError`` for
    a non-2xx status. Status interpretation and retries are the transport's
    business; the URL is always absolute and must not be rewritten.
    Implementations must be safe to call concurrently.
    """

    async def send(self, method: HttpMethod, url: str, body: bytes = b"") -> bytes:
        ...


SendFunction = Callable[[HttpMethod, str, bytes], Awaitable[bytes]]


class FunctionTransport:
    """Adapts a bare ``send`` coroutine function to ``HttpTransport``"""

    def __init__(self, send_fn: SendFunction):
        self._send_fn = send_fn

    async def send(self, method: HttpMethod, url: str, body: bytes = b"") -> bytes:
        return await self._send_fn(method, url, body)

    def __repr__(self) -> str:
        return f"FunctionTransport({getattr(self._send_fn, '__qualname__', self._send_fn)!r})"
