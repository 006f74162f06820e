"""
Concrete HTTP transports.

Both transports run the same ``RetryPolicy`` around a single exchange and
only differ in the HTTP library underneath.
"""

from .aiohttp_client import AiohttpTransport
from .httpx_client import HttpxTransport
from .retry import (
    BASE_BACKOFF_MS,
    DEFAULT_MAX_RETRIES,
    RETRYABLE_STATUSES,
    HttpResponse,
    RetryPolicy,
    is_status_retryable,
    is_status_success,
)

__all__ = [
    "AiohttpTransport",
    "BASE_BACKOFF_MS",
    "DEFAULT_MAX_RETRIES",
    "HttpResponse",
    "HttpxTransport",
    "RETRYABLE_STATUSES",
    "RetryPolicy",
    "is_status_retryable",
    "is_status_success",
]
