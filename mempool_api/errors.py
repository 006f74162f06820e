"""Error hierarchy for the mempool API client"""

from __future__ import annotations


class MempoolError(Exception):
    """Base class for every error raised by this library"""


class TransportError(MempoolError):
    """
    The underlying HTTP stack failed before a response was received
    (connection reset, DNS failure, timeout, ...).

    The original exception is kept on ``inner`` and chained as ``__cause__``.
    """

    def __init__(self, inner: BaseException):
        super().__init__(str(inner) or type(inner).__name__)
        self.inner = inner

    def __repr__(self) -> str:
        return f"TransportError({self.inner!r})"


class HttpResponseError(MempoolError):
    """Server answered with a non-2xx status that was not (or no longer) retried"""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status} {message}")
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"HttpResponseError(status={self.status}, message={self.message!r})"


class DecodeError(MempoolError, ValueError):
    """Consensus decoding of a binary body failed"""


class DecodeHexError(MempoolError, ValueError):
    """Consensus decoding of a hex body failed (bad hex or bad consensus bytes)"""


class HexToArrayError(MempoolError, ValueError):
    """Text could not be parsed as a 32-byte hex hash"""


class JsonError(MempoolError, ValueError):
    """JSON body was malformed or did not match the expected record"""


class ParseIntError(MempoolError, ValueError):
    """Text could not be parsed as an unsigned 32-bit integer"""
