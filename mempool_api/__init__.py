"""Async client for the mempool.space / Esplora REST API"""

from .client import PAGE_SIZE, MempoolClient
from .encoding import MerkleBlock, hash_from_hex, hash_to_hex, scripthash
from .errors import (
    DecodeError,
    DecodeHexError,
    HexToArrayError,
    HttpResponseError,
    JsonError,
    MempoolError,
    ParseIntError,
    TransportError,
)
from .http import FunctionTransport, HttpMethod, HttpTransport
from .transport import AiohttpTransport, HttpxTransport, RetryPolicy

__version__ = "0.1.0"

__all__ = [
    "AiohttpTransport",
    "DecodeError",
    "DecodeHexError",
    "FunctionTransport",
    "HexToArrayError",
    "HttpMethod",
    "HttpResponseError",
    "HttpTransport",
    "HttpxTransport",
    "JsonError",
    "MempoolClient",
    "MempoolError",
    "MerkleBlock",
    "PAGE_SIZE",
    "ParseIntError",
    "RetryPolicy",
    "TransportError",
    "hash_from_hex",
    "hash_to_hex",
    "scripthash",
]
