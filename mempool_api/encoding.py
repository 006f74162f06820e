"""
Hex, integer and consensus decoding helpers.

Bitcoin primitives come from python-bitcoinlib. Hashes are handled as 32-byte
``bytes`` in internal byte order, exactly like ``bitcoin.core``; the REST API
shows them reversed as 64-char hex (see ``lx`` / ``b2lx``).
"""

from __future__ import annotations

import hashlib
import re
import struct
from typing import Iterable, Optional, Type, TypeVar

from bitcoin.core import CBlockHeader, b2lx
from bitcoin.core.serialize import (
    BytesSerializer,
    ImmutableSerializable,
    SerializationError,
    ser_read,
    uint256VectorSerializer,
)

from .errors import DecodeError, DecodeHexError, HexToArrayError, ParseIntError

HASH_LENGTH = 32
U32_MAX = 2**32 - 1

_HASH_HEX_RE = re.compile(r"[0-9a-fA-F]{64}")
_DECIMAL_RE = re.compile(r"[0-9]+")

S = TypeVar("S", bound=ImmutableSerializable)

# Failures python-bitcoinlib can surface while reading a malformed stream
_CONSENSUS_ERRORS = (SerializationError, struct.error, ValueError)


def hash_from_hex(text: str) -> bytes:
    """Parse a 64-char display-order hex hash into internal-order bytes"""
    value = text.strip()
    if not _HASH_HEX_RE.fullmatch(value):
        raise HexToArrayError(f"expected 64 hex characters, got {value[:80]!r}")
    return bytes.fromhex(value)[::-1]


def hash_to_hex(value: bytes) -> str:
    """Render an internal-order hash the way the API expects it in paths"""
    if len(value) != HASH_LENGTH:
        raise ValueError(f"hash must be {HASH_LENGTH} bytes, got {len(value)}")
    return b2lx(bytes(value))


def parse_u32(text: str) -> int:
    value = text.strip()
    if not _DECIMAL_RE.fullmatch(value):
        raise ParseIntError(f"invalid digit found in {value[:80]!r}")
    number = int(value)
    if number > U32_MAX:
        raise ParseIntError(f"number too large to fit in u32: {value}")
    return number


def decode_consensus(cls: Type[S], raw: bytes) -> S:
    """Consensus-decode ``raw`` into ``cls``; every byte must be consumed."""
    try:
        return cls.deserialize(bytes(raw))
    except _CONSENSUS_ERRORS as exc:
        raise DecodeError(f"invalid {cls.__name__} encoding: {exc}") from exc


def decode_consensus_hex(cls: Type[S], text: str) -> S:
    """Consensus-decode a hex body into ``cls``."""
    try:
        raw = bytes.fromhex(text.strip())
    except ValueError as exc:
        raise DecodeHexError(f"invalid hex for {cls.__name__}: {exc}") from exc
    try:
        return cls.deserialize(raw)
    except _CONSENSUS_ERRORS as exc:
        raise DecodeHexError(f"invalid {cls.__name__} encoding: {exc}") from exc


def serialize_hex(obj: ImmutableSerializable) -> str:
    """Lowercase hex of the consensus encoding of ``obj``"""
    return obj.serialize().hex()


def scripthash(script: bytes) -> str:
    """
    Esplora scripthash of a scriptPubKey: SHA-256 of the raw script bytes,
    lowercase hex, not byte-reversed.
    """
    return hashlib.sha256(bytes(script)).hexdigest()


class MerkleBlock(ImmutableSerializable):
    """
    BIP37 merkle block: a block header plus the partial merkle tree proving a
    set of transactions is included in it.

    Returned by ``/tx/:txid/merkleblock-proof``.
    """

    __slots__ = ["header", "total_transactions", "hashes", "flags"]

    def __init__(
        self,
        header: Optional[CBlockHeader] = None,
        total_transactions: int = 0,
        hashes: Iterable[bytes] = (),
        flags: bytes = b"",
    ):
        object.__setattr__(self, "header", header if header is not None else CBlockHeader())
        object.__setattr__(self, "total_transactions", int(total_transactions))
        object.__setattr__(self, "hashes", tuple(hashes))
        object.__setattr__(self, "flags", bytes(flags))

    @classmethod
    def stream_deserialize(cls, f, **kwargs):
        header = CBlockHeader.stream_deserialize(f)
        (total_transactions,) = struct.unpack(b"<I", ser_read(f, 4))
        hashes = uint256VectorSerializer.stream_deserialize(f)
        flags = BytesSerializer.stream_deserialize(f)
        return cls(header, total_transactions, hashes, flags)

    def stream_serialize(self, f, **kwargs):
        self.header.stream_serialize(f)
        f.write(struct.pack(b"<I", self.total_transactions))
        uint256VectorSerializer.stream_serialize(list(self.hashes), f)
        BytesSerializer.stream_serialize(self.flags, f)

    def __repr__(self) -> str:
        return "MerkleBlock(block=%s, total_transactions=%d, hashes=%d, flags=%s)" % (
            b2lx(self.header.GetHash()),
            self.total_transactions,
            len(self.hashes),
            self.flags.hex(),
        )
