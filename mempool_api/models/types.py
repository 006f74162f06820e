"""Annotated field types shared by the API records"""

from __future__ import annotations

from typing import Annotated, Any

from bitcoin.core.script import CScript
from pydantic import Field, PlainSerializer, PlainValidator

from ..encoding import HASH_LENGTH, hash_from_hex, hash_to_hex

U32 = Annotated[int, Field(ge=0, le=2**32 - 1)]
U64 = Annotated[int, Field(ge=0, le=2**64 - 1)]


def _validate_hash(value: Any) -> bytes:
    if isinstance(value, str):
        return hash_from_hex(value)
    if isinstance(value, (bytes, bytearray)) and len(value) == HASH_LENGTH:
        return bytes(value)
    raise ValueError("expected a 64-char hex string or 32 bytes")


def _validate_script(value: Any) -> CScript:
    if isinstance(value, str):
        return CScript(bytes.fromhex(value))
    if isinstance(value, (bytes, bytearray)):
        return CScript(bytes(value))
    raise ValueError("expected a hex string or bytes")


# 32-byte hashes in internal byte order; hex in display order on the wire
Hash256 = Annotated[
    bytes,
    PlainValidator(_validate_hash),
    PlainSerializer(hash_to_hex, return_type=str),
]
Txid = Hash256
BlockHash = Hash256
TxMerkleNode = Hash256

Script = Annotated[
    bytes,
    PlainValidator(_validate_script),
    PlainSerializer(lambda script: bytes(script).hex(), return_type=str),
]
