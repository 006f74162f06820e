"""
Typed client for the mempool.space / Esplora REST API.

Every endpoint is a coroutine that formats its path, sends it through the
transport and decodes the body in one of three ways: text (hashes, heights,
consensus hex), raw (consensus binary) or JSON (pydantic records).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Type, TypeVar

from bitcoin.core import CBlock, CBlockHeader, CTransaction
from pydantic import BaseModel, TypeAdapter, ValidationError

from .encoding import (
    MerkleBlock,
    decode_consensus,
    decode_consensus_hex,
    hash_from_hex,
    hash_to_hex,
    parse_u32,
    scripthash,
    serialize_hex,
)
from .errors import JsonError, MempoolError, TransportError
from .http import HttpMethod, HttpTransport
from .models import (
    AddressInfo,
    AddressTx,
    AddressUtxo,
    BlockStatus,
    BlockSummary,
    MempoolStats,
    MerkleProof,
    OutputStatus,
    RecommendedFees,
    Status,
    TxInfo,
)

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Esplora returns address and scripthash history in pages of this size
PAGE_SIZE = 25

_OUTPUT_STATUSES = TypeAdapter(List[OutputStatus])
_ADDRESS_TXS = TypeAdapter(List[AddressTx])
_ADDRESS_UTXOS = TypeAdapter(List[AddressUtxo])
_BLOCK_SUMMARIES = TypeAdapter(List[BlockSummary])
_HEX_STRINGS = TypeAdapter(List[str])
_FEE_ESTIMATES = TypeAdapter(Dict[int, float])


class MempoolClient:
    """
    Async client, generic over the ``HttpTransport``.

    The client holds only the base URL and the transport and never changes
    after construction, so one instance can be shared freely between tasks.
    Retries and timeouts belong to the transport.

    Hash arguments and results are 32-byte ``bytes`` in internal byte order,
    as used by python-bitcoinlib (``lx``/``b2lx`` convert from/to hex).
    Address arguments are inserted into paths verbatim.
    """

    def __init__(self, base_url: str, transport: HttpTransport):
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Optional["Settings"] = None,
        transport: Optional[HttpTransport] = None,
    ) -> "MempoolClient":
        """Build a client (and, unless given, an ``HttpxTransport``) from settings."""
        if settings is None:
            from .config import settings
        if transport is None:
            from .transport import HttpxTransport

            transport = HttpxTransport.from_settings(settings)
        return cls(settings.base_url, transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def __repr__(self) -> str:
        return f"MempoolClient({self._base_url!r}, {self._transport!r})"

    # ------------------------------------------------------------------
    # Dispatch and decoding
    # ------------------------------------------------------------------

    async def _send(self, path: str, method: HttpMethod = HttpMethod.GET, body: bytes = b"") -> bytes:
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method.value, url)
        try:
            raw = await self._transport.send(method, url, body)
        except MempoolError:
            raise
        except Exception as exc:
            # custom transports may raise anything
            raise TransportError(exc) from exc
        return bytes(raw)

    async def _get_text(self, path: str) -> str:
        raw = await self._send(path)
        return raw.decode("utf-8", errors="replace")

    async def _get_model(self, path: str, model: Type[M]) -> M:
        raw = await self._send(path)
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            raise JsonError(f"invalid {model.__name__} from {path}: {exc}") from exc

    async def _get_json(self, path: str, adapter: TypeAdapter):
        raw = await self._send(path)
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            raise JsonError(f"invalid response from {path}: {exc}") from exc

    async def _get_hashes(self, path: str) -> List[bytes]:
        return [hash_from_hex(value) for value in await self._get_json(path, _HEX_STRINGS)]

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def get_tip_hash(self) -> bytes:
        """GET ``/blocks/tip/hash``"""
        return hash_from_hex(await self._get_text("/blocks/tip/hash"))

    async def get_tip_height(self) -> int:
        """GET ``/blocks/tip/height``"""
        return parse_u32(await self._get_text("/blocks/tip/height"))

    async def get_block_hash(self, height: int) -> bytes:
        """GET ``/block-height/:height``"""
        return hash_from_hex(await self._get_text(f"/block-height/{height}"))

    async def get_block_header(self, block_hash: bytes) -> CBlockHeader:
        """GET ``/block/:hash/header``"""
        text = await self._get_text(f"/block/{hash_to_hex(block_hash)}/header")
        return decode_consensus_hex(CBlockHeader, text)

    async def get_block(self, block_hash: bytes) -> CBlock:
        """GET ``/block/:hash/raw``"""
        raw = await self._send(f"/block/{hash_to_hex(block_hash)}/raw")
        return decode_consensus(CBlock, raw)

    async def get_block_status(self, block_hash: bytes) -> BlockStatus:
        """GET ``/block/:hash/status``"""
        return await self._get_model(f"/block/{hash_to_hex(block_hash)}/status", BlockStatus)

    async def get_blocks(self, height: Optional[int] = None) -> List[BlockSummary]:
        """
        GET ``/blocks[/:height]``

        The most recent blocks, or the blocks ending at ``height``.
        """
        path = "/blocks" if height is None else f"/blocks/{height}"
        return await self._get_json(path, _BLOCK_SUMMARIES)

    async def get_tx_at_index(self, block_hash: bytes, index: int) -> bytes:
        """GET ``/block/:hash/txid/:index``"""
        text = await self._get_text(f"/block/{hash_to_hex(block_hash)}/txid/{index}")
        return hash_from_hex(text)

    async def get_block_txids(self, block_hash: bytes) -> List[bytes]:
        """GET ``/block/:hash/txids``"""
        return await self._get_hashes(f"/block/{hash_to_hex(block_hash)}/txids")

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def get_tx(self, txid: bytes) -> CTransaction:
        """GET ``/tx/:txid/hex``"""
        text = await self._get_text(f"/tx/{hash_to_hex(txid)}/hex")
        return decode_consensus_hex(CTransaction, text)

    async def get_tx_info(self, txid: bytes) -> TxInfo:
        """GET ``/tx/:txid``"""
        return await self._get_model(f"/tx/{hash_to_hex(txid)}", TxInfo)

    async def get_tx_status(self, txid: bytes) -> Status:
        """GET ``/tx/:txid/status``"""
        return await self._get_model(f"/tx/{hash_to_hex(txid)}/status", Status)

    async def get_outspends(self, txid: bytes) -> List[OutputStatus]:
        """GET ``/tx/:txid/outspends``"""
        return await self._get_json(f"/tx/{hash_to_hex(txid)}/outspends", _OUTPUT_STATUSES)

    async def get_output_status(self, txid: bytes, vout: int) -> Optional[OutputStatus]:
        """
        Spending status of output ``vout`` of ``txid``, or None if the
        transaction has no such output.

        Derived from ``get_outspends``: the single-output endpoint answers
        with a default "unspent" status for outputs that do not exist.
        """
        outspends = await self.get_outspends(txid)
        if 0 <= vout < len(outspends):
            return outspends[vout]
        return None

    async def get_merkle_proof(self, txid: bytes) -> MerkleProof:
        """GET ``/tx/:txid/merkle-proof``"""
        return await self._get_model(f"/tx/{hash_to_hex(txid)}/merkle-proof", MerkleProof)

    async def get_merkle_block(self, txid: bytes) -> MerkleBlock:
        """GET ``/tx/:txid/merkleblock-proof``"""
        text = await self._get_text(f"/tx/{hash_to_hex(txid)}/merkleblock-proof")
        return decode_consensus_hex(MerkleBlock, text)

    async def broadcast(self, tx: CTransaction) -> bytes:
        """
        POST ``/tx``

        The body is the lowercase consensus hex of ``tx``; returns the txid
        reported by the server. Cancelling the call does not guarantee the
        server has not already received the transaction.
        """
        body = serialize_hex(tx).encode("ascii")
        raw = await self._send("/tx", HttpMethod.POST, body)
        return hash_from_hex(raw.decode("utf-8", errors="replace"))

    # ------------------------------------------------------------------
    # Addresses and scripts
    # ------------------------------------------------------------------

    async def get_address_info(self, address: str) -> AddressInfo:
        """GET ``/address/:address``"""
        return await self._get_model(f"/address/{address}", AddressInfo)

    async def get_address_txs(
        self,
        address: str,
        after_txid: Optional[bytes] = None,
    ) -> List[AddressTx]:
        """
        GET ``/address/:address/txs[?after_txid=:txid]``

        One page of history, newest first. Pass the last txid of a full page
        (``PAGE_SIZE`` items) as ``after_txid`` to get the next one.
        """
        path = f"/address/{address}/txs"
        if after_txid is not None:
            path += f"?after_txid={hash_to_hex(after_txid)}"
        return await self._get_json(path, _ADDRESS_TXS)

    async def get_address_utxos(self, address: str) -> List[AddressUtxo]:
        """GET ``/address/:address/utxo``"""
        return await self._get_json(f"/address/{address}/utxo", _ADDRESS_UTXOS)

    async def get_scripthash_txs(
        self,
        script: bytes,
        after_txid: Optional[bytes] = None,
    ) -> List[AddressTx]:
        """
        GET ``/scripthash/:hash/txs[/chain/:txid]``

        ``script`` is the raw scriptPubKey; it is hashed with SHA-256 to build
        the path. Paginates like ``get_address_txs``.
        """
        path = f"/scripthash/{scripthash(script)}/txs"
        if after_txid is not None:
            path += f"/chain/{hash_to_hex(after_txid)}"
        return await self._get_json(path, _ADDRESS_TXS)

    # ------------------------------------------------------------------
    # Fees and mempool
    # ------------------------------------------------------------------

    async def get_recommended_fees(self) -> RecommendedFees:
        """GET ``/v1/fees/recommended``"""
        return await self._get_model("/v1/fees/recommended", RecommendedFees)

    async def get_fee_estimates(self) -> Dict[int, float]:
        """GET ``/fee-estimates``: confirmation target (blocks) to sat/vB"""
        return await self._get_json("/fee-estimates", _FEE_ESTIMATES)

    async def get_mempool_info(self) -> MempoolStats:
        """GET ``/mempool``"""
        return await self._get_model("/mempool", MempoolStats)

    async def get_mempool_txids(self) -> List[bytes]:
        """GET ``/mempool/txids``"""
        return await self._get_hashes("/mempool/txids")
