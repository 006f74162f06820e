"""Transaction and block records"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import U32, U64, BlockHash, Script, TxMerkleNode, Txid


class Record(BaseModel):
    """Immutable API record; unknown server fields are ignored"""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Status(Record):
    """Confirmation status and block information for a transaction"""

    confirmed: bool = Field(..., description="True if the transaction is confirmed")
    block_height: Optional[U32] = Field(None, description="Block height if confirmed")
    block_hash: Optional[BlockHash] = Field(None, description="Block hash if confirmed")
    block_time: Optional[U64] = Field(None, description="Block time (UNIX timestamp) if confirmed")

    @model_validator(mode="after")
    def _block_fields_all_or_none(self) -> "Status":
        present = [
            value is not None for value in (self.block_height, self.block_hash, self.block_time)
        ]
        if any(present) and not all(present):
            raise ValueError("block_height, block_hash and block_time must be set together")
        return self


class Vout(Record):
    """Transaction output"""

    scriptpubkey: Script = Field(..., description="ScriptPubKey (hex on the wire)")
    scriptpubkey_asm: str = Field(..., description="ScriptPubKey in ASM format")
    scriptpubkey_type: str = Field(..., description="Type of the scriptPubKey (e.g. p2wpkh)")
    scriptpubkey_address: str = Field(
        default="", description="Address of the scriptPubKey, empty when it has none"
    )
    value: U64 = Field(..., description="Value in satoshis")


class Vin(Record):
    """Transaction input"""

    txid: Txid = Field(..., description="Previous transaction ID")
    vout: U32 = Field(..., description="Output index in the previous transaction")
    prevout: Optional[Vout] = Field(None, description="Spent output, null for coinbase inputs")
    scriptsig: Script = Field(..., description="Script signature (hex on the wire)")
    scriptsig_asm: str = Field(..., description="Script signature in ASM format")
    is_coinbase: bool = Field(..., description="True for the coinbase input")
    sequence: U64 = Field(..., description="Sequence number")


class TxInfo(Record):
    """Transaction as returned by ``/tx/:txid``"""

    txid: Txid = Field(..., description="Transaction ID")
    version: U32 = Field(..., description="Transaction version")
    locktime: U32 = Field(..., description="Lock time")
    vin: List[Vin] = Field(..., description="Transaction inputs")
    vout: List[Vout] = Field(..., description="Transaction outputs")
    size: U32 = Field(..., description="Size in bytes")
    weight: U32 = Field(..., description="Weight units")
    sigops: U64 = Field(..., description="Signature operation count")
    fee: U64 = Field(..., description="Fee in satoshis")
    status: Status = Field(..., description="Confirmation status")


class AddressTx(TxInfo):
    """Element of an address or scripthash history page"""


class OutputStatus(Record):
    """Spending status of a transaction output"""

    spent: bool = Field(..., description="True if the output has been spent")
    txid: Optional[Txid] = Field(None, description="Spending transaction, if spent")
    vin: Optional[U32] = Field(None, description="Input index in the spending transaction")
    status: Optional[Status] = Field(None, description="Status of the spending transaction")


class BlockSummary(Record):
    """Block summary as listed by ``/blocks``"""

    id: BlockHash = Field(..., description="Block hash")
    height: U32 = Field(..., description="Block height")
    version: U32 = Field(..., description="Block version")
    timestamp: U64 = Field(..., description="Block timestamp (UNIX)")
    tx_count: U32 = Field(..., description="Number of transactions")
    size: U32 = Field(..., description="Size in bytes")
    weight: U32 = Field(..., description="Weight units")
    merkle_root: TxMerkleNode = Field(..., description="Merkle root")
    previousblockhash: Optional[BlockHash] = Field(
        None, description="Previous block hash, null for the genesis block"
    )
    mediantime: U64 = Field(..., description="Median time past")
    nonce: U64 = Field(..., description="Nonce")
    bits: U32 = Field(..., description="Compact difficulty target")
    difficulty: float = Field(..., description="Difficulty")


class BlockStatus(Record):
    """Best-chain membership of a block"""

    in_best_chain: bool = Field(..., description="True if the block is in the best chain")
    height: Optional[U32] = Field(None, description="Block height")
    next_best: Optional[BlockHash] = Field(None, description="Next block in the best chain")


class MerkleProof(Record):
    """Electrum-style merkle inclusion proof of a transaction"""

    block_height: U32 = Field(..., description="Height of the including block")
    merkle: List[Txid] = Field(..., description="Merkle branch, leaf to root")
    pos: int = Field(..., ge=0, description="Position of the transaction in the block")
