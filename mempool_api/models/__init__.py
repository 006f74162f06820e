"""Data models for mempool API responses"""

from .address import AddressInfo, AddressStats, AddressUtxo
from .blockchain import (
    AddressTx,
    BlockStatus,
    BlockSummary,
    MerkleProof,
    OutputStatus,
    Record,
    Status,
    TxInfo,
    Vin,
    Vout,
)
from .mempool import MempoolStats, RecommendedFees
from .types import U32, U64, BlockHash, Hash256, Script, TxMerkleNode, Txid

__all__ = [
    "AddressInfo",
    "AddressStats",
    "AddressTx",
    "AddressUtxo",
    "BlockHash",
    "BlockStatus",
    "BlockSummary",
    "Hash256",
    "MempoolStats",
    "MerkleProof",
    "OutputStatus",
    "RecommendedFees",
    "Record",
    "Script",
    "Status",
    "TxInfo",
    "TxMerkleNode",
    "Txid",
    "U32",
    "U64",
    "Vin",
    "Vout",
]
