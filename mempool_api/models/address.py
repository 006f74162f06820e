"""Address records"""

from __future__ import annotations

from pydantic import Field

from .blockchain import Record, Status
from .types import U32, U64, Txid


class AddressStats(Record):
    """Funding and spending totals of an address"""

    funded_txo_count: U64 = Field(..., description="Number of funded outputs")
    funded_txo_sum: U64 = Field(..., description="Sum of funded outputs (sats)")
    spent_txo_count: U64 = Field(..., description="Number of spent outputs")
    spent_txo_sum: U64 = Field(..., description="Sum of spent outputs (sats)")
    tx_count: U64 = Field(..., description="Number of transactions")


class AddressInfo(Record):
    """Response of ``/address/:address``"""

    address: str = Field(..., description="Bitcoin address")
    chain_stats: AddressStats = Field(..., description="Confirmed stats")
    mempool_stats: AddressStats = Field(..., description="Unconfirmed stats")

    @property
    def balance(self) -> int:
        """Confirmed plus unconfirmed balance in satoshis"""
        total = 0
        for stats in (self.chain_stats, self.mempool_stats):
            total += stats.funded_txo_sum - stats.spent_txo_sum
        return total


class AddressUtxo(Record):
    """Element of ``/address/:address/utxo``"""

    txid: Txid = Field(..., description="Transaction ID")
    vout: U32 = Field(..., description="Output index")
    value: U64 = Field(..., description="Value in satoshis")
    status: Status = Field(..., description="Confirmation status")
