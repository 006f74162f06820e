"""Fee and mempool records"""

from __future__ import annotations

from typing import List, Tuple

from pydantic import ConfigDict, Field

from .blockchain import Record
from .types import U64


class RecommendedFees(Record):
    """
    Response of ``/v1/fees/recommended`` (sat/vB).

    The server uses camelCase keys; snake_case is accepted too.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    fastest_fee: U64 = Field(..., alias="fastestFee", description="Next-block fee rate")
    half_hour_fee: U64 = Field(..., alias="halfHourFee", description="~30 minute fee rate")
    hour_fee: U64 = Field(..., alias="hourFee", description="~1 hour fee rate")
    economy_fee: U64 = Field(..., alias="economyFee", description="Economy fee rate")
    minimum_fee: U64 = Field(..., alias="minimumFee", description="Minimum relay fee rate")


class MempoolStats(Record):
    """Response of ``/mempool``"""

    count: U64 = Field(..., description="Number of transactions in the mempool")
    vsize: U64 = Field(..., description="Total virtual size of mempool transactions")
    total_fee: U64 = Field(..., description="Total fees in the mempool (sats)")
    fee_histogram: List[Tuple[float, U64]] = Field(
        default_factory=list, description="(fee rate, vsize) buckets"
    )
