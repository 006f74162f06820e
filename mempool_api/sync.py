"""
Wallet history helpers: history pagination and gap-limit scanning.

A wallet derives one address (or script) per index and scans indices in
order until ``gap_limit`` consecutive indices turned out unused.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from bip_utils import (
    Bip44,
    Bip44Changes,
    Bip44Coins,
    Bip49,
    Bip49Coins,
    Bip84,
    Bip84Coins,
)

from .client import PAGE_SIZE, MempoolClient
from .models import AddressTx

logger = logging.getLogger(__name__)

DEFAULT_GAP_LIMIT = 20
DEFAULT_BATCH_SIZE = 5

HistoryFetcher = Callable[[int], Awaitable[List[AddressTx]]]


async def _paginate(fetch_page: Callable[[Optional[bytes]], Awaitable[List[AddressTx]]]) -> List[AddressTx]:
    history: List[AddressTx] = []
    after_txid: Optional[bytes] = None
    while True:
        page = await fetch_page(after_txid)
        history.extend(page)
        if len(page) < PAGE_SIZE:
            return history
        after_txid = page[-1].txid


async def fetch_address_history(client: MempoolClient, address: str) -> List[AddressTx]:
    """Full history of ``address``, following pages until a short one"""
    return await _paginate(lambda after: client.get_address_txs(address, after))


async def fetch_script_history(client: MempoolClient, script: bytes) -> List[AddressTx]:
    """Full history of a scriptPubKey, following pages until a short one"""
    return await _paginate(lambda after: client.get_scripthash_txs(script, after))


@dataclass
class ScanResult:
    """Outcome of a gap-limit scan"""

    last_active: Optional[int] = None
    histories: Dict[int, List[AddressTx]] = field(default_factory=dict)
    scanned: int = 0

    @property
    def next_unused(self) -> int:
        """First index after the last active one"""
        return 0 if self.last_active is None else self.last_active + 1


async def scan_gap_limit(
    fetch_history: HistoryFetcher,
    gap_limit: int = DEFAULT_GAP_LIMIT,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_index: Optional[int] = None,
) -> ScanResult:
    """
    Scan derivation indices 0, 1, 2, ... with ``fetch_history``.

    Indices are fetched ``batch_size`` at a time concurrently and evaluated
    in index order. Scanning stops once more than ``gap_limit`` consecutive
    indices had no history, or after ``max_index`` (exclusive). Only
    indices with history are kept in ``histories``.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    result = ScanResult()
    unused = 0
    index = 0

    while unused <= gap_limit and (max_index is None or index < max_index):
        stop = index + batch_size if max_index is None else min(index + batch_size, max_index)
        indices = list(range(index, stop))
        histories = await asyncio.gather(*(fetch_history(i) for i in indices))

        for i, history in zip(indices, histories):
            result.scanned = i + 1
            if history:
                unused = 0
                result.last_active = i
                result.histories[i] = history
            else:
                unused += 1
                if unused > gap_limit:
                    break
        index = stop
        logger.debug(
            "Scanned up to index %d (last active %s, %d unused in a row)",
            result.scanned - 1,
            result.last_active,
            unused,
        )

    logger.info(
        "Gap-limit scan finished: %d indices scanned, last active %s",
        result.scanned,
        result.last_active,
    )
    return result


def derive_addresses(
    xpub: str,
    count: int,
    start: int = 0,
    change: bool = False,
) -> List[str]:
    """
    Derive ``count`` addresses from an account-level extended public key.

    The prefix picks the address type: zpub (BIP84, native SegWit), ypub
    (BIP49, nested SegWit) or xpub (BIP44, legacy). Addresses are taken at
    ``m/change/index`` below the account key.
    """
    if xpub.startswith("zpub"):
        ctx = Bip84.FromExtendedKey(xpub, Bip84Coins.BITCOIN)
    elif xpub.startswith("ypub"):
        ctx = Bip49.FromExtendedKey(xpub, Bip49Coins.BITCOIN)
    elif xpub.startswith("xpub"):
        ctx = Bip44.FromExtendedKey(xpub, Bip44Coins.BITCOIN)
    else:
        raise ValueError(f"Unsupported extended key format: {xpub[:4]}")

    chain = ctx.Change(Bip44Changes.CHAIN_INT if change else Bip44Changes.CHAIN_EXT)
    return [
        chain.AddressIndex(i).PublicKey().ToAddress()
        for i in range(start, start + count)
    ]


async def scan_xpub(
    client: MempoolClient,
    xpub: str,
    gap_limit: int = DEFAULT_GAP_LIMIT,
    batch_size: int = DEFAULT_BATCH_SIZE,
    change: bool = False,
    max_index: Optional[int] = None,
) -> ScanResult:
    """Gap-limit scan of the addresses derived from ``xpub``"""

    async def fetch_history(index: int) -> List[AddressTx]:
        (address,) = derive_addresses(xpub, 1, start=index, change=change)
        return await fetch_address_history(client, address)

    return await scan_gap_limit(
        fetch_history,
        gap_limit=gap_limit,
        batch_size=batch_size,
        max_index=max_index,
    )
