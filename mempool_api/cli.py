"""Command line entry point: ``mempool-api {tip,fees,sync}``"""

import argparse
import asyncio
import json
import logging
from typing import List, Optional

from bitcoin.core import b2lx

from .client import MempoolClient
from .config import Settings
from .sync import scan_xpub
from .transport import HttpxTransport

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("mempool_api").setLevel(log_level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))


async def show_tip(client: MempoolClient) -> None:
    height = await client.get_tip_height()
    block_hash = await client.get_tip_hash()
    print(f"height: {height}")
    print(f"hash:   {b2lx(block_hash)}")


async def show_fees(client: MempoolClient) -> None:
    fees = await client.get_recommended_fees()
    print(json.dumps(fees.model_dump(), indent=2))


async def sync_wallet(client: MempoolClient, args: argparse.Namespace, settings: Settings) -> None:
    result = await scan_xpub(
        client,
        args.xpub,
        gap_limit=args.gap_limit if args.gap_limit is not None else settings.gap_limit,
        batch_size=settings.scan_batch_size,
        change=args.change,
    )
    for index, txs in sorted(result.histories.items()):
        for tx in txs:
            print(f"{index}\t{b2lx(tx.txid)}")
    print(f"last active index: {result.last_active}")


async def run(args: argparse.Namespace, settings: Settings) -> None:
    async with HttpxTransport.from_settings(settings) as transport:
        client = MempoolClient(settings.base_url, transport)
        if args.command == "tip":
            await show_tip(client)
        elif args.command == "fees":
            await show_fees(client)
        elif args.command == "sync":
            await sync_wallet(client, args, settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mempool-api", description="Query a mempool.space/Esplora API")
    parser.add_argument("--base-url", help="API root, e.g. https://mempool.space/signet/api")
    parser.add_argument("--retries", type=int, help="Max retries on 429/500/503")
    parser.add_argument("--log-level", help="Logging level (default from MEMPOOL_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("tip", help="Print the chain tip height and hash")
    subparsers.add_parser("fees", help="Print the recommended fee rates")

    sync = subparsers.add_parser("sync", help="Gap-limit scan of an xpub/ypub/zpub")
    sync.add_argument("--xpub", required=True, help="Account-level extended public key")
    sync.add_argument("--gap-limit", type=int, help="Consecutive unused addresses before stopping")
    sync.add_argument("--change", action="store_true", help="Scan the change chain instead of receive")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.retries is not None:
        overrides["max_retries"] = args.retries
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)

    configure_logging(settings.log_level)
    logger.debug("Using %s", settings.base_url)
    asyncio.run(run(args, settings))


if __name__ == "__main__":
    main()
