"""Shared fixtures: genesis block data, sample payloads and a fake transport"""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import pytest

from mempool_api import FunctionTransport, HttpMethod, MempoolClient

BASE_URL = "https://mempool.test/api"

GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
GENESIS_TXID = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
GENESIS_HEADER_HEX = (
    "01000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "3ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa4b1e5e4a"
    "29ab5f49"
    "ffff001d"
    "1dac2b7c"
)
GENESIS_COINBASE_HEX = (
    "01000000"
    "01"
    "0000000000000000000000000000000000000000000000000000000000000000ffffffff"
    "4d04ffff001d0104455468652054696d65732030332f4a616e2f32303039204368616e63656c6c6f72"
    "206f6e206272696e6b206f66207365636f6e64206261696c6f757420666f722062616e6b73"
    "ffffffff"
    "01"
    "00f2052a01000000"
    "434104678afdb0fe5548271967f1a67130b7105cd6a828e03909a67962e0ea1f61deb649f6bc3f4cef38c4"
    "f35504e51ec112de5c384df7ba0b8d578a4c702b6bf11d5fac"
    "00000000"
)
GENESIS_BLOCK_HEX = GENESIS_HEADER_HEX + "01" + GENESIS_COINBASE_HEX

P2WPKH_SCRIPT_HEX = "0014751e76e8199196d454941c45d1b3a323f1433bd6"
P2WPKH_SCRIPTHASH = "8838f796bf4970b148779c05b74b8c49515b322d04035f7faa5d9b2375df2396"

FEES_JSON = {
    "fastestFee": 20,
    "halfHourFee": 10,
    "hourFee": 5,
    "economyFee": 2,
    "minimumFee": 1,
}


def txid_hex(n: int) -> str:
    """Deterministic fake txid"""
    return f"{n:064x}"


def status_json(confirmed: bool = True) -> Dict[str, Any]:
    if not confirmed:
        return {"confirmed": False}
    return {
        "confirmed": True,
        "block_height": 864231,
        "block_hash": "00000000000000000001d4a9d1fc2a4e2c3a8a8c6e4c3d0b0b8d1a7c8c7b6a59",
        "block_time": 1728000000,
    }


def tx_json(txid: str, confirmed: bool = True) -> Dict[str, Any]:
    """A realistic ``/tx/:txid`` / history element payload"""
    return {
        "txid": txid,
        "version": 2,
        "locktime": 864230,
        "vin": [
            {
                "txid": txid_hex(0xABCDEF),
                "vout": 1,
                "prevout": {
                    "scriptpubkey": P2WPKH_SCRIPT_HEX,
                    "scriptpubkey_asm": "OP_0 OP_PUSHBYTES_20 751e76e8199196d454941c45d1b3a323f1433bd6",
                    "scriptpubkey_type": "v0_p2wpkh",
                    "scriptpubkey_address": "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4",
                    "value": 150000,
                },
                "scriptsig": "",
                "scriptsig_asm": "",
                "witness": ["3044", "02aa"],
                "is_coinbase": False,
                "sequence": 4294967293,
            }
        ],
        "vout": [
            {
                "scriptpubkey": "a914b472a266d0bd89c13706a4132ccfb16f7c3b9fcb87",
                "scriptpubkey_asm": "OP_HASH160 OP_PUSHBYTES_20 b472a266d0bd89c13706a4132ccfb16f7c3b9fcb OP_EQUAL",
                "scriptpubkey_type": "p2sh",
                "scriptpubkey_address": "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy",
                "value": 100000,
            },
            {
                "scriptpubkey": "6a0b68656c6c6f20776f726c64",
                "scriptpubkey_asm": "OP_RETURN OP_PUSHBYTES_11 68656c6c6f20776f726c64",
                "scriptpubkey_type": "op_return",
                "value": 0,
            },
        ],
        "size": 222,
        "weight": 561,
        "sigops": 1,
        "fee": 50000,
        "status": status_json(confirmed),
    }


def dumps(payload: Any) -> bytes:
    return json.dumps(payload).encode()


Response = Union[bytes, Exception, Callable[[bytes], bytes]]


class FakeServer:
    """
    Send function for ``FunctionTransport`` answering from a path -> response
    table and recording every call.
    """

    def __init__(self, routes: Dict[str, Response]):
        self.routes = routes
        self.calls: List[Tuple[HttpMethod, str, bytes]] = []

    async def __call__(self, method: HttpMethod, url: str, body: bytes) -> bytes:
        self.calls.append((method, url, body))
        assert url.startswith(BASE_URL), url
        response = self.routes[url[len(BASE_URL):]]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(body)
        return response

    @property
    def paths(self) -> List[str]:
        return [url[len(BASE_URL):] for _, url, _ in self.calls]


@pytest.fixture
def make_client() -> Callable[[Dict[str, Response]], Tuple[MempoolClient, FakeServer]]:
    def factory(routes: Dict[str, Response]) -> Tuple[MempoolClient, FakeServer]:
        server = FakeServer(routes)
        return MempoolClient(BASE_URL, FunctionTransport(server)), server

    return factory
