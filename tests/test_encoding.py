"""Tests for hex, integer and consensus decoding"""

import hashlib

import pytest
from bitcoin.core import CBlock, CBlockHeader, CTransaction, b2lx, lx

from mempool_api.encoding import (
    MerkleBlock,
    decode_consensus,
    decode_consensus_hex,
    hash_from_hex,
    hash_to_hex,
    parse_u32,
    scripthash,
    serialize_hex,
)
from mempool_api.errors import (
    DecodeError,
    DecodeHexError,
    HexToArrayError,
    MempoolError,
    ParseIntError,
)

from .conftest import (
    GENESIS_BLOCK_HEX,
    GENESIS_COINBASE_HEX,
    GENESIS_HASH,
    GENESIS_HEADER_HEX,
    GENESIS_TXID,
    P2WPKH_SCRIPT_HEX,
    P2WPKH_SCRIPTHASH,
)

# Header, one transaction, one hash (the coinbase txid), flag byte 0x01
GENESIS_MERKLE_BLOCK_HEX = (
    GENESIS_HEADER_HEX
    + "01000000"
    + "01"
    + "3ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa4b1e5e4a"
    + "01"
    + "01"
)


class TestHashes:
    def test_hash_from_hex_reverses_to_internal_order(self):
        value = hash_from_hex(GENESIS_HASH)
        assert value == lx(GENESIS_HASH)
        assert value[-1] == 0
        assert hash_to_hex(value) == GENESIS_HASH

    def test_surrounding_whitespace_is_ignored(self):
        assert hash_from_hex(f"{GENESIS_HASH}\n") == lx(GENESIS_HASH)

    def test_uppercase_accepted(self):
        assert hash_from_hex(GENESIS_HASH.upper()) == lx(GENESIS_HASH)

    @pytest.mark.parametrize("text", ["zz" * 32, GENESIS_HASH[:-1], GENESIS_HASH + "00", ""])
    def test_invalid_hash(self, text):
        with pytest.raises(HexToArrayError):
            hash_from_hex(text)

    def test_hash_to_hex_requires_32_bytes(self):
        with pytest.raises(ValueError):
            hash_to_hex(b"\x00" * 31)


class TestParseU32:
    @pytest.mark.parametrize(
        "text, expected",
        [("864231", 864231), ("0", 0), ("864231\n", 864231), ("4294967295", 2**32 - 1)],
    )
    def test_valid(self, text, expected):
        assert parse_u32(text) == expected

    @pytest.mark.parametrize("text", ["", "-1", "+5", "12a", "4294967296", "1_000", "1.5"])
    def test_invalid(self, text):
        with pytest.raises(ParseIntError):
            parse_u32(text)

    def test_errors_share_base_class(self):
        with pytest.raises(MempoolError):
            parse_u32("nope")


class TestConsensus:
    """Consensus (de)serialisation through python-bitcoinlib"""

    def test_transaction_from_hex(self):
        tx = decode_consensus_hex(CTransaction, GENESIS_COINBASE_HEX)
        assert b2lx(tx.GetTxid()) == GENESIS_TXID
        assert tx.vout[0].nValue == 50 * 100_000_000
        assert serialize_hex(tx) == GENESIS_COINBASE_HEX

    def test_header_from_hex(self):
        header = decode_consensus_hex(CBlockHeader, GENESIS_HEADER_HEX)
        assert b2lx(header.GetHash()) == GENESIS_HASH

    def test_block_from_raw(self):
        block = decode_consensus(CBlock, bytes.fromhex(GENESIS_BLOCK_HEX))
        assert b2lx(block.GetHash()) == GENESIS_HASH
        assert len(block.vtx) == 1
        assert b2lx(block.vtx[0].GetTxid()) == GENESIS_TXID

    def test_invalid_hex(self):
        with pytest.raises(DecodeHexError):
            decode_consensus_hex(CTransaction, "not hex")

    def test_truncated_hex(self):
        with pytest.raises(DecodeHexError):
            decode_consensus_hex(CTransaction, GENESIS_COINBASE_HEX[:40])

    def test_trailing_data_rejected(self):
        with pytest.raises(DecodeHexError):
            decode_consensus_hex(CBlockHeader, GENESIS_HEADER_HEX + "00")

    def test_truncated_raw(self):
        with pytest.raises(DecodeError):
            decode_consensus(CBlock, bytes.fromhex(GENESIS_BLOCK_HEX)[:100])


class TestMerkleBlock:
    def test_decode(self):
        merkle_block = decode_consensus_hex(MerkleBlock, GENESIS_MERKLE_BLOCK_HEX)
        assert b2lx(merkle_block.header.GetHash()) == GENESIS_HASH
        assert merkle_block.total_transactions == 1
        assert merkle_block.hashes == (lx(GENESIS_TXID),)
        assert merkle_block.flags == b"\x01"

    def test_serialize(self):
        merkle_block = decode_consensus_hex(MerkleBlock, GENESIS_MERKLE_BLOCK_HEX)
        assert serialize_hex(merkle_block) == GENESIS_MERKLE_BLOCK_HEX

    def test_immutable(self):
        merkle_block = MerkleBlock()
        with pytest.raises(AttributeError):
            merkle_block.total_transactions = 3

    def test_truncated(self):
        with pytest.raises(DecodeHexError):
            decode_consensus_hex(MerkleBlock, GENESIS_MERKLE_BLOCK_HEX[:-2])


class TestScripthash:
    def test_known_value(self):
        assert scripthash(bytes.fromhex(P2WPKH_SCRIPT_HEX)) == P2WPKH_SCRIPTHASH

    def test_matches_sha256_and_is_deterministic(self):
        script = bytes.fromhex("76a91489abcdefabbaabbaabbaabbaabbaabbaabbaabba88ac")
        first = scripthash(script)
        assert first == scripthash(script)
        assert first == hashlib.sha256(script).hexdigest()
        assert first == first.lower()
        assert len(first) == 64
