"""Shared fixtures: an in-memory Qtum node for transformer tests."""

from decimal import Decimal

import pytest

from typing import Any

import base58

from src.helpers.rpc import QtumRPCError
from src.qtum.models import (
    Block,
    BlockHeader,
    DecodedRawTransaction,
    RawTransaction,
    Transaction,
    TransactionOut,
)


QTUM_TESTNET_VERSION = 0x78

SENDER_HEX = "7926223070547d2d15b2ef5e7383e541c338ffe9"
RECEIVER_HEX = "1b3f8b2de2f0c8b5a52f0d5a5b8e3b4f0a2c9d11"
MINER_HEX = "aa11bb22cc33dd44ee55ff6600778899aabbccdd"
CONTRACT_HEX = "1e6f89d7399081b4f8f8aa1ae2805a5efff2f960"
CALL_DATA = "a9059cbb0000000000000000000000000000000000000000000000000000000000000001"


def qtum_address(hex_address: str) -> str:
    """Encode a 20-byte hex address as a Qtum testnet base58check address."""
    payload = bytes([QTUM_TESTNET_VERSION]) + bytes.fromhex(hex_address)
    return base58.b58encode_check(payload).decode()


def block_hash(height: int) -> str:
    return f"{0xB10C0000 + height:064x}"


def txid(n: int) -> str:
    return f"{0x7A000000 + n:064x}"


def vout(
    n: int,
    value: str,
    script_type: str,
    address: str | None = None,
    asm: str = "",
) -> dict[str, Any]:
    script: dict[str, Any] = {"asm": asm, "hex": "", "type": script_type}
    if address is not None:
        script["addresses"] = [address]
    return {"value": Decimal(value), "n": n, "scriptPubKey": script}


class FakeQtumNode:
    """Stands in for QtumRPCClient; records every call."""

    def __init__(self) -> None:
        self.headers: dict[str, dict[str, Any]] = {}
        self.blocks: dict[str, dict[str, Any]] = {}
        self.heights: dict[int, str] = {}
        self.wallet: dict[str, dict[str, Any]] = {}
        self.raw: dict[str, dict[str, Any]] = {}
        self.decoded: dict[str, dict[str, Any]] = {}
        self.tx_outs: dict[tuple[str, int], dict[str, Any]] = {}
        self.failures: dict[tuple[str, str], QtumRPCError] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    # chain building

    def add_block(
        self,
        height: int,
        txids: list[str],
        *,
        nonce: int = 42,
        previous: str | None = None,
    ) -> str:
        bh = block_hash(height)
        header: dict[str, Any] = {
            "hash": bh,
            "height": height,
            "time": 1_600_000_000 + height * 128,
            "nonce": nonce,
            "difficulty": 3.5 + height,
            "hashStateRoot": f"{0x5747E000 + height:064x}",
        }
        if height > 0:
            header["previousblockhash"] = (
                previous if previous is not None else block_hash(height - 1)
            )
        self.headers[bh] = header
        self.blocks[bh] = {
            "hash": bh,
            "height": height,
            "size": 200 + height,
            "merkleroot": f"{0x3E4C1E00 + height:064x}",
            "nonce": nonce,
            "tx": txids,
        }
        self.heights[height] = bh
        return bh

    def add_wallet_tx(
        self,
        tx_id: str,
        decoded: dict[str, Any],
        *,
        block: str = "",
        index: int = 0,
        generated: bool = False,
        labels: list[str] | None = None,
    ) -> None:
        raw_hex = f"0200{tx_id}"
        self.wallet[tx_id] = {
            "txid": tx_id,
            "hex": raw_hex,
            "blockhash": block,
            "blockindex": index,
            "generated": generated,
            "details": [{"label": label} for label in labels or []],
        }
        self.decoded[raw_hex] = {"txid": tx_id, **decoded}
        self.raw[tx_id] = {
            "txid": tx_id,
            "hex": raw_hex,
            "blockhash": block,
            **decoded,
        }

    def add_raw_tx(
        self,
        tx_id: str,
        decoded: dict[str, Any],
        *,
        block: str = "",
    ) -> None:
        self.raw[tx_id] = {
            "txid": tx_id,
            "hex": f"0200{tx_id}",
            "blockhash": block,
            **decoded,
        }

    def fail(
        self,
        method: str,
        key: str,
        code: int = -1,
        message: str = "boom",
    ) -> None:
        self.failures[method, key] = QtumRPCError(method, code, message)

    def _check(self, method: str, key: str, *args: Any) -> None:
        self.calls.append((method, (key, *args)))
        if (method, key) in self.failures:
            raise self.failures[method, key]

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    # QtumRPCClient interface

    async def get_block_count(self) -> int:
        self._check("getblockcount", "")
        return max(self.heights)

    async def get_block_hash(self, height: int) -> str:
        self._check("getblockhash", str(height))
        if height not in self.heights:
            raise QtumRPCError("getblockhash", -8, "Block height out of range")
        return self.heights[height]

    async def get_block_header(self, bh: str) -> BlockHeader:
        self._check("getblockheader", bh)
        if bh not in self.headers:
            raise QtumRPCError("getblockheader", -5, "Block not found")
        return BlockHeader.model_validate(self.headers[bh])

    async def get_block(self, bh: str) -> Block:
        self._check("getblock", bh)
        if bh not in self.blocks:
            raise QtumRPCError("getblock", -5, "Block not found")
        return Block.model_validate(self.blocks[bh])

    async def get_transaction(self, tx_id: str) -> Transaction:
        self._check("gettransaction", tx_id)
        if tx_id not in self.wallet:
            raise QtumRPCError(
                "gettransaction", -5, "Invalid or non-wallet transaction id"
            )
        return Transaction.model_validate(self.wallet[tx_id])

    async def get_raw_transaction(
        self,
        tx_id: str,
        *,
        verbose: bool = True,
    ) -> RawTransaction:
        self._check("getrawtransaction", tx_id)
        if tx_id not in self.raw:
            raise QtumRPCError("getrawtransaction", -5, "No such transaction")
        return RawTransaction.model_validate(self.raw[tx_id])

    async def decode_raw_transaction(self, raw_hex: str) -> DecodedRawTransaction:
        self._check("decoderawtransaction", raw_hex)
        if raw_hex not in self.decoded:
            raise QtumRPCError("decoderawtransaction", -22, "TX decode failed")
        return DecodedRawTransaction.model_validate(self.decoded[raw_hex])

    async def get_transaction_out(
        self,
        tx_id: str,
        n: int,
        *,
        include_mempool: bool = True,
    ) -> TransactionOut | None:
        self._check("gettxout", tx_id, n, include_mempool)
        data = self.tx_outs.get((tx_id, n))
        return TransactionOut.model_validate(data) if data else None


def plain_transfer(prev_txid: str, prev_vout: int = 1) -> dict[str, Any]:
    return {
        "vin": [{"txid": prev_txid, "vout": prev_vout, "sequence": 4294967295}],
        "vout": [
            vout(0, "1.5", "pubkeyhash", qtum_address(RECEIVER_HEX)),
            vout(1, "0.25", "pubkeyhash", qtum_address(SENDER_HEX)),
        ],
    }


def coinbase_outputs() -> dict[str, Any]:
    return {
        "vin": [{"coinbase": "510101", "sequence": 4294967295}],
        "vout": [
            vout(0, "0", "nonstandard"),
            vout(1, "4", "pubkey", qtum_address(MINER_HEX)),
        ],
    }


def contract_call(*, sender: bool = False) -> dict[str, Any]:
    asm = f"4 250000 40 {CALL_DATA} {CONTRACT_HEX} OP_CALL"
    if sender:
        asm = f"1 {SENDER_HEX} 3045022100ab OP_SENDER " + asm
    return {
        "vin": [{"txid": txid(900), "vout": 0}],
        "vout": [
            vout(0, "0.1", "call", asm=asm),
            vout(1, "0.9", "pubkeyhash", qtum_address(SENDER_HEX)),
        ],
    }


@pytest.fixture
def node() -> FakeQtumNode:
    """A small chain.

    * height 0: genesis
    * height 1: coinbase, plain transfer
    * height 2: reward tx unknown to the wallet, contract call
    * pending: one plain transfer
    """
    chain = FakeQtumNode()
    chain.add_block(0, [txid(0)], nonce=2083236893)

    prev = txid(100)
    chain.add_raw_tx(
        prev,
        {
            "vin": [],
            "vout": [
                vout(0, "9", "pubkeyhash", qtum_address(MINER_HEX)),
                vout(1, "2", "pubkeyhash", qtum_address(SENDER_HEX)),
            ],
        },
    )

    b1 = chain.add_block(1, [txid(10), txid(11)])
    chain.add_wallet_tx(
        txid(10),
        coinbase_outputs(),
        block=b1,
        index=0,
        generated=True,
        labels=["mined"],
    )
    chain.add_wallet_tx(txid(11), plain_transfer(prev), block=b1, index=1)

    b2 = chain.add_block(2, [txid(20), txid(21)])
    chain.add_raw_tx(txid(20), coinbase_outputs(), block=b2)
    chain.tx_outs[txid(20), 1] = {
        "bestblock": b2,
        "confirmations": 1,
        "value": Decimal("4"),
        "scriptPubKey": {
            "asm": "",
            "type": "pubkey",
            "addresses": [qtum_address(MINER_HEX)],
        },
        "coinbase": True,
    }
    chain.add_wallet_tx(txid(21), contract_call(), block=b2, index=1)

    chain.add_wallet_tx(txid(30), plain_transfer(prev))
    return chain
