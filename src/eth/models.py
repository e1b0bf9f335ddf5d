"""Ethereum JSON-RPC response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.eth.constants import (
    EMPTY_LOGS_BLOOM,
    EMPTY_SIGNATURE_FIELD,
    EMPTY_UNCLES_HASH,
    EXTRA_DATA,
    ZERO_QUANTITY,
)


class EthTransaction(BaseModel):
    """Response of ``eth_getTransactionByHash``.

    Block linkage fields stay None for pending transactions.
    """

    hash: str
    nonce: str = ZERO_QUANTITY
    block_hash: str | None = Field(default=None, alias="blockHash")
    block_number: str | None = Field(default=None, alias="blockNumber")
    transaction_index: str | None = Field(default=None, alias="transactionIndex")
    from_: str = Field(..., alias="from")
    to: str | None = None
    value: str = ZERO_QUANTITY
    gas: str = ZERO_QUANTITY
    gas_price: str = Field(default=ZERO_QUANTITY, alias="gasPrice")
    input: str = ""
    v: str = EMPTY_SIGNATURE_FIELD
    r: str = EMPTY_SIGNATURE_FIELD
    s: str = EMPTY_SIGNATURE_FIELD

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with Ethereum field names."""
        return self.model_dump(by_alias=True)


class EthBlock(BaseModel):
    """Response of ``eth_getBlockByHash`` / ``eth_getBlockByNumber``."""

    hash: str
    number: str
    parent_hash: str = Field(..., alias="parentHash")
    nonce: str
    sha3_uncles: str = Field(default=EMPTY_UNCLES_HASH, alias="sha3Uncles")
    logs_bloom: str = Field(default=EMPTY_LOGS_BLOOM, alias="logsBloom")
    transactions_root: str = Field(..., alias="transactionsRoot")
    state_root: str = Field(..., alias="stateRoot")
    receipts_root: str = Field(..., alias="receiptsRoot")
    miner: str
    difficulty: str
    total_difficulty: str = Field(..., alias="totalDifficulty")
    extra_data: str = Field(default=EXTRA_DATA, alias="extraData")
    size: str
    gas_limit: str | None = Field(default=None, alias="gasLimit")
    gas_used: str = Field(default=ZERO_QUANTITY, alias="gasUsed")
    timestamp: str
    transactions: list[str] | list[EthTransaction] = Field(default_factory=list)
    uncles: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with Ethereum field names."""
        return self.model_dump(by_alias=True)


__all__ = [
    "EthBlock",
    "EthTransaction",
]
