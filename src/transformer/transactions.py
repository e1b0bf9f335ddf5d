"""Transaction transformer: Qtum transactions to ``eth_getTransactionByHash``.

A transaction found by the wallet lookup is decoded and classified as one of

* ``ContractCall``: an output script invokes a contract; sender, receiver,
  payload and gas come from that script.
* ``CoinbaseTransfer``: a generated (block reward) transaction; the sender is
  the zero address.
* ``PlainTransfer``: a value transfer; the sender owns the output spent by the
  first input.

Transactions unknown to the wallet (error code -5) are rebuilt from
``getrawtransaction`` as reward transactions.
"""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from src.eth.constants import EMPTY_INPUT, ZERO_ADDRESS, ZERO_QUANTITY
from src.eth.models import EthTransaction
from src.helpers.logging import get_logger
from src.helpers.parsers import add_hex_prefix, encode_hex_uint, remove_hex_prefix
from src.helpers.rpc import QtumRPCClient, QtumRPCError
from src.qtum.models import ContractInfo, DecodedRawTransaction, Transaction
from src.transformer.addresses import (
    find_receiver_address,
    format_qtum_amount,
    get_sender_address,
)
from src.transformer.errors import (
    UPSTREAM_ERRORS,
    DecodeError,
    UpstreamLookupError,
)


logger = get_logger(__name__)


class BlockLink(NamedTuple):
    """Position of a transaction in the chain."""

    hash: str
    height: int
    index: int


class ContractCall(BaseModel):
    """Transaction whose outputs invoke a contract."""

    info: ContractInfo

    model_config = ConfigDict(frozen=True)


class CoinbaseTransfer(BaseModel):
    """Generated block reward transaction."""

    label: str = ""

    model_config = ConfigDict(frozen=True)


class PlainTransfer(BaseModel):
    """Ordinary value transfer between addresses."""

    label: str = ""

    model_config = ConfigDict(frozen=True)


type TransactionKind = ContractCall | CoinbaseTransfer | PlainTransfer


def classify_transaction(
    tx: Transaction, decoded: DecodedRawTransaction
) -> TransactionKind:
    """Classify a wallet transaction by its decoded form.

    Raises:
        DecodeError: If an output carries a malformed contract script
    """
    try:
        info = decoded.extract_contract_info()
    except ValueError as err:
        msg = f"couldn't extract contract info: {err}"
        raise DecodeError(msg) from err

    if info is not None:
        return ContractCall(info=info)

    label = tx.details[0].label if tx.details else ""
    if tx.generated:
        return CoinbaseTransfer(label=label)
    return PlainTransfer(label=label)


async def get_block_number_by_hash(rpc: QtumRPCClient, block_hash: str) -> int:
    """Get the height of the block with ``block_hash``."""
    try:
        header = await rpc.get_block_header(block_hash)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get block number by hash", err) from err
    return header.height


async def get_transaction_index_in_block(
    rpc: QtumRPCClient, tx_hash: str, block_hash: str
) -> int:
    """Find the position of ``tx_hash`` in its block's transaction list."""
    try:
        block = await rpc.get_block(block_hash)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get transaction index in block", err) from err

    try:
        return block.tx.index(tx_hash)
    except ValueError:
        msg = f"transaction {tx_hash} is not listed in block {block_hash}"
        raise UpstreamLookupError(msg) from None


def _apply_block_link(eth_tx: EthTransaction, link: BlockLink) -> None:
    eth_tx.block_hash = add_hex_prefix(link.hash)
    eth_tx.block_number = encode_hex_uint(link.height)
    eth_tx.transaction_index = encode_hex_uint(link.index)


async def get_transaction_by_hash(
    rpc: QtumRPCClient,
    tx_hash: str,
    *,
    block: BlockLink | None = None,
) -> EthTransaction:
    """Build the Ethereum view of a Qtum transaction.

    Args:
        rpc: Qtum RPC client
        tx_hash: Transaction id, with or without ``0x``
        block: Known position of the transaction; skips the block lookups

    Returns:
        EthTransaction for the transaction

    Raises:
        UpstreamLookupError: If a Qtum lookup fails
        DecodeError: If the raw transaction cannot be decoded
        AddressResolutionError: If sender or receiver cannot be resolved
        FormatError: If the amount cannot be converted
    """
    tx_hash = remove_hex_prefix(tx_hash)

    try:
        qtum_tx = await rpc.get_transaction(tx_hash)
    except QtumRPCError as err:
        if not err.is_not_found():
            raise UpstreamLookupError.wrap("get transaction", err) from err
        logger.info("Transaction %s unknown to wallet, using raw lookup", tx_hash)
        return await get_reward_transaction_by_hash(rpc, tx_hash, block=block)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get transaction", err) from err

    try:
        decoded = await rpc.decode_raw_transaction(qtum_tx.hex)
    except UPSTREAM_ERRORS as err:
        msg = f"couldn't decode raw transaction {tx_hash}: {err}"
        raise DecodeError(msg) from err

    kind = classify_transaction(qtum_tx, decoded)
    logger.debug("Transaction %s classified as %s", tx_hash, type(kind).__name__)

    eth_tx = EthTransaction(
        hash=add_hex_prefix(decoded.txid),
        from_=ZERO_ADDRESS,
        value=format_qtum_amount(decoded.calc_amount()),
    )

    if isinstance(kind, ContractCall):
        eth_tx.from_ = add_hex_prefix(kind.info.from_)
        eth_tx.to = add_hex_prefix(kind.info.to) if kind.info.to else None
        eth_tx.input = add_hex_prefix(kind.info.user_input)
        eth_tx.gas = encode_hex_uint(kind.info.gas_used)
        eth_tx.gas_price = ZERO_QUANTITY
    else:
        if isinstance(kind, PlainTransfer):
            eth_tx.from_ = await get_sender_address(rpc, decoded.vins)
        eth_tx.to = find_receiver_address(decoded.vouts)
        eth_tx.input = kind.label or EMPTY_INPUT
        eth_tx.gas = ZERO_QUANTITY
        eth_tx.gas_price = ZERO_QUANTITY

    if block is not None:
        _apply_block_link(eth_tx, block)
    elif not qtum_tx.is_pending():
        height = await get_block_number_by_hash(rpc, qtum_tx.block_hash)
        _apply_block_link(
            eth_tx, BlockLink(qtum_tx.block_hash, height, qtum_tx.block_index)
        )

    return eth_tx


async def get_reward_transaction_by_hash(
    rpc: QtumRPCClient,
    tx_hash: str,
    *,
    block: BlockLink | None = None,
) -> EthTransaction:
    """Build a reward transaction the wallet lookup does not know.

    The raw lookup exposes no beneficiary, so sender and receiver are the
    zero address.
    """
    try:
        raw_tx = await rpc.get_raw_transaction(tx_hash)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get raw transaction", err) from err

    eth_tx = EthTransaction(
        hash=add_hex_prefix(tx_hash),
        from_=ZERO_ADDRESS,
        to=ZERO_ADDRESS,
        value=format_qtum_amount(raw_tx.calc_amount()),
        gas=ZERO_QUANTITY,
        gas_price=ZERO_QUANTITY,
        input=EMPTY_INPUT,
    )

    if block is not None:
        _apply_block_link(eth_tx, block)
    elif not raw_tx.is_pending():
        index = await get_transaction_index_in_block(rpc, tx_hash, raw_tx.block_hash)
        height = await get_block_number_by_hash(rpc, raw_tx.block_hash)
        _apply_block_link(eth_tx, BlockLink(raw_tx.block_hash, height, index))

    # TODO: read the reward beneficiary from these outputs once a miner
    # address mapping is decided
    for i in range(len(raw_tx.vouts)):
        try:
            tx_out = await rpc.get_transaction_out(
                tx_hash, i, include_mempool=raw_tx.is_pending()
            )
        except UPSTREAM_ERRORS as err:
            raise UpstreamLookupError.wrap("get transaction out", err) from err
        logger.debug("Reward output %s:%d -> %s", tx_hash, i, tx_out)

    return eth_tx


__all__ = [
    "BlockLink",
    "CoinbaseTransfer",
    "ContractCall",
    "PlainTransfer",
    "TransactionKind",
    "classify_transaction",
    "get_block_number_by_hash",
    "get_reward_transaction_by_hash",
    "get_transaction_by_hash",
    "get_transaction_index_in_block",
]
