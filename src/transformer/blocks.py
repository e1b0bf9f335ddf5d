"""Block transformer: Qtum blocks to ``eth_getBlockBy*`` responses."""

import asyncio

from src.eth.constants import DEFAULT_BLOCK_GAS_LIMIT, ZERO_ADDRESS, ZERO_HASH
from src.eth.models import EthBlock, EthTransaction
from src.helpers.config import get_tx_fetch_concurrency
from src.helpers.logging import get_logger
from src.helpers.parsers import (
    add_hex_prefix,
    encode_hex_uint,
    format_nonce,
    remove_hex_prefix,
)
from src.helpers.rpc import QtumRPCClient
from src.qtum.models import Block, BlockHeader
from src.transformer.errors import (
    UPSTREAM_ERRORS,
    InvalidParamsError,
    ProxyError,
    TransactionLookupError,
    UpstreamLookupError,
)
from src.transformer.transactions import BlockLink, get_transaction_by_hash


logger = get_logger(__name__)

LATEST_TAGS = frozenset({"latest", "pending"})
EARLIEST_TAG = "earliest"


async def resolve_block_number(rpc: QtumRPCClient, selector: str | int) -> int:
    """Resolve a block number parameter to a concrete height.

    Args:
        rpc: Qtum RPC client
        selector: Height as int, ``0x`` hex or decimal string, or one of
            ``latest``, ``pending``, ``earliest``

    Returns:
        Block height

    Raises:
        InvalidParamsError: If the selector is not a valid block number
        UpstreamLookupError: If the chain tip lookup fails
    """
    if isinstance(selector, bool):
        msg = f"invalid block number {selector!r}"
        raise InvalidParamsError(msg)

    if isinstance(selector, int):
        height = selector
    elif selector in LATEST_TAGS:
        try:
            return await rpc.get_block_count()
        except UPSTREAM_ERRORS as err:
            raise UpstreamLookupError.wrap("get block count", err) from err
    elif selector == EARLIEST_TAG:
        return 0
    else:
        try:
            height = (
                int(selector, 16)
                if selector[:2] in ("0x", "0X")
                else int(selector, 10)
            )
        except ValueError:
            msg = f"invalid block number {selector!r}"
            raise InvalidParamsError(msg) from None

    if height < 0:
        msg = f"invalid block number {selector!r}"
        raise InvalidParamsError(msg)
    return height


async def _fetch_header(rpc: QtumRPCClient, block_hash: str) -> BlockHeader:
    try:
        return await rpc.get_block_header(block_hash)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get block header", err) from err


async def _fetch_block(rpc: QtumRPCClient, block_hash: str) -> Block:
    try:
        return await rpc.get_block(block_hash)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get block", err) from err


async def get_block_transactions(
    rpc: QtumRPCClient,
    header: BlockHeader,
    tx_hashes: list[str],
    *,
    concurrency: int,
) -> list[EthTransaction]:
    """Transform every transaction of a block, keeping block order.

    At most ``concurrency`` lookups run at once. The first failure cancels
    the remaining lookups and is raised as TransactionLookupError.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch(index: int, tx_hash: str) -> EthTransaction:
        async with semaphore:
            try:
                return await get_transaction_by_hash(
                    rpc,
                    tx_hash,
                    block=BlockLink(header.hash, header.height, index),
                )
            except ProxyError as err:
                raise TransactionLookupError(tx_hash, index, err) from err

    tasks = [
        asyncio.create_task(fetch(index, tx_hash))
        for index, tx_hash in enumerate(tx_hashes)
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def build_block(
    rpc: QtumRPCClient,
    block_hash: str,
    *,
    full_transactions: bool,
    concurrency: int | None = None,
) -> EthBlock:
    """Build the Ethereum view of the block with ``block_hash``.

    Args:
        rpc: Qtum RPC client
        block_hash: Block hash without ``0x``
        full_transactions: Inline transaction objects instead of hashes
        concurrency: Transaction lookup limit, defaults to configuration

    Returns:
        EthBlock for the block
    """
    header, block = await asyncio.gather(
        _fetch_header(rpc, block_hash), _fetch_block(rpc, block_hash)
    )

    difficulty = encode_hex_uint(int(header.difficulty))
    eth_block = EthBlock(
        hash=add_hex_prefix(header.hash),
        number=encode_hex_uint(block.height),
        parent_hash=ZERO_HASH,
        nonce=format_nonce(block.nonce),
        # Qtum has a single merkle root for transactions and receipts
        transactions_root=add_hex_prefix(block.merkle_root),
        receipts_root=add_hex_prefix(block.merkle_root),
        state_root=add_hex_prefix(header.hash_state_root),
        miner=ZERO_ADDRESS,
        difficulty=difficulty,
        total_difficulty=difficulty,
        size=encode_hex_uint(block.size),
        timestamp=encode_hex_uint(header.time),
    )

    if not header.is_genesis_block():
        if header.previous_block_hash:
            eth_block.parent_hash = add_hex_prefix(header.previous_block_hash)
        else:
            logger.warning(
                "Block %s at height %d has no previous hash, using zero hash",
                header.hash,
                header.height,
            )

    if not full_transactions:
        eth_block.transactions = [add_hex_prefix(tx_hash) for tx_hash in block.tx]
        return eth_block

    eth_block.gas_limit = DEFAULT_BLOCK_GAS_LIMIT
    if header.height == 0:
        # Genesis transactions cannot be looked up
        eth_block.transactions = []
        return eth_block

    if concurrency is None:
        try:
            concurrency = get_tx_fetch_concurrency()
        except ValueError as err:
            msg = f"invalid configuration: {err}"
            raise ProxyError(msg) from err

    eth_block.transactions = await get_block_transactions(
        rpc, header, block.tx, concurrency=concurrency
    )
    return eth_block


async def get_block_by_hash(
    rpc: QtumRPCClient,
    block_hash: str,
    *,
    full_transactions: bool,
    concurrency: int | None = None,
) -> EthBlock:
    """Handle ``eth_getBlockByHash``."""
    return await build_block(
        rpc,
        remove_hex_prefix(block_hash),
        full_transactions=full_transactions,
        concurrency=concurrency,
    )


async def get_block_by_number(
    rpc: QtumRPCClient,
    block_number: str | int,
    *,
    full_transactions: bool,
    concurrency: int | None = None,
) -> EthBlock:
    """Handle ``eth_getBlockByNumber``."""
    height = await resolve_block_number(rpc, block_number)
    try:
        block_hash = await rpc.get_block_hash(height)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap("get block hash", err) from err

    logger.debug("Block number %s resolved to %s", block_number, block_hash)
    return await build_block(
        rpc,
        block_hash,
        full_transactions=full_transactions,
        concurrency=concurrency,
    )


__all__ = [
    "build_block",
    "get_block_by_hash",
    "get_block_by_number",
    "get_block_transactions",
    "resolve_block_number",
]
