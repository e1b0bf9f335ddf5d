"""Qtum node JSON-RPC client utilities."""

from typing import Any

import itertools

import httpx

from src.helpers.constants import DEFAULT_TIMEOUT, QTUM_TX_NOT_FOUND_CODE
from src.helpers.http import create_http_client, retry_with_backoff
from src.helpers.logging import get_logger
from src.qtum.models import (
    Block,
    BlockHeader,
    DecodedRawTransaction,
    RawTransaction,
    Transaction,
    TransactionOut,
)


logger = get_logger(__name__)


class QtumRPCError(ValueError):
    """Error object returned by the Qtum node."""

    def __init__(self, method: str, code: int, message: str) -> None:
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"{method}: [code: {code}] {message}")

    def is_not_found(self) -> bool:
        """Return True for the "no such transaction" error code."""
        return self.code == QTUM_TX_NOT_FOUND_CODE


class QtumRPCClient:
    """Qtum node JSON-RPC client."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        auth: tuple[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize RPC client.

        Args:
            rpc_url: Qtum JSON-RPC endpoint URL
            timeout: Default timeout for requests in seconds
            auth: Optional (user, password) pair for HTTP basic auth
            client: Optional pre-built HTTP client; one is created otherwise

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout
        self.client = client or create_http_client(timeout=timeout, auth=auth)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "QtumRPCClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    @retry_with_backoff()
    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        return await self.client.post(
            self.rpc_url, json=payload, timeout=self.timeout
        )

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Make a single JSON-RPC call.

        The node answers RPC errors with a non-200 status and a JSON body,
        so the body is parsed before the HTTP status is considered.

        Args:
            method: RPC method name (e.g., "getblockheader")
            params: Method parameters list

        Returns:
            RPC result value

        Raises:
            httpx.HTTPError: If the HTTP request fails without a JSON body
            QtumRPCError: If the RPC response contains an error
        """
        payload = {
            "jsonrpc": "1.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("-> %s %s", method, payload["params"])

        response = await self._post(payload)
        try:
            result = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        error = result.get("error") if isinstance(result, dict) else None
        if error:
            raise QtumRPCError(
                method, int(error.get("code", 0)), str(error.get("message", ""))
            )
        response.raise_for_status()

        return result.get("result")

    async def get_block_count(self) -> int:
        """Get the height of the chain tip."""
        return int(await self.call("getblockcount"))

    async def get_block_hash(self, height: int) -> str:
        """Get the hash of the block at ``height``."""
        return str(await self.call("getblockhash", [height]))

    async def get_block_header(self, block_hash: str) -> BlockHeader:
        """Get a block header by hash."""
        result = await self.call("getblockheader", [block_hash])
        return BlockHeader.model_validate(result)

    async def get_block(self, block_hash: str) -> Block:
        """Get a block with its transaction id list."""
        result = await self.call("getblock", [block_hash])
        return Block.model_validate(result)

    async def get_transaction(self, txid: str) -> Transaction:
        """Get a wallet transaction.

        Raises:
            QtumRPCError: With code -5 when the wallet does not know the tx
        """
        result = await self.call("gettransaction", [txid])
        return Transaction.model_validate(result)

    async def get_raw_transaction(
        self, txid: str, *, verbose: bool = True
    ) -> RawTransaction:
        """Get any transaction from the node's index in verbose form."""
        result = await self.call("getrawtransaction", [txid, verbose])
        return RawTransaction.model_validate(result)

    async def decode_raw_transaction(self, raw_hex: str) -> DecodedRawTransaction:
        """Decode raw transaction hex."""
        result = await self.call("decoderawtransaction", [raw_hex])
        return DecodedRawTransaction.model_validate(result)

    async def get_transaction_out(
        self, txid: str, vout: int, *, include_mempool: bool = True
    ) -> TransactionOut | None:
        """Get an unspent output; None when it is spent or unknown."""
        result = await self.call("gettxout", [txid, vout, include_mempool])
        if result is None:
            return None
        return TransactionOut.model_validate(result)


__all__ = [
    "QtumRPCClient",
    "QtumRPCError",
]
