"""JSON-RPC method dispatch for the proxied Ethereum methods."""

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from src.helpers.logging import get_logger
from src.helpers.parsers import remove_hex_prefix
from src.helpers.rpc import QtumRPCClient
from src.helpers.rpc_models import JsonRpcError, JsonRpcRequest, JsonRpcResponse
from src.transformer.blocks import get_block_by_hash, get_block_by_number
from src.transformer.errors import (
    INVALID_REQUEST_CODE,
    InvalidParamsError,
    MethodNotFoundError,
    ProxyError,
)
from src.transformer.transactions import get_transaction_by_hash


logger = get_logger(__name__)

type Handler = Callable[[QtumRPCClient, list[Any]], Awaitable[Any]]


def _hash_param(params: list[Any], position: int, name: str) -> str:
    if len(params) <= position or not isinstance(params[position], str):
        msg = f"missing {name} parameter"
        raise InvalidParamsError(msg)

    value = remove_hex_prefix(params[position])
    if not value:
        msg = f"{name} is empty"
        raise InvalidParamsError(msg)
    return value


def _full_transaction_param(params: list[Any]) -> bool:
    if len(params) < 2:
        return False
    if not isinstance(params[1], bool):
        msg = "fullTransaction parameter must be a boolean"
        raise InvalidParamsError(msg)
    return params[1]


async def eth_get_block_by_hash(rpc: QtumRPCClient, params: list[Any]) -> Any:
    block = await get_block_by_hash(
        rpc,
        _hash_param(params, 0, "block hash"),
        full_transactions=_full_transaction_param(params),
    )
    return block.to_wire()


async def eth_get_block_by_number(rpc: QtumRPCClient, params: list[Any]) -> Any:
    if not params or not isinstance(params[0], (str, int)):
        msg = "missing block number parameter"
        raise InvalidParamsError(msg)

    block = await get_block_by_number(
        rpc,
        params[0],
        full_transactions=_full_transaction_param(params),
    )
    return block.to_wire()


async def eth_get_transaction_by_hash(rpc: QtumRPCClient, params: list[Any]) -> Any:
    tx = await get_transaction_by_hash(
        rpc, _hash_param(params, 0, "transaction hash")
    )
    return tx.to_wire()


HANDLERS: dict[str, Handler] = {
    "eth_getBlockByHash": eth_get_block_by_hash,
    "eth_getBlockByNumber": eth_get_block_by_number,
    "eth_getTransactionByHash": eth_get_transaction_by_hash,
}


class ETHProxy:
    """Dispatches Ethereum JSON-RPC requests to the Qtum transformers."""

    def __init__(
        self, rpc: QtumRPCClient, handlers: dict[str, Handler] | None = None
    ) -> None:
        self.rpc = rpc
        self.handlers = handlers if handlers is not None else dict(HANDLERS)

    def methods(self) -> list[str]:
        """Names of the supported methods."""
        return sorted(self.handlers)

    async def request(self, method: str, params: list[Any]) -> Any:
        """Run one method and return its JSON result.

        Raises:
            MethodNotFoundError: If no handler is registered for ``method``
            ProxyError: If the transformation fails
        """
        handler = self.handlers.get(method)
        if handler is None:
            msg = f"method {method} is not supported"
            raise MethodNotFoundError(msg)
        return await handler(self.rpc, params)

    async def handle(self, payload: dict[str, Any]) -> JsonRpcResponse:
        """Answer a raw JSON-RPC request with a result or an error object."""
        try:
            req = JsonRpcRequest.model_validate(payload)
        except ValidationError as err:
            return JsonRpcResponse(
                id=payload.get("id") if isinstance(payload, dict) else None,
                error=JsonRpcError(
                    code=INVALID_REQUEST_CODE, message=f"invalid request: {err}"
                ),
            )

        try:
            result = await self.request(req.method, req.params)
        except ProxyError as err:
            logger.warning("%s failed: %s", req.method, err)
            return JsonRpcResponse(
                id=req.id,
                error=JsonRpcError(code=err.code, message=err.message, data=err.data),
            )

        return JsonRpcResponse(id=req.id, result=result)


__all__ = [
    "HANDLERS",
    "ETHProxy",
    "Handler",
]
