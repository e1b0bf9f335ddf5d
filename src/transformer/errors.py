"""Error kinds raised while transforming Qtum data into Ethereum responses."""

import httpx
from pydantic import ValidationError

from src.helpers.rpc import QtumRPCError


SERVER_ERROR_CODE = -32000
INVALID_REQUEST_CODE = -32600
INVALID_PARAMS_CODE = -32602
METHOD_NOT_FOUND_CODE = -32601

UPSTREAM_ERRORS: tuple[type[Exception], ...] = (
    QtumRPCError,
    httpx.HTTPError,
    ValidationError,
)
"""Exceptions a Qtum RPC call can raise"""


class ProxyError(Exception):
    """Base class for errors reported to the JSON-RPC caller."""

    code: int = SERVER_ERROR_CODE

    def __init__(self, message: str, *, data: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class UpstreamLookupError(ProxyError):
    """A Qtum RPC call failed; the message names the lookup."""

    @classmethod
    def wrap(cls, lookup: str, err: Exception) -> "UpstreamLookupError":
        """Build the error for ``lookup`` keeping the upstream code."""
        data = {"upstreamCode": err.code} if isinstance(err, QtumRPCError) else None
        return cls(f"couldn't {lookup}: {err}", data=data)


class TransactionLookupError(ProxyError):
    """A transaction of a full block could not be transformed."""

    def __init__(self, tx_hash: str, index: int, cause: ProxyError) -> None:
        super().__init__(
            f"couldn't get transaction {tx_hash} at index {index}: {cause.message}",
            data=cause.data,
        )
        self.tx_hash = tx_hash
        self.index = index


class DecodeError(ProxyError):
    """Raw transaction bytes or scripts could not be decoded."""


class AddressResolutionError(ProxyError):
    """No sender or receiver address could be resolved."""


class FormatError(ProxyError):
    """An amount or numeric field could not be converted."""


class InvalidParamsError(ProxyError):
    """Request parameters are missing or malformed."""

    code = INVALID_PARAMS_CODE


class MethodNotFoundError(ProxyError):
    """No handler is registered for the requested method."""

    code = METHOD_NOT_FOUND_CODE


__all__ = [
    "INVALID_PARAMS_CODE",
    "INVALID_REQUEST_CODE",
    "METHOD_NOT_FOUND_CODE",
    "SERVER_ERROR_CODE",
    "UPSTREAM_ERRORS",
    "AddressResolutionError",
    "DecodeError",
    "FormatError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "ProxyError",
    "TransactionLookupError",
    "UpstreamLookupError",
]
