"""Sender/receiver address and amount resolution for non-contract transactions."""

import re
from decimal import Decimal

import base58

from src.helpers.logging import get_logger
from src.helpers.parsers import add_hex_prefix, encode_hex_uint, qtum_to_satoshi
from src.helpers.rpc import QtumRPCClient
from src.qtum.models import TransactionInput, TransactionOutput
from src.transformer.errors import (
    UPSTREAM_ERRORS,
    AddressResolutionError,
    FormatError,
    UpstreamLookupError,
)


logger = get_logger(__name__)

STANDARD_SCRIPT_TYPES = frozenset({"pubkeyhash", "scripthash", "pubkey"})

_HEX_ADDRESS_RE = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")
_ADDRESS_PAYLOAD_LEN = 21  # version byte + hash160


def convert_qtum_address(address: str) -> str:
    """Convert a Qtum base58check address to a ``0x`` hex address.

    Hex addresses (40 digits, optionally prefixed) are passed through.

    Raises:
        AddressResolutionError: If the address is not valid base58check
    """
    if _HEX_ADDRESS_RE.match(address):
        return add_hex_prefix(address)

    try:
        payload = base58.b58decode_check(address)
    except ValueError as err:
        msg = f"invalid Qtum address {address!r}: {err}"
        raise AddressResolutionError(msg) from err

    if len(payload) != _ADDRESS_PAYLOAD_LEN:
        msg = f"unexpected Qtum address length for {address!r}"
        raise AddressResolutionError(msg)

    return "0x" + payload[1:].hex()


async def get_sender_address(
    rpc: QtumRPCClient, vins: list[TransactionInput]
) -> str:
    """Resolve the address owning the output spent by the first input.

    Raises:
        AddressResolutionError: If there is no spendable first input or the
            referenced output carries no address
        UpstreamLookupError: If the previous transaction lookup fails
    """
    if not vins:
        msg = "transaction has no inputs"
        raise AddressResolutionError(msg)

    vin = vins[0]
    if vin.is_coinbase() or vin.txid is None or vin.vout is None:
        msg = "first input does not reference a previous output"
        raise AddressResolutionError(msg)

    logger.debug("Resolving sender from previous output %s:%d", vin.txid, vin.vout)
    try:
        prev_tx = await rpc.get_raw_transaction(vin.txid)
    except UPSTREAM_ERRORS as err:
        raise UpstreamLookupError.wrap(
            f"get previous transaction {vin.txid}", err
        ) from err

    if vin.vout >= len(prev_tx.vouts):
        msg = f"previous output {vin.txid}:{vin.vout} does not exist"
        raise AddressResolutionError(msg)

    address = prev_tx.vouts[vin.vout].script_pub_key.first_address()
    if address is None:
        msg = f"previous output {vin.txid}:{vin.vout} has no address"
        raise AddressResolutionError(msg)

    return convert_qtum_address(address)


def find_receiver_address(vouts: list[TransactionOutput]) -> str:
    """Return the first standard destination address among the outputs.

    Raises:
        AddressResolutionError: If no output carries a standard address
    """
    for vout in vouts:
        script = vout.script_pub_key
        if script.type not in STANDARD_SCRIPT_TYPES:
            continue
        address = script.first_address()
        if address:
            return convert_qtum_address(address)

    msg = "no output carries a standard destination address"
    raise AddressResolutionError(msg)


def format_qtum_amount(amount: Decimal | float | str) -> str:
    """Convert a QTUM amount to hex-encoded satoshi.

    Raises:
        FormatError: If the amount cannot be converted
    """
    try:
        return encode_hex_uint(qtum_to_satoshi(amount))
    except ValueError as err:
        msg = f"couldn't format amount: {err}"
        raise FormatError(msg) from err


__all__ = [
    "STANDARD_SCRIPT_TYPES",
    "convert_qtum_address",
    "find_receiver_address",
    "format_qtum_amount",
    "get_sender_address",
]
