"""Parsing utilities for hex encoding and amount conversion."""

from decimal import Decimal, InvalidOperation

from src.helpers.constants import QTUM_DECIMALS, SATOSHI_PER_QTUM


NONCE_HEX_DIGITS = 16
_NONCE_MASK = (1 << (NONCE_HEX_DIGITS * 4)) - 1


def remove_hex_prefix(value: str) -> str:
    """Strip a single leading ``0x`` / ``0X`` prefix, if present.

    Example:
        >>> remove_hex_prefix("0xABcd")
        'ABcd'
        >>> remove_hex_prefix("abcd")
        'abcd'
    """
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def add_hex_prefix(value: str) -> str:
    """Return ``value`` lower-cased with exactly one ``0x`` prefix.

    Example:
        >>> add_hex_prefix("ABcd")
        '0xabcd'
        >>> add_hex_prefix("0xabcd")
        '0xabcd'
    """
    return "0x" + remove_hex_prefix(value).lower()


def encode_hex_uint(value: int) -> str:
    """Encode a non-negative integer as minimal-width ``0x`` hex.

    Args:
        value: Integer to encode

    Returns:
        str: Hex string without leading zeros (``0x0`` for zero)

    Raises:
        ValueError: If value is negative

    Example:
        >>> encode_hex_uint(4660)
        '0x1234'
        >>> encode_hex_uint(0)
        '0x0'
    """
    if value < 0:
        msg = f"cannot hex-encode negative integer {value}"
        raise ValueError(msg)
    return hex(value)


def format_nonce(nonce: int) -> str:
    """Format a block nonce as an 8-byte Ethereum nonce.

    The value is reduced modulo 2**64, so the result is always ``0x``
    followed by exactly 16 lower-case hex digits.

    Example:
        >>> format_nonce(2083236893)
        '0x000000007c2bac1d'
    """
    return f"0x{nonce & _NONCE_MASK:0{NONCE_HEX_DIGITS}x}"


def qtum_to_satoshi(amount: Decimal | float | str) -> int:
    """Convert a QTUM amount (8 decimal places) to integer base units.

    Args:
        amount: Amount in QTUM as reported by the node

    Returns:
        int: Amount in satoshi

    Raises:
        ValueError: If the amount is malformed, non-finite, negative or
            more precise than 8 decimal places

    Example:
        >>> qtum_to_satoshi("1.5")
        150000000
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        msg = f"malformed amount {amount!r}"
        raise ValueError(msg) from None

    if not value.is_finite():
        msg = f"non-finite amount {amount!r}"
        raise ValueError(msg)
    if value < 0:
        msg = f"negative amount {amount!r}"
        raise ValueError(msg)

    satoshi = value * SATOSHI_PER_QTUM
    if satoshi != satoshi.to_integral_value():
        msg = f"amount {amount!r} has more than {QTUM_DECIMALS} decimal places"
        raise ValueError(msg)

    return int(satoshi)


__all__ = [
    "NONCE_HEX_DIGITS",
    "add_hex_prefix",
    "encode_hex_uint",
    "format_nonce",
    "qtum_to_satoshi",
    "remove_hex_prefix",
]
