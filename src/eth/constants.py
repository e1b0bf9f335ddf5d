"""Placeholder values for Ethereum fields with no Qtum counterpart."""

from src.helpers.parsers import encode_hex_uint


ZERO_HASH = "0x" + "0" * 64
"""32-byte all-zero hash, used as the genesis parent hash"""

ZERO_ADDRESS = "0x" + "0" * 40
"""20-byte all-zero address for miner and synthetic senders"""

EMPTY_UNCLES_HASH = (
    "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
)
"""Keccak-256 of the RLP encoding of an empty uncle list"""

EMPTY_LOGS_BLOOM = "0x" + "00" * 256
"""256-byte all-zero logs bloom"""

EXTRA_DATA = "0x00"
"""Constant block extra data"""

DEFAULT_BLOCK_GAS_LIMIT = encode_hex_uint(40_000_000)
"""Qtum default block gas limit"""

ZERO_QUANTITY = "0x0"
"""Zero for gas, gas price and transaction nonce"""

EMPTY_SIGNATURE_FIELD = ""
"""Value for the v, r and s signature fields"""

EMPTY_INPUT = ""
"""Input of transactions that carry no payload"""


__all__ = [
    "DEFAULT_BLOCK_GAS_LIMIT",
    "EMPTY_INPUT",
    "EMPTY_LOGS_BLOOM",
    "EMPTY_SIGNATURE_FIELD",
    "EMPTY_UNCLES_HASH",
    "EXTRA_DATA",
    "ZERO_ADDRESS",
    "ZERO_HASH",
    "ZERO_QUANTITY",
]
