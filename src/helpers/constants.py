"""Common configuration constants used across the application."""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

CONNECTION_TIMEOUT = 3.0
"""Timeout for establishing connections"""

# Retry Configuration
MAX_RETRIES = 5
"""Default maximum number of retry attempts"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""

# Concurrency Limits
DEFAULT_TX_FETCH_CONCURRENCY = 8
"""Default number of transaction lookups in flight for one full block"""

# HTTP Connection Pooling
MAX_KEEPALIVE_CONNECTIONS = 5
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 10
"""Maximum total number of connections"""

# Qtum node
QTUM_TX_NOT_FOUND_CODE = -5
"""RPC error code Qtum returns for an unknown wallet transaction"""

QTUM_DECIMALS = 8
"""Number of decimal places in a QTUM amount"""

SATOSHI_PER_QTUM = 10**QTUM_DECIMALS
"""Base units per QTUM"""


__all__ = [
    "CONNECTION_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_TX_FETCH_CONCURRENCY",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MAX_RETRIES",
    "QTUM_DECIMALS",
    "QTUM_TX_NOT_FOUND_CODE",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
    "SATOSHI_PER_QTUM",
]
