"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv

from src.helpers.constants import DEFAULT_TX_FETCH_CONCURRENCY


# Load environment variables from .env file
load_dotenv()


def get_qtum_rpc_url(rpc_url: str | None = None) -> str:
    """Get Qtum node RPC URL from parameter or environment.

    Args:
        rpc_url: Optional RPC URL to use directly

    Returns:
        Qtum RPC URL

    Raises:
        ValueError: If RPC URL is not provided and QTUM_RPC_URL env var is not set

    Example:
        ```python
        from src.helpers.config import get_qtum_rpc_url

        # Get from environment
        rpc_url = get_qtum_rpc_url()

        # Or provide explicitly
        rpc_url = get_qtum_rpc_url("http://localhost:3889")
        ```
    """
    if rpc_url:
        return rpc_url

    env_rpc_url = os.getenv("QTUM_RPC_URL")
    if not env_rpc_url:
        msg = "QTUM_RPC_URL must be provided or set in environment variables"
        raise ValueError(msg)

    return env_rpc_url


def get_qtum_rpc_auth() -> tuple[str, str] | None:
    """Get basic auth credentials for the Qtum node.

    Returns:
        (user, password) tuple, or None when QTUM_RPC_USER is not set

    Raises:
        ValueError: If QTUM_RPC_USER is set without QTUM_RPC_PASSWORD
    """
    user = os.getenv("QTUM_RPC_USER")
    if not user:
        return None

    password = os.getenv("QTUM_RPC_PASSWORD")
    if password is None:
        msg = "QTUM_RPC_PASSWORD must be set when QTUM_RPC_USER is set"
        raise ValueError(msg)

    return user, password


def get_tx_fetch_concurrency() -> int:
    """Get the transaction lookup fan-out limit for full blocks.

    Returns:
        Positive number of concurrent transaction lookups

    Raises:
        ValueError: If TX_FETCH_CONCURRENCY is not a positive integer
    """
    raw = os.getenv("TX_FETCH_CONCURRENCY")
    if not raw:
        return DEFAULT_TX_FETCH_CONCURRENCY

    try:
        value = int(raw)
    except ValueError:
        msg = f"TX_FETCH_CONCURRENCY must be an integer, got {raw!r}"
        raise ValueError(msg) from None

    if value < 1:
        msg = f"TX_FETCH_CONCURRENCY must be positive, got {value}"
        raise ValueError(msg)

    return value


__all__ = [
    "get_qtum_rpc_auth",
    "get_qtum_rpc_url",
    "get_tx_fetch_concurrency",
]
