"""Issue one proxied Ethereum JSON-RPC call against a Qtum node.

Usage:
    python -m src.cli eth_getBlockByNumber latest true
    python -m src.cli eth_getTransactionByHash 0x<txid>
"""

import argparse
import json
import sys

from typing import Any

import asyncio

from rich.console import Console

from src.helpers.config import get_qtum_rpc_auth, get_qtum_rpc_url
from src.helpers.rpc import QtumRPCClient
from src.transformer.proxy import HANDLERS, ETHProxy


console = Console()


def parse_param(raw: str) -> Any:
    """Parse a CLI parameter as JSON, falling back to the raw string.

    Example:
        >>> parse_param("true")
        True
        >>> parse_param("0x1a")
        '0x1a'
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


async def main(method: str, params: list[Any], rpc_url: str | None = None) -> int:
    """Run a single request and print the JSON-RPC response.

    Args:
        method: Ethereum method name
        params: Positional method parameters
        rpc_url: Optional Qtum RPC URL overriding QTUM_RPC_URL

    Returns:
        Exit code (0 for a result, 1 for an error response)
    """
    try:
        url = get_qtum_rpc_url(rpc_url)
        auth = get_qtum_rpc_auth()
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 1

    async with QtumRPCClient(url, auth=auth) as rpc:
        proxy = ETHProxy(rpc)
        response = await proxy.handle(
            {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        )

    console.print_json(data=response.to_wire())
    return 1 if response.error is not None else 0


def cli() -> None:
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="Query a Qtum node through the Ethereum JSON-RPC transformer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.cli eth_getBlockByHash 0x<hash> false
  python -m src.cli eth_getBlockByNumber 0x10 true
  python -m src.cli eth_getTransactionByHash 0x<txid>
        """,
    )
    parser.add_argument("method", choices=sorted(HANDLERS), help="Ethereum method")
    parser.add_argument("params", nargs="*", help="Method parameters (JSON values)")
    parser.add_argument("--rpc-url", default=None, help="Qtum RPC URL")

    args = parser.parse_args()

    exit_code = asyncio.run(
        main(
            args.method,
            [parse_param(p) for p in args.params],
            rpc_url=args.rpc_url,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
