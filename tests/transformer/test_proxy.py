"""Tests for JSON-RPC method dispatch."""

import pytest

from conftest import FakeQtumNode, block_hash, txid

from src.transformer.errors import (
    INVALID_PARAMS_CODE,
    INVALID_REQUEST_CODE,
    METHOD_NOT_FOUND_CODE,
    SERVER_ERROR_CODE,
)
from src.transformer.proxy import ETHProxy


def request(method: str, params: list) -> dict:
    return {"jsonrpc": "2.0", "id": 7, "method": method, "params": params}


class TestETHProxy:
    """Tests for ETHProxy.handle."""

    def test_methods(self, node: FakeQtumNode) -> None:
        """Test the three proxied methods are registered."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        assert proxy.methods() == [
            "eth_getBlockByHash",
            "eth_getBlockByNumber",
            "eth_getTransactionByHash",
        ]

    @pytest.mark.asyncio
    async def test_get_block_by_hash(self, node: FakeQtumNode) -> None:
        """Test a block result uses Ethereum field names."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(
            request("eth_getBlockByHash", ["0x" + block_hash(1), False])
        )
        wire = response.to_wire()

        assert wire["id"] == 7
        assert "error" not in wire
        assert wire["result"]["number"] == "0x1"
        assert wire["result"]["parentHash"] == "0x" + block_hash(0)
        assert wire["result"]["transactions"] == ["0x" + txid(10), "0x" + txid(11)]

    @pytest.mark.asyncio
    async def test_get_block_by_number_full(self, node: FakeQtumNode) -> None:
        """Test full transactions serialize as objects."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(request("eth_getBlockByNumber", ["0x1", True]))

        txs = response.to_wire()["result"]["transactions"]
        assert [tx["hash"] for tx in txs] == ["0x" + txid(10), "0x" + txid(11)]
        assert txs[1]["from"].startswith("0x")
        assert "from_" not in txs[1]

    @pytest.mark.asyncio
    async def test_get_transaction_by_hash(self, node: FakeQtumNode) -> None:
        """Test a transaction result."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(
            request("eth_getTransactionByHash", ["0x" + txid(11)])
        )

        result = response.to_wire()["result"]
        assert result["hash"] == "0x" + txid(11)
        assert result["gasPrice"] == "0x0"

    @pytest.mark.asyncio
    async def test_unknown_method(self, node: FakeQtumNode) -> None:
        """Test unsupported methods get -32601."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(request("eth_sendTransaction", []))

        assert response.error is not None
        assert response.error.code == METHOD_NOT_FOUND_CODE

    @pytest.mark.asyncio
    async def test_empty_transaction_hash(self, node: FakeQtumNode) -> None:
        """Test an empty hash is rejected before any upstream call."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(request("eth_getTransactionByHash", ["0x"]))

        assert response.error is not None
        assert response.error.code == INVALID_PARAMS_CODE
        assert node.calls == []

    @pytest.mark.asyncio
    async def test_non_boolean_full_flag(self, node: FakeQtumNode) -> None:
        """Test the fullTransaction flag must be a boolean."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(
            request("eth_getBlockByHash", [block_hash(1), "yes"])
        )

        assert response.error is not None
        assert response.error.code == INVALID_PARAMS_CODE

    @pytest.mark.asyncio
    async def test_upstream_error_is_error_object(self, node: FakeQtumNode) -> None:
        """Test fatal errors become error objects without a result."""
        node.fail("getblockheader", block_hash(1), code=-8, message="bad")
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(
            request("eth_getBlockByHash", [block_hash(1), False])
        )
        wire = response.to_wire()

        assert "result" not in wire
        assert wire["error"]["code"] == SERVER_ERROR_CODE
        assert "get block header" in wire["error"]["message"]
        assert wire["error"]["data"] == {"upstreamCode": -8}

    @pytest.mark.asyncio
    async def test_invalid_request(self, node: FakeQtumNode) -> None:
        """Test a payload without a method is an invalid request."""
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle({"jsonrpc": "2.0", "id": 3})

        assert response.id == 3
        assert response.error is not None
        assert response.error.code == INVALID_REQUEST_CODE

    @pytest.mark.asyncio
    async def test_invalid_concurrency_setting(
        self, node: FakeQtumNode, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a bad TX_FETCH_CONCURRENCY value becomes an error object."""
        monkeypatch.setenv("TX_FETCH_CONCURRENCY", "zero")
        proxy = ETHProxy(node)  # type: ignore[arg-type]

        response = await proxy.handle(request("eth_getBlockByNumber", ["0x1", True]))

        assert response.error is not None
        assert response.error.code == SERVER_ERROR_CODE
        assert "TX_FETCH_CONCURRENCY" in response.error.message
        assert node.count("gettransaction") == 0
