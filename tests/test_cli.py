"""Tests for the command-line entry point."""

import pytest

from src.cli import main, parse_param


class TestParseParam:
    """Tests for parse_param."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("false", False),
            ("16", 16),
            ('"latest"', "latest"),
            ("latest", "latest"),
            ("0x1a", "0x1a"),
        ],
    )
    def test_parse(self, raw: str, expected: object) -> None:
        assert parse_param(raw) == expected


class TestMain:
    """Tests for the async main routine."""

    @pytest.mark.asyncio
    async def test_missing_rpc_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing node URL is a configuration error."""
        monkeypatch.delenv("QTUM_RPC_URL", raising=False)

        assert await main("eth_getBlockByNumber", ["latest"]) == 1

    @pytest.mark.asyncio
    async def test_error_response_exit_code(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test an invalid parameter prints the error object and exits 1."""
        monkeypatch.delenv("QTUM_RPC_USER", raising=False)

        code = await main(
            "eth_getBlockByNumber", ["bogus"], rpc_url="http://qtum.test:3889"
        )

        assert code == 1
        assert "-32602" in capsys.readouterr().out
