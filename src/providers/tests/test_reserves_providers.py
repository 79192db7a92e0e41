"""Tests for pool reserves providers."""

import importlib
import sys
from pathlib import Path

import pytest
from unittest.mock import MagicMock

from web3 import Web3
from web3.exceptions import ContractLogicError

from src.amm import SCALE, ReservePair
from src.providers import (
    ContractError,
    PoolReserves,
    ProviderConfig,
    StaticReservesProvider,
    UniswapV2ReservesProvider,
    ValidationError,
    fetch_pool_reserves,
)

SUSHI = "0x6B3595068778DD592e39A122f4f5a5cF09C90fE2"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
SUSHI_WETH_PAIR = Web3.to_checksum_address("0x795065dcc9f64b5614c407a6efdc400da6221fb0")
FORK_BLOCK = 18500000


@pytest.fixture
def mock_web3():
    """Web3 double whose pair contract returns SUSHI/WETH reserves."""
    web3 = MagicMock()
    web3.eth.block_number = FORK_BLOCK

    pair = web3.eth.contract.return_value
    pair.functions.getReserves.return_value.call.return_value = (
        1_000_000 * SCALE, 500 * SCALE, 1699000000
    )
    pair.functions.token0.return_value.call.return_value = SUSHI
    pair.functions.token1.return_value.call.return_value = WETH
    return web3


@pytest.fixture
def fast_config():
    """Provider config without backoff delays."""
    return ProviderConfig(max_retries=3, retry_delay=0)


class TestPoolReserves:
    """Test cases for PoolReserves orientation."""

    @pytest.fixture
    def reserves(self):
        return PoolReserves(
            pool_address=SUSHI_WETH_PAIR.lower(),
            token0=SUSHI,
            token1=WETH,
            reserve0=1_000,
            reserve1=2,
        )

    def test_oriented_base_is_token0(self, reserves):
        assert reserves.oriented(SUSHI) == ReservePair(reserve_a=1_000, reserve_b=2)

    def test_oriented_base_is_token1(self, reserves):
        assert reserves.oriented(WETH) == ReservePair(reserve_a=2, reserve_b=1_000)

    def test_oriented_is_case_insensitive(self, reserves):
        assert reserves.oriented(SUSHI.lower()) == reserves.oriented(SUSHI.upper().replace("0X", "0x"))

    def test_oriented_unknown_token(self, reserves):
        with pytest.raises(ValidationError, match="is not in pool"):
            reserves.oriented("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48")


class TestUniswapV2ReservesProvider:
    """Test cases for UniswapV2ReservesProvider."""

    @pytest.mark.asyncio
    async def test_get_reserves(self, mock_web3, fast_config):
        """Test reserves, tokens and block are read from the pair."""
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        result = await provider.get_reserves(SUSHI_WETH_PAIR.lower())

        assert result.pool_address == SUSHI_WETH_PAIR.lower()
        assert result.token0 == SUSHI
        assert result.token1 == WETH
        assert result.reserve0 == 1_000_000 * SCALE
        assert result.reserve1 == 500 * SCALE
        assert result.block_timestamp_last == 1699000000
        assert result.block_number == FORK_BLOCK
        assert result.timestamp is not None

        _, kwargs = mock_web3.eth.contract.call_args
        assert kwargs["address"] == SUSHI_WETH_PAIR

    @pytest.mark.asyncio
    async def test_latest_is_pinned_to_one_block(self, mock_web3, fast_config):
        """Test all pair reads happen at the same block number."""
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)
        await provider.get_reserves(SUSHI_WETH_PAIR)

        pair = mock_web3.eth.contract.return_value
        for fn in (pair.functions.getReserves, pair.functions.token0, pair.functions.token1):
            fn.return_value.call.assert_called_once_with(block_identifier=FORK_BLOCK)

    @pytest.mark.asyncio
    async def test_explicit_block(self, mock_web3, fast_config):
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        result = await provider.get_reserves(SUSHI_WETH_PAIR, block_identifier=18000000)

        assert result.block_number == 18000000
        pair = mock_web3.eth.contract.return_value
        pair.functions.getReserves.return_value.call.assert_called_once_with(
            block_identifier=18000000
        )

    @pytest.mark.asyncio
    async def test_invalid_address(self, mock_web3, fast_config):
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        with pytest.raises(ValidationError, match="Invalid address"):
            await provider.get_reserves("0x1234")

        mock_web3.eth.contract.assert_not_called()

    @pytest.mark.asyncio
    async def test_retries_network_errors(self, mock_web3, fast_config):
        """Test transient network failures are retried."""
        pair = mock_web3.eth.contract.return_value
        pair.functions.getReserves.return_value.call.side_effect = [
            ConnectionError("connection refused"),
            (10 * SCALE, 20 * SCALE, 0),
        ]
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        result = await provider.get_reserves(SUSHI_WETH_PAIR)

        assert result.reserve0 == 10 * SCALE
        assert pair.functions.getReserves.return_value.call.call_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, mock_web3, fast_config):
        pair = mock_web3.eth.contract.return_value
        pair.functions.getReserves.return_value.call.side_effect = ConnectionError("timeout")
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        with pytest.raises(ConnectionError):
            await provider.get_reserves(SUSHI_WETH_PAIR)

        assert pair.functions.getReserves.return_value.call.call_count == 3

    @pytest.mark.asyncio
    async def test_revert_is_not_retried(self, mock_web3, fast_config):
        """Test contract reverts surface as ContractError without retry."""
        pair = mock_web3.eth.contract.return_value
        pair.functions.getReserves.return_value.call.side_effect = ContractLogicError(
            "execution reverted"
        )
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        with pytest.raises(ContractError, match="reverted"):
            await provider.get_reserves(SUSHI_WETH_PAIR)

        assert pair.functions.getReserves.return_value.call.call_count == 1

    @pytest.mark.asyncio
    async def test_fetch_many_skips_failures(self, mock_web3, fast_config):
        provider = UniswapV2ReservesProvider(mock_web3, config=fast_config)

        result = await provider.fetch_many([SUSHI_WETH_PAIR, "not-an-address"])

        assert list(result) == [SUSHI_WETH_PAIR.lower()]

    @pytest.mark.asyncio
    async def test_fetch_pool_reserves_orients(self, mock_web3, fast_config):
        """Test the convenience function returns base-first reserves."""
        pair = await fetch_pool_reserves(mock_web3, SUSHI_WETH_PAIR, WETH, config=fast_config)

        assert pair == ReservePair(reserve_a=500 * SCALE, reserve_b=1_000_000 * SCALE)


class TestStaticReservesProvider:
    """Test cases for StaticReservesProvider."""

    @pytest.mark.asyncio
    async def test_returns_registered_snapshot(self):
        snapshot = PoolReserves(SUSHI_WETH_PAIR, SUSHI, WETH, 3, 4)
        provider = StaticReservesProvider([snapshot])

        assert await provider.get_reserves(SUSHI_WETH_PAIR.lower()) is snapshot

    @pytest.mark.asyncio
    async def test_unknown_pool(self):
        provider = StaticReservesProvider()

        with pytest.raises(ValidationError, match="Unknown pool"):
            await provider.get_reserves(SUSHI_WETH_PAIR)


@pytest.mark.parametrize("package", ["providers", "fork", "analysis"])
def test_package_imports_by_directory_name(monkeypatch, package):
    """Packages under src/ must import when src/ itself is on sys.path."""
    monkeypatch.syspath_prepend(str(Path(__file__).resolve().parents[2]))
    for name in [m for m in sys.modules if m == package or m.startswith(f"{package}.")]:
        monkeypatch.delitem(sys.modules, name)

    module = importlib.import_module(package)

    assert module.__name__ == package
