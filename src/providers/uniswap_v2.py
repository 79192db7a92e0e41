"""
Uniswap V2 Reserves Provider.

Reads reserves of Uniswap V2 compatible pairs (Uniswap V2, SushiSwap and
forks) through the pair's own view functions via eth.call().
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from web3 import Web3
from web3.exceptions import ContractLogicError

from src.amm import ReservePair
from .base import PoolReserves, ProviderConfig, ReservesProvider
from .errors import ContractError, ProviderError

UNISWAP_V2_PAIR_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "token0",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "token1",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class UniswapV2ReservesProvider(ReservesProvider):
    """
    Reserves provider for Uniswap V2 style pairs.

    Uses getReserves(), token0() and token1() on the pair contract, all
    read at the same block.
    """

    def __init__(self, web3: Web3, config: Optional[ProviderConfig] = None):
        """
        Initialize the reserves provider.

        Args:
            web3: Web3 instance
            config: Provider configuration
        """
        super().__init__(config)
        self.web3 = web3

    async def get_reserves(
        self,
        pool_address: str,
        block_identifier: Union[int, str] = 'latest'
    ) -> PoolReserves:
        """
        Fetch reserves for a Uniswap V2 pair.

        Args:
            pool_address: Pair contract address
            block_identifier: Block to call at

        Returns:
            PoolReserves for the pair

        Raises:
            ValidationError: If the address is malformed
            ContractError: If the pair call reverts
        """
        checksum_address = self._validate_address(pool_address)

        async def _read():
            return self._read_pair(checksum_address, block_identifier)

        return await self._retry_operation(_read)

    def _read_pair(
        self,
        pool_address: str,
        block_identifier: Union[int, str]
    ) -> PoolReserves:
        """Read token ordering and reserves from the pair contract."""
        pair = self.web3.eth.contract(address=pool_address, abi=UNISWAP_V2_PAIR_ABI)

        try:
            block_number = self.web3.eth.block_number
            if block_identifier == 'latest':
                block_identifier = block_number
            else:
                block_number = block_identifier

            reserve0, reserve1, block_timestamp_last = pair.functions.getReserves().call(
                block_identifier=block_identifier
            )
            token0 = pair.functions.token0().call(block_identifier=block_identifier)
            token1 = pair.functions.token1().call(block_identifier=block_identifier)
        except ContractLogicError as e:
            raise ContractError(f"Pair {pool_address} call reverted: {e}")

        self.logger.debug(
            f"Pair {pool_address} @ {block_number}: R0={reserve0}, R1={reserve1}"
        )

        return PoolReserves(
            pool_address=pool_address.lower(),
            token0=token0,
            token1=token1,
            reserve0=int(reserve0),
            reserve1=int(reserve1),
            block_timestamp_last=int(block_timestamp_last),
            block_number=block_number,
            timestamp=datetime.now(timezone.utc),
        )

    async def fetch_many(
        self,
        pool_addresses: List[str],
        block_identifier: Union[int, str] = 'latest'
    ) -> Dict[str, PoolReserves]:
        """
        Fetch reserves for several pairs.

        Failed pairs are logged and skipped rather than failing the whole
        fetch.

        Args:
            pool_addresses: List of pair addresses
            block_identifier: Block to call at

        Returns:
            Mapping of lowercase pair address to its reserves
        """
        all_reserves = {}

        self.logger.info(f"Fetching reserves for {len(pool_addresses)} pairs")

        for i, address in enumerate(pool_addresses):
            try:
                reserves = await self.get_reserves(address, block_identifier)
            except ProviderError as e:
                self.logger.warning(f"Pair {i + 1}/{len(pool_addresses)} ({address}) failed: {e}")
                continue
            all_reserves[reserves.pool_address] = reserves

        return all_reserves


# Convenience function for easy usage
async def fetch_pool_reserves(
    web3: Web3,
    pool_address: str,
    base_token: str,
    block_identifier: Union[int, str] = 'latest',
    config: Optional[ProviderConfig] = None
) -> ReservePair:
    """
    Convenience function to fetch reserves ordered around a base token.

    Args:
        web3: Web3 instance
        pool_address: Pair contract address
        base_token: Token whose reserve should come first
        block_identifier: Block to call at
        config: Provider configuration

    Returns:
        ReservePair of (base reserve, quote reserve)
    """
    provider = UniswapV2ReservesProvider(web3, config=config)
    reserves = await provider.get_reserves(pool_address, block_identifier)
    return reserves.oriented(base_token)
