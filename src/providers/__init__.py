"""
Pool reserves providers.

This package provides the data-provider interface the price impact
calculations consume: given a pool address, return its current reserves.
"""

from .base import PoolReserves, ProviderConfig, ReservesProvider
from .errors import (
    ContractError,
    ErrorHandler,
    NetworkError,
    ProviderError,
    RateLimitError,
    ValidationError,
)
from .static import StaticReservesProvider
from .uniswap_v2 import UniswapV2ReservesProvider, fetch_pool_reserves

__all__ = [
    'PoolReserves',
    'ProviderConfig',
    'ReservesProvider',
    'ProviderError',
    'RateLimitError',
    'NetworkError',
    'ContractError',
    'ValidationError',
    'ErrorHandler',
    'StaticReservesProvider',
    'UniswapV2ReservesProvider',
    'fetch_pool_reserves'
]
