"""
Base classes for pool reserves providers.

A provider answers one question: given a pool address, what are its
current reserves. Calculators and reports depend only on this interface,
so a live RPC node and an in-memory snapshot are interchangeable.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from web3 import Web3

from src.amm import ReservePair
from .errors import ErrorHandler, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class PoolReserves:
    """Reserves of a two-token pool at a given block."""

    pool_address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    block_timestamp_last: int = 0
    block_number: Optional[int] = None
    timestamp: Optional[datetime] = None

    def oriented(self, base_token: str) -> ReservePair:
        """
        Order the reserves so the base token comes first.

        Args:
            base_token: Address of the token being priced

        Returns:
            ReservePair of (base reserve, quote reserve)

        Raises:
            ValidationError: If base_token is not part of the pool
        """
        base = base_token.lower()
        if self.token0.lower() == base:
            return ReservePair(reserve_a=self.reserve0, reserve_b=self.reserve1)
        if self.token1.lower() == base:
            return ReservePair(reserve_a=self.reserve1, reserve_b=self.reserve0)

        raise ValidationError(
            f"Token {base_token} is not in pool {self.pool_address}"
        )


@dataclass
class ProviderConfig:
    """Configuration for provider calls."""

    max_retries: int = 3
    retry_delay: float = 1.0
    timeout: float = 30.0


class ReservesProvider(ABC):
    """
    Abstract base class for pool reserves providers.

    Provides retry handling and address validation shared by all
    concrete providers.
    """

    def __init__(self, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    @abstractmethod
    async def get_reserves(
        self, pool_address: str, block_identifier: Union[int, str] = "latest"
    ) -> PoolReserves:
        """
        Fetch reserves for a single pool.

        Args:
            pool_address: Pool contract address
            block_identifier: Block to read at

        Returns:
            PoolReserves snapshot
        """
        pass

    async def _retry_operation(self, operation, *args, **kwargs) -> Any:
        """Retry an operation with exponential backoff and intelligent error handling."""
        for attempt in range(self.config.max_retries):
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                self.error_handler.log_error(
                    e,
                    {
                        "attempt": attempt + 1,
                        "max_retries": self.config.max_retries,
                        "operation": getattr(operation, "__name__", str(operation)),
                    },
                )

                if not self.error_handler.should_retry(
                    e, attempt, self.config.max_retries
                ):
                    self.logger.info(f"Not retrying error: {e}")
                    raise

                if attempt == self.config.max_retries - 1:
                    raise

                delay = self.error_handler.get_retry_delay(
                    e, attempt, self.config.retry_delay
                )
                self.logger.info(
                    f"Retrying in {delay}s... (attempt {attempt + 1}/{self.config.max_retries})"
                )
                await asyncio.sleep(delay)

    def _validate_address(self, address: str) -> str:
        """Validate and checksum an Ethereum address."""
        try:
            return Web3.to_checksum_address(address)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Invalid address {address}: {e}")
