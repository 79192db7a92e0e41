"""
In-memory reserves provider.

Serves fixed PoolReserves snapshots, for offline runs and tests.
"""

from typing import Dict, Iterable, Optional, Union

from .base import PoolReserves, ProviderConfig, ReservesProvider
from .errors import ValidationError


class StaticReservesProvider(ReservesProvider):
    """Reserves provider backed by a dict of snapshots keyed by pool address."""

    def __init__(
        self,
        pools: Iterable[PoolReserves] = (),
        config: Optional[ProviderConfig] = None
    ):
        super().__init__(config)
        self._pools: Dict[str, PoolReserves] = {}
        for pool in pools:
            self.add(pool)

    def add(self, pool: PoolReserves):
        """Register or replace a pool snapshot."""
        self._pools[pool.pool_address.lower()] = pool

    async def get_reserves(
        self,
        pool_address: str,
        block_identifier: Union[int, str] = "latest"
    ) -> PoolReserves:
        try:
            return self._pools[pool_address.lower()]
        except KeyError:
            raise ValidationError(f"Unknown pool {pool_address}")
