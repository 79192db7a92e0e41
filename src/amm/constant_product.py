"""
Constant-Product (x * y = k) Swap Math.

Pure integer implementation of the spot price and price impact
calculations used to size oracle manipulation risk on a Uniswap V2 style
pool. Mirrors on-chain uint256 arithmetic: every division truncates.

Key concepts:
- Reserves are fixed-point integers at the same scale (18 decimals)
- Spot price: reserve_b per unit of reserve_a, scaled by SCALE
- Swap output: amount_out = reserve_b * amount_in / (reserve_a + amount_in)
- Price impact: relative drop in spot price, in basis points
"""

from dataclasses import dataclass
from decimal import Decimal

from web3 import Web3

from .errors import DivisionByZeroError, InvalidInputError

# 18-decimal fixed point unit
SCALE = 10**18
BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class ReservePair:
    """Snapshot of the two sides of a pool, base side first."""

    reserve_a: int
    reserve_b: int

    @property
    def has_price(self) -> bool:
        return self.reserve_a > 0 and self.reserve_b > 0


@dataclass(frozen=True)
class SwapQuote:
    """Result of simulating a single swap of reserve_a into reserve_b."""

    amount_in: int
    spot_price_before: int
    amount_out: int
    spot_price_after: int
    price_impact_bps: int

    @property
    def price_impact_percent(self) -> Decimal:
        return bps_to_percent(self.price_impact_bps)


def spot_price(reserve_a: int, reserve_b: int) -> int:
    """
    Calculate spot price of asset A denominated in asset B.

    Formula: price = reserve_b * SCALE / reserve_a

    Args:
        reserve_a: Reserve of the priced asset
        reserve_b: Reserve of the quote asset

    Returns:
        Price scaled by SCALE

    Raises:
        DivisionByZeroError: If reserve_a is zero
    """
    if reserve_a == 0:
        raise DivisionByZeroError("Cannot price against an empty reserve_a")

    return reserve_b * SCALE // reserve_a


def price_impact_bps(price_before: int, price_after: int) -> int:
    """
    Calculate price impact in basis points.

    Positive means the price dropped. Truncates toward zero like a signed
    integer division would.

    Raises:
        DivisionByZeroError: If price_before is zero
    """
    if price_before == 0:
        raise DivisionByZeroError("Cannot measure impact against a zero price")

    delta = (price_before - price_after) * BPS_DENOMINATOR
    # Python floors negative quotients, truncate instead
    impact = abs(delta) // abs(price_before)
    return impact if (delta >= 0) == (price_before > 0) else -impact


def quote_swap(reserve_a: int, reserve_b: int, amount_in: int) -> SwapQuote:
    """
    Simulate selling amount_in of asset A into the pool.

    Args:
        reserve_a: Reserve of the asset being sold
        reserve_b: Reserve of the asset being bought
        amount_in: Amount of asset A sold into the pool

    Returns:
        SwapQuote with prices before and after the swap

    Raises:
        DivisionByZeroError: If reserve_a is zero or the starting price is zero
        InvalidInputError: If amount_in <= 0 or amount_in >= reserve_a
    """
    price_before = spot_price(reserve_a, reserve_b)

    if amount_in <= 0:
        raise InvalidInputError(f"Swap amount must be positive, got {amount_in}")
    if amount_in >= reserve_a:
        raise InvalidInputError(
            f"Swap amount {amount_in} must be below reserve {reserve_a}"
        )

    amount_out = reserve_b * amount_in // (reserve_a + amount_in)

    new_reserve_a = reserve_a + amount_in
    new_reserve_b = reserve_b - amount_out
    price_after = spot_price(new_reserve_a, new_reserve_b)

    return SwapQuote(
        amount_in=amount_in,
        spot_price_before=price_before,
        amount_out=amount_out,
        spot_price_after=price_after,
        price_impact_bps=price_impact_bps(price_before, price_after),
    )


def quote_pair(pair: ReservePair, amount_in: int) -> SwapQuote:
    """Convenience wrapper over quote_swap for a ReservePair."""
    return quote_swap(pair.reserve_a, pair.reserve_b, amount_in)


def swap_size_for_share(reserve: int, share_pct: int) -> int:
    """
    Amount equal to share_pct percent of a reserve.

    Raises:
        InvalidInputError: If share_pct is not strictly between 0 and 100
    """
    if not 0 < share_pct < 100:
        raise InvalidInputError(f"Pool share must be within (0, 100), got {share_pct}")

    return reserve * share_pct // 100


def bps_to_percent(bps: int) -> Decimal:
    """Convert basis points to a percentage with two decimal places."""
    return (Decimal(bps) / Decimal(100)).quantize(Decimal("0.01"))


def format_units(value: int, decimals: int = 18) -> Decimal:
    """Convert a fixed-point integer to human readable units."""
    if decimals == 18:
        return Decimal(Web3.from_wei(value, "ether"))
    return Decimal(value) / (Decimal(10) ** decimals)
