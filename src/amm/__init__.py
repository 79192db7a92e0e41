"""
Constant-product AMM math.

Pure functions for spot price, swap output and price impact over
integer pool reserves.
"""

from .constant_product import (
    BPS_DENOMINATOR,
    SCALE,
    ReservePair,
    SwapQuote,
    bps_to_percent,
    format_units,
    price_impact_bps,
    quote_pair,
    quote_swap,
    spot_price,
    swap_size_for_share,
)
from .errors import AmmMathError, DivisionByZeroError, InvalidInputError

__all__ = [
    'SCALE',
    'BPS_DENOMINATOR',
    'ReservePair',
    'SwapQuote',
    'spot_price',
    'quote_swap',
    'quote_pair',
    'price_impact_bps',
    'swap_size_for_share',
    'bps_to_percent',
    'format_units',
    'AmmMathError',
    'DivisionByZeroError',
    'InvalidInputError'
]
