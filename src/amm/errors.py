"""
Exceptions raised by the constant-product calculator.
"""


class AmmMathError(Exception):
    """Base exception for AMM math failures."""
    pass


class DivisionByZeroError(AmmMathError, ZeroDivisionError):
    """Raised when a reserve or price denominator is zero."""
    pass


class InvalidInputError(AmmMathError, ValueError):
    """Raised when a swap amount is non-positive or exceeds the pool."""
    pass
