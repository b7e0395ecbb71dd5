"""Slippage helpers.

Slippage is expressed in basis points, where 10,000 bps is 100%.
"""

from composer.constants import BPS_PER_ONE


def mul_slippage(amount: int, slippage: int) -> int:
    """Return the slippage portion of `amount`, rounded down."""
    return amount * slippage // BPS_PER_ONE


def sub_slippage(amount: int, slippage: int) -> int:
    """Reduce `amount` by `slippage` bps, e.g. to derive a minimum output."""
    return amount - mul_slippage(amount, slippage)


def add_slippage(amount: int, slippage: int) -> int:
    """Increase `amount` by `slippage` bps, e.g. to derive a maximum input."""
    return amount + mul_slippage(amount, slippage)


__all__ = ["add_slippage", "mul_slippage", "sub_slippage"]
