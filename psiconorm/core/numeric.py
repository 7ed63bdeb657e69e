"""Numeric helpers shared by the raw score calculators.

Published score sheets round half away from zero, so every displayed metric
goes through :func:`safe_round` instead of the builtin ``round``.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import TypeVar

__all__ = [
    "clamp",
    "safe_round",
    "safe_div",
]


NumericT = TypeVar("NumericT", int, float, Decimal)


def clamp(value: NumericT, min_value: NumericT, max_value: NumericT) -> NumericT:
    """Clamp a numeric value to be within the specified range.

    Example:
        >>> clamp(11, 0, 8)
        8
        >>> clamp(-5, 0, 8)
        0
    """
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must be <= max_value ({max_value})")
    return max(min_value, min(value, max_value))


def safe_round(value: float, decimals: int = 2) -> float:
    """Round half-up to ``decimals`` places via Decimal.

    Example:
        >>> safe_round(2.25, 1)
        2.3
        >>> safe_round(-2.25, 1)
        -2.3
    """
    quantizer = Decimal(10) ** -decimals
    return float(Decimal(str(value)).quantize(quantizer, rounding=ROUND_HALF_UP))


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Perform division with protection against division by zero.

    Example:
        >>> safe_div(10, 2)
        5.0
        >>> safe_div(10, 0)
        0.0
    """
    if denominator == 0:
        return default
    return numerator / denominator
