"""Utility helpers for calculator modules."""

from __future__ import annotations

import math


def floor_currency(value: float) -> float:
    """Drop the cents from a monetary amount, rounding towards negative infinity."""

    return float(math.floor(value))


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals, halves rounding up."""

    # Not ``round``: half cents must go up, never to the even neighbour.
    return math.floor(value * 100 + 0.5) / 100
