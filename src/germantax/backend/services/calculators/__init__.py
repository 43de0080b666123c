"""Domain-specific calculation helpers."""

from .health_insurance import calculate_public_health_insurance
from .income_tax import calculate_income_tax, calculate_tax_for_income
from .solidarity import calculate_solidarity
from .utils import floor_currency, round_currency
from .zones import classify_zone

__all__ = [
    "calculate_income_tax",
    "calculate_public_health_insurance",
    "calculate_solidarity",
    "calculate_tax_for_income",
    "classify_zone",
    "floor_currency",
    "round_currency",
]
