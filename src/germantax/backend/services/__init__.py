"""Service-layer helpers for the GermanTax backend."""

from .calculation_service import calculate_income_tax_amount, calculate_tax
from .calculators import (
    calculate_income_tax,
    calculate_solidarity,
    calculate_tax_for_income,
    classify_zone,
)

__all__ = [
    "calculate_income_tax",
    "calculate_income_tax_amount",
    "calculate_solidarity",
    "calculate_tax",
    "calculate_tax_for_income",
    "classify_zone",
]
