"""Typed inputs and results shared across the calculation services.

Options arrive as Pydantic models so that mappings from callers are validated
in one place, while results are lightweight frozen dataclasses produced fresh
on every calculation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from germantax.backend.config.schema import Zone

__all__ = [
    "TaxOptions",
    "TaxResult",
    "Zone",
    "format_validation_error",
]


class TaxOptions(BaseModel):
    """Filing options applied before the income tax is computed.

    ``private_monthly_cost`` is accepted for callers modelling private health
    insurance but does not influence the calculation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    couple: bool = False
    public_health_insurance: bool = False
    private_monthly_cost: float | None = Field(default=None, ge=0)


@dataclass(frozen=True)
class TaxResult:
    """Income tax, solidarity surcharge and monthly health insurance cost."""

    income_tax: float = 0.0
    solidarity_tax: float = 0.0
    hi_monthly: float = 0.0

    @property
    def total_tax(self) -> float:
        return self.income_tax + self.solidarity_tax

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid tax options: {details}"
