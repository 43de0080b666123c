"""Orchestrate option validation and the German income tax calculation.

The calculation service resolves the year's parameter table, applies the
optional health insurance deduction and income splitting, and delegates the
arithmetic to the calculator modules. Profiling hooks live here so that the
calculators stay pure functions of their inputs.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from contextlib import contextmanager
from numbers import Real
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from germantax.backend.config.year_config import YearConfiguration, load_year_configuration
from germantax.backend.models import TaxOptions, TaxResult, format_validation_error

from .calculators import (
    calculate_public_health_insurance,
    calculate_solidarity,
    calculate_tax_for_income,
    floor_currency,
    round_currency,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("GERMANTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _normalise_income(income: Any) -> float:
    if isinstance(income, bool) or not isinstance(income, Real):
        raise ValueError("Income must be a number")
    value = float(income)
    if not math.isfinite(value):
        raise ValueError("Income must be a finite number")
    if value < 0:
        raise ValueError("Income cannot be negative")
    return value


def _normalise_options(options: Mapping[str, Any] | TaxOptions | None) -> TaxOptions:
    if options is None:
        return TaxOptions()
    if isinstance(options, TaxOptions):
        return options
    if not isinstance(options, Mapping):
        raise ValueError("Tax options must be a mapping")
    try:
        return TaxOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int, config: YearConfiguration | None) -> YearConfiguration:
    if config is None:
        return load_year_configuration(year)
    if config.year != year:
        raise ValueError(
            f"Configuration year mismatch: expected {year}, found {config.year}"
        )
    return config


def calculate_income_tax_amount(
    income: float, config: YearConfiguration, couple: bool
) -> float:
    """Return the income tax in whole euros, splitting the income for couples."""

    if couple:
        half_tax = floor_currency(calculate_tax_for_income(income / 2, config))
        return floor_currency(2 * half_tax)
    return floor_currency(calculate_tax_for_income(income, config))


def calculate_tax(
    income: float,
    year: int,
    options: Mapping[str, Any] | TaxOptions | None = None,
    *,
    config: YearConfiguration | None = None,
) -> TaxResult:
    """Compute income tax, solidarity surcharge and health insurance cost.

    ``config`` injects a parameter table directly; otherwise the table for
    ``year`` is loaded from the bundled configuration.
    """

    taxable_income = _normalise_income(income)
    tax_options = _normalise_options(options)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("load_configuration", timings):
        configuration = _resolve_configuration(year, config)

    hi_monthly = 0.0
    if tax_options.public_health_insurance:
        with _profile_section("health_insurance", timings):
            hi_monthly = calculate_public_health_insurance(
                taxable_income, configuration.health_insurance
            )
        taxable_income = taxable_income - hi_monthly * 12
        if taxable_income < 0:
            _LOGGER.debug(
                "Health insurance deduction exceeds income %s; taxing zero income",
                income,
            )
            taxable_income = 0.0

    with _profile_section("income_tax", timings):
        income_tax = calculate_income_tax_amount(
            taxable_income, configuration, tax_options.couple
        )

    with _profile_section("solidarity", timings):
        solidarity_tax = round_currency(
            calculate_solidarity(income_tax, configuration, tax_options.couple)
        )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return TaxResult(
        income_tax=income_tax,
        solidarity_tax=solidarity_tax,
        hi_monthly=hi_monthly,
    )


__all__ = ["calculate_income_tax_amount", "calculate_tax"]
