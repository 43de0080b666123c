"""Income tax schedule evaluation.

Each zone's formula only covers the tax accrued inside that zone. Zones above
the second add the tax owed at their lower boundary, evaluated with the zone
below, so the schedule stays continuous at every boundary. Recursion depth is
bounded by the number of zones.

Formula reference:
https://de.wikipedia.org/wiki/Einkommensteuer_(Deutschland)#Tarif_2018
"""

from __future__ import annotations

from germantax.backend.config.year_config import YearConfiguration, Zone

from .zones import classify_zone


def _quadratic_zone_tax(income: float, config: YearConfiguration, zone: Zone) -> float:
    schedule = config.income_tax
    step = (income - schedule.lower_bound(zone)) / 10000
    return ((schedule.progression[zone] * step) + schedule.threshold[zone] * 10000) * step


def calculate_income_tax(income: float, config: YearConfiguration, zone: Zone) -> float:
    """Return the unrounded income tax for ``income`` taxed within ``zone``."""

    if isinstance(zone, bool) or not isinstance(zone, int):
        raise ValueError(f"Unsupported tax zone: {zone!r}")
    try:
        zone = Zone(zone)
    except ValueError as exc:
        raise ValueError(f"Unsupported tax zone: {zone!r}") from exc

    schedule = config.income_tax

    if zone is Zone.FIRST:
        return 0.0
    if zone is Zone.SECOND:
        return _quadratic_zone_tax(income, config, zone)

    lower_bound = schedule.lower_bound(zone)
    accrued = calculate_income_tax(lower_bound, config, Zone(zone - 1))

    if zone is Zone.THIRD:
        return _quadratic_zone_tax(income, config, zone) + accrued
    return (schedule.percent[zone] * (income - lower_bound)) + accrued


def calculate_tax_for_income(income: float, config: YearConfiguration) -> float:
    """Classify ``income`` and evaluate the matching zone formula."""

    return calculate_income_tax(income, config, classify_zone(income, config))


__all__ = ["calculate_income_tax", "calculate_tax_for_income"]
