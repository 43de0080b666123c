"""Classify incomes into the progressive zones of a tax year."""

from __future__ import annotations

from germantax.backend.config.year_config import YearConfiguration, Zone


def classify_zone(income: float, config: YearConfiguration) -> Zone:
    """Return the zone ``income`` falls into; boundary values belong to the lower zone."""

    boundaries = config.income_tax.zone_boundaries
    for zone in (Zone.FIRST, Zone.SECOND, Zone.THIRD, Zone.FOURTH):
        if income <= boundaries[zone]:
            return zone
    return Zone.FIFTH


__all__ = ["classify_zone"]
