"""Solidarity surcharge calculator."""

from __future__ import annotations

from germantax.backend.config.year_config import YearConfiguration


def calculate_solidarity(income_tax: float, config: YearConfiguration, couple: bool) -> float:
    """Return the unrounded solidarity surcharge levied on ``income_tax``.

    No surcharge is due up to the exemption amount, which doubles for couples.
    Above it the surcharge is the flat rate, capped by the marginal relief band
    so it phases in gradually:
    https://de.wikipedia.org/wiki/Solidaritätszuschlag
    """

    solidarity = config.solidarity
    exemption = solidarity.exemption(couple)
    if income_tax <= exemption:
        return 0.0
    return min(
        solidarity.rate * income_tax,
        (income_tax - exemption) * solidarity.relief_rate,
    )


__all__ = ["calculate_solidarity"]
