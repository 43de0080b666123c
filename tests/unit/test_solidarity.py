"""Unit tests for the solidarity surcharge."""

from __future__ import annotations

import pytest

from germantax.backend.config.year_config import YearConfiguration
from germantax.backend.services.calculators import calculate_solidarity


@pytest.mark.parametrize("couple", [False, True])
def test_no_surcharge_up_to_exemption(config_2018: YearConfiguration, couple: bool) -> None:
    exemption = config_2018.solidarity.threshold * (2 if couple else 1)

    assert calculate_solidarity(0, config_2018, couple) == 0.0
    assert calculate_solidarity(exemption, config_2018, couple) == 0.0


def test_couples_get_doubled_exemption(config_2018: YearConfiguration) -> None:
    income_tax = 1_500

    assert calculate_solidarity(income_tax, config_2018, False) > 0
    assert calculate_solidarity(income_tax, config_2018, True) == 0.0


def test_marginal_relief_applies_just_above_exemption(
    config_2018: YearConfiguration,
) -> None:
    surcharge = calculate_solidarity(1_191, config_2018, False)

    assert surcharge == pytest.approx((1_191 - 972) * 0.2)
    assert surcharge < 0.055 * 1_191


def test_flat_rate_applies_well_above_exemption(config_2018: YearConfiguration) -> None:
    assert calculate_solidarity(12_432, config_2018, False) == pytest.approx(683.76)


def test_surcharge_never_exceeds_flat_rate(config_2018: YearConfiguration) -> None:
    rate = config_2018.solidarity.rate
    for income_tax in range(0, 60_001, 37):
        for couple in (False, True):
            surcharge = calculate_solidarity(income_tax, config_2018, couple)
            assert 0 <= surcharge <= rate * income_tax + 1e-9
