"""Public health insurance cost estimate deducted before taxation."""

from __future__ import annotations

from germantax.backend.config.year_config import HealthInsuranceConfig


def calculate_public_health_insurance(income: float, config: HealthInsuranceConfig) -> float:
    """Return the monthly public health insurance cost for a yearly ``income``."""

    yearly_contribution = income * config.contribution_rate
    if yearly_contribution >= config.contribution_cap:
        return config.maximum_monthly
    return max(config.minimum_monthly, yearly_contribution / 12)


__all__ = ["calculate_public_health_insurance"]
