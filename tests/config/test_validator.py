from germantax.backend.config.validator import (
    main,
    marginal_rates,
    validate_all_years,
    validate_year_configuration,
)
from germantax.backend.config.year_config import Zone, load_year_configuration


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert all(not issues for issues in results.values()), results


def test_marginal_rates_join_up_across_zones() -> None:
    rates = dict(marginal_rates(load_year_configuration(2018).income_tax))

    assert rates["second start"] == 0.14
    assert abs(rates["second end"] - rates["third start"]) < 1e-3
    assert abs(rates["third end"] - rates["fourth"]) < 1e-3


def test_validator_flags_falling_top_rate() -> None:
    config = load_year_configuration(2018)
    income_tax = config.income_tax.model_copy(
        update={"percent": {Zone.FOURTH: 0.42, Zone.FIFTH: 0.30}}
    )
    broken = config.model_copy(update={"income_tax": income_tax})

    errors = validate_year_configuration(broken)

    assert any("marginal rate drops" in error and "(fifth)" in error for error in errors)


def test_validator_flags_weak_solidarity_relief() -> None:
    config = load_year_configuration(2018)
    solidarity = config.solidarity.model_copy(update={"relief_rate": 0.01})
    broken = config.model_copy(update={"solidarity": solidarity})

    errors = validate_year_configuration(broken)

    assert any(error.startswith("solidarity:") for error in errors)


def test_validator_flags_minimum_insurance_above_cap() -> None:
    config = load_year_configuration(2018)
    health = config.health_insurance.model_copy(update={"minimum_monthly": 400.0})
    broken = config.model_copy(update={"health_insurance": health})

    errors = validate_year_configuration(broken)

    assert any("health_insurance" in error and "contribution cap" in error for error in errors)


def test_validator_flags_relative_source_urls() -> None:
    config = load_year_configuration(2018)
    broken = config.model_copy(update={"meta": {"sources": {"income_tax": "wiki/Tarif"}}})

    errors = validate_year_configuration(broken)

    assert errors == ["meta.sources.income_tax: URL must be absolute"]


def test_main_reports_ok_for_configured_years(capsys) -> None:
    assert main([]) == 0
    assert "[2018] OK" in capsys.readouterr().out


def test_main_reports_unknown_years(capsys) -> None:
    assert main(["1999"]) == 1
    assert "[1999] cannot load parameter table" in capsys.readouterr().out
