"""Sanity checks for income tax parameter tables beyond schema validation."""

from __future__ import annotations

import argparse
from typing import Iterable, Mapping, Sequence

from .year_config import (
    ConfigurationError,
    HealthInsuranceConfig,
    IncomeTaxConfig,
    SolidarityConfig,
    UnsupportedYearError,
    YearConfiguration,
    Zone,
    available_years,
    load_year_configuration,
)

# Published coefficients are rounded, so adjacent marginal rates only agree
# to about this precision.
MARGINAL_RATE_TOLERANCE = 1e-3


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def marginal_rates(income_tax: IncomeTaxConfig) -> list[tuple[str, float]]:
    """Return the marginal rate at the start and end of each taxed zone."""

    boundaries = income_tax.zone_boundaries
    rates: list[tuple[str, float]] = []

    for zone in (Zone.SECOND, Zone.THIRD):
        width = (boundaries[zone] - boundaries[zone - 1]) / 10000
        start = income_tax.threshold[zone]
        end = (2 * income_tax.progression[zone] * width + start * 10000) / 10000
        rates.append((f"{zone.name.lower()} start", start))
        rates.append((f"{zone.name.lower()} end", end))

    for zone in (Zone.FOURTH, Zone.FIFTH):
        rates.append((zone.name.lower(), income_tax.percent[zone]))

    return rates


def _validate_income_tax(income_tax: IncomeTaxConfig) -> list[str]:
    errors: list[str] = []

    if income_tax.zone_boundaries[0] != 0:
        errors.append(
            _format_scope("income_tax.zone_boundaries", "first boundary is unused and should be 0")
        )

    for zone in (Zone.SECOND, Zone.THIRD):
        if income_tax.progression[zone] < 0:
            errors.append(
                _format_scope(
                    "income_tax.progression",
                    f"{zone.name.lower()} coefficient must be non-negative",
                )
            )

    previous_label: str | None = None
    previous_rate = 0.0
    for label, rate in marginal_rates(income_tax):
        if rate < 0 or rate > 1:
            errors.append(
                _format_scope(
                    "income_tax",
                    f"marginal rate at {label} ({rate:.4f}) must be between 0 and 1",
                )
            )
        if previous_label is not None and rate < previous_rate - MARGINAL_RATE_TOLERANCE:
            errors.append(
                _format_scope(
                    "income_tax",
                    (
                        f"marginal rate drops from {previous_rate:.4f} ({previous_label}) "
                        f"to {rate:.4f} ({label})"
                    ),
                )
            )
        previous_label, previous_rate = label, rate

    return errors


def _validate_solidarity(solidarity: SolidarityConfig) -> list[str]:
    errors: list[str] = []

    if solidarity.rate > 0 and solidarity.relief_rate < solidarity.rate:
        errors.append(
            _format_scope(
                "solidarity",
                "relief rate below the flat rate would cap the surcharge everywhere",
            )
        )

    return errors


def _validate_health_insurance(health: HealthInsuranceConfig) -> list[str]:
    errors: list[str] = []

    if health.minimum_monthly * 12 > health.contribution_cap:
        errors.append(
            _format_scope(
                "health_insurance",
                "yearly minimum contribution exceeds the contribution cap",
            )
        )

    return errors


def _validate_meta(meta: Mapping[str, object]) -> list[str]:
    errors: list[str] = []
    sources = meta.get("sources")

    if sources is None:
        return errors
    if not isinstance(sources, Mapping):
        errors.append(_format_scope("meta.sources", "must be a mapping of labels to URLs"))
        return errors

    for label, url in sources.items():
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            errors.append(_format_scope(f"meta.sources.{label}", "URL must be absolute"))

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_income_tax(config.income_tax))
    errors.extend(_validate_solidarity(config.solidarity))
    errors.extend(_validate_health_insurance(config.health_insurance))
    errors.extend(_validate_meta(config.meta))

    return errors


def validate_all_years(years: Iterable[int] | None = None) -> dict[int, list[str]]:
    """Check every bundled parameter table, returning issues per tax year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Check the bundled German income tax parameter tables for inconsistencies."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Tax years to check (defaults to every year in the manifest)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the parameter table checks and return a process exit code."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, UnsupportedYearError, ConfigurationError) as error:
            print(f"[{year}] cannot load parameter table: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} inconsistency(ies) found:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
