"""Load the bundled per-year income tax parameter tables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    HealthInsuranceConfig,
    IncomeTaxConfig,
    SolidarityConfig,
    TaxYearManifest,
    TaxYearManifestEntry,
    UnsupportedYearError,
    YearConfiguration,
    Zone,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"

_LOGGER = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Read the manifest of bundled tax years once per process."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError(f"Parameter table manifest not found at {MANIFEST_FILE}")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid parameter table manifest: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Return the manifest entries in declaration order."""

    return load_manifest().years


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Load the parameter table for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise UnsupportedYearError(year) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Parameter table for {year} is declared but {config_file.name} is missing"
        )

    _LOGGER.debug("Loading tax year %s configuration from %s", year, config_file)
    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    try:
        configuration = YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid parameter table for {year}: {error}") from error

    if configuration.year != year:
        raise ConfigurationError(
            f"Parameter table year mismatch: {config_file.name} declares "
            f"{configuration.year}, expected {year}"
        )

    return configuration


def available_years() -> Sequence[int]:
    """Return the supported tax years in ascending order."""

    return load_manifest().supported_years


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "HealthInsuranceConfig",
    "IncomeTaxConfig",
    "MANIFEST_FILE",
    "SolidarityConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UnsupportedYearError",
    "YearConfiguration",
    "Zone",
    "available_years",
    "load_manifest",
    "load_year_configuration",
    "manifest_entries",
]
