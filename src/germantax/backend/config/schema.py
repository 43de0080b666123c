"""Pydantic models describing the tax year parameter table schema."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class UnsupportedYearError(LookupError):
    """Raised when a tax year is not declared in the configuration manifest."""

    def __init__(self, year: int) -> None:
        super().__init__(f"Tax year {year} is not declared in the configuration manifest")
        self.year = year


class Zone(IntEnum):
    """Progressive income tax zones, numbered after their lower boundary index."""

    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    FIFTH = 5

    @classmethod
    def from_key(cls, value: Any) -> Zone:
        """Resolve ``value`` given as a member, number or name such as ``"second"``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key.isdigit():
                value = int(key)
        try:
            return cls(value)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown tax zone '{value}'") from exc


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _coerce_zone_mapping(value: Any, section: str) -> Mapping[Zone, float]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{section}' must map tax zones to numbers")
    return {Zone.from_key(key): float(rate) for key, rate in value.items()}


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _require_zones(
    mapping: Mapping[Zone, float], zones: Sequence[Zone], section: str
) -> None:
    missing = [zone.name.lower() for zone in zones if zone not in mapping]
    if missing:
        raise ConfigurationError(
            f"'{section}' is missing values for zone(s): {', '.join(missing)}"
        )


class IncomeTaxConfig(ImmutableModel):
    """Zone boundaries and formula coefficients of the income tax schedule."""

    zone_boundaries: tuple[float, float, float, float, float]
    progression: Mapping[Zone, float]
    threshold: Mapping[Zone, float]
    percent: Mapping[Zone, float]

    @field_validator("zone_boundaries", mode="before")
    @classmethod
    def _coerce_boundaries(cls, value: Any) -> tuple[float, ...]:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ConfigurationError("Zone boundaries must be provided as a list")
        if len(value) != len(Zone):
            raise ConfigurationError(
                f"Exactly {len(Zone)} zone boundaries are required, found {len(value)}"
            )
        return tuple(float(entry) for entry in value)

    @field_validator("progression", mode="before")
    @classmethod
    def _coerce_progression(cls, value: Any) -> Mapping[Zone, float]:
        return _coerce_zone_mapping(value, "progression")

    @field_validator("threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: Any) -> Mapping[Zone, float]:
        return _coerce_zone_mapping(value, "threshold")

    @field_validator("percent", mode="before")
    @classmethod
    def _coerce_percent(cls, value: Any) -> Mapping[Zone, float]:
        return _coerce_zone_mapping(value, "percent")

    @model_validator(mode="after")
    def _validate_schedule(self) -> IncomeTaxConfig:
        if self.zone_boundaries[0] < 0:
            raise ConfigurationError("Zone boundaries must be non-negative")
        upper_boundaries = self.zone_boundaries[1:]
        for lower, upper in zip(upper_boundaries, upper_boundaries[1:]):
            if upper <= lower:
                raise ConfigurationError("Zone boundaries must be strictly increasing")

        _require_zones(self.progression, (Zone.SECOND, Zone.THIRD), "progression")
        _require_zones(self.threshold, (Zone.SECOND, Zone.THIRD), "threshold")
        _require_zones(self.percent, (Zone.FOURTH, Zone.FIFTH), "percent")

        for section in ("progression", "threshold", "percent"):
            object.__setattr__(self, section, _freeze(getattr(self, section)))

        for rate in self.percent.values():
            if rate < 0 or rate > 1:
                raise ConfigurationError("Marginal percentages must be between 0 and 1")
        return self

    def lower_bound(self, zone: Zone) -> float:
        """Return the boundary a zone starts above."""

        return self.zone_boundaries[zone - 1]


class SolidarityConfig(ImmutableModel):
    """Solidarity surcharge rate, exemption and marginal relief factor."""

    rate: float = Field(ge=0, le=1)
    threshold: float = Field(ge=0)
    relief_rate: float = Field(default=0.2, ge=0, le=1)

    def exemption(self, couple: bool) -> float:
        """Income tax amount up to which no surcharge is levied."""

        return self.threshold * (2 if couple else 1)


class HealthInsuranceConfig(ImmutableModel):
    """Public health insurance contribution estimate used before taxation."""

    contribution_rate: float = Field(ge=0, le=1)
    contribution_cap: float = Field(ge=0)
    maximum_monthly: float = Field(ge=0)
    minimum_monthly: float = Field(ge=0)

    @model_validator(mode="after")
    def _validate_bounds(self) -> HealthInsuranceConfig:
        if self.minimum_monthly > self.maximum_monthly:
            raise ConfigurationError(
                "Minimum monthly health insurance cost cannot exceed the maximum"
            )
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year parameter table."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    income_tax: IncomeTaxConfig
    solidarity: SolidarityConfig
    health_insurance: HealthInsuranceConfig

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("income_tax", "solidarity", "health_insurance"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        return prepared

    @model_validator(mode="after")
    def _freeze_meta(self) -> YearConfiguration:
        object.__setattr__(self, "meta", _freeze(self.meta))
        return self


class TaxYearManifestEntry(ImmutableModel):
    """A tax year listed in the manifest and the YAML file holding its parameter table."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Index of the tax years whose parameter tables ship with the package."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} in the parameter table manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "ConfigurationError",
    "HealthInsuranceConfig",
    "ImmutableModel",
    "IncomeTaxConfig",
    "SolidarityConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UnsupportedYearError",
    "ValidationError",
    "YearConfiguration",
    "Zone",
]
