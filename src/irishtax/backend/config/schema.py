"""Pydantic models describing the tax year constants schema."""

from __future__ import annotations

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
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _require_rate(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


def _require_non_negative(value: float, label: str) -> None:
    if value < 0:
        raise ConfigurationError(f"{label} must be non-negative")


class RateCutoffTable(ImmutableModel):
    """Standard rate cutoff points keyed by assessment category."""

    single: float
    married_one_income: float
    married_two_incomes: float
    second_earner_max: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        for name in (
            "single",
            "married_one_income",
            "married_two_incomes",
            "second_earner_max",
        ):
            _require_non_negative(getattr(self, name), f"Rate cutoff '{name}'")
        return self


class IncomeTaxConfig(ImmutableModel):
    """Two-tier income tax rates and the cutoff table."""

    standard_rate: float
    higher_rate: float
    rate_cutoffs: RateCutoffTable

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        _require_rate(self.standard_rate, "Standard rate")
        _require_rate(self.higher_rate, "Higher rate")
        return self


class UscBand(ImmutableModel):
    """Single band of the universal social charge schedule."""

    lower_bound: float = Field(alias="lower")
    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "USC rates")
        _require_non_negative(self.lower_bound, "USC lower bounds")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("USC upper bounds must exceed their lower bound")
        return self


class UscConfig(ImmutableModel):
    """Universal social charge schedule and exemption threshold."""

    exemption_threshold: float
    bands: tuple[UscBand, ...]

    @model_validator(mode="after")
    def _validate_schedule(self) -> Self:
        _require_non_negative(self.exemption_threshold, "USC exemption threshold")
        _validate_band_sequence(self.bands, "USC")
        expected_lower = 0.0
        for band in self.bands:
            if band.lower_bound != expected_lower:
                raise ConfigurationError("USC bands must be contiguous from zero")
            expected_lower = band.upper_bound if band.upper_bound is not None else expected_lower
        return self


class PrsiConfig(ImmutableModel):
    """Self-employed (Class S) PRSI parameters."""

    rate: float
    minimum: float
    threshold: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "PRSI rate")
        _require_non_negative(self.minimum, "PRSI minimum")
        _require_non_negative(self.threshold, "PRSI threshold")
        return self


class CreditAmounts(ImmutableModel):
    """Flat personal tax credit amounts."""

    single: float
    married: float
    earned_income: float
    paye: float
    home_carer: float
    single_parent: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> Self:
        for name, amount in self.model_dump().items():
            _require_non_negative(amount, f"Credit '{name}'")
        return self


class PensionAgeLimit(ImmutableModel):
    """Age bracket (inclusive upper bound) mapped to a relief percentage."""

    upper_bound: int | None = Field(default=None, alias="max_age")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "Pension relief rates")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Pension age limits must be positive")
        return self


class PensionConfig(ImmutableModel):
    """Age-indexed pension relief limits."""

    earnings_cap: float
    age_limits: tuple[PensionAgeLimit, ...]

    @model_validator(mode="after")
    def _validate_limits(self) -> Self:
        _require_non_negative(self.earnings_cap, "Pension earnings cap")
        _validate_band_sequence(self.age_limits, "Pension age")
        return self


class RentCreditConfig(ImmutableModel):
    """Rent credit caps by household type."""

    single: float
    couple: float


class TuitionConfig(ImmutableModel):
    """Tuition fee relief disregard amounts and rate."""

    full_time_disregard: float
    part_time_disregard: float
    max_per_course: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "Tuition relief rate")
        _require_non_negative(self.max_per_course, "Tuition per-course maximum")
        return self


class ReliefConfig(ImmutableModel):
    """Rates and caps for claimable reliefs."""

    medical_rate: float
    remote_working_rate: float
    charitable_minimum: float
    rent_credit: RentCreditConfig
    tuition: TuitionConfig

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.medical_rate, "Medical relief rate")
        _require_rate(self.remote_working_rate, "Remote working rate")
        _require_non_negative(self.charitable_minimum, "Charitable minimum")
        return self


class CapitalGainsConfig(ImmutableModel):
    """Flat capital gains tax rate and annual exemption."""

    rate: float
    annual_exemption: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "CGT rate")
        _require_non_negative(self.annual_exemption, "CGT annual exemption")
        return self


class VehicleBikBand(ImmutableModel):
    """Business mileage band mapped to a percentage of market value."""

    upper_bound: float | None = Field(default=None, alias="max_km")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _require_rate(self.rate, "Vehicle BIK rates")
        return self


class VehicleBikConfig(ImmutableModel):
    """Mileage-banded vehicle benefit-in-kind table."""

    bands: tuple[VehicleBikBand, ...]

    @model_validator(mode="after")
    def _validate_bands(self) -> Self:
        _validate_band_sequence(self.bands, "Vehicle BIK")
        return self


def _validate_band_sequence(bands: Sequence[Any], label: str) -> None:
    if not bands:
        raise ConfigurationError(f"At least one {label} band must be defined")
    last_upper: float | None = None
    for band in bands[:-1]:
        upper = band.upper_bound
        if upper is None:
            raise ConfigurationError(f"Only the final {label} band may be open-ended")
        if last_upper is not None and upper <= last_upper:
            raise ConfigurationError(f"{label} bands must be in ascending order")
        last_upper = upper
    if bands[-1].upper_bound is not None:
        raise ConfigurationError(f"Final {label} band must have an open upper bound")


class TaxConstants(ImmutableModel):
    """Structured representation of one tax year's rules."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    income_tax: IncomeTaxConfig
    usc: UscConfig
    prsi: PrsiConfig
    credits: CreditAmounts
    pension: PensionConfig
    reliefs: ReliefConfig
    capital_gains: CapitalGainsConfig
    vehicle_bik: VehicleBikConfig

    @field_validator("meta", mode="before")
    @classmethod
    def _default_meta(cls, value: Any) -> Mapping[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")
        return value


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: tuple[TaxYearManifestEntry, ...]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
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
    "CapitalGainsConfig",
    "ConfigurationError",
    "CreditAmounts",
    "ImmutableModel",
    "IncomeTaxConfig",
    "PensionAgeLimit",
    "PensionConfig",
    "PrsiConfig",
    "RateCutoffTable",
    "ReliefConfig",
    "RentCreditConfig",
    "TaxConstants",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "TuitionConfig",
    "UscBand",
    "UscConfig",
    "ValidationError",
    "VehicleBikBand",
    "VehicleBikConfig",
]
