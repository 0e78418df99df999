"""Pydantic models describing the public API surface."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

__all__ = [
    "BusinessInput",
    "CalculationRequest",
    "CapitalGainsInput",
    "EmploymentInput",
    "HouseholdInput",
    "OtherIncomeInput",
    "ReliefsInput",
    "RentalInput",
    "SplitYearInput",
    "TaxpayerInput",
    "VehicleBenefitRequest",
    "VehicleInput",
    "format_validation_error",
]


class TaxpayerInput(BaseModel):
    """Identity and household status of the taxpayer."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    pps_number: str = ""
    date_of_birth: date | None = None
    marital_status: Literal[
        "single", "married", "civil_partner", "widowed", "separated"
    ] = "single"
    assessment_basis: Literal["single", "joint", "separate"] = "single"

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _blank_birth_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class VehicleInput(BaseModel):
    """Company vehicle details used to derive a benefit-in-kind amount."""

    model_config = ConfigDict(extra="forbid")

    original_market_value: float = Field(default=0.0, ge=0)
    annual_business_km: float = Field(default=0.0, ge=0)


class EmploymentInput(BaseModel):
    """Schedule E director income."""

    model_config = ConfigDict(extra="forbid")

    salary: float = Field(default=0.0, ge=0)
    dividends: float = Field(default=0.0, ge=0)
    benefit_in_kind: float = Field(default=0.0, ge=0)
    vehicle: VehicleInput | None = None
    mileage_allowance: float = Field(default=0.0, ge=0)
    has_paye_income: bool = False


class BusinessInput(BaseModel):
    """Schedule D trading income."""

    model_config = ConfigDict(extra="forbid")

    income: float = Field(default=0.0, ge=0)
    expenses: float = Field(default=0.0, ge=0)
    capital_allowances: float = Field(default=0.0, ge=0)


class RentalInput(BaseModel):
    """Rental income and deductible expenses."""

    model_config = ConfigDict(extra="forbid")

    income: float = Field(default=0.0, ge=0)
    expenses: float = Field(default=0.0, ge=0)


class OtherIncomeInput(BaseModel):
    """Foreign and miscellaneous income."""

    model_config = ConfigDict(extra="forbid")

    foreign_income: float = Field(default=0.0, ge=0)
    other_income: float = Field(default=0.0, ge=0)


class CapitalGainsInput(BaseModel):
    """Chargeable gains and allowable losses for the year."""

    model_config = ConfigDict(extra="forbid")

    gains: float = Field(default=0.0, ge=0)
    losses: float = Field(default=0.0, ge=0)


class ReliefsInput(BaseModel):
    """Relief claims entered by the taxpayer."""

    model_config = ConfigDict(extra="forbid")

    pension_contributions: float = Field(default=0.0, ge=0)
    medical_expenses: float = Field(default=0.0, ge=0)
    rent_paid: float = Field(default=0.0, ge=0)
    charitable_donations: float = Field(default=0.0, ge=0)
    remote_working_costs: float = Field(default=0.0, ge=0)
    tuition_fees: float = Field(default=0.0, ge=0)
    tuition_part_time: bool = False


class HouseholdInput(BaseModel):
    """Spouse income and household credit claims."""

    model_config = ConfigDict(extra="forbid")

    spouse_income: float = Field(default=0.0, ge=0)
    claim_home_carer: bool = False
    claim_single_parent: bool = False


class SplitYearInput(BaseModel):
    """Change of assessment basis taking effect during the year."""

    model_config = ConfigDict(extra="forbid")

    change_effective_date: date
    prior_assessment_basis: Literal["single", "joint", "separate"]


class CalculationRequest(BaseModel):
    """Top-level payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    taxpayer: TaxpayerInput = Field(default_factory=TaxpayerInput)
    employment: EmploymentInput = Field(default_factory=EmploymentInput)
    business: BusinessInput = Field(default_factory=BusinessInput)
    rental: RentalInput = Field(default_factory=RentalInput)
    other: OtherIncomeInput = Field(default_factory=OtherIncomeInput)
    capital_gains: CapitalGainsInput = Field(default_factory=CapitalGainsInput)
    reliefs: ReliefsInput = Field(default_factory=ReliefsInput)
    household: HouseholdInput = Field(default_factory=HouseholdInput)
    preliminary_tax_paid: float = Field(default=0.0, ge=0)
    split_year: SplitYearInput | None = None

    @field_validator("split_year", mode="before")
    @classmethod
    def _drop_empty_split_year(cls, value: Any) -> Any:
        if isinstance(value, Mapping) and not any(value.values()):
            return None
        return value


class VehicleBenefitRequest(BaseModel):
    """Payload accepted by the vehicle benefit-in-kind endpoint."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    original_market_value: float = Field(..., ge=0)
    annual_business_km: float = Field(..., ge=0)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
