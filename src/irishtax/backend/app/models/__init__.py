"""Typed input and result models shared across the calculation services.

``TaxInput`` is the normalised, engine-facing view of one taxpayer's year and
``TaxResult`` is the single immutable value the engine returns. Both are
frozen Pydantic models. The request schema the
API accepts lives in :mod:`.api` and is normalised into ``TaxInput`` by the
calculation service.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .api import (
    BusinessInput,
    CalculationRequest,
    CapitalGainsInput,
    EmploymentInput,
    HouseholdInput,
    OtherIncomeInput,
    ReliefsInput,
    RentalInput,
    SplitYearInput,
    TaxpayerInput,
    VehicleInput,
    VehicleBenefitRequest,
    format_validation_error,
)

MaritalStatus = Literal["single", "married", "civil_partner", "widowed", "separated"]
AssessmentBasis = Literal["single", "joint", "separate"]

__all__ = [
    "AssessmentBasis",
    "BusinessInput",
    "CalculationRequest",
    "CapitalGainsInput",
    "CreditLine",
    "EmploymentInput",
    "HouseholdInput",
    "MaritalStatus",
    "OtherIncomeInput",
    "ReliefsInput",
    "RentalInput",
    "SplitYear",
    "SplitYearInput",
    "TaxBandLine",
    "TaxInput",
    "TaxResult",
    "TaxpayerInput",
    "VehicleBenefitRequest",
    "VehicleInput",
    "format_validation_error",
]


class SplitYear(BaseModel):
    """Mid-year change of assessment basis."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    change_effective_date: date
    prior_basis: AssessmentBasis


class TaxInput(BaseModel):
    """Normalised taxpayer data for one self-assessed tax year.

    Amounts are taken as supplied. Negative values are not rejected here; the
    engine floors every derived subtraction at zero instead.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    director_name: str = ""
    pps_number: str = ""
    date_of_birth: date | None = None
    marital_status: MaritalStatus = "single"
    assessment_basis: AssessmentBasis = "single"

    salary: float = 0.0
    dividends: float = 0.0
    benefit_in_kind: float = 0.0

    business_income: float = 0.0
    business_expenses: float = 0.0
    capital_allowances: float = 0.0

    rental_income: float = 0.0
    rental_expenses: float = 0.0
    foreign_income: float = 0.0
    other_income: float = 0.0

    capital_gains: float = 0.0
    capital_losses: float = 0.0

    pension_contributions: float = 0.0
    medical_expenses: float = 0.0
    rent_paid: float = 0.0
    charitable_donations: float = 0.0
    remote_working_costs: float = 0.0
    tuition_fees: float = 0.0
    tuition_part_time: bool = False

    spouse_income: float = 0.0

    claim_home_carer: bool = False
    claim_single_parent: bool = False
    has_paye_income: bool = False

    mileage_allowance: float = 0.0
    preliminary_tax_paid: float = 0.0

    split_year: SplitYear | None = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _blank_birth_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_married_or_partnered(self) -> bool:
        return self.marital_status in {"married", "civil_partner"}


class TaxBandLine(BaseModel):
    """One row of a banded computation (income tax or USC)."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: float
    rate: float
    tax: float


class CreditLine(BaseModel):
    """One applicable tax credit."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: float


class TaxResult(BaseModel):
    """Every figure needed to audit or report a self-assessed return."""

    model_config = ConfigDict(frozen=True)

    tax_year: int

    schedule_e: float
    schedule_d: float
    rental_profit: float
    foreign_income: float
    other_income: float
    spouse_income: float
    total_gross_income: float

    pension_relief: float
    pension_age_limit: float
    total_deductions: float
    assessable_income: float

    standard_rate_cutoff: float
    income_tax_bands: tuple[TaxBandLine, ...] = ()
    gross_income_tax: float

    credits: tuple[CreditLine, ...] = ()
    total_credits: float
    net_income_tax: float

    usc_bands: tuple[TaxBandLine, ...] = ()
    total_usc: float
    usc_exempt: bool

    prsi_assessable: float
    prsi_calculated: float
    prsi_payable: float

    cgt_applicable: bool
    cgt_gains: float
    cgt_losses: float
    cgt_exemption: float
    cgt_payable: float

    total_liability: float
    preliminary_tax_paid: float
    balance_due: float

    split_year_applied: bool = False
    split_year_note: str = ""

    warnings: tuple[str, ...] = Field(default_factory=tuple)
    notes: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def is_refund(self) -> bool:
        return self.balance_due < 0
