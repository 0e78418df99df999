"""Income aggregation and pension relief helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from irishtax.backend.app.models import TaxInput
from irishtax.backend.config.year_config import PensionConfig

from .utils import round_currency, select_band

# Mid-range age assumed when no birth date is on file.
DEFAULT_AGE = 35


@dataclass(frozen=True)
class IncomeBreakdown:
    """Gross income by schedule after per-stream floors."""

    schedule_e: float
    schedule_d: float
    rental_profit: float
    total_gross_income: float


@dataclass(frozen=True)
class PensionRelief:
    """Granted pension relief and the age-band percentage applied."""

    claimed: float
    relief: float
    age_limit: float
    relevant_earnings: float

    @property
    def capped(self) -> bool:
        return self.claimed > 0 and self.relief < self.claimed


def resolve_age(date_of_birth: date | None, today: date) -> int:
    """Return the exact age on ``today`` or ``DEFAULT_AGE`` when unknown."""

    if date_of_birth is None:
        return DEFAULT_AGE

    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def aggregate_income(payload: TaxInput) -> IncomeBreakdown:
    """Combine the income streams into schedule totals."""

    gross_schedule_e = payload.salary + payload.dividends + payload.benefit_in_kind
    schedule_e = max(0.0, gross_schedule_e - payload.mileage_allowance)
    schedule_d = max(
        0.0,
        payload.business_income - payload.business_expenses - payload.capital_allowances,
    )
    rental_profit = max(0.0, payload.rental_income - payload.rental_expenses)

    # Spouse income widens the joint bands; it is never taxed on its own.
    total = (
        schedule_e
        + schedule_d
        + rental_profit
        + payload.foreign_income
        + payload.other_income
        + payload.spouse_income
    )

    return IncomeBreakdown(
        schedule_e=schedule_e,
        schedule_d=schedule_d,
        rental_profit=rental_profit,
        total_gross_income=total,
    )


def calculate_pension_relief(
    payload: TaxInput, config: PensionConfig, today: date
) -> PensionRelief:
    """Cap pension contributions at the age-indexed share of relevant earnings."""

    age = resolve_age(payload.date_of_birth, today)
    bracket = select_band(age, config.age_limits)

    relevant_earnings = min(
        max(0.0, payload.salary + payload.business_income), config.earnings_cap
    )
    maximum = relevant_earnings * bracket.rate
    relief = max(0.0, min(payload.pension_contributions, maximum))

    return PensionRelief(
        claimed=payload.pension_contributions,
        relief=round_currency(relief),
        age_limit=bracket.rate,
        relevant_earnings=relevant_earnings,
    )


__all__ = [
    "DEFAULT_AGE",
    "IncomeBreakdown",
    "PensionRelief",
    "aggregate_income",
    "calculate_pension_relief",
    "resolve_age",
]
