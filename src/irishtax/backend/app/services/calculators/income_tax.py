"""Standard rate cutoff resolution, split-year apportionment and banding."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from irishtax.backend.app.models import (
    AssessmentBasis,
    MaritalStatus,
    SplitYear,
    TaxBandLine,
    TaxInput,
)
from irishtax.backend.config.year_config import IncomeTaxConfig

from .utils import (
    Band,
    format_percentage,
    round_currency,
    round_half_up,
    walk_bands,
)


@dataclass(frozen=True)
class SplitYearApportionment:
    """Day-weighted blend of two cutoffs within one calendar year."""

    change_effective_date: date
    total_days: int
    days_before: int
    days_after: int
    pre_cutoff: float
    post_cutoff: float
    blended_cutoff: float

    @property
    def note(self) -> str:
        return (
            f"Assessment basis changed on {self.change_effective_date.isoformat()}. "
            "Standard rate cutoff proportioned: "
            f"{self.days_before} days at old basis + {self.days_after} days at new basis "
            f"= €{self.blended_cutoff:,.0f}."
        )


def resolve_rate_cutoff(
    basis: AssessmentBasis,
    marital_status: MaritalStatus,
    spouse_income: float,
    config: IncomeTaxConfig,
) -> float:
    """Return the standard rate cutoff for a basis and household status."""

    cutoffs = config.rate_cutoffs
    if basis == "joint" and marital_status == "married":
        spouse_extra = min(max(0.0, spouse_income), cutoffs.second_earner_max)
        return cutoffs.single + spouse_extra
    return cutoffs.single


def apportion_split_year(
    split_year: SplitYear,
    payload: TaxInput,
    config: IncomeTaxConfig,
) -> SplitYearApportionment:
    """Blend the prior and current cutoffs by days either side of the change."""

    change_date = split_year.change_effective_date
    year_start = date(change_date.year, 1, 1)
    year_end = date(change_date.year, 12, 31)
    total_days = (year_end - year_start).days + 1
    days_before = (change_date - year_start).days
    days_after = total_days - days_before

    pre_cutoff = resolve_rate_cutoff(
        split_year.prior_basis, payload.marital_status, payload.spouse_income, config
    )
    post_cutoff = resolve_rate_cutoff(
        payload.assessment_basis, payload.marital_status, payload.spouse_income, config
    )

    blended = round_half_up(
        pre_cutoff * (days_before / total_days) + post_cutoff * (days_after / total_days)
    )

    return SplitYearApportionment(
        change_effective_date=change_date,
        total_days=total_days,
        days_before=days_before,
        days_after=days_after,
        pre_cutoff=pre_cutoff,
        post_cutoff=post_cutoff,
        blended_cutoff=blended,
    )


def calculate_income_tax(
    assessable_income: float, cutoff: float, config: IncomeTaxConfig
) -> list[TaxBandLine]:
    """Split ``assessable_income`` at ``cutoff`` into standard and higher bands."""

    bands = (
        Band(0.0, max(0.0, cutoff), config.standard_rate, "Standard rate"),
        Band(max(0.0, cutoff), None, config.higher_rate, "Higher rate"),
    )

    lines: list[TaxBandLine] = []
    for band, amount in walk_bands(assessable_income, bands):
        lines.append(
            TaxBandLine(
                label=f"{band.label} ({format_percentage(band.rate)})",
                amount=amount,
                rate=band.rate,
                tax=round_currency(amount * band.rate),
            )
        )
    return lines


__all__ = [
    "SplitYearApportionment",
    "apportion_split_year",
    "calculate_income_tax",
    "resolve_rate_cutoff",
]
