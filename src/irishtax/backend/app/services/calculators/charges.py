"""Universal social charge and PRSI Class S calculators."""

from __future__ import annotations

from dataclasses import dataclass

from irishtax.backend.app.models import TaxBandLine
from irishtax.backend.config.year_config import PrsiConfig, UscConfig

from .utils import round_currency, walk_bands


@dataclass(frozen=True)
class UscResult:
    bands: tuple[TaxBandLine, ...]
    total: float
    exempt: bool


@dataclass(frozen=True)
class PrsiResult:
    assessable: float
    calculated: float
    payable: float
    minimum_applied: bool = False


def calculate_usc(total_gross_income: float, config: UscConfig) -> UscResult:
    """Charge USC on gross income, not on income after pension relief."""

    if total_gross_income <= config.exemption_threshold:
        return UscResult(bands=(), total=0.0, exempt=True)

    lines = [
        TaxBandLine(
            label=f"USC {band.rate * 100:.1f}%",
            amount=amount,
            rate=band.rate,
            tax=round_currency(amount * band.rate),
        )
        for band, amount in walk_bands(total_gross_income, config.bands)
    ]
    total = round_currency(sum(line.tax for line in lines))
    return UscResult(bands=tuple(lines), total=total, exempt=False)


def calculate_prsi(assessable_income: float, config: PrsiConfig) -> PrsiResult:
    """Flat-rate Class S contribution with a minimum floor above the threshold."""

    if assessable_income < config.threshold:
        return PrsiResult(assessable=0.0, calculated=0.0, payable=0.0)

    calculated = assessable_income * config.rate
    payable = max(calculated, config.minimum)

    return PrsiResult(
        assessable=assessable_income,
        calculated=round_currency(calculated),
        payable=round_currency(payable),
        minimum_applied=calculated < config.minimum,
    )


__all__ = ["PrsiResult", "UscResult", "calculate_prsi", "calculate_usc"]
