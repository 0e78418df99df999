"""Capital gains tax calculator."""

from __future__ import annotations

from dataclasses import dataclass

from irishtax.backend.app.models import TaxInput
from irishtax.backend.config.year_config import CapitalGainsConfig

from .utils import round_currency


@dataclass(frozen=True)
class CapitalGainsResult:
    applicable: bool
    gains: float
    losses: float
    exemption: float
    payable: float


def calculate_capital_gains(
    payload: TaxInput, config: CapitalGainsConfig
) -> CapitalGainsResult:
    """Return CGT on net gains above the annual exemption."""

    net_gains = payload.capital_gains - payload.capital_losses
    if net_gains <= 0:
        return CapitalGainsResult(
            applicable=False,
            gains=payload.capital_gains,
            losses=payload.capital_losses,
            exemption=0.0,
            payable=0.0,
        )

    taxable = max(0.0, net_gains - config.annual_exemption)
    return CapitalGainsResult(
        applicable=taxable > 0,
        gains=payload.capital_gains,
        losses=payload.capital_losses,
        exemption=config.annual_exemption,
        payable=round_currency(taxable * config.rate),
    )


__all__ = ["CapitalGainsResult", "calculate_capital_gains"]
