"""Company vehicle benefit-in-kind calculator."""

from __future__ import annotations

from irishtax.backend.config.year_config import TaxConstants

from .utils import round_currency, select_band


def vehicle_benefit_in_kind(
    original_market_value: float,
    annual_business_km: float,
    constants: TaxConstants,
) -> float:
    """Return the taxable benefit for a vehicle given its business mileage."""

    if original_market_value <= 0:
        return 0.0

    band = select_band(annual_business_km, constants.vehicle_bik.bands)
    return round_currency(original_market_value * band.rate)


__all__ = ["vehicle_benefit_in_kind"]
