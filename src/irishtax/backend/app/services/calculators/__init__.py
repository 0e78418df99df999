"""Domain-specific calculation helpers."""

from .capital_gains import CapitalGainsResult, calculate_capital_gains
from .charges import PrsiResult, UscResult, calculate_prsi, calculate_usc
from .credits import CreditSummary, calculate_credits
from .income import (
    DEFAULT_AGE,
    IncomeBreakdown,
    PensionRelief,
    aggregate_income,
    calculate_pension_relief,
    resolve_age,
)
from .income_tax import (
    SplitYearApportionment,
    apportion_split_year,
    calculate_income_tax,
    resolve_rate_cutoff,
)
from .utils import (
    Band,
    format_percentage,
    round_currency,
    round_half_up,
    select_band,
    walk_bands,
)
from .vehicle import vehicle_benefit_in_kind

__all__ = [
    "Band",
    "CapitalGainsResult",
    "CreditSummary",
    "DEFAULT_AGE",
    "IncomeBreakdown",
    "PensionRelief",
    "PrsiResult",
    "SplitYearApportionment",
    "UscResult",
    "aggregate_income",
    "apportion_split_year",
    "calculate_capital_gains",
    "calculate_credits",
    "calculate_income_tax",
    "calculate_pension_relief",
    "calculate_prsi",
    "calculate_usc",
    "format_percentage",
    "resolve_age",
    "resolve_rate_cutoff",
    "round_currency",
    "round_half_up",
    "select_band",
    "vehicle_benefit_in_kind",
    "walk_bands",
]
