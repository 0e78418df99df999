"""Orchestrate request validation, normalisation, and tax calculations.

``compute`` is the pure Form 11 pipeline: every stage reads the same
``TaxInput`` and ``TaxConstants`` and returns an independent partial result,
and the partial results are combined into one immutable ``TaxResult``. The
constants are always passed in explicitly so different years, or synthetic
tables in tests, can be used side by side.

``calculate_tax`` is the entry point for the HTTP layer. It validates a raw
payload, loads the constants for the requested year, derives inputs such as a
vehicle benefit-in-kind, and returns a JSON-ready mapping. Profiling hooks live
here so the calculators themselves stay free of side effects.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import date
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from irishtax.backend.app.models import (
    CalculationRequest,
    SplitYear,
    TaxInput,
    TaxResult,
    format_validation_error,
)
from irishtax.backend.config.year_config import (
    TaxConstants,
    default_year,
    load_year_configuration,
)
from irishtax.backend.version import get_project_version

from .calculators import (
    aggregate_income,
    apportion_split_year,
    calculate_capital_gains,
    calculate_credits,
    calculate_income_tax,
    calculate_pension_relief,
    calculate_prsi,
    calculate_usc,
    resolve_rate_cutoff,
    round_currency,
    vehicle_benefit_in_kind,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("IRISHTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def compute(
    tax_input: TaxInput,
    constants: TaxConstants,
    *,
    today: date | None = None,
) -> TaxResult:
    """Compute the full self-assessed liability for ``tax_input``.

    ``today`` is the reference date for the taxpayer's age and defaults to the
    current date.
    """

    reference_date = today or date.today()
    warnings: list[str] = []
    notes: list[str] = []

    split_year_note = ""
    if tax_input.split_year is not None:
        apportionment = apportion_split_year(
            tax_input.split_year, tax_input, constants.income_tax
        )
        cutoff = apportionment.blended_cutoff
        split_year_note = apportionment.note
        notes.append(split_year_note)
    else:
        cutoff = resolve_rate_cutoff(
            tax_input.assessment_basis,
            tax_input.marital_status,
            tax_input.spouse_income,
            constants.income_tax,
        )

    if tax_input.mileage_allowance > 0:
        notes.append(
            f"Mileage allowance claimed: €{tax_input.mileage_allowance:,.2f} "
            "(personal vehicle commute at civil service rates)."
        )

    income = aggregate_income(tax_input)

    pension = calculate_pension_relief(tax_input, constants.pension, reference_date)
    total_deductions = pension.relief
    assessable_income = max(0.0, income.total_gross_income - total_deductions)

    if pension.capped:
        warnings.append(
            f"Pension contributions capped at {pension.age_limit * 100:.0f}% of net "
            "relevant earnings (age-based limit). "
            f"Relief granted: €{pension.relief:,.2f}"
        )

    income_tax_bands = calculate_income_tax(assessable_income, cutoff, constants.income_tax)
    gross_income_tax = round_currency(sum(line.tax for line in income_tax_bands))

    credits = calculate_credits(tax_input, constants)
    notes.extend(credits.notes)
    net_income_tax = round_currency(max(0.0, gross_income_tax - credits.total))

    usc = calculate_usc(income.total_gross_income, constants.usc)
    if usc.exempt:
        notes.append(
            "USC exempt: total income does not exceed "
            f"€{constants.usc.exemption_threshold:,.0f}."
        )

    prsi = calculate_prsi(assessable_income, constants.prsi)
    if prsi.minimum_applied:
        notes.append(
            f"Minimum PRSI Class S contribution of €{constants.prsi.minimum:,.0f} applies."
        )

    cgt = calculate_capital_gains(tax_input, constants.capital_gains)

    total_liability = round_currency(net_income_tax + usc.total + prsi.payable + cgt.payable)
    # Negative balances are refunds and must not be clamped.
    balance_due = round_currency(total_liability - tax_input.preliminary_tax_paid)

    if balance_due < 0:
        notes.append(
            f"Overpayment detected: you may be due a refund of €{-balance_due:,.2f}."
        )

    charitable_minimum = constants.reliefs.charitable_minimum
    if 0 < tax_input.charitable_donations < charitable_minimum:
        warnings.append(
            f"Charitable donations must be at least €{charitable_minimum:,.0f} "
            "to qualify for relief."
        )

    return TaxResult(
        tax_year=constants.year,
        schedule_e=income.schedule_e,
        schedule_d=income.schedule_d,
        rental_profit=income.rental_profit,
        foreign_income=tax_input.foreign_income,
        other_income=tax_input.other_income,
        spouse_income=tax_input.spouse_income,
        total_gross_income=income.total_gross_income,
        pension_relief=pension.relief,
        pension_age_limit=pension.age_limit,
        total_deductions=total_deductions,
        assessable_income=assessable_income,
        standard_rate_cutoff=cutoff,
        income_tax_bands=tuple(income_tax_bands),
        gross_income_tax=gross_income_tax,
        credits=credits.lines,
        total_credits=credits.total,
        net_income_tax=net_income_tax,
        usc_bands=usc.bands,
        total_usc=usc.total,
        usc_exempt=usc.exempt,
        prsi_assessable=prsi.assessable,
        prsi_calculated=prsi.calculated,
        prsi_payable=prsi.payable,
        cgt_applicable=cgt.applicable,
        cgt_gains=cgt.gains,
        cgt_losses=cgt.losses,
        cgt_exemption=cgt.exemption,
        cgt_payable=cgt.payable,
        total_liability=total_liability,
        preliminary_tax_paid=tax_input.preliminary_tax_paid,
        balance_due=balance_due,
        split_year_applied=tax_input.split_year is not None,
        split_year_note=split_year_note,
        warnings=tuple(warnings),
        notes=tuple(notes),
    )


def _normalise_payload(request: CalculationRequest, constants: TaxConstants) -> TaxInput:
    taxpayer = request.taxpayer
    employment = request.employment
    reliefs = request.reliefs
    household = request.household

    benefit_in_kind = employment.benefit_in_kind
    vehicle = employment.vehicle
    if vehicle is not None:
        benefit_in_kind += vehicle_benefit_in_kind(
            vehicle.original_market_value, vehicle.annual_business_km, constants
        )

    split_year: SplitYear | None = None
    if request.split_year is not None:
        split_year = SplitYear(
            change_effective_date=request.split_year.change_effective_date,
            prior_basis=request.split_year.prior_assessment_basis,
        )

    return TaxInput(
        director_name=taxpayer.name,
        pps_number=taxpayer.pps_number,
        date_of_birth=taxpayer.date_of_birth,
        marital_status=taxpayer.marital_status,
        assessment_basis=taxpayer.assessment_basis,
        salary=employment.salary,
        dividends=employment.dividends,
        benefit_in_kind=round_currency(benefit_in_kind),
        business_income=request.business.income,
        business_expenses=request.business.expenses,
        capital_allowances=request.business.capital_allowances,
        rental_income=request.rental.income,
        rental_expenses=request.rental.expenses,
        foreign_income=request.other.foreign_income,
        other_income=request.other.other_income,
        capital_gains=request.capital_gains.gains,
        capital_losses=request.capital_gains.losses,
        pension_contributions=reliefs.pension_contributions,
        medical_expenses=reliefs.medical_expenses,
        rent_paid=reliefs.rent_paid,
        charitable_donations=reliefs.charitable_donations,
        remote_working_costs=reliefs.remote_working_costs,
        tuition_fees=reliefs.tuition_fees,
        tuition_part_time=reliefs.tuition_part_time,
        spouse_income=household.spouse_income,
        claim_home_carer=household.claim_home_carer,
        claim_single_parent=household.claim_single_parent,
        has_paye_income=employment.has_paye_income,
        mileage_allowance=employment.mileage_allowance,
        preliminary_tax_paid=request.preliminary_tax_paid,
        split_year=split_year,
    )


def parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    """Validate ``payload`` into a ``CalculationRequest``."""

    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
    *,
    today: date | None = None,
) -> dict[str, Any]:
    """Compute the Form 11 result for the provided payload."""

    request_model = parse_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    year = request_model.year or default_year()
    constants = load_year_configuration(year)

    with _profile_section("normalise_payload", timings):
        tax_input = _normalise_payload(request_model, constants)

    with _profile_section("compute", timings):
        result = compute(tax_input, constants, today=today)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    if result.warnings:
        _LOGGER.info(
            "Calculation for %s produced %d warning(s)", year, len(result.warnings)
        )

    response = result.model_dump(mode="json")
    response["meta"] = {"year": year, "version": get_project_version()}
    return response


def calculate_vehicle_benefit(
    original_market_value: float,
    annual_business_km: float,
    year: int | None = None,
) -> dict[str, Any]:
    """Return the vehicle benefit-in-kind for the given year's mileage bands."""

    resolved_year = year or default_year()
    constants = load_year_configuration(resolved_year)
    amount = vehicle_benefit_in_kind(original_market_value, annual_business_km, constants)
    return {"year": resolved_year, "benefit_in_kind": amount}


__all__ = [
    "calculate_tax",
    "calculate_vehicle_benefit",
    "compute",
    "parse_request",
]
