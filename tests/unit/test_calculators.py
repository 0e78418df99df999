"""Unit coverage for the individual calculator helpers."""

from __future__ import annotations

from datetime import date

import pytest

from irishtax.backend.app.models import SplitYear, TaxInput
from irishtax.backend.app.services.calculators import (
    DEFAULT_AGE,
    Band,
    aggregate_income,
    apportion_split_year,
    calculate_capital_gains,
    calculate_credits,
    calculate_income_tax,
    calculate_pension_relief,
    calculate_prsi,
    calculate_usc,
    format_percentage,
    resolve_age,
    resolve_rate_cutoff,
    round_half_up,
    select_band,
    vehicle_benefit_in_kind,
    walk_bands,
)
from irishtax.backend.config.year_config import TaxConstants

BANDS = (
    Band(0, 10_000, 0.1),
    Band(10_000, 20_000, 0.2),
    Band(20_000, None, 0.3),
)


def test_walk_bands_portions_sum_to_amount() -> None:
    portions = walk_bands(25_000, BANDS)

    assert [amount for _, amount in portions] == [10_000, 10_000, 5_000]
    assert portions[-1][0].upper_bound is None


def test_walk_bands_stops_once_amount_is_exhausted() -> None:
    portions = walk_bands(10_000, BANDS)

    assert len(portions) == 1
    assert walk_bands(0, BANDS) == []
    assert walk_bands(-50, BANDS) == []


def test_walk_bands_skips_zero_width_band() -> None:
    bands = (Band(0, 0, 0.2), Band(0, None, 0.4))

    portions = walk_bands(1_000, bands)

    assert [(band.rate, amount) for band, amount in portions] == [(0.4, 1_000)]


@pytest.mark.parametrize(
    ("value", "expected_rate"),
    [(0, 0.1), (10_000, 0.1), (10_000.01, 0.2), (20_000, 0.2), (1_000_000, 0.3)],
)
def test_select_band_uses_inclusive_upper_bounds(value: float, expected_rate: float) -> None:
    assert select_band(value, BANDS).rate == expected_rate


def test_select_band_requires_bands() -> None:
    with pytest.raises(ValueError):
        select_band(1, ())


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1.0), (1.5, 2.0), (2.5, 3.0), (44_000.49, 44_000.0), (-0.5, 0.0)],
)
def test_round_half_up(value: float, expected: float) -> None:
    assert round_half_up(value) == expected


def test_format_percentage_drops_trailing_zeroes() -> None:
    assert format_percentage(0.2) == "20%"
    assert format_percentage(0.005) == "0.50%"


def test_resolve_age_defaults_when_birth_date_missing() -> None:
    assert resolve_age(None, date(2025, 6, 1)) == DEFAULT_AGE


def test_resolve_age_accounts_for_birthday_not_yet_reached() -> None:
    birth = date(1995, 6, 15)

    assert resolve_age(birth, date(2025, 6, 14)) == 29
    assert resolve_age(birth, date(2025, 6, 15)) == 30


def test_aggregate_income_floors_each_stream() -> None:
    payload = TaxInput(
        salary=20_000,
        dividends=1_000,
        mileage_allowance=500,
        business_income=5_000,
        business_expenses=8_000,
        rental_income=10_000,
        rental_expenses=4_000,
        foreign_income=300,
        spouse_income=2_000,
    )

    income = aggregate_income(payload)

    assert income.schedule_e == 20_500
    assert income.schedule_d == 0
    assert income.rental_profit == 6_000
    assert income.total_gross_income == 20_500 + 6_000 + 300 + 2_000


def test_pension_relief_switches_band_on_birthday(constants: TaxConstants) -> None:
    payload = TaxInput(
        salary=50_000, pension_contributions=20_000, date_of_birth=date(1995, 6, 15)
    )

    before = calculate_pension_relief(payload, constants.pension, date(2025, 6, 14))
    after = calculate_pension_relief(payload, constants.pension, date(2025, 6, 15))

    assert before.age_limit == pytest.approx(0.15)
    assert before.relief == 7_500
    assert after.age_limit == pytest.approx(0.20)
    assert after.relief == 10_000
    assert after.capped


def test_pension_relief_respects_earnings_cap(constants: TaxConstants) -> None:
    payload = TaxInput(
        salary=200_000, pension_contributions=100_000, date_of_birth=date(1960, 1, 1)
    )

    relief = calculate_pension_relief(payload, constants.pension, date(2025, 6, 1))

    assert relief.relevant_earnings == 115_000
    assert relief.relief == 46_000


def test_pension_relief_below_limit_is_not_capped(constants: TaxConstants) -> None:
    payload = TaxInput(salary=50_000, pension_contributions=1_000)

    relief = calculate_pension_relief(payload, constants.pension, date(2025, 6, 1))

    assert relief.relief == 1_000
    assert not relief.capped


def test_rate_cutoff_widening_is_monotonic_and_saturates(constants: TaxConstants) -> None:
    config = constants.income_tax
    cutoffs = [
        resolve_rate_cutoff("joint", "married", spouse_income, config)
        for spouse_income in (0, 10_000, 20_000, 35_000, 50_000, 120_000)
    ]

    assert cutoffs == sorted(cutoffs)
    assert cutoffs[0] == 44_000
    assert cutoffs[2] == 64_000
    assert cutoffs[-1] == 44_000 + config.rate_cutoffs.second_earner_max
    assert cutoffs[-1] == cutoffs[-2]


@pytest.mark.parametrize(
    ("basis", "status"),
    [("single", "married"), ("separate", "married"), ("joint", "civil_partner")],
)
def test_rate_cutoff_defaults_to_single(
    constants: TaxConstants, basis: str, status: str
) -> None:
    assert resolve_rate_cutoff(basis, status, 20_000, constants.income_tax) == 44_000


def test_split_year_on_first_day_uses_new_basis(constants: TaxConstants) -> None:
    payload = TaxInput(marital_status="married", assessment_basis="joint", spouse_income=20_000)
    split = SplitYear(change_effective_date=date(2025, 1, 1), prior_basis="single")

    apportionment = apportion_split_year(split, payload, constants.income_tax)

    assert apportionment.days_before == 0
    assert apportionment.days_after == 365
    assert apportionment.blended_cutoff == 64_000


def test_split_year_on_last_day_is_almost_entirely_prior_basis(
    constants: TaxConstants,
) -> None:
    payload = TaxInput(marital_status="married", assessment_basis="joint", spouse_income=20_000)
    split = SplitYear(change_effective_date=date(2025, 12, 31), prior_basis="single")

    apportionment = apportion_split_year(split, payload, constants.income_tax)

    assert apportionment.days_before == 364
    assert apportionment.days_after == 1
    assert apportionment.blended_cutoff == 44_055


def test_split_year_blends_by_days_and_renders_note(constants: TaxConstants) -> None:
    payload = TaxInput(marital_status="married", assessment_basis="joint", spouse_income=20_000)
    split = SplitYear(change_effective_date=date(2025, 7, 1), prior_basis="single")

    apportionment = apportion_split_year(split, payload, constants.income_tax)

    assert apportionment.total_days == 365
    assert apportionment.blended_cutoff == 54_082
    assert apportionment.note == (
        "Assessment basis changed on 2025-07-01. Standard rate cutoff proportioned: "
        "181 days at old basis + 184 days at new basis = €54,082."
    )


@pytest.mark.parametrize(
    ("change_date", "spouse_income"),
    [(date(2025, 12, 31), 182.5), (date(2024, 7, 2), 1)],
)
def test_split_year_blend_rounds_halves_up(
    constants: TaxConstants, change_date: date, spouse_income: float
) -> None:
    payload = TaxInput(
        marital_status="married", assessment_basis="joint", spouse_income=spouse_income
    )
    split = SplitYear(change_effective_date=change_date, prior_basis="single")

    apportionment = apportion_split_year(split, payload, constants.income_tax)

    assert apportionment.blended_cutoff == 44_001
    assert apportionment.note.endswith("= €44,001.")


def test_split_year_counts_leap_days(constants: TaxConstants) -> None:
    payload = TaxInput(marital_status="married", assessment_basis="joint", spouse_income=20_000)
    split = SplitYear(change_effective_date=date(2024, 3, 1), prior_basis="single")

    apportionment = apportion_split_year(split, payload, constants.income_tax)

    assert apportionment.total_days == 366
    assert apportionment.days_before == 60


def test_income_tax_single_band_below_cutoff(constants: TaxConstants) -> None:
    lines = calculate_income_tax(30_000, 44_000, constants.income_tax)

    assert len(lines) == 1
    assert lines[0].label == "Standard rate (20%)"
    assert lines[0].tax == 6_000


def test_income_tax_splits_at_cutoff(constants: TaxConstants) -> None:
    lines = calculate_income_tax(60_000, 44_000, constants.income_tax)

    assert [(line.amount, line.tax) for line in lines] == [(44_000, 8_800), (16_000, 6_400)]
    assert lines[1].label == "Higher rate (40%)"


def test_income_tax_zero_income_has_no_bands(constants: TaxConstants) -> None:
    assert calculate_income_tax(0, 44_000, constants.income_tax) == []


def test_usc_exempt_at_threshold(constants: TaxConstants) -> None:
    result = calculate_usc(13_000, constants.usc)

    assert result.exempt
    assert result.bands == ()
    assert result.total == 0


def test_usc_above_threshold_charges_every_band_from_zero(constants: TaxConstants) -> None:
    result = calculate_usc(30_000, constants.usc)

    assert not result.exempt
    assert [line.label for line in result.bands] == ["USC 0.5%", "USC 2.0%", "USC 3.0%"]
    assert sum(line.amount for line in result.bands) == pytest.approx(30_000)
    assert result.total == pytest.approx(446.0)


def test_usc_top_band_applies_above_100k(constants: TaxConstants) -> None:
    result = calculate_usc(120_000, constants.usc)

    assert result.bands[-1].rate == pytest.approx(0.11)
    assert result.bands[-1].amount == pytest.approx(20_000)


def test_prsi_below_threshold_is_zero(constants: TaxConstants) -> None:
    result = calculate_prsi(4_999.99, constants.prsi)

    assert (result.assessable, result.calculated, result.payable) == (0, 0, 0)
    assert not result.minimum_applied


def test_prsi_minimum_applies_at_threshold(constants: TaxConstants) -> None:
    result = calculate_prsi(5_000, constants.prsi)

    assert result.calculated == 210
    assert result.payable == 500
    assert result.minimum_applied


def test_prsi_flat_rate_above_minimum(constants: TaxConstants) -> None:
    result = calculate_prsi(30_000, constants.prsi)

    assert result.payable == 1_260
    assert not result.minimum_applied


def test_capital_gains_above_exemption(constants: TaxConstants) -> None:
    result = calculate_capital_gains(TaxInput(capital_gains=11_270), constants.capital_gains)

    assert result.applicable
    assert result.exemption == 1_270
    assert result.payable == 3_300


def test_capital_losses_exceeding_gains_are_not_applicable(constants: TaxConstants) -> None:
    result = calculate_capital_gains(
        TaxInput(capital_gains=2_000, capital_losses=5_000), constants.capital_gains
    )

    assert not result.applicable
    assert result.exemption == 0
    assert result.payable == 0


def test_capital_gains_within_exemption_owe_nothing(constants: TaxConstants) -> None:
    result = calculate_capital_gains(TaxInput(capital_gains=1_000), constants.capital_gains)

    assert not result.applicable
    assert result.payable == 0


@pytest.mark.parametrize(
    ("kilometres", "expected"),
    [
        (0, 9_068.0),
        (24_000, 9_068.0),
        (24_001, 7_200.0),
        (32_000, 7_200.0),
        (40_000, 5_400.0),
        (48_000, 3_600.0),
        (60_000, 1_800.0),
    ],
)
def test_vehicle_benefit_in_kind_bands(
    constants: TaxConstants, kilometres: float, expected: float
) -> None:
    assert vehicle_benefit_in_kind(40_000, kilometres, constants) == expected


def test_vehicle_benefit_in_kind_without_value_is_zero(constants: TaxConstants) -> None:
    assert vehicle_benefit_in_kind(0, 10_000, constants) == 0


def test_credits_always_include_personal_and_earned_income(constants: TaxConstants) -> None:
    summary = calculate_credits(TaxInput(), constants)

    assert [line.label for line in summary.lines] == [
        "Single Person Credit",
        "Earned Income Credit",
    ]
    assert summary.total == 4_000


def test_credits_follow_display_order(constants: TaxConstants) -> None:
    payload = TaxInput(
        marital_status="married",
        has_paye_income=True,
        claim_home_carer=True,
        claim_single_parent=True,
        medical_expenses=1_000,
        rent_paid=1_500,
        remote_working_costs=1_000,
        tuition_fees=5_000,
    )

    summary = calculate_credits(payload, constants)

    assert [(line.label, line.amount) for line in summary.lines] == [
        ("Married / Civil Partner Credit", 4_000),
        ("Earned Income Credit", 2_000),
        ("PAYE Credit", 2_000),
        ("Home Carer Credit", 1_950),
        ("Single Parent Credit", 1_900),
        ("Medical Expenses (20%)", 200),
        ("Rent Tax Credit", 1_500),
        ("Remote Working Relief (30%)", 300),
        ("Tuition Fees (20%)", 400),
    ]
    assert summary.total == 14_250


def test_rent_credit_is_capped_for_single_person(constants: TaxConstants) -> None:
    summary = calculate_credits(TaxInput(rent_paid=1_500), constants)

    rent = next(line for line in summary.lines if line.label == "Rent Tax Credit")
    assert rent.amount == 1_000


def test_tuition_relief_uses_part_time_disregard_and_course_cap(
    constants: TaxConstants,
) -> None:
    part_time = calculate_credits(
        TaxInput(tuition_fees=2_000, tuition_part_time=True), constants
    )
    capped = calculate_credits(TaxInput(tuition_fees=10_000), constants)

    assert part_time.lines[-1].amount == 100
    assert capped.lines[-1].amount == 800


def test_tuition_fees_within_disregard_add_note(constants: TaxConstants) -> None:
    summary = calculate_credits(TaxInput(tuition_fees=2_000), constants)

    assert len(summary.lines) == 2
    assert summary.notes == (
        "Tuition fees of €2,000.00 do not exceed the disregard amount; "
        "no tuition relief is due.",
    )
