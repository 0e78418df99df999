"""Utilities for validating year constants and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Sequence

from .year_config import (
    CreditAmounts,
    IncomeTaxConfig,
    PensionConfig,
    PrsiConfig,
    TaxConstants,
    UscConfig,
    VehicleBikConfig,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate(scope: str, label: str, value: float) -> list[str]:
    if value < 0 or value > 1:
        return [_format_scope(scope, f"{label} {value} must be between 0 and 1")]
    return []


def _validate_open_ended(scope: str, upper_bounds: Sequence[float | None]) -> list[str]:
    errors: list[str] = []

    if not upper_bounds:
        errors.append(_format_scope(scope, "no bands defined"))
        return errors

    closed = list(upper_bounds[:-1])
    if any(bound is None for bound in closed):
        errors.append(_format_scope(scope, "only the final band may be open-ended"))
    elif closed != sorted(closed) or len(set(closed)) != len(closed):
        errors.append(_format_scope(scope, "bands must be strictly ascending"))

    if upper_bounds[-1] is not None:
        errors.append(_format_scope(scope, "final band must have an open upper bound"))

    return errors


def _validate_income_tax(config: IncomeTaxConfig) -> list[str]:
    errors: list[str] = []
    errors.extend(_validate_rate("income_tax", "standard rate", config.standard_rate))
    errors.extend(_validate_rate("income_tax", "higher rate", config.higher_rate))

    if config.higher_rate < config.standard_rate:
        errors.append(
            _format_scope("income_tax", "higher rate cannot be below the standard rate")
        )

    cutoffs = config.rate_cutoffs
    expected_two_incomes = cutoffs.married_one_income + cutoffs.second_earner_max
    if cutoffs.married_two_incomes != expected_two_incomes:
        errors.append(
            _format_scope(
                "income_tax.rate_cutoffs",
                (
                    "married two-income cutoff "
                    f"{cutoffs.married_two_incomes} should equal the one-income cutoff "
                    f"plus second earner maximum ({expected_two_incomes})"
                ),
            )
        )
    if cutoffs.married_one_income < cutoffs.single:
        errors.append(
            _format_scope(
                "income_tax.rate_cutoffs",
                "married one-income cutoff cannot be below the single cutoff",
            )
        )

    return errors


def _validate_usc(config: UscConfig) -> list[str]:
    errors = _validate_open_ended("usc.bands", [band.upper_bound for band in config.bands])

    expected_lower = 0.0
    for index, band in enumerate(config.bands):
        errors.extend(_validate_rate(f"usc.bands[{index}]", "rate", band.rate))
        if band.lower_bound != expected_lower:
            errors.append(
                _format_scope(
                    f"usc.bands[{index}]",
                    f"lower bound {band.lower_bound} leaves a gap (expected {expected_lower})",
                )
            )
        if band.upper_bound is not None:
            expected_lower = band.upper_bound

    if config.exemption_threshold < 0:
        errors.append(_format_scope("usc", "exemption threshold must be non-negative"))

    return errors


def _validate_prsi(config: PrsiConfig) -> list[str]:
    errors = _validate_rate("prsi", "rate", config.rate)

    if config.minimum < 0:
        errors.append(_format_scope("prsi", "minimum contribution must be non-negative"))
    if config.threshold < 0:
        errors.append(_format_scope("prsi", "threshold must be non-negative"))

    return errors


def _validate_credits(credits: CreditAmounts) -> list[str]:
    errors: list[str] = []
    for name, amount in credits.model_dump().items():
        if amount <= 0:
            errors.append(_format_scope("credits", f"'{name}' amount must be positive"))
    if credits.married < credits.single:
        errors.append(
            _format_scope("credits", "married credit cannot be below the single credit")
        )
    return errors


def _validate_monotonic(scope: str, rates: Iterable[float], *, increasing: bool) -> list[str]:
    ordered = list(rates)
    expected = sorted(ordered) if increasing else sorted(ordered, reverse=True)
    if ordered != expected:
        direction = "non-decreasing" if increasing else "non-increasing"
        return [_format_scope(scope, f"rates should be {direction}")]
    return []


def _validate_pension(config: PensionConfig) -> list[str]:
    errors = _validate_open_ended(
        "pension.age_limits", [limit.upper_bound for limit in config.age_limits]
    )
    for index, limit in enumerate(config.age_limits):
        errors.extend(_validate_rate(f"pension.age_limits[{index}]", "rate", limit.rate))
    errors.extend(
        _validate_monotonic(
            "pension.age_limits",
            (limit.rate for limit in config.age_limits),
            increasing=True,
        )
    )
    return errors


def _validate_vehicle_bik(config: VehicleBikConfig) -> list[str]:
    errors = _validate_open_ended(
        "vehicle_bik.bands", [band.upper_bound for band in config.bands]
    )
    for index, band in enumerate(config.bands):
        errors.extend(_validate_rate(f"vehicle_bik.bands[{index}]", "rate", band.rate))
    errors.extend(
        _validate_monotonic(
            "vehicle_bik.bands",
            (band.rate for band in config.bands),
            increasing=False,
        )
    )
    return errors


def validate_year_configuration(config: TaxConstants) -> list[str]:
    """Return a list of validation issues for the provided constants."""

    errors: list[str] = []

    errors.extend(_validate_income_tax(config.income_tax))
    errors.extend(_validate_usc(config.usc))
    errors.extend(_validate_prsi(config.prsi))
    errors.extend(_validate_credits(config.credits))
    errors.extend(_validate_pension(config.pension))
    errors.extend(_validate_vehicle_bik(config.vehicle_bik))

    reliefs = config.reliefs
    errors.extend(_validate_rate("reliefs", "medical rate", reliefs.medical_rate))
    errors.extend(
        _validate_rate("reliefs", "remote working rate", reliefs.remote_working_rate)
    )
    errors.extend(_validate_rate("reliefs.tuition", "rate", reliefs.tuition.rate))
    if reliefs.rent_credit.couple < reliefs.rent_credit.single:
        errors.append(
            _format_scope("reliefs.rent_credit", "couple cap cannot be below the single cap")
        )

    errors.extend(_validate_rate("capital_gains", "rate", config.capital_gains.rate))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
