"""Tax credit resolution."""

from __future__ import annotations

from dataclasses import dataclass, field

from irishtax.backend.app.models import CreditLine, TaxInput
from irishtax.backend.config.year_config import TaxConstants

from .utils import format_percentage, round_currency


@dataclass(frozen=True)
class CreditSummary:
    """Applicable credits in display order with their total."""

    lines: tuple[CreditLine, ...]
    total: float
    notes: tuple[str, ...] = field(default_factory=tuple)


def _tuition_relief(payload: TaxInput, constants: TaxConstants) -> float:
    tuition = constants.reliefs.tuition
    qualifying = min(payload.tuition_fees, tuition.max_per_course)
    disregard = (
        tuition.part_time_disregard if payload.tuition_part_time else tuition.full_time_disregard
    )
    return round_currency(max(0.0, qualifying - disregard) * tuition.rate)


def calculate_credits(payload: TaxInput, constants: TaxConstants) -> CreditSummary:
    """Assemble every credit whose gating condition holds."""

    amounts = constants.credits
    reliefs = constants.reliefs
    lines: list[CreditLine] = []
    notes: list[str] = []

    if payload.is_married_or_partnered:
        lines.append(CreditLine(label="Married / Civil Partner Credit", amount=amounts.married))
    else:
        lines.append(CreditLine(label="Single Person Credit", amount=amounts.single))

    # Directors under self-assessment always qualify for the earned income credit.
    lines.append(CreditLine(label="Earned Income Credit", amount=amounts.earned_income))

    if payload.has_paye_income:
        lines.append(CreditLine(label="PAYE Credit", amount=amounts.paye))

    if payload.claim_home_carer:
        lines.append(CreditLine(label="Home Carer Credit", amount=amounts.home_carer))

    if payload.claim_single_parent:
        lines.append(CreditLine(label="Single Parent Credit", amount=amounts.single_parent))

    if payload.medical_expenses > 0:
        lines.append(
            CreditLine(
                label=f"Medical Expenses ({format_percentage(reliefs.medical_rate)})",
                amount=round_currency(payload.medical_expenses * reliefs.medical_rate),
            )
        )

    if payload.rent_paid > 0:
        cap = (
            reliefs.rent_credit.couple
            if payload.is_married_or_partnered
            else reliefs.rent_credit.single
        )
        lines.append(CreditLine(label="Rent Tax Credit", amount=min(payload.rent_paid, cap)))

    if payload.remote_working_costs > 0:
        lines.append(
            CreditLine(
                label=f"Remote Working Relief ({format_percentage(reliefs.remote_working_rate)})",
                amount=round_currency(
                    payload.remote_working_costs * reliefs.remote_working_rate
                ),
            )
        )

    if payload.tuition_fees > 0:
        tuition_relief = _tuition_relief(payload, constants)
        if tuition_relief > 0:
            lines.append(
                CreditLine(
                    label=f"Tuition Fees ({format_percentage(reliefs.tuition.rate)})",
                    amount=tuition_relief,
                )
            )
        else:
            notes.append(
                f"Tuition fees of €{payload.tuition_fees:,.2f} do not exceed the "
                "disregard amount; no tuition relief is due."
            )

    total = round_currency(sum(line.amount for line in lines))
    return CreditSummary(lines=tuple(lines), total=total, notes=tuple(notes))


__all__ = ["CreditSummary", "calculate_credits"]
