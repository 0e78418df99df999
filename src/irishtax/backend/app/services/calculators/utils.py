"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Band:
    """Ad-hoc progressive band built at calculation time."""

    lower_bound: float
    upper_bound: float | None
    rate: float
    label: str = ""


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 4)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def walk_bands(amount: float, bands: Sequence[Any]) -> list[tuple[Any, float]]:
    """Split ``amount`` across ascending progressive ``bands``.

    Each band must expose ``lower_bound`` and ``upper_bound`` (``None`` for
    the open-ended final band). Returns ``(band, portion)`` pairs for every
    band that receives a non-zero portion; the portions sum to ``amount``.
    """

    if amount <= 0:
        return []

    portions: list[tuple[Any, float]] = []
    remaining = amount

    for band in bands:
        if remaining <= 0:
            break

        upper = band.upper_bound
        if upper is None:
            width = remaining
        else:
            width = upper - band.lower_bound

        portion = min(remaining, width)
        if portion <= 0:
            continue

        portions.append((band, portion))
        remaining -= portion

    return portions


def select_band(value: float, bands: Sequence[Any]) -> Any:
    """Return the first band whose inclusive upper bound covers ``value``."""

    if not bands:
        raise ValueError("At least one band is required")

    for band in bands:
        upper = band.upper_bound
        if upper is None or value <= upper:
            return band

    return bands[-1]


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_half_up(value: float) -> float:
    """Round to a whole euro with halves always rounded up."""

    return float(math.floor(value + 0.5))


__all__ = [
    "Band",
    "format_percentage",
    "round_currency",
    "round_half_up",
    "select_band",
    "walk_bands",
]
