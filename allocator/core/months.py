from __future__ import annotations

from typing import Iterable, Mapping

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTH_COUNT = len(MONTH_NAMES)


def empty_months() -> dict[str, float]:
    return month_dict(0.0)


def month_dict(value: float) -> dict[str, float]:
    return {month: float(value) for month in MONTH_NAMES}


def to_vector(mapping: Mapping[str, float] | None) -> tuple[float, ...]:
    """Order a month-keyed mapping into a January..December vector."""

    mapping = mapping or {}
    return tuple(float(mapping.get(month) or 0) for month in MONTH_NAMES)


def from_vector(vector: Iterable[float]) -> dict[str, float]:
    values = list(vector)
    if len(values) != MONTH_COUNT:
        raise ValueError(f"expected {MONTH_COUNT} monthly values, got {len(values)}")
    return {month: float(value) for month, value in zip(MONTH_NAMES, values)}


def month_after(year_end: int) -> str:
    """Return the month following a fiscal year end given as 1..12."""

    return MONTH_NAMES[year_end % MONTH_COUNT]
