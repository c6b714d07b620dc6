from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from allocator.core.months import MONTH_COUNT, MONTH_NAMES


class ValidationError(ValueError):
    """Raised when inputs are malformed or a precondition is not met."""


class ConfigurationError(ValueError):
    """Raised when the manager set cannot support an allocation run."""


def validate_vector(values: Sequence[float], label: str) -> tuple[float, ...]:
    if len(values) != MONTH_COUNT:
        raise ValidationError(f"{label}: expected {MONTH_COUNT} monthly values, got {len(values)}")
    checked: list[float] = []
    for month, value in zip(MONTH_NAMES, values):
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{label}: {month} is not a number") from exc
        if not math.isfinite(number) or number < 0:
            raise ValidationError(f"{label}: {month} must be a non-negative number")
        checked.append(number)
    return tuple(checked)


def validate_capacity(mapping: Mapping[str, Any] | None, label: str) -> tuple[float, ...]:
    if not isinstance(mapping, Mapping):
        raise ConfigurationError(f"{label}: capacity is not defined")
    missing = [month for month in MONTH_NAMES if month not in mapping]
    if missing:
        raise ValidationError(f"{label}: capacity missing months {', '.join(missing)}")
    return validate_vector([mapping[month] for month in MONTH_NAMES], label)


def validate_allocation_inputs(
    managers: Sequence[str],
    capacities: Mapping[str, Mapping[str, Any]],
    clients: Iterable[Mapping[str, Any]],
) -> None:
    """Check the preconditions of an allocation run before the engine is invoked."""

    if not managers:
        raise ConfigurationError("No managers defined")
    clients = list(clients)
    if not clients:
        raise ValidationError("No clients to allocate")

    for name in managers:
        validate_capacity(capacities.get(name), f"manager {name!r}")

    live = set(managers)
    for client in clients:
        label = f"client {client.get('client') or client.get('id')!r}"
        months = client.get("months") or {}
        validate_vector([months.get(month, 0) for month in MONTH_NAMES], label)
        if client.get("locked"):
            manager = client.get("manager") or ""
            if manager not in live:
                raise ConfigurationError(f"{label} is locked to unknown manager {manager!r}")
