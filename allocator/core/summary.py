"""Roll-ups of assigned hours per manager, month, and partner."""

from __future__ import annotations

from typing import Any, Iterable

from allocator.core.months import MONTH_NAMES, empty_months
from allocator.core.schema import ManagerLoad
from allocator.domain import PlannerState


def month_totals(clients: Iterable[dict[str, Any]]) -> dict[str, float]:
    totals = empty_months()
    for client in clients:
        months = client.get("months") or {}
        for month in MONTH_NAMES:
            totals[month] += float(months.get(month) or 0)
    return totals


def clients_for(clients: Iterable[dict[str, Any]], manager: str) -> list[dict[str, Any]]:
    return [client for client in clients if client.get("manager") == manager]


def partner_breakdown(clients: Iterable[dict[str, Any]]) -> dict[str, dict[str, float]]:
    """Month totals keyed by partner, in order of first appearance."""

    by_partner: dict[str, list[dict[str, Any]]] = {}
    for client in clients:
        by_partner.setdefault(client.get("partner") or "", []).append(client)
    return {partner: month_totals(rows) for partner, rows in by_partner.items()}


def manager_loads(state: PlannerState) -> list[ManagerLoad]:
    loads: list[ManagerLoad] = []
    for manager in state.managers:
        months = month_totals(clients_for(state.clients, manager))
        capacity = {month: float(value) for month, value in (state.manager_capacity.get(manager) or {}).items()}
        overage = {
            month: round(months[month] - capacity.get(month, 0.0), 2)
            for month in MONTH_NAMES
            if months[month] > capacity.get(month, 0.0)
        }
        loads.append(
            ManagerLoad(
                manager=manager,
                months=months,
                capacity=capacity,
                total=sum(months.values()),
                overage=overage,
            )
        )
    return loads
