"""Application service layer for the allocation planner."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from allocator.core.engine import AllocationOutcome, WorkItem, allocate
from allocator.core.months import MONTH_NAMES, month_dict, to_vector
from allocator.core.schema import ClientRecord, ManagerLoad, PartnerPreference, PreferenceReport
from allocator.core.settings import load_settings
from allocator.core.storage import state_path
from allocator.core.summary import manager_loads
from allocator.core.validation import ValidationError, validate_allocation_inputs
from allocator.domain import PlannerState
from allocator.extractors.partner_preferences import apply_preferences
from allocator.infrastructure import JsonStateRepository, StateRepository

logger = logging.getLogger(__name__)


class NotFoundError(KeyError):
    """Raised when a manager or client does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "not found"


def _work_item(client: dict[str, Any]) -> WorkItem:
    return WorkItem(
        id=str(client["id"]),
        demand=to_vector(client.get("months")),
        group=client.get("group") or "",
        locked=bool(client.get("locked")),
        assigned_resource=client.get("manager") or "",
    )


def _check_hours(value: Any) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("hours must be a number") from exc
    if hours != hours or hours < 0:
        raise ValidationError("hours must be a non-negative number")
    return hours


class PlannerService:
    """Coordinates planner use cases over a state repository."""

    def __init__(self, repository: StateRepository, default_capacity: float = 100.0) -> None:
        self._repository = repository
        self._default_capacity = default_capacity

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------
    def get_state(self) -> PlannerState:
        return self._repository.load()

    def manager_summary(self) -> list[ManagerLoad]:
        return manager_loads(self._repository.load())

    # ------------------------------------------------------------------
    # clients
    # ------------------------------------------------------------------
    def replace_clients(self, records: Iterable[ClientRecord]) -> PlannerState:
        state = self._repository.load()
        state.clients = [record.model_dump() for record in records]
        self._repository.save(state)
        return state

    def update_client(self, client_id: str, manager: str | None, *, locked: bool | None = None) -> PlannerState:
        state = self._repository.load()
        client = state.find_client(client_id)
        if client is None:
            raise NotFoundError("Client not found")

        # None leaves the assignment alone; "" clears it
        if manager is None:
            manager = client.get("manager") or ""
        manager = manager.strip()
        if manager and manager not in state.managers:
            raise NotFoundError("Manager not found")
        next_locked = client.get("locked", False) if locked is None else locked
        if next_locked and not manager:
            raise ValidationError("A client must be assigned to a manager before it can be locked")

        client["manager"] = manager
        client["locked"] = bool(next_locked)
        self._repository.save(state)
        return state

    def apply_preferences(self, preferences: Iterable[PartnerPreference]) -> tuple[PlannerState, PreferenceReport]:
        state = self._repository.load()
        report = apply_preferences(state.clients, preferences, state.managers)
        self._repository.save(state)
        return state, report

    # ------------------------------------------------------------------
    # managers
    # ------------------------------------------------------------------
    def add_manager(self, name: str, capacity: dict[str, Any] | None = None) -> PlannerState:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Manager name required")
        state = self._repository.load()
        if name in state.managers:
            raise ValidationError("Manager already exists")

        if capacity:
            unknown = set(capacity) - set(MONTH_NAMES)
            if unknown:
                raise ValidationError(f"unknown months: {', '.join(sorted(unknown))}")
            limits = month_dict(self._default_capacity)
            limits.update({month: _check_hours(value) for month, value in capacity.items()})
        else:
            limits = month_dict(self._default_capacity)

        state.managers.append(name)
        state.manager_capacity[name] = limits
        self._repository.save(state)
        logger.info("added manager %s", name)
        return state

    def delete_manager(self, name: str) -> PlannerState:
        state = self._repository.load()
        if name not in state.managers:
            raise NotFoundError("Manager not found")
        state.managers = [manager for manager in state.managers if manager != name]
        state.manager_capacity.pop(name, None)

        released = 0
        for client in state.clients:
            if client.get("manager") == name:
                client["manager"] = ""
                client["locked"] = False
                released += 1
        self._repository.save(state)
        logger.info("deleted manager %s, unassigned %d clients", name, released)
        return state

    def update_capacity(
        self,
        name: str,
        *,
        month: str | None = None,
        hours: Any = None,
        all_months: Any = None,
    ) -> PlannerState:
        state = self._repository.load()
        if name not in state.managers:
            raise NotFoundError("Manager not found")
        limits = state.manager_capacity.setdefault(name, month_dict(self._default_capacity))

        if all_months is not None:
            value = _check_hours(all_months)
            for key in MONTH_NAMES:
                limits[key] = value
        elif month and hours is not None:
            if month not in MONTH_NAMES:
                raise ValidationError(f"unknown month: {month}")
            limits[month] = _check_hours(hours)
        else:
            raise ValidationError("Must provide either allMonths or month and hours")

        self._repository.save(state)
        return state

    # ------------------------------------------------------------------
    # allocation
    # ------------------------------------------------------------------
    def run_allocation(self) -> tuple[PlannerState, AllocationOutcome]:
        state = self._repository.load()
        validate_allocation_inputs(state.managers, state.manager_capacity, state.clients)

        capacities = {name: to_vector(state.manager_capacity[name]) for name in state.managers}
        outcome = allocate(state.managers, capacities, [_work_item(client) for client in state.clients])

        for client in state.clients:
            manager = outcome.assignments.get(str(client["id"]))
            if manager is not None:
                client["manager"] = manager
        self._repository.save(state)
        return state, outcome

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()


_service: PlannerService | None = None


def get_planner_service() -> PlannerService:
    """Return the process-wide planner service, backed by the JSON state file."""

    global _service
    if _service is None:
        settings = load_settings()
        _service = PlannerService(JsonStateRepository(state_path()), default_capacity=settings.default_capacity)
    return _service


def configure_planner_service(service: PlannerService | None) -> None:
    global _service
    _service = service


def reset_planner_state() -> None:
    """Clear persisted state and drop the singleton (used in tests)."""

    global _service
    if _service is not None:
        _service.reset()
    _service = None
