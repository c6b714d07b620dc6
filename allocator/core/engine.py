"""Balanced allocation of client workloads to managers.

The engine is a greedy, multi-dimensional bin-packing pass over twelve monthly
periods.  Locked work items keep their manager and seed the running loads;
grouped items are placed as one indivisible unit before individual items, and
each unit goes to the feasible manager whose projected loads deviate least
from the per-month fair share.  When no manager can take a unit without
exceeding capacity the unit goes to the manager with the smallest worst-month
overage, and the overage is reported in the outcome.

The engine performs no I/O and never mutates its inputs; callers merge the
returned assignments into their own state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from allocator.core.months import MONTH_COUNT, MONTH_NAMES
from allocator.core.validation import ConfigurationError

logger = logging.getLogger(__name__)

Vector = tuple[float, ...]
LoadState = dict[str, list[float]]


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A single client's monthly demand as seen by the engine."""

    id: str
    demand: Vector
    group: str = ""
    locked: bool = False
    assigned_resource: str = ""

    @property
    def total_demand(self) -> float:
        return sum(self.demand)


@dataclass(frozen=True, slots=True)
class AllocationUnit:
    """One placement decision: a whole group, or a single ungrouped item."""

    key: str
    members: tuple[WorkItem, ...]
    demand: Vector
    is_group: bool = False

    @property
    def total_demand(self) -> float:
        return sum(item.total_demand for item in self.members)


@dataclass(frozen=True, slots=True)
class Selection:
    resource: str
    feasible: bool
    cost: float | None = None
    max_overage: float = 0.0


@dataclass(slots=True)
class CapacityOverage:
    """A unit that could only be placed by exceeding capacity."""

    unit: str
    item_ids: list[str]
    resource: str
    max_overage: float
    months: dict[str, float]


@dataclass(slots=True)
class AllocationOutcome:
    assignments: dict[str, str] = field(default_factory=dict)
    loads: dict[str, Vector] = field(default_factory=dict)
    targets: Vector = ()
    overages: list[CapacityOverage] = field(default_factory=list)


def aggregate_demand(items: Iterable[WorkItem]) -> Vector:
    totals = [0.0] * MONTH_COUNT
    for item in items:
        for index, hours in enumerate(item.demand):
            totals[index] += hours
    return tuple(totals)


def compute_targets(work_items: Sequence[WorkItem], resource_count: int) -> Vector:
    """Per-month fair share: total demand of every item divided by the manager count."""

    if resource_count < 1:
        raise ConfigurationError("at least one manager is required to compute targets")
    totals = aggregate_demand(work_items)
    return tuple(total / resource_count for total in totals)


def initialize_loads(resources: Sequence[str]) -> LoadState:
    return {name: [0.0] * MONTH_COUNT for name in resources}


def seed_from_locked(loads: LoadState, work_items: Sequence[WorkItem]) -> LoadState:
    for item in work_items:
        if not item.locked:
            continue
        if item.assigned_resource not in loads:
            raise ConfigurationError(
                f"work item {item.id!r} is locked to unknown manager {item.assigned_resource!r}"
            )
        commit_load(loads, item.assigned_resource, item.demand)
    return loads


def partition(work_items: Sequence[WorkItem]) -> tuple[dict[str, list[WorkItem]], list[WorkItem]]:
    """Split unlocked items into groups (by exact key) and individuals."""

    groups: dict[str, list[WorkItem]] = {}
    individuals: list[WorkItem] = []
    for item in work_items:
        if item.locked:
            continue
        if item.group:
            groups.setdefault(item.group, []).append(item)
        else:
            individuals.append(item)
    return groups, individuals


def order_groups(groups: Mapping[str, list[WorkItem]]) -> list[AllocationUnit]:
    units = [
        AllocationUnit(key=name, members=tuple(members), demand=aggregate_demand(members), is_group=True)
        for name, members in groups.items()
    ]
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(units, key=lambda unit: unit.total_demand, reverse=True)


def order_individuals(items: Sequence[WorkItem]) -> list[AllocationUnit]:
    units = [AllocationUnit(key=item.id, members=(item,), demand=item.demand) for item in items]
    return sorted(units, key=lambda unit: unit.total_demand, reverse=True)


def _fits(load: Sequence[float], demand: Vector, capacity: Vector) -> bool:
    return all(load[m] + demand[m] <= capacity[m] for m in range(MONTH_COUNT))


def _cost(load: Sequence[float], demand: Vector, targets: Vector) -> float:
    return sum((load[m] + demand[m] - targets[m]) ** 2 for m in range(MONTH_COUNT))


def _overages(load: Sequence[float], demand: Vector, capacity: Vector) -> list[float]:
    return [max(0.0, load[m] + demand[m] - capacity[m]) for m in range(MONTH_COUNT)]


def select_best_resource(
    demand: Vector,
    resources: Sequence[str],
    loads: LoadState,
    targets: Vector,
    capacities: Mapping[str, Vector],
) -> Selection:
    """Pick a manager for ``demand``.

    Feasible managers compete on squared deviation from target, then on
    current total load, then on name.  If none is feasible the manager with
    the smallest worst-month overage wins, first in ``resources`` order on
    ties.
    """

    if not resources:
        raise ConfigurationError("no managers to select from")

    best: str | None = None
    best_cost = float("inf")
    best_total = float("inf")
    for name in resources:
        load = loads[name]
        if not _fits(load, demand, capacities[name]):
            continue
        cost = _cost(load, demand, targets)
        total = sum(load)
        if (
            cost < best_cost
            or (cost == best_cost and total < best_total)
            or (cost == best_cost and total == best_total and (best is None or name < best))
        ):
            best, best_cost, best_total = name, cost, total

    if best is not None:
        return Selection(resource=best, feasible=True, cost=best_cost)

    fallback = resources[0]
    smallest = float("inf")
    for name in resources:
        worst = max(_overages(loads[name], demand, capacities[name]))
        if worst < smallest:
            fallback, smallest = name, worst
    return Selection(resource=fallback, feasible=False, max_overage=smallest)


def commit_load(loads: LoadState, resource: str, demand: Vector) -> None:
    accumulator = loads[resource]
    for index, hours in enumerate(demand):
        accumulator[index] += hours


def allocate(
    resources: Sequence[str],
    capacities: Mapping[str, Sequence[float]],
    work_items: Sequence[WorkItem],
) -> AllocationOutcome:
    """Assign every unlocked work item to a manager.

    ``resources`` gives the manager order used for iteration and the
    fallback tie-break; ``capacities`` maps each manager to its twelve
    monthly limits.
    """

    if not resources:
        raise ConfigurationError("No managers defined")
    missing = [name for name in resources if name not in capacities]
    if missing:
        raise ConfigurationError(f"capacity not defined for: {', '.join(missing)}")
    capacity_vectors = {name: tuple(float(v) for v in capacities[name]) for name in resources}

    targets = compute_targets(work_items, len(resources))
    loads = seed_from_locked(initialize_loads(resources), work_items)

    groups, individuals = partition(work_items)
    queue = order_groups(groups) + order_individuals(individuals)
    outcome = AllocationOutcome(targets=targets)

    for unit in queue:
        selection = select_best_resource(unit.demand, resources, loads, targets, capacity_vectors)
        if not selection.feasible:
            overages = _overages(loads[selection.resource], unit.demand, capacity_vectors[selection.resource])
            outcome.overages.append(
                CapacityOverage(
                    unit=unit.key,
                    item_ids=[item.id for item in unit.members],
                    resource=selection.resource,
                    max_overage=selection.max_overage,
                    months={MONTH_NAMES[m]: value for m, value in enumerate(overages) if value > 0},
                )
            )
            logger.warning(
                "no manager can take %s without exceeding capacity; placed on %s (max overage %.2f)",
                unit.key,
                selection.resource,
                selection.max_overage,
            )
        else:
            logger.debug("assigned %s to %s (cost %.2f)", unit.key, selection.resource, selection.cost)

        for item in unit.members:
            outcome.assignments[item.id] = selection.resource
        commit_load(loads, selection.resource, unit.demand)

    outcome.loads = {name: tuple(values) for name, values in loads.items()}
    logger.info(
        "allocated %d work items in %d units across %d managers (%d over capacity)",
        len(outcome.assignments),
        len(queue),
        len(resources),
        len(outcome.overages),
    )
    return outcome
