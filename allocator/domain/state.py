"""Domain entities for the allocation planner."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class PlannerState:
    """The whole persisted dataset: managers, their capacities, and clients."""

    managers: list[str] = field(default_factory=list)
    manager_capacity: dict[str, dict[str, float]] = field(default_factory=dict)
    clients: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "managers": list(self.managers),
            "manager_capacity": copy.deepcopy(self.manager_capacity),
            "clients": copy.deepcopy(self.clients),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PlannerState":
        data = data or {}
        return cls(
            managers=list(data.get("managers") or []),
            manager_capacity=copy.deepcopy(data.get("manager_capacity") or {}),
            clients=copy.deepcopy(data.get("clients") or []),
        )

    def find_client(self, client_id: str) -> dict[str, Any] | None:
        for client in self.clients:
            if client.get("id") == client_id:
                return client
        return None
