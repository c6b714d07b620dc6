"""Application services."""

from .planner import (
    NotFoundError,
    PlannerService,
    configure_planner_service,
    get_planner_service,
    reset_planner_state,
)

__all__ = [
    "NotFoundError",
    "PlannerService",
    "configure_planner_service",
    "get_planner_service",
    "reset_planner_state",
]
