"""Domain layer definitions."""

from .state import PlannerState

__all__ = [
    "PlannerState",
]
