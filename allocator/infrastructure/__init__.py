"""Infrastructure layer exports."""

from .state_store import InMemoryStateRepository, JsonStateRepository, StateRepository

__all__ = [
    "InMemoryStateRepository",
    "JsonStateRepository",
    "StateRepository",
]
