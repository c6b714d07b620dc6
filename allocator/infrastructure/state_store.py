"""Infrastructure layer for planner state persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from allocator.domain import PlannerState

logger = logging.getLogger(__name__)


class StateRepository(Protocol):
    """Persistence contract for planner state."""

    def load(self) -> PlannerState: ...

    def save(self, state: PlannerState) -> None: ...

    def reset(self) -> None: ...


class JsonStateRepository:
    """Stores the planner state as a single JSON document.

    Writes go to a sibling temporary file which then replaces the document,
    so readers never observe a partially written state.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PlannerState:
        try:
            with self._path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            return PlannerState()
        return PlannerState.from_dict(data)

    def save(self, state: PlannerState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as fp:
                json.dump(state.to_dict(), fp, ensure_ascii=False, indent=2)
            os.replace(temp_path, self._path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("saved state to %s", self._path)

    def reset(self) -> None:
        self._path.unlink(missing_ok=True)


class InMemoryStateRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._data: dict | None = None

    def load(self) -> PlannerState:
        return PlannerState.from_dict(self._data)

    def save(self, state: PlannerState) -> None:
        self._data = state.to_dict()

    def reset(self) -> None:
        self._data = None
