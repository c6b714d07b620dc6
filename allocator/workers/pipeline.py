from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AllocationWorker:
    """Runs state-changing operations one at a time.

    The JSON state store has a single writer; every read-modify-write
    sequence goes through this worker so concurrent requests cannot
    interleave.  Work runs in a thread so the event loop stays free.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def submit(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        async with self._lock:
            name = getattr(operation, "__name__", repr(operation))
            logger.debug("running %s", name)
            return await asyncio.to_thread(operation, *args, **kwargs)


_worker: AllocationWorker | None = None


def get_allocation_worker() -> AllocationWorker:
    global _worker
    if _worker is None:
        _worker = AllocationWorker()
    return _worker


def reset_allocation_worker() -> None:
    global _worker
    _worker = None
