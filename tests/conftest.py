from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from allocator.core.months import MONTH_NAMES


def vec(**hours: float) -> tuple[float, ...]:
    """Build a January..December vector from month-name keyword arguments."""
    return tuple(float(hours.get(month, 0)) for month in MONTH_NAMES)


def months(**hours: float) -> dict[str, float]:
    return {month: float(hours.get(month, 0)) for month in MONTH_NAMES}
