from __future__ import annotations

import math
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from allocator.core.months import MONTH_NAMES, empty_months


class ClientRecord(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    client: str
    group: str = ""
    partner: str = ""
    year_end: int = Field(default=1, ge=1, le=12)
    work_type: str = ""
    manager: str = ""
    locked: bool = False
    months: dict[str, float] = Field(default_factory=empty_months)
    total: float = 0.0

    @field_validator("months")
    @classmethod
    def _twelve_months(cls, value: dict[str, float]) -> dict[str, float]:
        unknown = set(value) - set(MONTH_NAMES)
        if unknown:
            raise ValueError(f"unknown month keys: {', '.join(sorted(unknown))}")
        months = {month: float(value.get(month) or 0) for month in MONTH_NAMES}
        if any(not math.isfinite(hours) or hours < 0 for hours in months.values()):
            raise ValueError("monthly hours must be finite and non-negative")
        return months

    @model_validator(mode="after")
    def _sync_total(self) -> "ClientRecord":
        self.total = sum(self.months.values())
        return self


class PartnerPreference(BaseModel):
    group: str = ""
    client: str = ""
    partner: str = ""
    proposed_manager: str


class PreferenceReport(BaseModel):
    matched: int = 0
    unmatched_clients: list[dict[str, str]] = Field(default_factory=list)
    unmatched_managers: list[dict[str, str]] = Field(default_factory=list)
    locked_clients: list[dict[str, str]] = Field(default_factory=list)


class ManagerLoad(BaseModel):
    manager: str
    months: dict[str, float]
    capacity: dict[str, float]
    total: float
    overage: dict[str, float] = Field(default_factory=dict)
