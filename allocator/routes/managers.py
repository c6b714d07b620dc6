from __future__ import annotations

from fastapi import APIRouter, HTTPException

from allocator.application import get_planner_service
from allocator.routes.common import run_service, state_response

router = APIRouter(prefix="/managers", tags=["managers"])


@router.post("")
async def add_manager(payload: dict) -> dict:
    name = str(payload.get("name") or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Manager name required")
    capacity = payload.get("capacity")
    if capacity is not None and not isinstance(capacity, dict):
        raise HTTPException(status_code=400, detail="capacity must map month names to hours")
    service = get_planner_service()
    state = await run_service(service.add_manager, name, capacity)
    return state_response(state, "Manager added")


@router.delete("/{name}")
async def delete_manager(name: str) -> dict:
    service = get_planner_service()
    state = await run_service(service.delete_manager, name)
    return state_response(state, "Manager deleted")


@router.put("/{name}/capacity")
async def update_capacity(name: str, payload: dict) -> dict:
    all_months = payload.get("allMonths", payload.get("all_months"))
    service = get_planner_service()
    state = await run_service(
        service.update_capacity,
        name,
        month=payload.get("month"),
        hours=payload.get("hours"),
        all_months=all_months,
    )
    return state_response(state, "Capacity updated")
