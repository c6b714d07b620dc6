from __future__ import annotations

from fastapi import APIRouter

from allocator.application import get_planner_service
from allocator.routes.common import run_service, state_response

router = APIRouter(tags=["state"])


@router.get("/state")
async def get_state() -> dict:
    service = get_planner_service()
    state = await run_service(service.get_state)
    return state_response(state)


@router.get("/summary")
async def get_summary() -> dict:
    """Assigned hours against capacity for every manager."""
    service = get_planner_service()
    loads = await run_service(service.manager_summary)
    return {"success": True, "items": [load.model_dump() for load in loads]}
