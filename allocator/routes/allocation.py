from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from allocator.application import get_planner_service
from allocator.core.settings import load_settings
from allocator.core.storage import output_path
from allocator.exporters.master_list import export_master_list
from allocator.routes.common import run_service, state_response

router = APIRouter(tags=["allocation"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/allocate")
async def run_allocation() -> dict:
    service = get_planner_service()
    state, outcome = await run_service(service.run_allocation)
    return state_response(
        state,
        "Allocation complete",
        assigned=len(outcome.assignments),
        overages=[asdict(overage) for overage in outcome.overages],
    )


@router.get("/export")
async def export_allocation() -> FileResponse:
    service = get_planner_service()
    state = await run_service(service.get_state)
    if not state.clients:
        raise HTTPException(status_code=400, detail="No clients to export")

    filename = load_settings().export_filename
    path = await run_service(export_master_list, output_path(filename), state)
    return FileResponse(path, filename=filename, media_type=XLSX_MEDIA_TYPE)
